"""Game models."""

from .card import Card, CardSet, Category, RibbonSet, generate_deck, get_card, shuffle_deck
from .document import SessionDocument, from_document, to_document
from .game_state import EndReason, GameSession, GameStatus
from .player import Player

__all__ = [
    "Card",
    "CardSet",
    "Category",
    "RibbonSet",
    "generate_deck",
    "get_card",
    "shuffle_deck",
    "Player",
    "GameSession",
    "GameStatus",
    "EndReason",
    "SessionDocument",
    "from_document",
    "to_document",
]
