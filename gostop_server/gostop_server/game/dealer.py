"""Deal coordinator: splits a shuffled deck into hands, floor and draw pile."""

import logging
from dataclasses import dataclass

from gostop_server.errors import InsufficientCards
from gostop_server.models.card import DECK_SIZE, Card

logger = logging.getLogger(__name__)

HAND_SIZE = 10
FLOOR_SIZE = 8
DRAW_PILE_SIZE = DECK_SIZE - 2 * HAND_SIZE - FLOOR_SIZE  # 20


@dataclass
class Deal:
    """Result of dealing one round."""

    hand1: list[Card]
    hand2: list[Card]
    floor: list[Card]
    draw_pile: list[Card]


def deal(shuffled_deck: list[Card]) -> Deal:
    """Partition a shuffled deck.

    Cards are taken from the front in order: first hand, second hand, floor,
    and the remaining 20 cards form the draw pile (front is drawn first).

    Args:
        shuffled_deck: Full 48-card deck, already shuffled.

    Returns:
        Deal with 10/10/8/20 cards.

    Raises:
        InsufficientCards: If the deck does not hold exactly 48 cards.
    """
    if len(shuffled_deck) != DECK_SIZE:
        raise InsufficientCards(len(shuffled_deck), DECK_SIZE)

    cards = list(shuffled_deck)
    floor_start = 2 * HAND_SIZE
    draw_start = floor_start + FLOOR_SIZE

    result = Deal(
        hand1=cards[:HAND_SIZE],
        hand2=cards[HAND_SIZE:floor_start],
        floor=cards[floor_start:draw_start],
        draw_pile=cards[draw_start:],
    )
    logger.debug(
        f"Dealt {len(result.hand1)}/{len(result.hand2)} hands, "
        f"{len(result.floor)} floor, {len(result.draw_pile)} draw pile"
    )
    return result
