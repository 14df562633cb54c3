"""Formatters for game log output."""

from collections.abc import Iterable

from gostop_server.models.card import Card, Category
from gostop_server.models.player import Player

# Category codes for log output
CATEGORY_CODES: dict[Category, str] = {
    Category.BRIGHT: "B",
    Category.ANIMAL: "A",
    Category.RIBBON: "R",
    Category.JUNK: "J",
    Category.DOUBLE_JUNK: "D",
}


def format_card(card: Card) -> str:
    """Format a single card to string.

    Args:
        card: Card to format.

    Returns:
        Month and category code (e.g., "03B" for the March Bright).
    """
    return f"{card.month:02d}{CATEGORY_CODES[card.category]}"


def format_cards(cards: Iterable[Card]) -> str:
    """Format cards to a comma-separated string.

    Args:
        cards: Cards to format.

    Returns:
        Comma-separated card strings sorted by id (e.g., "01B,01R,03J").
        Empty string if no cards.
    """
    return ",".join(format_card(c) for c in sorted(cards, key=lambda c: c.id))


def format_hands(players: list[Player]) -> dict[str, str]:
    """Format all players' hands to dict.

    Args:
        players: Players in seat order.

    Returns:
        Dict mapping player_id to formatted hand string.
    """
    return {p.player_id: format_cards(p.hand) for p in players}
