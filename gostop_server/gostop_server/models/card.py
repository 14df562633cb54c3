"""Card, CardSet and the fixed Hwatu deck catalog."""

import random
from enum import Enum
from typing import Iterable, Iterator

from pydantic import BaseModel

DECK_SIZE = 48
CARDS_PER_MONTH = 4
RAIN_MONTH = 12  # The December Bright scores less in a three-Bright set


class Category(str, Enum):
    """Card category."""

    BRIGHT = "bright"  # 광
    ANIMAL = "animal"  # 열끗
    RIBBON = "ribbon"  # 띠
    JUNK = "junk"  # 피
    DOUBLE_JUNK = "double_junk"  # 쌍피


class RibbonSet(str, Enum):
    """Color-coded ribbon bonus sets."""

    RED = "red"  # 홍단
    BLUE = "blue"  # 청단
    GRASS = "grass"  # 초단


B, A, R, J, D = (
    Category.BRIGHT,
    Category.ANIMAL,
    Category.RIBBON,
    Category.JUNK,
    Category.DOUBLE_JUNK,
)

# Month -> categories of its four cards, in id order
MONTH_TABLE: dict[int, tuple[Category, Category, Category, Category]] = {
    1: (B, R, J, J),
    2: (A, R, J, J),
    3: (B, R, J, J),
    4: (A, R, J, J),
    5: (A, R, J, J),
    6: (A, R, J, J),
    7: (A, R, J, J),
    8: (B, A, J, J),
    9: (A, R, J, J),
    10: (A, R, J, J),
    11: (B, D, J, J),
    12: (B, A, R, D),
}
del B, A, R, J, D

RIBBON_SET_MONTHS: dict[RibbonSet, tuple[int, ...]] = {
    RibbonSet.RED: (1, 2, 3),
    RibbonSet.BLUE: (6, 9, 10),
    RibbonSet.GRASS: (4, 5, 7),
}

# Godori (고도리): the bush warbler, cuckoo and geese animals
BIRD_MONTHS: tuple[int, ...] = (2, 4, 8)

MONTH_NAMES = {
    1: "Pine",
    2: "Plum",
    3: "Cherry",
    4: "Wisteria",
    5: "Iris",
    6: "Peony",
    7: "Bush clover",
    8: "Pampas",
    9: "Chrysanthemum",
    10: "Maple",
    11: "Paulownia",
    12: "Rain",
}


class Card(BaseModel, frozen=True):
    """Single Hwatu card."""

    id: int
    month: int
    category: Category
    ribbon_set: RibbonSet | None = None
    is_bird: bool = False

    @property
    def is_bright(self) -> bool:
        return self.category == Category.BRIGHT

    @property
    def is_rain_bright(self) -> bool:
        """Check if this is the month-12 Bright."""
        return self.is_bright and self.month == RAIN_MONTH

    @property
    def junk_units(self) -> int:
        """Junk units this card contributes (0 for non-junk)."""
        if self.category == Category.DOUBLE_JUNK:
            return 2
        if self.category == Category.JUNK:
            return 1
        return 0

    def __str__(self) -> str:
        return f"{MONTH_NAMES[self.month]}({self.month})-{self.category.value}"

    def __repr__(self) -> str:
        return f"Card(id={self.id}, {self})"


class CardSet:
    """Collection of unique cards keyed by id, kept in insertion order.

    Used for hands, the floor and captured piles.
    """

    def __init__(self, cards: Iterable[Card] | None = None):
        """Initialize card set.

        Args:
            cards: Initial cards.
        """
        self._cards: dict[int, Card] = {}
        for card in cards or ():
            self._cards[card.id] = card

    def add(self, card: Card) -> None:
        """Add a card to the set."""
        self._cards[card.id] = card

    def extend(self, cards: Iterable[Card]) -> None:
        """Add several cards in order."""
        for card in cards:
            self._cards[card.id] = card

    def remove(self, card: Card) -> None:
        """Remove a card from the set."""
        self._cards.pop(card.id, None)

    def get(self, card_id: int) -> Card | None:
        """Get a card by id if present."""
        return self._cards.get(card_id)

    def contains(self, card: Card) -> bool:
        """Check if card is in the set."""
        return card.id in self._cards

    def clear(self) -> None:
        """Remove all cards."""
        self._cards.clear()

    def count(self) -> int:
        """Get number of cards."""
        return len(self._cards)

    def is_empty(self) -> bool:
        """Check if set is empty."""
        return len(self._cards) == 0

    def cards_by_month(self, month: int) -> list[Card]:
        """Get all cards of the specified month, in id order."""
        return sorted(
            (c for c in self._cards.values() if c.month == month),
            key=lambda c: c.id,
        )

    def cards_by_category(self, category: Category) -> list[Card]:
        """Get all cards of the specified category."""
        return [c for c in self._cards.values() if c.category == category]

    def ids(self) -> list[int]:
        """Get card ids in insertion order."""
        return list(self._cards)

    def to_list(self) -> list[Card]:
        """Get cards as a list sorted by id."""
        return sorted(self._cards.values(), key=lambda c: c.id)

    def copy(self) -> "CardSet":
        """Create a copy of this card set."""
        return CardSet(self._cards.values())

    def __iter__(self) -> Iterator[Card]:
        return iter(list(self._cards.values()))

    def __len__(self) -> int:
        return len(self._cards)

    def __contains__(self, card: Card) -> bool:
        return card.id in self._cards

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CardSet):
            return NotImplemented
        return set(self._cards) == set(other._cards)

    def __str__(self) -> str:
        if not self._cards:
            return "[]"
        return "[" + ", ".join(str(c) for c in self.to_list()) + "]"

    def __repr__(self) -> str:
        return f"CardSet({self.ids()!r})"


def _build_card(month: int, index: int) -> Card:
    category = MONTH_TABLE[month][index - 1]
    ribbon_set = None
    if category == Category.RIBBON:
        for name, months in RIBBON_SET_MONTHS.items():
            if month in months:
                ribbon_set = name
    return Card(
        id=(month - 1) * CARDS_PER_MONTH + index,
        month=month,
        category=category,
        ribbon_set=ribbon_set,
        is_bird=category == Category.ANIMAL and month in BIRD_MONTHS,
    )


def generate_deck() -> list[Card]:
    """Create the full 48-card catalog in id order."""
    return [
        _build_card(month, index)
        for month in range(1, 13)
        for index in range(1, CARDS_PER_MONTH + 1)
    ]


CATALOG: dict[int, Card] = {card.id: card for card in generate_deck()}


def get_card(card_id: int) -> Card:
    """Look up a catalog card by id.

    Raises:
        KeyError: If the id is not 1..48.
    """
    return CATALOG[card_id]


def shuffle_deck(deck: list[Card], rng: random.Random | None = None) -> list[Card]:
    """Return a Fisher-Yates permutation of the deck.

    Args:
        deck: Cards to shuffle. Left untouched.
        rng: Random source (a fresh unseeded one if not provided).

    Returns:
        New shuffled list.
    """
    rng = rng or random.Random()
    cards = list(deck)
    for i in range(len(cards) - 1, 0, -1):
        j = rng.randint(0, i)
        cards[i], cards[j] = cards[j], cards[i]
    return cards
