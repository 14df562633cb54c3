"""Score calculation for a captured pile.

Scores are always recomputed from the whole captured pile, so the result
does not depend on the order in which cards were captured.

Rules:
- Bright: 3 cards = 3 (2 if the rain Bright is among them), 4 = 4, 5 = 15
- Ribbon: each complete red/blue/grass set = +3; 5 or more = +1 per card beyond 4
- Animal: the three birds (godori) = +5; 5 or more = +1 per card beyond 4
- Junk: double junk counts as 2 units; 10 or more units = +1 per unit beyond 9
"""

from collections.abc import Iterable
from dataclasses import dataclass, field

from gostop_server.models.card import Card, Category, RibbonSet

BRIGHT_POINTS = {3: 3, 4: 4, 5: 15}
RAIN_THREE_BRIGHT_POINTS = 2
RIBBON_SET_POINTS = 3
GODORI_POINTS = 5
GODORI_SIZE = 3
RIBBON_SET_SIZE = 3

# Counting bonuses start after this many cards (or junk units)
RIBBON_COUNT_BASE = 4
ANIMAL_COUNT_BASE = 4
JUNK_UNIT_BASE = 9


@dataclass
class ScoreItem:
    """One scoring line, e.g. ("godori", 5)."""

    name: str
    points: int


@dataclass
class ScoreBreakdown:
    """Total score with the rules that contributed to it."""

    items: list[ScoreItem] = field(default_factory=list)

    @property
    def total(self) -> int:
        return sum(item.points for item in self.items)

    def add(self, name: str, points: int) -> None:
        if points > 0:
            self.items.append(ScoreItem(name=name, points=points))

    def names(self) -> list[str]:
        return [item.name for item in self.items]


class ScoreCalculator:
    """Computes a player's base score from their captured cards."""

    def calculate(self, captured: Iterable[Card]) -> ScoreBreakdown:
        """Score a captured pile, keeping the per-rule breakdown."""
        brights: list[Card] = []
        ribbons: list[Card] = []
        animals: list[Card] = []
        junk_units = 0

        for card in captured:
            if card.category == Category.BRIGHT:
                brights.append(card)
            elif card.category == Category.RIBBON:
                ribbons.append(card)
            elif card.category == Category.ANIMAL:
                animals.append(card)
            else:
                junk_units += card.junk_units

        breakdown = ScoreBreakdown()
        self._score_brights(brights, breakdown)
        self._score_ribbons(ribbons, breakdown)
        self._score_animals(animals, breakdown)
        breakdown.add("junk", max(0, junk_units - JUNK_UNIT_BASE))
        return breakdown

    def score(self, captured: Iterable[Card]) -> int:
        """Score a captured pile."""
        return self.calculate(captured).total

    def _score_brights(self, brights: list[Card], breakdown: ScoreBreakdown) -> None:
        count = len(brights)
        if count == 3 and any(c.is_rain_bright for c in brights):
            breakdown.add("rain_three_brights", RAIN_THREE_BRIGHT_POINTS)
        elif count == 3:
            breakdown.add("three_brights", BRIGHT_POINTS[3])
        elif count == 4:
            breakdown.add("four_brights", BRIGHT_POINTS[4])
        elif count == 5:
            breakdown.add("five_brights", BRIGHT_POINTS[5])

    def _score_ribbons(self, ribbons: list[Card], breakdown: ScoreBreakdown) -> None:
        for ribbon_set in RibbonSet:
            members = {c.month for c in ribbons if c.ribbon_set == ribbon_set}
            if len(members) == RIBBON_SET_SIZE:
                breakdown.add(f"{ribbon_set.value}_ribbons", RIBBON_SET_POINTS)
        breakdown.add("ribbons", max(0, len(ribbons) - RIBBON_COUNT_BASE))

    def _score_animals(self, animals: list[Card], breakdown: ScoreBreakdown) -> None:
        birds = {c.month for c in animals if c.is_bird}
        if len(birds) == GODORI_SIZE:
            breakdown.add("godori", GODORI_POINTS)
        breakdown.add("animals", max(0, len(animals) - ANIMAL_COUNT_BASE))


_calculator = ScoreCalculator()


def score(captured: Iterable[Card]) -> int:
    """Score a captured pile with the default calculator."""
    return _calculator.score(captured)
