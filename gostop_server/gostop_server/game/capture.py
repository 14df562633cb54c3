"""Capture resolution for one played card plus one draw-pile flip."""

from dataclasses import dataclass, field
from enum import Enum

from gostop_server.models.card import Card, CardSet


class CaptureSource(str, Enum):
    """Which step of the turn produced a capture."""

    PLAYED = "played"
    DRAWN = "drawn"


@dataclass
class CaptureEvent:
    """One capture: the acting card plus every same-month floor card."""

    source: CaptureSource
    card: Card
    matched: list[Card]

    @property
    def cards(self) -> list[Card]:
        return [self.card, *self.matched]


@dataclass
class CaptureResult:
    """Outcome of resolving a turn against the floor.

    ``floor`` and ``draw_pile`` are the new values after both steps; the
    inputs handed to the resolver are left untouched.
    """

    played: Card
    drawn: Card | None
    floor: CardSet
    draw_pile: list[Card]
    events: list[CaptureEvent] = field(default_factory=list)

    @property
    def captured(self) -> list[Card]:
        """All captured cards, in event order."""
        return [card for event in self.events for card in event.cards]

    @property
    def has_capture(self) -> bool:
        return bool(self.events)


class CaptureResolver:
    """Resolves played and drawn cards against the floor by month."""

    def match(self, card: Card, floor: CardSet) -> list[Card]:
        """Get every floor card sharing the card's month."""
        return floor.cards_by_month(card.month)

    def resolve(
        self,
        played: Card,
        floor: CardSet,
        draw_pile: list[Card],
    ) -> CaptureResult:
        """Resolve a played card, then flip the front of the draw pile.

        The played step fully updates the floor before the drawn card is
        matched, so a drawn card can capture the played card when it stayed
        on the floor.

        Args:
            played: Card taken from the actor's hand
            floor: Current floor
            draw_pile: Current draw pile, front first

        Returns:
            CaptureResult with new floor, new draw pile and capture events
        """
        new_floor = floor.copy()
        new_pile = list(draw_pile)
        result = CaptureResult(
            played=played,
            drawn=None,
            floor=new_floor,
            draw_pile=new_pile,
        )

        self._apply(played, CaptureSource.PLAYED, result)

        if new_pile:
            drawn = new_pile.pop(0)
            result.drawn = drawn
            self._apply(drawn, CaptureSource.DRAWN, result)

        return result

    def _apply(self, card: Card, source: CaptureSource, result: CaptureResult) -> None:
        matched = self.match(card, result.floor)
        if not matched:
            result.floor.add(card)
            return

        for floor_card in matched:
            result.floor.remove(floor_card)
        result.events.append(CaptureEvent(source=source, card=card, matched=matched))
