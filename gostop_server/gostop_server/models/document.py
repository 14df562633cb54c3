"""Persisted session document and conversion to and from the domain model.

The document is what collaborators see in the shared store: plain card ids,
camelCase keys, and a ``version`` used as the optimistic-concurrency token.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .card import CardSet, get_card
from .game_state import EndReason, GameSession, GameStatus
from .player import Player


class PlayerDocument(BaseModel):
    """Per-player entry of the persisted document."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    name: str = "Player"
    hand: list[int] = Field(default_factory=list)
    captured: list[int] = Field(default_factory=list)
    score: int = 0
    go_count: int = 0
    final_score: int = 0


class SessionDocument(BaseModel):
    """Persisted session schema."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    session_id: str
    status: GameStatus = GameStatus.WAITING
    host_id: str
    turn_owner_id: str | None = None
    players: dict[str, PlayerDocument] = Field(default_factory=dict)
    player_order: list[str] = Field(default_factory=list)
    floor: list[int] = Field(default_factory=list)
    draw_pile: list[int] = Field(default_factory=list)
    version: int = 0
    round_number: int = Field(default=0, alias="round")
    winner_id: str | None = None
    awaiting_go_id: str | None = None
    end_reason: EndReason | None = None

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)

    @classmethod
    def from_json(cls, raw: str) -> "SessionDocument":
        return cls.model_validate_json(raw)


def _cards(ids: list[int]) -> CardSet:
    return CardSet(get_card(card_id) for card_id in ids)


def to_document(session: GameSession) -> SessionDocument:
    """Convert a session to its persisted document."""
    return SessionDocument(
        session_id=session.session_id,
        status=session.status,
        host_id=session.host_id,
        turn_owner_id=session.turn_owner_id,
        players={
            p.player_id: PlayerDocument(
                name=p.name,
                hand=p.hand.ids(),
                captured=p.captured.ids(),
                score=p.score,
                go_count=p.go_count,
                final_score=p.final_score,
            )
            for p in session.players
        },
        player_order=[p.player_id for p in session.players],
        floor=session.floor.ids(),
        draw_pile=[c.id for c in session.draw_pile],
        version=session.version,
        round_number=session.round_number,
        winner_id=session.winner_id,
        awaiting_go_id=session.awaiting_go_id,
        end_reason=session.end_reason,
    )


def from_document(document: SessionDocument) -> GameSession:
    """Rebuild a session from its persisted document."""
    order = document.player_order or list(document.players)
    players = []
    for player_id in order:
        entry = document.players[player_id]
        players.append(
            Player(
                player_id=player_id,
                name=entry.name,
                hand=_cards(entry.hand),
                captured=_cards(entry.captured),
                score=entry.score,
                go_count=entry.go_count,
                final_score=entry.final_score,
            )
        )

    return GameSession(
        session_id=document.session_id,
        host_id=document.host_id,
        status=document.status,
        version=document.version,
        round_number=document.round_number,
        players=players,
        floor=_cards(document.floor),
        draw_pile=[get_card(card_id) for card_id in document.draw_pile],
        turn_owner_id=document.turn_owner_id,
        awaiting_go_id=document.awaiting_go_id,
        winner_id=document.winner_id,
        end_reason=document.end_reason,
    )
