"""Game session model."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from .card import Card, CardSet
from .player import Player

MAX_PLAYERS = 2


class GameStatus(str, Enum):
    """Session lifecycle status."""

    WAITING = "waiting"
    PLAYING = "playing"
    FINISHED = "finished"


class EndReason(str, Enum):
    """Why a round finished."""

    HAND_EMPTY = "hand_empty"
    STOP = "stop"


class GameSession(BaseModel):
    """Authoritative state of one two-player session."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    session_id: str
    host_id: str
    status: GameStatus = GameStatus.WAITING
    version: int = 0
    round_number: int = 0

    players: list[Player] = Field(default_factory=list)  # Join order, host first
    floor: CardSet = Field(default_factory=CardSet)
    draw_pile: list[Card] = Field(default_factory=list)

    turn_owner_id: str | None = None
    awaiting_go_id: str | None = None  # Player whose last play opened a Go window
    winner_id: str | None = None
    end_reason: EndReason | None = None

    def get_player(self, player_id: str) -> Player | None:
        """Get a registered player by id."""
        for player in self.players:
            if player.player_id == player_id:
                return player
        return None

    def opponent_of(self, player_id: str) -> Player | None:
        """Get the other registered player."""
        for player in self.players:
            if player.player_id != player_id:
                return player
        return None

    def is_full(self) -> bool:
        return len(self.players) >= MAX_PLAYERS

    def card_count(self) -> int:
        """Count every card in play (hands, floor, draw pile, captured)."""
        total = len(self.floor) + len(self.draw_pile)
        for player in self.players:
            total += len(player.hand) + len(player.captured)
        return total

    def __str__(self) -> str:
        parts = [f"Session {self.session_id} v{self.version}", f"[{self.status.value}]"]
        if self.status == GameStatus.PLAYING:
            parts.append(f"round {self.round_number}, {self.turn_owner_id}'s turn")
        elif self.status == GameStatus.FINISHED:
            parts.append(f"winner: {self.winner_id or 'draw'}")
        return " ".join(parts)
