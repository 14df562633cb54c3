"""Game logger for detailed game replay."""

import json
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, Any, TextIO

from pydantic import BaseModel

from gostop_server.models.game_state import GameSession

from .formatters import format_card, format_cards, format_hands

if TYPE_CHECKING:
    from gostop_server.game.engine import TurnOutcome


class GameLogConfig(BaseModel):
    """Configuration for game logging."""

    enabled: bool = False
    output_path: str = "game_log.jsonl"


class GameLogger:
    """Logger for detailed game events in JSONL format.

    Each line in the output file is a JSON object representing one event.
    Events are written only after the corresponding change was committed,
    so a replay never contains a move that lost a version race.
    """

    def __init__(self, config: GameLogConfig | None = None):
        """Initialize game logger.

        Args:
            config: Logging configuration. If None, logging is disabled.
        """
        self.config = config or GameLogConfig()
        self._file: TextIO | None = None

    def __enter__(self) -> "GameLogger":
        """Context manager entry."""
        if self.config.enabled and self.config.output_path:
            path = Path(self.config.output_path)
            path.parent.mkdir(parents=True, exist_ok=True)
            self._file = open(path, "a", encoding="utf-8")
        return self

    def __exit__(self, *args: Any) -> None:
        """Context manager exit."""
        self.close()

    def close(self) -> None:
        """Close the log file."""
        if self._file:
            self._file.close()
            self._file = None

    def _write(self, event: dict[str, Any]) -> None:
        """Write an event to the log file.

        Args:
            event: Event dictionary to write as JSON.
        """
        if self._file:
            self._file.write(json.dumps(event, ensure_ascii=False) + "\n")
            self._file.flush()

    def log_session_start(self, session: GameSession) -> None:
        """Log session start with player information."""
        self._write({
            "type": "session_start",
            "timestamp": datetime.now().isoformat(),
            "session": session.session_id,
            "players": [
                {"id": p.player_id, "name": p.name}
                for p in session.players
            ],
        })

    def log_game_start(self, session: GameSession) -> None:
        """Log a freshly dealt round with initial hands and floor."""
        self._write({
            "type": "game_start",
            "session": session.session_id,
            "round": session.round_number,
            "version": session.version,
            "hands": format_hands(session.players),
            "floor": format_cards(session.floor),
            "first_player": session.turn_owner_id,
        })

    def log_turn(self, session: GameSession, outcome: "TurnOutcome") -> None:
        """Log a single accepted play.

        Args:
            session: Session after the play was committed.
            outcome: What the play did.
        """
        capture = outcome.capture
        self._write({
            "type": "turn",
            "session": session.session_id,
            "round": session.round_number,
            "version": session.version,
            "player": outcome.actor_id,
            "played": format_card(capture.played),
            "drawn": format_card(capture.drawn) if capture.drawn else None,
            "captures": [
                {"source": e.source.value, "cards": format_cards(e.cards)}
                for e in capture.events
            ],
            "floor": format_cards(session.floor),
            "draw_pile": len(session.draw_pile),
            "scores": {p.player_id: p.score for p in session.players},
        })

    def log_go(self, session: GameSession, player_id: str, go_count: int) -> None:
        """Log a Go declaration."""
        self._write({
            "type": "go",
            "session": session.session_id,
            "round": session.round_number,
            "version": session.version,
            "player": player_id,
            "go_count": go_count,
        })

    def log_stop(self, session: GameSession, player_id: str) -> None:
        """Log a Stop declaration."""
        self._write({
            "type": "stop",
            "session": session.session_id,
            "round": session.round_number,
            "version": session.version,
            "player": player_id,
        })

    def log_game_end(self, session: GameSession) -> None:
        """Log round end with settled scores."""
        self._write({
            "type": "game_end",
            "session": session.session_id,
            "round": session.round_number,
            "version": session.version,
            "reason": session.end_reason.value if session.end_reason else None,
            "winner": session.winner_id,
            "final_scores": {p.player_id: p.final_score for p in session.players},
            "go_counts": {p.player_id: p.go_count for p in session.players},
        })

    def log_session_end(
        self,
        total_games: int,
        final_points: dict[str, int],
        ranking: list[str],
    ) -> None:
        """Log session end with final results.

        Args:
            total_games: Total number of rounds played.
            final_points: Dict mapping player_id to total points.
            ranking: Player IDs in ranking order (best first).
        """
        self._write({
            "type": "session_end",
            "total_games": total_games,
            "final_points": final_points,
            "ranking": ranking,
        })
