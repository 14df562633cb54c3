"""Legality checks run before any session mutation."""

from dataclasses import dataclass

from gostop_server.errors import (
    CardNotInHand,
    GameError,
    GameNotActive,
    GoDecisionPending,
    InsufficientPlayers,
    InvalidTransition,
    NotAwaitingGoDecision,
    NotHost,
    NotYourTurn,
    ScoreBelowThreshold,
)
from gostop_server.models.game_state import MAX_PLAYERS, GameSession, GameStatus

from .go import DEFAULT_GO_THRESHOLD, can_declare_go


@dataclass
class ValidationResult:
    """Result of move validation."""

    is_valid: bool
    error: GameError | None = None

    @property
    def error_message(self) -> str:
        return str(self.error) if self.error else ""

    def raise_for_error(self) -> None:
        """Raise the carried error if validation failed."""
        if self.error is not None:
            raise self.error


VALID = ValidationResult(is_valid=True)


def _reject(error: GameError) -> ValidationResult:
    return ValidationResult(is_valid=False, error=error)


class MoveValidator:
    """Validates player actions against a session snapshot."""

    def __init__(self, go_threshold: int = DEFAULT_GO_THRESHOLD):
        """Initialize validator.

        Args:
            go_threshold: Minimum base score for Go or Stop
        """
        self.go_threshold = go_threshold

    def validate_play(
        self,
        session: GameSession,
        actor_id: str,
        card_id: int,
    ) -> ValidationResult:
        """Validate playing a card from the actor's hand.

        Checks, in order: the game is being played, the actor owns the turn,
        no Go or Stop decision at or above the threshold is pending, the actor
        holds the card. A window opened below the threshold closes on the next
        play.
        """
        if session.status != GameStatus.PLAYING:
            return _reject(GameNotActive(session.status.value))

        if actor_id != session.turn_owner_id:
            return _reject(NotYourTurn(actor_id, session.turn_owner_id))

        decider = session.get_player(session.awaiting_go_id) if session.awaiting_go_id else None
        if decider is not None and can_declare_go(decider.score, self.go_threshold):
            return _reject(GoDecisionPending(actor_id, decider.player_id))

        player = session.get_player(actor_id)
        if player is None or player.hand.get(card_id) is None:
            return _reject(CardNotInHand(actor_id, card_id))

        return VALID

    def validate_go_decision(
        self,
        session: GameSession,
        actor_id: str,
    ) -> ValidationResult:
        """Validate a Go or Stop declaration."""
        if session.status != GameStatus.PLAYING or session.awaiting_go_id != actor_id:
            return _reject(NotAwaitingGoDecision(actor_id))

        player = session.get_player(actor_id)
        if player is None:
            return _reject(NotAwaitingGoDecision(actor_id))

        if not can_declare_go(player.score, self.go_threshold):
            return _reject(ScoreBelowThreshold(player.score, self.go_threshold))

        return VALID

    def validate_start(self, session: GameSession, host_id: str) -> ValidationResult:
        """Validate starting the first round."""
        if host_id != session.host_id:
            return _reject(NotHost(host_id))

        if session.status != GameStatus.WAITING:
            return _reject(InvalidTransition("start", session.status.value))

        if len(session.players) != MAX_PLAYERS:
            return _reject(InsufficientPlayers(len(session.players)))

        return VALID

    def validate_rematch(self, session: GameSession, host_id: str) -> ValidationResult:
        """Validate starting another round after a finished one."""
        if host_id != session.host_id:
            return _reject(NotHost(host_id))

        if session.status != GameStatus.FINISHED:
            return _reject(InvalidTransition("rematch", session.status.value))

        if len(session.players) != MAX_PLAYERS:
            return _reject(InsufficientPlayers(len(session.players)))

        return VALID
