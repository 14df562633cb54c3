"""Exception hierarchy for rejected game operations.

Every error carries a stable ``code`` so collaborators (lobby, renderer) can
branch on it without matching message text. Rejections are raised before any
state is touched, so catching one never leaves a half-applied move behind.
"""

from __future__ import annotations


class GameError(Exception):
    """Base exception for all game-rule and session errors."""

    code = "GAME_ERROR"
    retryable = False


class IllegalMove(GameError):
    """Raised when a play violates a legality precondition."""

    code = "ILLEGAL_MOVE"


class NotYourTurn(IllegalMove):
    """Raised when the actor is not the current turn owner."""

    code = "NOT_YOUR_TURN"

    def __init__(self, actor_id: str, turn_owner_id: str | None):
        self.actor_id = actor_id
        self.turn_owner_id = turn_owner_id
        super().__init__(f"Player {actor_id} acted during {turn_owner_id}'s turn")


class GameNotActive(IllegalMove):
    """Raised when a play arrives while the game is not being played."""

    code = "GAME_NOT_ACTIVE"

    def __init__(self, status: str):
        self.status = status
        super().__init__(f"Game is not active (status: {status})")


class CardNotInHand(IllegalMove):
    """Raised when the played card is not held by the actor."""

    code = "CARD_NOT_IN_HAND"

    def __init__(self, actor_id: str, card_id: int):
        self.actor_id = actor_id
        self.card_id = card_id
        super().__init__(f"Player {actor_id} does not hold card {card_id}")


class GoDecisionPending(IllegalMove):
    """Raised when a card is played before the opponent settled Go or Stop."""

    code = "GO_DECISION_PENDING"

    def __init__(self, actor_id: str, decider_id: str):
        self.actor_id = actor_id
        self.decider_id = decider_id
        super().__init__(f"Player {actor_id} must wait for {decider_id} to declare Go or Stop")


class InsufficientPlayers(GameError):
    """Raised when a game is started without exactly two players."""

    code = "INSUFFICIENT_PLAYERS"

    def __init__(self, count: int):
        self.count = count
        super().__init__(f"Need exactly 2 players to start, have {count}")


class InsufficientCards(GameError):
    """Raised when a deck handed to the dealer is not a full deck."""

    code = "INSUFFICIENT_CARDS"

    def __init__(self, count: int, expected: int):
        self.count = count
        self.expected = expected
        super().__init__(f"Deck has {count} cards, expected {expected}")


class ScoreBelowThreshold(GameError):
    """Raised when Go or Stop is declared below the score threshold."""

    code = "SCORE_BELOW_THRESHOLD"

    def __init__(self, score: int, threshold: int):
        self.score = score
        self.threshold = threshold
        super().__init__(f"Score {score} is below the threshold {threshold}")


class NotAwaitingGoDecision(GameError):
    """Raised when Go or Stop is declared outside the decision window."""

    code = "NOT_AWAITING_GO_DECISION"

    def __init__(self, actor_id: str):
        self.actor_id = actor_id
        super().__init__(f"Player {actor_id} has no pending Go decision")


class NotHost(GameError):
    """Raised when a host-only operation is issued by another player."""

    code = "NOT_HOST"

    def __init__(self, actor_id: str):
        self.actor_id = actor_id
        super().__init__(f"Player {actor_id} is not the host")


class InvalidTransition(GameError):
    """Raised when an operation does not apply to the current status."""

    code = "INVALID_TRANSITION"

    def __init__(self, operation: str, status: str):
        self.operation = operation
        self.status = status
        super().__init__(f"Cannot {operation} while status is {status}")


class SessionFull(GameError):
    """Raised when a third player tries to join."""

    code = "SESSION_FULL"


class SessionNotFound(GameError):
    """Raised when a session id is unknown to the store."""

    code = "SESSION_NOT_FOUND"

    def __init__(self, session_id: str):
        self.session_id = session_id
        super().__init__(f"Session {session_id} not found")


class SessionExists(GameError):
    """Raised when creating a session under an id already in use."""

    code = "SESSION_EXISTS"

    def __init__(self, session_id: str):
        self.session_id = session_id
        super().__init__(f"Session {session_id} already exists")


class TransactionConflict(GameError):
    """Raised when optimistic retries are exhausted. Safe to retry later."""

    code = "TRANSACTION_CONFLICT"
    retryable = True

    def __init__(self, session_id: str, attempts: int):
        self.session_id = session_id
        self.attempts = attempts
        super().__init__(
            f"Session {session_id} changed concurrently; gave up after {attempts} attempts"
        )
