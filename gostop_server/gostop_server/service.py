"""External operations on Go-Stop sessions.

Every mutating operation runs through the concurrency gate, so each player
action is applied exactly once to the latest committed session. Game log
entries and callbacks fire only after the change has been committed.
"""

import logging
from typing import Callable

from gostop_server.config import Config
from gostop_server.game.engine import GameEngine, TurnOutcome
from gostop_server.logging import GameLogger
from gostop_server.models.game_state import GameSession
from gostop_server.store import ConcurrencyGate, InMemorySessionStore, SessionStore
from gostop_server.strategy import Advisor

logger = logging.getLogger(__name__)


class GameService:
    """Facade wiring store, engine, game logger and advisor together."""

    def __init__(
        self,
        config: Config | None = None,
        store: SessionStore | None = None,
        engine: GameEngine | None = None,
        game_logger: GameLogger | None = None,
        advisor: Advisor | None = None,
    ):
        """Initialize service.

        Args:
            config: Configuration (uses defaults if not provided)
            store: Document store (in-memory if not provided)
            engine: Rules engine (built from config if not provided)
            game_logger: JSONL game logger (disabled if not provided)
            advisor: Move advisor (SimpleStrategy-backed if not provided)
        """
        self.config = config or Config()
        self.store = store or InMemorySessionStore()
        self.gate = ConcurrencyGate(self.store, self.config.concurrency.max_retries)
        self.engine = engine or GameEngine(self.config)
        self.game_logger = game_logger or GameLogger()
        self.advisor = advisor or Advisor(config=self.config.advisor)

        self._on_game_start: Callable[[GameSession], None] | None = None
        self._on_turn: Callable[[GameSession, TurnOutcome], None] | None = None
        self._on_go: Callable[[GameSession, str, int], None] | None = None
        self._on_stop: Callable[[GameSession, str], None] | None = None
        self._on_game_end: Callable[[GameSession], None] | None = None

    def set_callbacks(
        self,
        on_game_start: Callable[[GameSession], None] | None = None,
        on_turn: Callable[[GameSession, TurnOutcome], None] | None = None,
        on_go: Callable[[GameSession, str, int], None] | None = None,
        on_stop: Callable[[GameSession, str], None] | None = None,
        on_game_end: Callable[[GameSession], None] | None = None,
    ) -> None:
        """Set event callbacks.

        Args:
            on_game_start: Called after a round was dealt
            on_turn: Called after a play (session, outcome)
            on_go: Called after a Go declaration (session, player_id, go_count)
            on_stop: Called after a Stop declaration (session, player_id)
            on_game_end: Called after a round finished
        """
        self._on_game_start = on_game_start
        self._on_turn = on_turn
        self._on_go = on_go
        self._on_stop = on_stop
        self._on_game_end = on_game_end

    def create_session(
        self,
        session_id: str,
        host_id: str,
        host_name: str = "Host",
    ) -> GameSession:
        """Create a waiting session with the host already joined.

        Raises:
            SessionExists: If the session id is taken
        """
        session = GameSession(session_id=session_id, host_id=host_id)
        self.engine.join(session, host_id, host_name)
        self.gate.create(session)
        logger.info(f"Session {session_id} created by {host_id}")
        return session

    def join_session(self, session_id: str, player_id: str, name: str = "Player") -> GameSession:
        """Join a waiting session as the second player.

        Rejoining with a registered id returns the current session without
        writing a new version.

        Raises:
            SessionNotFound: If the session does not exist
            InvalidTransition: If the session already started
            SessionFull: If two players are already registered
        """
        snapshot = self.observe(session_id)
        # Players are never removed, so a registered id stays registered
        if snapshot.get_player(player_id) is not None:
            return snapshot

        session, _ = self.gate.transact(
            session_id,
            lambda s: self.engine.join(s, player_id, name),
        )
        return session

    def start_game(self, session_id: str, host_id: str) -> GameSession:
        """Deal the first round.

        Raises:
            NotHost: If the actor is not the host
            InvalidTransition: If the session is not waiting
            InsufficientPlayers: If fewer than two players joined
        """
        session, _ = self.gate.transact(
            session_id,
            lambda s: self.engine.start_game(s, host_id),
        )
        self.game_logger.log_session_start(session)
        self._round_started(session)
        return session

    def play_card(self, session_id: str, actor_id: str, card_id: int) -> GameSession:
        """Play a card for the current turn owner.

        Raises:
            GameNotActive: If no round is in progress
            NotYourTurn: If the actor does not own the turn
            GoDecisionPending: If the opponent still has to declare Go or Stop
            CardNotInHand: If the actor does not hold the card
        """
        session, outcome = self.gate.transact(
            session_id,
            lambda s: self.engine.play_card(s, actor_id, card_id),
        )

        self.game_logger.log_turn(session, outcome)
        if self._on_turn:
            self._on_turn(session, outcome)
        if outcome.finished:
            self._round_finished(session)
        return session

    def declare_go(self, session_id: str, actor_id: str) -> GameSession:
        """Keep playing after a capture, raising the final multiplier.

        Raises:
            NotAwaitingGoDecision: If the actor has no open decision
            ScoreBelowThreshold: If the actor's score is below the threshold
        """
        session, go_count = self.gate.transact(
            session_id,
            lambda s: self.engine.declare_go(s, actor_id),
        )

        self.game_logger.log_go(session, actor_id, go_count)
        if self._on_go:
            self._on_go(session, actor_id, go_count)
        return session

    def declare_stop(self, session_id: str, actor_id: str) -> GameSession:
        """End the round in the actor's favor.

        Raises:
            NotAwaitingGoDecision: If the actor has no open decision
            ScoreBelowThreshold: If the actor's score is below the threshold
        """
        session, _ = self.gate.transact(
            session_id,
            lambda s: self.engine.declare_stop(s, actor_id),
        )

        self.game_logger.log_stop(session, actor_id)
        if self._on_stop:
            self._on_stop(session, actor_id)
        self._round_finished(session)
        return session

    def rematch(self, session_id: str, host_id: str) -> GameSession:
        """Deal a new round with the same players.

        Raises:
            NotHost: If the actor is not the host
            InvalidTransition: If the current round has not finished
        """
        session, _ = self.gate.transact(
            session_id,
            lambda s: self.engine.rematch(s, host_id),
        )
        self._round_started(session)
        return session

    def observe(self, session_id: str) -> GameSession:
        """Get a detached snapshot of the latest committed session.

        Raises:
            SessionNotFound: If the session does not exist
        """
        return self.gate.load(session_id)

    def advise(self, session_id: str, player_id: str) -> str:
        """Get a move hint for a player. Never raises for backend failures."""
        return self.advisor.advise(self.observe(session_id), player_id)

    def _round_started(self, session: GameSession) -> None:
        self.game_logger.log_game_start(session)
        if self._on_game_start:
            self._on_game_start(session)

    def _round_finished(self, session: GameSession) -> None:
        self.game_logger.log_game_end(session)
        if self._on_game_end:
            self._on_game_end(session)
