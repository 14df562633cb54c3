"""Turn state machine for two-player Go-Stop."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass

from gostop_server.config import Config
from gostop_server.errors import InvalidTransition, SessionFull
from gostop_server.models.card import generate_deck, shuffle_deck
from gostop_server.models.game_state import EndReason, GameSession, GameStatus
from gostop_server.models.player import Player

from .capture import CaptureResolver, CaptureResult
from .dealer import deal
from .go import final_score
from .scoring import ScoreCalculator
from .validator import MoveValidator

logger = logging.getLogger(__name__)


@dataclass
class TurnOutcome:
    """What one accepted play did to the session."""

    actor_id: str
    capture: CaptureResult
    score: int
    finished: bool
    go_decision_open: bool


class GameEngine:
    """Applies player actions to a session.

    Every public method validates first and only then mutates, so a rejected
    action leaves the session untouched. Methods mutate the session they are
    given; callers that need the previous state keep their own copy (the
    concurrency gate always hands in a freshly loaded one).
    """

    def __init__(
        self,
        config: Config | None = None,
        rng: random.Random | None = None,
    ):
        """Initialize game engine.

        With ``game.seed`` configured and no ``rng`` given, every round is
        shuffled from ``(seed, session_id, round)``, so a deal re-run after a
        version conflict comes out identical.

        Args:
            config: Configuration (uses defaults if not provided)
            rng: Random source for shuffling (overrides the configured seed)
        """
        self.config = config or Config()
        self.rules = self.config.rules
        self.seed = self.config.game.seed if rng is None else None
        self.rng = rng or random.Random()

        self.resolver = CaptureResolver()
        self.calculator = ScoreCalculator()
        self.validator = MoveValidator(self.rules.go_threshold)

    def join(self, session: GameSession, player_id: str, name: str = "Player") -> Player:
        """Register a player in a waiting session.

        Joining twice with the same id returns the existing player.

        Raises:
            InvalidTransition: If the session is not waiting for players
            SessionFull: If two players are already registered
        """
        existing = session.get_player(player_id)
        if existing is not None:
            return existing

        if session.status != GameStatus.WAITING:
            raise InvalidTransition("join", session.status.value)
        if session.is_full():
            raise SessionFull(f"Session {session.session_id} already has two players")

        player = Player(player_id=player_id, name=name)
        session.players.append(player)
        logger.info(f"Player {player_id} ({name}) joined session {session.session_id}")
        return player

    def start_game(self, session: GameSession, host_id: str) -> None:
        """Start the first round (WAITING -> PLAYING)."""
        self.validator.validate_start(session, host_id).raise_for_error()
        self._start_round(session)

    def rematch(self, session: GameSession, host_id: str) -> None:
        """Start another round after a finished one (FINISHED -> PLAYING)."""
        self.validator.validate_rematch(session, host_id).raise_for_error()
        self._start_round(session)

    def play_card(self, session: GameSession, actor_id: str, card_id: int) -> TurnOutcome:
        """Play a card from the actor's hand and flip one from the draw pile.

        Raises:
            GameNotActive: If the session is not playing
            NotYourTurn: If the actor does not own the turn
            GoDecisionPending: If the opponent still has to declare Go or Stop
            CardNotInHand: If the actor does not hold the card
        """
        self.validator.validate_play(session, actor_id, card_id).raise_for_error()

        player = session.get_player(actor_id)
        opponent = session.opponent_of(actor_id)
        card = player.hand.get(card_id)

        player.hand.remove(card)
        capture = self.resolver.resolve(card, session.floor, session.draw_pile)
        session.floor = capture.floor
        session.draw_pile = capture.draw_pile
        player.captured.extend(capture.captured)
        player.score = self.calculator.score(player.captured)

        session.turn_owner_id = opponent.player_id
        session.awaiting_go_id = actor_id if capture.has_capture else None

        logger.debug(
            f"Player {actor_id} played {card}, drew {capture.drawn}, "
            f"captured {len(capture.captured)} cards, score {player.score}"
        )

        finished = any(p.hand.is_empty() for p in session.players)
        if finished:
            self._finish(session, EndReason.HAND_EMPTY)

        return TurnOutcome(
            actor_id=actor_id,
            capture=capture,
            score=player.score,
            finished=finished,
            go_decision_open=session.awaiting_go_id == actor_id,
        )

    def declare_go(self, session: GameSession, actor_id: str) -> int:
        """Declare Go after a capture. Does not change the turn owner.

        Returns:
            The actor's new Go count

        Raises:
            NotAwaitingGoDecision: If the actor's last play opened no Go window
            ScoreBelowThreshold: If the actor's base score is too low
        """
        self.validator.validate_go_decision(session, actor_id).raise_for_error()

        player = session.get_player(actor_id)
        player.go_count += 1
        session.awaiting_go_id = None
        logger.info(f"Player {actor_id} declared Go #{player.go_count} at {player.score} points")
        return player.go_count

    def declare_stop(self, session: GameSession, actor_id: str) -> None:
        """Declare Stop after a capture, ending the round in the actor's favor.

        Raises:
            NotAwaitingGoDecision: If the actor's last play opened no Go window
            ScoreBelowThreshold: If the actor's base score is too low
        """
        self.validator.validate_go_decision(session, actor_id).raise_for_error()

        logger.info(f"Player {actor_id} declared Stop")
        self._finish(session, EndReason.STOP, winner_id=actor_id)

    def _start_round(self, session: GameSession) -> None:
        """Shuffle, deal and reset per-round state."""
        dealt = deal(shuffle_deck(generate_deck(), self._round_rng(session)))

        first, second = session.players
        for player in session.players:
            player.reset_round_state()
        first.hand.extend(dealt.hand1)
        second.hand.extend(dealt.hand2)

        session.floor.clear()
        session.floor.extend(dealt.floor)
        session.draw_pile = dealt.draw_pile
        session.status = GameStatus.PLAYING
        session.round_number += 1
        session.turn_owner_id = session.host_id
        session.awaiting_go_id = None
        session.winner_id = None
        session.end_reason = None

        logger.info(
            f"Session {session.session_id} round {session.round_number} started, "
            f"first player: {session.turn_owner_id}"
        )

    def _round_rng(self, session: GameSession) -> random.Random:
        """Get the shuffle source for the round about to be dealt."""
        if self.seed is None:
            return self.rng
        return random.Random(f"{self.seed}:{session.session_id}:{session.round_number + 1}")

    def _finish(
        self,
        session: GameSession,
        reason: EndReason,
        winner_id: str | None = None,
    ) -> None:
        """Finish the round and settle final scores."""
        for player in session.players:
            player.final_score = final_score(player.score, player.go_count)

        if winner_id is None:
            winner_id = self._highest_scorer(session)

        session.status = GameStatus.FINISHED
        session.end_reason = reason
        session.winner_id = winner_id
        session.awaiting_go_id = None

        scores = ", ".join(f"{p.player_id}={p.final_score}" for p in session.players)
        logger.info(
            f"Session {session.session_id} round {session.round_number} finished "
            f"({reason.value}): {scores}, winner: {winner_id or 'draw'}"
        )

    def _highest_scorer(self, session: GameSession) -> str | None:
        """Get the player with the strictly highest final score (None on a tie)."""
        ranked = sorted(session.players, key=lambda p: p.final_score, reverse=True)
        if len(ranked) > 1 and ranked[0].final_score == ranked[1].final_score:
            return None
        return ranked[0].player_id
