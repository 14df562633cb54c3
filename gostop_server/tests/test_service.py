"""Tests for the game service facade."""

import json

import pytest

from gostop_server.config import Config, GameConfig
from gostop_server.errors import (
    GoDecisionPending,
    IllegalMove,
    InsufficientPlayers,
    NotYourTurn,
    SessionExists,
    SessionNotFound,
)
from gostop_server.models.card import CardSet, get_card
from gostop_server.models.game_state import GameSession, GameStatus
from gostop_server.models.player import Player
from gostop_server.service import GameService
from gostop_server.store import InMemorySessionStore


@pytest.fixture
def service():
    return GameService(Config(game=GameConfig(seed=3)))


@pytest.fixture
def started(service):
    service.create_session("s1", "p1", "Alice")
    service.join_session("s1", "p2", "Bob")
    service.start_game("s1", "p1")
    return service


def first_card(session, player_id):
    return session.get_player(player_id).hand.to_list()[0].id


def play_turn(service, session):
    """Settle a pending Go decision with Go, then play the turn owner's lowest card."""
    decider = session.get_player(session.awaiting_go_id) if session.awaiting_go_id else None
    if decider is not None and decider.score >= service.config.rules.go_threshold:
        session = service.declare_go("s1", decider.player_id)
    actor = session.turn_owner_id
    return service.play_card("s1", actor, first_card(session, actor))


class ContestedStore(InMemorySessionStore):
    """Store where another writer commits right before the first swap."""

    def __init__(self):
        super().__init__()
        self.contested = False

    def compare_and_swap(self, session_id, expected_version, data):
        if not self.contested and expected_version > 0:
            self.contested = True
            current = self.get(session_id)
            super().compare_and_swap(session_id, current.version, current.data)
        return super().compare_and_swap(session_id, expected_version, data)


class TestSessionLifecycle:
    """Tests for creating, joining and starting sessions."""

    def test_create_session(self, service):
        """Test a new session is waiting with the host joined."""
        session = service.create_session("s1", "p1", "Alice")

        assert session.status == GameStatus.WAITING
        assert session.version == 0
        assert [p.player_id for p in service.observe("s1").players] == ["p1"]

    def test_create_duplicate(self, service):
        """Test session ids are unique."""
        service.create_session("s1", "p1")
        with pytest.raises(SessionExists):
            service.create_session("s1", "p9")

    def test_join_bumps_version(self, service):
        """Test joining is a committed mutation."""
        service.create_session("s1", "p1", "Alice")
        session = service.join_session("s1", "p2", "Bob")

        assert session.version == 1
        assert session.get_player("p2").name == "Bob"

    def test_start_without_guest(self, service):
        """Test start is rejected with one player and nothing is written."""
        service.create_session("s1", "p1", "Alice")

        with pytest.raises(InsufficientPlayers):
            service.start_game("s1", "p1")
        assert service.observe("s1").version == 0

    def test_start_game(self, started):
        """Test start deals a round."""
        session = started.observe("s1")

        assert session.status == GameStatus.PLAYING
        assert session.version == 2
        assert session.card_count() == 48

    def test_rejoin_writes_nothing(self, started):
        """Test a registered player rejoining leaves the version alone."""
        before = started.observe("s1")

        session = started.join_session("s1", "p2", "Bob")

        assert session.version == before.version
        assert started.observe("s1").version == before.version
        assert session.status == GameStatus.PLAYING

    def test_deal_survives_version_conflict(self):
        """Test a start retried after a lost race deals the same cards."""
        config = Config(game=GameConfig(seed=3))
        contested = GameService(config, store=ContestedStore())
        calm = GameService(config)
        for service in (contested, calm):
            service.create_session("s1", "p1", "Alice")
            service.join_session("s1", "p2", "Bob")
            service.start_game("s1", "p1")

        assert contested.store.contested
        first, second = contested.observe("s1"), calm.observe("s1")
        assert first.version == second.version + 1
        for a, b in zip(first.players, second.players):
            assert a.hand.ids() == b.hand.ids()
        assert first.floor.ids() == second.floor.ids()

    def test_unknown_session(self, service):
        """Test operations on a missing session."""
        with pytest.raises(SessionNotFound):
            service.observe("missing")
        with pytest.raises(SessionNotFound):
            service.play_card("missing", "p1", 1)


class TestPlay:
    """Tests for play operations."""

    def test_play_card(self, started):
        """Test an accepted play increments the version by one."""
        before = started.observe("s1")

        after = started.play_card("s1", "p1", first_card(before, "p1"))

        assert after.version == before.version + 1
        assert after.turn_owner_id == "p2"
        assert len(after.get_player("p1").hand) == 9

    def test_play_out_of_turn(self, started):
        """Test a play by the non-owner is rejected and the version is unchanged."""
        before = started.observe("s1")

        with pytest.raises(IllegalMove) as exc_info:
            started.play_card("s1", "p2", first_card(before, "p2"))

        assert isinstance(exc_info.value, NotYourTurn)
        after = started.observe("s1")
        assert after.version == before.version
        assert after.get_player("p2").hand == before.get_player("p2").hand

    def test_pending_go_decision_blocks_opponent(self, service):
        """Test the opponent's play waits for Go or Stop and nothing is written."""
        alice = Player(
            player_id="p1",
            name="Alice",
            hand=CardSet(get_card(i) for i in (29, 2, 3)),
            captured=CardSet(get_card(i) for i in (1, 9)),
        )
        bob = Player(player_id="p2", name="Bob", hand=CardSet(get_card(i) for i in (14, 15, 16)))
        service.gate.create(
            GameSession(
                session_id="s1",
                host_id="p1",
                status=GameStatus.PLAYING,
                round_number=1,
                players=[alice, bob],
                floor=CardSet([get_card(31)]),
                draw_pile=[get_card(i) for i in (6, 7, 8)],
                turn_owner_id="p1",
            )
        )

        session = service.play_card("s1", "p1", 29)
        assert session.awaiting_go_id == "p1"

        with pytest.raises(GoDecisionPending):
            service.play_card("s1", "p2", 14)
        after = service.observe("s1")
        assert after.version == session.version
        assert after.awaiting_go_id == "p1"

        session = service.declare_go("s1", "p1")
        assert session.get_player("p1").go_count == 1
        session = service.play_card("s1", "p2", 14)
        assert session.turn_owner_id == "p1"

    def test_observe_is_detached(self, started):
        """Test changing a snapshot has no effect on the session."""
        snapshot = started.observe("s1")
        snapshot.get_player("p1").hand.clear()
        snapshot.turn_owner_id = "p2"

        fresh = started.observe("s1")
        assert len(fresh.get_player("p1").hand) == 10
        assert fresh.turn_owner_id == "p1"

    def test_full_round_and_rematch(self, started):
        """Test a round played to the end can be rematched."""
        session = started.observe("s1")
        while session.status == GameStatus.PLAYING:
            session = play_turn(started, session)

        assert session.status == GameStatus.FINISHED
        assert session.card_count() == 48

        session = started.rematch("s1", "p1")
        assert session.status == GameStatus.PLAYING
        assert session.round_number == 2

    def test_advise(self, started):
        """Test advice for the turn owner is a play hint."""
        advice = started.advise("s1", "p1")
        assert advice.startswith(("Play ", "No capture available"))


class TestCallbacks:
    """Tests for post-commit callbacks."""

    def test_turn_callback(self, started):
        """Test on_turn sees the committed session."""
        events = []
        started.set_callbacks(on_turn=lambda s, outcome: events.append((s.version, outcome.actor_id)))

        session = started.observe("s1")
        started.play_card("s1", "p1", first_card(session, "p1"))

        assert events == [(session.version + 1, "p1")]

    def test_rejected_play_fires_nothing(self, started):
        """Test rejected plays produce no events."""
        events = []
        started.set_callbacks(on_turn=lambda s, outcome: events.append(outcome))

        with pytest.raises(NotYourTurn):
            started.play_card("s1", "p2", first_card(started.observe("s1"), "p2"))
        assert events == []


class TestDocument:
    """Tests for the persisted document."""

    def test_camel_case_keys(self, started):
        """Test the stored document uses camelCase keys."""
        data = json.loads(started.store.get("s1").data)

        for key in ("hostId", "turnOwnerId", "playerOrder", "drawPile", "round", "awaitingGoId"):
            assert key in data
        assert data["playerOrder"] == ["p1", "p2"]
        assert len(data["players"]["p1"]["hand"]) == 10
        assert "goCount" in data["players"]["p1"]
        assert data["status"] == "playing"
