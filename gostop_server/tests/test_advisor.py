"""Tests for move strategies and the advisor."""

import threading

import pytest

from gostop_server.config import AdvisorConfig
from gostop_server.models.card import CardSet, get_card
from gostop_server.models.game_state import GameSession, GameStatus
from gostop_server.models.player import Player
from gostop_server.strategy import Advisor, SimpleStrategy


def cards(*ids):
    return [get_card(i) for i in ids]


@pytest.fixture
def session():
    # Alice can take a Bright (1 vs 3), a pair of junk (11 vs 12) or nothing (27)
    p1 = Player(player_id="p1", name="Alice", hand=CardSet(cards(11, 1, 27)))
    p2 = Player(player_id="p2", name="Bob", hand=CardSet(cards(15, 16, 19)))
    return GameSession(
        session_id="s1",
        host_id="p1",
        status=GameStatus.PLAYING,
        players=[p1, p2],
        floor=CardSet(cards(3, 12, 45)),
        draw_pile=cards(33, 37),
        turn_owner_id="p1",
    )


@pytest.fixture
def strategy():
    return SimpleStrategy()


class TestSimpleStrategy:
    """Tests for SimpleStrategy class."""

    def test_prefers_bright_capture(self, strategy, session):
        """Test a capture involving a Bright wins over other captures."""
        assert strategy.select_card(session, "p1") == 1

    def test_discards_lowest_without_capture(self, strategy, session):
        """Test the least valuable card is thrown when nothing matches."""
        session.floor = CardSet(cards(45))
        # 11 and 27 are junk, 1 is a Bright
        assert strategy.select_card(session, "p1") == 11

    def test_empty_hand(self, strategy, session):
        """Test selecting from an empty hand."""
        session.get_player("p1").hand.clear()
        with pytest.raises(ValueError):
            strategy.select_card(session, "p1")

    def test_decide_go(self, strategy, session):
        """Test Go while cards remain and the opponent is harmless."""
        assert strategy.decide_go(session, "p1")

        session.get_player("p2").score = 5
        assert not strategy.decide_go(session, "p1")

    def test_stop_near_end(self, strategy, session):
        """Test Stop when few cards remain."""
        session.get_player("p1").hand = CardSet(cards(11))
        assert not strategy.decide_go(session, "p1")

    def test_describe(self, strategy, session):
        """Test the hint names the capture."""
        hint = strategy.describe(session, "p1")
        assert hint.startswith("Play Pine(1)-bright to capture Pine(1)-junk")
        assert "Bright" in hint


class TestAdvisor:
    """Tests for Advisor class."""

    def test_strategy_backend(self, session):
        """Test the default backend gives a strategy hint."""
        advisor = Advisor()
        assert advisor.advise(session, "p1").startswith("Play ")

    def test_callable_backend(self, session):
        """Test any callable can supply advice."""
        advisor = Advisor(lambda snapshot, player_id: f"{player_id}: wait")
        assert advisor.advise(session, "p2") == "p2: wait"

    def test_backend_error_falls_back(self, session):
        """Test a failing backend yields the fallback message."""

        def broken(snapshot, player_id):
            raise RuntimeError("service unavailable")

        config = AdvisorConfig(fallback_message="fallback")
        assert Advisor(broken, config).advise(session, "p1") == "fallback"

    def test_timeout_falls_back(self, session):
        """Test a slow backend yields the fallback message."""
        release = threading.Event()

        def slow(snapshot, player_id):
            release.wait(5)
            return "too late"

        config = AdvisorConfig(timeout_seconds=0.05, fallback_message="fallback")
        try:
            assert Advisor(slow, config).advise(session, "p1") == "fallback"
        finally:
            release.set()

    def test_empty_advice_falls_back(self, session):
        """Test an empty answer yields the fallback message."""
        config = AdvisorConfig(fallback_message="fallback")
        assert Advisor(lambda snapshot, player_id: "", config).advise(session, "p1") == "fallback"

    def test_hung_backend_threads_are_bounded(self, session):
        """Test repeated timeouts reuse the advisor's workers."""
        release = threading.Event()
        started = threading.Semaphore(0)

        def hung(snapshot, player_id):
            started.release()
            release.wait(5)
            return "too late"

        config = AdvisorConfig(timeout_seconds=0.2, fallback_message="fallback", max_workers=1)
        advisor = Advisor(hung, config)
        try:
            results = [advisor.advise(session, "p1") for _ in range(4)]
            assert results == ["fallback"] * 4
            assert started.acquire(timeout=1)
            # Later calls were cancelled while queued behind the hung one
            assert not started.acquire(timeout=0.1)
        finally:
            release.set()
            advisor.close()
