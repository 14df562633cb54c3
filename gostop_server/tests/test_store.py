"""Tests for the document store and concurrency gate."""

import threading

import pytest

from gostop_server.errors import (
    NotYourTurn,
    SessionExists,
    SessionNotFound,
    TransactionConflict,
)
from gostop_server.models.document import to_document
from gostop_server.models.game_state import GameSession
from gostop_server.models.player import Player
from gostop_server.store import ConcurrencyGate, InMemorySessionStore


@pytest.fixture
def store():
    return InMemorySessionStore()


@pytest.fixture
def gate(store):
    gate = ConcurrencyGate(store, max_retries=3)
    session = GameSession(session_id="s1", host_id="p1", players=[Player(player_id="p1")])
    gate.create(session)
    return gate


def bump_round(session):
    session.round_number += 1
    return session.round_number


def competing_write(store, session_id):
    """Commit a change behind the gate's back."""
    current = store.get(session_id)
    store.compare_and_swap(session_id, current.version, current.data)


class TestInMemorySessionStore:
    """Tests for InMemorySessionStore class."""

    def test_create_and_get(self, store):
        """Test a created document starts at version 0."""
        store.create("s1", "{}")

        document = store.get("s1")
        assert document.version == 0
        assert document.data == "{}"
        assert "s1" in store
        assert len(store) == 1

    def test_get_unknown(self, store):
        """Test reading a missing key."""
        assert store.get("missing") is None

    def test_create_twice(self, store):
        """Test keys cannot be overwritten by create."""
        store.create("s1", "{}")
        with pytest.raises(SessionExists):
            store.create("s1", "{}")

    def test_compare_and_swap(self, store):
        """Test a swap at the current version commits the next version."""
        store.create("s1", "a")

        committed = store.compare_and_swap("s1", 0, "b")

        assert committed.version == 1
        assert store.get("s1").data == "b"

    def test_compare_and_swap_stale(self, store):
        """Test a swap at an old version is refused."""
        store.create("s1", "a")
        store.compare_and_swap("s1", 0, "b")

        assert store.compare_and_swap("s1", 0, "c") is None
        assert store.get("s1").data == "b"
        assert store.get("s1").version == 1

    def test_compare_and_swap_unknown(self, store):
        """Test swapping a missing key."""
        with pytest.raises(SessionNotFound):
            store.compare_and_swap("missing", 0, "a")


class TestConcurrencyGate:
    """Tests for ConcurrencyGate class."""

    def test_create_stores_document(self, gate, store):
        """Test the created session is stored at version 0."""
        document = store.get("s1")
        assert document.version == 0
        assert document.data == to_document(gate.load("s1")).to_json()

    def test_transact_commits(self, gate, store):
        """Test a mutation is committed with the next version."""
        session, result = gate.transact("s1", bump_round)

        assert result == 1
        assert session.version == 1
        assert store.get("s1").version == 1
        assert gate.load("s1").round_number == 1

    def test_load_is_detached(self, gate):
        """Test changing a loaded session does not reach the store."""
        snapshot = gate.load("s1")
        snapshot.round_number = 99
        snapshot.players.clear()

        fresh = gate.load("s1")
        assert fresh.round_number == 0
        assert len(fresh.players) == 1

    def test_load_unknown(self, gate):
        """Test loading a missing session."""
        with pytest.raises(SessionNotFound):
            gate.load("missing")

    def test_rule_error_not_retried(self, gate, store):
        """Test a rejected mutation runs once and writes nothing."""
        calls = []

        def reject(session):
            calls.append(session.version)
            raise NotYourTurn("p2", "p1")

        with pytest.raises(NotYourTurn):
            gate.transact("s1", reject)

        assert calls == [0]
        assert store.get("s1").version == 0

    def test_conflict_retries_on_fresh_state(self, gate, store):
        """Test a lost race re-runs the mutation against the newer version."""
        seen_versions = []

        def mutation(session):
            seen_versions.append(session.version)
            if len(seen_versions) == 1:
                competing_write(store, "s1")
            return bump_round(session)

        session, _ = gate.transact("s1", mutation)

        assert seen_versions == [0, 1]
        assert session.version == 2
        assert store.get("s1").version == 2
        assert gate.load("s1").round_number == 1

    def test_conflict_exhausts_retries(self, gate, store):
        """Test a mutation that always loses raises TransactionConflict."""
        calls = []

        def mutation(session):
            calls.append(session.version)
            competing_write(store, "s1")
            return bump_round(session)

        with pytest.raises(TransactionConflict) as exc_info:
            gate.transact("s1", mutation)

        assert len(calls) == 4
        assert exc_info.value.attempts == 4
        assert exc_info.value.retryable
        assert gate.load("s1").round_number == 0

    def test_transact_unknown(self, gate):
        """Test mutating a missing session."""
        with pytest.raises(SessionNotFound):
            gate.transact("missing", bump_round)

    def test_concurrent_mutations_apply_once(self, store):
        """Test every mutation from racing threads is applied exactly once."""
        gate = ConcurrencyGate(store, max_retries=10_000)
        gate.create(GameSession(session_id="race", host_id="p1"))

        def worker():
            for _ in range(25):
                gate.transact("race", bump_round)

        threads = [threading.Thread(target=worker) for _ in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        session = gate.load("race")
        assert session.round_number == 100
        assert session.version == 100
