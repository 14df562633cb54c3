"""Optimistic concurrency gate around session mutations."""

import logging
from typing import Callable, TypeVar

from gostop_server.errors import SessionNotFound, TransactionConflict
from gostop_server.models.document import SessionDocument, from_document, to_document
from gostop_server.models.game_state import GameSession

from .document_store import SessionStore, VersionedDocument

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_MAX_RETRIES = 3


class ConcurrencyGate:
    """Applies each mutation exactly once per document version.

    A mutation receives a session freshly decoded from the latest committed
    document and may change it freely. The result is written back with
    compare-and-swap; if another writer committed in between, the mutation is
    re-run against the new state. Rule violations raised by the mutation are
    passed straight through and nothing is written.
    """

    def __init__(self, store: SessionStore, max_retries: int = DEFAULT_MAX_RETRIES):
        """Initialize gate.

        Args:
            store: Document store to read from and write to
            max_retries: Retries after the first conflicting attempt
        """
        self.store = store
        self.max_retries = max_retries

    def create(self, session: GameSession) -> GameSession:
        """Persist a brand-new session at version 0."""
        session.version = 0
        self.store.create(session.session_id, to_document(session).to_json())
        return session

    def load(self, session_id: str) -> GameSession:
        """Snapshot read of the latest committed session.

        The returned session is a detached copy; changing it has no effect on
        the store.

        Raises:
            SessionNotFound: If the session does not exist
        """
        return self._decode(self._read(session_id))

    def transact(
        self,
        session_id: str,
        mutation: Callable[[GameSession], T],
    ) -> tuple[GameSession, T]:
        """Run a mutation and commit it with compare-and-swap.

        Args:
            session_id: Session to mutate
            mutation: Function applied to a fresh copy of the session

        Returns:
            Tuple of (committed session, mutation return value)

        Raises:
            GameError: Whatever the mutation rejects with (no retry)
            TransactionConflict: If every attempt lost a version race
        """
        attempts = 0
        while attempts <= self.max_retries:
            attempts += 1
            current = self._read(session_id)
            session = self._decode(current)

            result = mutation(session)

            session.version = current.version + 1
            committed = self.store.compare_and_swap(
                session_id,
                current.version,
                to_document(session).to_json(),
            )
            if committed is not None:
                logger.debug(f"Committed {session_id} v{committed.version}")
                return session, result

            logger.warning(
                f"Version conflict on {session_id} at v{current.version} "
                f"(attempt {attempts}/{self.max_retries + 1}), retrying"
            )

        raise TransactionConflict(session_id, attempts)

    def _read(self, session_id: str) -> VersionedDocument:
        current = self.store.get(session_id)
        if current is None:
            raise SessionNotFound(session_id)
        return current

    def _decode(self, current: VersionedDocument) -> GameSession:
        session = from_document(SessionDocument.from_json(current.data))
        session.version = current.version
        return session
