"""Versioned key-value document store with compare-and-swap."""

import logging
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass

from gostop_server.errors import SessionExists, SessionNotFound

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VersionedDocument:
    """Serialized document together with its concurrency token."""

    version: int
    data: str


class SessionStore(ABC):
    """Abstract transactional document store.

    Implementations only need atomic compare-and-swap on a single key; all
    game logic runs outside the store.
    """

    @abstractmethod
    def get(self, session_id: str) -> VersionedDocument | None:
        """Read the latest committed document (None if unknown)."""

    @abstractmethod
    def create(self, session_id: str, data: str) -> VersionedDocument:
        """Store a new document at version 0.

        Raises:
            SessionExists: If the key is already taken
        """

    @abstractmethod
    def compare_and_swap(
        self,
        session_id: str,
        expected_version: int,
        data: str,
    ) -> VersionedDocument | None:
        """Replace the document only if its version is still ``expected_version``.

        Returns:
            The committed document (version incremented), or None on conflict

        Raises:
            SessionNotFound: If the key does not exist
        """


class InMemorySessionStore(SessionStore):
    """Single-node store guarded by a mutex.

    Reads do not take the lock: they return whichever immutable
    VersionedDocument was committed last.
    """

    def __init__(self):
        self._documents: dict[str, VersionedDocument] = {}
        self._lock = threading.Lock()

    def get(self, session_id: str) -> VersionedDocument | None:
        return self._documents.get(session_id)

    def create(self, session_id: str, data: str) -> VersionedDocument:
        with self._lock:
            if session_id in self._documents:
                raise SessionExists(session_id)
            document = VersionedDocument(version=0, data=data)
            self._documents[session_id] = document
            logger.debug(f"Created document {session_id}")
            return document

    def compare_and_swap(
        self,
        session_id: str,
        expected_version: int,
        data: str,
    ) -> VersionedDocument | None:
        with self._lock:
            current = self._documents.get(session_id)
            if current is None:
                raise SessionNotFound(session_id)
            if current.version != expected_version:
                logger.debug(
                    f"CAS conflict on {session_id}: expected v{expected_version}, "
                    f"found v{current.version}"
                )
                return None
            document = VersionedDocument(version=expected_version + 1, data=data)
            self._documents[session_id] = document
            return document

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._documents

    def __len__(self) -> int:
        return len(self._documents)
