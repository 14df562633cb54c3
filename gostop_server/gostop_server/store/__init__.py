"""Session persistence and concurrency control."""

from .document_store import InMemorySessionStore, SessionStore, VersionedDocument
from .gate import ConcurrencyGate

__all__ = [
    "ConcurrencyGate",
    "InMemorySessionStore",
    "SessionStore",
    "VersionedDocument",
]
