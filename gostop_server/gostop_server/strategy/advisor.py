"""Time-boxed, failure-tolerant move advice over a session snapshot."""

import logging
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from typing import Callable

from gostop_server.config import AdvisorConfig
from gostop_server.models.game_state import GameSession

from .base import Strategy
from .simple import SimpleStrategy

logger = logging.getLogger(__name__)

AdviceBackend = Callable[[GameSession, str], str]


class Advisor:
    """Wraps an advice backend so it can never stall or break a caller.

    The backend may be slow or remote (e.g. a hosted language model); any
    error or a response slower than the configured timeout yields the
    fallback message instead.
    """

    def __init__(
        self,
        backend: AdviceBackend | Strategy | None = None,
        config: AdvisorConfig | None = None,
    ):
        """Initialize advisor.

        Args:
            backend: Callable (snapshot, player_id) -> text, or a Strategy
                whose describe() is used. Defaults to SimpleStrategy.
            config: Advisor configuration
        """
        backend = backend or SimpleStrategy()
        if isinstance(backend, Strategy):
            backend = backend.describe
        self.backend: AdviceBackend = backend
        self.config = config or AdvisorConfig()
        self._executor = ThreadPoolExecutor(
            max_workers=self.config.max_workers,
            thread_name_prefix="advisor",
        )

    def advise(self, snapshot: GameSession, player_id: str) -> str:
        """Get advice for a player, or the fallback message.

        Args:
            snapshot: Read-only session snapshot
            player_id: Player asking for advice

        Returns:
            Advice text
        """
        future = self._executor.submit(self.backend, snapshot, player_id)
        try:
            advice = future.result(timeout=self.config.timeout_seconds)
        except FutureTimeoutError:
            future.cancel()
            logger.warning(
                f"Advice for {player_id} timed out after {self.config.timeout_seconds}s"
            )
            return self.config.fallback_message
        except Exception as e:
            logger.warning(f"Advice for {player_id} failed: {e}")
            return self.config.fallback_message

        if not advice:
            return self.config.fallback_message
        return advice

    def close(self) -> None:
        """Release the worker threads without waiting for running backends."""
        self._executor.shutdown(wait=False, cancel_futures=True)
