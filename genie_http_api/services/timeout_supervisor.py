"""
Timeout supervisor.
Owns: Per-request deadline timers and the timeout fallback response.
"""

import asyncio
import logging

from genie_http_api.errors import TimeoutExpiredException
from .correlation_store import CorrelationStore

logger = logging.getLogger(__name__)


class TimeoutSupervisor:
    def __init__(self, store: CorrelationStore, timeout_ms: int):
        self._store = store
        self.timeout_ms = timeout_ms

    def arm(self, token: str) -> asyncio.TimerHandle:
        """Schedule ``expire(token)`` after the configured timeout."""
        loop = asyncio.get_running_loop()
        return loop.call_later(self.timeout_ms / 1000, self.expire, token)

    def expire(self, token: str) -> bool:
        """
        Finalize ``token`` with the timeout body if it is still pending.

        Returns False when a reply already finalized it; that is the
        normal outcome of a timer losing the race and is not logged.
        """
        record = self._store.take(token)
        if record is None:
            return False

        record.sink.write(TimeoutExpiredException(token).to_dict())
        logger.warning(
            "Timeout contacting brain",
            extra={
                "correlation_token": token,
                "timeout_ms": self.timeout_ms,
                "error_code": TimeoutExpiredException.error_code,
            },
        )
        return True
