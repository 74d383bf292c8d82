"""
Local echo router for dev/test.

Stands in for the real message router by:
1. Accepting ``heard`` messages without blocking
2. Waiting ``delay_ms`` in a background task
3. Replying through ``speak`` with the input as output

Gated behind ROUTER_BACKEND=echo.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable

logger = logging.getLogger(__name__)

Speak = Callable[[dict[str, Any]], Awaitable[None]]


class EchoRouter:
    def __init__(self, speak: Speak | None = None, delay_ms: int = 0):
        self._speak = speak
        self.delay_ms = delay_ms
        self._active_tasks: dict[str, asyncio.Task[None]] = {}

    def attach(self, speak: Speak) -> None:
        self._speak = speak

    def heard(self, message: dict[str, Any]) -> None:
        """Schedule the echo reply and return immediately."""
        token = message["metadata"]["uuid"]
        logger.info("[ECHO ROUTER] message heard", extra={"correlation_token": token})
        self._active_tasks[token] = asyncio.create_task(self._reply(token, message))

    async def _reply(self, token: str, message: dict[str, Any]) -> None:
        try:
            if self.delay_ms:
                await asyncio.sleep(self.delay_ms / 1000)
            if self._speak is None:
                logger.warning("[ECHO ROUTER] no speak target attached", extra={"correlation_token": token})
                return
            await self._speak(
                {
                    "output": message["input"],
                    "metadata": message["metadata"],
                }
            )
        except Exception:
            # Timed-out requests land here as unknown correlations.
            logger.exception("[ECHO ROUTER] reply failed", extra={"correlation_token": token})
        finally:
            self._active_tasks.pop(token, None)
