"""
Response sink.
Owns: The single-use slot a parked HTTP request is answered through.
"""

import asyncio
from typing import Any

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST,OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type,Authorization",
}
JSON_CONTENT_TYPE = {"Content-Type": "application/json"}


class ResponseSink:
    """
    Holds the headers and the one body of a parked response.

    The body is an ``asyncio.Future``: ``write`` resolves it, the route
    handler awaits it. Writing twice raises ``asyncio.InvalidStateError``.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None):
        loop = loop or asyncio.get_running_loop()
        self._body: asyncio.Future[dict[str, Any]] = loop.create_future()
        self.headers: dict[str, str] = {}

    def set_headers(self, headers: dict[str, str]) -> None:
        self.headers.update(headers)

    def write(self, body: dict[str, Any]) -> None:
        self._body.set_result(body)

    @property
    def written(self) -> bool:
        return self._body.done()

    async def wait(self) -> dict[str, Any]:
        # Shielded: a cancelled request task must not cancel the sink,
        # the pending record still finalizes through it.
        return await asyncio.shield(self._body)
