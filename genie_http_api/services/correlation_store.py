"""
Correlation store.
Owns: Mapping of correlation token -> pending record for in-flight requests.

``take`` removes and returns in one step. Reply completion and timeout
expiry both finalize through it, so whichever runs first gets the record
and the other sees ``None``. All access happens on the event loop thread.
"""

import asyncio
from dataclasses import dataclass

from genie_http_api.errors import DuplicateTokenException
from .response_sink import ResponseSink


@dataclass(frozen=True)
class PendingRecord:
    token: str
    sink: ResponseSink
    timer: asyncio.TimerHandle | None = None


class CorrelationStore:
    def __init__(self) -> None:
        self._records: dict[str, PendingRecord] = {}

    def put(self, token: str, record: PendingRecord) -> None:
        if token in self._records:
            raise DuplicateTokenException(token)
        self._records[token] = record

    def take(self, token: str | None) -> PendingRecord | None:
        if token is None:
            return None
        return self._records.pop(token, None)

    def __contains__(self, token: object) -> bool:
        return token in self._records

    def __len__(self) -> int:
        return len(self._records)
