"""Shared fixtures for the HTTP API tests."""

from typing import Any

import pytest


class RecordingRouter:
    """Router stand-in that keeps every heard message and never replies."""

    def __init__(self) -> None:
        self.messages: list[dict[str, Any]] = []

    def heard(self, message: dict[str, Any]) -> None:
        self.messages.append(message)


def make_reply(token: str, output: Any = "reply", request_metadata: dict[str, Any] | None = None) -> dict[str, Any]:
    return {
        "output": output,
        "metadata": {"uuid": token, "requestMetadata": request_metadata or {}},
    }


@pytest.fixture
def recording_router() -> RecordingRouter:
    return RecordingRouter()
