"""
Request admitter tests.

Verifies:
1. Inbound message shape handed to the router
2. userId / sessionId lifting from request metadata
3. Missing input: error body written, nothing parked
4. Router failures still answer the caller
"""

import asyncio
from typing import Any

from unittest.mock import patch

import pytest

from genie_http_api.errors import InvalidMessageException, MissingInputException, RouterDispatchException
from genie_http_api.services.admitter import RequestAdmitter
from genie_http_api.services.correlation_store import CorrelationStore
from genie_http_api.services.reply_completer import ReplyCompleter
from genie_http_api.routes.models import InboundMessage, OutboundReply
from genie_http_api.services.response_sink import ResponseSink
from genie_http_api.services.timeout_supervisor import TimeoutSupervisor
from tests.conftest import RecordingRouter, make_reply


EXPECTED_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST,OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type,Authorization",
    "Content-Type": "application/json",
}


def build_admitter(router: Any, store: CorrelationStore, timeout_ms: int = 5000) -> RequestAdmitter:
    return RequestAdmitter(
        store,
        TimeoutSupervisor(store, timeout_ms),
        router,
        token_factory=lambda: "tok-1",
    )


def release(store: CorrelationStore, token: str) -> None:
    record = store.take(token)
    if record is not None and record.timer is not None:
        record.timer.cancel()


# ============================================================================
# TESTS: Successful admission
# ============================================================================


@pytest.mark.asyncio
async def test_admit_hands_message_to_router(recording_router: RecordingRouter):
    store = CorrelationStore()
    sink = ResponseSink()

    token = build_admitter(recording_router, store).admit({"input": "hello"}, sink)

    assert token == "tok-1"
    assert recording_router.messages == [
        {"input": "hello", "metadata": {"uuid": "tok-1", "requestMetadata": {}}}
    ]
    assert "tok-1" in store
    assert not sink.written
    assert sink.headers == EXPECTED_HEADERS
    release(store, token)


@pytest.mark.asyncio
async def test_admit_lifts_user_and_session_ids(recording_router: RecordingRouter):
    store = CorrelationStore()
    metadata = {"userId": "u-1", "sessionId": "s-1", "locale": "nl"}

    build_admitter(recording_router, store).admit({"input": "hi", "metadata": metadata}, ResponseSink())

    message = recording_router.messages[0]
    assert message["userId"] == "u-1"
    assert message["sessionId"] == "s-1"
    assert message["metadata"]["requestMetadata"] == metadata
    release(store, "tok-1")


@pytest.mark.asyncio
async def test_admit_omits_absent_ids(recording_router: RecordingRouter):
    store = CorrelationStore()

    build_admitter(recording_router, store).admit(
        {"input": "hi", "metadata": {"sessionId": "s-1", "userId": None}}, ResponseSink()
    )

    message = recording_router.messages[0]
    assert "userId" not in message
    assert message["sessionId"] == "s-1"
    release(store, "tok-1")


@pytest.mark.asyncio
async def test_admit_schedules_async_router():
    heard: list[dict[str, Any]] = []

    class AsyncRouter:
        async def heard(self, message: dict[str, Any]) -> None:
            heard.append(message)

    store = CorrelationStore()
    build_admitter(AsyncRouter(), store).admit({"input": "hello"}, ResponseSink())
    await asyncio.sleep(0)

    assert heard[0]["metadata"]["uuid"] == "tok-1"
    release(store, "tok-1")


@pytest.mark.asyncio
async def test_router_may_reply_from_inside_heard():
    store = CorrelationStore()
    completer = ReplyCompleter(store)

    class ImmediateRouter:
        def heard(self, message: dict[str, Any]) -> None:
            token = message["metadata"]["uuid"]
            completer.complete(token, OutboundReply.model_validate(make_reply(token, "instant")))

    sink = ResponseSink()
    build_admitter(ImmediateRouter(), store).admit({"input": "hello"}, sink)

    assert await sink.wait() == {"id": "tok-1", "message": {"message": "instant", "metadata": {}}}
    assert len(store) == 0


# ============================================================================
# TESTS: Failed admission
# ============================================================================


@pytest.mark.asyncio
@pytest.mark.parametrize("body", [{}, {"input": ""}, {"input": None}, {"metadata": {"userId": "u"}}])
async def test_missing_input_writes_error_and_parks_nothing(
    recording_router: RecordingRouter, body: dict[str, Any]
):
    store = CorrelationStore()
    sink = ResponseSink()

    with pytest.raises(MissingInputException) as exc_info:
        build_admitter(recording_router, store).admit(body, sink)

    assert exc_info.value.token == "tok-1"
    assert await sink.wait() == {"id": "tok-1", "error": "No input attribute found in request."}
    assert sink.headers == EXPECTED_HEADERS
    assert len(store) == 0
    assert recording_router.messages == []


@pytest.mark.asyncio
async def test_router_failure_answers_caller_and_releases_record():
    class BrokenRouter:
        def heard(self, message: dict[str, Any]) -> None:
            raise RuntimeError("router down")

    store = CorrelationStore()
    sink = ResponseSink()

    with pytest.raises(RouterDispatchException) as exc_info:
        build_admitter(BrokenRouter(), store).admit({"input": "hello"}, sink)

    assert isinstance(exc_info.value.__cause__, RuntimeError)
    assert await sink.wait() == {"id": "tok-1", "error": "Failed to contact brain."}
    assert len(store) == 0


@pytest.mark.asyncio
async def test_async_router_failure_falls_back_to_timeout():
    class FailingAsyncRouter:
        async def heard(self, message: dict[str, Any]) -> None:
            raise RuntimeError("router down")

    store = CorrelationStore()
    sink = ResponseSink()
    build_admitter(FailingAsyncRouter(), store, timeout_ms=20).admit({"input": "hello"}, sink)

    body = await asyncio.wait_for(sink.wait(), timeout=1)
    assert body == {"id": "tok-1", "error": "Timeout contacting brain."}


@pytest.mark.asyncio
async def test_default_tokens_are_unique(recording_router: RecordingRouter):
    store = CorrelationStore()
    admitter = RequestAdmitter(store, TimeoutSupervisor(store, 5000), recording_router)

    tokens = {admitter.admit({"input": "x"}, ResponseSink()) for _ in range(20)}

    assert len(tokens) == 20
    for token in tokens:
        release(store, token)


@pytest.mark.asyncio
async def test_non_object_metadata_is_passed_through(recording_router: RecordingRouter):
    store = CorrelationStore()

    build_admitter(recording_router, store).admit({"input": "hi", "metadata": "abc"}, ResponseSink())

    assert recording_router.messages == [
        {"input": "hi", "metadata": {"uuid": "tok-1", "requestMetadata": "abc"}}
    ]
    release(store, "tok-1")


@pytest.mark.asyncio
async def test_unbuildable_message_answers_caller(recording_router: RecordingRouter):
    store = CorrelationStore()
    sink = ResponseSink()
    admitter = build_admitter(recording_router, store)

    # A real pydantic failure from message construction
    with patch.object(admitter, "build_message", side_effect=lambda *_: InboundMessage.model_validate({})):
        with pytest.raises(InvalidMessageException) as exc_info:
            admitter.admit({"input": "hi"}, sink)

    assert exc_info.value.token == "tok-1"
    assert await sink.wait() == {"id": "tok-1", "error": "Invalid message in request."}
    assert sink.headers == EXPECTED_HEADERS
    assert len(store) == 0
    assert recording_router.messages == []
