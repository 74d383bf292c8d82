"""
Request admitter.
Owns: Accepting a message request, minting its correlation token,
parking it in the correlation store and handing it to the router.

This module is a thin orchestrator:
- No HTTP framework types
- No reply handling (see reply_completer)
- No deadline handling (see timeout_supervisor)
"""

import asyncio
import inspect
import logging
import uuid
from typing import Any, Callable, Mapping, Protocol

from pydantic import ValidationError

from genie_http_api.errors import InvalidMessageException, MissingInputException, RouterDispatchException
from genie_http_api.routes.models import InboundMessage
from genie_http_api.shared.logging import hash_user_id
from .correlation_store import CorrelationStore, PendingRecord
from .response_sink import CORS_HEADERS, JSON_CONTENT_TYPE, ResponseSink
from .timeout_supervisor import TimeoutSupervisor

logger = logging.getLogger(__name__)

# Request metadata keys lifted onto the inbound message
LIFTED_METADATA_KEYS = (("userId", "user_id"), ("sessionId", "session_id"))


class Router(Protocol):
    """Message processor the API hands inbound messages to."""

    def heard(self, message: dict[str, Any]) -> Any:
        ...


def new_token() -> str:
    return str(uuid.uuid4())


class RequestAdmitter:
    def __init__(
        self,
        store: CorrelationStore,
        supervisor: TimeoutSupervisor,
        router: Router,
        token_factory: Callable[[], str] = new_token,
    ):
        self._store = store
        self._supervisor = supervisor
        self._router = router
        self._token_factory = token_factory
        self._dispatch_tasks: set[asyncio.Task[Any]] = set()

    def admit(self, body: Mapping[str, Any], sink: ResponseSink) -> str:
        """
        Admit a message request and park it until reply or timeout.

        Flow:
        1. Set CORS + JSON headers on the sink
        2. Mint a correlation token
        3. Reject a request without input (body written, then raised)
        4. Register the pending record and arm its timer
        5. Hand the inbound message to the router (fire-and-forget)

        Raises:
            MissingInputException: ``input`` absent or empty
            InvalidMessageException: request fields do not form a message
            RouterDispatchException: router ``heard`` raised
        """
        sink.set_headers(CORS_HEADERS)
        sink.set_headers(JSON_CONTENT_TYPE)

        token = self._token_factory()

        if not body.get("input"):
            exc = MissingInputException(token)
            sink.write(exc.to_dict())
            raise exc

        try:
            message = self.build_message(token, body)
        except ValidationError as e:
            exc = InvalidMessageException(token)
            sink.write(exc.to_dict())
            raise exc from e

        timer = self._supervisor.arm(token)
        try:
            self._store.put(token, PendingRecord(token=token, sink=sink, timer=timer))
        except Exception:
            timer.cancel()
            raise

        logger.info(
            "Request admitted",
            extra={
                "correlation_token": token,
                "user_id_hash": hash_user_id(message.user_id) if message.user_id is not None else None,
                "pending": len(self._store),
            },
        )

        try:
            self._dispatch(message)
        except Exception as e:
            record = self._store.take(token)
            if record is not None:
                timer.cancel()
                exc = RouterDispatchException(token)
                sink.write(exc.to_dict())
                raise exc from e
            # The router already answered before failing; nothing left to finalize.
            logger.exception("Router failed after replying", extra={"correlation_token": token})

        return token

    def build_message(self, token: str, body: Mapping[str, Any]) -> InboundMessage:
        request_metadata = body.get("metadata") or {}
        fields: dict[str, Any] = {
            "input": body["input"],
            "metadata": {"uuid": token, "requestMetadata": request_metadata},
        }
        if isinstance(request_metadata, Mapping):
            for key, field in LIFTED_METADATA_KEYS:
                if request_metadata.get(key) is not None:
                    fields[field] = request_metadata[key]
        return InboundMessage.model_validate(fields)

    def _dispatch(self, message: InboundMessage) -> None:
        result = self._router.heard(message.to_payload())
        if inspect.isawaitable(result):
            task = asyncio.ensure_future(result)
            self._dispatch_tasks.add(task)
            task.add_done_callback(self._on_dispatch_done)

    def _on_dispatch_done(self, task: asyncio.Task[Any]) -> None:
        self._dispatch_tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            # The request still finalizes through its timer.
            logger.error(
                "Router heard() failed",
                exc_info=exc,
                extra={"error_code": RouterDispatchException.error_code},
            )
