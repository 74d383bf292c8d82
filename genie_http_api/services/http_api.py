"""
HTTP API binder.
Owns: Startup sequencing and the reply entry point for the router.

The hosting app and the router are handed in by independent callers in
no particular order. Routes are bound exactly once, as soon as config,
app and router are all known.
"""

import logging
from typing import Any, Mapping

from fastapi import FastAPI
from pydantic import ValidationError

from genie_http_api.config import Settings, settings_from_plugin_config
from genie_http_api.errors import AppException, UnknownCorrelationException, register_exception_handlers
from genie_http_api.routes.messages import register_message_routes
from genie_http_api.routes.models import OutboundReply
from .admitter import RequestAdmitter, Router
from .correlation_store import CorrelationStore
from .reply_completer import ReplyCompleter
from .timeout_supervisor import TimeoutSupervisor

logger = logging.getLogger(__name__)


class HttpApi:
    def __init__(self, store: CorrelationStore | None = None):
        self.store = store or CorrelationStore()
        self.completer = ReplyCompleter(self.store)
        self.config: Settings | None = None
        self.app: FastAPI | None = None
        self.router: Router | None = None
        self.admitter: RequestAdmitter | None = None

    @property
    def started(self) -> bool:
        return self.admitter is not None

    @property
    def pending_count(self) -> int:
        return len(self.store)

    def set_config(self, config: Settings | Mapping[str, Any] | None) -> bool:
        self.config = settings_from_plugin_config(config)
        return self._maybe_start()

    def set_app(self, app: FastAPI) -> bool:
        self.app = app
        return self._maybe_start()

    def set_router(self, router: Router) -> bool:
        self.router = router
        return self._maybe_start()

    def _maybe_start(self) -> bool:
        if self.started or self.config is None or self.app is None or self.router is None:
            return False
        self._start()
        return True

    def _start(self) -> None:
        """Bind the message and preflight routes on the app."""
        supervisor = TimeoutSupervisor(self.store, self.config.timeout)
        self.admitter = RequestAdmitter(self.store, supervisor, self.router)

        # create_app registers these already; a host app handed in by a router may not have them
        if AppException not in getattr(self.app, "exception_handlers", {}):
            register_exception_handlers(self.app)
        register_message_routes(
            self.app,
            self.config.endpoint,
            self.admitter,
            access_token=self.config.access_token,
        )
        logger.info(
            "HTTP API started",
            extra={"endpoint": self.config.endpoint, "timeout_ms": self.config.timeout},
        )

    async def speak(self, reply: OutboundReply | Mapping[str, Any]) -> None:
        """
        Deliver a router reply to the request it answers.

        Raises:
            UnknownCorrelationException: No open request for the reply's token
        """
        if not isinstance(reply, OutboundReply):
            try:
                reply = OutboundReply.model_validate(reply)
            except ValidationError as e:
                raise UnknownCorrelationException(_reply_token(reply)) from e
        self.completer.complete(reply.correlation_token, reply)


def _reply_token(reply: Any) -> str | None:
    """Best-effort token of a reply that failed validation, for the error."""
    metadata = reply.get("metadata") if isinstance(reply, Mapping) else None
    token = metadata.get("uuid") if isinstance(metadata, Mapping) else None
    return token if isinstance(token, str) else None
