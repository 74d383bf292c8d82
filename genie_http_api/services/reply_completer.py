"""
Reply completer.
Owns: Answering a parked request with the brain's reply.
"""

import logging

from genie_http_api.errors import UnknownCorrelationException
from genie_http_api.routes.models import OutboundReply
from .correlation_store import CorrelationStore

logger = logging.getLogger(__name__)


class ReplyCompleter:
    def __init__(self, store: CorrelationStore):
        self._store = store

    def complete(self, token: str | None, reply: OutboundReply) -> None:
        """
        Write ``reply`` to the request parked under ``token``.

        Raises:
            UnknownCorrelationException: Token was never admitted, or was
                already finalized by a timeout or an earlier reply.
        """
        record = self._store.take(token)
        if record is None:
            logger.warning(
                "Reply for unknown correlation token",
                extra={
                    "correlation_token": token,
                    "error_code": UnknownCorrelationException.error_code,
                },
            )
            raise UnknownCorrelationException(token)

        if record.timer is not None:
            record.timer.cancel()

        record.sink.write(
            {
                "id": record.token,
                "message": {
                    "message": reply.output,
                    "metadata": reply.request_metadata,
                },
            }
        )
        logger.info(
            "Reply delivered",
            extra={"correlation_token": record.token, "pending": len(self._store)},
        )
