"""
Logging middleware.
Owns: One access log line per HTTP exchange.

Message requests stay open until a reply or timeout, so the completed
line is the one that matters: it carries the correlation token and the
full wait time. Preflights are only logged at debug level.
"""

import logging
import time
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger(__name__)


class LoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        start_time = time.perf_counter()
        level = logging.DEBUG if request.method == "OPTIONS" else logging.INFO

        response = await call_next(request)

        latency_ms = (time.perf_counter() - start_time) * 1000
        if response.status_code >= 500:
            level = logging.ERROR

        logger.log(
            level,
            "%s %s -> %d",
            request.method,
            request.url.path,
            response.status_code,
            extra={
                "request_id": getattr(request.state, "request_id", None),
                "correlation_token": getattr(request.state, "correlation_token", None),
                "http_method": request.method,
                "http_path": request.url.path,
                "http_status": response.status_code,
                "latency_ms": round(latency_ms, 2),
            },
        )

        return response
