"""
Request ID middleware.
Owns: Request tracing via request IDs, and exposing the correlation token.

Distinct from correlation tokens: a request ID traces one HTTP exchange
through the logs, a correlation token links a message to its brain reply.
Message responses carry both, so a caller can quote either.
"""

import re
import uuid
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

# Caller-supplied ids end up in every log line of the request
_VALID_REQUEST_ID = re.compile(r"^[A-Za-z0-9._:-]{1,128}$")


class RequestIdMiddleware(BaseHTTPMiddleware):
    HEADER_NAME = "X-Request-ID"
    TOKEN_HEADER_NAME = "X-Correlation-Token"

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        request_id = request.headers.get(self.HEADER_NAME, "")
        if not _VALID_REQUEST_ID.match(request_id):
            request_id = uuid.uuid4().hex

        request.state.request_id = request_id

        response = await call_next(request)
        response.headers[self.HEADER_NAME] = request_id

        # Set by the message route once a token is minted
        correlation_token = getattr(request.state, "correlation_token", None)
        if correlation_token:
            response.headers[self.TOKEN_HEADER_NAME] = correlation_token

        return response
