"""
Message routes.
Owns: The message endpoint and its CORS preflight.

The POST handler stays open until the parked request is finalized,
by a brain reply or by its timeout.
"""

import json
import logging
from typing import Any

from fastapi import Depends, FastAPI, Request, Response
from fastapi.responses import JSONResponse

from genie_http_api.auth import require_access_token
from genie_http_api.errors import CorrelatedException
from genie_http_api.services.admitter import RequestAdmitter
from genie_http_api.services.response_sink import CORS_HEADERS, ResponseSink

logger = logging.getLogger(__name__)


async def read_body(request: Request) -> dict[str, Any]:
    """Parse the JSON body; anything that is not a JSON object counts as empty."""
    try:
        body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return {}
    return body if isinstance(body, dict) else {}


async def message_preflight() -> Response:
    return Response(status_code=200, headers=CORS_HEADERS)


def register_message_routes(
    app: FastAPI,
    endpoint: str,
    admitter: RequestAdmitter,
    access_token: str | None = None,
) -> None:
    """
    Bind POST and OPTIONS handlers for ``endpoint`` on ``app``.

    With ``access_token`` set, the POST route runs the bearer check
    before admission; a failed check short-circuits with 401.
    """
    dependencies = [Depends(require_access_token(access_token))] if access_token else []

    async def post_message(request: Request) -> JSONResponse:
        request_id = getattr(request.state, "request_id", None)
        body = await read_body(request)
        sink = ResponseSink()

        try:
            token = admitter.admit(body, sink)
        except CorrelatedException as exc:
            request.state.correlation_token = exc.token
            logger.warning(
                "Request rejected",
                extra={
                    "correlation_token": exc.token,
                    "request_id": request_id,
                    "error_code": exc.error_code,
                },
            )
        else:
            request.state.correlation_token = token
            logger.info(
                "Waiting for brain reply",
                extra={"correlation_token": token, "request_id": request_id},
            )

        content = await sink.wait()
        return JSONResponse(content=content, headers=sink.headers)

    app.add_api_route(
        endpoint,
        post_message,
        methods=["POST"],
        dependencies=dependencies,
        name="post_message",
    )
    app.add_api_route(
        endpoint,
        message_preflight,
        methods=["OPTIONS"],
        name="message_preflight",
    )
    logger.info("Bound HTTP API endpoint", extra={"endpoint": endpoint})
