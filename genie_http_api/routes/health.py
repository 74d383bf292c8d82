"""
Health route.
Owns: Liveness plus binding state of the message endpoint.
"""

from fastapi import APIRouter, Request

from .models import HealthResponse

router = APIRouter(tags=["system"])


@router.get("/health", response_model=HealthResponse)
async def health(request: Request) -> HealthResponse:
    http_api = getattr(request.app.state, "http_api", None)
    if http_api is None:
        return HealthResponse(status="ok", ready=False, pending=0)
    return HealthResponse(status="ok", ready=http_api.started, pending=http_api.pending_count)
