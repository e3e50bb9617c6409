"""
Health check endpoint.

GET /health — checks MongoDB connectivity.
MongoDB failure → "unhealthy" (503); key validation cannot work without it.
"""

from __future__ import annotations

from fastapi import APIRouter, Request, Response

from schemas.dto.responses.common import HealthChecks, HealthResponse
from shared.logging import get_logger

log = get_logger(__name__)

router = APIRouter(tags=["health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={503: {"model": HealthResponse, "description": "MongoDB unreachable"}},
)
async def health_check(request: Request, response: Response) -> HealthResponse:
    try:
        db = request.app.state.db
        await db.client.admin.command("ping")
        mongodb = "ok"
    except Exception as exc:
        log.warning("health_check_failed", check="mongodb", error=str(exc))
        mongodb = "error"

    if mongodb == "error":
        response.status_code = 503
        return HealthResponse(status="unhealthy", checks=HealthChecks(mongodb=mongodb))
    return HealthResponse(status="healthy", checks=HealthChecks(mongodb=mongodb))
