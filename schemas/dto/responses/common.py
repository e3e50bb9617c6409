"""
Response shapes shared by the health route and every error path.

ErrorResponse is what register_error_handlers() renders for an AppError;
the ``*_ERROR_RESPONSES`` maps document it in the OpenAPI schema of the
routers that can produce those statuses.
"""

from __future__ import annotations

from typing import Any, Literal, Optional

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    error: str
    code: str
    field: Optional[str] = None
    details: Optional[Any] = None


class HealthChecks(BaseModel):
    mongodb: Literal["ok", "error"]


class HealthResponse(BaseModel):
    """Body of GET /health. ``unhealthy`` is served with a 503."""

    status: Literal["healthy", "unhealthy"]
    checks: HealthChecks


def _error(description: str) -> dict[str, Any]:
    return {"model": ErrorResponse, "description": description}


# Owner-facing lifecycle routes
OWNER_ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    400: _error("Missing required field"),
    401: _error("Missing or malformed owner id"),
    404: _error("API key not found for this owner"),
    500: _error("Key store unavailable"),
}

# Routes behind require_api_key()
API_KEY_ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    401: _error("API key missing or invalid"),
    403: _error("API key lacks the required permission"),
    500: _error("Key store unavailable"),
}
