"""
Response DTOs for API key endpoints.

ApiKeyResponse          — one key entry in GET /api/v1/keys list
ApiKeyCreatedResponse   — POST /api/v1/keys (201), includes ``consumer_secret`` once
ApiKeysListResponse     — GET /api/v1/keys (200)
ApiKeyActionResponse    — revoke / activate / update endpoints (200)
ValidateKeyResponse     — POST /api/v1/keys/validate
PermissionCheckResponse — POST /api/v1/keys/check-permission
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


class ApiKeyResponse(BaseModel):
    """A single API key entry as the owner sees it.

    Neither the secret nor its hash is ever part of this shape.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str
    consumer_key: str
    description: str = ""
    permissions: list[str]
    status: str
    created_at: Optional[datetime] = None
    last_used: Optional[datetime] = None


class ApiKeyCreatedResponse(ApiKeyResponse):
    """Response for POST /api/v1/keys (201).

    Extends ApiKeyResponse with the plaintext ``consumer_secret``. This is the
    ONLY time the secret is returned; it is hashed before storage.
    """

    consumer_secret: str


class ApiKeysListResponse(BaseModel):
    """Response body for GET /api/v1/keys."""

    model_config = ConfigDict(populate_by_name=True)

    keys: list[ApiKeyResponse]


class ApiKeyActionResponse(BaseModel):
    """Response body for lifecycle mutations."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool
    action: str  # "revoked", "activated", "description_updated", "permissions_updated"


class ValidateKeyResponse(BaseModel):
    valid: bool


class PermissionCheckResponse(BaseModel):
    has_permission: bool
