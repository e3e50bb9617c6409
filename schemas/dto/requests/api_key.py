"""
Request DTOs for API key endpoints.

CreateApiKeyRequest          — POST /api/v1/keys
UpdateDescriptionRequest     — PATCH /api/v1/keys/{key_id}/description
UpdatePermissionsRequest     — PUT /api/v1/keys/{key_id}/permissions
ValidateKeyRequest           — POST /api/v1/keys/validate
CheckPermissionRequest       — POST /api/v1/keys/check-permission
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator

from schemas.models.api_key import Permission, normalize_permissions


class CreateApiKeyRequest(BaseModel):
    """Request body for POST /api/v1/keys."""

    model_config = ConfigDict(populate_by_name=True, use_enum_values=True)

    description: str = ""
    permissions: list[Permission] = [Permission.READ]

    @field_validator("description", mode="after")
    @classmethod
    def _strip_description(cls, v: str) -> str:
        return v.strip()

    @field_validator("permissions", mode="before")
    @classmethod
    def _dedupe(cls, v):
        if v is None:
            return [Permission.READ.value]
        return normalize_permissions(v)


class UpdateDescriptionRequest(BaseModel):
    """Request body for PATCH /api/v1/keys/{key_id}/description."""

    model_config = ConfigDict(populate_by_name=True)

    description: str

    @field_validator("description", mode="after")
    @classmethod
    def _strip_description(cls, v: str) -> str:
        return v.strip()


class UpdatePermissionsRequest(BaseModel):
    """Request body for PUT /api/v1/keys/{key_id}/permissions.

    An empty list is legal: the key then authorizes nothing.
    """

    model_config = ConfigDict(populate_by_name=True, use_enum_values=True)

    permissions: list[Permission]

    @field_validator("permissions", mode="before")
    @classmethod
    def _dedupe(cls, v):
        return normalize_permissions(v)


class ValidateKeyRequest(BaseModel):
    """Request body for POST /api/v1/keys/validate.

    Fields are optional at the schema level so the endpoint can answer a
    missing value with a 400 instead of a 422.
    """

    consumer_key: Optional[str] = None
    consumer_secret: Optional[str] = None


class CheckPermissionRequest(BaseModel):
    """Request body for POST /api/v1/keys/check-permission."""

    consumer_key: Optional[str] = None
    permission: Optional[str] = None
