"""
API key document model.

Maps to the `api_keys` MongoDB collection.

consumer_secret_hash stores SHA-256(consumer_secret); the plaintext secret is
shown once at creation and never stored. consumer_key is public and unique.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import ConfigDict, field_validator

from schemas.models.base import MongoDocument


class Permission(str, Enum):
    READ = "read"
    WRITE = "write"
    DELETE = "delete"


class KeyStatus(str, Enum):
    ACTIVE = "active"
    REVOKED = "revoked"


def normalize_permissions(values, *, strict: bool = True) -> list[str]:
    """Validate permission tags and drop duplicates, keeping first-seen order.

    Unknown tags raise ValueError, or are skipped when *strict* is False.
    """
    seen: list[str] = []
    for value in values or []:
        try:
            tag = Permission(value).value
        except ValueError:
            if strict:
                raise
            continue
        if tag not in seen:
            seen.append(tag)
    return seen


class ApiKeyDoc(MongoDocument):
    """Document model for the `api_keys` collection."""

    model_config = ConfigDict(
        populate_by_name=True,
        arbitrary_types_allowed=True,
        use_enum_values=True,
        validate_default=True,
    )

    owner_id: str
    consumer_key: str
    consumer_secret_hash: str
    description: str = ""
    permissions: list[Permission] = []
    status: KeyStatus = KeyStatus.ACTIVE
    created_at: Optional[datetime] = None
    last_used: Optional[datetime] = None

    @field_validator("permissions", mode="before")
    @classmethod
    def _dedupe_permissions(cls, v):
        # stored records may carry tags this service no longer grants
        return normalize_permissions(v, strict=False)
