"""
API key lifecycle management on behalf of the key owner.

Every operation takes the owner id supplied by the upstream auth layer and
acts only on records owned by it. Issuance is all-or-nothing: the plaintext
secret is returned only after its hash has been stored, and it is never
retrievable again.
"""

from __future__ import annotations

from typing import Iterable, Optional

from errors import ConflictError, IdentityError, NotFoundError, StorageError
from repositories.api_key_repository import ApiKeyRepository
from schemas.dto.responses.api_key import ApiKeyCreatedResponse, ApiKeyResponse
from schemas.models.api_key import (
    ApiKeyDoc,
    KeyStatus,
    Permission,
    normalize_permissions,
)
from shared.crypto import hash_secret
from shared.generators import generate_credentials
from shared.logging import get_logger
from shared.validators import is_valid_uuid

log = get_logger(__name__)


def to_api_key_response(doc: ApiKeyDoc) -> ApiKeyResponse:
    """Owner-visible view of *doc*; the secret hash is left behind."""
    return ApiKeyResponse(
        id=str(doc.id),
        consumer_key=doc.consumer_key,
        description=doc.description,
        permissions=list(doc.permissions),
        status=doc.status,
        created_at=doc.created_at,
        last_used=doc.last_used,
    )


class ApiKeyService:
    def __init__(
        self,
        repository: ApiKeyRepository,
        *,
        allow_owner_fallback: bool = False,
        fallback_owner_id: Optional[str] = None,
        issue_max_attempts: int = 3,
    ) -> None:
        self._repo = repository
        self._allow_fallback = allow_owner_fallback
        self._fallback_owner_id = fallback_owner_id
        self._issue_max_attempts = max(1, issue_max_attempts)

    def resolve_owner_id(self, owner_id: Optional[str]) -> str:
        """Return *owner_id* if it is a UUID.

        Otherwise substitute the fallback owner when that is enabled, or raise
        IdentityError.
        """
        if is_valid_uuid(owner_id):
            return owner_id  # type: ignore[return-value]
        if self._allow_fallback and self._fallback_owner_id:
            log.warning(
                "owner_id_fallback",
                reason="invalid_owner_id",
                fallback_owner_id=self._fallback_owner_id,
            )
            return self._fallback_owner_id
        raise IdentityError("A valid owner id is required")

    async def issue(
        self,
        owner_id: Optional[str],
        description: str = "",
        permissions: Optional[Iterable] = None,
    ) -> ApiKeyCreatedResponse:
        owner = self.resolve_owner_id(owner_id)
        tags = normalize_permissions(
            [Permission.READ] if permissions is None else permissions
        )

        for attempt in range(1, self._issue_max_attempts + 1):
            consumer_key, consumer_secret = generate_credentials()
            doc = ApiKeyDoc(
                owner_id=owner,
                consumer_key=consumer_key,
                consumer_secret_hash=hash_secret(consumer_secret),
                description=description,
                permissions=tags,
                status=KeyStatus.ACTIVE,
            )
            try:
                stored = await self._repo.insert(doc)
            except ConflictError:
                log.warning("api_key_collision", owner_id=owner, attempt=attempt)
                continue
            except StorageError:
                log.error("api_key_creation_failed", owner_id=owner, error="database_error")
                raise

            log.info(
                "api_key_issued",
                owner_id=owner,
                key_id=str(stored.id),
                key_prefix=consumer_key[:11],
                permissions=tags,
            )
            view = to_api_key_response(stored)
            return ApiKeyCreatedResponse(**view.model_dump(), consumer_secret=consumer_secret)

        log.error("api_key_creation_failed", owner_id=owner, error="key_collision")
        raise StorageError("could not allocate a unique consumer key")

    async def list_keys(self, owner_id: Optional[str]) -> list[ApiKeyResponse]:
        owner = self.resolve_owner_id(owner_id)
        docs = await self._repo.list_by_owner(owner)
        return [to_api_key_response(doc) for doc in docs]

    def _require(self, ok: bool, action: str, key_id: str, owner: str) -> None:
        if not ok:
            log.warning(
                "api_key_update_failed",
                owner_id=owner,
                key_id=key_id,
                action=action,
                reason="not_found_or_access_denied",
            )
            raise NotFoundError("API key not found")
        log.info("api_key_updated", owner_id=owner, key_id=key_id, action=action)

    async def revoke(self, key_id: str, owner_id: Optional[str]) -> None:
        owner = self.resolve_owner_id(owner_id)
        ok = await self._repo.update_status(key_id, owner, KeyStatus.REVOKED)
        self._require(ok, "revoked", key_id, owner)

    async def activate(self, key_id: str, owner_id: Optional[str]) -> None:
        owner = self.resolve_owner_id(owner_id)
        ok = await self._repo.update_status(key_id, owner, KeyStatus.ACTIVE)
        self._require(ok, "activated", key_id, owner)

    async def update_description(
        self, key_id: str, owner_id: Optional[str], description: str
    ) -> None:
        owner = self.resolve_owner_id(owner_id)
        ok = await self._repo.update_description(key_id, owner, description)
        self._require(ok, "description_updated", key_id, owner)

    async def update_permissions(
        self, key_id: str, owner_id: Optional[str], permissions: Iterable
    ) -> None:
        owner = self.resolve_owner_id(owner_id)
        ok = await self._repo.update_permissions(
            key_id, owner, normalize_permissions(permissions)
        )
        self._require(ok, "permissions_updated", key_id, owner)
