"""
Request-time API key validation and permission gating.

ApiKeyAuthenticator.validate()          — accept/reject a presented key pair
ApiKeyAuthenticator.check_permission()  — permission gate for a validated key
required_permission_for_method()        — HTTP verb → required permission

Neither method raises for a bad credential; they return booleans and the
HTTP layer picks the 401/403 body. StorageError from the repository is
allowed to propagate so callers deny rather than grant.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable

from repositories.api_key_repository import ApiKeyRepository
from schemas.models.api_key import Permission
from shared.crypto import verify_secret
from shared.logging import get_logger

log = get_logger(__name__)

_METHOD_PERMISSIONS: dict[str, Permission] = {
    "GET": Permission.READ,
    "HEAD": Permission.READ,
    "OPTIONS": Permission.READ,
    "POST": Permission.WRITE,
    "PUT": Permission.WRITE,
    "PATCH": Permission.WRITE,
    "DELETE": Permission.DELETE,
}


def required_permission_for_method(method: str) -> Permission:
    """Map an HTTP verb to the permission it needs. Unknown verbs need ``read``."""
    return _METHOD_PERMISSIONS.get(method.upper(), Permission.READ)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ApiKeyAuthenticator:
    def __init__(
        self,
        repository: ApiKeyRepository,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._repo = repository
        self._clock = clock

    async def validate(self, consumer_key: str, consumer_secret: str) -> bool:
        """Return True when the pair belongs to an active key.

        ``last_used`` is advanced on success only.
        """
        if not consumer_key or not consumer_secret:
            return False

        doc = await self._repo.find_by_consumer_key(consumer_key, active_only=True)
        if doc is None:
            log.warning("api_key_invalid", key_prefix=consumer_key[:11], reason="not_found")
            return False

        if not verify_secret(consumer_secret, doc.consumer_secret_hash):
            log.warning(
                "api_key_invalid",
                key_prefix=consumer_key[:11],
                key_id=str(doc.id),
                reason="secret_mismatch",
            )
            return False

        await self._repo.touch_last_used(doc.id, self._clock())
        return True

    async def check_permission(self, consumer_key: str, permission) -> bool:
        """Return True if the active key holds *permission*.

        Only meaningful after validate() returned True for the same request.
        """
        try:
            required = Permission(permission)
        except ValueError:
            return False

        granted = await self._repo.find_permissions(consumer_key)
        if granted is None:
            return False
        return required.value in granted
