"""
FastAPI dependency providers.

All injectable dependencies are defined here as plain functions used with
FastAPI's Depends() system. Tests swap any of them via
``app.dependency_overrides``.

require_api_key() is the single guard every API-key protected route uses.
"""

from __future__ import annotations

from typing import Callable, Optional

from fastapi import Depends, Request

from config import AppSettings
from errors import AuthenticationError, ForbiddenError
from repositories.api_key_repository import ApiKeyRepository
from repositories.record_store import RecordStore
from schemas.models.api_key import Permission
from services.api_key_auth import ApiKeyAuthenticator, required_permission_for_method
from services.api_key_service import ApiKeyService
from services.credentials import Credentials, extract_from_request
from shared.logging import get_logger

log = get_logger(__name__)


def get_settings(request: Request) -> AppSettings:
    """Return the AppSettings instance stored on app.state."""
    return request.app.state.settings


async def get_db(request: Request):
    """Return the async MongoDB database from app.state."""
    return request.app.state.db


async def get_api_key_repository(
    request: Request,
    db=Depends(get_db),
) -> ApiKeyRepository:
    collection = request.app.state.settings.api_keys.collection
    return ApiKeyRepository(db[collection])


async def get_record_store(db=Depends(get_db)) -> RecordStore:
    return RecordStore(db)


async def get_authenticator(
    repo: ApiKeyRepository = Depends(get_api_key_repository),
) -> ApiKeyAuthenticator:
    return ApiKeyAuthenticator(repo)


async def get_api_key_service(
    settings: AppSettings = Depends(get_settings),
    repo: ApiKeyRepository = Depends(get_api_key_repository),
) -> ApiKeyService:
    return ApiKeyService(
        repo,
        allow_owner_fallback=settings.api_keys.allow_owner_fallback,
        fallback_owner_id=settings.api_keys.fallback_owner_id,
        issue_max_attempts=settings.api_keys.issue_max_attempts,
    )


async def get_owner_id(
    request: Request,
    settings: AppSettings = Depends(get_settings),
) -> Optional[str]:
    """Return the owner id asserted by the upstream auth layer, if any.

    Format checking and fallback handling happen in ApiKeyService.
    """
    return request.headers.get(settings.api_keys.owner_header)


def require_api_key(permission: Optional[Permission] = None) -> Callable:
    """Build a dependency that authenticates and authorizes the caller's API key.

    When *permission* is None the required permission follows the HTTP verb.
    """

    async def _dependency(
        request: Request,
        authenticator: ApiKeyAuthenticator = Depends(get_authenticator),
    ) -> Credentials:
        credentials = extract_from_request(request)
        if credentials is None:
            raise AuthenticationError("API key is required")

        if not await authenticator.validate(
            credentials.consumer_key, credentials.consumer_secret
        ):
            raise AuthenticationError("Invalid API key")

        required = (
            Permission(permission)
            if permission is not None
            else required_permission_for_method(request.method)
        )
        if not await authenticator.check_permission(credentials.consumer_key, required):
            log.warning(
                "api_key_forbidden",
                key_prefix=credentials.key_prefix,
                required_permission=required.value,
                path=request.url.path,
            )
            raise ForbiddenError(f"API key does not have {required.value} permission")

        request.state.api_key_prefix = credentials.key_prefix
        return credentials

    return _dependency
