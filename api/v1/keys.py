"""
API key management and verification endpoints.

Owner-facing lifecycle routes identify the owner from the header set by the
upstream auth layer (``X-User-Id`` by default). The validate and
check-permission routes are open utilities that answer with booleans.
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, status

from dependencies import get_api_key_service, get_authenticator, get_owner_id
from errors import ValidationError
from schemas.dto.requests.api_key import (
    CheckPermissionRequest,
    CreateApiKeyRequest,
    UpdateDescriptionRequest,
    UpdatePermissionsRequest,
    ValidateKeyRequest,
)
from schemas.dto.responses.api_key import (
    ApiKeyActionResponse,
    ApiKeyCreatedResponse,
    ApiKeysListResponse,
    PermissionCheckResponse,
    ValidateKeyResponse,
)
from schemas.dto.responses.common import OWNER_ERROR_RESPONSES
from services.api_key_auth import ApiKeyAuthenticator
from services.api_key_service import ApiKeyService

router = APIRouter(prefix="/keys", tags=["api-keys"], responses=OWNER_ERROR_RESPONSES)


@router.post(
    "",
    response_model=ApiKeyCreatedResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_api_key(
    body: CreateApiKeyRequest,
    owner_id: Optional[str] = Depends(get_owner_id),
    service: ApiKeyService = Depends(get_api_key_service),
) -> ApiKeyCreatedResponse:
    """
    Issue a new consumer key / consumer secret pair.

    ## Request Body (JSON)
    - **description** (string, optional): label shown in the key list
    - **permissions** (array, optional): any of `read`, `write`, `delete`;
      defaults to `["read"]`, an empty array grants nothing

    ## Response
    The stored key plus `consumer_secret`. The secret is shown ONLY here;
    it is hashed (SHA-256) before storage and cannot be retrieved later.

    ## Error Responses
    - **401**: Missing or malformed owner id
    - **422**: Unknown permission tag
    - **500**: The key could not be stored; no credential is returned
    """
    return await service.issue(owner_id, body.description, body.permissions)


@router.get("", response_model=ApiKeysListResponse)
async def list_api_keys(
    owner_id: Optional[str] = Depends(get_owner_id),
    service: ApiKeyService = Depends(get_api_key_service),
) -> ApiKeysListResponse:
    """List the caller's keys, newest first. Secrets and hashes are never included."""
    return ApiKeysListResponse(keys=await service.list_keys(owner_id))


@router.post("/{key_id}/revoke", response_model=ApiKeyActionResponse)
async def revoke_api_key(
    key_id: str,
    owner_id: Optional[str] = Depends(get_owner_id),
    service: ApiKeyService = Depends(get_api_key_service),
) -> ApiKeyActionResponse:
    """
    Revoke a key. The record is kept and can be reactivated.

    Revoking an already revoked key succeeds. Returns 404 when the key does
    not exist or belongs to another owner.
    """
    await service.revoke(key_id, owner_id)
    return ApiKeyActionResponse(success=True, action="revoked")


@router.post("/{key_id}/activate", response_model=ApiKeyActionResponse)
async def activate_api_key(
    key_id: str,
    owner_id: Optional[str] = Depends(get_owner_id),
    service: ApiKeyService = Depends(get_api_key_service),
) -> ApiKeyActionResponse:
    await service.activate(key_id, owner_id)
    return ApiKeyActionResponse(success=True, action="activated")


@router.patch("/{key_id}/description", response_model=ApiKeyActionResponse)
async def update_api_key_description(
    key_id: str,
    body: UpdateDescriptionRequest,
    owner_id: Optional[str] = Depends(get_owner_id),
    service: ApiKeyService = Depends(get_api_key_service),
) -> ApiKeyActionResponse:
    await service.update_description(key_id, owner_id, body.description)
    return ApiKeyActionResponse(success=True, action="description_updated")


@router.put("/{key_id}/permissions", response_model=ApiKeyActionResponse)
async def update_api_key_permissions(
    key_id: str,
    body: UpdatePermissionsRequest,
    owner_id: Optional[str] = Depends(get_owner_id),
    service: ApiKeyService = Depends(get_api_key_service),
) -> ApiKeyActionResponse:
    await service.update_permissions(key_id, owner_id, body.permissions)
    return ApiKeyActionResponse(success=True, action="permissions_updated")


@router.post("/validate", response_model=ValidateKeyResponse)
async def validate_api_key(
    body: ValidateKeyRequest,
    authenticator: ApiKeyAuthenticator = Depends(get_authenticator),
) -> ValidateKeyResponse:
    """Answer whether a consumer key / secret pair is currently valid."""
    if not body.consumer_key or not body.consumer_secret:
        raise ValidationError("Consumer key and secret are required")
    valid = await authenticator.validate(body.consumer_key, body.consumer_secret)
    return ValidateKeyResponse(valid=valid)


@router.post("/check-permission", response_model=PermissionCheckResponse)
async def check_api_key_permission(
    body: CheckPermissionRequest,
    authenticator: ApiKeyAuthenticator = Depends(get_authenticator),
) -> PermissionCheckResponse:
    """Answer whether an active key holds a permission. Unknown tags answer false."""
    if not body.consumer_key or not body.permission:
        raise ValidationError("Consumer key and permission are required")
    allowed = await authenticator.check_permission(body.consumer_key, body.permission)
    return PermissionCheckResponse(has_permission=allowed)
