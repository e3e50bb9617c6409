"""
Catalog endpoints for third-party integrations, protected by API key.

GET /api/v1/catalog/{resource} — resource is one of categories, products, vendors.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends

from dependencies import get_record_store, require_api_key
from repositories.record_store import RecordStore
from schemas.dto.responses.common import API_KEY_ERROR_RESPONSES, ErrorResponse
from services.credentials import Credentials

router = APIRouter(prefix="/catalog", tags=["catalog"], responses=API_KEY_ERROR_RESPONSES)


@router.get(
    "/{resource}",
    responses={404: {"model": ErrorResponse, "description": "Unknown resource"}},
)
async def list_catalog_records(
    resource: str,
    _: Credentials = Depends(require_api_key()),
    store: RecordStore = Depends(get_record_store),
) -> list[dict[str, Any]]:
    """Return the records of *resource*. Requires the ``read`` permission."""
    return await store.list_records(resource)
