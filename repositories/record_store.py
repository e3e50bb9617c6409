"""
Read-only access to business collections exposed through API keys.

Only the collections in ``CATALOG_COLLECTIONS`` are reachable; records are
returned as JSON-ready dicts with ``_id`` rendered as ``id``.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from bson import Decimal128, ObjectId
from pymongo.asynchronous.database import AsyncDatabase
from pymongo.errors import PyMongoError

from errors import NotFoundError, StorageError

CATALOG_COLLECTIONS = frozenset({"categories", "products", "vendors"})


def _to_json_value(value: Any) -> Any:
    """Convert BSON-only types at any depth into JSON-ready equivalents."""
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, Decimal128):
        return float(value.to_decimal())
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, dict):
        return {k: _to_json_value(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_json_value(v) for v in value]
    return value


def _serialize(doc: dict) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for key, value in doc.items():
        out["id" if key == "_id" else key] = _to_json_value(value)
    return out


class RecordStore:
    def __init__(self, db: AsyncDatabase, max_records: int = 500) -> None:
        self._db = db
        self._max_records = max_records

    async def list_records(self, collection: str) -> list[dict[str, Any]]:
        if collection not in CATALOG_COLLECTIONS:
            raise NotFoundError("Endpoint not found")
        try:
            cursor = self._db[collection].find({}).limit(self._max_records)
            rows = await cursor.to_list(length=None)
        except PyMongoError as exc:
            raise StorageError(f"{collection} query failed: {exc}") from exc
        return [_serialize(row) for row in rows]
