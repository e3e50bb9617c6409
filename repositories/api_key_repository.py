"""
Repository for the `api_keys` collection.

Lifecycle mutations are always filtered by ``(_id, owner_id)`` so an owner can
only touch their own keys. Lookups by consumer key are global: the caller has
not proven ownership yet, that is what validation is for.

Every PyMongoError (timeouts included) is re-raised as StorageError so the
auth path fails closed. A duplicate consumer key surfaces as ConflictError.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from bson import ObjectId
from pymongo import ASCENDING, DESCENDING
from pymongo.asynchronous.collection import AsyncCollection
from pymongo.errors import DuplicateKeyError, PyMongoError

from errors import ConflictError, StorageError
from schemas.models.api_key import ApiKeyDoc, KeyStatus, normalize_permissions
from shared.logging import get_logger
from shared.validators import is_valid_object_id

log = get_logger(__name__)


class ApiKeyRepository:
    def __init__(self, collection: AsyncCollection) -> None:
        self._col = collection

    async def ensure_indexes(self) -> None:
        try:
            await self._col.create_index([("consumer_key", ASCENDING)], unique=True)
            await self._col.create_index(
                [("owner_id", ASCENDING), ("created_at", DESCENDING)]
            )
        except PyMongoError as exc:
            raise StorageError(f"index creation failed: {exc}") from exc

    async def insert(self, doc: ApiKeyDoc) -> ApiKeyDoc:
        """Persist *doc* and return it with its generated ``id``."""
        if doc.created_at is None:
            doc = doc.model_copy(update={"created_at": datetime.now(timezone.utc)})
        try:
            result = await self._col.insert_one(doc.to_mongo())
        except DuplicateKeyError as exc:
            raise ConflictError("consumer key already exists") from exc
        except PyMongoError as exc:
            raise StorageError(f"insert failed: {exc}") from exc
        return doc.model_copy(update={"id": result.inserted_id})

    async def find_by_consumer_key(
        self, consumer_key: str, *, active_only: bool = True
    ) -> Optional[ApiKeyDoc]:
        query: dict = {"consumer_key": consumer_key}
        if active_only:
            query["status"] = KeyStatus.ACTIVE.value
        try:
            raw = await self._col.find_one(query)
        except PyMongoError as exc:
            raise StorageError(f"lookup failed: {exc}") from exc
        return ApiKeyDoc.from_mongo(raw)

    async def list_by_owner(self, owner_id: str) -> list[ApiKeyDoc]:
        """Return every key owned by *owner_id*, newest first."""
        try:
            cursor = self._col.find({"owner_id": owner_id}).sort("created_at", DESCENDING)
            rows = await cursor.to_list(length=None)
        except PyMongoError as exc:
            raise StorageError(f"list failed: {exc}") from exc
        return [ApiKeyDoc.from_mongo(row) for row in rows]

    async def _update_owned(self, key_id: str, owner_id: str, values: dict) -> bool:
        """Apply ``$set`` to the owned record. True when a record matched."""
        if not is_valid_object_id(key_id):
            return False
        try:
            result = await self._col.update_one(
                {"_id": ObjectId(key_id), "owner_id": owner_id},
                {"$set": values},
            )
        except PyMongoError as exc:
            raise StorageError(f"update failed: {exc}") from exc
        # matched, not modified: re-applying the same value still counts
        return result.matched_count == 1

    async def update_status(self, key_id: str, owner_id: str, status: KeyStatus) -> bool:
        return await self._update_owned(key_id, owner_id, {"status": KeyStatus(status).value})

    async def update_description(self, key_id: str, owner_id: str, description: str) -> bool:
        return await self._update_owned(key_id, owner_id, {"description": description})

    async def update_permissions(self, key_id: str, owner_id: str, permissions) -> bool:
        return await self._update_owned(
            key_id, owner_id, {"permissions": normalize_permissions(permissions)}
        )

    async def touch_last_used(self, key_id, timestamp: datetime) -> None:
        """Advance ``last_used`` to *timestamp* unless a newer value is stored."""
        kid = key_id if isinstance(key_id, ObjectId) else ObjectId(key_id)
        try:
            await self._col.update_one(
                {
                    "_id": kid,
                    "$or": [
                        {"last_used": None},
                        {"last_used": {"$lt": timestamp}},
                    ],
                },
                {"$set": {"last_used": timestamp}},
            )
        except PyMongoError as exc:
            raise StorageError(f"last_used update failed: {exc}") from exc

    async def find_permissions(self, consumer_key: str) -> Optional[list[str]]:
        """Return the permission tags of an active key, or None."""
        try:
            raw = await self._col.find_one(
                {"consumer_key": consumer_key, "status": KeyStatus.ACTIVE.value},
                {"permissions": 1},
            )
        except PyMongoError as exc:
            raise StorageError(f"permission lookup failed: {exc}") from exc
        if raw is None:
            return None
        return list(raw.get("permissions") or [])
