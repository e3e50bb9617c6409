"""
Shared test fixtures.

InMemoryApiKeyRepository mirrors ApiKeyRepository's contract (owner-scoped
mutations, active-only lookups, monotonic last_used, ConflictError on a
duplicate consumer key) without a MongoDB server. Setting ``fail = True``
makes every call raise StorageError.
"""

import copy
from datetime import datetime, timezone

import pytest
from bson import ObjectId

from errors import ConflictError, StorageError
from schemas.models.api_key import ApiKeyDoc, KeyStatus, normalize_permissions
from services.api_key_auth import ApiKeyAuthenticator
from services.api_key_service import ApiKeyService


class InMemoryApiKeyRepository:
    def __init__(self):
        self.docs: dict[ObjectId, dict] = {}
        self.fail = False
        self.touches: list[tuple[ObjectId, datetime]] = []

    def _check(self):
        if self.fail:
            raise StorageError("store unreachable")

    def _owned(self, key_id, owner_id):
        if not ObjectId.is_valid(str(key_id)):
            return None
        doc = self.docs.get(ObjectId(str(key_id)))
        if doc is None or doc["owner_id"] != owner_id:
            return None
        return doc

    async def ensure_indexes(self):
        self._check()

    async def insert(self, doc):
        self._check()
        if any(d["consumer_key"] == doc.consumer_key for d in self.docs.values()):
            raise ConflictError("consumer key already exists")
        data = doc.to_mongo()
        data["_id"] = ObjectId()
        if data.get("created_at") is None:
            data["created_at"] = datetime.now(timezone.utc)
        self.docs[data["_id"]] = data
        return ApiKeyDoc.from_mongo(copy.deepcopy(data))

    async def find_by_consumer_key(self, consumer_key, *, active_only=True):
        self._check()
        for data in self.docs.values():
            if data["consumer_key"] != consumer_key:
                continue
            if active_only and data["status"] != KeyStatus.ACTIVE.value:
                return None
            return ApiKeyDoc.from_mongo(copy.deepcopy(data))
        return None

    async def list_by_owner(self, owner_id):
        self._check()
        rows = [d for d in self.docs.values() if d["owner_id"] == owner_id]
        # newest first; equal timestamps fall back to insertion order
        rows = sorted(reversed(rows), key=lambda d: d["created_at"], reverse=True)
        return [ApiKeyDoc.from_mongo(copy.deepcopy(d)) for d in rows]

    async def _update(self, key_id, owner_id, values):
        self._check()
        doc = self._owned(key_id, owner_id)
        if doc is None:
            return False
        doc.update(values)
        return True

    async def update_status(self, key_id, owner_id, status):
        return await self._update(key_id, owner_id, {"status": KeyStatus(status).value})

    async def update_description(self, key_id, owner_id, description):
        return await self._update(key_id, owner_id, {"description": description})

    async def update_permissions(self, key_id, owner_id, permissions):
        return await self._update(
            key_id, owner_id, {"permissions": normalize_permissions(permissions)}
        )

    async def touch_last_used(self, key_id, timestamp):
        self._check()
        self.touches.append((key_id, timestamp))
        doc = self.docs.get(ObjectId(str(key_id)))
        if doc is None:
            return
        if doc.get("last_used") is None or doc["last_used"] < timestamp:
            doc["last_used"] = timestamp

    async def find_permissions(self, consumer_key):
        self._check()
        for data in self.docs.values():
            if data["consumer_key"] == consumer_key and data["status"] == KeyStatus.ACTIVE.value:
                return list(data["permissions"])
        return None


@pytest.fixture
def repo():
    return InMemoryApiKeyRepository()


@pytest.fixture
def authenticator(repo):
    return ApiKeyAuthenticator(repo)


@pytest.fixture
def service(repo):
    return ApiKeyService(repo)
