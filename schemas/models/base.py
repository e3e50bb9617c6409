"""
Shared pieces for MongoDB document models.

ObjectIdField lets pydantic accept either a BSON ObjectId or its 24-char hex
string and serializes it back to a string in JSON mode.
"""

from __future__ import annotations

from typing import Any, Optional, Type, TypeVar

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field, GetCoreSchemaHandler
from pydantic_core import core_schema

DocT = TypeVar("DocT", bound="MongoDocument")


class ObjectIdField(ObjectId):
    @classmethod
    def __get_pydantic_core_schema__(
        cls, source_type: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        return core_schema.no_info_plain_validator_function(
            cls.coerce,
            serialization=core_schema.to_string_ser_schema(),
        )

    @classmethod
    def coerce(cls, value: Any) -> ObjectId:
        if isinstance(value, ObjectId):
            return value
        if isinstance(value, str) and ObjectId.is_valid(value):
            return ObjectId(value)
        raise ValueError(f"not a valid ObjectId: {value!r}")


class MongoDocument(BaseModel):
    """A stored document whose ``_id`` is exposed as ``id``."""

    model_config = ConfigDict(
        populate_by_name=True,
        arbitrary_types_allowed=True,
    )

    id: Optional[ObjectIdField] = Field(default=None, alias="_id")

    def to_mongo(self) -> dict:
        """Dump for pymongo writes. An unset ``_id`` is left out so the server assigns one."""
        data = self.model_dump(by_alias=True)
        if data.get("_id") is None:
            data.pop("_id", None)
        return data

    @classmethod
    def from_mongo(cls: Type[DocT], raw: Optional[dict]) -> Optional[DocT]:
        """Validate a raw document; ``None`` (no match) stays ``None``."""
        if raw is None:
            return None
        return cls.model_validate(raw)
