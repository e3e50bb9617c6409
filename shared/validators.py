"""
Identifier format validators — pure functions.
"""

from __future__ import annotations

import re

from bson import ObjectId

UUID_RE = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$",
    re.IGNORECASE,
)


def is_valid_uuid(value: object) -> bool:
    """Return True if *value* is a string in canonical 8-4-4-4-12 UUID form."""
    return isinstance(value, str) and bool(UUID_RE.match(value))


def is_valid_object_id(value: object) -> bool:
    """Return True if *value* can be used as a record ``_id``."""
    if isinstance(value, ObjectId):
        return True
    return isinstance(value, str) and ObjectId.is_valid(value)
