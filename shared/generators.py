"""
Credential generators — pure, side-effect-free functions.

Every value comes from the ``secrets`` CSPRNG. Keys and secrets are drawn
independently, so neither can be derived from the other.
"""

from __future__ import annotations

import secrets

CONSUMER_KEY_PREFIX = "ck_"
CONSUMER_SECRET_PREFIX = "cs_"

# 16 random bytes -> 32 lowercase hex characters
_TOKEN_BYTES = 16


def generate_consumer_key() -> str:
    """Generate a public consumer key: ``ck_`` followed by 32 hex chars."""
    return CONSUMER_KEY_PREFIX + secrets.token_hex(_TOKEN_BYTES)


def generate_consumer_secret() -> str:
    """Generate a consumer secret: ``cs_`` followed by 32 hex chars."""
    return CONSUMER_SECRET_PREFIX + secrets.token_hex(_TOKEN_BYTES)


def generate_credentials() -> tuple[str, str]:
    """Generate a fresh ``(consumer_key, consumer_secret)`` pair.

    Nothing is persisted here; the caller hashes the secret and stores
    the record.
    """
    return generate_consumer_key(), generate_consumer_secret()
