"""
Cryptographic helpers — consumer secret hashing and verification.

Secrets are hashed with unsalted SHA-256. Consumer secrets carry 128 bits
of CSPRNG output, and stored digests must stay comparable with the ones
already written by the dashboard.
"""

from __future__ import annotations

import hashlib
import hmac


def hash_secret(secret: str) -> str:
    """Return the hex-encoded SHA-256 digest of *secret*.

    Args:
        secret: The plaintext consumer secret (``cs_...``).

    Returns:
        64-character lowercase hex string.
    """
    return hashlib.sha256(secret.encode("utf-8")).hexdigest()


def verify_secret(secret: str, secret_hash: str) -> bool:
    """Check *secret* against a stored *secret_hash*.

    Returns:
        ``True`` when the recomputed digest matches, ``False`` otherwise.
    """
    if not secret_hash:
        return False
    return hmac.compare_digest(hash_secret(secret), secret_hash)
