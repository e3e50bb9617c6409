"""
Credential extraction from inbound requests.

Precedence, first match wins:
  1. ``Authorization: Basic base64(consumer_key:consumer_secret)``
  2. ``?consumer_key=...&consumer_secret=...`` query parameters

A malformed Basic header is treated as no header at all and falls through
to the query parameters; it never raises.
"""

from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass
from typing import Mapping, Optional

from fastapi import Request

BASIC_PREFIX = "Basic "


@dataclass(frozen=True)
class Credentials:
    consumer_key: str
    consumer_secret: str

    @property
    def key_prefix(self) -> str:
        """Loggable fragment of the consumer key."""
        return self.consumer_key[:11]


def parse_basic_header(value: Optional[str]) -> Optional[Credentials]:
    """Decode a ``Basic`` Authorization header value, or return None."""
    if not value or not value.startswith(BASIC_PREFIX):
        return None
    encoded = value[len(BASIC_PREFIX):].strip()
    try:
        decoded = base64.b64decode(encoded, validate=True).decode("utf-8")
    except (binascii.Error, ValueError):
        return None
    key, sep, secret = decoded.partition(":")
    if not sep or not key or not secret:
        return None
    return Credentials(consumer_key=key, consumer_secret=secret)


def extract_credentials(
    headers: Mapping[str, str], query_params: Mapping[str, str]
) -> Optional[Credentials]:
    """Pull the presented credential out of *headers* / *query_params*."""
    header = headers.get("authorization") or headers.get("Authorization")
    from_header = parse_basic_header(header)
    if from_header is not None:
        return from_header

    key = query_params.get("consumer_key")
    secret = query_params.get("consumer_secret")
    if key and secret:
        return Credentials(consumer_key=key, consumer_secret=secret)
    return None


def extract_from_request(request: Request) -> Optional[Credentials]:
    return extract_credentials(request.headers, request.query_params)
