"""
Structured logging for keygate.

Provides:
- get_logger(): Get a configured logger instance
- setup_logging(): One-time structlog + stdlib configuration
- redact_sensitive_fields(): processor that masks credential material

JSON formatting in production, pretty console output in development.
"""

from __future__ import annotations

import logging
import sys
from datetime import datetime, timezone
from typing import Optional

import structlog
from structlog.stdlib import BoundLogger
from structlog.types import EventDict, Processor

REDACTED = "***REDACTED***"

# Exact field names that never reach the log sink
REDACTED_FIELDS = {
    "authorization",
    "consumer_secret",
    "consumer_secret_hash",
    "cookie",
    "password",
    "secret",
}

# Substrings that mark a field as sensitive
_SENSITIVE_MARKERS = ("password", "secret", "token")

_PROTECTED_KEYS = {"level", "event", "timestamp", "logger"}


def get_logger(name: str) -> BoundLogger:
    """
    Get a configured logger instance.

    Example:
        >>> log = get_logger(__name__)
        >>> log.info("api_key_issued", owner_id="...", key_prefix="ck_1a2b3c4d")
    """
    return structlog.get_logger(name)


def add_timestamp(
    logger: logging.Logger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Add ISO format timestamp to event dict."""
    event_dict["timestamp"] = datetime.now(timezone.utc).isoformat()
    return event_dict


def redact_sensitive_fields(
    logger: logging.Logger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Redact sensitive fields from logs."""
    for key in list(event_dict.keys()):
        if key in _PROTECTED_KEYS:
            continue
        lowered = key.lower()
        if lowered in REDACTED_FIELDS or any(
            marker in lowered for marker in _SENSITIVE_MARKERS
        ):
            event_dict[key] = REDACTED
    return event_dict


def configure_structlog(log_format: str = "console") -> None:
    """
    Configure structlog with appropriate processors for the environment.

    Production: JSON formatting for easy parsing
    Development: Pretty console formatting with colors
    """
    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        add_timestamp,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        redact_sensitive_fields,
        structlog.processors.format_exc_info,
    ]

    if log_format == "json":
        renderer: Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=True, pad_event=15, sort_keys=False)

    structlog.configure(
        processors=shared_processors + [renderer],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def configure_stdlib_logging(log_level: str = "INFO") -> None:
    """Route stdlib logging to stdout at *log_level* and quiet noisy libraries."""
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, log_level.upper(), logging.INFO),
    )

    # Silence pymongo debug logs (connection pool, server monitoring, etc.)
    for name in ("pymongo", "pymongo.connection", "pymongo.serverSelection",
                 "pymongo.command", "pymongo.topology"):
        logging.getLogger(name).setLevel(logging.WARNING)


def setup_logging(
    log_level: str = "INFO",
    log_format: str = "console",
    env: Optional[str] = None,
) -> None:
    """
    Initialize logging system for the application.

    Called once from create_app() before anything else logs.
    """
    configure_stdlib_logging(log_level)
    configure_structlog(log_format)

    structlog.get_logger(__name__).info(
        "logging_initialized",
        env=env,
        log_level=log_level,
        log_format=log_format,
    )
