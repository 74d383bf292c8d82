"""
Unified structured logging for the HTTP API.

All modules log through ``logging.getLogger(__name__)``; this module
owns the JSON format those records are rendered in.

Usage:
    from genie_http_api.shared.logging import configure_root_logger

    configure_root_logger("http-api", "INFO")
    logger.info("Request admitted", extra={
        "correlation_token": token,
        "request_id": request_id,
    })

NEVER LOG:
- Message input or brain output (user content)
- The configured access token or Authorization headers
- Raw user ids (use hash_user_id())
"""

from __future__ import annotations

import hashlib
import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict


def hash_user_id(user_id: str) -> str:
    """
    Create anonymized user identifier.

    Returns first 16 characters of SHA-256 hash.
    """
    if not user_id:
        return "unknown"
    return hashlib.sha256(str(user_id).encode()).hexdigest()[:16]


class StructuredFormatter(logging.Formatter):
    """
    JSON formatter for API logs.

    Produces logs in format:
    {
        "timestamp": "2026-01-30T14:23:45.123Z",
        "level": "INFO",
        "service": "http-api",
        "logger": "genie_http_api.services.admitter",
        "message": "Request admitted",
        ...optional fields...
    }
    """

    ALLOWED_EXTRA_FIELDS = frozenset([
        "correlation_token",
        "request_id",
        "user_id_hash",
        "latency_ms",
        "timeout_ms",
        "error_code",
        "http_method",
        "http_path",
        "http_status",
        "endpoint",
        "pending",
        "extra",
    ])

    # Stripped with a warning marker if a caller passes them
    BLOCKED_FIELDS = frozenset([
        "user_id",
        "input",
        "output",
        "message_body",
        "authorization",
        "access_token",
        "secret",
        "token",
    ])

    def __init__(self, service: str):
        super().__init__()
        self.service = service

    def format(self, record: logging.LogRecord) -> str:
        log_entry: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            "level": record.levelname,
            "service": self.service,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for field in self.ALLOWED_EXTRA_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                log_entry[field] = value

        for field in self.BLOCKED_FIELDS:
            if hasattr(record, field):
                log_entry["_pii_warning"] = f"Blocked field '{field}' was stripped"

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, separators=(",", ":"), ensure_ascii=False, default=str)


def configure_root_logger(service: str, level: str = "INFO") -> None:
    """
    Configure the root logger with structured formatting.

    Call this once at application startup.

    Args:
        service: Service identifier
        level: Log level string (DEBUG, INFO, WARNING, ERROR)
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(StructuredFormatter(service))

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(numeric_level)

    # Suppress noisy libraries
    for lib in ["httpx", "httpcore", "asyncio", "uvicorn.access"]:
        logging.getLogger(lib).setLevel(logging.WARNING)
