"""
Structured JSON logging with per-request ``request_id``.

Usage:
    Call ``setup_logging()`` once at startup.
    The middleware in ``main.py`` sets ``request_id`` in ``contextvars``
    so every log line includes it automatically.

Diagnostic extras passed via ``logger.warning(..., extra={...})`` are
copied into the JSON line when their key is listed in ``DIAGNOSTIC_FIELDS``.
"""

from __future__ import annotations

import contextvars
import json
import logging
import sys
import uuid
from datetime import datetime, timezone

# Context variable for request tracing
request_id_ctx: contextvars.ContextVar[str] = contextvars.ContextVar(
    "request_id", default="-"
)

DIAGNOSTIC_FIELDS = ("feature", "raw_text", "cleaned_text", "missing_fields", "user_id")


class JSONFormatter(logging.Formatter):
    """Emit each log record as a single JSON line."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "request_id": request_id_ctx.get("-"),
        }
        for field in DIAGNOSTIC_FIELDS:
            if field in record.__dict__:
                log_entry[field] = record.__dict__[field]
        if record.exc_info and record.exc_info[1]:
            log_entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_entry, default=str)


def setup_logging(level: str = "INFO") -> None:
    """Configure root logger with JSON output to stdout."""
    root = logging.getLogger()
    root.setLevel(level.upper())

    # Remove existing handlers
    for h in root.handlers[:]:
        root.removeHandler(h)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter())
    root.addHandler(handler)


def new_request_id() -> str:
    """Generate and return a new request id (short UUID)."""
    return uuid.uuid4().hex[:12]
