"""Logging setup for the feed service.

Every record carries the request id and, on authenticated feed routes, the
subscriber's username. Context passed through ``extra=`` is kept when it is
one of ``CONTEXT_FIELDS``.
"""

from __future__ import annotations

import json
import logging
import re
import sys
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from .config import settings


request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)
subscriber_var: ContextVar[Optional[str]] = ContextVar("subscriber", default=None)

CONTEXT_FIELDS = (
    "method",
    "path",
    "status_code",
    "duration_ms",
    "subscriber_id",
    "analyst",
    "zone_id",
    "items",
)

# JWTs are three base64url segments; bearer values and session cookies carry them
_JWT_PATTERN = re.compile(r"eyJ[\w-]+\.[\w-]+\.[\w-]+")
_BEARER_PATTERN = re.compile(r"(bearer\s+)\S+", re.IGNORECASE)


def _context(record: logging.LogRecord) -> Dict[str, Any]:
    fields: Dict[str, Any] = {}
    request_id = request_id_var.get()
    if request_id:
        fields["request_id"] = request_id
    subscriber = subscriber_var.get()
    if subscriber:
        fields["subscriber"] = subscriber
    for name in CONTEXT_FIELDS:
        value = getattr(record, name, None)
        if value is not None:
            fields[name] = value
    return fields


class StructuredFormatter(logging.Formatter):
    """One JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **_context(record),
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        if settings.debug:
            log_data["location"] = f"{record.filename}:{record.lineno} {record.funcName}"

        return json.dumps(log_data, default=str)


class TextFormatter(logging.Formatter):
    """Human-readable text formatter for development."""

    def format(self, record: logging.LogRecord) -> str:
        context = _context(record)
        request_id = context.pop("request_id", None)
        rid = f"[{request_id[:8]}] " if request_id else ""
        timestamp = datetime.fromtimestamp(record.created, timezone.utc).strftime("%H:%M:%S")
        line = f"{timestamp} {record.levelname:8} {rid}{record.name}: {record.getMessage()}"
        if context:
            line += " " + " ".join(f"{k}={v}" for k, v in context.items())

        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


class TokenRedactionFilter(logging.Filter):
    """Mask bearer tokens and JWTs before they reach a handler."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        redacted = _BEARER_PATTERN.sub(r"\1[REDACTED]", message)
        redacted = _JWT_PATTERN.sub("[REDACTED]", redacted)
        if redacted != message:
            record.msg = redacted
            record.args = None
        return True


def setup_logging(level: str | None = None, log_format: str | None = None) -> None:
    """Install a single stdout handler on the root logger."""
    level_name = level or settings.log_level
    root_logger = logging.getLogger()
    root_logger.setLevel(level_name)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    if (log_format or settings.log_format) == "json":
        handler.setFormatter(StructuredFormatter())
    else:
        handler.setFormatter(TextFormatter())
    handler.addFilter(TokenRedactionFilter())
    root_logger.addHandler(handler)

    # Request logging middleware already covers access lines
    for noisy in ("uvicorn.access", "sqlalchemy.engine", "asyncpg"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the ``analystfeed`` namespace."""
    return logging.getLogger(f"analystfeed.{name}")
