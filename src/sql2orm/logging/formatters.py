"""
Log formatters for sql2orm.

JSON lines for log collectors, one readable line per record for terminals.
Both render the conversion context (table, source, output) and any keyword
fields passed to the logger.
"""

from __future__ import annotations

import json
import logging
import traceback
from datetime import datetime, timezone
from typing import Any

from sql2orm.logging.context import CONTEXT_FIELDS

# Attributes present on every LogRecord; anything else on a record came from
# the caller (``extra=``) or from the context filter.
RECORD_ATTRIBUTES = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None))
) | {"message", "asctime", "taskName"}


def record_fields(record: logging.LogRecord) -> dict[str, Any]:
    """Caller-supplied fields of a record, excluding context and duration."""
    return {
        key: value
        for key, value in record.__dict__.items()
        if key not in RECORD_ATTRIBUTES
        and key not in CONTEXT_FIELDS
        and key != "duration_ms"
        and not key.startswith("_")
    }


def _json_safe(value: Any) -> Any:
    try:
        json.dumps(value)
    except (TypeError, ValueError):
        return str(value)
    return value


class JSONFormatter(logging.Formatter):
    """
    JSON-structured log formatter.

    Each record becomes one JSON object with ``timestamp``, ``level``,
    ``logger`` and ``message``, the context fields that are set,
    ``duration_ms`` and ``exception`` when present, and the remaining
    keyword fields under ``extra``.
    """

    def __init__(self, include_extra: bool = True) -> None:
        """
        Initialize the JSON formatter.

        Args:
            include_extra: Whether to include keyword fields passed to the logger
        """
        super().__init__()
        self.include_extra = include_extra

    def format(self, record: logging.LogRecord) -> str:
        """Format the log record as JSON."""
        payload: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        payload.update(
            (name, getattr(record, name))
            for name in (*CONTEXT_FIELDS, "duration_ms")
            if getattr(record, name, None) is not None
        )

        if record.exc_info:
            exc_type, exc_value, _ = record.exc_info
            payload["exception"] = {
                "type": exc_type.__name__ if exc_type else None,
                "message": str(exc_value) if exc_value else None,
                "traceback": traceback.format_exception(*record.exc_info),
            }

        if self.include_extra:
            extra = {key: _json_safe(value) for key, value in record_fields(record).items()}
            if extra:
                payload["extra"] = extra

        return json.dumps(payload, default=str, ensure_ascii=False)


class TextFormatter(logging.Formatter):
    """
    Human-readable text formatter.

    Example:
        2024-01-01 12:00:00 INFO     sql2orm.pipeline [table_name=ny_order, source=ddl]: Parsed table field_count=3 (1.2ms)
    """

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    # Context fields shown in brackets; the rest render with the other fields.
    BRACKETED = ("table_name", "source")

    def __init__(self, use_colors: bool = True) -> None:
        """
        Initialize the text formatter.

        Args:
            use_colors: Whether to color the level name with ANSI codes
        """
        super().__init__()
        self.use_colors = use_colors

    def format(self, record: logging.LogRecord) -> str:
        """Format the log record as one line (plus traceback, if any)."""
        timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S")

        level = f"{record.levelname:8}"
        if self.use_colors and record.levelname in self.COLORS:
            level = f"{self.COLORS[record.levelname]}{level}{self.RESET}"

        bracketed = [
            f"{name}={getattr(record, name)}"
            for name in self.BRACKETED
            if getattr(record, name, None) is not None
        ]
        context = f" [{', '.join(bracketed)}]" if bracketed else ""

        trailing = {
            name: getattr(record, name)
            for name in CONTEXT_FIELDS
            if name not in self.BRACKETED and getattr(record, name, None) is not None
        }
        trailing.update(record_fields(record))
        fields = "".join(f" {key}={value}" for key, value in trailing.items())

        duration = getattr(record, "duration_ms", None)
        timing = f" ({duration:.1f}ms)" if duration is not None else ""

        line = f"{timestamp} {level} {record.name}{context}: {record.getMessage()}{fields}{timing}"
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line
