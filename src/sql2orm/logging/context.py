"""
Logging context management for sql2orm.

Lets a conversion scope (one table, one output file) attach its identifying
fields to every log record emitted inside it.
"""

from __future__ import annotations

import contextvars
import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any

# Context variable for storing log context
_log_context: contextvars.ContextVar[dict[str, Any] | None] = contextvars.ContextVar(
    "sql2orm_log_context",
    default=None,
)

# Fields carried by LogContext, in display order.
CONTEXT_FIELDS = ("table_name", "source", "package_name", "output_file")


@dataclass
class LogContext:
    """
    Structured logging context for one conversion.

    Attributes:
        table_name: Table being converted
        source: Where the schema comes from ("ddl" or "database")
        package_name: Package of the generated module
        output_file: Destination of the generated module
        extra: Any additional fields
    """

    table_name: str | None = None
    source: str | None = None
    package_name: str | None = None
    output_file: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a dictionary of non-None values."""
        result = {
            name: getattr(self, name)
            for name in CONTEXT_FIELDS
            if getattr(self, name) is not None
        }
        result.update(self.extra)
        return result


def get_log_context() -> dict[str, Any]:
    """Get the current log context."""
    ctx = _log_context.get()
    return ctx.copy() if ctx else {}


@contextmanager
def with_log_context(
    context: LogContext | dict[str, Any] | None = None,
    **kwargs: Any,
) -> Iterator[None]:
    """
    Context manager for setting log context within a scope.

    Fields are added on top of the enclosing context and the enclosing
    context is restored on exit.

    Example:
        with with_log_context(table_name="ny_order", source="ddl"):
            logger.info("Parsed table")  # Includes table_name and source

    Args:
        context: Optional LogContext or dict of context fields
        **kwargs: Additional context fields
    """
    previous = _log_context.get()

    new_context = previous.copy() if previous else {}
    if context is not None:
        new_context.update(
            context.to_dict() if isinstance(context, LogContext) else context
        )
    new_context.update({k: v for k, v in kwargs.items() if v is not None})
    token = _log_context.set(new_context)

    try:
        yield
    finally:
        _log_context.reset(token)


class ContextFilter(logging.Filter):
    """
    Logging filter that injects context fields into log records.

    Add this filter to handlers or loggers to automatically include
    context fields in all log messages.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        """Add context fields to the log record."""
        for key, value in get_log_context().items():
            if not hasattr(record, key):
                setattr(record, key, value)
        return True
