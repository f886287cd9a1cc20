"""
Logging configuration for sql2orm.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import MutableMapping
from enum import Enum
from typing import Any, TextIO

from sql2orm.logging.context import ContextFilter
from sql2orm.logging.formatters import JSONFormatter, TextFormatter

ROOT_LOGGER = "sql2orm"

# Keyword arguments understood by Logger.log itself; all others are fields.
_LOGGER_KWARGS = frozenset({"exc_info", "stack_info", "stacklevel", "extra"})


class LogLevel(str, Enum):
    """Log level options."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"

    @property
    def number(self) -> int:
        return getattr(logging, self.value)


class LogFormat(str, Enum):
    """Log format options."""

    JSON = "json"
    TEXT = "text"


class Sql2OrmLogger(logging.LoggerAdapter):
    """
    Logger adapter that turns keyword arguments into structured fields.

    Example:
        logger = get_logger("sql2orm.pipeline")
        logger.info("Parsed table", field_count=3, duration_ms=1.2)
    """

    def process(
        self, msg: Any, kwargs: MutableMapping[str, Any]
    ) -> tuple[Any, MutableMapping[str, Any]]:
        fields = {key: kwargs.pop(key) for key in list(kwargs) if key not in _LOGGER_KWARGS}
        kwargs["extra"] = {**(self.extra or {}), **(kwargs.get("extra") or {}), **fields}
        return msg, kwargs

    def is_enabled_for(self, level: int | LogLevel) -> bool:
        """Check if logger is enabled for the given level."""
        if isinstance(level, LogLevel):
            level = level.number
        return self.isEnabledFor(level)


def get_logger(name: str) -> Sql2OrmLogger:
    """
    Get a sql2orm logger by name.

    Args:
        name: Logger name (typically the module name)
    """
    return Sql2OrmLogger(logging.getLogger(name), {})


def configure_logging(
    level: LogLevel | str = LogLevel.WARNING,
    format: LogFormat | str = LogFormat.TEXT,
    output: TextIO | None = None,
    include_context: bool = True,
    use_colors: bool | None = None,
) -> None:
    """
    Configure sql2orm logging.

    Replaces any handler installed by an earlier call, so the command line
    and tests can reconfigure freely.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format: Output format (text for terminals, json for log collectors)
        output: Output stream (defaults to stderr)
        include_context: Whether to inject conversion context fields
        use_colors: Color text output; None colors only when output is a TTY

    Example:
        configure_logging(level="DEBUG", format="json")
    """
    level = LogLevel(level.upper()) if isinstance(level, str) else level
    format = LogFormat(format.lower()) if isinstance(format, str) else format
    output = sys.stderr if output is None else output

    handler = logging.StreamHandler(output)
    handler.setLevel(level.number)

    if format == LogFormat.JSON:
        handler.setFormatter(JSONFormatter(include_extra=True))
    else:
        if use_colors is None:
            use_colors = bool(getattr(output, "isatty", lambda: False)())
        handler.setFormatter(TextFormatter(use_colors=use_colors))

    if include_context:
        handler.addFilter(ContextFilter())

    package_logger = logging.getLogger(ROOT_LOGGER)
    package_logger.handlers.clear()
    package_logger.addHandler(handler)
    package_logger.setLevel(level.number)
    package_logger.propagate = False
