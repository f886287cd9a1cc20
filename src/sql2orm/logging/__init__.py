"""
sql2orm structured logging.

Provides JSON and text formatting plus conversion-scoped context injection.
"""

from sql2orm.logging.config import (
    LogFormat,
    LogLevel,
    Sql2OrmLogger,
    configure_logging,
    get_logger,
)
from sql2orm.logging.context import LogContext, with_log_context
from sql2orm.logging.formatters import JSONFormatter, TextFormatter

__all__ = [
    # Configuration
    "configure_logging",
    "get_logger",
    "Sql2OrmLogger",
    "LogLevel",
    "LogFormat",
    # Formatters
    "JSONFormatter",
    "TextFormatter",
    # Context
    "LogContext",
    "with_log_context",
]
