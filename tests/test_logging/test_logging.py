"""Tests for structured logging."""

import io
import json
import logging

from sql2orm.logging import (
    JSONFormatter,
    LogContext,
    LogFormat,
    LogLevel,
    TextFormatter,
    configure_logging,
    get_logger,
    with_log_context,
)
from sql2orm.logging.context import get_log_context


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord("sql2orm.test", logging.INFO, __file__, 1, "Parsed table", (), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestLogContext:
    """Tests for context propagation."""

    def test_nested_scopes_merge_and_restore(self):
        with with_log_context(table_name="ny_order"):
            with with_log_context(source="ddl"):
                assert get_log_context() == {"table_name": "ny_order", "source": "ddl"}
            assert get_log_context() == {"table_name": "ny_order"}
        assert get_log_context() == {}

    def test_none_values_dropped(self):
        with with_log_context(table_name="ny_order", output_file=None):
            assert get_log_context() == {"table_name": "ny_order"}

    def test_log_context_object(self):
        context = LogContext(table_name="ny_order", extra={"run": 1})

        with with_log_context(context):
            assert get_log_context() == {"table_name": "ny_order", "run": 1}


class TestFormatters:
    """Tests for the formatters."""

    def test_json(self):
        output = JSONFormatter().format(
            _record(table_name="ny_order", duration_ms=1.5, field_count=3)
        )
        data = json.loads(output)

        assert data["level"] == "INFO"
        assert data["logger"] == "sql2orm.test"
        assert data["message"] == "Parsed table"
        assert data["table_name"] == "ny_order"
        assert data["duration_ms"] == 1.5
        assert data["extra"] == {"field_count": 3}

    def test_json_without_extra(self):
        data = json.loads(JSONFormatter(include_extra=False).format(_record(field_count=3)))

        assert "extra" not in data

    def test_text(self):
        output = TextFormatter(use_colors=False).format(
            _record(table_name="ny_order", source="ddl", duration_ms=2.0)
        )

        assert "INFO" in output
        assert "sql2orm.test [table_name=ny_order, source=ddl]: Parsed table (2.0ms)" in output

    def test_text_fields(self):
        output = TextFormatter(use_colors=False).format(
            _record(table_name="ny_order", output_file="order.py", field_count=3)
        )

        assert output.endswith("[table_name=ny_order]: Parsed table output_file=order.py field_count=3")


class TestConfigureLogging:
    """Tests for configure_logging()."""

    def test_json_lines_with_context(self):
        stream = io.StringIO()
        configure_logging(level=LogLevel.INFO, format=LogFormat.JSON, output=stream)

        with with_log_context(table_name="ny_order", source="ddl"):
            get_logger("sql2orm.pipeline").info("Parsed table", field_count=3)

        data = json.loads(stream.getvalue().strip())
        assert data["logger"] == "sql2orm.pipeline"
        assert data["table_name"] == "ny_order"
        assert data["source"] == "ddl"
        assert data["extra"] == {"field_count": 3}

    def test_level_filters(self):
        stream = io.StringIO()
        configure_logging(level="warning", format="text", output=stream, use_colors=False)

        logger = get_logger("sql2orm.pipeline")
        logger.info("hidden")
        logger.warning("shown")

        assert "hidden" not in stream.getvalue()
        assert "shown" in stream.getvalue()
        assert logger.is_enabled_for(LogLevel.WARNING)
        assert not logger.is_enabled_for(LogLevel.INFO)

    def test_reconfigure_replaces_handler(self):
        configure_logging(output=io.StringIO())
        configure_logging(output=io.StringIO())

        assert len(logging.getLogger("sql2orm").handlers) == 1
