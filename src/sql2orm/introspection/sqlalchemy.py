"""
Live database introspection.

Builds a TableSchema from a database catalog through SQLAlchemy's inspector,
as an alternative to parsing CREATE TABLE text.
"""

from typing import Any

from sqlalchemy import create_engine, inspect
from sqlalchemy.engine import Engine
from sqlalchemy.exc import ArgumentError, NoSuchTableError, SQLAlchemyError

from sql2orm.core.errors import IntrospectionError
from sql2orm.core.types import FieldSchema, TableSchema
from sql2orm.logging import get_logger

logger = get_logger(__name__)


class DatabaseIntrospector:
    """
    Introspects database tables to extract schema metadata.

    Usage:
        with DatabaseIntrospector.from_url("mysql+pymysql://u:p@host/db") as introspector:
            schema = introspector.get_table_schema("ny_order")

    An engine created by ``from_url`` is disposed on ``close()``; an engine
    passed in by the caller is left to the caller.
    """

    def __init__(self, engine: Engine, *, owns_engine: bool = False) -> None:
        """
        Initialize with an engine.

        Args:
            engine: SQLAlchemy engine connected to the database to inspect
            owns_engine: Whether close() disposes the engine
        """
        self.engine = engine
        self.owns_engine = owns_engine

    @classmethod
    def from_url(cls, url: str) -> "DatabaseIntrospector":
        """
        Create an introspector from a SQLAlchemy database URL.

        Raises:
            IntrospectionError: The URL is malformed or names an unknown driver
        """
        try:
            return cls(create_engine(url), owns_engine=True)
        except (ArgumentError, ImportError) as exc:
            raise IntrospectionError(f"Cannot create engine for DSN: {exc}") from exc

    def close(self) -> None:
        """Release pooled connections of an owned engine."""
        if self.owns_engine:
            self.engine.dispose()

    def __enter__(self) -> "DatabaseIntrospector":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def list_tables(self) -> list[str]:
        """List all table names, sorted."""
        try:
            return sorted(inspect(self.engine).get_table_names())
        except SQLAlchemyError as exc:
            raise IntrospectionError(f"Failed to list tables: {exc}") from exc

    def get_table_schema(self, table_name: str) -> TableSchema:
        """
        Read one table's columns, primary key and comment.

        Raises:
            IntrospectionError: The table does not exist or the catalog
                query failed
        """
        try:
            inspector = inspect(self.engine)
            columns = inspector.get_columns(table_name)
            primary_keys = inspector.get_pk_constraint(table_name).get(
                "constrained_columns"
            ) or []
            comment = self._get_table_comment(inspector, table_name)
        except NoSuchTableError as exc:
            raise IntrospectionError(
                f"Table '{table_name}' does not exist", table=table_name
            ) from exc
        except SQLAlchemyError as exc:
            raise IntrospectionError(
                f"Failed to read table '{table_name}': {exc}", table=table_name
            ) from exc

        if not columns:
            raise IntrospectionError(
                f"Table '{table_name}' does not exist or has no columns",
                table=table_name,
            )

        logger.debug(
            "Introspected table",
            column_count=len(columns),
            primary_keys=list(primary_keys),
        )

        return TableSchema(
            name=table_name,
            comment=comment,
            fields=[self._introspect_column(column) for column in columns],
            primary_keys=primary_keys,
        )

    def _introspect_column(self, column: dict[str, Any]) -> FieldSchema:
        """Introspect a single reflected column."""
        return FieldSchema(
            name=column["name"],
            native_type=self._render_type(column["type"]),
            nullable=bool(column.get("nullable", True)),
            default_value=self._get_default(column.get("default")),
            comment=column.get("comment") or "",
            is_auto_increment=column.get("autoincrement") is True,
        )

    def _render_type(self, sa_type: Any) -> str:
        """Render a reflected type in the database's own spelling."""
        try:
            return sa_type.compile(dialect=self.engine.dialect).lower()
        except SQLAlchemyError:
            return str(sa_type).lower()

    def _get_default(self, default: str | None) -> str | None:
        """Server default text with one layer of quoting removed."""
        if default is None:
            return None
        text = str(default).strip()
        if len(text) >= 2 and text[0] == text[-1] == "'":
            text = text[1:-1].replace("''", "'")
        return text or None

    def _get_table_comment(self, inspector: Any, table_name: str) -> str:
        """Table comment, or empty when the backend has no table comments."""
        try:
            return inspector.get_table_comment(table_name).get("text") or ""
        except NotImplementedError:
            return ""
