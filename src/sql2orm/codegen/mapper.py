"""
Type and constraint mapping.

Translates native column types into Python annotations and column
constraints into ``mapped_column`` argument fragments.
"""

import re
from collections.abc import Mapping
from enum import Enum

from sql2orm.codegen.generator import string_literal
from sql2orm.core.errors import MappingError
from sql2orm.core.types import NULL, FieldSchema, base_type_name

TAG_SEPARATOR = ", "

# Key under which a column's serialization name is stored in Column.info.
SERIALIZATION_KEY = "json"

_CURRENT_TIMESTAMP_RE = re.compile(
    r"^(CURRENT_TIMESTAMP|NOW|LOCALTIMESTAMP|LOCALTIME)(\(\d*\))?$"
)


class TargetType(str, Enum):
    """Python types a column can be annotated with."""

    INTEGER = "int"
    FLOAT = "float"
    STRING = "str"
    BYTES = "bytes"
    BOOLEAN = "bool"


# Native type families; temporal and structured types are carried as text.
TYPE_FAMILIES: dict[str, TargetType] = {
    # integer
    "tinyint": TargetType.INTEGER,
    "smallint": TargetType.INTEGER,
    "mediumint": TargetType.INTEGER,
    "int": TargetType.INTEGER,
    "integer": TargetType.INTEGER,
    "bigint": TargetType.INTEGER,
    "bool": TargetType.INTEGER,
    "boolean": TargetType.INTEGER,
    # floating / fixed decimal
    "float": TargetType.FLOAT,
    "double": TargetType.FLOAT,
    "real": TargetType.FLOAT,
    "decimal": TargetType.FLOAT,
    "numeric": TargetType.FLOAT,
    # character / text
    "char": TargetType.STRING,
    "varchar": TargetType.STRING,
    "text": TargetType.STRING,
    "tinytext": TargetType.STRING,
    "mediumtext": TargetType.STRING,
    "longtext": TargetType.STRING,
    "enum": TargetType.STRING,
    "set": TargetType.STRING,
    # temporal
    "date": TargetType.STRING,
    "datetime": TargetType.STRING,
    "timestamp": TargetType.STRING,
    "time": TargetType.STRING,
    "year": TargetType.STRING,
    # binary
    "binary": TargetType.BYTES,
    "varbinary": TargetType.BYTES,
    "blob": TargetType.BYTES,
    "tinyblob": TargetType.BYTES,
    "mediumblob": TargetType.BYTES,
    "longblob": TargetType.BYTES,
    "bit": TargetType.BYTES,
    # structured
    "json": TargetType.STRING,
}

DEFAULT_TARGET = TargetType.STRING


def is_current_timestamp(value: str) -> bool:
    """Whether a default means "current timestamp at insert time"."""
    return bool(_CURRENT_TIMESTAMP_RE.match(value.strip().upper()))


def is_null(value: str) -> bool:
    return value.strip().upper() == NULL


class TypeMapper:
    """
    Maps native column types and constraints for code generation.

    Lookup is a table lookup on the base type; unknown types fall back to
    ``str`` so mapping never fails. Per-type overrides (e.g. from a config
    file) take precedence over the built-in table.

    Example:
        mapper = TypeMapper({"tinyint": "bool"})
        mapper.map_type("tinyint(1)")  # "bool"
    """

    def __init__(self, overrides: Mapping[str, str] | None = None) -> None:
        """
        Initialize the mapper.

        Args:
            overrides: Native base type -> Python type name

        Raises:
            MappingError: An override targets an unsupported Python type
        """
        allowed = [t.value for t in TargetType]
        self.overrides: dict[str, TargetType] = {}
        for native_type, target in (overrides or {}).items():
            if target not in allowed:
                raise MappingError(native_type, target, allowed_targets=allowed)
            self.overrides[base_type_name(native_type)] = TargetType(target)

    def map_type(self, native_type: str) -> str:
        """Python type name for a native column type."""
        base = base_type_name(native_type)
        target = self.overrides.get(base) or TYPE_FAMILIES.get(base, DEFAULT_TARGET)
        return target.value

    def annotation(self, field: FieldSchema) -> str:
        """``Mapped[...]`` annotation, optional when the column is nullable."""
        target = self.map_type(field.native_type)
        if field.nullable:
            target = f"{target} | None"
        return f"Mapped[{target}]"

    def map_tags(self, field: FieldSchema) -> list[str]:
        """
        Persistence fragments for a field, in fixed order.

        Order: storage column name, primary key, auto-increment, server
        default, not-null. Absent conditions are omitted.
        """
        tags = [string_literal(field.name)]

        if field.is_primary_key:
            tags.append("primary_key=True")

        if field.is_auto_increment:
            tags.append("autoincrement=True")

        if field.default_value:
            tags.append(f"server_default={self._default_expression(field.default_value)}")

        if not field.nullable:
            tags.append("nullable=False")

        return tags

    def serialization_tag(self, field: FieldSchema) -> str:
        """``info`` argument carrying the serialization name of a column."""
        return f"info={{{string_literal(SERIALIZATION_KEY)}: {string_literal(field.name)}}}"

    def compose_column(self, field: FieldSchema) -> str:
        """Full ``mapped_column(...)`` call for a field."""
        fragments = self.map_tags(field) + [self.serialization_tag(field)]
        return f"mapped_column({TAG_SEPARATOR.join(fragments)})"

    def sqlalchemy_imports(self, field: FieldSchema) -> set[str]:
        """Names the field's fragments need from the ``sqlalchemy`` package."""
        if not field.default_value:
            return set()
        if is_current_timestamp(field.default_value):
            return {"func"}
        if is_null(field.default_value):
            return {"null"}
        return set()

    def _default_expression(self, value: str) -> str:
        if is_current_timestamp(value):
            return "func.current_timestamp()"
        if is_null(value):
            return "null()"
        return string_literal(value)


def map_type(native_type: str) -> str:
    """Map a native column type to a Python type name (never fails)."""
    return TypeMapper().map_type(native_type)


def map_tags(field: FieldSchema) -> list[str]:
    """Ordered ``mapped_column`` fragments for a field."""
    return TypeMapper().map_tags(field)


def compose_column(field: FieldSchema) -> str:
    """Composite ``mapped_column(...)`` expression for a field."""
    return TypeMapper().compose_column(field)
