"""
Schema model shared by the extractor, the database introspector and the
code generator.
"""

import re
from typing import Any

from pydantic import BaseModel, Field, model_validator

# Default-value sentinels: a database-generated current timestamp, and SQL NULL.
CURRENT_TIMESTAMP = "CURRENT_TIMESTAMP"
NULL = "NULL"

# Splits "varchar(32)" / "int unsigned" / "decimal(10, 2)" into the base name.
_BASE_TYPE_RE = re.compile(r"[\s(]")


def base_type_name(native_type: str) -> str:
    """Strip precision/length suffixes and modifiers from a native type."""
    return _BASE_TYPE_RE.split(native_type.strip().lower(), maxsplit=1)[0]


class FieldSchema(BaseModel):
    """Metadata for one table column."""

    name: str = Field(min_length=1)
    native_type: str
    nullable: bool = True
    default_value: str | None = None
    comment: str = ""
    is_primary_key: bool = False
    is_auto_increment: bool = False

    model_config = {"frozen": True}

    @property
    def base_type(self) -> str:
        """Native type without precision/length suffix, e.g. ``varchar``."""
        return base_type_name(self.native_type)

    @property
    def has_default(self) -> bool:
        return bool(self.default_value)


class TableSchema(BaseModel):
    """
    Metadata for one table.

    ``is_primary_key`` on each field is derived from ``primary_keys`` while
    the model is built; whatever flag a producer passes in is replaced, so the
    two can never disagree.
    """

    name: str = Field(min_length=1)
    comment: str = ""
    fields: tuple[FieldSchema, ...] = Field(min_length=1)
    primary_keys: tuple[str, ...] = ()

    model_config = {"frozen": True}

    @model_validator(mode="before")
    @classmethod
    def _derive_primary_key_flags(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data

        keys = set(data.get("primary_keys") or ())
        fields = []
        for field in data.get("fields") or ():
            if isinstance(field, FieldSchema):
                field = field.model_copy(
                    update={"is_primary_key": field.name in keys}
                )
            elif isinstance(field, dict):
                field = {**field, "is_primary_key": field.get("name") in keys}
            fields.append(field)

        return {**data, "fields": tuple(fields)}

    @model_validator(mode="after")
    def _check_field_references(self) -> "TableSchema":
        seen: set[str] = set()
        for field in self.fields:
            if field.name in seen:
                raise ValueError(
                    f"Duplicate column '{field.name}' in table '{self.name}'"
                )
            seen.add(field.name)

        for key in self.primary_keys:
            if key not in seen:
                raise ValueError(
                    f"Primary key '{key}' does not name a column of table '{self.name}'"
                )
        return self

    def get_field(self, name: str) -> FieldSchema | None:
        """Get a field by column name."""
        for field in self.fields:
            if field.name == name:
                return field
        return None

    @property
    def primary_key_fields(self) -> list[FieldSchema]:
        """Primary key fields, in ``primary_keys`` order."""
        return [f for key in self.primary_keys if (f := self.get_field(key))]
