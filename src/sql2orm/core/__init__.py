"""
sql2orm Core Module.

Contains the schema model and the error taxonomy.
"""

from sql2orm.core.errors import (
    ConfigError,
    IntrospectionError,
    MappingError,
    ParseError,
    Sql2OrmError,
    SynthesisError,
)
from sql2orm.core.types import (
    CURRENT_TIMESTAMP,
    NULL,
    FieldSchema,
    TableSchema,
    base_type_name,
)

__all__ = [
    # Errors
    "Sql2OrmError",
    "ParseError",
    "MappingError",
    "SynthesisError",
    "IntrospectionError",
    "ConfigError",
    # Types
    "FieldSchema",
    "TableSchema",
    "base_type_name",
    "CURRENT_TIMESTAMP",
    "NULL",
]
