"""
sql2orm - generate typed SQLAlchemy models from table definitions.

sql2orm reads a MySQL CREATE TABLE statement (or a table of a live database),
maps its column types and constraints onto Python types and ``mapped_column``
arguments, and emits a formatted model module.
"""

__version__ = "0.1.0"

from sql2orm.codegen.mapper import map_tags, map_type
from sql2orm.codegen.models import synthesize
from sql2orm.core.errors import (
    ConfigError,
    IntrospectionError,
    MappingError,
    ParseError,
    Sql2OrmError,
    SynthesisError,
)
from sql2orm.core.types import FieldSchema, TableSchema
from sql2orm.parser import parse
from sql2orm.pipeline import convert_ddl, convert_schema

__all__ = [
    # Version
    "__version__",
    # Pipeline
    "parse",
    "map_type",
    "map_tags",
    "synthesize",
    "convert_ddl",
    "convert_schema",
    # Types
    "FieldSchema",
    "TableSchema",
    # Errors
    "Sql2OrmError",
    "ParseError",
    "MappingError",
    "SynthesisError",
    "IntrospectionError",
    "ConfigError",
]
