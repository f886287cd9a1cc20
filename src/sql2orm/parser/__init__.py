"""
sql2orm Schema Extraction Module.

Turns CREATE TABLE statements into TableSchema instances.
"""

from sql2orm.parser.ddl import (
    CURRENT_TIMESTAMP,
    NULL,
    DDLParser,
    extract_table_comment,
    parse,
)

__all__ = [
    "DDLParser",
    "parse",
    "extract_table_comment",
    "CURRENT_TIMESTAMP",
    "NULL",
]
