"""
sql2orm Code Generation Module.

Maps table schemas onto Python types and generates SQLAlchemy model source.
"""

from sql2orm.codegen.formatting import canonicalize
from sql2orm.codegen.generator import CodeGenerator, GeneratedFile, GenerationResult
from sql2orm.codegen.mapper import TypeMapper, compose_column, map_tags, map_type
from sql2orm.codegen.models import ModelCodeGenerator, synthesize
from sql2orm.codegen.naming import NamingPolicy

__all__ = [
    "CodeGenerator",
    "GeneratedFile",
    "GenerationResult",
    "ModelCodeGenerator",
    "NamingPolicy",
    "TypeMapper",
    "canonicalize",
    "compose_column",
    "map_tags",
    "map_type",
    "synthesize",
]
