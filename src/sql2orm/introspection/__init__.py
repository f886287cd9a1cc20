"""
sql2orm Database Introspection Module.

Reads table metadata from a live database catalog.
"""

from sql2orm.introspection.sqlalchemy import DatabaseIntrospector

__all__ = ["DatabaseIntrospector"]
