"""Catalog introspectors.

This submodule provides introspectors that read table columns from a
database's system catalog over a DBAPI connection and convert them to
canonical `Column` records.

Available introspectors:
- `PostgreSqlIntrospector`: Introspect PostgreSQL tables.
"""

from .base import SqlIntrospector
from .postgres_introspector import PostgreSqlIntrospector

__all__ = [
    "SqlIntrospector",
    "PostgreSqlIntrospector",
]
