from .binding import column_names_of, table, table_name_of
from .config import IntrospectorConfig
from .introspection import PostgreSqlIntrospector
from .names import ColumnName, QualifiedName, TableName
from .spec import Column, ColumnSpecification, Table
from .types import Custom, Limit, Range, SqlType

__all__ = [
    "Column",
    "ColumnName",
    "ColumnSpecification",
    "Custom",
    "IntrospectorConfig",
    "Limit",
    "PostgreSqlIntrospector",
    "QualifiedName",
    "Range",
    "SqlType",
    "Table",
    "TableName",
    "column_names_of",
    "table",
    "table_name_of",
]
