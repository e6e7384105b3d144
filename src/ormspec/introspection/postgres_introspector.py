"""Introspect PostgreSQL table columns from `pg_catalog`.

Columns are assembled in two phases:

1. One query lists the live (non-dropped) columns of the table ordered by
   position, with their name and comment.
2. For each column, a second query returns its not-null flag, its type as
   printed by `format_type`, and its default expression.

The raw type string is resolved by `TypeParser`, and the default expression
by the constraint and literal parsers. The first failure aborts the whole
table: a partial column list is never returned.

Example:
    >>> import psycopg2
    >>> from ormspec.introspection import PostgreSqlIntrospector
    >>> conn = psycopg2.connect("postgresql://localhost/sakila")
    >>> introspector = PostgreSqlIntrospector(conn)
    >>> columns = introspector.get_columns("actor")
    >>> columns[1].specification.type_str
    'varchar(45)'
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from ..exceptions import CatalogQueryError
from ..names import ColumnName, TableName
from ..parsers import TypeParser, derive_constraints
from ..spec import Column, ColumnSpecification, Table
from .base import SqlIntrospector

COLUMNS_QUERY = """
SELECT
    pg_attribute.attnum AS number,
    pg_attribute.attname AS name,
    pg_description.description AS comment
FROM pg_catalog.pg_attribute
LEFT JOIN pg_catalog.pg_class
    ON pg_class.oid = pg_attribute.attrelid
LEFT JOIN pg_catalog.pg_namespace
    ON pg_namespace.oid = pg_class.relnamespace
LEFT JOIN pg_catalog.pg_description
    ON pg_description.objoid = pg_class.oid
    AND pg_description.objsubid = pg_attribute.attnum
WHERE pg_class.relname = %s
    AND pg_namespace.nspname = %s
    AND pg_attribute.attnum > 0
    AND pg_attribute.attisdropped = false
ORDER BY number
"""

COLUMN_SPECIFICATION_QUERY = """
SELECT DISTINCT
    pg_attribute.attnotnull AS not_null,
    pg_catalog.format_type(pg_attribute.atttypid, pg_attribute.atttypmod) AS data_type,
    CASE WHEN pg_attribute.atthasdef AND pg_attribute.attgenerated = ''
        THEN pg_catalog.pg_get_expr(pg_attrdef.adbin, pg_attrdef.adrelid)
    END AS default
FROM pg_catalog.pg_attribute
JOIN pg_catalog.pg_class
    ON pg_class.oid = pg_attribute.attrelid
LEFT JOIN pg_catalog.pg_attrdef
    ON pg_attrdef.adrelid = pg_class.oid
    AND pg_attrdef.adnum = pg_attribute.attnum
LEFT JOIN pg_catalog.pg_namespace
    ON pg_namespace.oid = pg_class.relnamespace
WHERE pg_attribute.attname = %s
    AND pg_class.relname = %s
    AND pg_namespace.nspname = %s
    AND pg_attribute.attisdropped = false
"""

TABLE_COMMENT_QUERY = """
SELECT
    pg_catalog.obj_description(pg_class.oid, 'pg_class') AS comment
FROM pg_catalog.pg_class
JOIN pg_catalog.pg_namespace
    ON pg_namespace.oid = pg_class.relnamespace
WHERE pg_class.relname = %s
    AND pg_namespace.nspname = %s
    AND pg_class.relkind IN ('r', 'p')
"""


@dataclass(frozen=True)
class _ColumnRow:
    number: int
    name: str
    comment: str | None


@dataclass(frozen=True)
class _ColumnSpecificationRow:
    not_null: bool
    data_type: str
    default: str | None

    def to_specification(self, type_parser: TypeParser) -> ColumnSpecification:
        sql_type, capacity = type_parser.parse(self.data_type)
        return ColumnSpecification(
            sql_type=sql_type,
            capacity=capacity,
            constraints=derive_constraints(sql_type, self.not_null, self.default),
        )


@dataclass(frozen=True)
class _TableRow:
    comment: str | None


class PostgreSqlIntrospector(SqlIntrospector):
    """Introspect PostgreSQL tables.

    Args:
        connection: A DBAPI-compatible PostgreSQL connection (e.g. psycopg2
            or psycopg). Must support parameterized queries with %s
            placeholders.
        config: Configuration object. If None, uses default IntrospectorConfig.
        logger: Optional logger for query tracing.
    """

    dialect = "postgres"

    def get_columns(
        self,
        table_name: TableName | str,
        *,
        mode: Literal["raise", "coerce"] | None = None,
    ) -> list[Column]:
        """Return the live columns of a table, ordered by position.

        Args:
            table_name: The table, as a `TableName` or a `schema.table` /
                `table` string. Tables without a schema are looked up in the
                configured default schema.
            mode: Optional override for the configured mode.

        Returns:
            The table's columns. An empty list if the table has no columns
            or does not exist.

        Raises:
            CatalogQueryError: If a catalog query fails or returns an
                unexpected row.
            MalformedCatalogDataError: If a type or default cannot be parsed.
            UnsupportedTypeCategoryError: If a default is set on a type with
                no literal rule.
            UnknownTypeError: In "raise" mode, for an unknown type spelling.
        """
        table = self._as_table_name(table_name)
        schema = table.schema or self.config.default_schema

        with self.introspection_context(mode=mode, table=f"{schema}.{table.name}"):
            column_rows = self.execute_and_collect(
                COLUMNS_QUERY, (table.name, schema), _ColumnRow
            )
            type_parser = self._type_parser()

            columns: list[Column] = []
            for row in column_rows:
                with self.introspection_context(column=row.name):
                    specification = self._get_column_specification(
                        table, schema, row.name, type_parser
                    )
                    columns.append(
                        Column(
                            name=ColumnName.parse(row.name),
                            specification=specification,
                            comment=row.comment,
                        )
                    )
            self.logger.debug(
                "Introspected %d columns of %s.%s", len(columns), schema, table.name
            )
            return columns

    def get_table(
        self,
        table_name: TableName | str,
        *,
        mode: Literal["raise", "coerce"] | None = None,
    ) -> Table:
        """Return a table with its comment and columns.

        Only ordinary and partitioned tables are found. Views, sequences and
        indexes with the same name are reported as missing.

        Raises:
            CatalogQueryError: If the table does not exist, or if any error
                `get_columns` raises occurs.
        """
        table = self._as_table_name(table_name)
        schema = table.schema or self.config.default_schema

        with self.introspection_context(table=f"{schema}.{table.name}"):
            rows = self.execute_and_collect(
                TABLE_COMMENT_QUERY, (table.name, schema), _TableRow
            )
            if len(rows) != 1:
                raise CatalogQueryError(
                    f"Table '{schema}.{table.name}' not found.",
                    suggestions=["Check the table name and schema"],
                )
        columns = self.get_columns(table, mode=mode)
        return Table(
            name=TableName(name=table.name, qualifier=schema, alias=table.alias),
            columns=tuple(columns),
            comment=rows[0].comment,
        )

    def _get_column_specification(
        self,
        table: TableName,
        schema: str,
        column_name: str,
        type_parser: TypeParser,
    ) -> ColumnSpecification:
        row = self.execute_and_collect_one(
            COLUMN_SPECIFICATION_QUERY,
            (column_name, table.name, schema),
            _ColumnSpecificationRow,
        )
        self.logger.debug(
            "Column %r: data_type=%r default=%r not_null=%r",
            column_name,
            row.data_type,
            row.default,
            row.not_null,
        )
        return row.to_specification(type_parser)

    @staticmethod
    def _as_table_name(table_name: TableName | str) -> TableName:
        if isinstance(table_name, TableName):
            return table_name
        return TableName.parse(table_name)
