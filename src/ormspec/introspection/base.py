"""Base classes for catalog introspectors.

Introspectors query a database's system catalog through a DBAPI-compatible
connection and turn its loosely-typed rows into `Column` records. Every call
is a point-in-time snapshot: nothing is cached between calls and no state is
shared, so separate introspectors over separate connections may run
concurrently.
"""

from __future__ import annotations

import dataclasses
import logging
from abc import ABC, abstractmethod
from contextlib import contextmanager
from dataclasses import replace
from typing import Any, Generator, Literal, Sequence, TypeVar

from ..config import IntrospectorConfig
from ..exceptions import CatalogQueryError, ConfigError, IntrospectionError
from ..names import TableName
from ..parsers import TypeParser
from ..spec import Column, Table

RowT = TypeVar("RowT")


class SqlIntrospector(ABC):
    """Base class for SQL catalog introspectors.

    The connection must implement the DBAPI 2.0 specification (PEP 249):
    - `cursor()` method returning a cursor object
    - Cursor must support `execute(query, params)`, `fetchall()`, and `close()`
    - Cursor must have a `description` attribute after execute

    Subclasses implement `get_columns` and `get_table` for their database.
    Query errors are never retried: they propagate as `CatalogQueryError`.

    Example:
        ```python
        import psycopg2
        from ormspec.introspection import PostgreSqlIntrospector

        conn = psycopg2.connect("postgresql://localhost/sakila")
        introspector = PostgreSqlIntrospector(conn)
        columns = introspector.get_columns("public.actor")
        ```
    """

    dialect: str = "sql"

    def __init__(
        self,
        connection: Any,
        config: IntrospectorConfig | None = None,
        *,
        logger: logging.Logger | None = None,
    ) -> None:
        """Initialize the introspector.

        Args:
            connection: A DBAPI-compatible database connection.
            config: Configuration object. If None, uses default IntrospectorConfig.
            logger: Logger for query tracing. Defaults to
                `ormspec.introspection.<dialect>`.
        """
        self._connection = connection
        self.config = config or IntrospectorConfig()
        self.logger = logger or logging.getLogger(
            f"ormspec.introspection.{self.dialect}"
        )
        self._current_column: str | None = None
        self._current_table: str | None = None

    @abstractmethod
    def get_columns(
        self,
        table_name: TableName | str,
        *,
        mode: Literal["raise", "coerce"] | None = None,
    ) -> list[Column]:
        """Return the live columns of `table_name` in catalog order."""
        ...

    @abstractmethod
    def get_table(
        self,
        table_name: TableName | str,
        *,
        mode: Literal["raise", "coerce"] | None = None,
    ) -> Table:
        """Return `table_name` with its comment and columns."""
        ...

    # %% ---- Query execution ------------------------------------------------------
    def _execute_query(
        self,
        query: str,
        params: Sequence[Any] | None = None,
    ) -> list[dict[str, Any]]:
        """Execute a query and return results as a list of dictionaries.

        Raises:
            CatalogQueryError: If the driver raises while executing the query.
        """
        self.logger.debug("Executing catalog query with params %r:\n%s", params, query)
        try:
            cursor = self._connection.cursor()
        except Exception as exc:
            raise CatalogQueryError(f"Could not open a cursor: {exc}") from exc
        try:
            cursor.execute(query, tuple(params) if params is not None else None)
            if cursor.description is None:
                return []
            columns = [desc[0] for desc in cursor.description]
            return [dict(zip(columns, row)) for row in cursor.fetchall()]
        except Exception as exc:
            raise CatalogQueryError(f"Catalog query failed: {exc}") from exc
        finally:
            cursor.close()

    def execute_and_collect(
        self,
        query: str,
        params: Sequence[Any],
        row_type: type[RowT],
    ) -> list[RowT]:
        """Execute `query` and deserialize each row into `row_type`.

        `row_type` must be a dataclass whose field names match the query's
        projected columns.

        Raises:
            CatalogQueryError: If the query fails or a row does not match
                `row_type`.
        """
        rows = self._execute_query(query, params)
        return [self._to_record(row, row_type) for row in rows]

    def execute_and_collect_one(
        self,
        query: str,
        params: Sequence[Any],
        row_type: type[RowT],
    ) -> RowT:
        """Execute `query` expecting exactly one row.

        Raises:
            CatalogQueryError: If the query fails, or returns zero or several
                rows.
        """
        records = self.execute_and_collect(query, params, row_type)
        if len(records) != 1:
            raise CatalogQueryError(
                f"Expected exactly one {row_type.__name__} row, got {len(records)}."
            )
        return records[0]

    def _to_record(self, row: dict[str, Any], row_type: type[RowT]) -> RowT:
        expected = {f.name for f in dataclasses.fields(row_type)}  # type: ignore[arg-type]
        if set(row) != expected:
            raise CatalogQueryError(
                f"Unexpected row shape for {row_type.__name__}: "
                f"expected columns {sorted(expected)}, got {sorted(row)}."
            )
        return row_type(**row)

    # %% ---- Context ----------------------------------------------------------------
    @contextmanager
    def introspection_context(
        self,
        *,
        mode: Literal["raise", "coerce"] | None = None,
        table: str | None = None,
        column: str | None = None,
    ) -> Generator[None, None, None]:
        """Temporarily set the mode and the table/column being introspected.

        Introspection errors raised inside the context get the current table
        and column appended to their message, once.

        Args:
            mode: Optional override for the configured mode.
            table: Optional table name for error context.
            column: Optional column name for error context.
        """
        previous_config = self.config
        previous_table = self._current_table
        previous_column = self._current_column

        try:
            if mode is not None:
                if mode not in ("raise", "coerce"):
                    raise ConfigError("mode must be one of 'raise' or 'coerce'.")
                self.config = replace(self.config, mode=mode)
            if table is not None:
                self._current_table = table
            if column is not None:
                self._current_column = column
            yield
        except IntrospectionError as exc:
            # Innermost context wins; outer contexts leave the message alone.
            if exc.args and not getattr(exc, "_contextualized", False):
                exc.args = (self._with_context(str(exc.args[0])),) + exc.args[1:]
                exc._contextualized = True  # type: ignore[attr-defined]
            raise
        finally:
            self.config = previous_config
            self._current_table = previous_table
            self._current_column = previous_column

    def _with_context(self, message: str) -> str:
        if self._current_column is not None:
            return f"{message} (column '{self._current_column}' of table '{self._current_table}')"
        if self._current_table is not None:
            return f"{message} (table '{self._current_table}')"
        return message

    def _type_parser(self) -> TypeParser:
        return TypeParser(type_aliases=self.config.type_aliases, mode=self.config.mode)
