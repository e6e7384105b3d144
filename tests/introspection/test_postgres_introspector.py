"""Tests for PostgreSqlIntrospector."""

from __future__ import annotations

import logging
from typing import Any

import pytest

from ormspec.config import IntrospectorConfig
from ormspec.constraints import (
    AutoIncrementConstraint,
    DefaultValueConstraint,
    NotNullConstraint,
)
from ormspec.exceptions import (
    CatalogQueryError,
    MalformedCatalogDataError,
    UnknownTypeError,
    UnsupportedTypeCategoryError,
    ValidationWarning,
)
from ormspec.introspection import PostgreSqlIntrospector
from ormspec.literals import CurrentTimestamp, DoubleLiteral, StringLiteral
from ormspec.names import ColumnName, TableName
from ormspec.spec import Column, ColumnSpecification
from ormspec.types import Custom, Limit, Range, SqlType


# ---- Fixtures ----------------------------------------------------------------


class MockCursor:
    """Mock DBAPI cursor routing on query text."""

    COLUMNS_QUERY_COLUMNS = ["number", "name", "comment"]
    SPECIFICATION_QUERY_COLUMNS = ["not_null", "data_type", "default"]
    TABLE_QUERY_COLUMNS = ["comment"]

    def __init__(self, connection: MockConnection):
        self._connection = connection
        self._current_results: list[tuple[Any, ...]] = []
        self._description: list[tuple[str, ...]] | None = None
        self.closed = False

    def execute(self, query: str, params: tuple[Any, ...] | None = None) -> None:
        self._connection.executed.append((query, params))
        if "pg_description" in query:
            results = self._connection.columns
            columns = self.COLUMNS_QUERY_COLUMNS
        elif "format_type" in query:
            assert params is not None
            result = self._connection.specifications.get(params[0], [])
            if isinstance(result, Exception):
                raise result
            results = result
            columns = self.SPECIFICATION_QUERY_COLUMNS
        elif "obj_description" in query:
            results = self._connection.tables
            columns = self.TABLE_QUERY_COLUMNS
        else:
            raise AssertionError(f"Unexpected query: {query}")

        self._current_results = results
        self._description = [(col,) for col in columns]

    def fetchall(self) -> list[tuple[Any, ...]]:
        return self._current_results

    def close(self) -> None:
        self.closed = True

    @property
    def description(self) -> list[tuple[str, ...]] | None:
        return self._description


class MockConnection:
    """Mock DBAPI connection for testing."""

    def __init__(
        self,
        columns: list[tuple[Any, ...]],
        specifications: dict[str, Any],
        tables: list[tuple[Any, ...]] | None = None,
    ):
        self.columns = columns
        self.specifications = specifications
        self.tables = tables if tables is not None else [(None,)]
        self.executed: list[tuple[str, tuple[Any, ...] | None]] = []
        self.cursors: list[MockCursor] = []

    def cursor(self) -> MockCursor:
        cursor = MockCursor(self)
        self.cursors.append(cursor)
        return cursor


def actor_connection() -> MockConnection:
    """The sakila `actor` table."""
    return MockConnection(
        columns=[
            (1, "actor_id", None),
            (2, "first_name", None),
            (3, "last_name", "Family name"),
            (4, "last_update", None),
        ],
        specifications={
            "actor_id": [(True, "integer", "nextval('actor_actor_id_seq'::regclass)")],
            "first_name": [(True, "character varying(45)", None)],
            "last_name": [(True, "character varying(45)", None)],
            "last_update": [(True, "timestamp without time zone", "now()")],
        },
        tables=[("Actors appearing in films",)],
    )


# ---- get_columns -------------------------------------------------------------


class TestGetColumns:
    def test_columns_in_catalog_order(self):
        columns = PostgreSqlIntrospector(actor_connection()).get_columns("actor")

        assert [c.name.name for c in columns] == [
            "actor_id",
            "first_name",
            "last_name",
            "last_update",
        ]

    def test_auto_increment_primary_key(self):
        columns = PostgreSqlIntrospector(actor_connection()).get_columns("actor")

        assert columns[0].specification == ColumnSpecification(
            sql_type=SqlType.INT,
            capacity=None,
            constraints=(NotNullConstraint(), AutoIncrementConstraint()),
        )

    def test_varchar_with_limit(self):
        columns = PostgreSqlIntrospector(actor_connection()).get_columns("actor")

        assert columns[1] == Column(
            name=ColumnName("first_name"),
            specification=ColumnSpecification(
                sql_type=SqlType.VARCHAR,
                capacity=Limit(45),
                constraints=(NotNullConstraint(),),
            ),
            table=None,
            comment=None,
        )

    def test_comment(self):
        columns = PostgreSqlIntrospector(actor_connection()).get_columns("actor")

        assert columns[2].comment == "Family name"

    def test_timestamp_default_now(self):
        columns = PostgreSqlIntrospector(actor_connection()).get_columns("actor")

        assert columns[3].specification == ColumnSpecification(
            sql_type=SqlType.TIMESTAMP,
            constraints=(NotNullConstraint(), DefaultValueConstraint(CurrentTimestamp())),
        )

    def test_numeric_with_range_and_default(self):
        conn = MockConnection(
            columns=[(8, "rental_rate", None)],
            specifications={"rental_rate": [(True, "numeric(4,2)", "4.99")]},
        )

        columns = PostgreSqlIntrospector(conn).get_columns("film")

        assert columns[0].specification == ColumnSpecification(
            sql_type=SqlType.NUMERIC,
            capacity=Range(precision=4, scale=2),
            constraints=(NotNullConstraint(), DefaultValueConstraint(DoubleLiteral(4.99))),
        )

    def test_custom_type_with_text_default(self):
        conn = MockConnection(
            columns=[(11, "rating", None)],
            specifications={"rating": [(False, "mpaa_rating", "'G'::mpaa_rating")]},
        )

        with pytest.warns(ValidationWarning, match="mpaa_rating"):
            columns = PostgreSqlIntrospector(conn).get_columns("film")

        assert columns[0].specification == ColumnSpecification(
            sql_type=Custom("mpaa_rating"),
            constraints=(DefaultValueConstraint(StringLiteral("'G'::mpaa_rating")),),
        )

    def test_empty_table(self):
        conn = MockConnection(columns=[], specifications={})

        assert PostgreSqlIntrospector(conn).get_columns("nothing") == []

    def test_default_schema_is_public(self):
        conn = actor_connection()

        PostgreSqlIntrospector(conn).get_columns("actor")

        assert conn.executed[0][1] == ("actor", "public")
        assert conn.executed[1][1] == ("actor_id", "actor", "public")

    def test_explicit_schema(self):
        conn = actor_connection()

        PostgreSqlIntrospector(conn).get_columns(TableName(name="actor", qualifier="sakila"))

        assert conn.executed[0][1] == ("actor", "sakila")
        assert all(params[-1] == "sakila" for _, params in conn.executed)

    def test_dotted_table_string(self):
        conn = actor_connection()

        PostgreSqlIntrospector(conn).get_columns("sakila.actor")

        assert conn.executed[0][1] == ("actor", "sakila")

    def test_configured_default_schema(self):
        conn = actor_connection()
        config = IntrospectorConfig(default_schema="sakila")

        PostgreSqlIntrospector(conn, config).get_columns("actor")

        assert conn.executed[0][1] == ("actor", "sakila")

    def test_generation_expressions_are_not_read_as_defaults(self):
        conn = MockConnection(
            columns=[(1, "title", None), (2, "upper_title", None)],
            specifications={
                "title": [(True, "text", None)],
                # atthasdef is set but the column is generated
                "upper_title": [(False, "text", None)],
            },
        )

        columns = PostgreSqlIntrospector(conn).get_columns("film")

        specification_query = conn.executed[1][0]
        assert "pg_attribute.atthasdef AND pg_attribute.attgenerated = ''" in (
            specification_query
        )
        assert columns[1].specification.constraints == ()

    def test_one_specification_query_per_column(self):
        conn = actor_connection()

        PostgreSqlIntrospector(conn).get_columns("actor")

        assert len(conn.executed) == 5
        assert all(cursor.closed for cursor in conn.cursors)

    def test_results_are_independent_between_calls(self):
        introspector = PostgreSqlIntrospector(actor_connection())

        first = introspector.get_columns("actor")
        second = introspector.get_columns("actor")

        assert first == second
        assert first is not second

    def test_type_aliases_from_config(self):
        conn = MockConnection(
            columns=[(1, "email", None)],
            specifications={"email": [(True, "citext", "''::citext")]},
        )
        config = IntrospectorConfig(type_aliases={"citext": "text"})

        columns = PostgreSqlIntrospector(conn, config).get_columns("customer")

        assert columns[0].specification.sql_type is SqlType.TEXT


# ---- Failure handling ----------------------------------------------------------


class TestGetColumnsFailures:
    def test_second_phase_query_error_returns_no_columns(self):
        conn = actor_connection()
        conn.specifications["last_name"] = RuntimeError("connection reset")

        with pytest.raises(CatalogQueryError, match="connection reset") as exc_info:
            PostgreSqlIntrospector(conn).get_columns("actor")

        assert isinstance(exc_info.value.__cause__, RuntimeError)
        # last_update is never queried once last_name fails
        assert [params[0] for _, params in conn.executed[1:]] == [
            "actor_id",
            "first_name",
            "last_name",
        ]

    def test_error_names_column_and_table(self):
        conn = actor_connection()
        conn.specifications["first_name"] = RuntimeError("boom")

        with pytest.raises(
            CatalogQueryError,
            match="column 'first_name' of table 'public.actor'",
        ):
            PostgreSqlIntrospector(conn).get_columns("actor")

    def test_missing_specification_row(self):
        conn = actor_connection()
        conn.specifications["first_name"] = []

        with pytest.raises(CatalogQueryError, match="Expected exactly one"):
            PostgreSqlIntrospector(conn).get_columns("actor")

    def test_duplicate_specification_rows(self):
        conn = actor_connection()
        conn.specifications["first_name"] = [
            (True, "character varying(45)", None),
            (False, "character varying(45)", None),
        ]

        with pytest.raises(CatalogQueryError, match="got 2"):
            PostgreSqlIntrospector(conn).get_columns("actor")

    def test_column_listing_error(self):
        class FailingConnection(MockConnection):
            def cursor(self) -> MockCursor:
                raise RuntimeError("server closed the connection")

        conn = FailingConnection(columns=[], specifications={})

        with pytest.raises(CatalogQueryError, match="server closed"):
            PostgreSqlIntrospector(conn).get_columns("actor")

    def test_malformed_capacity(self):
        conn = actor_connection()
        conn.specifications["first_name"] = [(True, "character varying(x)", None)]

        with pytest.raises(MalformedCatalogDataError, match="first_name"):
            PostgreSqlIntrospector(conn).get_columns("actor")

    def test_malformed_default(self):
        conn = actor_connection()
        conn.specifications["actor_id"] = [(True, "integer", "'1'::integer")]

        with pytest.raises(MalformedCatalogDataError, match="Invalid integer default"):
            PostgreSqlIntrospector(conn).get_columns("actor")

    def test_unsupported_default(self):
        conn = MockConnection(
            columns=[(1, "payload", None)],
            specifications={"payload": [(False, "jsonb", "'{}'::jsonb")]},
        )

        with pytest.raises(UnsupportedTypeCategoryError):
            PostgreSqlIntrospector(conn).get_columns("events")

    def test_raise_mode_rejects_unknown_types(self):
        conn = MockConnection(
            columns=[(1, "rating", None)],
            specifications={"rating": [(False, "mpaa_rating", None)]},
        )

        with pytest.raises(UnknownTypeError, match="mpaa_rating"):
            PostgreSqlIntrospector(conn).get_columns("film", mode="raise")

    def test_mode_override_is_restored(self):
        conn = MockConnection(
            columns=[(1, "rating", None)],
            specifications={"rating": [(False, "mpaa_rating", None)]},
        )
        introspector = PostgreSqlIntrospector(conn)

        with pytest.raises(UnknownTypeError):
            introspector.get_columns("film", mode="raise")

        assert introspector.config.mode == "coerce"
        with pytest.warns(ValidationWarning):
            introspector.get_columns("film")

    def test_column_name_with_too_many_parts(self):
        conn = MockConnection(
            columns=[(1, "a.b.c", None)],
            specifications={"a.b.c": [(False, "text", None)]},
        )

        with pytest.raises(MalformedCatalogDataError, match="exactly two"):
            PostgreSqlIntrospector(conn).get_columns("weird")


# ---- get_table -----------------------------------------------------------------


class TestGetTable:
    def test_table_with_comment(self):
        table = PostgreSqlIntrospector(actor_connection()).get_table("actor")

        assert table.name == TableName(name="actor", qualifier="public")
        assert table.comment == "Actors appearing in films"
        assert table.column_names == ["actor_id", "first_name", "last_name", "last_update"]
        assert table.get_column("first_name").specification.capacity == Limit(45)

    def test_missing_table(self):
        conn = actor_connection()
        conn.tables = []

        with pytest.raises(CatalogQueryError, match="Table 'public.actor' not found"):
            PostgreSqlIntrospector(conn).get_table("actor")

    def test_existence_check_only_matches_tables(self):
        conn = actor_connection()

        PostgreSqlIntrospector(conn).get_table("actor")

        table_query = conn.executed[0][0]
        assert "obj_description" in table_query
        assert "pg_class.relkind IN ('r', 'p')" in table_query


# ---- Logging -------------------------------------------------------------------


def test_queries_are_logged_at_debug(caplog: pytest.LogCaptureFixture):
    with caplog.at_level(logging.DEBUG, logger="ormspec.introspection.postgres"):
        PostgreSqlIntrospector(actor_connection()).get_columns("actor")

    messages = [r.getMessage() for r in caplog.records]
    assert any("Executing catalog query" in m for m in messages)
    assert any("Introspected 4 columns of public.actor" in m for m in messages)


def test_custom_logger():
    logger = logging.getLogger("tests.introspection")

    introspector = PostgreSqlIntrospector(actor_connection(), logger=logger)

    assert introspector.logger is logger
