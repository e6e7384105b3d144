from __future__ import annotations

import uuid

import pytest

from ormspec.constraints import (
    AutoIncrementConstraint,
    ColumnConstraint,
    DefaultValueConstraint,
    NotNullConstraint,
)
from ormspec.converters import SQLConverter
from ormspec.exceptions import ConversionError
from ormspec.literals import (
    BoolLiteral,
    CurrentDate,
    CurrentTimestamp,
    DoubleLiteral,
    IntegerLiteral,
    Literal,
    NullLiteral,
    StringLiteral,
    UuidGenerateV4,
    UuidLiteral,
)
from ormspec.names import ColumnName, TableName
from ormspec.spec import Column, ColumnSpecification, Table
from ormspec.types import Custom, Limit, Range, SqlType


def _column(name, sql_type, capacity=None, *constraints) -> Column:
    return Column(
        name=ColumnName(name),
        specification=ColumnSpecification(sql_type, capacity, constraints),
    )


def _table(*columns: Column, schema: str | None = "public") -> Table:
    return Table(name=TableName("film", qualifier=schema), columns=columns)


class TestCreateTable:
    def test_basic_table(self):
        sql = SQLConverter().convert(
            _table(
                _column(
                    "film_id",
                    SqlType.INT,
                    None,
                    NotNullConstraint(),
                    AutoIncrementConstraint(),
                ),
                _column("title", SqlType.VARCHAR, Limit(255), NotNullConstraint()),
            )
        )

        assert sql.startswith("CREATE TABLE public.film (")
        assert "film_id INT NOT NULL GENERATED BY DEFAULT AS IDENTITY" in sql
        assert "title VARCHAR(255) NOT NULL" in sql

    def test_numeric_range_with_default(self):
        sql = SQLConverter().convert(
            _table(
                _column(
                    "rental_rate",
                    SqlType.NUMERIC,
                    Range(4, 2),
                    NotNullConstraint(),
                    DefaultValueConstraint(DoubleLiteral(4.99)),
                )
            )
        )

        assert "rental_rate DECIMAL(4, 2)" in sql
        assert "NOT NULL DEFAULT 4.99" in sql

    def test_if_not_exists(self):
        sql = SQLConverter().convert(
            _table(_column("title", SqlType.TEXT)), if_not_exists=True
        )

        assert sql.startswith("CREATE TABLE IF NOT EXISTS public.film")

    def test_unqualified_table(self):
        sql = SQLConverter().convert(_table(_column("title", SqlType.TEXT), schema=None))

        assert sql == "CREATE TABLE film (title TEXT)"

    def test_custom_type_is_user_defined(self):
        sql = SQLConverter().convert(
            _table(
                _column(
                    "rating",
                    Custom("mpaa_rating"),
                    None,
                    DefaultValueConstraint(StringLiteral("'G'::mpaa_rating")),
                )
            )
        )

        assert "rating mpaa_rating DEFAULT" in sql
        assert "'G'" in sql

    @pytest.mark.parametrize(
        "sql_type", [SqlType.SMALL_SERIAL, SqlType.SERIAL, SqlType.BIG_SERIAL]
    )
    def test_unconstrained_serial_column(self, sql_type):
        sql = SQLConverter().convert(_table(_column("x", sql_type)))

        assert sql.startswith("CREATE TABLE public.film (x ")
        assert "generated by default as identity" in sql.lower()

    def test_generation_options(self):
        sql = SQLConverter(pretty=True).convert(_table(_column("title", SqlType.TEXT)))

        assert "\n" in sql

    def test_kwargs_override_defaults(self):
        sql = SQLConverter(pretty=True).convert(
            _table(_column("title", SqlType.TEXT)), pretty=False
        )

        assert "\n" not in sql

    def test_ast(self):
        ast = SQLConverter().to_ast(_table(_column("title", SqlType.TEXT)))

        assert ast.args["kind"] == "TABLE"


class TestDefaults:
    @pytest.mark.parametrize(
        "sql_type, literal, expected",
        [
            (SqlType.TEXT, NullLiteral(), "DEFAULT NULL"),
            (SqlType.BOOL, BoolLiteral(True), "DEFAULT TRUE"),
            (SqlType.BIGINT, IntegerLiteral(-1), "DEFAULT -1"),
            (
                SqlType.UUID,
                UuidLiteral(uuid.UUID("a0eebc99-9c0b-4ef8-bb6d-6bb9bd380a11")),
                "DEFAULT 'a0eebc99-9c0b-4ef8-bb6d-6bb9bd380a11'",
            ),
            (SqlType.TIMESTAMP, CurrentTimestamp(), "DEFAULT CURRENT_TIMESTAMP"),
            (SqlType.DATE, CurrentDate(), "DEFAULT CURRENT_DATE"),
            (SqlType.UUID, UuidGenerateV4(), "DEFAULT UUID_GENERATE_V4()"),
            (SqlType.TEXT, StringLiteral("'n/a'::text"), "DEFAULT CAST('n/a' AS TEXT)"),
        ],
    )
    def test_default_literals(self, sql_type, literal, expected):
        sql = SQLConverter().convert(
            _table(_column("c", sql_type, None, DefaultValueConstraint(literal)))
        )

        assert expected.lower() in sql.lower()

    @pytest.mark.parametrize(
        "value, expected",
        [
            (float("nan"), "DEFAULT CAST('NaN' AS DOUBLE PRECISION)"),
            (float("inf"), "DEFAULT CAST('Infinity' AS DOUBLE PRECISION)"),
            (float("-inf"), "DEFAULT CAST('-Infinity' AS DOUBLE PRECISION)"),
        ],
    )
    def test_non_finite_double_defaults(self, value, expected):
        sql = SQLConverter().convert(
            _table(_column("x", SqlType.DOUBLE, None, DefaultValueConstraint(DoubleLiteral(value))))
        )

        assert expected in sql
        assert "DEFAULT NULL" not in sql

    def test_unparseable_text_default(self):
        table = _table(
            _column("c", SqlType.TEXT, None, DefaultValueConstraint(StringLiteral("(((")))
        )

        with pytest.raises(ConversionError, match="column 'c'"):
            SQLConverter().convert(table)

    def test_unknown_literal(self):
        class Bogus(Literal):
            pass

        table = _table(_column("c", SqlType.TEXT, None, DefaultValueConstraint(Bogus())))

        with pytest.raises(ConversionError, match="literal: Bogus for column 'c'"):
            SQLConverter().convert(table)

    def test_unknown_constraint(self):
        class Bogus(ColumnConstraint):
            pass

        table = _table(_column("c", SqlType.TEXT, None, Bogus()))

        with pytest.raises(ConversionError, match="constraint: Bogus for column 'c'"):
            SQLConverter().convert(table)
