#!/usr/bin/env python3
"""PostgreSQL integration test for PostgreSqlIntrospector.

This script validates that PostgreSqlIntrospector reads live PostgreSQL
catalogs and resolves their types, capacities and defaults to canonical
Column records.
"""

import sys
import warnings

import psycopg2
from psycopg2.extensions import connection as PgConnection

from ormspec import PostgreSqlIntrospector, TableName
from ormspec.constraints import (
    AutoIncrementConstraint,
    DefaultValueConstraint,
    NotNullConstraint,
)
from ormspec.converters import SQLConverter
from ormspec.exceptions import CatalogQueryError, ValidationWarning
from ormspec.literals import (
    BoolLiteral,
    CurrentTimestamp,
    DoubleLiteral,
    IntegerLiteral,
    StringLiteral,
)
from ormspec.types import Custom, Limit, Range, SqlType


def get_connection() -> PgConnection:
    """Get a connection to the PostgreSQL test database."""
    return psycopg2.connect(
        host="localhost",
        port=5432,
        database="ormspec_test",
        user="ormspec",
        password="ormspec",
    )


def setup_test_tables(conn: PgConnection) -> None:
    """Create test tables with various PostgreSQL types and defaults."""
    with conn.cursor() as cur:
        cur.execute("DROP TABLE IF EXISTS test_types CASCADE")
        cur.execute("DROP TABLE IF EXISTS test_defaults CASCADE")
        cur.execute("DROP SCHEMA IF EXISTS ormspec_it CASCADE")
        cur.execute("DROP TYPE IF EXISTS mpaa_rating CASCADE")

        cur.execute("CREATE TYPE mpaa_rating AS ENUM ('G', 'PG', 'R')")

        cur.execute("""
            CREATE TABLE test_types (
                col_smallint SMALLINT,
                col_integer INTEGER,
                col_bigint BIGINT,
                col_real REAL,
                col_double DOUBLE PRECISION,
                col_numeric NUMERIC(10, 2),
                col_varchar VARCHAR(255),
                col_char CHAR(10),
                col_text TEXT,
                col_text_array TEXT[],
                col_bytea BYTEA,
                col_boolean BOOLEAN,
                col_date DATE,
                col_time TIME,
                col_time_tz TIME WITH TIME ZONE,
                col_timestamp TIMESTAMP,
                col_timestamp_tz TIMESTAMP WITH TIME ZONE,
                col_timestamp_tz_3 TIMESTAMP(3) WITH TIME ZONE,
                col_interval INTERVAL,
                col_uuid UUID,
                col_json JSON,
                col_jsonb JSONB,
                col_rating mpaa_rating,
                col_dropped TEXT
            )
        """)
        cur.execute("ALTER TABLE test_types DROP COLUMN col_dropped")

        cur.execute("""
            CREATE TABLE test_defaults (
                id SERIAL,
                required_col TEXT NOT NULL,
                default_string TEXT DEFAULT 'hello',
                default_int INTEGER DEFAULT 42,
                default_bool BOOLEAN DEFAULT true,
                default_price NUMERIC(4, 2) NOT NULL DEFAULT 4.99,
                default_now TIMESTAMP DEFAULT now(),
                default_rating mpaa_rating DEFAULT 'G',
                upper_required TEXT GENERATED ALWAYS AS (upper(required_col)) STORED
            )
        """)
        cur.execute("COMMENT ON TABLE test_defaults IS 'Default values'")
        cur.execute("COMMENT ON COLUMN test_defaults.required_col IS 'Must be set'")

        cur.execute("CREATE VIEW test_defaults_view AS SELECT id FROM test_defaults")

        cur.execute("CREATE SCHEMA ormspec_it")
        cur.execute("CREATE TABLE ormspec_it.test_defaults (only_col INTEGER)")

        conn.commit()


def test_basic_type_resolution(conn: PgConnection) -> None:
    """Test type and capacity resolution from format_type output."""
    print("\n" + "-" * 60)
    print("Test: Basic Type Resolution")
    print("-" * 60)

    introspector = PostgreSqlIntrospector(conn)
    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always")
        columns = introspector.get_columns("test_types")

    print(f"✓ Introspected {len(columns)} columns")

    expected = {
        "col_smallint": (SqlType.SMALLINT, None),
        "col_integer": (SqlType.INT, None),
        "col_bigint": (SqlType.BIGINT, None),
        "col_real": (SqlType.REAL, None),
        "col_double": (SqlType.DOUBLE, None),
        "col_numeric": (SqlType.NUMERIC, Range(10, 2)),
        "col_varchar": (SqlType.VARCHAR, Limit(255)),
        "col_char": (SqlType.CHAR, Limit(10)),
        "col_text": (SqlType.TEXT, None),
        "col_text_array": (SqlType.TEXT_ARRAY, None),
        "col_bytea": (SqlType.BYTEA, None),
        "col_boolean": (SqlType.BOOL, None),
        "col_date": (SqlType.DATE, None),
        "col_time": (SqlType.TIME, None),
        "col_time_tz": (SqlType.TIME_TZ, None),
        "col_timestamp": (SqlType.TIMESTAMP, None),
        "col_timestamp_tz": (SqlType.TIMESTAMP_TZ, None),
        "col_timestamp_tz_3": (SqlType.TIMESTAMP_TZ, Limit(3)),
        "col_interval": (SqlType.INTERVAL, None),
        "col_uuid": (SqlType.UUID, None),
        "col_json": (SqlType.JSON, None),
        "col_jsonb": (SqlType.JSONB, None),
        "col_rating": (Custom("mpaa_rating"), None),
    }

    columns_by_name = {col.name.name: col for col in columns}
    errors = []

    assert "col_dropped" not in columns_by_name, "Dropped column must not be listed"
    print("  ✓ Dropped column skipped")

    for col_name, (sql_type, capacity) in expected.items():
        if col_name not in columns_by_name:
            errors.append(f"  ✗ Column '{col_name}' not found")
            continue

        spec = columns_by_name[col_name].specification
        if (spec.sql_type, spec.capacity) != (sql_type, capacity):
            errors.append(
                f"  ✗ Column '{col_name}': expected {sql_type} {capacity},"
                f" got {spec.sql_type} {spec.capacity}"
            )
        else:
            print(f"  ✓ {col_name}: {spec.type_str}")

    if errors:
        for error in errors:
            print(error)
        raise AssertionError(f"Type resolution errors: {len(errors)}")

    assert any(issubclass(w.category, ValidationWarning) for w in caught), (
        "Expected a ValidationWarning for the enum type"
    )
    print("✓ All basic types resolved correctly")


def test_defaults(conn: PgConnection) -> None:
    """Test constraint derivation from pg_attrdef defaults."""
    print("\n" + "-" * 60)
    print("Test: Defaults and Constraints")
    print("-" * 60)

    introspector = PostgreSqlIntrospector(conn)
    with warnings.catch_warnings():
        warnings.simplefilter("ignore", ValidationWarning)
        columns = introspector.get_columns("test_defaults")

    constraints = {col.name.name: col.specification.constraints for col in columns}

    expected = {
        "id": (NotNullConstraint(), AutoIncrementConstraint()),
        "required_col": (NotNullConstraint(),),
        "default_string": (DefaultValueConstraint(StringLiteral("'hello'::text")),),
        "default_int": (DefaultValueConstraint(IntegerLiteral(42)),),
        "default_bool": (DefaultValueConstraint(BoolLiteral(True)),),
        "default_price": (
            NotNullConstraint(),
            DefaultValueConstraint(DoubleLiteral(4.99)),
        ),
        "default_now": (DefaultValueConstraint(CurrentTimestamp()),),
        "default_rating": (
            DefaultValueConstraint(StringLiteral("'G'::mpaa_rating")),
        ),
        "upper_required": (),
    }

    for col_name, expected_constraints in expected.items():
        actual = constraints[col_name]
        assert actual == expected_constraints, (
            f"Column '{col_name}': expected {expected_constraints}, got {actual}"
        )
        print(f"  ✓ {col_name}: {', '.join(str(c) for c in actual)}")

    print("✓ All defaults derived correctly")


def test_table_and_schema(conn: PgConnection) -> None:
    """Test table comments and schema qualification."""
    print("\n" + "-" * 60)
    print("Test: Tables and Schemas")
    print("-" * 60)

    introspector = PostgreSqlIntrospector(conn)
    with warnings.catch_warnings():
        warnings.simplefilter("ignore", ValidationWarning)
        table = introspector.get_table("test_defaults")

    assert table.name == TableName("test_defaults", qualifier="public")
    assert table.comment == "Default values"
    assert table.get_column("required_col").comment == "Must be set"
    print(f"  ✓ Table comment: {table.comment}")

    other = introspector.get_columns("ormspec_it.test_defaults")
    assert [c.name.name for c in other] == ["only_col"]
    print("  ✓ Schema-qualified table resolved")

    assert introspector.get_columns("missing_table") == []
    try:
        introspector.get_table("missing_table")
    except CatalogQueryError as e:
        print(f"  ✓ Missing table rejected: {e}")
    else:
        raise AssertionError("Expected CatalogQueryError for a missing table")

    try:
        introspector.get_table("test_defaults_view")
    except CatalogQueryError as e:
        print(f"  ✓ View rejected as a table: {e}")
    else:
        raise AssertionError("Expected CatalogQueryError for a view")

    print(SQLConverter(dialect="postgres", pretty=True).convert(table))
    print("✓ Tables and schemas handled correctly")


def main() -> int:
    """Run all PostgreSQL integration tests."""
    print("=" * 60)
    print("PostgreSQL Introspector Integration Test")
    print("=" * 60)

    print("\n▶ Connecting to PostgreSQL...")
    try:
        conn = get_connection()
        print("✓ Connected to PostgreSQL")
    except psycopg2.Error as e:
        print(f"✗ Failed to connect: {e}")
        return 1

    try:
        print("\n▶ Setting up test tables...")
        setup_test_tables(conn)
        print("✓ Test tables created")

        test_basic_type_resolution(conn)
        test_defaults(conn)
        test_table_and_schema(conn)

        print("\n" + "=" * 60)
        print("✓ All PostgreSQL integration tests PASSED")
        print("=" * 60)
        return 0

    except Exception as e:
        print(f"\n✗ Test FAILED: {e}")
        import traceback

        traceback.print_exc()
        return 1

    finally:
        conn.close()


if __name__ == "__main__":
    sys.exit(main())
