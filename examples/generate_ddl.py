"""
Example script to introspect a PostgreSQL table and print it as YAML and DDL.

Usage:
    ORMSPEC_DSN="dbname=sakila user=postgres" python examples/generate_ddl.py public.film
"""

import logging
import os
import sys

import psycopg2

from ormspec import IntrospectorConfig, PostgreSqlIntrospector
from ormspec.converters import SQLConverter
from ormspec.serializers import to_yaml


def main():
    logging.basicConfig(level=logging.INFO)
    table_name = sys.argv[1] if len(sys.argv) > 1 else "public.actor"
    config = (
        IntrospectorConfig.from_yaml(os.environ["ORMSPEC_CONFIG"])
        if "ORMSPEC_CONFIG" in os.environ
        else IntrospectorConfig()
    )

    connection = psycopg2.connect(os.environ.get("ORMSPEC_DSN", "dbname=sakila"))
    try:
        table = PostgreSqlIntrospector(connection, config).get_table(table_name)
    finally:
        connection.close()

    print("--- Table ---")
    print(table)

    print("\n--- YAML ---")
    print(to_yaml(table))

    print("--- PostgreSQL ---")
    print(SQLConverter(dialect="postgres", pretty=True).convert(table))

    print("\n--- DuckDB ---")
    print(SQLConverter(dialect="duckdb", pretty=True).convert(table))


if __name__ == "__main__":
    main()
