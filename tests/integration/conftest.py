"""Pytest configuration and shared fixtures."""

import os

import psycopg
import pytest
from psycopg import Connection

from idx.adapters import register_adapters


@pytest.fixture
def db_conn() -> Connection:
    """
    Provide a test database connection with ID adapters registered.

    Uses the DSN in IDX_TEST_DSN; tests are skipped when it is unset or the
    server cannot be reached.
    """
    dsn = os.environ.get("IDX_TEST_DSN")
    if not dsn:
        pytest.skip("IDX_TEST_DSN not set")

    try:
        conn = psycopg.connect(dsn, autocommit=False)
    except psycopg.OperationalError as e:
        pytest.skip(f"Database not reachable: {e}")

    register_adapters(conn)

    yield conn

    # Rollback any changes
    conn.rollback()
    conn.close()


@pytest.fixture
def id_table(db_conn: Connection) -> str:
    """
    Create a temporary table with a required and an optional ID column.

    Returns the table name.
    """
    table = "idx_test_structs"

    with db_conn.cursor() as cur:
        cur.execute(f"""
            CREATE TEMPORARY TABLE {table} (
                id BYTEA NOT NULL PRIMARY KEY,
                value TEXT NOT NULL,
                fk_id BYTEA DEFAULT NULL,
                ref TEXT DEFAULT NULL
            )
        """)

    return table
