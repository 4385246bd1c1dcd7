"""
Pytest configuration for the clients service.

Provides fixtures for:
- Database connection management
- Schema setup and per-test table cleanup
- A service instance bound to the test database
"""

from __future__ import annotations

import os
from typing import Generator

import psycopg
import pytest
from psycopg.rows import dict_row

from clients_service.config import Settings
from clients_service.infrastructure.db_factory import build_dsn
from clients_service.infrastructure.schema import init_schema
from clients_service.service import ClientsService


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """
    Settings fixture with test-specific overrides.

    Can be overridden via environment variables in CI or local testing.
    """
    return Settings(
        db_host=os.getenv("DB_HOST", "localhost"),
        db_port=int(os.getenv("DB_PORT", "5432")),
        db_user=os.getenv("DB_USER", "postgres"),
        db_password=os.getenv("DB_PASSWORD", "postgres"),
        db_name=os.getenv("DB_NAME", "clients_test"),
        database_url=os.getenv("DATABASE_URL"),
        db_pool_max_size=10,
        db_connect_attempts=1,
        log_level="DEBUG",
    )


@pytest.fixture(scope="session")
def test_dsn(test_settings: Settings) -> str:
    """
    Database connection string for tests.
    """
    return build_dsn(test_settings)


@pytest.fixture(scope="session")
def db_connection_available(test_dsn: str) -> bool:
    """
    Check if database is reachable.

    Used to conditionally skip integration tests when DB is not available.
    """
    try:
        with psycopg.connect(test_dsn, connect_timeout=5) as conn:
            conn.execute("SELECT 1;").fetchone()
        return True
    except psycopg.Error:
        return False


@pytest.fixture(scope="session")
def db_connection(
    test_dsn: str, db_connection_available: bool
) -> Generator[psycopg.Connection, None, None]:
    """
    Provide a session-scoped autocommit connection for integration tests.

    Skips tests if database is not available.
    """
    if not db_connection_available:
        pytest.skip("Database not available for integration tests")

    conn = psycopg.connect(test_dsn, autocommit=True, row_factory=dict_row)
    try:
        init_schema(conn)
        yield conn
    finally:
        conn.close()


@pytest.fixture(scope="function")
def clean_tables(db_connection: psycopg.Connection) -> Generator[None, None, None]:
    """
    Empty both tables before and after each test function.
    """
    db_connection.execute("TRUNCATE TABLE client_matches, clients RESTART IDENTITY;")
    yield
    db_connection.execute("TRUNCATE TABLE client_matches, clients RESTART IDENTITY;")


@pytest.fixture(scope="function")
def service(
    test_settings: Settings, test_dsn: str, clean_tables: None
) -> Generator[ClientsService, None, None]:
    """
    Service bound to the test database, closed after the test.
    """
    svc = ClientsService.from_settings(test_settings, dsn=test_dsn)
    try:
        yield svc
    finally:
        svc.close()
