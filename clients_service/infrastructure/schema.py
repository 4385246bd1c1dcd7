"""
Table definitions for the clients service.

Two tables: `clients` holds the cached score, `client_matches` the ledger of
deltas that sum to it. `client_matches.client_id` deliberately has no foreign
key; matches may reference clients that never existed or were deleted.
"""

from __future__ import annotations

from psycopg import Connection

from clients_service.utils.logging import get_logger

log = get_logger(__name__)

CLIENTS_TABLE = "clients"
MATCHES_TABLE = "client_matches"

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS clients (
    id          TEXT PRIMARY KEY,
    name        TEXT NOT NULL CHECK (name <> ''),
    birthday    TIMESTAMPTZ NULL,
    score       BIGINT NOT NULL DEFAULT 0,
    created_at  TIMESTAMPTZ NOT NULL DEFAULT now()
);

CREATE INDEX IF NOT EXISTS clients_score_idx ON clients (score DESC, id);

CREATE TABLE IF NOT EXISTS client_matches (
    id          BIGINT GENERATED ALWAYS AS IDENTITY PRIMARY KEY,
    client_id   TEXT NOT NULL,
    score       BIGINT NOT NULL
);

CREATE INDEX IF NOT EXISTS client_matches_client_idx ON client_matches (client_id);
"""


def init_schema(conn: Connection) -> None:
    """Create both tables if they are missing. Safe to run repeatedly."""
    with conn.transaction():
        conn.execute(SCHEMA_SQL)
    log.info("Schema ensured", extra={"tables": [CLIENTS_TABLE, MATCHES_TABLE]})


def drop_schema(conn: Connection) -> None:
    """Drop both tables. Test helper; there is no migration story."""
    with conn.transaction():
        conn.execute(f"DROP TABLE IF EXISTS {MATCHES_TABLE}; DROP TABLE IF EXISTS {CLIENTS_TABLE};")


__all__ = ["CLIENTS_TABLE", "MATCHES_TABLE", "SCHEMA_SQL", "drop_schema", "init_schema"]
