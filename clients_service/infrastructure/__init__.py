"""
Infrastructure package for the clients service.

Centralizes database connectivity concerns (pool ownership, one-off
connections, schema). Keep this layer focused on I/O and resource management,
decoupled from repository logic.
"""

from clients_service.infrastructure.db_factory import (
    PoolManager,
    apply_statement_timeout,
    build_dsn,
    get_sync_connection,
)
from clients_service.infrastructure.schema import init_schema

__all__ = [
    "PoolManager",
    "apply_statement_timeout",
    "build_dsn",
    "get_sync_connection",
    "init_schema",
]
