"""
Shared plumbing for repositories: the pool contract and driver error mapping.
"""

from __future__ import annotations

from contextlib import AbstractContextManager, contextmanager
from typing import Any, Iterator, Protocol

import psycopg

from clients_service.errors import StorageError
from clients_service.utils.logging import get_logger

log = get_logger(__name__)


class ConnectionSource(Protocol):
    """Anything that lends out connections: `PoolManager` or a raw `ConnectionPool`."""

    def connection(self) -> AbstractContextManager[Any]:
        ...


@contextmanager
def storage_errors(operation: str) -> Iterator[None]:
    """
    Re-raise any psycopg error inside the block as `StorageError`.

    The driver exception stays reachable as ``__cause__``. Nothing is retried.
    """
    try:
        yield
    except psycopg.Error as exc:
        log.error(
            f"[STORAGE FAILED] {operation}",
            extra={"operation": operation, "error": str(exc)},
        )
        raise StorageError(operation, str(exc)) from exc


__all__ = ["ConnectionSource", "storage_errors"]
