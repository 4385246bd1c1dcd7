"""
Database connection factory utilities for the clients service.

Provides the single psycopg ConnectionPool the service owns for its whole
lifetime, plus a one-off connection helper for administrative work such as
applying the schema. The pool is released exactly once, when shutdown is
signalled; nothing else closes it.

Includes retry logic for transient failures while *connecting* using tenacity.
Statements executed by the service are never retried here.
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Any, Callable, Generator, Optional

import psycopg
from psycopg import Connection
from psycopg.rows import dict_row
from psycopg_pool import ConnectionPool, PoolTimeout
from tenacity import (
    Retrying,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from clients_service.config import Settings, get_settings
from clients_service.errors import StorageError
from clients_service.utils.logging import get_logger

log = get_logger(__name__)

_TRANSIENT_CONNECT_ERRORS = (psycopg.OperationalError, PoolTimeout)


def build_dsn(settings: Optional[Settings] = None) -> str:
    """Compose a DSN string from settings; DATABASE_URL wins when set."""
    settings = settings or get_settings()
    if settings.database_url:
        return settings.database_url
    return (
        f"postgresql://{settings.db_user}:{settings.db_password}"
        f"@{settings.db_host}:{settings.db_port}/{settings.db_name}"
    )


def apply_statement_timeout(conn: Connection, timeout_ms: int) -> None:
    """
    Bound every statement on `conn` to `timeout_ms` milliseconds (0 disables).

    Uses set_config() so the value travels as a bound parameter.
    """
    conn.execute("SELECT set_config('statement_timeout', %s, false)", (str(int(timeout_ms)),))


class PoolManager:
    """
    Owner of the service's connection pool.

    Pool connections run in autocommit mode with a dict row factory, so a
    plain statement commits on its own and only code that asks for
    ``conn.transaction()`` gets a multi-statement transaction.

    Parameters
    ----------
    dsn : str | None
        Connection string. Defaults to `build_dsn()`.
    settings : Settings | None
        Source for pool sizing, statement timeout and connect attempts.
    pool_factory : callable
        Pool constructor; swapped for a fake in unit tests.
    retry_wait : tenacity wait strategy
        Backoff between connect attempts. Defaults to exponential, 1s to 10s.
    """

    def __init__(
        self,
        dsn: Optional[str] = None,
        settings: Optional[Settings] = None,
        pool_factory: Callable[..., Any] = ConnectionPool,
        retry_wait: Any = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._dsn = dsn or build_dsn(self._settings)
        self._pool_factory = pool_factory
        if retry_wait is None:
            retry_wait = wait_exponential(multiplier=1, min=1, max=10)
        self._retry_wait = retry_wait
        self._pool: Optional[ConnectionPool] = None
        self._closed = False
        self._lock = threading.Lock()

    @property
    def closed(self) -> bool:
        return self._closed

    def _configure(self, conn: Connection) -> None:
        apply_statement_timeout(conn, self._settings.db_statement_timeout_ms)

    def _new_pool(self) -> ConnectionPool:
        return self._pool_factory(
            conninfo=self._dsn,
            min_size=self._settings.db_pool_min_size,
            max_size=self._settings.db_pool_max_size,
            open=False,
            kwargs={"autocommit": True, "row_factory": dict_row},
            configure=self._configure,
        )

    def _connect_once(self) -> ConnectionPool:
        # A pool that timed out in wait() has closed itself; start over.
        pool = self._new_pool()
        try:
            pool.open()
            pool.wait(timeout=self._settings.db_connect_timeout_s)
        except BaseException:
            pool.close()
            raise
        return pool

    def open(self) -> ConnectionPool:
        """
        Create the pool and wait until it holds `min_size` connections.

        Each attempt builds a fresh pool and waits up to
        `db_connect_timeout_s`; attempts are retried with backoff on transient
        connection errors. When every attempt fails a `StorageError` naming
        the last failure is raised.
        """
        with self._lock:
            if self._closed:
                raise StorageError("open", "connection pool already closed")
            if self._pool is not None:
                return self._pool
            try:
                for attempt in Retrying(
                    stop=stop_after_attempt(self._settings.db_connect_attempts),
                    wait=self._retry_wait,
                    retry=retry_if_exception_type(_TRANSIENT_CONNECT_ERRORS),
                    reraise=True,
                ):
                    with attempt:
                        pool = self._connect_once()
            except _TRANSIENT_CONNECT_ERRORS as exc:
                log.error("Connection pool failed to open", extra={"error": str(exc)})
                raise StorageError("open", str(exc)) from exc
            self._pool = pool
            log.info(
                "Connection pool opened",
                extra={
                    "min_size": self._settings.db_pool_min_size,
                    "max_size": self._settings.db_pool_max_size,
                },
            )
            return pool

    @contextmanager
    def connection(self) -> Generator[Connection, None, None]:
        """
        Context manager for borrowing a connection from the pool.

        Example
        -------
            manager = PoolManager()
            manager.open()
            with manager.connection() as conn:
                conn.execute("SELECT 1")
        """
        pool = self._pool
        if pool is None:
            pool = self.open()
        with pool.connection() as conn:
            yield conn

    def close(self) -> bool:
        """
        Close the pool. Only the first call does anything.

        Returns
        -------
        bool
            True if this call released the pool, False if it was already closed.
        """
        with self._lock:
            if self._closed:
                return False
            self._closed = True
            pool, self._pool = self._pool, None
        if pool is not None:
            pool.close()
        log.info("Connection pool closed")
        return True

    def close_on(self, shutdown: threading.Event) -> threading.Thread:
        """
        Close the pool once `shutdown` is set, from a background thread.

        In-flight requests are not drained; they fail through the closed pool.
        """

        def _watch() -> None:
            shutdown.wait()
            self.close()

        watcher = threading.Thread(target=_watch, name="pool-shutdown", daemon=True)
        watcher.start()
        return watcher


@retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=1, max=10),
    retry=retry_if_exception_type((psycopg.OperationalError, psycopg.InterfaceError)),
    reraise=True,
)
def get_sync_connection(dsn: Optional[str] = None) -> Connection:
    """
    Acquire a dedicated autocommit connection with automatic retry.

    Retries up to 3 times with exponential backoff for transient connection errors.
    Use this for one-off administrative work; the service itself uses the pool.

    Raises
    ------
    psycopg.OperationalError
        If connection fails after all retry attempts.
    """
    return psycopg.connect(dsn or build_dsn(), autocommit=True, row_factory=dict_row)


__all__ = [
    "PoolManager",
    "apply_statement_timeout",
    "build_dsn",
    "get_sync_connection",
]
