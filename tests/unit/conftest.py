"""
In-memory stand-ins for the psycopg pool, connection and cursor.

The fake connection records every statement it sees and answers from a small
script keyed by SQL prefix. Statements run inside ``transaction()`` only reach
`committed` when the block exits cleanly, which is enough to check that the
ledger never leaves half a match behind.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Iterator, Optional

import pytest


class FakeCursor:
    def __init__(self, rows: Optional[list[dict[str, Any]]], rowcount: int) -> None:
        self._rows = rows
        self.rowcount = rowcount
        self.description = None if rows is None else [("col",)]

    def fetchall(self) -> list[dict[str, Any]]:
        return list(self._rows or [])

    def fetchone(self) -> Optional[dict[str, Any]]:
        return self._rows[0] if self._rows else None


class FakeConnection:
    def __init__(self) -> None:
        self.executed: list[tuple[str, Any]] = []
        self.committed: list[tuple[str, Any]] = []
        self.events: list[str] = []
        self._script: list[tuple[str, dict[str, Any]]] = []
        self._pending: Optional[list[tuple[str, Any]]] = None

    def script(
        self,
        prefix: str,
        rows: Optional[list[dict[str, Any]]] = None,
        rowcount: int = 0,
        error: Optional[BaseException] = None,
    ) -> None:
        self._script.append((prefix, {"rows": rows, "rowcount": rowcount, "error": error}))

    def execute(self, sql: str, params: Any = None) -> FakeCursor:
        self.executed.append((sql, params))
        default_rows = [] if sql.startswith("SELECT") else None
        response: dict[str, Any] = {"rows": default_rows, "rowcount": 0, "error": None}
        for prefix, scripted in self._script:
            if sql.startswith(prefix):
                response = scripted
                break
        if response["error"] is not None:
            raise response["error"]
        if self._pending is not None:
            self._pending.append((sql, params))
        else:
            self.committed.append((sql, params))
        return FakeCursor(response["rows"], response["rowcount"])

    @contextmanager
    def transaction(self) -> Iterator[None]:
        self.events.append("begin")
        self._pending = []
        try:
            yield
        except BaseException:
            self.events.append("rollback")
            self._pending = None
            raise
        self.committed.extend(self._pending)
        self._pending = None
        self.events.append("commit")


class FakePool:
    def __init__(self, conn: Optional[FakeConnection] = None) -> None:
        self.conn = conn or FakeConnection()
        self.borrowed = 0
        self.close_calls = 0

    @contextmanager
    def connection(self) -> Iterator[FakeConnection]:
        self.borrowed += 1
        yield self.conn

    def close(self) -> bool:
        self.close_calls += 1
        return self.close_calls == 1


@pytest.fixture
def fake_conn() -> FakeConnection:
    return FakeConnection()


@pytest.fixture
def fake_pool(fake_conn: FakeConnection) -> FakePool:
    return FakePool(fake_conn)
