"""
Query composer: folds fixed clauses and filter predicates into one statement.

Every builder returns a `Statement` whose `params` line up one-to-one, left to
right, with the ``%s`` placeholders in `sql`. Filters are ANDed in the order
they were supplied so the generated SQL is reproducible.

Usage:
    from clients_service.query.composer import select
    from clients_service.query.filters import Contains, Range

    stmt = select(
        "clients",
        ["id"],
        filters=[("name", Contains("ann")), ("score", Range.gte(10))],
        order_by=[("score", "DESC"), ("id", "ASC")],
    )
    cur.execute(stmt.sql, stmt.params)
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence, Tuple

from clients_service.errors import ValidationError
from clients_service.query.filters import FilterPredicate

ColumnFilter = Tuple[str, FilterPredicate]

_IDENTIFIER = re.compile(r"^[a-z_][a-z0-9_]*$")
_DIRECTIONS = ("ASC", "DESC")


@dataclass(frozen=True)
class Statement:
    """A SQL string with positional placeholders and its bound parameters."""

    sql: str
    params: Tuple[Any, ...] = ()


def _identifier(name: str) -> str:
    if not isinstance(name, str) or not _IDENTIFIER.match(name):
        raise ValidationError(f"invalid SQL identifier {name!r}")
    return name


def _where(filters: Sequence[ColumnFilter]) -> Tuple[str, Tuple[Any, ...]]:
    clauses: List[str] = []
    params: List[Any] = []
    for column, predicate in filters:
        if not isinstance(predicate, FilterPredicate):
            raise ValidationError(f"filter for {column!r} is not a predicate: {predicate!r}")
        fragment, values = predicate.clause(_identifier(column))
        clauses.append(fragment)
        params.extend(values)
    if not clauses:
        return "", ()
    return " WHERE " + " AND ".join(clauses), tuple(params)


def _order_by(terms: Sequence[Tuple[str, str]]) -> str:
    if not terms:
        return ""
    rendered = []
    for column, direction in terms:
        direction = direction.upper()
        if direction not in _DIRECTIONS:
            raise ValidationError(f"invalid sort direction {direction!r}")
        rendered.append(f"{_identifier(column)} {direction}")
    return " ORDER BY " + ", ".join(rendered)


def select(
    table: str,
    columns: Sequence[str],
    filters: Sequence[ColumnFilter] = (),
    order_by: Sequence[Tuple[str, str]] = (),
) -> Statement:
    """Build ``SELECT columns FROM table [WHERE ...] [ORDER BY ...]``."""
    if not columns:
        raise ValidationError("select needs at least one column")
    cols = ", ".join(_identifier(c) for c in columns)
    where, params = _where(filters)
    sql = f"SELECT {cols} FROM {_identifier(table)}{where}{_order_by(order_by)}"
    return Statement(sql, params)


def insert(
    table: str,
    columns: Sequence[str],
    values: Sequence[Any],
    returning: Optional[str] = None,
) -> Statement:
    """Build ``INSERT INTO table (columns) VALUES (...)`` with optional RETURNING."""
    if not columns:
        raise ValidationError("insert needs at least one column")
    if len(columns) != len(values):
        raise ValidationError(
            f"insert has {len(columns)} column(s) but {len(values)} value(s)"
        )
    cols = ", ".join(_identifier(c) for c in columns)
    placeholders = ", ".join(["%s"] * len(values))
    sql = f"INSERT INTO {_identifier(table)} ({cols}) VALUES ({placeholders})"
    if returning is not None:
        sql += f" RETURNING {_identifier(returning)}"
    return Statement(sql, tuple(values))


def update(
    table: str,
    assignments: Sequence[Tuple[str, Any]] = (),
    increments: Sequence[Tuple[str, Any]] = (),
    filters: Sequence[ColumnFilter] = (),
) -> Statement:
    """
    Build ``UPDATE table SET ... [WHERE ...]``.

    `assignments` render as ``col = %s``; `increments` render as
    ``col = col + %s`` so the engine applies them atomically on the row.
    """
    if not assignments and not increments:
        raise ValidationError("update needs at least one assignment or increment")
    sets: List[str] = []
    params: List[Any] = []
    for column, value in assignments:
        sets.append(f"{_identifier(column)} = %s")
        params.append(value)
    for column, delta in increments:
        column = _identifier(column)
        sets.append(f"{column} = {column} + %s")
        params.append(delta)
    where, where_params = _where(filters)
    sql = f"UPDATE {_identifier(table)} SET {', '.join(sets)}{where}"
    return Statement(sql, tuple(params) + where_params)


def delete(table: str, filters: Sequence[ColumnFilter] = ()) -> Statement:
    """Build ``DELETE FROM table [WHERE ...]``; no filters deletes every row."""
    where, params = _where(filters)
    return Statement(f"DELETE FROM {_identifier(table)}{where}", params)


__all__ = ["ColumnFilter", "Statement", "delete", "insert", "select", "update"]
