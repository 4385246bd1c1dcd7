"""
Client repository: create, filtered query, bulk fetch and delete over `clients`.

Every statement goes through the query composer; the repository only decides
which predicates apply and how rows decode.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, List, Optional, Sequence, Tuple

import ulid

from clients_service.domain.models import Client
from clients_service.errors import ValidationError
from clients_service.infrastructure.schema import CLIENTS_TABLE
from clients_service.query import composer
from clients_service.query.composer import ColumnFilter, Statement
from clients_service.query.filters import Contains, Equality, OneOf, Range
from clients_service.repositories.base import ConnectionSource, storage_errors
from clients_service.utils.logging import get_logger

log = get_logger(__name__)

CLIENT_COLUMNS: Tuple[str, ...] = ("id", "name", "birthday", "score", "created_at")
# Highest score first; id breaks ties so equal scores come back in a stable order.
QUERY_ORDER: Tuple[Tuple[str, str], ...] = (("score", "DESC"), ("id", "ASC"))


def new_client_id() -> str:
    """Return a fresh, collision-resistant client identifier."""
    return str(ulid.new())


@dataclass(frozen=True)
class ClientQuery:
    """
    Optional filters for `ClientRepository.query`; unset fields do not constrain.

    `name` is a substring search, `id` an exact match, and the remaining fields
    take a `Range`.
    """

    id: Optional[str] = None
    name: Optional[str] = None
    birthday: Optional[Range] = None
    score: Optional[Range] = None
    created_at: Optional[Range] = None

    def __post_init__(self) -> None:
        for field_name in ("birthday", "score", "created_at"):
            value = getattr(self, field_name)
            if value is not None and not isinstance(value, Range):
                raise ValidationError(f"{field_name} filter must be a Range, got {value!r}")

    def filters(self) -> List[ColumnFilter]:
        """Populated fields as (column, predicate) pairs, in a fixed order."""
        candidates = [
            ("id", Equality(self.id) if self.id is not None else None),
            ("name", Contains(self.name) if self.name is not None else None),
            ("birthday", self.birthday),
            ("score", self.score),
            ("created_at", self.created_at),
        ]
        return [(column, predicate) for column, predicate in candidates if predicate is not None]


class ClientRepository:
    """
    Persistence for client records.

    Parameters
    ----------
    pool : ConnectionSource
        Where connections come from (normally the service's `PoolManager`).
    id_factory : callable
        Generates identifiers for new clients.
    """

    table = CLIENTS_TABLE

    def __init__(
        self,
        pool: ConnectionSource,
        id_factory: Callable[[], str] = new_client_id,
    ) -> None:
        self._pool = pool
        self._id_factory = id_factory

    def _execute(self, operation: str, stmt: Statement) -> Any:
        with storage_errors(operation):
            with self._pool.connection() as conn:
                cur = conn.execute(stmt.sql, stmt.params or None)
                return cur.fetchall() if cur.description is not None else cur.rowcount

    def create(self, name: str, birthday: Optional[datetime] = None, score: int = 0) -> str:
        """
        Insert a client and return its new id.

        `birthday` is left out of the insert when unknown; `created_at` is
        always filled in by the database.
        """
        if not name:
            raise ValidationError("client name must be non-empty")
        client_id = self._id_factory()

        columns: List[str] = ["id", "name"]
        values: List[Any] = [client_id, name]
        if birthday is not None:
            columns.append("birthday")
            values.append(birthday)
        columns.append("score")
        values.append(score)

        self._execute("create_client", composer.insert(self.table, columns, values))
        log.info("Client created", extra={"client_id": client_id, "score": score})
        return client_id

    def query(self, query: Optional[ClientQuery] = None) -> List[str]:
        """Ids of clients matching every populated filter, highest score first."""
        filters = (query or ClientQuery()).filters()
        stmt = composer.select(self.table, ["id"], filters=filters, order_by=QUERY_ORDER)
        rows = self._execute("query_clients", stmt)
        log.debug(
            "Clients queried",
            extra={"filters": [column for column, _ in filters], "matches": len(rows)},
        )
        return [row["id"] for row in rows]

    def get(self, ids: Sequence[str]) -> List[Client]:
        """
        Full records for the requested ids, in request order.

        Unknown ids are left out; an empty request never reaches the database.
        """
        if isinstance(ids, (str, bytes)):
            raise ValidationError(f"ids must be a sequence of ids, not a single string: {ids!r}")
        if not ids:
            return []
        stmt = composer.select(self.table, CLIENT_COLUMNS, filters=[("id", OneOf(tuple(ids)))])
        rows = self._execute("get_clients", stmt)
        position = {}
        for index, client_id in enumerate(ids):
            position.setdefault(client_id, index)
        clients = [Client.from_row(row) for row in rows]
        clients.sort(key=lambda client: position.get(client.id, len(ids)))
        return clients

    def delete(self, client_id: str) -> None:
        """Delete one client. Deleting an unknown id is not an error."""
        stmt = composer.delete(self.table, [("id", Equality(client_id))])
        deleted = self._execute("delete_client", stmt)
        log.info("Client deleted", extra={"client_id": client_id, "rows": deleted})

    def delete_all(self) -> int:
        """Delete every client unconditionally; returns the number of rows removed."""
        deleted = self._execute("delete_all_clients", composer.delete(self.table))
        log.warning("All clients deleted", extra={"rows": deleted})
        return deleted


__all__ = ["CLIENT_COLUMNS", "ClientQuery", "ClientRepository", "QUERY_ORDER", "new_client_id"]
