"""
Service facade for clients and matches.

The transport layer (whatever decodes requests) calls these methods and gets
back plain values or a `ClientsServiceError`. The facade owns the connection
pool for its whole lifetime and releases it exactly once on shutdown.

Usage:
    from clients_service.service import ClientsService

    with ClientsService.from_settings() as svc:
        client_id = svc.create_client("Ann", score=10)
        svc.record_match(client_id, 5)
        print(svc.get_clients([client_id]))
"""

from __future__ import annotations

import threading
from datetime import datetime
from typing import Callable, Iterable, List, Optional, Sequence

from clients_service.config import Settings
from clients_service.domain.models import Client, Match
from clients_service.infrastructure.db_factory import PoolManager
from clients_service.query.filters import Range
from clients_service.repositories.clients import ClientQuery, ClientRepository, new_client_id
from clients_service.repositories.matches import MatchLedger
from clients_service.utils.logging import get_logger
from clients_service.utils.sorting import sort_unique

log = get_logger(__name__)


class ClientsService:
    """
    Entry point for every client/match operation.

    Parameters
    ----------
    pool : PoolManager
        Connection pool owner; the service closes it and nobody else should.
    id_factory : callable
        Identifier generator for new clients.
    """

    def __init__(
        self,
        pool: PoolManager,
        id_factory: Callable[[], str] = new_client_id,
    ) -> None:
        self._pool = pool
        self.clients = ClientRepository(pool, id_factory=id_factory)
        self.matches = MatchLedger(pool)

    @classmethod
    def from_settings(
        cls,
        settings: Optional[Settings] = None,
        dsn: Optional[str] = None,
    ) -> "ClientsService":
        """Open a pool from settings (or an explicit DSN) and wrap it in a service."""
        pool = PoolManager(dsn=dsn, settings=settings)
        pool.open()
        return cls(pool)

    # Clients

    def create_client(
        self,
        name: str,
        birthday: Optional[datetime] = None,
        score: int = 0,
    ) -> str:
        return self.clients.create(name, birthday=birthday, score=score)

    def query_clients(
        self,
        id: Optional[str] = None,
        name: Optional[str] = None,
        birthday: Optional[Range] = None,
        score: Optional[Range] = None,
        created_at: Optional[Range] = None,
    ) -> List[str]:
        """Ids matching every given filter, highest score first (ties by id)."""
        query = ClientQuery(
            id=id, name=name, birthday=birthday, score=score, created_at=created_at
        )
        return self.clients.query(query)

    def get_clients(self, ids: Sequence[str]) -> List[Client]:
        return self.clients.get(ids)

    def delete_client(self, client_id: str) -> None:
        self.clients.delete(client_id)

    def delete_all_clients(self) -> None:
        self.clients.delete_all()

    # Matches

    def record_match(self, client_id: str, score: int) -> int:
        """Record a match and apply its delta to the client's score atomically."""
        return self.matches.record(client_id, score)

    def list_matches(self, client_id: str) -> List[Match]:
        return self.matches.list_for_client(client_id)

    # Utilities

    @staticmethod
    def sort(items: Iterable[str], remove_duplicates: bool = False) -> List[str]:
        return sort_unique(items, remove_duplicates=remove_duplicates)

    # Lifecycle

    def close(self) -> bool:
        """Release the pool; later calls are no-ops and return False."""
        return self._pool.close()

    def close_on(self, shutdown: threading.Event) -> threading.Thread:
        """Release the pool from a watcher thread once `shutdown` is set."""
        log.debug("Waiting for shutdown signal")
        return self._pool.close_on(shutdown)

    def __enter__(self) -> "ClientsService":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


__all__ = ["ClientsService"]
