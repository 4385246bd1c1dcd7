"""
Match ledger: records score deltas and keeps `clients.score` in step.

The match insert and the score increment share one transaction, so a reader
either sees both or neither. Concurrent increments on the same client are
serialized by the row lock the UPDATE takes; nothing here locks in-process.
"""

from __future__ import annotations

from typing import List

from clients_service.domain.models import Match
from clients_service.errors import ValidationError
from clients_service.infrastructure.schema import CLIENTS_TABLE, MATCHES_TABLE
from clients_service.query import composer
from clients_service.query.filters import Equality
from clients_service.repositories.base import ConnectionSource, storage_errors
from clients_service.utils.logging import get_logger

log = get_logger(__name__)

MATCH_COLUMNS = ("id", "client_id", "score")


class MatchLedger:
    """Transactional writer and reader for `client_matches`."""

    table = MATCHES_TABLE

    def __init__(self, pool: ConnectionSource) -> None:
        self._pool = pool

    def record(self, client_id: str, score_delta: int) -> int:
        """
        Insert a match for `client_id` and add `score_delta` to the client's score.

        The client is not required to exist: the match row is kept even when
        the UPDATE touches nothing. Any failure rolls the whole transaction
        back before `StorageError` propagates.

        Returns
        -------
        int
            Id of the new match row.
        """
        if isinstance(score_delta, bool) or not isinstance(score_delta, int):
            raise ValidationError(f"score delta must be an integer, got {score_delta!r}")
        insert_stmt = composer.insert(
            self.table, ["client_id", "score"], [client_id, score_delta], returning="id"
        )
        update_stmt = composer.update(
            CLIENTS_TABLE,
            increments=[("score", score_delta)],
            filters=[("id", Equality(client_id))],
        )

        with storage_errors("record_match"):
            with self._pool.connection() as conn:
                with conn.transaction():
                    match_id = conn.execute(insert_stmt.sql, insert_stmt.params).fetchone()["id"]
                    updated = conn.execute(update_stmt.sql, update_stmt.params).rowcount

        if not updated:
            log.debug("Match recorded for unknown client", extra={"client_id": client_id})
        log.info(
            "Match recorded",
            extra={"match_id": match_id, "client_id": client_id, "score_delta": score_delta},
        )
        return int(match_id)

    def list_for_client(self, client_id: str) -> List[Match]:
        """Every match recorded against `client_id`, oldest first."""
        stmt = composer.select(
            self.table,
            MATCH_COLUMNS,
            filters=[("client_id", Equality(client_id))],
            order_by=[("id", "ASC")],
        )
        with storage_errors("list_matches"):
            with self._pool.connection() as conn:
                rows = conn.execute(stmt.sql, stmt.params).fetchall()
        return [Match(**row) for row in rows]

    def score_total(self, client_id: str) -> int:
        """Sum of all deltas recorded for `client_id`."""
        return sum(match.score for match in self.list_for_client(client_id))


__all__ = ["MATCH_COLUMNS", "MatchLedger"]
