"""
Seed script for the clients service.

Generates deterministic pseudo-random clients and matches and writes them
through the service, so every seeded score satisfies the ledger invariant.
"""

from __future__ import annotations

import random
import sys
import time
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import List, Optional

import typer

from clients_service.config import get_settings
from clients_service.infrastructure.db_factory import build_dsn, get_sync_connection
from clients_service.infrastructure.schema import init_schema
from clients_service.service import ClientsService
from clients_service.utils.logging import configure_logging

app = typer.Typer(help="Generate synthetic clients and matches and load them into Postgres.")

_FIRST_NAMES = ["ana", "bruno", "carla", "diego", "elisa", "fabio", "gabi", "heitor"]
_LAST_NAMES = ["silva", "souza", "costa", "lima", "rocha", "alves"]


@dataclass(frozen=True)
class SeedClient:
    name: str
    birthday: Optional[datetime]
    score: int
    match_deltas: List[int]


def _generate_clients(count: int, matches_per_client: int, seed: int) -> List[SeedClient]:
    rng = random.Random(seed)
    epoch = datetime(1960, 1, 1, tzinfo=UTC)
    clients: List[SeedClient] = []
    for _ in range(count):
        name = f"{rng.choice(_FIRST_NAMES)} {rng.choice(_LAST_NAMES)}"
        # roughly one in five clients has no known birthday
        birthday = None if rng.random() < 0.2 else epoch + timedelta(days=rng.randint(0, 20_000))
        clients.append(
            SeedClient(
                name=name,
                birthday=birthday,
                score=rng.randint(0, 100),
                match_deltas=[rng.randint(-10, 25) for _ in range(matches_per_client)],
            )
        )
    return clients


def _load(svc: ClientsService, clients: List[SeedClient]) -> int:
    """Create every client and record its matches; returns the number of matches."""
    recorded = 0
    for client in clients:
        client_id = svc.create_client(client.name, birthday=client.birthday, score=client.score)
        for delta in client.match_deltas:
            svc.record_match(client_id, delta)
            recorded += 1
    return recorded


@app.command()
def main(
    clients: int = typer.Option(
        100,
        "--clients",
        "-c",
        help="Number of clients to generate.",
    ),
    matches: int = typer.Option(
        5,
        "--matches",
        "-m",
        help="Matches recorded per client.",
    ),
    seed: int = typer.Option(
        42,
        "--seed",
        help="Deterministic RNG seed.",
    ),
    dsn: str | None = typer.Option(
        None,
        "--dsn",
        help="Optional DSN override for Postgres.",
    ),
    reset: bool = typer.Option(
        False,
        "--reset",
        help="Delete all existing clients before seeding.",
    ),
) -> None:
    """
    Generate synthetic clients and matches and write them through the service.
    """
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.log_json)
    conn_dsn = dsn or build_dsn(settings)

    with get_sync_connection(conn_dsn) as conn:
        init_schema(conn)

    start = time.perf_counter()
    generated = _generate_clients(clients, matches, seed)
    with ClientsService.from_settings(settings, dsn=conn_dsn) as svc:
        if reset:
            svc.delete_all_clients()
        recorded = _load(svc, generated)

    duration = time.perf_counter() - start
    typer.echo(
        f"Seeded {len(generated):,} clients and {recorded:,} matches in {duration:.2f}s."
    )


if __name__ == "__main__":
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)
