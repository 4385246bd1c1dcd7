from __future__ import annotations

import sys
from datetime import datetime
from typing import Callable, List, Optional

import typer
from rich import box
from rich.console import Console
from rich.table import Table

from clients_service.config import get_settings
from clients_service.domain.models import Client, Match
from clients_service.errors import ClientsServiceError, ValidationError
from clients_service.infrastructure.db_factory import build_dsn, get_sync_connection
from clients_service.infrastructure.schema import init_schema
from clients_service.query.filters import Range
from clients_service.service import ClientsService
from clients_service.utils.logging import configure_logging
from clients_service.utils.sorting import sort_unique

app = typer.Typer(help="Clients service CLI.")
console = Console()


def _service() -> ClientsService:
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.log_json)
    return ClientsService.from_settings(settings)


def parse_range(text: Optional[str], cast: Callable[[str], object]) -> Optional[Range]:
    """
    Parse ``op:value`` or ``between:low,high`` into a `Range`.

    Operators: eq, lt, lte, gt, gte, between.
    """
    if text is None:
        return None
    operator, sep, raw = text.partition(":")
    if not sep or not raw:
        raise ValidationError(f"expected 'op:value', got {text!r}")
    try:
        values = tuple(cast(part.strip()) for part in raw.split(","))
    except ValueError as exc:
        raise ValidationError(f"bad value in {text!r}: {exc}") from exc
    return Range.of(operator.strip().lower(), *values)


def _clients_table(clients: List[Client]) -> Table:
    table = Table(title="Clients", box=box.SIMPLE_HEAVY)
    table.add_column("id", style="cyan", no_wrap=True)
    table.add_column("name")
    table.add_column("birthday")
    table.add_column("score", justify="right")
    table.add_column("created_at")
    for client in clients:
        table.add_row(
            client.id,
            client.name,
            client.birthday.isoformat() if client.birthday else "-",
            str(client.score),
            client.created_at.isoformat() if client.created_at else "-",
        )
    return table


def _matches_table(matches: List[Match]) -> Table:
    table = Table(title="Matches", box=box.SIMPLE_HEAVY)
    table.add_column("id", justify="right")
    table.add_column("client_id", style="cyan")
    table.add_column("score", justify="right")
    for match in matches:
        table.add_row(str(match.id), match.client_id, str(match.score))
    return table


@app.command()
def info() -> None:
    """
    Show effective configuration values.
    """
    settings = get_settings()
    dsn = build_dsn(settings)
    safe_dsn = dsn.replace(f":{settings.db_password}@", ":***@") if settings.db_password else dsn
    typer.echo(
        f"DB={safe_dsn} | pool=({settings.db_pool_min_size},{settings.db_pool_max_size}) "
        f"statement_timeout={settings.db_statement_timeout_ms}ms env={settings.app_env}"
    )


@app.command("init-db")
def init_db() -> None:
    """
    Create the clients and client_matches tables if missing.
    """
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.log_json)
    with get_sync_connection(build_dsn(settings)) as conn:
        init_schema(conn)
    typer.echo("Schema ready.")


@app.command()
def create(
    name: str = typer.Argument(..., help="Client name."),
    birthday: Optional[datetime] = typer.Option(None, "--birthday", "-b", help="ISO date/time."),
    score: int = typer.Option(0, "--score", "-s", help="Initial score."),
) -> None:
    """
    Create a client and print its id.
    """
    with _service() as svc:
        typer.echo(svc.create_client(name, birthday=birthday, score=score))


@app.command()
def query(
    client_id: Optional[str] = typer.Option(None, "--id", help="Exact id."),
    name: Optional[str] = typer.Option(None, "--name", "-n", help="Name substring."),
    birthday: Optional[str] = typer.Option(None, "--birthday", help="e.g. 'lt:2000-01-01'."),
    score: Optional[str] = typer.Option(None, "--score", help="e.g. 'between:10,20'."),
    created_at: Optional[str] = typer.Option(None, "--created-at", help="e.g. 'gte:2024-05-01'."),
) -> None:
    """
    List client ids matching the filters, highest score first.
    """
    with _service() as svc:
        ids = svc.query_clients(
            id=client_id,
            name=name,
            birthday=parse_range(birthday, datetime.fromisoformat),
            score=parse_range(score, int),
            created_at=parse_range(created_at, datetime.fromisoformat),
        )
    for found in ids:
        typer.echo(found)


@app.command()
def get(ids: List[str] = typer.Argument(..., help="Client ids.")) -> None:
    """
    Show full records for the given ids.
    """
    with _service() as svc:
        clients = svc.get_clients(ids)
    console.print(_clients_table(clients))


@app.command()
def delete(client_id: str = typer.Argument(..., help="Client id.")) -> None:
    """
    Delete one client (no error if it does not exist).
    """
    with _service() as svc:
        svc.delete_client(client_id)
    typer.echo("Deleted.")


@app.command("delete-all")
def delete_all() -> None:
    """
    Delete every client. There is no confirmation step.
    """
    with _service() as svc:
        svc.delete_all_clients()
    typer.echo("All clients deleted.")


@app.command("record-match")
def record_match(
    client_id: str = typer.Argument(..., help="Client id."),
    score: int = typer.Argument(..., help="Signed score delta."),
) -> None:
    """
    Record a match and apply its score delta; prints the match id.
    """
    with _service() as svc:
        typer.echo(svc.record_match(client_id, score))


@app.command()
def matches(client_id: str = typer.Argument(..., help="Client id.")) -> None:
    """
    Show the match history of a client.
    """
    with _service() as svc:
        history = svc.list_matches(client_id)
    console.print(_matches_table(history))


@app.command()
def sort(
    items: List[str] = typer.Argument(None, help="Strings to sort."),
    unique: bool = typer.Option(False, "--unique", "-u", help="Remove duplicates."),
) -> None:
    """
    Sort strings, optionally removing duplicates.
    """
    for item in sort_unique(items or [], remove_duplicates=unique):
        typer.echo(item)


def main() -> None:
    try:
        app()
    except ClientsServiceError as exc:
        typer.echo(f"Error: {exc}", err=True)
        sys.exit(1)
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()
