"""Command line entry points."""

import asyncio
from pathlib import Path

import click
import uvicorn

from label_ledger.config import settings
from label_ledger.db import async_session_maker, dispose_engine, engine, init_db
from label_ledger.logging import setup_logging
from label_ledger.services.backup_service import BackupService, default_backup_name
from label_ledger.services.labels.allocation_service import LabelAllocationService


async def _init_db() -> None:
    try:
        await init_db(engine)
    finally:
        await dispose_engine()


async def _list_sequences() -> list[tuple[str, int]]:
    try:
        await init_db(engine)
        async with async_session_maker() as session:
            counters = await LabelAllocationService(session).list_sequences()
            return [(c.process_type, c.last_number) for c in counters]
    finally:
        await dispose_engine()


async def _backup(destination: Path) -> Path:
    try:
        return await BackupService(engine).backup_to(destination)
    finally:
        await dispose_engine()


@click.group()
def cli() -> None:
    """Palm label ledger."""
    setup_logging()


@cli.command()
@click.option("--host", default="127.0.0.1", show_default=True)
@click.option("--port", default=8000, show_default=True, type=int)
@click.option("--reload", is_flag=True, help="Restart on code changes.")
def serve(host: str, port: int, reload: bool) -> None:
    """Run the HTTP API used by the label UI."""
    uvicorn.run(
        "label_ledger.main:app",
        host=host,
        port=port,
        reload=reload,
        log_config=None,  # structlog owns the root logger
    )


@cli.command("init-db")
def init_db_command() -> None:
    """Create tables and seed missing counters. Existing counters are kept."""
    asyncio.run(_init_db())
    click.echo(f"Database ready: {settings.database_url}")


@cli.command()
def sequences() -> None:
    """Print the last issued number of every process type."""
    for process_type, last_number in asyncio.run(_list_sequences()):
        click.echo(f"{process_type:<4} {last_number}")


@cli.command()
@click.argument("destination", required=False, type=click.Path(dir_okay=False, path_type=Path))
def backup(destination: Path | None) -> None:
    """Copy the database to DESTINATION (default: dated file in the current directory)."""
    path = asyncio.run(_backup(destination or Path(default_backup_name())))
    click.echo(f"Backup written to {path}")


if __name__ == "__main__":
    cli()
