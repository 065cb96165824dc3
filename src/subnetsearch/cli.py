"""
Maintenance commands run outside the HTTP server.

Usage:
    subnetsearch reconcile
    subnetsearch status
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

import typer

from subnetsearch.config import SubnetSearchSettings, get_settings
from subnetsearch.core.exceptions import SubnetSearchError
from subnetsearch.sync.reconciler import BulkReconciler, ReconcileResult
from subnetsearch.sync.tracker import ConsistencyTracker, SyncStatus

if TYPE_CHECKING:
    from subnetsearch.ports import IndexClient, RecordSource

app = typer.Typer(
    name="subnetsearch",
    help="Subnet search index maintenance",
    add_completion=False,
)

EXIT_REJECTED = 1
EXIT_UNAVAILABLE = 2


@asynccontextmanager
async def open_backends(settings: SubnetSearchSettings) -> AsyncIterator[tuple[IndexClient, RecordSource]]:
    """Open the index client and record source, closing both on exit."""
    from subnetsearch.db.base import create_engine, create_session_factory
    from subnetsearch.db.repositories.record import SqlRecordSource
    from subnetsearch.search.client import AsyncIndexClient

    engine = create_engine(str(settings.database_url), timeout=settings.database_timeout)
    client = AsyncIndexClient.from_settings(settings)
    try:
        yield client, SqlRecordSource(create_session_factory(engine))
    finally:
        await client.close()
        await engine.dispose()


async def _reconcile(settings: SubnetSearchSettings, page_size: int) -> ReconcileResult:
    async with open_backends(settings) as (client, records):
        return await BulkReconciler(client, records, page_size=page_size).reconcile()


async def _status(settings: SubnetSearchSettings) -> SyncStatus:
    async with open_backends(settings) as (client, records):
        return await ConsistencyTracker(client, records).status()


@app.command()
def reconcile(
    page_size: int | None = typer.Option(None, "--page-size", min=1, help="Records read per page"),
) -> None:
    """Rewrite every record into the index and prune orphaned documents."""
    from subnetsearch.api.app import configure_logging

    settings = get_settings()
    configure_logging(settings.log_level)

    try:
        result = asyncio.run(_reconcile(settings, page_size or settings.reconcile_page_size))
    except SubnetSearchError as e:
        typer.echo(f"Reconcile failed: {e.message}", err=True)
        raise typer.Exit(code=EXIT_UNAVAILABLE)

    typer.echo(
        f"Processed {result.documents_processed}, indexed {result.documents_indexed}, "
        f"rejected {len(result.errors)}, orphans removed {result.orphans_removed}"
    )
    for error in result.errors:
        typer.echo(f"  {error.id}: {error.status} {error.error_type or ''} {error.reason or ''}".rstrip(), err=True)
    if not result.success:
        raise typer.Exit(code=EXIT_REJECTED)


@app.command()
def status() -> None:
    """Compare record and document counts."""
    settings = get_settings()
    try:
        current = asyncio.run(_status(settings))
    except SubnetSearchError as e:
        typer.echo(f"Status check failed: {e.message}", err=True)
        raise typer.Exit(code=EXIT_UNAVAILABLE)

    state = "in sync" if current.synced else f"out of sync by {current.difference}"
    typer.echo(
        f"{current.table_name}: {current.record_count} records, "
        f"{current.index_name}: {current.index_count} documents ({state})"
    )


if __name__ == "__main__":
    app()
