"""CLI commands for running cascade invalidations by hand.

Useful after re-seeding, backfills or manual data fixes, when caches must be
dropped without going through a business service.

Usage:
    storecache invalidate shift shift-1 store-9 2024-01-15
    storecache invalidate day store-9 2024-01-15
    storecache invalidate store store-9
    storecache invalidate lookup client-A --store store-7
    storecache invalidate tender-type client-A
    storecache invalidate tender-type            # system defaults only
"""

from __future__ import annotations

import asyncio
import json
from collections.abc import Callable
from typing import TYPE_CHECKING

import typer

from storecache.cache.errors import InvalidCacheKeyError
from storecache.config import settings

if TYPE_CHECKING:
    from storecache.cache.invalidation import CacheInvalidator, InvalidationPlan
    from storecache.cache.results import InvalidationResult

app = typer.Typer(help="Invalidate cached summaries, reports and lookup tables")

PlanBuilder = Callable[["CacheInvalidator"], "InvalidationPlan"]

OUTPUT_FORMAT = typer.Option(
    "text",
    "--format",
    "-f",
    help="Output format: text, json",
)


async def _execute(build: PlanBuilder) -> InvalidationResult:
    from storecache.cache import runtime

    invalidator = await runtime.get_invalidator()
    try:
        return await invalidator.run(build(invalidator))
    finally:
        await runtime.stop_invalidation()


def _run(build: PlanBuilder, output_format: str) -> None:
    from rich.console import Console
    from rich.markup import escape
    from rich.table import Table

    from storecache.observability.logging import configure_logging

    configure_logging(json_format=settings.log_json, level=settings.log_level)
    console = Console()

    try:
        result = asyncio.run(_execute(build))
    except InvalidCacheKeyError as e:
        console.print(f"[red]Invalid identifier:[/red] {escape(str(e))}")
        raise typer.Exit(code=2) from e

    if output_format == "json":
        typer.echo(json.dumps(result.to_dict(), indent=2))
    else:
        table = Table(title="Cache invalidation")
        table.add_column("Status")
        table.add_column("Key / pattern / error")
        for key in result.invalidated_keys:
            table.add_row("[green]invalidated[/green]", escape(key))
        for error in result.errors:
            table.add_row("[red]failed[/red]", escape(error))
        console.print(table)

    if not result.success:
        raise typer.Exit(code=1)


@app.command("shift")
def invalidate_shift(
    shift_id: str = typer.Argument(..., help="Shift ID"),
    store_id: str = typer.Argument(..., help="Store the shift belongs to"),
    business_date: str = typer.Argument(..., help="Business date (YYYY-MM-DD)"),
    output_format: str = OUTPUT_FORMAT,
) -> None:
    """Invalidate a shift, its day summary and the store's period reports."""
    _run(lambda inv: inv.plan_shift(shift_id, store_id, business_date), output_format)


@app.command("day")
def invalidate_day(
    store_id: str = typer.Argument(..., help="Store ID"),
    business_date: str = typer.Argument(..., help="Business date (YYYY-MM-DD)"),
    output_format: str = OUTPUT_FORMAT,
) -> None:
    """Invalidate a day summary and the store's period reports."""
    _run(lambda inv: inv.plan_day(store_id, business_date), output_format)


@app.command("store")
def invalidate_store(
    store_id: str = typer.Argument(..., help="Store ID"),
    output_format: str = OUTPUT_FORMAT,
) -> None:
    """Invalidate every day summary and period report of a store."""
    _run(lambda inv: inv.plan_store(store_id), output_format)


@app.command("lookup")
def invalidate_lookup(
    client_id: str | None = typer.Argument(None, help="Client ID (omit for system defaults)"),
    store_id: str | None = typer.Option(None, "--store", "-s", help="Store ID"),
    output_format: str = OUTPUT_FORMAT,
) -> None:
    """Invalidate tender types, departments and (with --store) tax rates."""
    _run(lambda inv: inv.plan_lookup(client_id, store_id), output_format)


@app.command("tender-type")
def invalidate_tender_type(
    client_id: str | None = typer.Argument(None, help="Client ID (omit for system defaults)"),
    output_format: str = OUTPUT_FORMAT,
) -> None:
    """Invalidate a client's tender types and the system defaults."""
    _run(lambda inv: inv.plan_tender_type(client_id), output_format)
