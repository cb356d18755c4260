"""CLI command for checking the configured cache store.

Usage:
    storecache health
"""

from __future__ import annotations

import asyncio

import typer

from storecache.config import settings

app = typer.Typer(help="Check cache store connectivity")


async def _check() -> bool:
    from storecache.cache import runtime

    try:
        return await runtime.health_check()
    finally:
        await runtime.stop_invalidation()


@app.callback(invoke_without_command=True)
def health() -> None:
    """Ping the cache store selected by CACHE_BACKEND."""
    from rich.console import Console

    console = Console()
    backend = settings.cache_backend

    if asyncio.run(_check()):
        console.print(f"[green]OK[/green] cache store reachable ({backend})")
        return

    console.print(f"[red]FAILED[/red] cache store unreachable ({backend})")
    raise typer.Exit(code=1)
