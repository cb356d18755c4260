"""CLI commands for storecache.

Provides command-line interface using Typer:
- storecache invalidate shift|day|store|lookup|tender-type: run a cascade
- storecache health: check the configured cache store

Usage:
    storecache --help
    storecache invalidate shift shift-1 store-9 2024-01-15
    storecache invalidate lookup client-A --store store-7 --format json
    storecache health
"""

import typer

from storecache.cli.health_cmd import app as health_app
from storecache.cli.invalidate_cmd import app as invalidate_app

# Main CLI application
app = typer.Typer(
    name="storecache",
    help="storecache: cascading cache invalidation for retail reporting",
    no_args_is_help=True,
)

app.add_typer(invalidate_app, name="invalidate")
app.add_typer(health_app, name="health")


@app.callback()
def callback() -> None:
    """storecache: cascading cache invalidation for retail reporting."""
    pass


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
