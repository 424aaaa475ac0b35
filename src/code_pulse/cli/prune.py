"""Prune command: apply the retention window to stored daily totals."""

from typing import Optional

import typer

from ..exceptions import PersistenceError
from . import app
from ._common import console, open_store, resolve_config


@app.command()
def prune(
    ctx: typer.Context,
    days: Optional[int] = typer.Option(
        None,
        "--days",
        "-d",
        help="Retention window in days (default: retention_days from config)",
        min=1,
    ),
):
    """
    Remove daily totals older than the retention window.

    [bold cyan]Examples:[/bold cyan]

      code-pulse prune

      code-pulse prune --days 30
    """
    config = resolve_config(ctx)
    retention = days if days is not None else config.retention_days

    try:
        removed = open_store(config).prune_old_metrics(retention)
    except PersistenceError as e:
        console.print(f"[red]Error pruning metrics:[/red] {e}")
        raise typer.Exit(1)

    console.print(f"[green]Removed {removed} daily entries older than {retention} days[/green]")
