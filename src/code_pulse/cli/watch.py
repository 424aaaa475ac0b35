"""Watch command: track coding activity in a workspace until interrupted."""

import asyncio
from pathlib import Path
from typing import List, Optional

import typer

from ..context import PulseContext
from ..exceptions import PersistenceError
from ..metrics.recommendations import ComplexityAlert
from ..tracking import AnalysisScheduler, WorkspaceWatcher
from . import app
from ._common import console, err_console, open_store, resolve_config


@app.command()
def watch(
    ctx: typer.Context,
    paths: Optional[List[Path]] = typer.Argument(
        None,
        help="Directories to watch (default: current directory)",
        exists=True,
        file_okay=False,
        dir_okay=True,
        resolve_path=True,
    ),
):
    """
    Analyze files as they are written and record coding sessions.

    Each written file is analyzed once it settles, sessions are flushed
    every tracking_interval_minutes and once more on exit (Ctrl+C).

    [bold cyan]Examples:[/bold cyan]

      code-pulse watch

      code-pulse watch src tests
    """
    config = resolve_config(ctx)
    roots = list(paths) if paths else [Path.cwd()]
    store = open_store(config)

    scheduler = AnalysisScheduler(
        PulseContext.create(config),
        store,
        on_alert=_print_alert,
    )
    watcher = WorkspaceWatcher(scheduler, roots, ignored_files=[store.path])

    console.print(f"[bold]Watching[/bold] {', '.join(str(r) for r in watcher.roots)}")
    try:
        asyncio.run(_run(scheduler, watcher))
    except KeyboardInterrupt:
        console.print(f"[dim]Stopped watching. Metrics saved to {store.path}[/dim]")
    except PersistenceError as e:
        err_console.print(f"[red]Error saving metrics:[/red] {e}")
        raise typer.Exit(1)


async def _run(scheduler: AnalysisScheduler, watcher: WorkspaceWatcher) -> None:
    async with scheduler:
        restored = scheduler.restore(str(root) for root in watcher.roots)
        if restored:
            console.print(f"[dim]Restored {restored} file records[/dim]")
        await watcher.run()


def _print_alert(alert: ComplexityAlert) -> None:
    label = alert.severity.value.upper()
    console.print(f"[yellow]{label}[/yellow] {alert.identity}: {alert.message}")
