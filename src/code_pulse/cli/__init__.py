"""CLI entry point: registers all subcommands."""

from pathlib import Path
from typing import Optional

import typer

from ._common import console

app = typer.Typer(
    name="code-pulse",
    help="Code Pulse - complexity metrics and coding activity tracking",
    add_completion=False,
    rich_markup_mode="rich",
    no_args_is_help=True,
)


def _version_callback(value: bool) -> None:
    if value:
        from .. import __version__

        console.print(f"[bold cyan]Code Pulse[/bold cyan] version [green]{__version__}[/green]")
        raise typer.Exit(0)


@app.callback()
def main(
    ctx: typer.Context,
    config: Optional[Path] = typer.Option(
        None,
        "-c",
        "--config",
        help="Configuration file (TOML)",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable debug logging",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        help="Show version and exit",
        callback=_version_callback,
        is_eager=True,
    ),
):
    """
    Measure code complexity and track coding activity.

    [bold cyan]Examples:[/bold cyan]

      code-pulse analyze src/app.ts

      code-pulse report --days 7

      code-pulse prune --days 30

      code-pulse watch src
    """
    ctx.ensure_object(dict)
    ctx.obj["config_file"] = config
    ctx.obj["verbose"] = verbose


# Import subcommands to register them
from .analyze import analyze as _analyze  # noqa: F401, E402
from .prune import prune as _prune  # noqa: F401, E402
from .report import report as _report  # noqa: F401, E402
from .watch import watch as _watch  # noqa: F401, E402
