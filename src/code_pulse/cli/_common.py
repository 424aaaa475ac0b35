"""Shared CLI helpers."""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from ..config import TrackingConfig, load_config
from ..exceptions import ConfigurationError
from ..logging_config import setup_logging
from ..storage import JsonSnapshotStore

console = Console()
# Status lines that must not mix with --json output on stdout
err_console = Console(stderr=True)


def resolve_config(ctx: typer.Context, **overrides) -> TrackingConfig:
    """Load config from the root command's options, then configure logging."""
    obj = ctx.obj or {}
    verbose = obj.get("verbose", False)

    config_file: Optional[Path] = obj.get("config_file")
    try:
        config = load_config(config_file=config_file, **overrides)
    except ConfigurationError as e:
        setup_logging(verbose=verbose)
        err_console.print(f"[red]Configuration error:[/red] {e}")
        raise typer.Exit(2)

    setup_logging(verbose=verbose, detailed=config.enable_detailed_logging)
    return config


def open_store(config: TrackingConfig) -> JsonSnapshotStore:
    return JsonSnapshotStore(Path(config.storage_path).expanduser())
