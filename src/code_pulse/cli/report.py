"""Report command: daily coding totals from the metrics store."""

import json

import typer
from rich.table import Table

from ..exceptions import PersistenceError
from . import app
from ._common import console, open_store, resolve_config


@app.command()
def report(
    ctx: typer.Context,
    days: int = typer.Option(
        14,
        "--days",
        "-n",
        help="Number of most recent days to show",
        min=1,
        max=3650,
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output in machine-readable JSON format",
    ),
):
    """
    Show accumulated coding time, files edited and languages per day.

    [bold cyan]Examples:[/bold cyan]

      code-pulse report

      code-pulse report --days 7 --json
    """
    config = resolve_config(ctx)
    try:
        snapshot = open_store(config).load_snapshot()
    except PersistenceError as e:
        if json_output:
            print(json.dumps(e.to_dict(), indent=2))
        else:
            console.print(f"[red]Error reading metrics:[/red] {e}")
        raise typer.Exit(1)

    daily = sorted(snapshot.daily_totals, key=lambda t: t.date)[-days:]

    if json_output:
        print(
            json.dumps(
                {
                    "daily_totals": [t.to_dict() for t in daily],
                    "files_tracked": len(snapshot.file_records),
                },
                indent=2,
            )
        )
        return

    if not daily:
        console.print("[yellow]No activity recorded yet.[/yellow]")
        raise typer.Exit(0)

    table = Table(title="Coding Activity", show_lines=False, pad_edge=True)
    table.add_column("Date", style="green")
    table.add_column("Minutes", justify="right", style="bold")
    table.add_column("Files", justify="right")
    table.add_column("Languages", style="cyan")

    for totals in daily:
        languages = ", ".join(
            f"{lang or '?'} ({count})"
            for lang, count in sorted(totals.languages.items(), key=lambda kv: -kv[1])
        )
        table.add_row(
            totals.date,
            f"{totals.total_coding_minutes:.1f}",
            str(totals.files_edited),
            languages or "-",
        )

    console.print(table)
    console.print(f"[dim]{len(snapshot.file_records)} files tracked[/dim]")
