"""Analyze command: complexity metrics and recommendations for source files."""

import json
from pathlib import Path
from typing import List, Optional

import typer
from rich.table import Table

from ..context import PulseContext
from ..exceptions import CodePulseError
from ..metrics import ComplexityAnalyzer, FileRecord, get_recommendations
from ..metrics.recommendations import ComplexityAlert, check_complexity_alert
from ..tracking import AnalysisScheduler, EventKind
from ..tracking.scheduler import line_count
from . import app
from ._common import console, err_console, open_store, resolve_config


@app.command()
def analyze(
    ctx: typer.Context,
    paths: List[Path] = typer.Argument(
        ...,
        help="Source files to analyze",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
    language: Optional[str] = typer.Option(
        None,
        "--language",
        "-l",
        help="Language tag to analyze as (default: file extension)",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output in machine-readable JSON format",
    ),
    save: bool = typer.Option(
        False,
        "--save",
        help="Record the results in the metrics store",
    ),
):
    """
    Compute cyclomatic complexity, maintainability and Halstead metrics.

    [bold cyan]Examples:[/bold cyan]

      code-pulse analyze src/app.ts

      code-pulse analyze script.txt --language python

      code-pulse analyze src/*.js --json --save
    """
    config = resolve_config(ctx)
    alerts: list[ComplexityAlert] = []

    try:
        if save:
            records = _analyze_and_save(config, paths, language, alerts)
        else:
            records = _analyze_only(config, paths, language, alerts)
    except CodePulseError as e:
        if json_output:
            print(json.dumps(e.to_dict(), indent=2))
        else:
            console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    if json_output:
        payload = [
            {**r.to_dict(), "recommendations": get_recommendations(r.metrics)} for r in records
        ]
        print(json.dumps(payload, indent=2))
        return

    for record in records:
        _print_record(record)
    for alert in alerts:
        label = alert.severity.value.upper()
        console.print(f"[yellow]{label}[/yellow] {alert.identity}: {alert.message}")


def _analyze_only(
    config, paths: List[Path], language: Optional[str], alerts: list
) -> List[FileRecord]:
    analyzer = ComplexityAnalyzer(max_traversal_nodes=config.max_traversal_nodes)
    records = []
    for path in paths:
        source = path.read_text(encoding="utf-8", errors="replace")
        tag = language or path.suffix.lstrip(".").lower()
        records.append(
            FileRecord(
                identity=str(path),
                language=tag,
                line_count=line_count(source),
                metrics=analyzer.analyze(source, tag),
                observed_at=path.stat().st_mtime,
            )
        )
        alert = check_complexity_alert(
            str(path),
            records[-1].metrics.cyclomatic_complexity,
            tag,
            thresholds=config.language_complexity_thresholds,
            default_threshold=config.complexity_threshold,
        )
        if alert is not None:
            alerts.append(alert)
    return records


def _analyze_and_save(
    config, paths: List[Path], language: Optional[str], alerts: list
) -> List[FileRecord]:
    scheduler = AnalysisScheduler(
        PulseContext.create(config),
        open_store(config),
        on_alert=alerts.append,
    )
    identities = [str(path.resolve()) for path in paths]
    for identity in identities:
        scheduler.record_event(EventKind.SAVE, identity, language=language)

    records = [r for r in (scheduler.cache.get(i) for i in identities) if r is not None]
    scheduler.flush()
    err_console.print(f"[green]Saved {len(records)} file records to {config.storage_path}[/green]")
    return records


def _print_record(record: FileRecord) -> None:
    metrics = record.metrics
    table = Table(title=Path(record.identity).name, show_header=False, pad_edge=True)
    table.add_column("Metric", style="bold")
    table.add_column("Value", justify="right")
    table.add_row("Language", record.language or "-")
    table.add_row("Lines", str(record.line_count))
    table.add_row("Cyclomatic complexity", str(metrics.cyclomatic_complexity))
    table.add_row("Maintainability index", f"{metrics.maintainability_index:.2f}")
    table.add_row("Halstead difficulty", f"{metrics.halstead.difficulty:.2f}")
    table.add_row("Halstead volume", f"{metrics.halstead.volume:.2f}")
    table.add_row("Halstead effort", f"{metrics.halstead.effort:.2f}")
    console.print(table)

    for rec in get_recommendations(metrics):
        console.print(f"  [cyan]*[/cyan] {rec}")
    console.print()
