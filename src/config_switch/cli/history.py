"""History CLI command: list, filter, clear, export and import switch records."""

import json
from pathlib import Path
from typing import List, Optional

import typer
from rich.table import Table

from ..exceptions import ConfigSwitchError
from ..models import HistoryRecord
from . import app
from ._common import build_history, console, get_config


@app.command()
def history(
    ctx: typer.Context,
    limit: int = typer.Option(
        10,
        "--limit",
        "-n",
        help="Maximum number of records to list",
        min=1,
        max=1000,
    ),
    environment: Optional[str] = typer.Option(
        None,
        "--env",
        "-e",
        help="Only show switches to this configuration",
    ),
    clear: bool = typer.Option(False, "--clear", help="Delete history records"),
    days: Optional[float] = typer.Option(
        None,
        "--days",
        help="With --clear, only delete records older than this many days",
        min=0,
    ),
    export_path: Optional[Path] = typer.Option(
        None,
        "--export",
        help="Write all records to this JSON file",
    ),
    import_path: Optional[Path] = typer.Option(
        None,
        "--import",
        help="Append records from an exported JSON file",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output in machine-readable JSON format",
    ),
):
    """
    Show past configuration switches.

    [bold cyan]Examples:[/bold cyan]

      ccs history

      ccs history --env work --limit 3

      ccs history --clear --days 30
    """
    if days is not None and not clear:
        raise typer.BadParameter("only applies together with --clear", param_hint="--days")

    log = build_history(get_config(ctx))

    try:
        if clear:
            removed = log.clear_history(days)
            console.print(f"[green]Removed {removed} record(s)[/green]")
            return
        if export_path is not None:
            count = log.export_history(export_path)
            console.print(f"[green]Exported {count} record(s) to {export_path}[/green]")
            return
        if import_path is not None:
            count = log.import_history(import_path)
            console.print(f"[green]Imported {count} record(s) from {import_path}[/green]")
            return

        if environment is not None:
            records = log.environment_history(environment, limit)
        else:
            records = log.recent_records(limit)
    except ConfigSwitchError as e:
        console.print(f"[red]Error reading history:[/red] {e}")
        raise typer.Exit(1)

    if json_output:
        print(json.dumps([r.to_dict() for r in records], indent=2))
        return

    if not records:
        console.print("[yellow]No history recorded yet.[/yellow]")
        raise typer.Exit(0)

    _output_rich(records)


def _output_rich(records: List[HistoryRecord]) -> None:
    table = Table(title="Switch History", show_lines=False, pad_edge=True)
    table.add_column("#", style="bold", justify="right")
    table.add_column("Timestamp", style="green")
    table.add_column("Configuration", style="cyan")
    table.add_column("From")
    table.add_column("To")
    table.add_column("Directory", style="dim")

    for i, r in enumerate(records, start=1):
        ts = r.timestamp.replace("T", " ")
        # Trim microseconds/timezone
        if "." in ts:
            ts = ts[: ts.index(".")]
        if "+" in ts:
            ts = ts[: ts.index("+")]
        table.add_row(str(i), ts, r.environment, r.from_file, r.to_file, r.working_dir)

    console.print()
    console.print(table)
    console.print()
