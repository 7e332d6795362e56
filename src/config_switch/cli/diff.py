"""diff command: structural comparison of two documents."""

import json
from pathlib import Path

import typer

from ..diff import compare
from ..exceptions import ConfigSwitchError
from ..models import DiffResult
from . import app
from ._common import console


def _render(value) -> str:
    return json.dumps(value, ensure_ascii=False)


@app.command()
def diff(
    ctx: typer.Context,
    first: Path = typer.Argument(..., help="Baseline JSON document"),
    second: Path = typer.Argument(..., help="JSON document to compare"),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output in machine-readable JSON format",
    ),
):
    """
    Compare two JSON documents key by key.

    [bold cyan]Examples:[/bold cyan]

      ccs diff settings-work.json settings-home.json
    """
    try:
        result = compare(first, second)
    except ConfigSwitchError as e:
        console.print(f"[red]Diff failed:[/red] {e}")
        raise typer.Exit(1)

    if json_output:
        print(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
        return

    _output_rich(result)


def _output_rich(result: DiffResult) -> None:
    if not result.has_diff:
        console.print("[green]No differences[/green]")
        return

    for path, value in result.added.items():
        console.print(f"[green]+ {path}: {_render(value)}[/green]", highlight=False)
    for path, value in result.removed.items():
        console.print(f"[red]- {path}: {_render(value)}[/red]", highlight=False)
    for path, change in result.changed.items():
        console.print(
            f"[yellow]~ {path}: {_render(change.from_value)} -> {_render(change.to_value)}[/yellow]",
            highlight=False,
        )

    summary = result.summary
    console.print(
        f"\n[bold]{summary.total} difference(s):[/bold] "
        f"{summary.added} added, {summary.removed} removed, {summary.changed} changed"
    )
