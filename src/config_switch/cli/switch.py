"""list / use / current commands."""

from typing import List, Optional

import typer
from rich.prompt import IntPrompt
from rich.table import Table

from ..exceptions import ConfigSwitchError
from ..file_ops import format_file_size
from ..models import ConfigurationEntry, StoreMode, SwitchResult
from ..validator import Validator
from . import app
from ._common import build_store, console, get_config, print_example_config, print_json


@app.command("list")
def list_configs(ctx: typer.Context):
    """
    List every available configuration.
    """
    store = build_store(ctx, record_history=False)
    try:
        entries = store.scan()
        current = store.get_current_config()
    except ConfigSwitchError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    _print_source(ctx)

    if not entries:
        console.print("\n[yellow]No configurations found.[/yellow]")
        if store.mode is StoreMode.AGGREGATE:
            print_example_config()
        raise typer.Exit(0)

    _print_entries(entries)

    if current is not None and current.env:
        console.print("\n[cyan]Current env:[/cyan]")
        print_json(current.env)


@app.command()
def use(
    ctx: typer.Context,
    name: Optional[str] = typer.Argument(
        None,
        help="Configuration name or alias (prompted for when omitted)",
    ),
):
    """
    Switch the target file to a configuration.

    [bold cyan]Examples:[/bold cyan]

      ccs use work

      ccs use
    """
    store = build_store(ctx)
    try:
        if name is None:
            entries = store.scan()
            if not entries:
                _print_source(ctx)
                console.print("\n[yellow]No configurations found.[/yellow]")
                raise typer.Exit(0)
            _print_entries(entries)
            choice = IntPrompt.ask(
                "Select a configuration",
                choices=[str(i) for i in range(1, len(entries) + 1)],
                default=1,
                console=console,
            )
            selector = entries[choice - 1]
        else:
            selector = name

        result = store.switch_config(selector)
    except ConfigSwitchError as e:
        console.print(f"[red]Switch failed:[/red] {e}")
        raise typer.Exit(1)

    _print_switch(result)


@app.command()
def current(ctx: typer.Context):
    """
    Show the current target file.
    """
    store = build_store(ctx, record_history=False)
    info = store.get_current_config()

    if info is None:
        console.print(f"[yellow]No readable target file at {store.target_file}[/yellow]")
        raise typer.Exit(0)

    console.print(f"[blue]Target:[/blue] {info.path}")
    console.print(f"[blue]Size:[/blue] {format_file_size(info.size)}")
    console.print(f"[blue]Modified:[/blue] {info.modified_at:%Y-%m-%d %H:%M:%S}")

    if info.validation is not None:
        console.print(Validator.generate_report(info.validation), highlight=False)
    elif info.env:
        console.print("[cyan]Current env:[/cyan]")
        print_json(info.env)
    else:
        console.print("[yellow]No env configuration currently set[/yellow]")


def _print_source(ctx: typer.Context) -> None:
    config = get_config(ctx)
    if config.mode is StoreMode.AGGREGATE:
        console.print(f"[blue]Configuration file:[/blue] {config.config_file}")
    else:
        console.print(f"[blue]Configuration directory:[/blue] {config.config_dir}/{config.pattern}")


def _print_entries(entries: List[ConfigurationEntry]) -> None:
    table = Table(show_lines=False, pad_edge=True)
    table.add_column("#", style="bold", justify="right")
    table.add_column("Name", style="green")
    table.add_column("Size", justify="right")
    table.add_column("Modified", style="dim")

    for i, entry in enumerate(entries, start=1):
        table.add_row(
            str(i),
            entry.name,
            format_file_size(entry.size),
            f"{entry.modified_at:%Y-%m-%d %H:%M}",
        )

    console.print()
    console.print(table)


def _print_switch(result: SwitchResult) -> None:
    console.print(f"[green]Switched to {result.entry.name}[/green]")
    console.print(f"[dim]Target: {result.target_file}[/dim]")
    if result.backup_path is not None:
        console.print(f"[dim]Backup: {result.backup_path.name}[/dim]")
    if result.validation is not None and result.validation.warnings:
        console.print(Validator.generate_report(result.validation), highlight=False)
