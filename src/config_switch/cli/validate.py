"""validate command."""

from pathlib import Path
from typing import Optional

import typer

from ..models import SchemaMode, StoreMode
from ..validator import Validator
from . import app
from ._common import console, get_config, print_example_config


@app.command()
def validate(
    ctx: typer.Context,
    path: Optional[Path] = typer.Argument(
        None,
        help="File to validate (defaults to the aggregate document, or the target in pattern mode)",
    ),
    schema: Optional[SchemaMode] = typer.Option(
        None,
        "--schema",
        "-s",
        help="Document shape to validate against",
    ),
):
    """
    Validate a configuration document and print a report.
    """
    config = get_config(ctx)
    if path is None:
        path = config.config_file if config.mode is StoreMode.AGGREGATE else config.target_file
    schema_mode = schema or config.effective_schema_mode

    console.print(f"[blue]Validating:[/blue] {path} [dim]({schema_mode.value})[/dim]\n")

    if not path.exists():
        console.print("[yellow]File does not exist[/yellow]")
        if schema_mode is SchemaMode.AGGREGATE:
            print_example_config()
        raise typer.Exit(1)

    result = Validator.validate_config_file(path, schema_mode)
    console.print(Validator.generate_report(result), highlight=False)

    if not result.is_valid:
        raise typer.Exit(1)
