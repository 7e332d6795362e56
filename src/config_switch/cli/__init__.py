"""CLI entry point: registers all subcommands."""

from pathlib import Path
from typing import Optional

import typer

from .. import __version__
from ..config import load_config
from ..exceptions import ConfigurationError
from ..logging_config import setup_logging
from ..models import StoreMode
from ._common import console

app = typer.Typer(
    name="ccs",
    help="config-switch - switch named environment configurations into a settings file",
    add_completion=False,
    rich_markup_mode="rich",
)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"config-switch {__version__}")
        raise typer.Exit()


@app.callback()
def callback(
    ctx: typer.Context,
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="TOML configuration file",
        exists=True,
        dir_okay=False,
    ),
    mode: Optional[StoreMode] = typer.Option(
        None,
        "--mode",
        "-m",
        help="Where configurations live: aggregate document or pattern-matched files",
    ),
    config_dir: Optional[Path] = typer.Option(
        None,
        "--config-dir",
        help="Directory holding the aggregate document or configuration files",
    ),
    target: Optional[Path] = typer.Option(
        None,
        "--target",
        "-t",
        help="Settings file to switch",
    ),
    pattern: Optional[str] = typer.Option(
        None,
        "--pattern",
        "-p",
        help="Filename pattern with one '*' (pattern mode)",
    ),
    no_validate: bool = typer.Option(
        False,
        "--no-validate",
        help="Skip validation around pattern-mode switches",
    ),
    log_file: Optional[Path] = typer.Option(
        None,
        "--log-file",
        help="Also append debug-level logs to this file",
        dir_okay=False,
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only log errors"),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
):
    """
    Switch between named environment configurations.

    [bold cyan]Examples:[/bold cyan]

      ccs list

      ccs use work

      ccs --mode pattern --config-dir . use staging

      ccs --log-file ~/ccs.log use work
    """
    overrides = {
        "mode": mode,
        "config_dir": config_dir,
        "target_file": target,
        "pattern": pattern,
        "log_file": log_file,
        "verbose": verbose,
        "quiet": quiet,
    }
    if no_validate:
        overrides["enable_validation"] = False

    try:
        resolved = load_config(config_file=config, **overrides)
    except ConfigurationError as e:
        console.print(f"[red]Configuration error:[/red] {e}")
        raise typer.Exit(1)

    try:
        setup_logging(
            verbose=resolved.verbosity == "verbose",
            quiet=resolved.verbosity == "quiet",
            log_file=resolved.log_file,
        )
    except OSError as e:
        console.print(f"[red]Cannot open log file:[/red] {e}")
        raise typer.Exit(1)

    ctx.ensure_object(dict)
    ctx.obj["config"] = resolved


def main() -> None:
    app()


# Import subcommands to register them
from .switch import current as _current, list_configs as _list, use as _use  # noqa: F401, E402
from .validate import validate as _validate  # noqa: F401, E402
from .diff import diff as _diff  # noqa: F401, E402
from .history import history as _history  # noqa: F401, E402
