"""
Logging configuration for config-switch.

Core modules only log; all human-facing output belongs to the CLI layer.
Handlers hang off the ``config_switch`` package logger, never the root
logger, so embedding applications keep control of their own logging.
"""

import logging
from pathlib import Path
from typing import Optional, Union

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER = "config_switch"

FILE_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"

# Marks handlers installed here so a second setup replaces them
_OWNED = "_config_switch_handler"


def console_level(verbose: bool = False, quiet: bool = False) -> int:
    """Level for terminal output. ``quiet`` wins over ``verbose``."""
    if quiet:
        return logging.ERROR
    if verbose:
        return logging.DEBUG
    return logging.WARNING


def setup_logging(
    verbose: bool = False,
    quiet: bool = False,
    log_file: Optional[Union[str, Path]] = None,
) -> logging.Logger:
    """
    Install the stderr handler and, optionally, a log file handler.

    The log file always records from DEBUG up, whatever the console shows,
    so a switch that went wrong can be reconstructed afterwards.

    Args:
        verbose: Show DEBUG records on stderr
        quiet: Show only ERROR records on stderr
        log_file: File to append every record to; parent directories are created

    Returns:
        The config_switch package logger

    Raises:
        OSError: If the log file cannot be opened
    """
    logger = logging.getLogger(ROOT_LOGGER)
    for handler in list(logger.handlers):
        if getattr(handler, _OWNED, False):
            logger.removeHandler(handler)
            handler.close()

    level = console_level(verbose, quiet)

    stderr_handler = RichHandler(
        console=Console(stderr=True),
        rich_tracebacks=True,
        tracebacks_show_locals=verbose,
        markup=False,
        show_time=verbose,
        show_path=verbose,
    )
    stderr_handler.setLevel(level)
    handlers: list[logging.Handler] = [stderr_handler]

    if log_file:
        path = Path(log_file).expanduser()
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(path, mode="a", encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        handlers.append(file_handler)

    for handler in handlers:
        setattr(handler, _OWNED, True)
        logger.addHandler(handler)

    logger.setLevel(logging.DEBUG if log_file else level)
    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Get a logger instance for a specific module.

    Args:
        name: Module name (e.g., 'config_switch.store')
              If None, returns the root config_switch logger

    Returns:
        Logger instance
    """
    if name is None:
        return logging.getLogger(ROOT_LOGGER)

    if not name.startswith(ROOT_LOGGER):
        name = f"{ROOT_LOGGER}.{name}"

    return logging.getLogger(name)
