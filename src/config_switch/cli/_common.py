"""Shared CLI helpers."""

import json
from typing import Any, Optional

import typer
from rich.console import Console

from ..config import SwitchConfig
from ..history import HistoryLog
from ..store import ConfigStore

console = Console()

EXAMPLE_AGGREGATE = {
    "work": {
        "ANTHROPIC_API_KEY": "your-key",
        "ANTHROPIC_BASE_URL": "https://api.anthropic.com",
    },
    "personal": {
        "ANTHROPIC_API_KEY": "your-key",
        "ANTHROPIC_BASE_URL": "https://custom-api.example.com",
    },
}


def get_config(ctx: typer.Context) -> SwitchConfig:
    """The SwitchConfig resolved by the app callback."""
    return ctx.obj["config"]


def build_history(config: SwitchConfig) -> HistoryLog:
    return HistoryLog(config.history_path, max_records=config.max_history)


def build_store(ctx: typer.Context, record_history: bool = True) -> ConfigStore:
    config = get_config(ctx)
    history: Optional[HistoryLog] = build_history(config) if record_history else None
    return ConfigStore(config, history=history)


def print_json(data: Any, style: str = "dim") -> None:
    console.print(json.dumps(data, indent=2, ensure_ascii=False), style=style, highlight=False)


def print_example_config() -> None:
    """Show the aggregate document layout for first-time users."""
    console.print("\n[dim]Create the configuration file with entries like:[/dim]")
    print_json(EXAMPLE_AGGREGATE, style="green")
