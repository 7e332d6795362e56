"""
config-switch - switch named environment configurations into a settings file.

Named configurations live either as keys of one aggregate JSON document or as
pattern-matched files in a directory. Switching writes the selected one into
the target file (its ``env`` field, or the whole file) with backup and
rollback safety, and records the event in a history log.
"""

__version__ = "0.1.0"

from .config import SwitchConfig, load_config
from .diff import compare, diff_documents
from .file_ops import format_file_size
from .history import HistoryLog
from .models import (
    ConfigurationEntry,
    CurrentConfig,
    DiffResult,
    HistoryRecord,
    SchemaMode,
    StoreMode,
    SwitchResult,
    ValidationResult,
)
from .store import ConfigStore
from .validator import Validator

__all__ = [
    "ConfigStore",  # Main entry point
    "Validator",
    "HistoryLog",
    "compare",
    "diff_documents",
    "format_file_size",
    "SwitchConfig",
    "load_config",
    "ConfigurationEntry",
    "CurrentConfig",
    "DiffResult",
    "HistoryRecord",
    "SchemaMode",
    "StoreMode",
    "SwitchResult",
    "ValidationResult",
]
