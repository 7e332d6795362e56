"""Exception hierarchy for config-switch."""

from .base import ConfigSwitchError
from .config import ConfigurationError, InvalidConfigError
from .store import (
    ConfigNotFoundError,
    DocumentFormatError,
    FileAccessError,
    HistoryError,
    HistoryImportError,
    PostSwitchValidationError,
    SourceValidationError,
    StoreError,
)

__all__ = [
    "ConfigSwitchError",
    "ConfigurationError",
    "InvalidConfigError",
    "StoreError",
    "FileAccessError",
    "DocumentFormatError",
    "ConfigNotFoundError",
    "SourceValidationError",
    "PostSwitchValidationError",
    "HistoryError",
    "HistoryImportError",
]
