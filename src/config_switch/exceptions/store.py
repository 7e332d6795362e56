"""Store and history exceptions: file access, resolution, switch failures."""

from pathlib import Path
from typing import TYPE_CHECKING, List

from .base import ConfigSwitchError

if TYPE_CHECKING:
    from ..models import ValidationResult


class StoreError(ConfigSwitchError):
    """Base class for errors raised while reading or switching configurations."""

    pass


class FileAccessError(StoreError):
    """Raised when a file or directory cannot be read or written."""

    def __init__(self, filepath: Path, reason: str):
        super().__init__(
            f"Cannot access file: {filepath}",
            details={"filepath": str(filepath), "reason": reason},
        )
        self.filepath = filepath
        self.reason = reason


class DocumentFormatError(StoreError):
    """Raised when a document that must be a JSON object is not one."""

    def __init__(self, filepath: Path, reason: str):
        super().__init__(
            f"Invalid JSON document: {filepath}",
            details={"filepath": str(filepath), "reason": reason},
        )
        self.filepath = filepath
        self.reason = reason


class ConfigNotFoundError(StoreError):
    """Raised when an alias or name resolves to no configuration."""

    def __init__(self, name: str, available: List[str]):
        listing = ", ".join(available) if available else "none"
        super().__init__(
            f'Configuration "{name}" not found. Available configurations: {listing}'
        )
        self.name = name
        self.available = list(available)


class SourceValidationError(StoreError):
    """Raised when the selected source fails validation before any write."""

    def __init__(self, filepath: Path, result: "ValidationResult"):
        super().__init__(
            f"Source configuration failed validation: {filepath}",
            details={"filepath": str(filepath), "errors": "; ".join(result.errors)},
        )
        self.filepath = filepath
        self.result = result


class PostSwitchValidationError(StoreError):
    """Raised when the written target fails validation and was rolled back."""

    def __init__(self, filepath: Path, result: "ValidationResult", restored: bool):
        super().__init__(
            f"Target failed validation after switch: {filepath}",
            details={
                "filepath": str(filepath),
                "errors": "; ".join(result.errors),
                "restored": str(restored).lower(),
            },
        )
        self.filepath = filepath
        self.result = result
        self.restored = restored


class HistoryError(ConfigSwitchError):
    """Base class for history log errors."""

    pass


class HistoryImportError(HistoryError):
    """Raised when a history import source is unusable."""

    def __init__(self, filepath: Path, reason: str):
        super().__init__(
            f"Cannot import history from {filepath}",
            details={"filepath": str(filepath), "reason": reason},
        )
        self.filepath = filepath
        self.reason = reason
