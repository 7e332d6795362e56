"""Value types shared by the store, validator, diff engine and history log."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional, Tuple


class StoreMode(str, Enum):
    """Where named configurations live and how a switch is applied."""

    AGGREGATE = "aggregate"  # keys of one document, switch replaces target["env"]
    PATTERN = "pattern"  # discrete files, switch replaces the whole target


class SchemaMode(str, Enum):
    """Document shape checked by ``Validator.validate_document``."""

    AGGREGATE = "aggregate"
    SINGLE = "single"


@dataclass(frozen=True)
class ConfigurationEntry:
    """A discoverable named configuration, either a file or an aggregate key."""

    name: str
    path: Path
    size: int
    modified_at: datetime


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of a validation pass. Errors and warnings keep input order."""

    is_valid: bool
    errors: Tuple[str, ...] = ()
    warnings: Tuple[str, ...] = ()
    data: Any = None

    @property
    def error(self) -> Optional[str]:
        """First error message, or None when valid."""
        return self.errors[0] if self.errors else None


@dataclass(frozen=True)
class ValueChange:
    """A leaf value that differs between two documents."""

    from_value: Any
    to_value: Any

    def to_dict(self) -> Dict[str, Any]:
        return {"from": self.from_value, "to": self.to_value}


@dataclass(frozen=True)
class DiffSummary:
    added: int
    removed: int
    changed: int

    @property
    def total(self) -> int:
        return self.added + self.removed + self.changed


@dataclass
class DiffResult:
    """Structural differences between document A and document B.

    Keys are dot-joined paths; ``added`` holds values only in B, ``removed``
    values only in A.
    """

    added: Dict[str, Any] = field(default_factory=dict)
    removed: Dict[str, Any] = field(default_factory=dict)
    changed: Dict[str, ValueChange] = field(default_factory=dict)

    @property
    def has_diff(self) -> bool:
        return bool(self.added or self.removed or self.changed)

    @property
    def summary(self) -> DiffSummary:
        return DiffSummary(
            added=len(self.added),
            removed=len(self.removed),
            changed=len(self.changed),
        )

    def to_dict(self) -> Dict[str, Any]:
        summary = self.summary
        return {
            "hasDiff": self.has_diff,
            "differences": {
                "added": dict(self.added),
                "removed": dict(self.removed),
                "changed": {path: c.to_dict() for path, c in self.changed.items()},
            },
            "summary": {
                "added": summary.added,
                "removed": summary.removed,
                "changed": summary.changed,
                "total": summary.total,
            },
        }


@dataclass(frozen=True)
class HistoryRecord:
    """One switch event. Serialized with the history file's camelCase keys."""

    id: str
    timestamp: str
    environment: str
    from_file: str = ""
    to_file: str = ""
    working_dir: str = ""

    def to_dict(self) -> Dict[str, str]:
        return {
            "id": self.id,
            "timestamp": self.timestamp,
            "environment": self.environment,
            "fromFile": self.from_file,
            "toFile": self.to_file,
            "workingDir": self.working_dir,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> HistoryRecord:
        return cls(
            id=str(data.get("id", "")),
            timestamp=str(data.get("timestamp", "")),
            environment=str(data.get("environment", "")),
            from_file=str(data.get("fromFile", "")),
            to_file=str(data.get("toFile", "")),
            working_dir=str(data.get("workingDir", "")),
        )


@dataclass(frozen=True)
class SwitchResult:
    """What a successful switch did.

    ``previous``/``current`` hold the target's ``env`` field in aggregate
    mode and the whole target document in pattern mode.
    """

    entry: ConfigurationEntry
    target_file: Path
    mode: StoreMode
    previous: Any
    current: Any
    timestamp: str
    validation: Optional[ValidationResult] = None
    backup_path: Optional[Path] = None


@dataclass(frozen=True)
class CurrentConfig:
    """Snapshot of the target file as it is on disk."""

    name: str
    path: Path
    size: int
    modified_at: datetime
    env: Any = None
    validation: Optional[ValidationResult] = None
