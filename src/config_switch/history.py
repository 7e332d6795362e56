"""Switch history with retention.

The history file is a JSON object::

    {"records": [...], "createdAt": "...", "updatedAt": "...", "totalRecords": 51}

``records`` keeps only the newest ``max_records`` entries; ``totalRecords``
counts every record ever added (or imported) since the last full clear.

Usage:
    from config_switch.history import HistoryLog

    log = HistoryLog("/home/me/.claude-config-switch/history.json")
    log.add_record("work", from_file="claudeEnvConfig.json", to_file="settings.json")
    log.recent_records(5)
"""

from __future__ import annotations

import uuid
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Optional

from .exceptions import DocumentFormatError, FileAccessError, HistoryImportError
from .file_ops import read_json, write_json
from .logging_config import get_logger
from .models import HistoryRecord

logger = get_logger(__name__)

DEFAULT_MAX_RECORDS = 50


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _parse_timestamp(value: str) -> Optional[datetime]:
    """Parse ISO 8601, including the ``Z`` suffix JavaScript writes."""
    if not value:
        return None
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


class HistoryLog:
    """Append-only record of switch operations.

    Attributes:
        history_file: JSON file owned by this log.
        max_records: Records retained on disk (oldest evicted first).
    """

    def __init__(
        self,
        history_file: str | Path,
        max_records: int = DEFAULT_MAX_RECORDS,
    ) -> None:
        if max_records < 1:
            raise ValueError("max_records must be at least 1")
        self.history_file = Path(history_file)
        self.max_records = max_records

    def _ensure_history_file(self) -> None:
        if self.history_file.exists():
            return
        write_json(
            self.history_file,
            {"records": [], "createdAt": _now().isoformat(), "totalRecords": 0},
        )

    def _read_raw(self) -> dict[str, Any]:
        self._ensure_history_file()
        try:
            data = read_json(self.history_file)
        except DocumentFormatError as e:
            logger.warning(f"History file is corrupt, starting empty: {e.reason}")
            return {}
        if not isinstance(data, dict):
            logger.warning(f"History file {self.history_file} is not a JSON object, ignoring it")
            return {}
        return data

    def read_history(self) -> list[HistoryRecord]:
        """All retained records, oldest first."""
        raw = self._read_raw().get("records") or []
        return [HistoryRecord.from_dict(r) for r in raw if isinstance(r, dict)]

    @property
    def total_records(self) -> int:
        """Lifetime count of records added since the last full clear."""
        raw = self._read_raw()
        total = raw.get("totalRecords")
        if isinstance(total, int) and not isinstance(total, bool):
            return total
        return len(raw.get("records") or [])

    def write_history(self, records: list[HistoryRecord], total: Optional[int] = None) -> None:
        """Persist ``records`` trimmed to ``max_records``.

        Args:
            records: Full record list, oldest first
            total: Lifetime count to store; defaults to ``len(records)``
        """
        raw = self._read_raw()
        kept = records[-self.max_records:]
        write_json(
            self.history_file,
            {
                "records": [r.to_dict() for r in kept],
                "createdAt": raw.get("createdAt", _now().isoformat()),
                "updatedAt": _now().isoformat(),
                "totalRecords": len(records) if total is None else total,
            },
        )

    def add_record(
        self,
        environment: str,
        from_file: str = "",
        to_file: str = "",
        working_dir: str = "",
    ) -> HistoryRecord:
        """Stamp, append and persist a new record."""
        record = HistoryRecord(
            id=uuid.uuid4().hex,
            timestamp=_now().isoformat(),
            environment=environment,
            from_file=str(from_file),
            to_file=str(to_file),
            working_dir=str(working_dir),
        )
        total = self.total_records
        history = self.read_history()
        history.append(record)
        self.write_history(history, total=total + 1)
        logger.debug(f"Recorded switch to {environment} ({record.id})")
        return record

    def recent_records(self, limit: int = 10) -> list[HistoryRecord]:
        """The newest ``limit`` records, newest first."""
        if limit <= 0:
            return []
        return list(reversed(self.read_history()[-limit:]))

    def environment_history(self, environment: str, limit: int = 5) -> list[HistoryRecord]:
        """The newest ``limit`` records for one environment, newest first."""
        if limit <= 0:
            return []
        matching = [r for r in self.read_history() if r.environment == environment]
        return list(reversed(matching[-limit:]))

    def previous_record(self) -> Optional[HistoryRecord]:
        """The record before the latest one: the configuration to switch back to."""
        history = self.read_history()
        if len(history) < 2:
            return None
        return history[-2]

    def clear_history(self, days: Optional[float] = None) -> int:
        """Remove records, all of them or only those older than ``days``.

        Records with unparsable timestamps count as old.

        Returns:
            Number of records removed.
        """
        history = self.read_history()

        if days is None:
            self.write_history([], total=0)
            logger.debug(f"Cleared {len(history)} history record(s)")
            return len(history)

        cutoff = _now() - timedelta(days=days)
        remaining = []
        for record in history:
            stamp = _parse_timestamp(record.timestamp)
            if stamp is not None and stamp > cutoff:
                remaining.append(record)

        removed = len(history) - len(remaining)
        self.write_history(remaining, total=self.total_records)
        logger.debug(f"Cleared {removed} history record(s) older than {days} day(s)")
        return removed

    def export_history(self, path: str | Path) -> int:
        """Write all retained records to ``path``.

        Returns:
            Number of records exported.
        """
        history = self.read_history()
        write_json(
            Path(path),
            {
                "exportedAt": _now().isoformat(),
                "records": [r.to_dict() for r in history],
                "totalCount": len(history),
            },
        )
        return len(history)

    def import_history(self, path: str | Path) -> int:
        """Append the records exported to ``path`` to this log.

        Returns:
            Number of records imported.

        Raises:
            HistoryImportError: If the file is unreadable or holds no records
        """
        path = Path(path)
        try:
            data = read_json(path)
        except (FileAccessError, DocumentFormatError) as e:
            raise HistoryImportError(path, e.reason)

        raw = data.get("records") if isinstance(data, dict) else None
        if not isinstance(raw, list):
            raw = []
        imported = [HistoryRecord.from_dict(r) for r in raw if isinstance(r, dict)]
        if not imported:
            raise HistoryImportError(path, "no history records found")

        total = self.total_records
        combined = self.read_history() + imported
        self.write_history(combined, total=total + len(imported))
        logger.debug(f"Imported {len(imported)} history record(s) from {path}")
        return len(imported)

