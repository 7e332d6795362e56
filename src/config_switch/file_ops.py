"""
File operations for config-switch.

JSON read/write with descriptive failures, plus the backup files that
protect a target during a switch.
"""

import json
import shutil
import time
from pathlib import Path
from typing import Any, List, Optional

from .exceptions import DocumentFormatError, FileAccessError
from .logging_config import get_logger

logger = get_logger(__name__)

BACKUP_MARKER = ".backup-"


def read_text(filepath: Path, encoding: str = "utf-8") -> str:
    """
    Read a text file.

    Raises:
        FileAccessError: If the file cannot be read or decoded
    """
    try:
        with open(filepath, encoding=encoding) as f:
            return f.read()
    except UnicodeDecodeError as e:
        raise FileAccessError(filepath, f"Encoding error: {e}")
    except OSError as e:
        raise FileAccessError(filepath, f"OS error: {e}")


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Unexpected token {name}: not valid JSON")


def parse_json(text: str) -> Any:
    """
    Strict JSON parse: ``NaN``, ``Infinity`` and ``-Infinity`` are rejected.

    Raises:
        ValueError: On any parse failure (``json.JSONDecodeError`` included)
    """
    return json.loads(text, parse_constant=_reject_constant)


def read_json(filepath: Path) -> Any:
    """
    Read and parse a JSON file.

    Raises:
        FileAccessError: If the file cannot be read
        DocumentFormatError: If the content is not valid JSON
    """
    text = read_text(filepath)
    try:
        return parse_json(text)
    except ValueError as e:
        raise DocumentFormatError(filepath, str(e))


def read_json_object(filepath: Path) -> dict:
    """Like ``read_json`` but the document must be a JSON object."""
    data = read_json(filepath)
    if not isinstance(data, dict):
        raise DocumentFormatError(filepath, "document must be a JSON object")
    return data


def write_json(filepath: Path, data: Any) -> None:
    """
    Write data as indented JSON, creating parent directories.

    Raises:
        FileAccessError: If the file cannot be written
    """
    content = json.dumps(data, indent=2, ensure_ascii=False) + "\n"
    try:
        filepath.parent.mkdir(parents=True, exist_ok=True)
        with open(filepath, "w", encoding="utf-8") as f:
            f.write(content)
    except OSError as e:
        raise FileAccessError(filepath, f"Write failed: {e}")


def copy_file(source: Path, destination: Path) -> None:
    """
    Copy file contents verbatim, creating the destination's parent.

    Raises:
        FileAccessError: If either side cannot be accessed
    """
    try:
        destination.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(source, destination)
    except OSError as e:
        raise FileAccessError(destination, f"Copy from {source} failed: {e}")


def backup_path_for(target: Path, millis: Optional[int] = None) -> Path:
    """``<target-name>.backup-<epoch-millis>`` next to the target."""
    if millis is None:
        millis = int(time.time() * 1000)
    return target.with_name(f"{target.name}{BACKUP_MARKER}{millis}")


def create_backup(target: Path) -> Path:
    """
    Copy the target to a fresh timestamped backup.

    Raises:
        FileAccessError: If the backup cannot be written
    """
    backup = backup_path_for(target)
    # Two switches inside one millisecond would collide
    while backup.exists():
        millis = int(backup.name.rsplit(BACKUP_MARKER, 1)[1]) + 1
        backup = backup_path_for(target, millis)

    copy_file(target, backup)
    logger.debug(f"Backed up {target.name} to {backup.name}")
    return backup


def restore_backup(backup: Path, target: Path) -> None:
    """
    Put the backup's content back on the target and delete the backup.

    Raises:
        FileAccessError: If the restore copy fails
    """
    copy_file(backup, target)
    try:
        backup.unlink()
    except OSError as e:
        logger.warning(f"Restored {target.name} but could not remove {backup.name}: {e}")


def list_backups(target: Path) -> List[Path]:
    """Backups of ``target``, newest first."""
    prefix = f"{target.name}{BACKUP_MARKER}"
    if not target.parent.is_dir():
        return []

    backups = []
    for path in target.parent.iterdir():
        if not path.name.startswith(prefix):
            continue
        stamp = path.name[len(prefix):]
        if stamp.isdigit():
            backups.append((int(stamp), path))

    backups.sort(reverse=True)
    return [path for _, path in backups]


def prune_backups(target: Path, keep: int) -> List[Path]:
    """
    Delete all but the ``keep`` newest backups of ``target``.

    Failures are logged and skipped; pruning never aborts a switch.

    Returns:
        Backups that were deleted
    """
    deleted = []
    try:
        stale = list_backups(target)[keep:]
    except OSError as e:
        logger.warning(f"Could not list backups for {target}: {e}")
        return deleted

    for backup in stale:
        try:
            backup.unlink()
            deleted.append(backup)
            logger.debug(f"Pruned old backup: {backup.name}")
        except OSError as e:
            logger.warning(f"Could not delete old backup {backup.name}: {e}")

    return deleted


def format_file_size(size: int) -> str:
    """
    Render a byte count with 1024-based units.

    >>> format_file_size(1500)
    '1.46 KB'
    """
    if size <= 0:
        return "0 Bytes"

    units = ["Bytes", "KB", "MB", "GB"]
    value = float(size)
    exponent = 0
    while value >= 1024 and exponent < len(units) - 1:
        value /= 1024
        exponent += 1

    # 2.0 -> "2", 1.50 -> "1.5"
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return f"{text} {units[exponent]}"
