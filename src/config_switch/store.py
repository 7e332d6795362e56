"""ConfigStore: locate named configurations and apply them to the target file.

Two operating modes (``StoreMode``):

``aggregate``
    One document (``config_dir/claudeEnvConfig.json``) maps names to env
    objects. A switch replaces the target's ``env`` field and leaves every
    other field alone. The aggregate document is never rewritten by a switch.

``pattern``
    Every ``config_dir`` file matching the pattern (``settings-*.json``) is a
    complete settings document. A switch copies the selected file over the
    target verbatim, guarded by a timestamped backup and, when validation is
    enabled, by validation before and after the write with rollback.
"""

from __future__ import annotations

import json
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, List, Optional, Union

from .config import SwitchConfig
from .exceptions import (
    ConfigNotFoundError,
    DocumentFormatError,
    FileAccessError,
    PostSwitchValidationError,
    SourceValidationError,
)
from .file_ops import (
    copy_file,
    create_backup,
    prune_backups,
    read_json,
    read_json_object,
    restore_backup,
    write_json,
)
from .history import HistoryLog
from .logging_config import get_logger
from .models import (
    ConfigurationEntry,
    CurrentConfig,
    StoreMode,
    SwitchResult,
    ValidationResult,
)
from .patterns import FilePattern
from .validator import Validator

logger = get_logger(__name__)

Selector = Union[str, ConfigurationEntry]


def _mtime(stat: os.stat_result) -> datetime:
    return datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc)


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class ConfigStore:
    """Enumerate, select and apply configurations for one target file.

    Attributes:
        config: Paths and behavior for this store.
        history: Optional log that receives one record per successful switch.
    """

    def __init__(self, config: SwitchConfig, history: Optional[HistoryLog] = None):
        self.config = config
        self.history = history
        self.pattern = FilePattern(config.pattern)

    @property
    def mode(self) -> StoreMode:
        return self.config.mode

    @property
    def target_file(self) -> Path:
        return self.config.target_file

    # ── Scanning ─────────────────────────────────────────────────────────

    def ensure_config_file(self) -> Path:
        """Create the config directory and an empty aggregate document if missing."""
        config_file = self.config.config_file
        if not config_file.exists():
            write_json(config_file, {})
            logger.info(f"Created empty configuration file: {config_file}")
        return config_file

    def load_aggregate(self) -> dict:
        """The aggregate document.

        Raises:
            FileAccessError: If it cannot be read
            DocumentFormatError: If it is not a JSON object
        """
        return read_json_object(self.ensure_config_file())

    def scan(self) -> List[ConfigurationEntry]:
        """Every available configuration.

        Aggregate mode keeps document key order; pattern mode sorts by name
        and silently leaves out files that are not valid JSON.
        """
        if self.mode is StoreMode.AGGREGATE:
            return self._scan_aggregate()
        return self._scan_directory()

    def _scan_aggregate(self) -> List[ConfigurationEntry]:
        document = self.load_aggregate()
        config_file = self.config.config_file
        try:
            modified_at = _mtime(config_file.stat())
        except OSError as e:
            raise FileAccessError(config_file, f"OS error: {e}")

        return [
            ConfigurationEntry(
                name=name,
                path=config_file,
                size=len(json.dumps(value, ensure_ascii=False).encode("utf-8")),
                modified_at=modified_at,
            )
            for name, value in document.items()
        ]

    def _scan_directory(self) -> List[ConfigurationEntry]:
        directory = self.config.config_dir
        try:
            names = sorted(p.name for p in directory.iterdir())
        except OSError as e:
            raise FileAccessError(directory, f"Directory scan failed: {e}")

        entries = []
        for name in names:
            if not self.pattern.matches(name) or not name.endswith(".json"):
                continue
            path = directory / name
            if not path.is_file():
                continue
            if not Validator.validate_json_file(path).is_valid:
                logger.debug(f"Skipping {name}: not valid JSON")
                continue
            try:
                stat = path.stat()
            except OSError as e:
                logger.debug(f"Skipping {name}: {e}")
                continue
            entries.append(
                ConfigurationEntry(
                    name=name,
                    path=path,
                    size=stat.st_size,
                    modified_at=_mtime(stat),
                )
            )
        return entries

    def find_by_alias(self, alias: str) -> Optional[ConfigurationEntry]:
        """Resolve a short name to an entry, or None."""
        entries = {entry.name: entry for entry in self.scan()}

        if self.mode is StoreMode.AGGREGATE:
            return entries.get(alias)

        for candidate in self.pattern.alias_candidates(alias):
            if candidate in entries:
                return entries[candidate]
        return None

    def available_names(self) -> List[str]:
        return [entry.name for entry in self.scan()]

    def get_entry_value(self, name: str) -> Any:
        """The env object stored under ``name`` in the aggregate document.

        Raises:
            ConfigNotFoundError: If ``name`` is not a key of the document
        """
        document = self.load_aggregate()
        if name not in document:
            raise ConfigNotFoundError(name, list(document))
        return document[name]

    # ── Target access ────────────────────────────────────────────────────

    def read_target(self) -> Optional[dict]:
        """Current target document, or None if missing or not a JSON object."""
        if not self.target_file.exists():
            return None
        try:
            return read_json_object(self.target_file)
        except (FileAccessError, DocumentFormatError) as e:
            logger.debug(f"Treating unreadable target as absent: {e}")
            return None

    def get_current_config(self) -> Optional[CurrentConfig]:
        """Describe the target file, or None if it is missing or unreadable."""
        target = self.target_file
        if not target.exists():
            return None

        try:
            stat = target.stat()
            document = read_json(target)
        except (OSError, FileAccessError, DocumentFormatError) as e:
            logger.debug(f"Cannot describe current target {target}: {e}")
            return None

        if self.mode is StoreMode.AGGREGATE:
            env = document.get("env") if isinstance(document, dict) else None
            validation = None
        else:
            env = None
            validation = Validator.validate_document(
                document, self.config.effective_schema_mode
            )

        return CurrentConfig(
            name=target.name,
            path=target,
            size=stat.st_size,
            modified_at=_mtime(stat),
            env=env,
            validation=validation,
        )

    # ── Switching ────────────────────────────────────────────────────────

    def resolve(self, selector: Selector) -> ConfigurationEntry:
        """Turn an alias or entry into a scanned entry.

        Raises:
            ConfigNotFoundError: Listing the available names
        """
        if isinstance(selector, ConfigurationEntry):
            name = selector.name
            if self.mode is StoreMode.PATTERN:
                # Already resolved to a concrete file
                if selector.path.is_file():
                    return selector
            else:
                entry = self.find_by_alias(name)
                if entry is not None:
                    return entry
        else:
            name = selector
            entry = self.find_by_alias(name)
            if entry is not None:
                return entry

        raise ConfigNotFoundError(name, self.available_names())

    def switch_config(self, selector: Selector) -> SwitchResult:
        """Make the selected configuration effective in the target file.

        Raises:
            ConfigNotFoundError: If the selector resolves to nothing
            SourceValidationError: If the source is invalid (nothing written)
            PostSwitchValidationError: If the written target is invalid
                (the previous target has been restored)
            FileAccessError: On I/O failure
        """
        entry = self.resolve(selector)
        logger.info(f"Switching {self.target_file} to {entry.name}")

        if self.mode is StoreMode.AGGREGATE:
            result = self._switch_env(entry)
        else:
            result = self._switch_file(entry)

        if self.history is not None:
            try:
                self.history.add_record(
                    environment=entry.name,
                    from_file=str(entry.path),
                    to_file=str(self.target_file),
                    working_dir=os.getcwd(),
                )
            except FileAccessError as e:
                logger.warning(f"Switch succeeded but history was not recorded: {e}")

        return result

    def _switch_env(self, entry: ConfigurationEntry) -> SwitchResult:
        env = self.get_entry_value(entry.name)

        settings = self.read_target() or {}
        previous_env = settings.get("env")

        settings["env"] = env
        write_json(self.target_file, settings)
        logger.debug(f"Replaced env of {self.target_file} with {entry.name}")

        return SwitchResult(
            entry=entry,
            target_file=self.target_file,
            mode=self.mode,
            previous=previous_env,
            current=env,
            timestamp=_now_iso(),
        )

    def _switch_file(self, entry: ConfigurationEntry) -> SwitchResult:
        schema_mode = self.config.effective_schema_mode
        validate = self.config.enable_validation
        target = self.target_file

        if validate:
            source_check = Validator.validate_config_file(entry.path, schema_mode)
            if not source_check.is_valid:
                raise SourceValidationError(entry.path, source_check)

        previous = self.read_target()
        target_existed = target.exists()
        backup = create_backup(target) if target_existed else None

        try:
            copy_file(entry.path, target)
        except FileAccessError:
            self._roll_back(target, backup, "could not be written")
            raise

        validation: Optional[ValidationResult] = None
        if validate:
            validation = Validator.validate_config_file(target, schema_mode)
            if not validation.is_valid:
                restored = self._roll_back(target, backup, "failed validation after switch")
                raise PostSwitchValidationError(target, validation, restored)

        if backup is not None:
            prune_backups(target, self.config.backup_retention)

        current = validation.data if validation is not None else self.read_target()

        return SwitchResult(
            entry=entry,
            target_file=target,
            mode=self.mode,
            previous=previous,
            current=current,
            timestamp=_now_iso(),
            validation=validation,
            backup_path=backup,
        )

    def _roll_back(self, target: Path, backup: Optional[Path], why: str) -> bool:
        """Undo a bad write. Returns whether the previous state is back."""
        logger.warning(f"Target {target} {why}, rolling back")
        if backup is not None:
            try:
                restore_backup(backup, target)
            except FileAccessError as e:
                logger.error(f"Could not restore {target} from {backup.name}: {e}")
                return False
            return True
        try:
            target.unlink(missing_ok=True)
        except OSError as e:
            logger.warning(f"Could not remove invalid target {target}: {e}")
            return False
        return True
