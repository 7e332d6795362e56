"""Configuration loading and management for config-switch.

Every component receives an explicit ``SwitchConfig``; nothing reads the
home directory on its own. ``load_config`` builds one by merging sources in
priority order:
    1. Defaults (DEFAULT_CONFIG_DIR, DEFAULT_TARGET_FILE, dataclass defaults)
    2. Global config (~/.config-switch.toml)
    3. Project config (./config-switch.toml)
    4. Explicit config file
    5. Environment variables (CCS_* prefix)
    6. Keyword overrides (typically CLI flags)

Example:
    >>> config = load_config(mode="pattern", pattern="settings-*.json")
    >>> config.mode
    <StoreMode.PATTERN: 'pattern'>
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal, Optional, get_type_hints

from .exceptions import ConfigurationError, InvalidConfigError
from .models import SchemaMode, StoreMode

Verbosity = Literal["quiet", "normal", "verbose"]

DEFAULT_CONFIG_DIR = Path.home() / ".claude-config-switch"
DEFAULT_TARGET_FILE = Path.home() / ".claude" / "settings.json"
GLOBAL_CONFIG_NAME = ".config-switch.toml"
PROJECT_CONFIG_NAME = "config-switch.toml"
ENV_PREFIX = "CCS_"


@dataclass(frozen=True)
class SwitchConfig:
    """Paths and behavior for one store/history pair.

    Attributes:
        config_dir: Directory holding the aggregate document (aggregate mode)
            or the pattern-matched configuration files (pattern mode)
        target_file: The settings file downstream tooling reads
        mode: Where configurations live and how a switch applies them
        pattern: Filename pattern with exactly one ``*`` (pattern mode)
        config_file_name: Aggregate document name inside ``config_dir``
        schema_mode: Shape to validate against; None picks it from ``mode``
        enable_validation: Validate source and target around a pattern switch
        backup_retention: Backups kept per target after a successful switch
        history_file: History log path; None means ``config_dir/history.json``
        max_history: Records kept in the history file
        verbosity: Logging verbosity level
        log_file: Also append log records (at debug level) to this file
    """

    config_dir: Path
    target_file: Path
    mode: StoreMode = StoreMode.AGGREGATE
    pattern: str = "settings-*.json"
    config_file_name: str = "claudeEnvConfig.json"
    schema_mode: Optional[SchemaMode] = None
    enable_validation: bool = True
    backup_retention: int = 3
    history_file: Optional[Path] = None
    max_history: int = 50
    verbosity: Verbosity = "normal"
    log_file: Optional[Path] = None

    def __post_init__(self) -> None:
        """Normalize field types and validate."""
        # Frozen dataclass: coerce through object.__setattr__
        object.__setattr__(self, "config_dir", Path(self.config_dir).expanduser())
        object.__setattr__(self, "target_file", Path(self.target_file).expanduser())
        if self.history_file is not None:
            object.__setattr__(self, "history_file", Path(self.history_file).expanduser())
        if self.log_file is not None:
            object.__setattr__(self, "log_file", Path(self.log_file).expanduser())
        object.__setattr__(self, "mode", StoreMode(self.mode))
        if self.schema_mode is not None:
            object.__setattr__(self, "schema_mode", SchemaMode(self.schema_mode))

        if self.pattern.count("*") != 1:
            raise ValueError("pattern must contain exactly one '*' wildcard")
        if not self.config_file_name:
            raise ValueError("config_file_name must not be empty")
        if self.backup_retention < 1:
            raise ValueError("backup_retention must be at least 1")
        if self.max_history < 1:
            raise ValueError("max_history must be at least 1")
        if self.verbosity not in ("quiet", "normal", "verbose"):
            raise ValueError("verbosity must be one of quiet, normal, verbose")

    @property
    def config_file(self) -> Path:
        """Aggregate document path."""
        return self.config_dir / self.config_file_name

    @property
    def history_path(self) -> Path:
        return self.history_file or self.config_dir / "history.json"

    @property
    def effective_schema_mode(self) -> SchemaMode:
        """Schema used for validation when none is configured explicitly."""
        if self.schema_mode is not None:
            return self.schema_mode
        if self.mode is StoreMode.PATTERN:
            return SchemaMode.SINGLE
        return SchemaMode.AGGREGATE


def load_config(config_file: Optional[Path] = None, **overrides) -> SwitchConfig:
    """Load configuration with auto-discovery and merging.

    Args:
        config_file: Optional explicit TOML config file path
        **overrides: Direct overrides (typically from CLI flags). ``None``
            values are ignored so unset CLI options fall through.

    Returns:
        Validated SwitchConfig instance

    Raises:
        ConfigurationError: If a config file is invalid or missing
    """
    merged: dict = {
        "config_dir": DEFAULT_CONFIG_DIR,
        "target_file": DEFAULT_TARGET_FILE,
    }

    global_config = Path.home() / GLOBAL_CONFIG_NAME
    if global_config.exists():
        try:
            merged.update(_load_toml_file(global_config))
        except Exception as e:
            raise ConfigurationError(f"Invalid global config '{global_config}': {e}")

    project_config = Path.cwd() / PROJECT_CONFIG_NAME
    if project_config.exists():
        try:
            merged.update(_load_toml_file(project_config))
        except Exception as e:
            raise ConfigurationError(f"Invalid project config '{project_config}': {e}")

    if config_file is not None:
        if not config_file.exists():
            raise ConfigurationError(f"Config file not found: {config_file}")
        try:
            merged.update(_load_toml_file(config_file))
        except Exception as e:
            raise ConfigurationError(f"Invalid config file '{config_file}': {e}")

    merged.update(_load_env_vars())

    if "verbose" in overrides:
        if overrides["verbose"]:
            overrides["verbosity"] = "verbose"
        del overrides["verbose"]
    if "quiet" in overrides:
        if overrides["quiet"]:
            overrides["verbosity"] = "quiet"
        del overrides["quiet"]

    merged.update({k: v for k, v in overrides.items() if v is not None})

    try:
        return SwitchConfig(**merged)
    except (TypeError, ValueError) as e:
        # Unknown field or out-of-range value
        raise ConfigurationError(f"Invalid configuration: {e}")


def _load_env_vars() -> dict[str, Any]:
    """Load configuration from CCS_* environment variables.

    Supported environment variables:
        CCS_CONFIG_DIR: path
        CCS_TARGET_FILE: path
        CCS_MODE: aggregate/pattern
        CCS_PATTERN: str
        CCS_CONFIG_FILE_NAME: str
        CCS_SCHEMA_MODE: aggregate/single
        CCS_ENABLE_VALIDATION: bool (true/false/1/0)
        CCS_BACKUP_RETENTION: int
        CCS_HISTORY_FILE: path
        CCS_MAX_HISTORY: int
        CCS_VERBOSITY: quiet/normal/verbose
        CCS_LOG_FILE: path

    Returns:
        Dict of field_name -> parsed_value for any CCS_* vars found.
    """
    type_hints = get_type_hints(SwitchConfig)

    result: dict[str, Any] = {}

    for field_name in SwitchConfig.__dataclass_fields__:
        env_key = f"{ENV_PREFIX}{field_name.upper()}"
        env_value = os.environ.get(env_key)

        if env_value is None:
            continue

        type_hint = type_hints.get(field_name)
        if type_hint is None:
            continue

        try:
            parsed = _parse_env_value(env_value, type_hint)
            if parsed is not None:
                result[field_name] = parsed
        except ValueError as e:
            raise InvalidConfigError(env_key, env_value, str(e))

    return result


def _parse_env_value(value: str, type_hint: Any) -> Any:
    """Parse environment variable string to the field's type.

    Raises:
        ValueError: If value can't be parsed to expected type
    """
    origin = getattr(type_hint, "__origin__", None)

    # Optional[X] is Union[X, None]
    args = getattr(type_hint, "__args__", ())
    if type(None) in args:
        non_none_types = [t for t in args if t is not type(None)]
        if non_none_types:
            type_hint = non_none_types[0]
            origin = getattr(type_hint, "__origin__", None)

    if type_hint is bool:
        lower = value.lower()
        if lower in ("true", "1", "yes", "on"):
            return True
        elif lower in ("false", "0", "no", "off"):
            return False
        else:
            raise ValueError(f"expected true/false, got '{value}'")

    if type_hint is int:
        return int(value)

    if type_hint is Path:
        return Path(value)

    if type_hint in (StoreMode, SchemaMode):
        return type_hint(value.lower())

    if type_hint is str or origin is Literal:
        return value

    return None


def _load_toml_file(path: Path) -> dict:
    """Load TOML file and return parsed dict.

    Raises:
        ConfigurationError: If tomllib/tomli not available
        Exception: If TOML parsing fails
    """
    try:
        # Python 3.11+ has tomllib in stdlib
        import tomllib
    except ModuleNotFoundError:
        try:
            import tomli as tomllib  # type: ignore
        except ImportError:
            raise ConfigurationError(
                "TOML support requires Python 3.11+ or 'tomli' package. "
                "Install with: pip install tomli"
            )

    with open(path, "rb") as f:
        return tomllib.load(f)
