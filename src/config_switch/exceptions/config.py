"""Configuration-loading exceptions: settings files, environment overrides."""

from typing import Any

from .base import ConfigSwitchError


class ConfigurationError(ConfigSwitchError):
    """Base class for errors in the tool's own configuration."""

    pass


class InvalidConfigError(ConfigurationError):
    """Raised when a configuration value is invalid."""

    def __init__(self, key: str, value: Any, reason: str):
        super().__init__(
            f"Invalid configuration for {key}: {value}",
            details={"key": key, "value": str(value), "reason": reason},
        )
        self.key = key
        self.value = value
        self.reason = reason
