"""Tests for SwitchConfig and load_config."""

import os
from pathlib import Path

import pytest

from config_switch.config import SwitchConfig, load_config
from config_switch.exceptions import ConfigurationError, InvalidConfigError
from config_switch.models import SchemaMode, StoreMode


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Keep the real home, cwd and CCS_* variables out of config discovery."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setattr(Path, "home", classmethod(lambda cls: home))
    monkeypatch.chdir(tmp_path)
    for key in list(os.environ):
        if key.startswith("CCS_"):
            monkeypatch.delenv(key)
    return home


class TestSwitchConfig:
    def test_defaults(self, tmp_path):
        config = SwitchConfig(config_dir=tmp_path, target_file=tmp_path / "s.json")
        assert config.mode is StoreMode.AGGREGATE
        assert config.pattern == "settings-*.json"
        assert config.backup_retention == 3
        assert config.max_history == 50
        assert config.config_file == tmp_path / "claudeEnvConfig.json"
        assert config.history_path == tmp_path / "history.json"

    def test_coerces_strings(self, tmp_path):
        config = SwitchConfig(
            config_dir=str(tmp_path),
            target_file=str(tmp_path / "s.json"),
            mode="pattern",
            schema_mode="aggregate",
        )
        assert isinstance(config.config_dir, Path)
        assert config.mode is StoreMode.PATTERN
        assert config.schema_mode is SchemaMode.AGGREGATE

    def test_schema_follows_mode(self, tmp_path):
        aggregate = SwitchConfig(config_dir=tmp_path, target_file=tmp_path / "s")
        pattern = SwitchConfig(config_dir=tmp_path, target_file=tmp_path / "s", mode="pattern")
        assert aggregate.effective_schema_mode is SchemaMode.AGGREGATE
        assert pattern.effective_schema_mode is SchemaMode.SINGLE

    @pytest.mark.parametrize(
        "overrides",
        [
            {"pattern": "settings.json"},
            {"pattern": "*-*.json"},
            {"backup_retention": 0},
            {"max_history": 0},
            {"mode": "bogus"},
            {"verbosity": "loud"},
        ],
    )
    def test_rejects_invalid_values(self, tmp_path, overrides):
        with pytest.raises(ValueError):
            SwitchConfig(config_dir=tmp_path, target_file=tmp_path / "s", **overrides)


class TestLoadConfig:
    def test_home_defaults(self, isolated_env):
        config = load_config()
        # Module-level defaults were computed from the real home at import time
        assert config.config_dir.name == ".claude-config-switch"
        assert config.target_file.name == "settings.json"

    def test_explicit_file(self, tmp_path):
        toml = tmp_path / "custom.toml"
        toml.write_text('mode = "pattern"\npattern = "env-*.json"\nmax_history = 10\n')
        config = load_config(config_file=toml)
        assert config.mode is StoreMode.PATTERN
        assert config.pattern == "env-*.json"
        assert config.max_history == 10

    def test_project_file(self, tmp_path):
        (tmp_path / "config-switch.toml").write_text(f'config_dir = "{tmp_path.as_posix()}"\n')
        assert load_config().config_dir == tmp_path

    def test_missing_explicit_file(self, tmp_path):
        with pytest.raises(ConfigurationError):
            load_config(config_file=tmp_path / "nope.toml")

    def test_env_vars(self, monkeypatch):
        monkeypatch.setenv("CCS_MODE", "PATTERN")
        monkeypatch.setenv("CCS_ENABLE_VALIDATION", "false")
        monkeypatch.setenv("CCS_BACKUP_RETENTION", "5")
        config = load_config()
        assert config.mode is StoreMode.PATTERN
        assert config.enable_validation is False
        assert config.backup_retention == 5

    def test_log_file_env_var(self, monkeypatch, tmp_path):
        monkeypatch.setenv("CCS_LOG_FILE", str(tmp_path / "ccs.log"))
        assert load_config().log_file == tmp_path / "ccs.log"

    def test_bad_env_var(self, monkeypatch):
        monkeypatch.setenv("CCS_ENABLE_VALIDATION", "maybe")
        with pytest.raises(InvalidConfigError):
            load_config()

    def test_overrides_win_and_none_ignored(self, monkeypatch, tmp_path):
        monkeypatch.setenv("CCS_PATTERN", "a-*.json")
        config = load_config(pattern="b-*.json", target_file=None, verbose=True)
        assert config.pattern == "b-*.json"
        assert config.verbosity == "verbose"

    def test_unknown_key(self, tmp_path):
        toml = tmp_path / "custom.toml"
        toml.write_text("unknown_option = 1\n")
        with pytest.raises(ConfigurationError):
            load_config(config_file=toml)

    def test_invalid_value(self):
        with pytest.raises(ConfigurationError):
            load_config(pattern="no-wildcard.json")
