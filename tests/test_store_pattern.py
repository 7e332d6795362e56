"""Tests for ConfigStore in pattern-file mode."""

import json
from dataclasses import replace

import pytest

from config_switch.exceptions import (
    ConfigNotFoundError,
    FileAccessError,
    PostSwitchValidationError,
    SourceValidationError,
)
from config_switch.file_ops import list_backups
from config_switch.models import StoreMode, ValidationResult
from config_switch.store import ConfigStore
from config_switch.validator import Validator


def _settings(key):
    return {
        "env": {
            "ANTHROPIC_API_KEY": key,
            "ANTHROPIC_BASE_URL": "https://api.anthropic.com",
        }
    }


@pytest.fixture
def populated_dir(config_dir):
    (config_dir / "settings-work.json").write_text(json.dumps(_settings("k-work")))
    (config_dir / "settings-home.json").write_text(json.dumps(_settings("k-home")))
    (config_dir / "settings-broken.json").write_text("{not json")
    (config_dir / "settings-notes.txt").write_text("{}")
    (config_dir / "other.json").write_text("{}")
    (config_dir / "settings-dir.json").mkdir()
    return config_dir


@pytest.fixture
def store(pattern_config, populated_dir):
    return ConfigStore(pattern_config)


class TestScan:
    def test_filters_and_sorts(self, store):
        assert [e.name for e in store.scan()] == [
            "settings-home.json",
            "settings-work.json",
        ]

    def test_entry_metadata(self, store, populated_dir):
        entry = store.scan()[0]
        assert entry.path == populated_dir / "settings-home.json"
        assert entry.size == entry.path.stat().st_size

    def test_missing_directory(self, pattern_config, tmp_path):
        config = replace(pattern_config, config_dir=tmp_path / "absent")
        with pytest.raises(FileAccessError):
            ConfigStore(config).scan()


class TestFindByAlias:
    @pytest.mark.parametrize("alias", ["work", "settings-work", "settings-work.json"])
    def test_candidates(self, store, alias):
        assert store.find_by_alias(alias).name == "settings-work.json"

    def test_invalid_json_not_found(self, store):
        assert store.find_by_alias("broken") is None

    def test_bare_filename(self, pattern_config, config_dir):
        config = replace(pattern_config, pattern="*.json")
        (config_dir / "work.json").write_text(json.dumps(_settings("k")))
        assert ConfigStore(config).find_by_alias("work").name == "work.json"


class TestSwitch:
    def test_replaces_target_verbatim(self, store, populated_dir, target_file):
        result = store.switch_config("work")

        source = populated_dir / "settings-work.json"
        assert target_file.read_bytes() == source.read_bytes()
        assert result.entry.name == "settings-work.json"
        assert result.previous is None
        assert result.current == _settings("k-work")
        assert result.validation.is_valid
        assert result.backup_path is None
        assert result.mode is StoreMode.PATTERN

    def test_backs_up_existing_target(self, store, target_file):
        store.switch_config("work")
        result = store.switch_config("home")

        assert result.previous == _settings("k-work")
        assert result.backup_path.exists()
        assert result.backup_path.name.startswith("settings.json.backup-")
        assert json.loads(result.backup_path.read_text()) == _settings("k-work")

    def test_keeps_three_backups(self, store, target_file):
        for alias in ["work", "home", "work", "home", "work", "home"]:
            store.switch_config(alias)
        assert len(list_backups(target_file)) == 3

    def test_idempotent(self, store, target_file):
        store.switch_config("home")
        once = target_file.read_bytes()
        store.switch_config("home")
        assert target_file.read_bytes() == once

    def test_invalid_source_aborts_before_write(self, pattern_config, config_dir, target_file):
        (config_dir / "settings-bad.json").write_text(json.dumps({"env": {}}))
        target_file.parent.mkdir(parents=True)
        target_file.write_text('{"keep": true}')

        with pytest.raises(SourceValidationError) as exc_info:
            ConfigStore(pattern_config).switch_config("bad")

        assert "ANTHROPIC_API_KEY" in str(exc_info.value)
        assert target_file.read_text() == '{"keep": true}'
        assert list_backups(target_file) == []

    def test_validation_disabled_allows_any_json(self, pattern_config, config_dir, target_file):
        config = replace(pattern_config, enable_validation=False)
        (config_dir / "settings-bare.json").write_text('{"x": 1}')

        result = ConfigStore(config).switch_config("bare")

        assert result.validation is None
        assert result.current == {"x": 1}
        assert json.loads(target_file.read_text()) == {"x": 1}

    def test_post_switch_failure_restores_backup(self, store, target_file, monkeypatch):
        target_file.parent.mkdir(parents=True)
        target_file.write_text('{"original": true}')

        real = Validator.validate_config_file
        calls = []

        def fail_on_target(path, schema_mode):
            calls.append(path)
            if path == target_file:
                return ValidationResult(is_valid=False, errors=("corrupted write",))
            return real(path, schema_mode)

        monkeypatch.setattr(Validator, "validate_config_file", staticmethod(fail_on_target))

        with pytest.raises(PostSwitchValidationError) as exc_info:
            store.switch_config("work")

        assert exc_info.value.restored
        assert target_file.read_text() == '{"original": true}'
        assert list_backups(target_file) == []
        assert calls[-1] == target_file

    def test_post_switch_failure_without_previous_target(self, store, target_file, monkeypatch):
        real = Validator.validate_config_file

        def fail_on_target(path, schema_mode):
            if path == target_file:
                return ValidationResult(is_valid=False, errors=("corrupted write",))
            return real(path, schema_mode)

        monkeypatch.setattr(Validator, "validate_config_file", staticmethod(fail_on_target))

        with pytest.raises(PostSwitchValidationError):
            store.switch_config("work")

        assert not target_file.exists()

    def test_failed_copy_leaves_no_backup(self, pattern_config, populated_dir):
        # Target is the source itself, so the copy step fails
        target = populated_dir / "settings-work.json"
        before = target.read_bytes()
        store = ConfigStore(replace(pattern_config, target_file=target))

        with pytest.raises(FileAccessError):
            store.switch_config("work")

        assert target.read_bytes() == before
        assert list_backups(target) == []

    def test_partial_copy_is_restored(self, store, target_file, monkeypatch):
        target_file.parent.mkdir(parents=True)
        target_file.write_text('{"original": true}')

        def broken_copy(source, destination):
            destination.write_text("{trunc")
            raise FileAccessError(destination, "disk full")

        monkeypatch.setattr("config_switch.store.copy_file", broken_copy)

        with pytest.raises(FileAccessError):
            store.switch_config("work")

        assert target_file.read_text() == '{"original": true}'
        assert list_backups(target_file) == []

    def test_nan_source_is_not_switchable(self, pattern_config, config_dir, target_file):
        (config_dir / "settings-nan.json").write_text(
            '{"env": {"ANTHROPIC_API_KEY": "k", "ANTHROPIC_BASE_URL": "u"}, "timeout": NaN}'
        )
        store = ConfigStore(pattern_config)

        assert store.scan() == []
        with pytest.raises(ConfigNotFoundError):
            store.switch_config("nan")
        assert not target_file.exists()

    def test_unknown_alias(self, store):
        with pytest.raises(ConfigNotFoundError) as exc_info:
            store.switch_config("staging")
        assert exc_info.value.available == ["settings-home.json", "settings-work.json"]

    def test_warnings_reach_result(self, pattern_config, config_dir):
        doc = _settings("k")
        doc["temperature"] = 2
        (config_dir / "settings-hot.json").write_text(json.dumps(doc))

        result = ConfigStore(pattern_config).switch_config("hot")

        assert result.validation.is_valid
        assert result.validation.warnings == ("temperature should be between 0 and 1",)


class TestCurrentConfig:
    def test_reports_validation(self, store, target_file):
        store.switch_config("work")
        current = store.get_current_config()
        assert current.validation.is_valid
        assert current.env is None

    def test_invalid_target_reported(self, store, target_file):
        target_file.parent.mkdir(parents=True)
        target_file.write_text("{}")
        current = store.get_current_config()
        assert not current.validation.is_valid
