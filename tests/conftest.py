"""Shared test fixtures for config-switch."""

import logging

import pytest

from config_switch.config import SwitchConfig
from config_switch.models import StoreMode


@pytest.fixture(autouse=True)
def detach_log_handlers():
    """Drop handlers a CLI run or setup_logging call attached."""
    yield
    logger = logging.getLogger("config_switch")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def config_dir(tmp_path):
    """Directory for the aggregate document or pattern files."""
    d = tmp_path / "configs"
    d.mkdir()
    return d


@pytest.fixture
def target_file(tmp_path):
    """Target settings path (not created)."""
    return tmp_path / "claude" / "settings.json"


@pytest.fixture
def aggregate_config(config_dir, target_file):
    return SwitchConfig(config_dir=config_dir, target_file=target_file)


@pytest.fixture
def pattern_config(config_dir, target_file):
    return SwitchConfig(
        config_dir=config_dir,
        target_file=target_file,
        mode=StoreMode.PATTERN,
        pattern="settings-*.json",
    )


@pytest.fixture
def aggregate_document():
    """Two named env sets."""
    return {
        "work": {
            "ANTHROPIC_API_KEY": "k-work",
            "ANTHROPIC_BASE_URL": "https://api.anthropic.com",
        },
        "personal": {
            "ANTHROPIC_API_KEY": "k-personal",
            "ANTHROPIC_BASE_URL": "https://custom-api.example.com",
        },
    }


@pytest.fixture
def valid_settings():
    """A complete single-document settings file."""
    return {
        "env": {
            "ANTHROPIC_API_KEY": "k1",
            "ANTHROPIC_BASE_URL": "https://api.anthropic.com",
            "ANTHROPIC_MODEL": "claude-sonnet",
        },
        "timeout": 30,
        "permissions": {"allow": ["Bash"]},
    }
