"""Pytest configuration and fixtures for aznic tests.

CRITICAL: Tests must never reach real Azure or read the user's config.
"""

import pytest

from aznic.config import REQUIRED_ENV_VARS, ConfigManager
from aznic.log_sanitizer import LogSanitizer


@pytest.fixture(autouse=True)
def prevent_real_azure_operations(monkeypatch):
    """Strip service principal variables so nothing can authenticate for real.

    Tests that need an environment use the ``azure_env`` fixture, which sets
    fake values.
    """
    for key in REQUIRED_ENV_VARS:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("AZNIC_TEST_MODE", "true")


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Point the default config file at tmp_path instead of ~/.aznic."""
    config_dir = tmp_path / ".aznic"
    config_dir.mkdir()
    monkeypatch.setattr(ConfigManager, "DEFAULT_CONFIG_DIR", config_dir)
    monkeypatch.setattr(ConfigManager, "DEFAULT_CONFIG_FILE", config_dir / "config.toml")
    return config_dir


@pytest.fixture(autouse=True)
def reset_sanitizer():
    """Registered secrets are process-wide; forget them between tests."""
    LogSanitizer.clear_secrets()
    yield
    LogSanitizer.clear_secrets()
