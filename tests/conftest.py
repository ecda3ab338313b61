"""
Shared test fixtures for aznic tests.

This module provides:
- Fake service principal environment
- Mock Azure management clients with a call recorder
- A SampleContext wired to the mocks and a captured ProgressDisplay
"""

import io

import pytest

from aznic.config import SampleConfig
from aznic.context import SampleContext
from aznic.modules.interaction_handler import MockInteractionHandler
from aznic.modules.progress import ProgressDisplay
from tests.mocks.azure_mock import create_mock_azure_environment

FAKE_ENV = {
    "AZURE_TENANT_ID": "12345678-1234-1234-1234-123456789012",
    "AZURE_CLIENT_ID": "87654321-4321-4321-4321-210987654321",
    "AZURE_CLIENT_SECRET": "fake-client-secret-value",  # noqa: S105 - test fixture
    "AZURE_SUBSCRIPTION_ID": "00000000-0000-0000-0000-000000000000",
}


@pytest.fixture
def azure_env(monkeypatch):
    """Set fake service principal variables in os.environ."""
    for key, value in FAKE_ENV.items():
        monkeypatch.setenv(key, value)
    return dict(FAKE_ENV)


@pytest.fixture
def sample_config():
    return SampleConfig()


@pytest.fixture
def progress():
    """ProgressDisplay writing to in-memory buffers."""
    return ProgressDisplay(use_unicode=False, output_file=io.StringIO(), error_file=io.StringIO())


@pytest.fixture
def mock_azure():
    """Mock clients and their shared call recorder."""
    return create_mock_azure_environment()


@pytest.fixture
def recorder(mock_azure):
    return mock_azure[1]


@pytest.fixture
def ctx(sample_config, mock_azure, progress):
    clients, _ = mock_azure
    return SampleContext(config=sample_config, clients=clients, progress=progress)


@pytest.fixture
def interaction():
    return MockInteractionHandler()
