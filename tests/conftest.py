"""
Pytest configuration and common fixtures for OpenCage client tests.

All fixtures follow camelCase naming convention.
"""

from typing import Any, Dict

import pytest

from lib.opencage import API_KEY_ENV_VAR, DictEnvironment, EnvironmentScope
from tests.utils import OK_BODY, RecordingTransport

# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def okBody() -> Dict[str, Any]:
    """Successful API response body with one result."""
    return OK_BODY


@pytest.fixture
def recordingTransport() -> RecordingTransport:
    """Transport returning successful response."""
    return RecordingTransport(body=OK_BODY)


@pytest.fixture
def emptyEnvironment() -> DictEnvironment:
    """Environment without any API key in any scope."""
    return DictEnvironment()


@pytest.fixture
def keyEnvironment() -> DictEnvironment:
    """Environment with API key set in process scope."""
    return DictEnvironment({EnvironmentScope.PROCESS: {API_KEY_ENV_VAR: "env_test_key"}})


@pytest.fixture
def isolatedCwd(tmp_path, monkeypatch):
    """Run test in empty directory so no local config.toml or .env is picked up."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv(API_KEY_ENV_VAR, raising=False)
    return tmp_path
