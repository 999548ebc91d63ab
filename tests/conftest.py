"""
Root conftest.py: sys.path, env vars, shared fixtures.

Sets up the test environment so all production code can be imported
without a database connection.
"""

import os
import sys

import pytest

# Add project root to sys.path so 'core', 'services', 'config', etc. are importable
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)


@pytest.fixture(autouse=True, scope="session")
def set_minimal_env_vars():
    """
    Set minimal environment variables so config loading succeeds.

    Tests that need a specific environment use the clean_env fixture
    (tests/config/conftest.py) or monkeypatch directly.
    """
    defaults = {
        "LOG_LEVEL": "WARNING",
    }
    for key, value in defaults.items():
        os.environ.setdefault(key, value)


@pytest.fixture(autouse=True)
def _reset_config_singleton():
    """Each test sees the environment it sets, not a cached AppConfig."""
    from config import reset_config
    reset_config()
    yield
    reset_config()


@pytest.fixture
def recording_provider():
    """Offline provider with an empty catalog."""
    from infrastructure.recording import RecordingConnectionProvider
    return RecordingConnectionProvider()


@pytest.fixture
def recording_session(recording_provider):
    """Session on the default database of an empty offline catalog."""
    with recording_provider.session() as session:
        yield session
