"""
Root conftest.py: sys.path, env vars, shared fixtures.

Sets up the test environment so all production code can be imported
without Azure credentials, Service Bus or Table Storage.
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
    Set minimal environment variables to prevent import crashes.

    Config is read lazily, but the defaults keep an accidental
    get_config() call away from real Azure resources.
    """
    defaults = {
        "ENVIRONMENT": "dev",
        "TABLE_STORAGE_ACCOUNT_NAME": "teststorage",
        "SERVICE_BUS_NAMESPACE": "test.servicebus.windows.net",
    }
    for key, value in defaults.items():
        os.environ.setdefault(key, value)


@pytest.fixture(autouse=True)
def reset_cached_config():
    """Drop the config singleton around every test."""
    from config import reset_config
    reset_config()
    yield
    reset_config()
