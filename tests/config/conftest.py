"""
Config test fixtures: clean environment via monkeypatch.
"""

import pytest


@pytest.fixture
def clean_env(monkeypatch):
    """Remove all env vars that config modules might read, for isolation."""
    env_vars_to_clear = [
        "ENVIRONMENT", "DEBUG_MODE", "LOG_LEVEL",
        "KEY_VAULT_NAME", "MEDIA_INSTANCES_SECRET_NAME",
        "TABLE_STORAGE_ACCOUNT_NAME", "TABLE_STORAGE_CONNECTION_STRING",
        "ServiceBusConnection", "SERVICE_BUS_NAMESPACE",
        "ServiceBusConnection__fullyQualifiedNamespace",
        "MEDIA_SERVICE_INSTANCES", "STREAMING_POLICY_NAME", "PROVISION_LOCATORS_LOCALLY",
        "VERIFICATION_MAX_RETRY_COUNT", "VERIFICATION_DELAY_MINUTES",
        "VERIFICATION_SUBMISSION_RETRY_COUNT", "VERIFICATION_SUBMISSION_RETRY_PAUSE_SECONDS",
        "STATUS_SYNC_MIN_AGE_MINUTES",
    ]
    for var in env_vars_to_clear:
        monkeypatch.delenv(var, raising=False)
    return monkeypatch
