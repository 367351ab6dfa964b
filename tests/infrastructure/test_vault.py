"""
Key Vault repository tests with a mocked secret client.
"""

import json
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
from azure.core.exceptions import HttpResponseError

from exceptions import ConfigurationError
from infrastructure.vault import VaultAccessError, VaultRepository


def _vault(value):
    client = MagicMock()
    client.get_secret.return_value = SimpleNamespace(value=value)
    return VaultRepository("media-vault", client=client), client


def test_media_instances_from_secret():
    vault, _ = _vault(json.dumps([
        {"account_name": "amsinstance1", "subscription_id": "sub-1", "resource_group": "rg"},
    ]))
    assert list(vault.get_media_instances("media-service-instances")) == ["amsinstance1"]


def test_secret_is_cached():
    vault, client = _vault("value")
    vault.get_secret("s")
    vault.get_secret("s")
    assert client.get_secret.call_count == 1
    assert vault.clear_cache() == 1


def test_empty_secret():
    vault, _ = _vault("")
    with pytest.raises(VaultAccessError):
        vault.get_secret("s")


def test_invalid_instance_secret():
    vault, _ = _vault("{}")
    with pytest.raises(ConfigurationError):
        vault.get_media_instances("media-service-instances")


def test_vault_failure():
    client = MagicMock()
    client.get_secret.side_effect = HttpResponseError("forbidden")
    with pytest.raises(VaultAccessError):
        VaultRepository("media-vault", client=client).get_secret("s")
