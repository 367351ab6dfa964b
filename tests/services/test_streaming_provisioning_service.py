"""
Streaming locator provisioning tests.
"""

import pytest

from core.models import LocatorConflict, LocatorProvisioned, LocatorSnapshot, ProvisioningRequest
from exceptions import ConfigurationError, LocatorConflictError
from services import StreamingProvisioningService

POLICY = "Predefined_ClearStreamingOnly"


@pytest.fixture
def provisioner(client_factory):
    return StreamingProvisioningService(client_factory, POLICY)


def _request(asset_name="output-abc", account="amsinstance1"):
    return ProvisioningRequest(
        processed_asset_media_service_account_name=account,
        processed_asset_name=asset_name,
        streaming_locator_name=f"streaming-{asset_name}",
    )


def test_creates_missing_locator(provisioner, media_client):
    result = provisioner.provision(_request())

    assert result == LocatorProvisioned(locator_name="streaming-output-abc", asset_name="output-abc", created=True)
    assert media_client.locators["streaming-output-abc"].streaming_policy_name == POLICY


def test_second_call_is_a_no_op(provisioner, media_client):
    provisioner.provision(_request())
    result = provisioner.provision(_request())

    assert result.created is False
    assert media_client.created_locators == ["streaming-output-abc"]


def test_asset_name_comparison_ignores_case(provisioner, media_client):
    media_client.locators["streaming-output-abc"] = LocatorSnapshot("streaming-output-abc", "OUTPUT-ABC", POLICY)

    result = provisioner.provision_locator(media_client, "output-abc", "streaming-output-abc")

    assert isinstance(result, LocatorProvisioned)
    assert not result.created
    assert media_client.created_locators == []


def test_conflicting_locator_is_reported(provisioner, media_client):
    media_client.locators["streaming-output-abc"] = LocatorSnapshot("streaming-output-abc", "other-asset", POLICY)

    result = provisioner.provision_locator(media_client, "output-abc", "streaming-output-abc")

    assert result == LocatorConflict(
        locator_name="streaming-output-abc",
        existing_asset_name="other-asset",
        requested_asset_name="output-abc",
    )
    assert media_client.locators["streaming-output-abc"].asset_name == "other-asset"


def test_conflict_raises_from_provision(provisioner, media_client):
    media_client.locators["streaming-output-abc"] = LocatorSnapshot("streaming-output-abc", "other-asset", POLICY)

    with pytest.raises(LocatorConflictError) as exc_info:
        provisioner.provision(_request())

    assert exc_info.value.existing_asset_name == "other-asset"
    assert media_client.created_locators == []


def test_unknown_instance(provisioner):
    with pytest.raises(ConfigurationError):
        provisioner.provision(_request(account="amsinstance9"))


def test_same_locator_for_another_asset_conflicts(provisioner, media_client):
    first = provisioner.provision_locator(media_client, "asset-x", "streaming-asset-x")
    second = provisioner.provision_locator(media_client, "asset-x", "streaming-asset-x")
    third = provisioner.provision_locator(media_client, "asset-y", "streaming-asset-x")

    assert first.created and not second.created
    assert second.locator_name == first.locator_name
    assert isinstance(third, LocatorConflict)
    assert media_client.created_locators == ["streaming-asset-x"]
