"""
Service test fixtures: fake media service instances and in-memory stores.
"""

import pytest

from tests.fakes import (
    FakeClientFactory,
    FakeJobControlClient,
    InMemoryInstanceHealthRepository,
    RecordingProvisioningChannel,
    VerificationWorld,
)


@pytest.fixture
def world():
    return VerificationWorld()


@pytest.fixture
def health_repository():
    return InMemoryInstanceHealthRepository()


@pytest.fixture
def provisioning_channel():
    return RecordingProvisioningChannel()


@pytest.fixture
def media_client():
    return FakeJobControlClient("amsinstance1")


@pytest.fixture
def client_factory(media_client):
    return FakeClientFactory(media_client)
