"""
Streaming Provisioning Models.

Exports:
    STREAMING_LOCATOR_PREFIX: Prefix of generated locator names
    streaming_locator_name: Deterministic locator name for an asset
    ProvisioningRequest: Request to publish a processed asset
    LocatorProvisioned: Locator exists and points at the requested asset
    LocatorConflict: Locator exists but points at another asset
"""

import uuid
from dataclasses import dataclass
from pydantic import BaseModel, Field

STREAMING_LOCATOR_PREFIX = "streaming-"


def streaming_locator_name(asset_name: str) -> str:
    """Locator name for an asset: streaming-<asset name>."""
    return f"{STREAMING_LOCATOR_PREFIX}{asset_name}"


class ProvisioningRequest(BaseModel):
    """Request to make a processed asset streamable."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), description="Request id")
    processed_asset_media_service_account_name: str = Field(..., min_length=1, description="Instance holding the asset")
    processed_asset_name: str = Field(..., min_length=1, description="Processed asset name")
    streaming_locator_name: str = Field(..., min_length=1, description="Locator to create")


@dataclass(frozen=True)
class LocatorProvisioned:
    locator_name: str
    asset_name: str
    created: bool


@dataclass(frozen=True)
class LocatorConflict:
    """The locator name is taken by a different asset."""
    locator_name: str
    existing_asset_name: str
    requested_asset_name: str
