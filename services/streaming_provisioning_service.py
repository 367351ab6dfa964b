"""
Streaming Provisioning Service - Idempotent Locator Creation.

A streaming locator is created at most once per name. Re-running with the
same asset is a no-op; a locator bound to another asset is reported as a
conflict and never overwritten.

Exports:
    StreamingProvisioningService: provision_locator / provision
"""

from typing import Union

from core.models import LocatorConflict, LocatorProvisioned, ProvisioningRequest
from exceptions import LocatorConflictError
from infrastructure.interface_repository import IJobControlClient, IJobControlClientFactory
from util_logger import LoggerFactory, ComponentType, format_for_log

logger = LoggerFactory.create_logger(ComponentType.SERVICE, "StreamingProvisioningService")


class StreamingProvisioningService:
    """Creates streaming locators for processed assets."""

    def __init__(self, client_factory: IJobControlClientFactory, streaming_policy_name: str):
        self.client_factory = client_factory
        self.streaming_policy_name = streaming_policy_name

    def provision_locator(
        self,
        client: IJobControlClient,
        asset_name: str,
        locator_name: str
    ) -> Union[LocatorProvisioned, LocatorConflict]:
        """
        Ensure locator_name exists and points at asset_name.

        Asset names are compared case-insensitively.
        """
        existing = client.get_streaming_locator(locator_name)

        if existing is not None:
            if existing.asset_name.lower() != asset_name.lower():
                logger.error(
                    f"StreamingProvisioningService.provision_locator locator already exists with incorrect asset name: "
                    f"locator_name={locator_name} existing_asset_name={existing.asset_name} "
                    f"requested_asset_name={asset_name}"
                )
                return LocatorConflict(
                    locator_name=locator_name,
                    existing_asset_name=existing.asset_name,
                    requested_asset_name=asset_name,
                )

            logger.info(f"StreamingProvisioningService.provision_locator locator already exists: {locator_name}")
            return LocatorProvisioned(locator_name=locator_name, asset_name=existing.asset_name, created=False)

        created = client.create_streaming_locator(locator_name, asset_name, self.streaming_policy_name)
        logger.info(
            f"StreamingProvisioningService.provision_locator created locator: "
            f"locator_name={created.name} asset_name={created.asset_name}"
        )
        return LocatorProvisioned(locator_name=created.name, asset_name=created.asset_name, created=True)

    def provision(self, request: ProvisioningRequest) -> LocatorProvisioned:
        """
        Provision the locator named in a provisioning request.

        Raises:
            LocatorConflictError: If the locator is bound to another asset
        """
        logger.info(f"StreamingProvisioningService.provision started: request={format_for_log(request)}")
        client = self.client_factory.get_client(request.processed_asset_media_service_account_name)

        result = self.provision_locator(client, request.processed_asset_name, request.streaming_locator_name)
        if isinstance(result, LocatorConflict):
            raise LocatorConflictError(result.locator_name, result.existing_asset_name, result.requested_asset_name)
        return result
