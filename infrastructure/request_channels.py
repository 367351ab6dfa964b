"""
Request Channels - Service Bus backed.

Exports:
    ServiceBusJobVerificationChannel: Delayed verification requests
    ServiceBusProvisioningChannel: Provisioning requests for the downstream pipeline
    LocalProvisioningChannel: Runs the locator provisioner in-process
"""

from datetime import timedelta

from core.models import JobVerificationRequest, ProvisioningRequest
from infrastructure.interface_repository import (
    IJobVerificationRequestChannel,
    IProvisioningRequestChannel,
    IQueueRepository,
)
from util_logger import LoggerFactory, ComponentType

logger = LoggerFactory.create_logger(ComponentType.REPOSITORY, "RequestChannels")


class ServiceBusJobVerificationChannel(IJobVerificationRequestChannel):
    """
    Verification requests on the job-verification-requests queue.

    The delay becomes the message's scheduled enqueue time.
    """

    def __init__(self, queue_repository: IQueueRepository, queue_name: str):
        self.queue_repository = queue_repository
        self.queue_name = queue_name

    def submit(self, request: JobVerificationRequest, verification_delay: timedelta) -> JobVerificationRequest:
        message_id = self.queue_repository.send_message_with_delay(self.queue_name, request, verification_delay)
        logger.info(
            f"Submitted job verification request: id={request.id} message_id={message_id} "
            f"job_name={request.job_name} retry_count={request.retry_count} "
            f"delay_minutes={verification_delay.total_seconds() / 60:g}"
        )
        return request


class ServiceBusProvisioningChannel(IProvisioningRequestChannel):
    """Provisioning requests on the stream-provisioning-requests queue."""

    def __init__(self, queue_repository: IQueueRepository, queue_name: str):
        self.queue_repository = queue_repository
        self.queue_name = queue_name

    def submit(self, request: ProvisioningRequest) -> ProvisioningRequest:
        message_id = self.queue_repository.send_message(self.queue_name, request)
        logger.info(
            f"Submitted provisioning request: id={request.id} message_id={message_id} "
            f"asset={request.processed_asset_name} locator={request.streaming_locator_name} "
            f"instance={request.processed_asset_media_service_account_name}"
        )
        return request


class LocalProvisioningChannel(IProvisioningRequestChannel):
    """
    Provisions the streaming locator immediately instead of enqueueing.

    provisioner is anything with provision(request), normally a
    StreamingProvisioningService.
    """

    def __init__(self, provisioner):
        self.provisioner = provisioner

    def submit(self, request: ProvisioningRequest) -> ProvisioningRequest:
        logger.info(
            f"Provisioning locally: locator={request.streaming_locator_name} "
            f"asset={request.processed_asset_name}"
        )
        self.provisioner.provision(request)
        return request
