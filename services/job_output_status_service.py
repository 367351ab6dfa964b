"""
Job Output Status Service - Ingest Path.

Stores status records coming from job state change notifications and
requests provisioning for outputs that finished.

Exports:
    JobOutputStatusService: process_job_output_status entry point
"""

from core.models import JobOutputStatus, JobState, ProvisioningRequest, streaming_locator_name
from infrastructure.interface_repository import IJobOutputStatusRepository, IProvisioningRequestChannel
from util_logger import LoggerFactory, ComponentType, format_for_log

logger = LoggerFactory.create_logger(ComponentType.SERVICE, "JobOutputStatusService")


class JobOutputStatusService:
    """Ingest path for job output status records."""

    def __init__(
        self,
        status_repository: IJobOutputStatusRepository,
        provisioning_channel: IProvisioningRequestChannel
    ):
        self.status_repository = status_repository
        self.provisioning_channel = provisioning_channel

    def process_job_output_status(self, status: JobOutputStatus) -> JobOutputStatus:
        """
        Request provisioning if the output finished, then store the status.

        Returns:
            The stored status

        Raises:
            Whatever the provisioning channel raised, after the status is stored
        """
        logger.info(f"JobOutputStatusService.process_job_output_status started: status={format_for_log(status)}")

        try:
            if status.job_output_state == JobState.FINISHED:
                provisioning_request = ProvisioningRequest(
                    processed_asset_media_service_account_name=status.media_service_account_name,
                    processed_asset_name=status.job_output_asset_name,
                    streaming_locator_name=streaming_locator_name(status.job_output_asset_name),
                )
                self.provisioning_channel.submit(provisioning_request)
                logger.info(
                    f"JobOutputStatusService.process_job_output_status submitted provisioning request: "
                    f"{format_for_log(provisioning_request)}"
                )
        finally:
            # The status is stored even when provisioning fails; the error still propagates
            stored = self.status_repository.create_or_update(status)

        logger.info(
            f"JobOutputStatusService.process_job_output_status completed: "
            f"job_name={stored.job_name} state={stored.job_output_state.value}"
        )
        return stored
