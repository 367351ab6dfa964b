"""
Job Verification Service - Verification Orchestrator.

Decides what happens to one job output when its verification request comes
due:

    1. Read the stored status for (job_name, job_output_asset_name).
    2. If there is none, or it is not terminal, poll the owning instance
       (using the original transform name). A found job yields a fresh
       status that is stored; a missing job leaves the status as read.
    3. Dispatch on the state:
           Finished  -> provision (only if just polled), delete the job
           Error     -> delete the job, resubmit if the error is retriable
           Canceled  -> nothing
           otherwise -> schedule another verification (stuck)

Every lineage is bounded by verification.max_retry_count: a resubmission or
a re-check adds exactly one to retry_count, and once the bound is reached
the lineage is abandoned with a warning.

Exports:
    JobVerificationService: verify_job entry point
"""

import time
from typing import Callable, Optional

from config import VerificationConfig
from core.logic import (
    all_outputs_continue_job,
    calculate_verification_delay,
    has_retry_budget,
    is_job_state_terminal,
)
from core.models import (
    JobOutputStatus,
    JobState,
    JobVerificationRequest,
    ProvisioningRequest,
    streaming_locator_name,
)
from infrastructure.interface_repository import (
    IJobControlClientFactory,
    IJobOutputStatusRepository,
    IJobVerificationRequestChannel,
    IProvisioningRequestChannel,
)
from services.instance_health_service import InstanceHealthService
from services.media_helpers import derive_job_output_status
from util_logger import LoggerFactory, ComponentType, format_for_log

logger = LoggerFactory.create_logger(ComponentType.SERVICE, "JobVerificationService")


class JobVerificationService:
    """
    Verification orchestrator.

    Holds no state between calls; every collaborator is injected.
    """

    def __init__(
        self,
        status_repository: IJobOutputStatusRepository,
        client_factory: IJobControlClientFactory,
        verification_channel: IJobVerificationRequestChannel,
        provisioning_channel: IProvisioningRequestChannel,
        instance_health_service: InstanceHealthService,
        verification_config: VerificationConfig,
        sleep: Callable[[float], None] = time.sleep
    ):
        self.status_repository = status_repository
        self.client_factory = client_factory
        self.verification_channel = verification_channel
        self.provisioning_channel = provisioning_channel
        self.instance_health_service = instance_health_service
        self.config = verification_config
        self._sleep = sleep

    # ========================================================================
    # Entry point
    # ========================================================================

    def verify_job(self, request: JobVerificationRequest) -> JobVerificationRequest:
        """
        Verify one job output and act on its state.

        Returns:
            The request, updated by whichever handler ran

        Raises:
            JobControlError: Media Services call failed (message is redelivered)
        """
        logger.info(f"JobVerificationService.verify_job started: request={format_for_log(request)}")

        status = self.status_repository.get_latest(request.job_name, request.job_output_asset_name)
        loaded_from_api = False

        if status is None or not is_job_state_terminal(status.job_output_state):
            client = self.client_factory.get_client(request.media_service_account_name)
            logger.info(
                f"JobVerificationService.verify_job checking job status using API: "
                f"media_service_account_name={request.media_service_account_name}"
            )
            job = client.get_job(request.original_job_request.transform_name, request.job_name)

            if job is not None:
                status = derive_job_output_status(
                    job,
                    media_service_account_name=request.media_service_account_name,
                    job_output_asset_name=request.job_output_asset_name,
                    transform_name=request.original_job_request.transform_name,
                )
                loaded_from_api = True
                self.status_repository.create_or_update(status)

        logger.info(f"JobVerificationService.verify_job job_output_status={format_for_log(status)}")

        state = status.job_output_state if status is not None else None

        if state == JobState.FINISHED:
            self._process_finished_job(request, loaded_from_api)
        elif state == JobState.ERROR:
            self._process_failed_job(request, status)
        elif state == JobState.CANCELED:
            logger.info(
                f"JobVerificationService.verify_job job was canceled, no action: "
                f"job_name={request.job_name} job_output_asset_name={request.job_output_asset_name}"
            )
        else:
            self._process_stuck_job(request)

        logger.info(f"JobVerificationService.verify_job completed: request={format_for_log(request)}")
        return request

    # ========================================================================
    # State handlers
    # ========================================================================

    def _process_finished_job(self, request: JobVerificationRequest, loaded_from_api: bool) -> None:
        # A status that was already Finished came from the ingest path, which
        # has already requested provisioning.
        try:
            if loaded_from_api:
                provisioning_request = ProvisioningRequest(
                    processed_asset_media_service_account_name=request.media_service_account_name,
                    processed_asset_name=request.job_output_asset_name,
                    streaming_locator_name=streaming_locator_name(request.original_job_request.output_asset_name),
                )
                self.provisioning_channel.submit(provisioning_request)
                logger.info(
                    f"JobVerificationService._process_finished_job submitted provisioning request: "
                    f"{format_for_log(provisioning_request)}"
                )
        finally:
            # The job is deleted whatever the provisioning outcome
            self._delete_job(request)

    def _process_failed_job(self, request: JobVerificationRequest, status: JobOutputStatus) -> None:
        self._delete_job(request)

        if status.has_retriable_error:
            self._resubmit_job(request)
        else:
            logger.info(
                f"JobVerificationService._process_failed_job job failed with non-retriable error, no resubmission: "
                f"job_name={request.job_name} job_output_asset_name={request.job_output_asset_name}"
            )

    def _process_stuck_job(self, request: JobVerificationRequest) -> None:
        if not has_retry_budget(request.retry_count, self.config.max_retry_count):
            logger.warning(
                f"JobVerificationService._process_stuck_job max number of retries reached, giving up: "
                f"job_name={request.job_name} job_output_asset_name={request.job_output_asset_name} "
                f"retry_count={request.retry_count}"
            )
            return

        request.retry_count += 1
        self._submit_verification_request(request)

    # ========================================================================
    # Resubmission
    # ========================================================================

    def _resubmit_job(self, request: JobVerificationRequest) -> None:
        if not has_retry_budget(request.retry_count, self.config.max_retry_count):
            logger.warning(
                f"JobVerificationService._resubmit_job max number of retries reached, giving up: "
                f"job_name={request.job_name} job_output_asset_name={request.job_output_asset_name} "
                f"retry_count={request.retry_count}"
            )
            return

        selected_instance_name = self.instance_health_service.get_next_available_instance(
            exclude=request.media_service_account_name
        )
        request.retry_count += 1

        original = request.original_job_request
        client = self.client_factory.get_client(selected_instance_name)

        policies = client.get_transform_output_policies(original.transform_name)
        if all_outputs_continue_job(policies):
            logger.info(
                f"JobVerificationService._resubmit_job all transform outputs continue on error, skipping resubmission: "
                f"transform_name={original.transform_name} instance={selected_instance_name}"
            )
            return

        output_asset_name = client.create_or_update_asset(request.job_output_asset_name)
        job = client.create_job(
            original.transform_name,
            request.job_name,
            original.job_inputs,
            [output_asset_name],
        )
        logger.info(
            f"JobVerificationService._resubmit_job resubmitted job: job_name={job.name} "
            f"instance={selected_instance_name} retry_count={request.retry_count}"
        )

        request.job_id = job.id
        request.media_service_account_name = selected_instance_name
        request.job_name = job.name
        request.job_output_asset_name = output_asset_name

        # Replace the stored Error so the next check polls the new job
        self.status_repository.create_or_update(JobOutputStatus(
            job_output_state=job.state,
            job_name=request.job_name,
            media_service_account_name=selected_instance_name,
            job_output_asset_name=output_asset_name,
            transform_name=original.transform_name,
        ))

        # retry_count was already incremented for this resubmission
        self._submit_verification_request(request)

        self.instance_health_service.record_instance_usage(selected_instance_name)

    # ========================================================================
    # Helpers
    # ========================================================================

    def _submit_verification_request(self, request: JobVerificationRequest) -> Optional[JobVerificationRequest]:
        """
        Schedule the next verification, delayed linearly by retry_count.

        Failures are retried a bounded number of times; exhaustion is
        logged and swallowed.
        """
        delay = calculate_verification_delay(self.config.verification_delay_minutes, request.retry_count)
        attempts = self.config.submission_retry_count

        for attempt in range(1, attempts + 1):
            try:
                submitted = self.verification_channel.submit(request, delay)
                logger.info(
                    f"JobVerificationService._submit_verification_request scheduled verification: "
                    f"job_name={request.job_name} retry_count={request.retry_count} "
                    f"delay_minutes={delay.total_seconds() / 60:g}"
                )
                return submitted
            except Exception as e:
                logger.warning(
                    f"JobVerificationService._submit_verification_request attempt {attempt}/{attempts} failed: "
                    f"{type(e).__name__}: {e}"
                )
                if attempt < attempts:
                    self._sleep(self.config.submission_retry_pause_seconds)

        logger.error(
            f"JobVerificationService._submit_verification_request failed to schedule verification after "
            f"{attempts} attempts: request={format_for_log(request)}"
        )
        return None

    def _delete_job(self, request: JobVerificationRequest) -> None:
        client = self.client_factory.get_client(request.media_service_account_name)
        client.delete_job(request.original_job_request.transform_name, request.job_name)
