"""
Azure Media Services Job-Control Client.

Wraps the Media Services management SDK for one media service account and
returns plain snapshots (core.models.media) so services never see SDK types.

Key Features:
    - Read, create and delete jobs under a transform
    - Read transform output on-error policies
    - Create output assets and streaming locators
    - "Not found" on reads maps to None, other failures to JobControlError

Exports:
    MediaServicesJobControlClient: IJobControlClient for one account
    MediaServiceClientFactory: Resolves a client by account name
"""

import threading
from typing import Any, Dict, List, Optional

from azure.core.credentials import TokenCredential
from azure.core.exceptions import ResourceNotFoundError
from azure.identity import DefaultAzureCredential
from azure.mgmt.media import AzureMediaServices
from azure.mgmt.media.models import Asset, Job, JobInput, JobOutputAsset, StreamingLocator

from config import MediaConfig, MediaInstanceConfig
from core.models import (
    JobErrorRetry,
    JobOutputSnapshot,
    JobSnapshot,
    JobState,
    LocatorSnapshot,
    OnErrorPolicy,
)
from exceptions import ContractViolationError, JobControlError
from infrastructure.interface_repository import IJobControlClient, IJobControlClientFactory
from util_logger import LoggerFactory, ComponentType

logger = LoggerFactory.create_logger(ComponentType.ADAPTER, "MediaServicesJobControlClient")


def _to_job_snapshot(job) -> JobSnapshot:
    """Convert an SDK Job into a JobSnapshot."""
    outputs = []
    for output in job.outputs or []:
        error_retry = None
        if getattr(output, 'error', None) is not None and output.error.retry:
            error_retry = JobErrorRetry(output.error.retry)
        outputs.append(JobOutputSnapshot(
            asset_name=getattr(output, 'asset_name', None) or "",
            state=JobState(output.state or JobState.QUEUED.value),
            start_time=output.start_time,
            end_time=output.end_time,
            error_retry=error_retry,
        ))

    return JobSnapshot(
        id=job.id or "",
        name=job.name,
        state=JobState(job.state or JobState.QUEUED.value),
        outputs=outputs,
        last_modified=job.last_modified,
    )


def _to_job_input(job_inputs: Dict[str, Any]) -> JobInput:
    """Build the SDK job input from its REST-shaped JSON."""
    if not job_inputs or '@odata.type' not in job_inputs:
        raise ContractViolationError(
            f"job_inputs must be a REST-shaped job input with '@odata.type', got keys {sorted(job_inputs or {})}"
        )
    return JobInput.deserialize(job_inputs)


class MediaServicesJobControlClient(IJobControlClient):
    """
    Job-control client for one media service account.

    Example:
        factory = MediaServiceClientFactory(config.media)
        client = factory.get_client("amsinstance1")
        job = client.get_job("AdaptiveStreamingTransform", "job-123")
    """

    def __init__(self, instance: MediaInstanceConfig, client: AzureMediaServices):
        self.instance = instance
        self.client = client

    @property
    def account_name(self) -> str:
        return self.instance.account_name

    @property
    def _scope(self) -> Dict[str, str]:
        return {
            'resource_group_name': self.instance.resource_group,
            'account_name': self.instance.account_name,
        }

    def _fail(self, operation: str, target: str, error: Exception) -> JobControlError:
        logger.error(
            f"Media Services {operation} failed for {target} on {self.account_name}: {error}",
            extra={'custom_dimensions': {
                'media_service_account_name': self.account_name,
                'operation': operation,
                'error_type': type(error).__name__,
            }}
        )
        return JobControlError(f"{operation} failed for {target} on {self.account_name}: {error}")

    # ========================================================================
    # Jobs
    # ========================================================================

    def get_job(self, transform_name: str, job_name: str) -> Optional[JobSnapshot]:
        try:
            job = self.client.jobs.get(transform_name=transform_name, job_name=job_name, **self._scope)
        except ResourceNotFoundError:
            logger.info(f"Job not found: transform={transform_name} job_name={job_name} instance={self.account_name}")
            return None
        except Exception as e:
            raise self._fail("jobs.get", job_name, e)

        if job is None:
            return None
        return _to_job_snapshot(job)

    def delete_job(self, transform_name: str, job_name: str) -> None:
        try:
            self.client.jobs.delete(transform_name=transform_name, job_name=job_name, **self._scope)
            logger.info(f"Deleted job: transform={transform_name} job_name={job_name} instance={self.account_name}")
        except ResourceNotFoundError:
            logger.info(f"Job already gone: transform={transform_name} job_name={job_name} instance={self.account_name}")
        except Exception as e:
            raise self._fail("jobs.delete", job_name, e)

    def create_job(
        self,
        transform_name: str,
        job_name: str,
        job_inputs: Dict[str, Any],
        output_asset_names: List[str]
    ) -> JobSnapshot:
        job = Job(
            input=_to_job_input(job_inputs),
            outputs=[JobOutputAsset(asset_name=name) for name in output_asset_names],
        )
        try:
            created = self.client.jobs.create(
                transform_name=transform_name,
                job_name=job_name,
                parameters=job,
                **self._scope
            )
        except Exception as e:
            raise self._fail("jobs.create", job_name, e)

        logger.info(
            f"Created job: transform={transform_name} job_name={job_name} "
            f"outputs={output_asset_names} instance={self.account_name}"
        )
        return _to_job_snapshot(created)

    # ========================================================================
    # Transforms and assets
    # ========================================================================

    def get_transform_output_policies(self, transform_name: str) -> List[OnErrorPolicy]:
        try:
            transform = self.client.transforms.get(transform_name=transform_name, **self._scope)
        except Exception as e:
            raise self._fail("transforms.get", transform_name, e)

        if transform is None:
            raise JobControlError(f"Transform {transform_name} not found on {self.account_name}")

        return [
            OnErrorPolicy(output.on_error or OnErrorPolicy.STOP_PROCESSING_JOB.value)
            for output in transform.outputs or []
        ]

    def create_or_update_asset(self, asset_name: str) -> str:
        try:
            asset = self.client.assets.create_or_update(asset_name=asset_name, parameters=Asset(), **self._scope)
        except Exception as e:
            raise self._fail("assets.create_or_update", asset_name, e)
        return asset.name

    # ========================================================================
    # Streaming locators
    # ========================================================================

    def get_streaming_locator(self, locator_name: str) -> Optional[LocatorSnapshot]:
        try:
            locator = self.client.streaming_locators.get(streaming_locator_name=locator_name, **self._scope)
        except ResourceNotFoundError:
            return None
        except Exception as e:
            raise self._fail("streaming_locators.get", locator_name, e)

        if locator is None:
            return None
        return LocatorSnapshot(
            name=locator.name,
            asset_name=locator.asset_name,
            streaming_policy_name=locator.streaming_policy_name,
        )

    def create_streaming_locator(
        self,
        locator_name: str,
        asset_name: str,
        streaming_policy_name: str
    ) -> LocatorSnapshot:
        try:
            locator = self.client.streaming_locators.create(
                streaming_locator_name=locator_name,
                parameters=StreamingLocator(asset_name=asset_name, streaming_policy_name=streaming_policy_name),
                **self._scope
            )
        except Exception as e:
            raise self._fail("streaming_locators.create", locator_name, e)

        logger.info(f"Created streaming locator: {locator_name} -> {asset_name} on {self.account_name}")
        return LocatorSnapshot(
            name=locator.name,
            asset_name=locator.asset_name,
            streaming_policy_name=locator.streaming_policy_name,
        )


class MediaServiceClientFactory(IJobControlClientFactory):
    """
    Resolves a job-control client by media service account name.

    One SDK client per subscription is created lazily and reused; the
    factory is built once by the startup bundle.
    """

    def __init__(self, media_config: MediaConfig, credential: Optional[TokenCredential] = None):
        self.media_config = media_config
        self._credential = credential
        self._sdk_clients: Dict[str, AzureMediaServices] = {}
        self._lock = threading.Lock()

    @property
    def instance_names(self) -> List[str]:
        return self.media_config.instance_names

    def _get_sdk_client(self, subscription_id: str) -> AzureMediaServices:
        with self._lock:
            if subscription_id not in self._sdk_clients:
                if self._credential is None:
                    logger.info("Creating DefaultAzureCredential for Media Services")
                    self._credential = DefaultAzureCredential()
                self._sdk_clients[subscription_id] = AzureMediaServices(
                    credential=self._credential,
                    subscription_id=subscription_id
                )
            return self._sdk_clients[subscription_id]

    def get_client(self, media_service_account_name: str) -> IJobControlClient:
        """
        Client for the named instance.

        Raises:
            ConfigurationError: If the instance is not configured
        """
        instance = self.media_config.get_instance(media_service_account_name)
        return MediaServicesJobControlClient(instance, self._get_sdk_client(instance.subscription_id))
