"""
Repository Abstract Base Classes - Single Point of Truth.

Enforces exact method signatures across all repository, channel and
job-control implementations so services can run against Azure or against
in-memory fakes without change.

Exports:
    IQueueRepository: Service Bus send interface
    IJobOutputStatusRepository: Job output status store
    IInstanceHealthRepository: Media service instance health store
    IJobVerificationRequestChannel: Delayed verification request channel
    IProvisioningRequestChannel: Provisioning request channel
    IJobControlClient: Media Services job-control capability
    IJobControlClientFactory: Job-control client lookup by instance name
    ParamNames: Canonical parameter name constants
"""

from abc import ABC, abstractmethod
from datetime import datetime, timedelta
from typing import Any, Dict, Final, List, Optional
from pydantic import BaseModel

from core.models import (
    JobOutputStatus,
    JobSnapshot,
    JobVerificationRequest,
    LocatorSnapshot,
    MediaServiceInstanceHealth,
    OnErrorPolicy,
    ProvisioningRequest,
)


class ParamNames:
    """
    Parameter and storage key names used across the system.
    """

    # Table Storage keys of a job output status record
    PARTITION_KEY: Final[str] = "PartitionKey"   # job_name
    ROW_KEY: Final[str] = "RowKey"               # job_output_asset_name

    # Message body fields
    JOB_NAME: Final[str] = "job_name"
    JOB_OUTPUT_ASSET_NAME: Final[str] = "job_output_asset_name"
    MEDIA_SERVICE_ACCOUNT_NAME: Final[str] = "media_service_account_name"
    RETRY_COUNT: Final[str] = "retry_count"


class IQueueRepository(ABC):
    """
    Queue repository interface.

    Implementations handle authentication, sender reuse, per-send retries
    and message encoding.
    """

    @abstractmethod
    def send_message(self, queue_name: str, message: BaseModel) -> str:
        """
        Send a message to specified queue.

        Args:
            queue_name: Target queue name
            message: Pydantic model to send

        Returns:
            Message ID

        Raises:
            ServiceBusError: If send fails after retries
        """
        pass

    @abstractmethod
    def send_message_with_delay(self, queue_name: str, message: BaseModel, delay: timedelta) -> str:
        """
        Send a message that becomes visible after the given delay.

        Args:
            queue_name: Target queue name
            message: Pydantic model to send
            delay: How long the broker holds the message (zero = immediate)

        Returns:
            Message ID
        """
        pass


class IJobOutputStatusRepository(ABC):
    """
    Store of job output status records.

    Exactly one current record per (job_name, job_output_asset_name);
    create_or_update replaces it.
    """

    @abstractmethod
    def get_latest(self, job_name: str, job_output_asset_name: str) -> Optional[JobOutputStatus]:
        """Current record for the pair, or None"""
        pass

    @abstractmethod
    def create_or_update(self, status: JobOutputStatus) -> JobOutputStatus:
        """Upsert keyed by (job_name, job_output_asset_name), returns the stored record"""
        pass

    @abstractmethod
    def list_non_terminal(self, older_than: datetime) -> List[JobOutputStatus]:
        """Records in a non-terminal state whose event_time is before older_than"""
        pass


class IInstanceHealthRepository(ABC):
    """
    Store of media service instance health records, keyed by account name.
    """

    @abstractmethod
    def get(self, media_service_account_name: str) -> Optional[MediaServiceInstanceHealth]:
        pass

    @abstractmethod
    def list(self) -> List[MediaServiceInstanceHealth]:
        pass

    @abstractmethod
    def create_or_update(self, record: MediaServiceInstanceHealth) -> MediaServiceInstanceHealth:
        pass


class IJobVerificationRequestChannel(ABC):
    """
    Delivers a verification request back to the orchestrator after a delay.

    Delivery is at-least-once; a duplicate delivery is tolerated.
    """

    @abstractmethod
    def submit(self, request: JobVerificationRequest, verification_delay: timedelta) -> JobVerificationRequest:
        """Enqueue request, visible after verification_delay"""
        pass


class IProvisioningRequestChannel(ABC):
    """
    Hands a processed asset over to the provisioning pipeline.
    """

    @abstractmethod
    def submit(self, request: ProvisioningRequest) -> ProvisioningRequest:
        pass


class IJobControlClient(ABC):
    """
    Job-control capability of ONE media service instance.

    Transport, authentication and account coordinates are the
    implementation's concern; callers only pass resource names.
    "Not found" on a read is reported as None, every other failure raises
    JobControlError.
    """

    @property
    @abstractmethod
    def account_name(self) -> str:
        """Media service account this client talks to"""
        pass

    @abstractmethod
    def get_job(self, transform_name: str, job_name: str) -> Optional[JobSnapshot]:
        pass

    @abstractmethod
    def delete_job(self, transform_name: str, job_name: str) -> None:
        """Delete the job; deleting a missing job is not an error"""
        pass

    @abstractmethod
    def get_transform_output_policies(self, transform_name: str) -> List[OnErrorPolicy]:
        """on_error policy of every output of the transform"""
        pass

    @abstractmethod
    def create_or_update_asset(self, asset_name: str) -> str:
        """Create (or keep) an empty asset, returns its name"""
        pass

    @abstractmethod
    def create_job(
        self,
        transform_name: str,
        job_name: str,
        job_inputs: Dict[str, Any],
        output_asset_names: List[str]
    ) -> JobSnapshot:
        """
        Create a job.

        Args:
            transform_name: Transform to run
            job_name: Job name
            job_inputs: REST-shaped job input
            output_asset_names: One job output per asset name
        """
        pass

    @abstractmethod
    def get_streaming_locator(self, locator_name: str) -> Optional[LocatorSnapshot]:
        pass

    @abstractmethod
    def create_streaming_locator(
        self,
        locator_name: str,
        asset_name: str,
        streaming_policy_name: str
    ) -> LocatorSnapshot:
        pass


class IJobControlClientFactory(ABC):
    """
    Resolves the job-control client of a media service instance by name.
    """

    @property
    @abstractmethod
    def instance_names(self) -> List[str]:
        """Configured instance names"""
        pass

    @abstractmethod
    def get_client(self, media_service_account_name: str) -> IJobControlClient:
        """
        Raises:
            ConfigurationError: If the instance is not configured
        """
        pass
