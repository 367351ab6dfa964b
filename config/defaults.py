"""
Configuration Defaults - Single source of truth for all default values.

Organization:
    - AppDefaults: Application-wide settings
    - StorageDefaults: Table Storage tables
    - QueueDefaults: Service Bus queue names and retry settings
    - MediaDefaults: Media Services instance settings
    - VerificationDefaults: Retry/delay policy of the verification workflow
    - KeyVaultDefaults: Key Vault secret names

Usage:
    from config.defaults import VerificationDefaults

    # In Pydantic Field definitions:
    max_retry_count: int = Field(default=VerificationDefaults.MAX_RETRY_COUNT, ...)
"""


class AppDefaults:
    """Application-wide defaults."""

    ENVIRONMENT = "dev"
    DEBUG_MODE = False
    LOG_LEVEL = "INFO"


class StorageDefaults:
    """Azure Table Storage defaults."""

    JOB_OUTPUT_STATUS_TABLE = "JobOutputStatus"
    INSTANCE_HEALTH_TABLE = "MediaServiceInstanceHealth"


class QueueDefaults:
    """Service Bus defaults."""

    JOB_VERIFICATION_QUEUE = "job-verification-requests"
    JOB_OUTPUT_STATUS_QUEUE = "job-output-status"
    PROVISIONING_QUEUE = "stream-provisioning-requests"

    # Per-send retries inside the Service Bus repository
    RETRY_COUNT = 3

    # Scheduled/plain messages expire after this many hours
    MESSAGE_TTL_HOURS = 24


class MediaDefaults:
    """Media Services defaults."""

    STREAMING_POLICY_NAME = "Predefined_ClearStreamingOnly"
    STREAMING_LOCATOR_PREFIX = "streaming-"
    PROVISION_LOCATORS_LOCALLY = False


class VerificationDefaults:
    """
    Retry and delay policy for job verification.

    Delay before re-check N is VERIFICATION_DELAY_MINUTES * N (linear).
    """

    MAX_RETRY_COUNT = 2
    VERIFICATION_DELAY_MINUTES = 30

    # Bounded retry around the re-schedule write
    SUBMISSION_RETRY_COUNT = 3
    SUBMISSION_RETRY_PAUSE_SECONDS = 1.0

    # Status sync sweep only looks at records older than this
    STATUS_SYNC_MIN_AGE_MINUTES = 60


class KeyVaultDefaults:
    """Key Vault secret names."""

    MEDIA_SERVICE_INSTANCES_SECRET = "media-service-instances"
