"""
Azure Service Bus Queue Configuration.

Provides configuration for:
    - Service Bus connection settings
    - Queue names (job verification, job output status, stream provisioning)
    - Retry configuration

Queue Architecture:
    - job-verification-requests: delayed re-checks (scheduled enqueue time)
    - job-output-status: job output status records for the ingest path
    - stream-provisioning-requests: produced here, consumed by the
      downstream provisioning pipeline

Exports:
    QueueConfig: Pydantic queue configuration model
    QueueNames: Queue name constants
"""

import os
from typing import Optional
from pydantic import BaseModel, Field

from .defaults import QueueDefaults


# ============================================================================
# QUEUE NAMES
# ============================================================================

class QueueNames:
    """Queue name constants for easy access."""
    JOB_VERIFICATION = QueueDefaults.JOB_VERIFICATION_QUEUE
    JOB_OUTPUT_STATUS = QueueDefaults.JOB_OUTPUT_STATUS_QUEUE
    PROVISIONING = QueueDefaults.PROVISIONING_QUEUE


# ============================================================================
# QUEUE CONFIGURATION
# ============================================================================

class QueueConfig(BaseModel):
    """
    Azure Service Bus queue configuration.

    Either connection_string (local development) or namespace (managed
    identity) must be set before a Service Bus repository is created.
    """

    connection_string: Optional[str] = Field(
        default=None,
        repr=False,
        description="Service Bus connection string (from ServiceBusConnection env var)"
    )

    namespace: Optional[str] = Field(
        default=None,
        description="Fully qualified Service Bus namespace for managed identity auth"
    )

    job_verification_queue: str = Field(
        default=QueueDefaults.JOB_VERIFICATION_QUEUE,
        description="Queue receiving delayed job verification requests"
    )

    job_output_status_queue: str = Field(
        default=QueueDefaults.JOB_OUTPUT_STATUS_QUEUE,
        description="Queue receiving job output status records"
    )

    provisioning_queue: str = Field(
        default=QueueDefaults.PROVISIONING_QUEUE,
        description="Queue receiving stream provisioning requests"
    )

    retry_count: int = Field(
        default=QueueDefaults.RETRY_COUNT,
        ge=1,
        le=10,
        description="Number of send attempts for Service Bus operations"
    )

    message_ttl_hours: int = Field(
        default=QueueDefaults.MESSAGE_TTL_HOURS,
        ge=1,
        le=24 * 14,
        description="Time to live for messages sent by this app"
    )

    @classmethod
    def from_environment(cls):
        """Load from environment variables."""
        return cls(
            connection_string=os.environ.get("ServiceBusConnection"),
            namespace=os.environ.get("SERVICE_BUS_NAMESPACE") or os.environ.get("ServiceBusConnection__fullyQualifiedNamespace"),
            job_verification_queue=os.environ.get("SERVICE_BUS_JOB_VERIFICATION_QUEUE", QueueDefaults.JOB_VERIFICATION_QUEUE),
            job_output_status_queue=os.environ.get("SERVICE_BUS_JOB_OUTPUT_STATUS_QUEUE", QueueDefaults.JOB_OUTPUT_STATUS_QUEUE),
            provisioning_queue=os.environ.get("SERVICE_BUS_PROVISIONING_QUEUE", QueueDefaults.PROVISIONING_QUEUE),
            retry_count=int(os.environ.get("SERVICE_BUS_RETRY_COUNT", str(QueueDefaults.RETRY_COUNT))),
            message_ttl_hours=int(os.environ.get("SERVICE_BUS_MESSAGE_TTL_HOURS", str(QueueDefaults.MESSAGE_TTL_HOURS))),
        )
