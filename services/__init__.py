"""
Service Layer - Business Logic.

Services receive their collaborators through their constructors and hold
no process-wide state. Triggers obtain ready-built services from the
startup bundle (startup/service_bundle.py).

Services:
    JobVerificationService: Verification orchestrator (stuck / failed / finished)
    JobOutputStatusService: Ingest path for job output status records
    StreamingProvisioningService: Idempotent streaming locator creation
    InstanceHealthService: Media service instance selection
    JobOutputStatusSyncService: Timer-driven recovery of lost notifications
"""

from .instance_health_service import InstanceHealthService
from .job_output_status_service import JobOutputStatusService
from .job_output_status_sync_service import JobOutputStatusSyncService, StatusSyncResult
from .job_verification_service import JobVerificationService
from .streaming_provisioning_service import StreamingProvisioningService

__all__ = [
    'InstanceHealthService',
    'JobOutputStatusService',
    'JobOutputStatusSyncService',
    'StatusSyncResult',
    'JobVerificationService',
    'StreamingProvisioningService',
]
