"""
Core Data Models Package.

Contains pure data structures without business logic.
All business logic is in the core.logic package.

Exports:
    JobState, InstanceHealthState, OnErrorPolicy, JobErrorRetry: Enums
    JobOutputStatus: Status record of one job output
    OriginalJobRequest, JobVerificationRequest: Verification requests
    ProvisioningRequest, LocatorProvisioned, LocatorConflict: Provisioning
    MediaServiceInstanceHealth: Instance health record
    JobSnapshot, JobOutputSnapshot, LocatorSnapshot: Media API snapshots
"""

from .enums import (
    JobState,
    InstanceHealthState,
    OnErrorPolicy,
    JobErrorRetry
)

from .job_output_status import JobOutputStatus

from .verification import (
    OriginalJobRequest,
    JobVerificationRequest
)

from .provisioning import (
    STREAMING_LOCATOR_PREFIX,
    streaming_locator_name,
    ProvisioningRequest,
    LocatorProvisioned,
    LocatorConflict
)

from .instance_health import MediaServiceInstanceHealth

from .media import (
    JobSnapshot,
    JobOutputSnapshot,
    LocatorSnapshot
)

__all__ = [
    'JobState',
    'InstanceHealthState',
    'OnErrorPolicy',
    'JobErrorRetry',
    'JobOutputStatus',
    'OriginalJobRequest',
    'JobVerificationRequest',
    'STREAMING_LOCATOR_PREFIX',
    'streaming_locator_name',
    'ProvisioningRequest',
    'LocatorProvisioned',
    'LocatorConflict',
    'MediaServiceInstanceHealth',
    'JobSnapshot',
    'JobOutputSnapshot',
    'LocatorSnapshot',
]
