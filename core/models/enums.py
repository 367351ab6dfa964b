"""
Pure Enumeration Types for Core Models.

Values match the strings used by the Media Services management API so they
can be compared with API responses directly.

Exports:
    JobState: Job (and job output) state enumeration
    InstanceHealthState: Media service instance health
    OnErrorPolicy: Transform output on-error behaviour
    JobErrorRetry: Whether a job output error may be retried
"""

from enum import Enum


class JobState(str, Enum):
    """
    Valid states of a media job output.

    State transitions:
    - Queued -> Scheduled -> Processing -> Finished (normal flow)
    - Queued/Scheduled/Processing -> Error
    - any non-terminal -> Canceling -> Canceled
    """

    QUEUED = "Queued"
    SCHEDULED = "Scheduled"
    PROCESSING = "Processing"
    FINISHED = "Finished"
    ERROR = "Error"
    CANCELING = "Canceling"
    CANCELED = "Canceled"


class InstanceHealthState(str, Enum):
    """Health of a media service instance."""

    HEALTHY = "Healthy"
    DEGRADED = "Degraded"
    UNHEALTHY = "Unhealthy"


class OnErrorPolicy(str, Enum):
    """
    What a transform does when one of its outputs fails.

    A transform whose outputs all use CONTINUE_JOB never resubmits.
    """

    STOP_PROCESSING_JOB = "StopProcessingJob"
    CONTINUE_JOB = "ContinueJob"


class JobErrorRetry(str, Enum):
    """Retry hint attached to a job output error."""

    MAY_RETRY = "MayRetry"
    DO_NOT_RETRY = "DoNotRetry"
