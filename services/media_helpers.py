"""
Media Services Helpers.

Pure functions turning job snapshots into job output status records.

Exports:
    get_job_output_state: State and event time of one job output
    has_retriable_error: Whether a job output failed with a MayRetry hint
    derive_job_output_status: Fresh JobOutputStatus from a polled job
"""

from datetime import datetime, timezone
from typing import Tuple

from core.models import JobErrorRetry, JobOutputStatus, JobSnapshot, JobState


def get_job_output_state(job: JobSnapshot, job_output_asset_name: str) -> Tuple[JobState, datetime]:
    """
    State of the output writing to job_output_asset_name and when it was
    reached.

    The event time is the output's end time, else its start time, else the
    job's last modification, else now. A job without a matching output
    reports the job-level state.
    """
    output = job.get_output(job_output_asset_name)
    if output is None:
        return job.state, job.last_modified or datetime.now(timezone.utc)

    event_time = output.end_time or output.start_time or job.last_modified or datetime.now(timezone.utc)
    return output.state, event_time


def has_retriable_error(job: JobSnapshot, job_output_asset_name: str) -> bool:
    """True if the output is in Error and its error may be retried."""
    output = job.get_output(job_output_asset_name)
    if output is None:
        return False
    return output.state == JobState.ERROR and output.error_retry == JobErrorRetry.MAY_RETRY


def derive_job_output_status(
    job: JobSnapshot,
    media_service_account_name: str,
    job_output_asset_name: str,
    transform_name: str
) -> JobOutputStatus:
    """Status record for one output of a job polled from the given instance."""
    state, event_time = get_job_output_state(job, job_output_asset_name)
    return JobOutputStatus(
        event_time=event_time,
        job_output_state=state,
        job_name=job.name,
        media_service_account_name=media_service_account_name,
        job_output_asset_name=job_output_asset_name,
        transform_name=transform_name,
        has_retriable_error=has_retriable_error(job, job_output_asset_name),
    )
