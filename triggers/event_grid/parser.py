"""
Event Grid Job Output Event Parser.

Turns Media Services job output events into JobOutputStatus records.

Handled event types:
    Microsoft.Media.JobOutputStateChange
    Microsoft.Media.JobOutputScheduled / Processing / Canceling /
        Finished / Canceled / Errored

    subject: transforms/<transform name>/jobs/<job name>
    topic:   /subscriptions/.../providers/Microsoft.Media/mediaservices/<account>
    data:    {"previousState": "...", "output": {"assetName": "...", "state": "...",
              "error": {"retry": "MayRetry" | "DoNotRetry", ...} | null}}

Exports:
    JOB_OUTPUT_EVENT_TYPES: Event types that carry a job output state
    is_job_output_event: Whether an event type is handled
    parse_job_output_event: Build a JobOutputStatus from event fields
"""

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import ValidationError

from core.models import JobErrorRetry, JobOutputStatus, JobState
from exceptions import ContractViolationError

JOB_OUTPUT_EVENT_TYPES = frozenset({
    "Microsoft.Media.JobOutputStateChange",
    "Microsoft.Media.JobOutputScheduled",
    "Microsoft.Media.JobOutputProcessing",
    "Microsoft.Media.JobOutputCanceling",
    "Microsoft.Media.JobOutputFinished",
    "Microsoft.Media.JobOutputCanceled",
    "Microsoft.Media.JobOutputErrored",
})


def is_job_output_event(event_type: str) -> bool:
    return event_type in JOB_OUTPUT_EVENT_TYPES


def _parse_subject(subject: str):
    parts = (subject or "").strip("/").split("/")
    if len(parts) != 4 or parts[0] != "transforms" or parts[2] != "jobs" or not parts[1] or not parts[3]:
        raise ContractViolationError(f"Unexpected job event subject: {subject!r}")
    return parts[1], parts[3]


def _parse_account_name(topic: str) -> str:
    parts = (topic or "").strip("/").split("/")
    lowered = [p.lower() for p in parts]
    if "mediaservices" not in lowered:
        raise ContractViolationError(f"Unexpected job event topic: {topic!r}")
    index = lowered.index("mediaservices")
    if index + 1 >= len(parts) or not parts[index + 1]:
        raise ContractViolationError(f"Job event topic has no account name: {topic!r}")
    return parts[index + 1]


def parse_job_output_event(
    event_type: str,
    subject: str,
    topic: str,
    data: Dict[str, Any],
    event_time: Optional[datetime] = None
) -> Optional[JobOutputStatus]:
    """
    Build a status record from a job output event.

    Returns:
        JobOutputStatus, or None for event types that are not handled

    Raises:
        ContractViolationError: If a handled event is missing required fields
    """
    if not is_job_output_event(event_type):
        return None

    transform_name, job_name = _parse_subject(subject)
    media_service_account_name = _parse_account_name(topic)

    output = (data or {}).get("output")
    if not isinstance(output, dict):
        raise ContractViolationError(f"Job event for {job_name} has no output object")

    asset_name = output.get("assetName")
    state = output.get("state")
    if not asset_name or not state:
        raise ContractViolationError(f"Job event for {job_name} is missing output assetName or state")

    error = output.get("error") or {}
    retriable = error.get("retry") == JobErrorRetry.MAY_RETRY.value

    fields = {
        "job_output_state": state,
        "job_name": job_name,
        "media_service_account_name": media_service_account_name,
        "job_output_asset_name": asset_name,
        "transform_name": transform_name,
        "has_retriable_error": retriable,
    }
    if event_time is not None:
        fields["event_time"] = event_time

    try:
        return JobOutputStatus(**fields)
    except ValidationError as e:
        raise ContractViolationError(f"Invalid job event for {job_name}: {e}")
