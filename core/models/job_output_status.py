"""
Job Output Status Model.

One current record per (job_name, job_output_asset_name). Written by the
ingest path and by the verification orchestrator after an authoritative
poll; never deleted here.

Exports:
    JobOutputStatus: Status record of one job output
"""

import uuid
from datetime import datetime, timezone
from pydantic import BaseModel, Field, field_validator

from .enums import JobState


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class JobOutputStatus(BaseModel):
    """
    Last known state of one job output on one media service instance.

    media_service_account_name is the instance that owns the job at the
    time the state was observed.
    """

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), description="Record id")
    event_time: datetime = Field(default_factory=_utcnow, description="When the state was observed (UTC)")
    job_output_state: JobState = Field(..., description="State of the job output")
    job_name: str = Field(..., min_length=1, description="Job name (stable across resubmission)")
    media_service_account_name: str = Field(..., min_length=1, description="Owning media service instance")
    job_output_asset_name: str = Field(..., min_length=1, description="Output asset name")
    transform_name: str = Field(default="", description="Transform the job was created under")
    has_retriable_error: bool = Field(default=False, description="Output error carries a MayRetry hint")

    @field_validator("event_time")
    @classmethod
    def _ensure_utc(cls, v: datetime) -> datetime:
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v.astimezone(timezone.utc)

