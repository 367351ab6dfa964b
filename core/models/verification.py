"""
Job Verification Request Models.

Exports:
    OriginalJobRequest: Descriptor of the original job submission
    JobVerificationRequest: Delayed re-check of one job output
"""

import uuid
from typing import Any, Dict
from pydantic import BaseModel, Field


class OriginalJobRequest(BaseModel):
    """
    What was submitted the first time.

    Enough to recreate the job on another instance: the transform, the
    REST-shaped job input and the output asset base name.
    """

    transform_name: str = Field(..., min_length=1, description="Transform name")
    job_inputs: Dict[str, Any] = Field(
        default_factory=dict,
        description="Job input in REST shape, e.g. {'@odata.type': '#Microsoft.Media.JobInputHttp', ...}"
    )
    output_asset_name: str = Field(..., min_length=1, description="Output asset base name")


class JobVerificationRequest(BaseModel):
    """
    Request to verify one job output at a later time.

    retry_count never decreases within a lineage and never exceeds the
    configured maximum.
    """

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), description="Request id")
    job_id: str = Field(default="", description="Job resource id on the owning instance")
    job_name: str = Field(..., min_length=1, description="Job name")
    media_service_account_name: str = Field(..., min_length=1, description="Instance that owns the job")
    job_output_asset_name: str = Field(..., min_length=1, description="Output asset to verify")
    original_job_request: OriginalJobRequest
    retry_count: int = Field(default=0, ge=0, description="Resubmissions and re-checks so far")
