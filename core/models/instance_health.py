"""
Media Service Instance Health Model.

Exports:
    MediaServiceInstanceHealth: Health and usage record of one instance
"""

from datetime import datetime, timezone
from typing import Optional
from pydantic import BaseModel, Field

from .enums import InstanceHealthState


class MediaServiceInstanceHealth(BaseModel):
    """
    Health and usage of one media service instance.

    Only enabled instances in Healthy (or, as a fallback, Degraded) state
    are candidates for resubmission.
    """

    media_service_account_name: str = Field(..., min_length=1)
    health_state: InstanceHealthState = Field(default=InstanceHealthState.HEALTHY)
    last_updated: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    last_used: Optional[datetime] = Field(default=None, description="Last time a job was submitted here")
    usage_count: int = Field(default=0, ge=0)
    is_enabled: bool = Field(default=True)
