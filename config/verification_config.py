"""
Job Verification Policy Configuration.

Retry budget, re-check delay and the bounded retry used when writing a
verification request back to the queue.

Exports:
    VerificationConfig: Pydantic verification policy model
"""

import os
from datetime import timedelta
from pydantic import BaseModel, Field

from .defaults import VerificationDefaults


class VerificationConfig(BaseModel):
    """
    Verification workflow policy.

    The delay before re-check N is verification_delay_minutes * N, so with
    the defaults the first re-check happens after 30 minutes and the second
    after 60 minutes.
    """

    max_retry_count: int = Field(
        default=VerificationDefaults.MAX_RETRY_COUNT,
        ge=0,
        le=10,
        description="Upper bound of retry_count for one job lineage"
    )

    verification_delay_minutes: int = Field(
        default=VerificationDefaults.VERIFICATION_DELAY_MINUTES,
        ge=0,
        description="Base delay in minutes, multiplied by retry_count"
    )

    submission_retry_count: int = Field(
        default=VerificationDefaults.SUBMISSION_RETRY_COUNT,
        ge=1,
        le=10,
        description="Attempts to enqueue a verification request before giving up"
    )

    submission_retry_pause_seconds: float = Field(
        default=VerificationDefaults.SUBMISSION_RETRY_PAUSE_SECONDS,
        ge=0,
        description="Fixed pause between enqueue attempts"
    )

    status_sync_min_age_minutes: int = Field(
        default=VerificationDefaults.STATUS_SYNC_MIN_AGE_MINUTES,
        ge=0,
        description="Status sync only polls non-terminal records older than this"
    )

    def verification_delay(self, retry_count: int) -> timedelta:
        """Linear delay for the given retry count."""
        return timedelta(minutes=self.verification_delay_minutes * retry_count)

    @classmethod
    def from_environment(cls):
        """Load from environment variables."""
        return cls(
            max_retry_count=int(os.environ.get("VERIFICATION_MAX_RETRY_COUNT", str(VerificationDefaults.MAX_RETRY_COUNT))),
            verification_delay_minutes=int(os.environ.get("VERIFICATION_DELAY_MINUTES", str(VerificationDefaults.VERIFICATION_DELAY_MINUTES))),
            submission_retry_count=int(os.environ.get("VERIFICATION_SUBMISSION_RETRY_COUNT", str(VerificationDefaults.SUBMISSION_RETRY_COUNT))),
            submission_retry_pause_seconds=float(os.environ.get("VERIFICATION_SUBMISSION_RETRY_PAUSE_SECONDS", str(VerificationDefaults.SUBMISSION_RETRY_PAUSE_SECONDS))),
            status_sync_min_age_minutes=int(os.environ.get("STATUS_SYNC_MIN_AGE_MINUTES", str(VerificationDefaults.STATUS_SYNC_MIN_AGE_MINUTES))),
        )
