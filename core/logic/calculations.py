"""
Retry Policy Calculations.

Pure functions used by the verification orchestrator. No I/O.

Exports:
    has_retry_budget: Whether another resubmission/re-check is allowed
    calculate_verification_delay: Linear delay before the next re-check
    all_outputs_continue_job: Whether a transform never needs resubmission
"""

from datetime import timedelta
from typing import Iterable

from ..models.enums import OnErrorPolicy


def has_retry_budget(retry_count: int, max_retry_count: int) -> bool:
    """True while retry_count is strictly below the maximum."""
    return retry_count < max_retry_count


def calculate_verification_delay(base_delay_minutes: int, retry_count: int) -> timedelta:
    """
    Delay before the next re-check.

    Linear in retry_count: base 30 gives 30 minutes for the first re-check
    and 60 for the second.
    """
    if retry_count < 0:
        raise ValueError(f"retry_count must be >= 0, got {retry_count}")
    return timedelta(minutes=base_delay_minutes * retry_count)


def all_outputs_continue_job(policies: Iterable[OnErrorPolicy]) -> bool:
    """
    True if every transform output continues on error.

    Such a transform reports failed outputs without failing the job, so a
    resubmission would not change anything. An empty policy list is False.
    """
    policies = list(policies)
    if not policies:
        return False
    return all(OnErrorPolicy(p) == OnErrorPolicy.CONTINUE_JOB for p in policies)
