"""
Snapshots of Media Services resources.

Plain dataclasses returned by job-control clients so services never touch
SDK types.

Exports:
    JobOutputSnapshot: One output of a job
    JobSnapshot: A job and its outputs
    LocatorSnapshot: A streaming locator
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from .enums import JobErrorRetry, JobState


@dataclass
class JobOutputSnapshot:
    asset_name: str
    state: JobState
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    error_retry: Optional[JobErrorRetry] = None


@dataclass
class JobSnapshot:
    id: str
    name: str
    state: JobState
    outputs: List[JobOutputSnapshot] = field(default_factory=list)
    last_modified: Optional[datetime] = None

    def get_output(self, asset_name: str) -> Optional[JobOutputSnapshot]:
        """Output writing to the given asset, or None."""
        for output in self.outputs:
            if output.asset_name == asset_name:
                return output
        return None


@dataclass
class LocatorSnapshot:
    name: str
    asset_name: str
    streaming_policy_name: Optional[str] = None
