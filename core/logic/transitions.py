"""
State Logic for Media Job Outputs.

Contains business rules about job states.
Separated from data models for clean architecture.

Exports:
    get_job_terminal_states: Get terminal job states
    get_job_active_states: Get non-terminal job states
    is_job_state_terminal: Check if a job state is terminal

Dependencies:
    core.models.enums: JobState
"""

from typing import List, Union

from ..models.enums import JobState


def get_job_terminal_states() -> List[JobState]:
    """States a job output never leaves."""
    return [JobState.FINISHED, JobState.ERROR, JobState.CANCELED]


def get_job_active_states() -> List[JobState]:
    """States in which a job output may still change."""
    return [
        JobState.QUEUED,
        JobState.SCHEDULED,
        JobState.PROCESSING,
        JobState.CANCELING
    ]


def is_job_state_terminal(state: Union[JobState, str]) -> bool:
    """
    Check if a job state is terminal.

    Accepts the enum or its API string value.
    """
    if isinstance(state, str) and not isinstance(state, JobState):
        state = JobState(state)
    return state in get_job_terminal_states()

