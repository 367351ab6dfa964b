"""
Core Business Logic Package.

Contains business logic that operates on pure data models.
Separated from models to maintain clean architecture.

Exports:
    State logic: is_job_state_terminal, get_job_terminal_states,
        get_job_active_states
    Calculations: has_retry_budget, calculate_verification_delay,
        all_outputs_continue_job
"""

# State logic
from .transitions import (
    get_job_terminal_states,
    get_job_active_states,
    is_job_state_terminal
)

# Calculations
from .calculations import (
    has_retry_budget,
    calculate_verification_delay,
    all_outputs_continue_job
)

__all__ = [
    # State logic
    'get_job_terminal_states',
    'get_job_active_states',
    'is_job_state_terminal',

    # Calculations
    'has_retry_budget',
    'calculate_verification_delay',
    'all_outputs_continue_job',
]
