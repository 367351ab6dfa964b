"""
Service Bus Handlers Module.

Provides handlers for the Service Bus queue triggers:
- handle_verification_message: job-verification-requests queue
- handle_job_output_status_message: job-output-status queue

Both handlers log with a per-invocation correlation id and re-raise on
failure so Service Bus redelivers the message.
"""

from .verification_handler import handle_verification_message
from .status_handler import handle_job_output_status_message

__all__ = [
    'handle_verification_message',
    'handle_job_output_status_message',
]
