"""
Event Grid Triggers Module.

Media Services publishes job output state changes to Event Grid; this
module turns them into job output status records for the ingest path.
"""

from .handler import handle_job_output_event
from .parser import JOB_OUTPUT_EVENT_TYPES, is_job_output_event, parse_job_output_event

__all__ = [
    'handle_job_output_event',
    'JOB_OUTPUT_EVENT_TYPES',
    'is_job_output_event',
    'parse_job_output_event',
]
