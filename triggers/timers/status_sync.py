"""
Job Output Status Sync Timer Handler.

Recovers job output states whose notifications were lost by re-polling
stale non-terminal records.
"""

import uuid
from typing import Any, Dict, Optional

import azure.functions as func

from services.job_output_status_sync_service import JobOutputStatusSyncService
from util_logger import LoggerFactory, ComponentType, log_exceptions

logger = LoggerFactory.create_logger(ComponentType.TRIGGER, "StatusSyncTimer")


@log_exceptions(ComponentType.TRIGGER, "StatusSyncTimer")
def status_sync_handler(
    timer: func.TimerRequest,
    service: Optional[JobOutputStatusSyncService] = None
) -> Dict[str, Any]:
    """Run one status sync sweep."""
    correlation_id = str(uuid.uuid4())[:8]

    if timer.past_due:
        logger.warning(f"[{correlation_id}] Status sync timer is past due")

    if service is None:
        from startup import get_service_bundle
        service = get_service_bundle().status_sync_service

    summary = service.sync_job_output_status()
    logger.info(f"[{correlation_id}] Status sync completed: {summary}")
    return summary
