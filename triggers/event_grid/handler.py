"""
Event Grid Trigger Handler.

Receives Media Services job output events and feeds them through the
ingest path. Events of other types are logged and ignored.

Usage:
    from triggers.event_grid import handle_job_output_event

    @app.event_grid_trigger(arg_name="event")
    def job_output_event(event: func.EventGridEvent) -> None:
        handle_job_output_event(event)
"""

import uuid
from typing import Optional

import azure.functions as func

from core.models import JobOutputStatus
from services.job_output_status_service import JobOutputStatusService
from util_logger import LoggerFactory, ComponentType

from .parser import parse_job_output_event

logger = LoggerFactory.create_logger(ComponentType.TRIGGER, "EventGridHandler")


def handle_job_output_event(
    event: func.EventGridEvent,
    service: Optional[JobOutputStatusService] = None
) -> Optional[JobOutputStatus]:
    """
    Process one Event Grid event.

    Returns:
        The stored status, or None if the event type is ignored
    """
    correlation_id = str(uuid.uuid4())[:8]
    logger.info(f"[{correlation_id}] Event Grid event received: id={event.id} type={event.event_type} subject={event.subject}")

    status = parse_job_output_event(
        event_type=event.event_type,
        subject=event.subject,
        topic=event.topic,
        data=event.get_json(),
        event_time=event.event_time,
    )

    if status is None:
        logger.info(f"[{correlation_id}] Ignoring event type {event.event_type}")
        return None

    if service is None:
        from startup import get_service_bundle
        service = get_service_bundle().job_output_status_service

    try:
        return service.process_job_output_status(status)
    except Exception as e:
        logger.error(
            f"[{correlation_id}] Job output event processing failed: job_name={status.job_name} "
            f"{type(e).__name__}: {e}",
            exc_info=True
        )
        raise
