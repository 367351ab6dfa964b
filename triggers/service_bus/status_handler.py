"""
Job Output Status Queue Message Handler Module.

Handles messages from the job-output-status Service Bus queue. Each message
is one JobOutputStatus record that goes through the ingest path.

Usage:
    from triggers.service_bus import handle_job_output_status_message

    @app.service_bus_queue_trigger(
        arg_name="msg",
        queue_name="job-output-status",
        connection="ServiceBusConnection"
    )
    def process_job_output_status(msg: func.ServiceBusMessage) -> None:
        handle_job_output_status_message(msg)
"""

import uuid
from typing import Optional

import azure.functions as func

from core.models import JobOutputStatus
from services.job_output_status_service import JobOutputStatusService
from util_logger import LoggerFactory, ComponentType

from .error_handler import classify_error, extract_job_name_from_raw_message

logger = LoggerFactory.create_logger(ComponentType.TRIGGER, "JobOutputStatusHandler")


def handle_job_output_status_message(
    msg: func.ServiceBusMessage,
    service: Optional[JobOutputStatusService] = None
) -> JobOutputStatus:
    """
    Process one job output status record.

    Args:
        msg: Service Bus message
        service: Ingest service (from the startup bundle if omitted)

    Returns:
        The stored status
    """
    correlation_id = str(uuid.uuid4())[:8]
    message_body = ""

    try:
        message_body = msg.get_body().decode('utf-8')
        status = JobOutputStatus.model_validate_json(message_body)
        logger.info(
            f"[{correlation_id}] Job output status received: job_name={status.job_name} "
            f"state={status.job_output_state.value}"
        )

        if service is None:
            from startup import get_service_bundle
            service = get_service_bundle().job_output_status_service

        return service.process_job_output_status(status)

    except Exception as e:
        job_name = extract_job_name_from_raw_message(message_body, correlation_id)
        logger.error(
            f"[{correlation_id}] Job output status processing failed ({classify_error(e)}): "
            f"job_name={job_name} {type(e).__name__}: {e}",
            exc_info=True
        )
        raise
