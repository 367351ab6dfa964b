"""
Job Verification Queue Message Handler Module.

Handles messages from the job-verification-requests Service Bus queue.
Each message is one JobVerificationRequest whose scheduled enqueue time has
passed.

Failures are logged and re-raised: the Functions host abandons the message
and Service Bus redelivers it (dead-lettering after the queue's max
delivery count).

Usage:
    from triggers.service_bus import handle_verification_message

    @app.service_bus_queue_trigger(
        arg_name="msg",
        queue_name="job-verification-requests",
        connection="ServiceBusConnection"
    )
    def process_job_verification_request(msg: func.ServiceBusMessage) -> None:
        handle_verification_message(msg)
"""

import time
import uuid
from typing import Optional

import azure.functions as func

from core.models import JobVerificationRequest
from services.job_verification_service import JobVerificationService
from util_logger import LoggerFactory, ComponentType, LogContext

from .error_handler import classify_error, extract_job_name_from_raw_message

logger = LoggerFactory.create_logger(ComponentType.TRIGGER, "VerificationHandler")


def handle_verification_message(
    msg: func.ServiceBusMessage,
    service: Optional[JobVerificationService] = None
) -> JobVerificationRequest:
    """
    Process one job verification request.

    Args:
        msg: Service Bus message
        service: Verification service (from the startup bundle if omitted)

    Returns:
        The request as updated by the orchestrator
    """
    correlation_id = str(uuid.uuid4())[:8]
    start_time = time.time()
    message_body = ""

    logger.info(
        f"[{correlation_id}] JOB VERIFICATION TRIGGER (Service Bus)",
        extra={'custom_dimensions': {
            'correlation_id': correlation_id,
            'message_id': msg.message_id,
            'delivery_count': msg.delivery_count,
        }}
    )

    try:
        message_body = msg.get_body().decode('utf-8')
        request = JobVerificationRequest.model_validate_json(message_body)
        log_context = LogContext(
            job_name=request.job_name,
            job_output_asset_name=request.job_output_asset_name,
            media_service_account_name=request.media_service_account_name,
            retry_count=request.retry_count,
            correlation_id=correlation_id,
        )
        logger.info(
            f"[{correlation_id}] Parsed verification request: job_name={request.job_name}",
            extra={'custom_dimensions': log_context.to_dict()}
        )

        if service is None:
            from startup import get_service_bundle
            service = get_service_bundle().job_verification_service

        result = service.verify_job(request)

        elapsed = time.time() - start_time
        logger.info(
            f"[{correlation_id}] Verification processed in {elapsed:.3f}s: "
            f"job_name={result.job_name} retry_count={result.retry_count}"
        )
        return result

    except Exception as e:
        job_name = extract_job_name_from_raw_message(message_body, correlation_id)
        logger.error(
            f"[{correlation_id}] Job verification failed ({classify_error(e)}): "
            f"job_name={job_name} {type(e).__name__}: {e}",
            exc_info=True,
            extra={'custom_dimensions': {
                'correlation_id': correlation_id,
                'job_name': job_name,
                'error_type': type(e).__name__,
                'delivery_count': msg.delivery_count,
            }}
        )
        raise
