"""
Service Bus Error Handler Module.

Utilities used by the queue handlers when processing fails:
- Extract the job name from a potentially malformed message for logging
- Classify the exception so the log says whether redelivery can help

Usage:
    from triggers.service_bus.error_handler import (
        extract_job_name_from_raw_message,
        classify_error,
    )
"""

import json
import re
from typing import Optional

from pydantic import ValidationError

from exceptions import (
    BusinessLogicError,
    ConfigurationError,
    ContractViolationError,
    JobControlError,
    ServiceBusError,
    TableStorageError,
)
from util_logger import LoggerFactory, ComponentType

logger = LoggerFactory.create_logger(ComponentType.TRIGGER, "QueueErrorHandler")


def extract_job_name_from_raw_message(
    message_content: str,
    correlation_id: str = "unknown"
) -> Optional[str]:
    """
    Try to extract job_name from potentially malformed message.

    Uses JSON parsing first, then regex as fallback.

    Args:
        message_content: Raw message content that may be malformed
        correlation_id: Correlation ID for logging

    Returns:
        job_name if found, None otherwise
    """
    try:
        data = json.loads(message_content)
        if isinstance(data, dict) and data.get('job_name'):
            return data['job_name']
    except ValueError:
        pass

    match = re.search(r'"job_name"\s*:\s*"([^"]+)"', message_content or "")
    if match:
        logger.info(f"[{correlation_id}] Extracted job_name via regex: {match.group(1)}")
        return match.group(1)

    logger.warning(f"[{correlation_id}] Could not extract job_name from message")
    return None


def classify_error(error: Exception) -> str:
    """
    Coarse category of a processing failure.

    Returns:
        'contract'      - malformed message or programming error, redelivery will not help
        'configuration' - app settings problem
        'transient'     - Azure call failed, redelivery may help
        'business'      - other expected failure
        'unexpected'    - anything else
    """
    if isinstance(error, (ContractViolationError, ValidationError)):
        return 'contract'
    if isinstance(error, ConfigurationError):
        return 'configuration'
    if isinstance(error, (JobControlError, ServiceBusError, TableStorageError)):
        return 'transient'
    if isinstance(error, BusinessLogicError):
        return 'business'
    return 'unexpected'
