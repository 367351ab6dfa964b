"""
Structured logging for the job verification Function App.

Every component gets a named logger ("service.JobVerificationService",
"trigger.VerificationTrigger", ...) that writes one JSON object per line to
stdout and propagates to the Functions host, which forwards records to
Application Insights. Anything passed as extra={'custom_dimensions': {...}}
ends up under customDimensions.

Levels:
    LOG_LEVEL sets the default for every component (INFO when unset).
    DEBUG_LOGGING=true forces DEBUG everywhere.
    Event parsing (SCHEMA) logs at DEBUG unless LOG_LEVEL says otherwise.

Exports:
    ComponentType: Logger categories, one per application layer
    LogContext: Verification lineage fields attached to log records
    JSONFormatter: Application Insights friendly formatter
    LoggerFactory: Creates component loggers
    format_for_log: Renders models for log lines
    log_exceptions: Decorator that logs and re-raises
"""

from enum import Enum
from typing import Optional, Dict, Any
from datetime import datetime, timezone
from dataclasses import dataclass, asdict
import logging
import sys
import os
import json
import traceback
from functools import wraps


class ComponentType(Enum):
    """Logger category, used as the logger name prefix."""
    TRIGGER = "trigger"        # Service Bus, Event Grid and timer entry points
    SERVICE = "service"        # Verification, ingest and provisioning logic
    REPOSITORY = "repository"  # Table Storage, Service Bus, Key Vault
    FACTORY = "factory"        # Client and bundle construction
    ADAPTER = "adapter"        # Media Services management API
    SCHEMA = "schema"          # Models and event parsing


@dataclass
class LogContext:
    """
    Fields identifying one verification lineage.

    A lineage is keyed by (job_name, job_output_asset_name). The owning
    instance changes on resubmission so it is carried separately.
    """
    job_name: Optional[str] = None
    job_output_asset_name: Optional[str] = None
    media_service_account_name: Optional[str] = None
    retry_count: Optional[int] = None
    correlation_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Set fields only."""
        return {k: v for k, v in asdict(self).items() if v is not None}


class JSONFormatter(logging.Formatter):
    """One JSON object per record, custom dimensions nested."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            'timestamp': datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'location': f"{record.module}.{record.funcName}:{record.lineno}",
        }

        dimensions = getattr(record, 'custom_dimensions', None)
        if dimensions:
            payload['customDimensions'] = dimensions

        if record.exc_info and record.exc_info[0] is not None:
            payload['exception'] = {
                'type': record.exc_info[0].__name__,
                'message': str(record.exc_info[1]),
                'traceback': self.formatException(record.exc_info),
            }

        return json.dumps(payload, default=str)


def _default_level(component_type: ComponentType) -> int:
    if os.getenv('DEBUG_LOGGING', '').lower() == 'true':
        return logging.DEBUG
    configured = logging.getLevelName(os.getenv('LOG_LEVEL', '').upper())
    if isinstance(configured, int):
        return configured
    return logging.DEBUG if component_type is ComponentType.SCHEMA else logging.INFO


class _DimensionsAdapter(logging.LoggerAdapter):
    """Merges component and lineage fields into custom_dimensions."""

    def process(self, msg, kwargs):
        extra = kwargs.get('extra') or {}
        dimensions = dict(self.extra)
        dimensions.update(extra.get('custom_dimensions') or {})
        kwargs['extra'] = {**extra, 'custom_dimensions': dimensions}
        return msg, kwargs


class LoggerFactory:
    """
    Creates component loggers.

    Example:
        logger = LoggerFactory.create_logger(ComponentType.SERVICE, "JobVerificationService")
        logger.info("JobVerificationService.verify_job started")
    """

    @classmethod
    def create_logger(
        cls,
        component_type: ComponentType,
        name: str,
        context: Optional[LogContext] = None,
        level: Optional[int] = None
    ) -> logging.LoggerAdapter:
        """
        Logger named "<component_type>.<name>".

        Args:
            component_type: Application layer of the caller
            name: Component name
            context: Lineage fields added to every record
            level: Overrides the environment-derived level

        Returns:
            LoggerAdapter over the named logger, carrying the dimensions
        """
        logger = logging.getLogger(f"{component_type.value}.{name}")
        logger.setLevel(level if level is not None else _default_level(component_type))

        # create_logger runs at import time in every module; attach the handler once
        if not any(isinstance(h.formatter, JSONFormatter) for h in logger.handlers):
            handler = logging.StreamHandler(sys.stdout)
            handler.setFormatter(JSONFormatter())
            logger.addHandler(handler)

        # Functions host forwards the root logger to Application Insights
        logger.propagate = True

        dimensions = {'component_type': component_type.value, 'component_name': name}
        if context is not None:
            dimensions.update(context.to_dict())
        return _DimensionsAdapter(logger, dimensions)


def format_for_log(value: Any) -> str:
    """
    Render a model or plain object for a log line.

    Pydantic models are dumped as JSON, everything else goes through str().
    """
    if hasattr(value, 'model_dump_json'):
        return value.model_dump_json()
    if value is None:
        return "None"
    return str(value)


def log_exceptions(component_type: Optional[ComponentType] = None,
                   component_name: Optional[str] = None,
                   logger: Optional[logging.LoggerAdapter] = None):
    """
    Log any exception escaping the wrapped function, then re-raise it.

    Usage:
        @log_exceptions(ComponentType.TRIGGER, "StatusSyncTimer")
        @log_exceptions(logger=my_logger)
        @log_exceptions()  # logger named after the function's module
    """
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except Exception as e:
                log = logger or LoggerFactory.create_logger(
                    component_type or ComponentType.SERVICE,
                    component_name or func.__module__ or "unknown"
                )
                log.error(
                    f"Exception in {func.__name__}: {type(e).__name__}: {e}",
                    exc_info=True,
                    extra={
                        'custom_dimensions': {
                            'function_name': func.__name__,
                            'exception_type': type(e).__name__,
                            'traceback': traceback.format_exc(),
                        }
                    }
                )
                raise
        return wrapper
    return decorator
