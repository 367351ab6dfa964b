"""
Azure Functions entry point for media job output verification.

Jobs submitted to Media Services can fail, stall or silently drop their
state change notifications. This app re-checks job outputs after a delay,
resubmits failed jobs on another media service instance when the error is
retriable, and hands finished outputs over to streaming provisioning.

Architecture:
    Event Grid (JobOutputStateChange) --> Ingest path --> JobOutputStatus table
                                              |
                                              +--> stream-provisioning-requests
                                                   (or in-process locator creation)

    job-verification-requests --> Verification orchestrator
                                      |   Finished: provision, delete job
                                      |   Error:    delete job, resubmit (retriable)
                                      |   Canceled: nothing
                                      |   other:    schedule another re-check
                                      +--> job-verification-requests (scheduled)

    Timer (every 15 minutes) --> Status sync --> Ingest path

Triggers:
    process_job_verification_request: job-verification-requests queue
    process_job_output_status: job-output-status queue
    job_output_state_change: Event Grid subscription on the media accounts
    job_output_status_sync: timer (triggers/timers/timer_bp.py)

Environment Variables:
    ServiceBusConnection: Service Bus connection (or __fullyQualifiedNamespace)
    TABLE_STORAGE_ACCOUNT_NAME / TABLE_STORAGE_CONNECTION_STRING: Table Storage
    MEDIA_SERVICE_INSTANCES: JSON list of media service instances
    KEY_VAULT_NAME: Key Vault holding the instance list (optional)
    VERIFICATION_MAX_RETRY_COUNT, VERIFICATION_DELAY_MINUTES: retry policy

Exports:
    app: Azure Function App instance
"""

import logging

import azure.functions as func

from triggers.event_grid import handle_job_output_event
from triggers.service_bus import handle_job_output_status_message, handle_verification_message
from triggers.timers import timer_bp
from util_logger import LoggerFactory, ComponentType

# Azure SDK loggers are chatty at INFO
logging.getLogger("azure.identity").setLevel(logging.WARNING)
logging.getLogger("azure.identity._internal").setLevel(logging.WARNING)
logging.getLogger("azure.core.pipeline.policies.http_logging_policy").setLevel(logging.WARNING)
logging.getLogger("azure.core").setLevel(logging.WARNING)
logging.getLogger("azure.servicebus").setLevel(logging.WARNING)
logging.getLogger("azure.data.tables").setLevel(logging.WARNING)
logging.getLogger("uamqp").setLevel(logging.WARNING)
logging.getLogger("msal").setLevel(logging.WARNING)

logger = LoggerFactory.create_logger(ComponentType.TRIGGER, "FunctionApp")

app = func.FunctionApp()

app.register_blueprint(timer_bp)
logger.info("Blueprints registered: timers")


# ============================================================================
# SERVICE BUS TRIGGERS
# ============================================================================

@app.service_bus_queue_trigger(
    arg_name="msg",
    queue_name="job-verification-requests",
    connection="ServiceBusConnection"
)
def process_job_verification_request(msg: func.ServiceBusMessage) -> None:
    """
    Verify one job output whose scheduled re-check is due.

    Failures re-raise so Service Bus redelivers the message.
    """
    handle_verification_message(msg)


@app.service_bus_queue_trigger(
    arg_name="msg",
    queue_name="job-output-status",
    connection="ServiceBusConnection"
)
def process_job_output_status(msg: func.ServiceBusMessage) -> None:
    """Store a job output status record and request provisioning if finished."""
    handle_job_output_status_message(msg)


# ============================================================================
# EVENT GRID TRIGGER
# ============================================================================

@app.event_grid_trigger(arg_name="event")
def job_output_state_change(event: func.EventGridEvent) -> None:
    """Media Services job output state change notifications."""
    handle_job_output_event(event)
