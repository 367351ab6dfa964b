"""
Service Bus Repository Implementation

Sends JSON messages to Azure Service Bus queues, optionally with scheduled
delivery. Scheduled delivery is what turns a verification request into a
delayed re-check: the broker holds the message until its scheduled enqueue
time, so no in-process scheduler is needed.

Key Features:
- Connection string (local) or DefaultAzureCredential (Azure) authentication
- Sender reuse per queue
- Per-send retry with exponential backoff
- Scheduled delivery via ScheduledEnqueueTimeUtc
"""

from azure.servicebus import ServiceBusClient, ServiceBusMessage, ServiceBusSender
from azure.identity import DefaultAzureCredential
from typing import Optional, Dict
import threading
import uuid
import time
from datetime import datetime, timezone, timedelta
from pydantic import BaseModel

from config import QueueConfig
from exceptions import ServiceBusError
from infrastructure.interface_repository import IQueueRepository
from util_logger import LoggerFactory, ComponentType

logger = LoggerFactory.create_logger(ComponentType.REPOSITORY, "ServiceBusRepository")


# Message fields copied to application properties for filtering in the portal
_TRACKED_PROPERTIES = ("job_name", "job_output_asset_name", "media_service_account_name", "retry_count")


class ServiceBusRepository(IQueueRepository):
    """
    Service Bus repository.

    Created once per process by the startup bundle; senders are cached and
    reused across invocations.
    """

    def __init__(self, queue_config: QueueConfig, credential: Optional[DefaultAzureCredential] = None):
        """Initialize Service Bus client with credential management."""
        logger.info("Initializing ServiceBusRepository")

        self.max_retries = queue_config.retry_count
        self.message_ttl = timedelta(hours=queue_config.message_ttl_hours)
        self.retry_delay = 1  # seconds

        if queue_config.connection_string:
            logger.info("Using connection string authentication")
            try:
                self.client = ServiceBusClient.from_connection_string(queue_config.connection_string)
            except Exception as cs_error:
                logger.error(f"Failed to create client from connection string: {cs_error}")
                raise ServiceBusError(f"ServiceBusClient creation failed: {cs_error}")
        else:
            fully_qualified_namespace = queue_config.namespace
            if not fully_qualified_namespace:
                logger.error("Service Bus namespace not configured")
                raise ServiceBusError(
                    "Neither ServiceBusConnection nor SERVICE_BUS_NAMESPACE "
                    "(ServiceBusConnection__fullyQualifiedNamespace) is set"
                )

            logger.info(f"Using DefaultAzureCredential for Service Bus namespace: {fully_qualified_namespace}")
            self.credential = credential or DefaultAzureCredential()
            try:
                self.client = ServiceBusClient(
                    fully_qualified_namespace=fully_qualified_namespace,
                    credential=self.credential
                )
            except Exception as client_error:
                logger.error(f"Failed to create ServiceBusClient: {client_error}")
                raise ServiceBusError(f"ServiceBusClient creation failed: {client_error}")

        self._senders: Dict[str, ServiceBusSender] = {}
        self._senders_lock = threading.Lock()
        logger.info(f"ServiceBusRepository initialized (retries={self.max_retries})")

    def _get_sender(self, queue_name: str) -> ServiceBusSender:
        """Get or create a message sender."""
        with self._senders_lock:
            if queue_name not in self._senders:
                logger.debug(f"Creating new sender for queue: {queue_name}")
                try:
                    self._senders[queue_name] = self.client.get_queue_sender(queue_name)
                except Exception as sender_error:
                    error_msg = str(sender_error).lower()
                    if 'not found' in error_msg or '404' in error_msg:
                        logger.error(f"Queue '{queue_name}' does not exist in Service Bus namespace")
                    elif 'unauthorized' in error_msg or '401' in error_msg:
                        logger.error("Authentication failed - check managed identity or connection string")
                    raise ServiceBusError(f"Cannot create sender for queue '{queue_name}': {sender_error}")
            return self._senders[queue_name]

    def _build_message(self, message: BaseModel, scheduled_time: Optional[datetime] = None) -> ServiceBusMessage:
        try:
            message_json = message.model_dump_json()
        except Exception as json_error:
            raise ServiceBusError(f"Message serialization failed: {json_error}")

        sb_message = ServiceBusMessage(
            body=message_json,
            content_type="application/json",
            time_to_live=self.message_ttl,
            scheduled_enqueue_time_utc=scheduled_time,
            application_properties={}
        )

        for prop in _TRACKED_PROPERTIES:
            if hasattr(message, prop):
                sb_message.application_properties[prop] = getattr(message, prop)

        # Request ids repeat across re-checks of one lineage; message ids must not
        sb_message.message_id = str(uuid.uuid4())
        if getattr(message, 'id', None):
            sb_message.application_properties['request_id'] = message.id

        return sb_message

    def _send(self, queue_name: str, sb_message: ServiceBusMessage) -> str:
        sender = self._get_sender(queue_name)

        for attempt in range(self.max_retries):
            try:
                sender.send_messages(sb_message)
                message_id = sb_message.message_id
                logger.debug(f"Message sent to Service Bus queue {queue_name}. ID: {message_id}")
                return message_id

            except Exception as e:
                error_msg = str(e)
                logger.warning(
                    f"Send attempt {attempt + 1}/{self.max_retries} to {queue_name} failed: "
                    f"{type(e).__name__}: {error_msg}"
                )

                if "from_env" in error_msg.lower():
                    raise ServiceBusError(f"Service Bus authentication failed: {error_msg}")

                if attempt == self.max_retries - 1:
                    logger.error(f"Failed to send message to {queue_name} after {self.max_retries} attempts")
                    raise ServiceBusError(f"Failed to send message to {queue_name}: {error_msg}")

                wait_time = self.retry_delay * (2 ** attempt)
                time.sleep(wait_time)

    def send_message(self, queue_name: str, message: BaseModel) -> str:
        """
        Send a single message to Service Bus.

        Args:
            queue_name: Target queue name
            message: Pydantic model to send

        Returns:
            Message ID
        """
        logger.debug(f"send_message called for queue: {queue_name} ({type(message).__name__})")
        return self._send(queue_name, self._build_message(message))

    def send_message_with_delay(self, queue_name: str, message: BaseModel, delay: timedelta) -> str:
        """
        Send a message to Service Bus with scheduled delivery.

        A zero or negative delay sends immediately.

        Args:
            queue_name: Target queue name
            message: Pydantic model to send
            delay: How long the broker holds the message

        Returns:
            Message ID
        """
        if delay <= timedelta(0):
            return self.send_message(queue_name, message)

        scheduled_time = datetime.now(timezone.utc) + delay
        logger.info(f"Scheduling message for delivery at {scheduled_time.isoformat()} to queue: {queue_name}")
        return self._send(queue_name, self._build_message(message, scheduled_time))

    def close(self) -> None:
        """Close cached senders and the client."""
        with self._senders_lock:
            for queue_name, sender in self._senders.items():
                try:
                    sender.close()
                except Exception as e:
                    logger.warning(f"Error closing sender for {queue_name}: {e}")
            self._senders.clear()
        self.client.close()
