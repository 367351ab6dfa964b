"""
Repository Factory - Central Creation Point

Single point for constructing Azure-backed repositories, channels and
job-control clients. The startup bundle calls these once per process.
"""

from typing import Optional

from azure.core.credentials import TokenCredential

from config import MediaConfig, QueueConfig, StorageConfig
from util_logger import LoggerFactory, ComponentType

from .instance_health_repository import InstanceHealthRepository
from .job_output_status_repository import JobOutputStatusRepository
from .interface_repository import IQueueRepository
from .media_services import MediaServiceClientFactory
from .request_channels import ServiceBusJobVerificationChannel, ServiceBusProvisioningChannel
from .service_bus import ServiceBusRepository
from .vault import VaultRepository

logger = LoggerFactory.create_logger(ComponentType.FACTORY, "RepositoryFactory")


class RepositoryFactory:
    """
    Factory for creating repository instances.

    Every method takes its domain config explicitly; nothing here reads the
    environment.
    """

    @staticmethod
    def create_job_output_status_repository(
        storage_config: StorageConfig,
        credential: Optional[TokenCredential] = None
    ) -> JobOutputStatusRepository:
        logger.debug(f"Creating JobOutputStatusRepository (table={storage_config.job_output_status_table})")
        return JobOutputStatusRepository(storage_config, storage_config.job_output_status_table, credential)

    @staticmethod
    def create_instance_health_repository(
        storage_config: StorageConfig,
        credential: Optional[TokenCredential] = None
    ) -> InstanceHealthRepository:
        logger.debug(f"Creating InstanceHealthRepository (table={storage_config.instance_health_table})")
        return InstanceHealthRepository(storage_config, storage_config.instance_health_table, credential)

    @staticmethod
    def create_service_bus_repository(
        queue_config: QueueConfig,
        credential: Optional[TokenCredential] = None
    ) -> ServiceBusRepository:
        return ServiceBusRepository(queue_config, credential)

    @staticmethod
    def create_verification_channel(
        queue_repository: IQueueRepository,
        queue_config: QueueConfig
    ) -> ServiceBusJobVerificationChannel:
        return ServiceBusJobVerificationChannel(queue_repository, queue_config.job_verification_queue)

    @staticmethod
    def create_provisioning_channel(
        queue_repository: IQueueRepository,
        queue_config: QueueConfig
    ) -> ServiceBusProvisioningChannel:
        return ServiceBusProvisioningChannel(queue_repository, queue_config.provisioning_queue)

    @staticmethod
    def create_media_client_factory(
        media_config: MediaConfig,
        credential: Optional[TokenCredential] = None
    ) -> MediaServiceClientFactory:
        logger.debug(f"Creating MediaServiceClientFactory for instances: {media_config.instance_names}")
        return MediaServiceClientFactory(media_config, credential)

    @staticmethod
    def create_vault_repository(
        vault_name: str,
        credential: Optional[TokenCredential] = None
    ) -> VaultRepository:
        return VaultRepository(vault_name, credential)
