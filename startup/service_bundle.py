"""
Service Bundle - Explicit Startup Wiring.

Builds every repository, channel, client factory and service exactly once
per process and hands them to triggers as one immutable bundle.

Build sequence:
    1. Load AppConfig (instance pool from Key Vault if not in app settings)
    2. Create Azure-backed repositories and channels
    3. Create services
    4. Seed health records for configured instances

Usage:
    from startup import get_service_bundle

    bundle = get_service_bundle()
    bundle.job_verification_service.verify_job(request)

Exports:
    ServiceBundle: Frozen dataclass of ready-to-use services
    build_service_bundle: Build a bundle from a config
    get_service_bundle: Process-wide bundle, built on first use
    reset_service_bundle: Drop the cached bundle
"""

import threading
from dataclasses import dataclass
from typing import Optional

from azure.identity import DefaultAzureCredential

from config import AppConfig, get_config
from exceptions import ConfigurationError
from infrastructure.factory import RepositoryFactory
from infrastructure.interface_repository import (
    IJobControlClientFactory,
    IJobOutputStatusRepository,
    IJobVerificationRequestChannel,
    IProvisioningRequestChannel,
)
from infrastructure.request_channels import LocalProvisioningChannel
from services import (
    InstanceHealthService,
    JobOutputStatusService,
    JobOutputStatusSyncService,
    JobVerificationService,
    StreamingProvisioningService,
)
from util_logger import LoggerFactory, ComponentType

logger = LoggerFactory.create_logger(ComponentType.FACTORY, "ServiceBundle")


@dataclass(frozen=True)
class ServiceBundle:
    """Everything a trigger needs, built once."""

    config: AppConfig
    status_repository: IJobOutputStatusRepository
    client_factory: IJobControlClientFactory
    verification_channel: IJobVerificationRequestChannel
    provisioning_channel: IProvisioningRequestChannel
    instance_health_service: InstanceHealthService
    provisioning_service: StreamingProvisioningService
    job_output_status_service: JobOutputStatusService
    job_verification_service: JobVerificationService
    status_sync_service: JobOutputStatusSyncService


def _resolve_media_instances(config: AppConfig, credential) -> AppConfig:
    if config.needs_vault_instances:
        logger.info(f"Loading media service instances from Key Vault {config.key_vault_name}")
        vault = RepositoryFactory.create_vault_repository(config.key_vault_name, credential)
        instances = vault.get_media_instances(config.media_instances_secret_name)
        config = config.model_copy(update={'media': config.media.with_instances(instances)})

    if not config.media.instances:
        raise ConfigurationError(
            "No media service instances configured. Set MEDIA_SERVICE_INSTANCES "
            "or KEY_VAULT_NAME with a media-service-instances secret."
        )
    return config


def build_service_bundle(config: Optional[AppConfig] = None) -> ServiceBundle:
    """
    Build all services from config.

    Raises:
        ConfigurationError: Missing storage, Service Bus or instance settings
    """
    config = config or get_config()
    credential = DefaultAzureCredential()
    config = _resolve_media_instances(config, credential)

    logger.info(
        f"Building service bundle: environment={config.environment} "
        f"instances={config.media.instance_names} "
        f"provision_locators_locally={config.media.provision_locators_locally}"
    )

    status_repository = RepositoryFactory.create_job_output_status_repository(config.storage, credential)
    health_repository = RepositoryFactory.create_instance_health_repository(config.storage, credential)
    queue_repository = RepositoryFactory.create_service_bus_repository(config.queues, credential)
    client_factory = RepositoryFactory.create_media_client_factory(config.media, credential)

    verification_channel = RepositoryFactory.create_verification_channel(queue_repository, config.queues)
    provisioning_service = StreamingProvisioningService(client_factory, config.media.streaming_policy_name)

    if config.media.provision_locators_locally:
        provisioning_channel = LocalProvisioningChannel(provisioning_service)
    else:
        provisioning_channel = RepositoryFactory.create_provisioning_channel(queue_repository, config.queues)

    instance_health_service = InstanceHealthService(health_repository)
    job_output_status_service = JobOutputStatusService(status_repository, provisioning_channel)

    job_verification_service = JobVerificationService(
        status_repository=status_repository,
        client_factory=client_factory,
        verification_channel=verification_channel,
        provisioning_channel=provisioning_channel,
        instance_health_service=instance_health_service,
        verification_config=config.verification,
    )

    status_sync_service = JobOutputStatusSyncService(
        status_repository=status_repository,
        client_factory=client_factory,
        job_output_status_service=job_output_status_service,
        verification_config=config.verification,
    )

    instance_health_service.ensure_instances(config.media.instance_names)

    logger.info("Service bundle ready")
    return ServiceBundle(
        config=config,
        status_repository=status_repository,
        client_factory=client_factory,
        verification_channel=verification_channel,
        provisioning_channel=provisioning_channel,
        instance_health_service=instance_health_service,
        provisioning_service=provisioning_service,
        job_output_status_service=job_output_status_service,
        job_verification_service=job_verification_service,
        status_sync_service=status_sync_service,
    )


_bundle: Optional[ServiceBundle] = None
_bundle_lock = threading.Lock()


def get_service_bundle() -> ServiceBundle:
    """Process-wide bundle, built on first use. Safe to call concurrently."""
    global _bundle
    if _bundle is None:
        with _bundle_lock:
            if _bundle is None:
                _bundle = build_service_bundle()
    return _bundle


def reset_service_bundle() -> None:
    """Drop the cached bundle; the next get_service_bundle() rebuilds it."""
    global _bundle
    with _bundle_lock:
        _bundle = None
