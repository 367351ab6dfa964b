"""
Infrastructure Package - Lazy Loading Implementation.

Provides repository, channel and job-control implementations with lazy
loading. Azure Functions imports function_app.py before the host has
finished setting up app settings and managed identity, so nothing here is
imported (and no Azure client is built) until a trigger first asks for it.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .factory import RepositoryFactory as _RepositoryFactory
    from .service_bus import ServiceBusRepository as _ServiceBusRepository
    from .vault import VaultRepository as _VaultRepository
    from .media_services import MediaServiceClientFactory as _MediaServiceClientFactory


_LAZY_IMPORTS = {
    # Factory - most common import
    'RepositoryFactory': '.factory',

    # Azure implementations
    'ServiceBusRepository': '.service_bus',
    'JobOutputStatusRepository': '.job_output_status_repository',
    'InstanceHealthRepository': '.instance_health_repository',
    'VaultRepository': '.vault',
    'VaultAccessError': '.vault',
    'MediaServicesJobControlClient': '.media_services',
    'MediaServiceClientFactory': '.media_services',
    'ServiceBusJobVerificationChannel': '.request_channels',
    'ServiceBusProvisioningChannel': '.request_channels',
    'LocalProvisioningChannel': '.request_channels',

    # Interfaces
    'IQueueRepository': '.interface_repository',
    'IJobOutputStatusRepository': '.interface_repository',
    'IInstanceHealthRepository': '.interface_repository',
    'IJobVerificationRequestChannel': '.interface_repository',
    'IProvisioningRequestChannel': '.interface_repository',
    'IJobControlClient': '.interface_repository',
    'IJobControlClientFactory': '.interface_repository',
}


def __getattr__(name: str):
    """
    Lazy import mechanism - only imports when actually accessed.
    """
    if name in _LAZY_IMPORTS:
        from importlib import import_module
        module = import_module(_LAZY_IMPORTS[name], package=__name__)
        return getattr(module, name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")


__all__ = list(_LAZY_IMPORTS.keys())
