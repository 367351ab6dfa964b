"""
Configuration Package - Domain-Specific Configuration Modules

Structure:
    config/
    ├── __init__.py              # This file - exports and singleton
    ├── app_config.py            # Main config (composes domain configs)
    ├── defaults.py              # Default values
    ├── storage_config.py        # Table Storage
    ├── queue_config.py          # Service Bus queues
    ├── media_config.py          # Media service instance pool
    └── verification_config.py   # Retry / delay policy

Usage:
    # Singleton pattern (preferred)
    from config import get_config
    config = get_config()
    delay = config.verification.verification_delay(retry_count=1)

    # Debug output
    from config import debug_config
    info = debug_config()  # Connection strings masked
"""

from typing import Optional

from .storage_config import StorageConfig
from .queue_config import QueueConfig, QueueNames
from .media_config import MediaConfig, MediaInstanceConfig, parse_media_instances
from .verification_config import VerificationConfig
from .app_config import AppConfig


_config_instance: Optional[AppConfig] = None


def get_config() -> AppConfig:
    """
    Get global configuration singleton.

    Returns:
        AppConfig instance loaded from environment
    """
    global _config_instance
    if _config_instance is None:
        _config_instance = AppConfig.from_environment()
    return _config_instance


def reset_config() -> None:
    """Drop the cached singleton so the next get_config() re-reads the environment."""
    global _config_instance
    _config_instance = None


def debug_config() -> dict:
    """
    Get sanitized configuration for debugging (masks sensitive values).

    Returns:
        Dictionary with configuration values, secrets masked
    """
    try:
        config = get_config()
        return {
            'storage': config.storage.debug_dict(),

            'queues': {
                'job_verification_queue': config.queues.job_verification_queue,
                'job_output_status_queue': config.queues.job_output_status_queue,
                'provisioning_queue': config.queues.provisioning_queue,
                'namespace': config.queues.namespace,
                'connection': '***MASKED***' if config.queues.connection_string else None,
            },

            'media': config.media.debug_dict(),

            'verification': config.verification.model_dump(),

            # Application
            'key_vault_name': config.key_vault_name,
            'debug_mode': config.debug_mode,
            'environment': config.environment,
            'log_level': config.log_level,
        }
    except Exception as e:
        return {'error': f'Configuration validation failed: {e}'}


__all__ = [
    # Main config
    'AppConfig',
    'get_config',
    'reset_config',
    'debug_config',

    # Domain configs
    'StorageConfig',
    'QueueConfig',
    'QueueNames',
    'MediaConfig',
    'MediaInstanceConfig',
    'parse_media_instances',
    'VerificationConfig',
]
