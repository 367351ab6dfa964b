"""
Application Configuration - Composes Domain Configs.

Exports:
    AppConfig: Main configuration class (composes storage, queue, media and
        verification configs)
"""

import os
from typing import Optional
from pydantic import BaseModel, Field

from .defaults import AppDefaults, KeyVaultDefaults
from .storage_config import StorageConfig
from .queue_config import QueueConfig
from .media_config import MediaConfig
from .verification_config import VerificationConfig


class AppConfig(BaseModel):
    """
    Application configuration - composition of domain configs.

    Each domain config manages its own validation and defaults.
    """

    # ========================================================================
    # Core Application Settings
    # ========================================================================

    debug_mode: bool = Field(
        default=AppDefaults.DEBUG_MODE,
        description="Enable debug mode for verbose diagnostics. "
                    "Set DEBUG_MODE=true in environment to enable.",
        examples=[True, False]
    )

    environment: str = Field(
        default=AppDefaults.ENVIRONMENT,
        description="Environment name (dev, qa, prod)",
        examples=["dev", "qa", "prod"]
    )

    log_level: str = Field(
        default=AppDefaults.LOG_LEVEL,
        description="Logging level for application diagnostics",
        examples=["DEBUG", "INFO", "WARNING", "ERROR"]
    )

    # ========================================================================
    # Key Vault
    # ========================================================================

    key_vault_name: Optional[str] = Field(
        default=None,
        description="Key Vault holding the media service instance list "
                    "(used only when MEDIA_SERVICE_INSTANCES is not set)"
    )

    media_instances_secret_name: str = Field(
        default=KeyVaultDefaults.MEDIA_SERVICE_INSTANCES_SECRET,
        description="Secret name of the JSON media service instance list"
    )

    # ========================================================================
    # Domain Configs
    # ========================================================================

    storage: StorageConfig = Field(default_factory=StorageConfig)
    queues: QueueConfig = Field(default_factory=QueueConfig)
    media: MediaConfig = Field(default_factory=MediaConfig)
    verification: VerificationConfig = Field(default_factory=VerificationConfig)

    @property
    def needs_vault_instances(self) -> bool:
        """True when the instance pool must be read from Key Vault."""
        return bool(self.key_vault_name) and not self.media.instances

    @classmethod
    def from_environment(cls):
        """Load all configs from environment."""
        return cls(
            debug_mode=os.environ.get("DEBUG_MODE", str(AppDefaults.DEBUG_MODE).lower()).lower() == "true",
            environment=os.environ.get("ENVIRONMENT", AppDefaults.ENVIRONMENT),
            log_level=os.environ.get("LOG_LEVEL", AppDefaults.LOG_LEVEL),
            key_vault_name=os.environ.get("KEY_VAULT_NAME") or None,
            media_instances_secret_name=os.environ.get(
                "MEDIA_INSTANCES_SECRET_NAME", KeyVaultDefaults.MEDIA_SERVICE_INSTANCES_SECRET
            ),

            # Domain configs
            storage=StorageConfig.from_environment(),
            queues=QueueConfig.from_environment(),
            media=MediaConfig.from_environment(),
            verification=VerificationConfig.from_environment(),
        )
