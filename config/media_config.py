"""
Media Services Instance Configuration.

Provides configuration for:
    - The pool of interchangeable media service accounts (instances)
    - Streaming policy used for new locators
    - Local vs queued locator provisioning

Instance list format (MEDIA_SERVICE_INSTANCES env var or the
media-service-instances Key Vault secret), a JSON array:

    [
        {"account_name": "amsinstance1", "subscription_id": "...", "resource_group": "rg-media"},
        {"account_name": "amsinstance2", "subscription_id": "...", "resource_group": "rg-media"}
    ]

Exports:
    MediaInstanceConfig: One media service account
    MediaConfig: Pydantic media configuration model
    parse_media_instances: Parse the JSON instance list
"""

import json
import os
from typing import Dict, List
from pydantic import BaseModel, Field, ValidationError

from exceptions import ConfigurationError
from .defaults import MediaDefaults


class MediaInstanceConfig(BaseModel):
    """Coordinates of one media service account."""

    account_name: str = Field(..., min_length=1, description="Media service account name")
    subscription_id: str = Field(..., min_length=1, description="Azure subscription id")
    resource_group: str = Field(..., min_length=1, description="Resource group of the account")


def parse_media_instances(raw: str) -> Dict[str, MediaInstanceConfig]:
    """
    Parse the JSON instance list into a dict keyed by account name.

    Raises:
        ConfigurationError: If the value is not a JSON array of instances
            or an account name appears twice
    """
    if not raw or not raw.strip():
        return {}

    try:
        items = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Media service instance list is not valid JSON: {e}")

    if not isinstance(items, list):
        raise ConfigurationError("Media service instance list must be a JSON array")

    instances: Dict[str, MediaInstanceConfig] = {}
    for item in items:
        try:
            instance = MediaInstanceConfig.model_validate(item)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid media service instance entry {item!r}: {e}")
        if instance.account_name in instances:
            raise ConfigurationError(f"Duplicate media service instance: {instance.account_name}")
        instances[instance.account_name] = instance
    return instances


class MediaConfig(BaseModel):
    """Media Services configuration."""

    instances: Dict[str, MediaInstanceConfig] = Field(
        default_factory=dict,
        description="Media service accounts keyed by account name"
    )

    streaming_policy_name: str = Field(
        default=MediaDefaults.STREAMING_POLICY_NAME,
        description="Streaming policy assigned to newly created locators"
    )

    provision_locators_locally: bool = Field(
        default=MediaDefaults.PROVISION_LOCATORS_LOCALLY,
        description="Create streaming locators in-process instead of enqueueing provisioning requests"
    )

    @property
    def instance_names(self) -> List[str]:
        return sorted(self.instances.keys())

    def get_instance(self, account_name: str) -> MediaInstanceConfig:
        """
        Look up one instance by account name.

        Raises:
            ConfigurationError: If the instance is not configured
        """
        try:
            return self.instances[account_name]
        except KeyError:
            raise ConfigurationError(
                f"Unknown media service instance '{account_name}'. "
                f"Configured: {', '.join(self.instance_names) or '(none)'}"
            )

    def with_instances(self, instances: Dict[str, MediaInstanceConfig]) -> "MediaConfig":
        """Copy of this config with a different instance pool."""
        return self.model_copy(update={"instances": dict(instances)})

    def debug_dict(self) -> dict:
        return {
            "instances": self.instance_names,
            "streaming_policy_name": self.streaming_policy_name,
            "provision_locators_locally": self.provision_locators_locally,
        }

    @classmethod
    def from_environment(cls):
        """Load from environment variables."""
        return cls(
            instances=parse_media_instances(os.environ.get("MEDIA_SERVICE_INSTANCES", "")),
            streaming_policy_name=os.environ.get("STREAMING_POLICY_NAME", MediaDefaults.STREAMING_POLICY_NAME),
            provision_locators_locally=os.environ.get(
                "PROVISION_LOCATORS_LOCALLY", str(MediaDefaults.PROVISION_LOCATORS_LOCALLY).lower()
            ).lower() == "true",
        )
