"""
Azure Key Vault Repository - Secure Configuration Management

Reads the media service instance list (subscription ids, resource groups,
account names) from Key Vault when it is not set in app settings.

Security Features:
- DefaultAzureCredential for managed identity authentication
- Secret caching for performance
- Explicit error handling for vault access failures
"""

from typing import Optional, Dict, Any
from datetime import datetime, timezone, timedelta
from azure.keyvault.secrets import SecretClient
from azure.identity import DefaultAzureCredential
from azure.core.credentials import TokenCredential
from azure.core.exceptions import AzureError

from config import MediaInstanceConfig, parse_media_instances
from util_logger import LoggerFactory, ComponentType

logger = LoggerFactory.create_logger(ComponentType.REPOSITORY, "VaultRepository")


class VaultAccessError(Exception):
    """Custom exception for vault access failures"""
    pass


class VaultRepository:
    """
    Azure Key Vault repository.

    Usage:
        vault_repo = VaultRepository("my-vault")
        instances = vault_repo.get_media_instances("media-service-instances")
    """

    def __init__(
        self,
        vault_name: str,
        credential: Optional[TokenCredential] = None,
        client: Optional[SecretClient] = None
    ):
        """
        Initialize vault repository with Azure Key Vault client.

        Args:
            vault_name: Key Vault name
            credential: Optional credential (DefaultAzureCredential if omitted)
            client: Optional pre-built SecretClient
        """
        self.vault_name = vault_name
        self.vault_url = f"https://{self.vault_name}.vault.azure.net/"

        if client is not None:
            self.client = client
        else:
            try:
                self.client = SecretClient(vault_url=self.vault_url, credential=credential or DefaultAzureCredential())
                logger.info(f"VaultRepository initialized for vault: {self.vault_name}")
            except Exception as e:
                logger.error(f"Failed to initialize VaultRepository: {e}")
                raise VaultAccessError(f"Vault client initialization failed: {e}")

        # Simple in-memory cache for secrets (Azure Functions are stateless)
        self._secret_cache: Dict[str, Dict[str, Any]] = {}
        self._cache_ttl_minutes = 15

    def get_secret(self, secret_name: str, use_cache: bool = True) -> str:
        """
        Retrieve secret value from Azure Key Vault.

        Args:
            secret_name: Name of the secret in Key Vault
            use_cache: Whether to use cached value if available

        Returns:
            Secret value as string

        Raises:
            VaultAccessError: If secret cannot be retrieved
        """
        if use_cache and self._is_secret_cached(secret_name):
            logger.debug(f"Using cached secret: {secret_name}")
            return self._secret_cache[secret_name]['value']

        try:
            secret = self.client.get_secret(secret_name)
        except AzureError as e:
            error_msg = f"Failed to retrieve secret '{secret_name}' from vault '{self.vault_name}': {e}"
            logger.error(error_msg)
            raise VaultAccessError(error_msg)

        secret_value = secret.value
        if not secret_value:
            raise VaultAccessError(f"Secret '{secret_name}' is empty or null")

        if use_cache:
            self._cache_secret(secret_name, secret_value)

        logger.info(f"Retrieved secret: {secret_name}")
        return secret_value

    def get_media_instances(self, secret_name: str) -> Dict[str, MediaInstanceConfig]:
        """
        Media service instance list stored as a JSON secret.

        Raises:
            VaultAccessError: If the secret cannot be read
            ConfigurationError: If the secret is not a valid instance list
        """
        instances = parse_media_instances(self.get_secret(secret_name))
        logger.info(f"Loaded {len(instances)} media service instances from Key Vault")
        return instances

    def _is_secret_cached(self, secret_name: str) -> bool:
        """Check if secret is cached and not expired."""
        if secret_name not in self._secret_cache:
            return False

        cached_time = self._secret_cache[secret_name]['cached_at']
        expiry_time = cached_time + timedelta(minutes=self._cache_ttl_minutes)

        if datetime.now(timezone.utc) > expiry_time:
            del self._secret_cache[secret_name]
            return False

        return True

    def _cache_secret(self, secret_name: str, secret_value: str) -> None:
        self._secret_cache[secret_name] = {
            'value': secret_value,
            'cached_at': datetime.now(timezone.utc)
        }

    def clear_cache(self) -> int:
        """
        Clear all cached secrets.

        Returns:
            Number of secrets cleared from cache
        """
        count = len(self._secret_cache)
        self._secret_cache.clear()
        logger.info(f"Cleared {count} secrets from cache")
        return count
