"""
Azure Table Storage Base Repository.

Shared client construction and table bootstrap for the job output status
and instance health repositories.

Exports:
    TableStorageRepository: Base class owning one TableClient
"""

import threading
from typing import Optional

from azure.core.credentials import TokenCredential
from azure.data.tables import TableClient, TableServiceClient
from azure.identity import DefaultAzureCredential

from config import StorageConfig
from exceptions import ConfigurationError, TableStorageError
from util_logger import LoggerFactory, ComponentType

logger = LoggerFactory.create_logger(ComponentType.REPOSITORY, "TableStorageRepository")


class TableStorageRepository:
    """
    Base repository over one Azure table.

    The table is created on first use, not at construction, so building the
    startup bundle never touches the network.
    """

    def __init__(
        self,
        storage_config: StorageConfig,
        table_name: str,
        credential: Optional[TokenCredential] = None,
        table_service: Optional[TableServiceClient] = None
    ):
        self.table_name = table_name

        if table_service is not None:
            self.table_service = table_service
        elif storage_config.connection_string:
            self.table_service = TableServiceClient.from_connection_string(storage_config.connection_string)
        elif storage_config.table_endpoint:
            self.table_service = TableServiceClient(
                endpoint=storage_config.table_endpoint,
                credential=credential or DefaultAzureCredential()
            )
        else:
            raise ConfigurationError(
                "TABLE_STORAGE_CONNECTION_STRING or TABLE_STORAGE_ACCOUNT_NAME must be set"
            )

        self._table_client: Optional[TableClient] = None
        self._table_lock = threading.Lock()

    @property
    def table_client(self) -> TableClient:
        """Table client, creating the table the first time it is needed."""
        if self._table_client is None:
            with self._table_lock:
                if self._table_client is None:
                    try:
                        self._table_client = self.table_service.create_table_if_not_exists(self.table_name)
                        logger.debug(f"Table ready: {self.table_name}")
                    except Exception as e:
                        logger.error(f"Cannot open table {self.table_name}: {e}")
                        raise TableStorageError(f"Cannot open table {self.table_name}: {e}")
        return self._table_client
