"""
Azure Table Storage Configuration.

Provides configuration for:
    - Table Storage account (connection string or managed identity endpoint)
    - Table names for job output status and instance health records

Exports:
    StorageConfig: Pydantic storage configuration model
"""

import os
from typing import Optional
from pydantic import BaseModel, Field

from .defaults import StorageDefaults


class StorageConfig(BaseModel):
    """
    Table Storage configuration.

    Connection string wins when both are set; otherwise the account name is
    used with DefaultAzureCredential.
    """

    account_name: Optional[str] = Field(
        default=None,
        description="Storage account hosting the status and health tables"
    )

    connection_string: Optional[str] = Field(
        default=None,
        repr=False,
        description="Table Storage connection string (local development / Azurite)"
    )

    job_output_status_table: str = Field(
        default=StorageDefaults.JOB_OUTPUT_STATUS_TABLE,
        description="Table holding one current status record per job output"
    )

    instance_health_table: str = Field(
        default=StorageDefaults.INSTANCE_HEALTH_TABLE,
        description="Table holding media service instance health records"
    )

    @property
    def table_endpoint(self) -> Optional[str]:
        """Table service endpoint for managed identity access."""
        if not self.account_name:
            return None
        return f"https://{self.account_name}.table.core.windows.net"

    def debug_dict(self) -> dict:
        """Debug output with masked connection string."""
        return {
            "account_name": self.account_name,
            "connection_string": "***MASKED***" if self.connection_string else None,
            "job_output_status_table": self.job_output_status_table,
            "instance_health_table": self.instance_health_table,
        }

    @classmethod
    def from_environment(cls):
        """Load from environment variables."""
        return cls(
            account_name=os.environ.get("TABLE_STORAGE_ACCOUNT_NAME"),
            connection_string=os.environ.get("TABLE_STORAGE_CONNECTION_STRING"),
            job_output_status_table=os.environ.get("JOB_OUTPUT_STATUS_TABLE", StorageDefaults.JOB_OUTPUT_STATUS_TABLE),
            instance_health_table=os.environ.get("INSTANCE_HEALTH_TABLE", StorageDefaults.INSTANCE_HEALTH_TABLE),
        )
