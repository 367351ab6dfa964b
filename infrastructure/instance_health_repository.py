"""
Media Service Instance Health Repository - Azure Table Storage.

    PartitionKey = "instances"
    RowKey       = media_service_account_name

Exports:
    InstanceHealthRepository: Table Storage implementation of
        IInstanceHealthRepository
"""

from typing import List, Optional

from azure.core.exceptions import ResourceNotFoundError
from azure.data.tables import TableEntity, UpdateMode

from core.models import InstanceHealthState, MediaServiceInstanceHealth
from exceptions import TableStorageError
from infrastructure.interface_repository import IInstanceHealthRepository, ParamNames
from infrastructure.table_storage import TableStorageRepository
from util_logger import LoggerFactory, ComponentType

logger = LoggerFactory.create_logger(ComponentType.REPOSITORY, "InstanceHealthRepository")

INSTANCE_PARTITION = "instances"


class InstanceHealthRepository(TableStorageRepository, IInstanceHealthRepository):
    """Instance health records in Azure Table Storage."""

    @staticmethod
    def _to_entity(record: MediaServiceInstanceHealth) -> TableEntity:
        entity = TableEntity()
        entity[ParamNames.PARTITION_KEY] = INSTANCE_PARTITION
        entity[ParamNames.ROW_KEY] = record.media_service_account_name
        entity['health_state'] = record.health_state.value
        entity['last_updated'] = record.last_updated
        if record.last_used is not None:
            entity['last_used'] = record.last_used
        entity['usage_count'] = record.usage_count
        entity['is_enabled'] = record.is_enabled
        return entity

    @staticmethod
    def _from_entity(entity) -> MediaServiceInstanceHealth:
        data = {
            'media_service_account_name': entity[ParamNames.ROW_KEY],
            'health_state': InstanceHealthState(entity.get('health_state', InstanceHealthState.HEALTHY.value)),
            'last_used': entity.get('last_used'),
            'usage_count': int(entity.get('usage_count', 0)),
            'is_enabled': bool(entity.get('is_enabled', True)),
        }
        if entity.get('last_updated') is not None:
            data['last_updated'] = entity['last_updated']
        return MediaServiceInstanceHealth(**data)

    def get(self, media_service_account_name: str) -> Optional[MediaServiceInstanceHealth]:
        try:
            entity = self.table_client.get_entity(INSTANCE_PARTITION, media_service_account_name)
        except ResourceNotFoundError:
            return None
        except Exception as e:
            logger.error(f"Error reading instance health {media_service_account_name}: {e}")
            raise TableStorageError(f"Error reading instance health {media_service_account_name}: {e}")
        return self._from_entity(entity)

    def list(self) -> List[MediaServiceInstanceHealth]:
        try:
            entities = self.table_client.query_entities(
                "PartitionKey eq @pk", parameters={'pk': INSTANCE_PARTITION}
            )
            return [self._from_entity(entity) for entity in entities]
        except Exception as e:
            logger.error(f"Error listing instance health records: {e}")
            raise TableStorageError(f"Error listing instance health records: {e}")

    def create_or_update(self, record: MediaServiceInstanceHealth) -> MediaServiceInstanceHealth:
        try:
            self.table_client.upsert_entity(self._to_entity(record), mode=UpdateMode.REPLACE)
        except Exception as e:
            logger.error(f"Error writing instance health {record.media_service_account_name}: {e}")
            raise TableStorageError(f"Error writing instance health {record.media_service_account_name}: {e}")
        logger.debug(
            f"Stored instance health: {record.media_service_account_name} "
            f"state={record.health_state.value} usage_count={record.usage_count}"
        )
        return record
