"""
Job Output Status Repository - Azure Table Storage.

One entity per (job_name, job_output_asset_name):
    PartitionKey = job_name
    RowKey       = job_output_asset_name

Writes are upserts in REPLACE mode, so the table always holds exactly the
latest record for the pair.

Exports:
    JobOutputStatusRepository: Table Storage implementation of
        IJobOutputStatusRepository
"""

from datetime import datetime
from typing import List, Optional

from azure.core.exceptions import ResourceNotFoundError
from azure.data.tables import TableEntity, UpdateMode

from core.logic import get_job_active_states
from core.models import JobOutputStatus, JobState
from exceptions import TableStorageError
from infrastructure.interface_repository import IJobOutputStatusRepository, ParamNames
from infrastructure.table_storage import TableStorageRepository
from util_logger import LoggerFactory, ComponentType

logger = LoggerFactory.create_logger(ComponentType.REPOSITORY, "JobOutputStatusRepository")


class JobOutputStatusRepository(TableStorageRepository, IJobOutputStatusRepository):
    """Job output status records in Azure Table Storage."""

    @staticmethod
    def _to_entity(status: JobOutputStatus) -> TableEntity:
        entity = TableEntity()
        entity[ParamNames.PARTITION_KEY] = status.job_name
        entity[ParamNames.ROW_KEY] = status.job_output_asset_name
        entity['id'] = status.id
        entity['event_time'] = status.event_time
        entity['job_output_state'] = status.job_output_state.value
        entity['job_name'] = status.job_name
        entity['media_service_account_name'] = status.media_service_account_name
        entity['job_output_asset_name'] = status.job_output_asset_name
        entity['transform_name'] = status.transform_name
        entity['has_retriable_error'] = status.has_retriable_error
        return entity

    @staticmethod
    def _from_entity(entity) -> JobOutputStatus:
        return JobOutputStatus(
            id=entity.get('id'),
            event_time=entity.get('event_time'),
            job_output_state=JobState(entity.get('job_output_state')),
            job_name=entity.get('job_name', entity.get(ParamNames.PARTITION_KEY)),
            media_service_account_name=entity.get('media_service_account_name'),
            job_output_asset_name=entity.get('job_output_asset_name', entity.get(ParamNames.ROW_KEY)),
            transform_name=entity.get('transform_name') or "",
            has_retriable_error=bool(entity.get('has_retriable_error', False)),
        )

    def get_latest(self, job_name: str, job_output_asset_name: str) -> Optional[JobOutputStatus]:
        """Current record for the pair, or None"""
        try:
            entity = self.table_client.get_entity(job_name, job_output_asset_name)
        except ResourceNotFoundError:
            logger.debug(f"No status record: job_name={job_name} job_output_asset_name={job_output_asset_name}")
            return None
        except Exception as e:
            logger.error(f"Error reading status job_name={job_name} job_output_asset_name={job_output_asset_name}: {e}")
            raise TableStorageError(f"Error reading status for {job_name}/{job_output_asset_name}: {e}")

        return self._from_entity(entity)

    def create_or_update(self, status: JobOutputStatus) -> JobOutputStatus:
        """Upsert keyed by (job_name, job_output_asset_name)"""
        try:
            self.table_client.upsert_entity(self._to_entity(status), mode=UpdateMode.REPLACE)
        except Exception as e:
            logger.error(f"Error writing status job_name={status.job_name} job_output_asset_name={status.job_output_asset_name}: {e}")
            raise TableStorageError(f"Error writing status for {status.job_name}/{status.job_output_asset_name}: {e}")

        logger.info(
            f"Stored job output status: job_name={status.job_name} "
            f"job_output_asset_name={status.job_output_asset_name} "
            f"state={status.job_output_state.value} "
            f"media_service_account_name={status.media_service_account_name}"
        )
        return status

    def list_non_terminal(self, older_than: datetime) -> List[JobOutputStatus]:
        """Records in a non-terminal state whose event_time is before older_than"""
        parameters = {'cutoff': older_than}
        state_clauses = []
        for index, state in enumerate(get_job_active_states()):
            parameters[f'state{index}'] = state.value
            state_clauses.append(f"job_output_state eq @state{index}")

        filter_query = f"event_time lt @cutoff and ({' or '.join(state_clauses)})"

        try:
            entities = self.table_client.query_entities(filter_query, parameters=parameters)
            return [self._from_entity(entity) for entity in entities]
        except Exception as e:
            logger.error(f"Error listing non-terminal statuses: {e}")
            raise TableStorageError(f"Error listing non-terminal statuses: {e}")
