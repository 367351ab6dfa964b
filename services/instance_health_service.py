"""
Instance Health Service - Media Service Instance Selection.

Chooses which media service instance receives a resubmitted job and keeps
usage bookkeeping for that choice.

Selection:
    1. Enabled instances in Healthy state
    2. If none, enabled instances in Degraded state
    3. If none, NoHealthyInstanceError
    The instance a job just failed on is skipped unless it is the only
    enabled Healthy or Degraded instance.
    Among candidates the least recently used wins (never used first), ties
    broken by lowest usage_count, then by name.

Exports:
    InstanceHealthService: Instance selection and usage tracking
"""

from datetime import datetime, timezone
from typing import Iterable, List, Optional

from core.models import InstanceHealthState, MediaServiceInstanceHealth
from exceptions import NoHealthyInstanceError
from infrastructure.interface_repository import IInstanceHealthRepository
from util_logger import LoggerFactory, ComponentType

logger = LoggerFactory.create_logger(ComponentType.SERVICE, "InstanceHealthService")

_NEVER_USED = datetime.min.replace(tzinfo=timezone.utc)


def _selection_key(record: MediaServiceInstanceHealth):
    return (record.last_used or _NEVER_USED, record.usage_count, record.media_service_account_name)


class InstanceHealthService:
    """Instance selection backed by an instance health repository."""

    def __init__(self, repository: IInstanceHealthRepository):
        self.repository = repository

    def _candidates(self, records: List[MediaServiceInstanceHealth], state: InstanceHealthState) -> List[MediaServiceInstanceHealth]:
        return [r for r in records if r.is_enabled and r.health_state == state]

    def get_next_available_instance(self, exclude: Optional[str] = None) -> str:
        """
        Name of the instance that should receive the next job.

        Args:
            exclude: Instance to avoid, usually the one where the job just
                failed. It is chosen only when no other enabled Healthy or
                Degraded instance exists.

        Raises:
            NoHealthyInstanceError: If no enabled Healthy or Degraded instance exists
        """
        records = self.repository.list()
        others = [r for r in records if r.media_service_account_name != exclude]

        candidates = self._select_tier(others)
        if not candidates and exclude is not None:
            candidates = self._select_tier(records)
            if candidates:
                logger.warning(f"No other media service instance available, reusing {exclude}")

        if not candidates:
            logger.error(f"No available media service instance among {len(records)} records")
            raise NoHealthyInstanceError("No healthy or degraded media service instance is enabled")

        selected = min(candidates, key=_selection_key)
        logger.info(
            f"InstanceHealthService.get_next_available_instance selected={selected.media_service_account_name} "
            f"state={selected.health_state.value} usage_count={selected.usage_count} excluded={exclude}"
        )
        return selected.media_service_account_name

    def _select_tier(self, records: List[MediaServiceInstanceHealth]) -> List[MediaServiceInstanceHealth]:
        candidates = self._candidates(records, InstanceHealthState.HEALTHY)
        if not candidates:
            candidates = self._candidates(records, InstanceHealthState.DEGRADED)
            if candidates:
                logger.warning("No healthy media service instance, falling back to degraded instances")
        return candidates

    def record_instance_usage(self, media_service_account_name: str) -> MediaServiceInstanceHealth:
        """Count one submitted job against the instance."""
        now = datetime.now(timezone.utc)
        record = self.repository.get(media_service_account_name)
        if record is None:
            record = MediaServiceInstanceHealth(media_service_account_name=media_service_account_name)

        record = record.model_copy(update={
            'usage_count': record.usage_count + 1,
            'last_used': now,
        })
        return self.repository.create_or_update(record)

    def update_health_state(self, media_service_account_name: str, health_state: InstanceHealthState) -> MediaServiceInstanceHealth:
        """Set the health state of one instance."""
        record = self.repository.get(media_service_account_name)
        if record is None:
            record = MediaServiceInstanceHealth(media_service_account_name=media_service_account_name)

        if record.health_state != health_state:
            logger.info(
                f"Instance {media_service_account_name} health changed "
                f"{record.health_state.value} -> {health_state.value}"
            )

        record = record.model_copy(update={
            'health_state': health_state,
            'last_updated': datetime.now(timezone.utc),
        })
        return self.repository.create_or_update(record)

    def ensure_instances(self, media_service_account_names: Iterable[str]) -> List[str]:
        """
        Create Healthy records for configured instances that have none.

        Returns:
            Names of the records created
        """
        existing = {r.media_service_account_name for r in self.repository.list()}
        created = []
        for name in media_service_account_names:
            if name in existing:
                continue
            self.repository.create_or_update(MediaServiceInstanceHealth(media_service_account_name=name))
            created.append(name)

        if created:
            logger.info(f"Created health records for instances: {created}")
        return created
