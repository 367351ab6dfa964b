"""
Job Output Status Sync Service - Lost Notification Recovery.

Runs from a timer. Every stored status that is still non-terminal after
status_sync_min_age_minutes is re-polled from its owning instance; when the
authoritative state differs, the fresh status goes through the ingest path,
so a Finished output still gets its provisioning request.

Exports:
    JobOutputStatusSyncService: Sweep coordinator
    StatusSyncResult: Summary of one sweep
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from config import VerificationConfig
from infrastructure.interface_repository import IJobControlClientFactory, IJobOutputStatusRepository
from services.job_output_status_service import JobOutputStatusService
from services.media_helpers import derive_job_output_status
from util_logger import LoggerFactory, ComponentType

logger = LoggerFactory.create_logger(ComponentType.SERVICE, "JobOutputStatusSyncService")


@dataclass
class StatusSyncResult:
    """Result of a status sync sweep."""

    checked: int = 0
    updated: int = 0
    missing: int = 0
    failed: int = 0
    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    completed_at: Optional[datetime] = None

    def complete(self):
        self.completed_at = datetime.now(timezone.utc)

    @property
    def duration_ms(self) -> int:
        if self.completed_at:
            return int((self.completed_at - self.started_at).total_seconds() * 1000)
        return 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "checked": self.checked,
            "updated": self.updated,
            "missing": self.missing,
            "failed": self.failed,
            "started_at": self.started_at.isoformat(),
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "duration_ms": self.duration_ms,
        }


class JobOutputStatusSyncService:
    """
    Re-polls stale non-terminal statuses.

    Usage:
        service = JobOutputStatusSyncService(repo, client_factory, ingest, config.verification)
        summary = service.sync_job_output_status()
    """

    def __init__(
        self,
        status_repository: IJobOutputStatusRepository,
        client_factory: IJobControlClientFactory,
        job_output_status_service: JobOutputStatusService,
        verification_config: VerificationConfig
    ):
        self.status_repository = status_repository
        self.client_factory = client_factory
        self.job_output_status_service = job_output_status_service
        self.config = verification_config

    def sync_job_output_status(self, current_time: Optional[datetime] = None) -> Dict[str, Any]:
        """
        Run one sweep.

        Args:
            current_time: Reference time (now if omitted)

        Returns:
            Summary dict with checked, updated, missing and failed counts
        """
        current_time = current_time or datetime.now(timezone.utc)
        cutoff = current_time - timedelta(minutes=self.config.status_sync_min_age_minutes)
        result = StatusSyncResult()

        stale = self.status_repository.list_non_terminal(older_than=cutoff)
        logger.info(f"JobOutputStatusSyncService found {len(stale)} non-terminal statuses older than {cutoff.isoformat()}")

        for status in stale:
            result.checked += 1
            try:
                client = self.client_factory.get_client(status.media_service_account_name)
                job = client.get_job(status.transform_name, status.job_name)
            except Exception as e:
                result.failed += 1
                logger.error(
                    f"JobOutputStatusSyncService failed to load job: job_name={status.job_name} "
                    f"instance={status.media_service_account_name}: {type(e).__name__}: {e}"
                )
                continue

            if job is None:
                result.missing += 1
                logger.info(f"JobOutputStatusSyncService job not found, skipping: job_name={status.job_name}")
                continue

            fresh = derive_job_output_status(
                job,
                media_service_account_name=status.media_service_account_name,
                job_output_asset_name=status.job_output_asset_name,
                transform_name=status.transform_name,
            )
            if fresh.job_output_state == status.job_output_state:
                continue

            logger.info(
                f"JobOutputStatusSyncService state changed: job_name={status.job_name} "
                f"{status.job_output_state.value} -> {fresh.job_output_state.value}"
            )
            try:
                self.job_output_status_service.process_job_output_status(fresh)
            except Exception as e:
                result.failed += 1
                logger.error(
                    f"JobOutputStatusSyncService failed to ingest status: job_name={status.job_name} "
                    f"state={fresh.job_output_state.value}: {type(e).__name__}: {e}"
                )
                continue
            result.updated += 1

        result.complete()
        logger.info(f"JobOutputStatusSyncService sweep completed: {result.to_dict()}")
        return result.to_dict()
