"""
Verification orchestrator scenario tests.

Each test drives JobVerificationService against two fake media service
instances and checks what ends up in the stores and channels.
"""

import logging
from datetime import timedelta

import pytest

from core.models import (
    InstanceHealthState,
    JobErrorRetry,
    JobOutputStatus,
    JobState,
    JobVerificationRequest,
    LocatorSnapshot,
    MediaServiceInstanceHealth,
    OnErrorPolicy,
)
from exceptions import JobControlError, LocatorConflictError, NoHealthyInstanceError
from infrastructure.request_channels import LocalProvisioningChannel
from services import StreamingProvisioningService
from tests.factories.model_factories import make_verification_request
from tests.fakes import FailingVerificationChannel, VerificationWorld



def _request(world, retry_count=0, **overrides) -> JobVerificationRequest:
    return JobVerificationRequest(**make_verification_request(
        media_service_account_name=world.primary.account_name,
        retry_count=retry_count,
        **overrides
    ))


def _seed_job(world, request, state, error_retry=None, client=None):
    client = client or world.primary
    return client.add_job(request.job_name, state, request.job_output_asset_name, error_retry=error_retry)


# ============================================================================
# STUCK JOBS
# ============================================================================

class TestStuckJob:

    def test_two_rechecks_then_give_up(self, world, caplog):
        request = _request(world)
        _seed_job(world, request, JobState.PROCESSING)

        world.service.verify_job(request)
        assert len(world.verification_channel.submitted) == 1
        first, first_delay = world.verification_channel.submitted[0]
        assert first.retry_count == 1
        assert first_delay == timedelta(minutes=30)

        world.service.verify_job(first)
        assert len(world.verification_channel.submitted) == 2
        second, second_delay = world.verification_channel.submitted[1]
        assert second.retry_count == 2
        assert second_delay == timedelta(minutes=60)

        caplog.set_level(logging.WARNING)
        world.service.verify_job(second)
        assert len(world.verification_channel.submitted) == 2
        assert any("max number of retries reached" in r.getMessage() for r in caplog.records)

    def test_stuck_job_is_not_deleted_or_resubmitted(self, world):
        request = _request(world)
        _seed_job(world, request, JobState.QUEUED)

        world.service.verify_job(request)

        assert world.primary.deleted_jobs == []
        assert world.secondary.created_jobs == []
        assert world.primary.created_jobs == []

    def test_missing_job_without_status_is_rechecked(self, world):
        request = _request(world)

        world.service.verify_job(request)

        assert world.status_repository.records == {}
        assert len(world.verification_channel.submitted) == 1
        assert world.verification_channel.submitted[0][0].retry_count == 1

    def test_canceling_is_treated_as_stuck(self, world):
        request = _request(world)
        _seed_job(world, request, JobState.CANCELING)

        world.service.verify_job(request)

        assert len(world.verification_channel.submitted) == 1

    def test_stuck_then_finished(self, world):
        request = _request(world)
        _seed_job(world, request, JobState.PROCESSING)

        world.service.verify_job(request)
        recheck, _ = world.verification_channel.submitted[0]

        _seed_job(world, request, JobState.FINISHED)
        world.service.verify_job(recheck)

        assert len(world.provisioning_channel.submitted) == 1
        provisioning = world.provisioning_channel.submitted[0]
        assert provisioning.processed_asset_name == request.job_output_asset_name
        assert provisioning.streaming_locator_name == f"streaming-{request.original_job_request.output_asset_name}"
        assert world.primary.deleted_jobs == [request.job_name]
        assert len(world.verification_channel.submitted) == 1

        stored = world.status_repository.get_latest(request.job_name, request.job_output_asset_name)
        assert stored.job_output_state is JobState.FINISHED

    def test_repeated_checks_keep_single_status_record(self, world):
        request = _request(world)
        _seed_job(world, request, JobState.PROCESSING)

        world.service.verify_job(request)
        world.service.verify_job(world.verification_channel.submitted[0][0])

        assert len(world.status_repository.records) == 1
        assert world.status_repository.writes == 2


# ============================================================================
# FAILED JOBS
# ============================================================================

class TestFailedJob:

    def test_non_retriable_error_is_deleted_only(self, world):
        request = _request(world)
        _seed_job(world, request, JobState.ERROR, error_retry=JobErrorRetry.DO_NOT_RETRY)

        world.service.verify_job(request)

        assert world.primary.deleted_jobs == [request.job_name]
        assert world.primary.created_jobs == []
        assert world.secondary.created_jobs == []
        assert world.verification_channel.submitted == []

    def test_retriable_error_resubmits_on_another_instance(self, world):
        request = _request(world)
        _seed_job(world, request, JobState.ERROR, error_retry=JobErrorRetry.MAY_RETRY)

        result = world.service.verify_job(request)

        assert world.primary.deleted_jobs == [request.job_name]
        assert len(world.secondary.created_jobs) == 1
        created = world.secondary.created_jobs[0]
        assert created['transform_name'] == request.original_job_request.transform_name
        assert created['job_name'] == request.job_name
        assert created['job_inputs'] == request.original_job_request.job_inputs
        assert created['output_asset_names'] == [request.job_output_asset_name]
        assert request.job_output_asset_name in world.secondary.assets

        assert result.retry_count == 1
        assert result.media_service_account_name == "amsinstance2"

        assert len(world.verification_channel.submitted) == 1
        scheduled, delay = world.verification_channel.submitted[0]
        assert scheduled.retry_count == 1
        assert scheduled.media_service_account_name == "amsinstance2"
        assert scheduled.job_id == world.secondary.jobs[request.job_name].id
        assert delay == timedelta(minutes=30)

        assert world.health_repository.get("amsinstance2").usage_count == 1
        assert world.health_repository.get("amsinstance2").last_used is not None

    def test_resubmitted_job_is_verified_on_new_instance(self, world):
        request = _request(world)
        _seed_job(world, request, JobState.ERROR, error_retry=JobErrorRetry.MAY_RETRY)
        world.service.verify_job(request)
        scheduled, _ = world.verification_channel.submitted[0]

        _seed_job(world, scheduled, JobState.FINISHED, client=world.secondary)
        world.status_repository.records.clear()
        world.service.verify_job(scheduled)

        assert world.secondary.get_job_calls[-1] == (scheduled.original_job_request.transform_name, scheduled.job_name)
        assert world.secondary.deleted_jobs == [scheduled.job_name]
        assert world.provisioning_channel.submitted[0].processed_asset_media_service_account_name == "amsinstance2"

    def test_retriable_error_at_max_retries_gives_up(self, world):
        request = _request(world, retry_count=world.config.max_retry_count)
        _seed_job(world, request, JobState.ERROR, error_retry=JobErrorRetry.MAY_RETRY)

        result = world.service.verify_job(request)

        assert world.primary.deleted_jobs == [request.job_name]
        assert world.secondary.created_jobs == []
        assert world.verification_channel.submitted == []
        assert result.retry_count == world.config.max_retry_count

    def test_continue_job_transform_skips_resubmission(self, world):
        world.secondary.policies = [OnErrorPolicy.CONTINUE_JOB, OnErrorPolicy.CONTINUE_JOB]
        request = _request(world)
        _seed_job(world, request, JobState.ERROR, error_retry=JobErrorRetry.MAY_RETRY)

        result = world.service.verify_job(request)

        assert world.secondary.created_jobs == []
        assert world.verification_channel.submitted == []
        assert result.retry_count == 1
        assert result.media_service_account_name == "amsinstance1"

    def test_stored_retriable_error_skips_poll(self, world):
        request = _request(world)
        world.status_repository.create_or_update(JobOutputStatus(
            job_output_state=JobState.ERROR,
            job_name=request.job_name,
            media_service_account_name=request.media_service_account_name,
            job_output_asset_name=request.job_output_asset_name,
            has_retriable_error=True,
        ))

        world.service.verify_job(request)

        assert world.primary.get_job_calls == []
        assert len(world.secondary.created_jobs) == 1

    def test_no_available_instance(self, world):
        for name in ("amsinstance1", "amsinstance2"):
            world.instance_health_service.update_health_state(name, InstanceHealthState.UNHEALTHY)
        request = _request(world)
        _seed_job(world, request, JobState.ERROR, error_retry=JobErrorRetry.MAY_RETRY)

        with pytest.raises(NoHealthyInstanceError):
            world.service.verify_job(request)

        assert world.primary.deleted_jobs == [request.job_name]


# ============================================================================
# FINISHED AND CANCELED JOBS
# ============================================================================

class TestFinishedJob:

    def test_polled_finished_is_provisioned_and_deleted(self, world):
        request = _request(world)
        _seed_job(world, request, JobState.FINISHED)

        world.service.verify_job(request)

        assert len(world.provisioning_channel.submitted) == 1
        provisioning = world.provisioning_channel.submitted[0]
        assert provisioning.processed_asset_media_service_account_name == "amsinstance1"
        assert world.primary.deleted_jobs == [request.job_name]
        assert world.verification_channel.submitted == []

    def test_stored_finished_is_deleted_without_provisioning(self, world):
        request = _request(world)
        world.status_repository.create_or_update(JobOutputStatus(
            job_output_state=JobState.FINISHED,
            job_name=request.job_name,
            media_service_account_name=request.media_service_account_name,
            job_output_asset_name=request.job_output_asset_name,
        ))

        world.service.verify_job(request)

        assert world.primary.get_job_calls == []
        assert world.provisioning_channel.submitted == []
        assert world.primary.deleted_jobs == [request.job_name]

    def test_stored_non_terminal_status_is_polled(self, world):
        request = _request(world)
        world.status_repository.create_or_update(JobOutputStatus(
            job_output_state=JobState.PROCESSING,
            job_name=request.job_name,
            media_service_account_name=request.media_service_account_name,
            job_output_asset_name=request.job_output_asset_name,
        ))
        _seed_job(world, request, JobState.FINISHED)

        world.service.verify_job(request)

        assert world.primary.get_job_calls == [(request.original_job_request.transform_name, request.job_name)]
        assert len(world.provisioning_channel.submitted) == 1

    def test_canceled_job_is_left_alone(self, world):
        request = _request(world)
        _seed_job(world, request, JobState.CANCELED)

        world.service.verify_job(request)

        assert world.primary.deleted_jobs == []
        assert world.provisioning_channel.submitted == []
        assert world.verification_channel.submitted == []


# ============================================================================
# VERIFICATION SUBMISSION
# ============================================================================

class TestVerificationSubmission:

    def test_transient_failure_is_retried(self):
        world = VerificationWorld(verification_channel=FailingVerificationChannel(failures=1))
        request = _request(world)
        _seed_job(world, request, JobState.PROCESSING)

        world.service.verify_job(request)

        assert world.verification_channel.attempts == 2
        assert len(world.verification_channel.submitted) == 1
        assert world.sleeps == [1.0]

    def test_exhausted_retries_are_swallowed(self, caplog):
        world = VerificationWorld(verification_channel=FailingVerificationChannel(failures=10))
        request = _request(world)
        _seed_job(world, request, JobState.PROCESSING)
        caplog.set_level(logging.ERROR)

        result = world.service.verify_job(request)

        assert result.retry_count == 1
        assert world.verification_channel.attempts == 3
        assert world.verification_channel.submitted == []
        assert world.sleeps == [1.0, 1.0]
        assert any("failed to schedule verification" in r.getMessage() for r in caplog.records)


def test_job_control_failure_propagates(world, monkeypatch):
    request = _request(world)

    def _boom(transform_name, job_name):
        raise JobControlError("service unavailable")

    monkeypatch.setattr(world.primary, "get_job", _boom)

    with pytest.raises(JobControlError):
        world.service.verify_job(request)
    assert world.verification_channel.submitted == []


def test_end_to_end_stuck_job(world):
    request = _request(world)
    job = _seed_job(world, request, JobState.SCHEDULED)

    world.service.verify_job(request)

    stored = world.status_repository.get_latest(request.job_name, request.job_output_asset_name)
    assert stored.job_output_state is JobState.SCHEDULED
    assert stored.media_service_account_name == "amsinstance1"
    assert stored.transform_name == request.original_job_request.transform_name
    assert len(world.verification_channel.submitted) == 1
    scheduled, _ = world.verification_channel.submitted[0]
    assert scheduled.retry_count == 1
    assert scheduled.job_id == request.job_id
    assert world.primary.jobs[request.job_name] is job


# ============================================================================
# FAILOVER SELECTION
# ============================================================================

class TestFailoverSelection:

    def test_failed_instance_is_not_reselected_when_records_tie(self):
        world = VerificationWorld(health_records=[
            MediaServiceInstanceHealth(media_service_account_name="amsinstance1"),
            MediaServiceInstanceHealth(media_service_account_name="amsinstance2"),
        ])
        request = _request(world)
        _seed_job(world, request, JobState.ERROR, error_retry=JobErrorRetry.MAY_RETRY)

        result = world.service.verify_job(request)

        assert result.media_service_account_name == "amsinstance2"
        assert world.primary.created_jobs == []
        assert len(world.secondary.created_jobs) == 1

    def test_failed_instance_reused_when_it_is_the_only_one(self):
        world = VerificationWorld(health_records=[
            MediaServiceInstanceHealth(media_service_account_name="amsinstance1"),
            MediaServiceInstanceHealth(
                media_service_account_name="amsinstance2", health_state=InstanceHealthState.UNHEALTHY
            ),
        ])
        request = _request(world)
        _seed_job(world, request, JobState.ERROR, error_retry=JobErrorRetry.MAY_RETRY)

        result = world.service.verify_job(request)

        assert result.media_service_account_name == "amsinstance1"
        assert len(world.primary.created_jobs) == 1
        assert world.secondary.created_jobs == []

    def test_resubmission_replaces_stored_error(self, world):
        request = _request(world)
        _seed_job(world, request, JobState.ERROR, error_retry=JobErrorRetry.MAY_RETRY)
        world.service.verify_job(request)
        scheduled, _ = world.verification_channel.submitted[0]

        stored = world.status_repository.get_latest(scheduled.job_name, scheduled.job_output_asset_name)
        assert stored.job_output_state is JobState.QUEUED
        assert stored.media_service_account_name == "amsinstance2"

        world.service.verify_job(scheduled)

        assert world.secondary.get_job_calls == [(scheduled.original_job_request.transform_name, scheduled.job_name)]
        assert world.secondary.deleted_jobs == []
        assert len(world.verification_channel.submitted) == 2


def test_finished_job_deleted_when_provisioning_conflicts(world):
    world.service.provisioning_channel = LocalProvisioningChannel(
        StreamingProvisioningService(world.client_factory, "Predefined_ClearStreamingOnly")
    )
    request = _request(world)
    locator_name = f"streaming-{request.original_job_request.output_asset_name}"
    world.primary.locators[locator_name] = LocatorSnapshot(
        name=locator_name, asset_name="someone-else", streaming_policy_name="Predefined_ClearStreamingOnly"
    )
    _seed_job(world, request, JobState.FINISHED)

    with pytest.raises(LocatorConflictError):
        world.service.verify_job(request)

    assert world.primary.deleted_jobs == [request.job_name]
