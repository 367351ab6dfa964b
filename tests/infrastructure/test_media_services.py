"""
Media Services job-control client tests with a mocked SDK client.
"""

from datetime import datetime, timezone
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
from azure.core.exceptions import HttpResponseError, ResourceNotFoundError
from azure.mgmt.media.models import JobInputHttp

from config import MediaConfig, MediaInstanceConfig
from core.models import JobErrorRetry, JobState, OnErrorPolicy
from exceptions import ConfigurationError, ContractViolationError, JobControlError
from infrastructure.media_services import (
    MediaServiceClientFactory,
    MediaServicesJobControlClient,
    _to_job_input,
    _to_job_snapshot,
)

_INSTANCE = MediaInstanceConfig(account_name="amsinstance1", subscription_id="sub-1", resource_group="rg-media")
_T0 = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def _sdk_job(state="Finished", output_state="Finished", retry=None):
    error = SimpleNamespace(retry=retry) if retry else None
    return SimpleNamespace(
        id="/subscriptions/sub-1/jobs/job-1",
        name="job-1",
        state=state,
        last_modified=_T0,
        outputs=[SimpleNamespace(asset_name="output-1", state=output_state, start_time=_T0, end_time=None, error=error)],
    )


@pytest.fixture
def sdk():
    return MagicMock()


@pytest.fixture
def client(sdk):
    return MediaServicesJobControlClient(_INSTANCE, sdk)


class TestConversion:

    def test_job_snapshot(self):
        snapshot = _to_job_snapshot(_sdk_job(state="Error", output_state="Error", retry="MayRetry"))
        assert snapshot.state is JobState.ERROR
        output = snapshot.get_output("output-1")
        assert output.state is JobState.ERROR
        assert output.error_retry is JobErrorRetry.MAY_RETRY
        assert output.start_time == _T0

    def test_job_input_from_rest_shape(self):
        job_input = _to_job_input({
            "@odata.type": "#Microsoft.Media.JobInputHttp",
            "baseUri": "https://media.example.com/",
            "files": ["video.mp4"],
        })
        assert isinstance(job_input, JobInputHttp)
        assert job_input.base_uri == "https://media.example.com/"

    def test_job_input_without_type_rejected(self):
        with pytest.raises(ContractViolationError):
            _to_job_input({"baseUri": "https://media.example.com/"})


class TestJobs:

    def test_get_job(self, client, sdk):
        sdk.jobs.get.return_value = _sdk_job()
        snapshot = client.get_job("transform-a", "job-1")
        assert snapshot.name == "job-1"
        sdk.jobs.get.assert_called_once_with(
            transform_name="transform-a", job_name="job-1",
            resource_group_name="rg-media", account_name="amsinstance1",
        )

    def test_get_missing_job(self, client, sdk):
        sdk.jobs.get.side_effect = ResourceNotFoundError("gone")
        assert client.get_job("transform-a", "job-1") is None

    def test_get_job_failure(self, client, sdk):
        sdk.jobs.get.side_effect = HttpResponseError("throttled")
        with pytest.raises(JobControlError):
            client.get_job("transform-a", "job-1")

    def test_delete_missing_job_is_not_an_error(self, client, sdk):
        sdk.jobs.delete.side_effect = ResourceNotFoundError("gone")
        client.delete_job("transform-a", "job-1")

    def test_create_job(self, client, sdk):
        sdk.jobs.create.return_value = _sdk_job(state="Queued", output_state="Queued")
        snapshot = client.create_job(
            "transform-a", "job-1",
            {"@odata.type": "#Microsoft.Media.JobInputHttp", "files": ["video.mp4"]},
            ["output-1"],
        )
        assert snapshot.state is JobState.QUEUED
        job = sdk.jobs.create.call_args.kwargs["parameters"]
        assert [o.asset_name for o in job.outputs] == ["output-1"]


class TestTransformsAndLocators:

    def test_output_policies(self, client, sdk):
        sdk.transforms.get.return_value = SimpleNamespace(outputs=[
            SimpleNamespace(on_error="ContinueJob"),
            SimpleNamespace(on_error=None),
        ])
        assert client.get_transform_output_policies("transform-a") == [
            OnErrorPolicy.CONTINUE_JOB, OnErrorPolicy.STOP_PROCESSING_JOB,
        ]

    def test_missing_locator(self, client, sdk):
        sdk.streaming_locators.get.side_effect = ResourceNotFoundError("gone")
        assert client.get_streaming_locator("streaming-output-1") is None

    def test_create_locator(self, client, sdk):
        sdk.streaming_locators.create.return_value = SimpleNamespace(
            name="streaming-output-1", asset_name="output-1", streaming_policy_name="Predefined_ClearStreamingOnly",
        )
        locator = client.create_streaming_locator("streaming-output-1", "output-1", "Predefined_ClearStreamingOnly")
        assert locator.asset_name == "output-1"
        params = sdk.streaming_locators.create.call_args.kwargs["parameters"]
        assert params.streaming_policy_name == "Predefined_ClearStreamingOnly"


def test_factory_rejects_unknown_instance():
    factory = MediaServiceClientFactory(MediaConfig(instances={"amsinstance1": _INSTANCE}), credential=MagicMock())
    assert factory.instance_names == ["amsinstance1"]
    with pytest.raises(ConfigurationError):
        factory.get_client("amsinstance2")
