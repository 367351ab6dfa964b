"""
Randomized model factories.

Every factory call generates randomized non-identity fields
(timestamps, names, string suffixes) so tests cannot rely on
specific default values.
"""

import random
import string
from datetime import datetime, timezone, timedelta


def _random_suffix(length: int = 6) -> str:
    """Generate random alphanumeric suffix."""
    return "".join(random.choices(string.ascii_lowercase + string.digits, k=length))


def _random_timestamp() -> datetime:
    """Generate random timestamp within last 30 days."""
    offset = random.randint(0, 30 * 24 * 3600)
    return datetime.now(timezone.utc) - timedelta(seconds=offset)


def make_original_job_request(**overrides):
    """
    Build an OriginalJobRequest dict with randomized fields.

    Returns:
        dict suitable for OriginalJobRequest(**result)
    """
    suffix = _random_suffix()
    base = {
        "transform_name": f"transform-{suffix}",
        "job_inputs": {
            "@odata.type": "#Microsoft.Media.JobInputHttp",
            "baseUri": f"https://media-{suffix}.example.com/",
            "files": [f"video-{suffix}.mp4"],
        },
        "output_asset_name": f"output-{suffix}",
    }
    base.update(overrides)
    return base


def make_verification_request(media_service_account_name: str = None, retry_count: int = 0, **overrides):
    """
    Build a JobVerificationRequest dict with randomized fields.

    The output asset name matches the original output asset name, as it
    does for a first submission.

    Returns:
        dict suitable for JobVerificationRequest(**result)
    """
    suffix = _random_suffix()
    original = overrides.pop("original_job_request", None) or make_original_job_request()
    base = {
        "job_id": f"/subscriptions/sub-{suffix}/jobs/job-{suffix}",
        "job_name": f"job-{suffix}",
        "media_service_account_name": media_service_account_name or f"ams{suffix}",
        "job_output_asset_name": original["output_asset_name"],
        "original_job_request": original,
        "retry_count": retry_count,
    }
    base.update(overrides)
    return base


def make_job_output_status(job_output_state=None, **overrides):
    """
    Build a JobOutputStatus dict with randomized fields.

    Returns:
        dict suitable for JobOutputStatus(**result)
    """
    from core.models.enums import JobState

    suffix = _random_suffix()
    base = {
        "event_time": _random_timestamp(),
        "job_output_state": job_output_state or JobState.PROCESSING,
        "job_name": f"job-{suffix}",
        "media_service_account_name": f"ams{suffix}",
        "job_output_asset_name": f"output-{suffix}",
        "transform_name": f"transform-{suffix}",
        "has_retriable_error": False,
    }
    base.update(overrides)
    return base


def make_instance_health(media_service_account_name: str = None, **overrides):
    """
    Build a MediaServiceInstanceHealth dict with randomized usage.

    Returns:
        dict suitable for MediaServiceInstanceHealth(**result)
    """
    from core.models.enums import InstanceHealthState

    base = {
        "media_service_account_name": media_service_account_name or f"ams{_random_suffix()}",
        "health_state": InstanceHealthState.HEALTHY,
        "last_updated": _random_timestamp(),
        "last_used": None,
        "usage_count": 0,
        "is_enabled": True,
    }
    base.update(overrides)
    return base


def make_job_event(job_name: str = None, asset_name: str = None, state: str = "Finished", **overrides):
    """
    Build the fields of a Media Services job output Event Grid event.

    Returns:
        dict with event_type, subject, topic, data, event_time
    """
    suffix = _random_suffix()
    base = {
        "event_type": "Microsoft.Media.JobOutputStateChange",
        "subject": f"transforms/transform-{suffix}/jobs/{job_name or 'job-' + suffix}",
        "topic": (
            f"/subscriptions/sub-{suffix}/resourceGroups/rg-{suffix}"
            f"/providers/Microsoft.Media/mediaservices/ams{suffix}"
        ),
        "data": {
            "previousState": "Processing",
            "output": {
                "@odata.type": "#Microsoft.Media.JobOutputAsset",
                "assetName": asset_name or f"output-{suffix}",
                "error": None,
                "label": f"label-{suffix}",
                "progress": 100,
                "state": state,
            },
        },
        "event_time": _random_timestamp(),
    }
    base.update(overrides)
    return base
