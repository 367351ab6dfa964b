"""
Unit test fixtures: factory-built models.
"""

import pytest

from tests.factories.model_factories import (
    make_job_output_status,
    make_verification_request,
    make_instance_health,
)


@pytest.fixture
def job_output_status_data():
    """Return randomized job output status data dict."""
    return make_job_output_status()


@pytest.fixture
def verification_request_data():
    """Return randomized verification request data dict."""
    return make_verification_request()


@pytest.fixture
def instance_health_data():
    """Return randomized instance health data dict."""
    return make_instance_health()
