"""Shared fixtures for course audit tests."""

import json
import sys
from pathlib import Path

import pytest
import requests
from requests.structures import CaseInsensitiveDict

# Add project root to path for imports when running from a checkout
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from course_audit.config import AuditorConfig, AuditConfig, CanvasConfig, RateLimitConfig
from course_audit.client.fetcher import FetchResult
from course_audit.models.course import Course


# --- Configuration Fixtures ---


@pytest.fixture
def canvas_config():
    """CanvasConfig pointing at a fake LMS."""
    return CanvasConfig(
        api_url="https://lms.example.edu/api/v1",
        api_token="test-token",
        account_id=1,
        read_timeout=120,
        read_timeout_floor=60,
    )


@pytest.fixture
def rate_limit_config():
    """RateLimitConfig with the default 700 quota."""
    return RateLimitConfig(max_quota=700)


@pytest.fixture
def audit_config():
    """AuditConfig for term 6253."""
    return AuditConfig(
        term_prefix="6253-",
        target_state="unpublished",
        front_page_view="wiki",
        per_page=100,
        published_assignments_only=False,
    )


@pytest.fixture
def mock_config(tmp_path, canvas_config, rate_limit_config, audit_config):
    """AuditorConfig with temp directories."""
    config = AuditorConfig(
        canvas=canvas_config,
        rate_limit=rate_limit_config,
        audit=audit_config,
    )
    config.data_dir = tmp_path / "data"
    config.reports_dir = tmp_path / "data" / "reports"
    config.log_file = tmp_path / "test.log"
    return config


# --- HTTP Mocking Fixtures ---


@pytest.fixture
def mock_session(mocker):
    """Create a mock requests.Session."""
    session = mocker.MagicMock(spec=requests.Session)
    session.headers = {}
    return session


@pytest.fixture
def mock_response_factory(mocker):
    """Factory for creating mock requests responses."""
    def _create_response(
        status_code=200,
        json_body=None,
        content=None,
        headers=None,
        url="https://lms.example.edu/api/v1/test",
    ):
        response = mocker.MagicMock()
        response.status_code = status_code
        if content is None:
            content = json.dumps(json_body if json_body is not None else []).encode()
        response.content = content
        response.url = url
        response.headers = CaseInsensitiveDict(headers or {})
        return response
    return _create_response


@pytest.fixture
def fetch_result_factory():
    """Factory for FetchResult objects as returned by HttpFetcher."""
    def _create_result(status_code=200, json_body=None, content=None, link=None, url=""):
        if content is None:
            content = json.dumps(json_body if json_body is not None else []).encode()
        headers = CaseInsensitiveDict()
        if link:
            headers["Link"] = link
        return FetchResult(status_code=status_code, headers=headers, body=content, url=url)
    return _create_result


# --- Model Fixtures ---


@pytest.fixture
def course_json():
    """Raw course as returned by the accounts courses endpoint."""
    return {
        "id": 1,
        "name": "English Composition",
        "workflow_state": "unpublished",
        "default_view": "wiki",
        "sis_course_id": "6253-FA-ENG-201",
        "course_format": "online",
        "account_id": 1,
    }


@pytest.fixture
def sample_course(course_json):
    """Decoded unpublished course."""
    return Course.model_validate(course_json)


# --- Time Mock Helpers ---


@pytest.fixture
def mock_sleep(mocker):
    """Mock time.sleep() to skip delays."""
    return mocker.patch("time.sleep")


@pytest.fixture
def mock_random_uniform(mocker):
    """Mock random.uniform() for deterministic jitter."""
    mock = mocker.patch("random.uniform")
    mock.return_value = 0.0
    return mock
