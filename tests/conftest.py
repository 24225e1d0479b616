"""
Pytest Configuration and Shared Fixtures

Provides test settings, mocked Pinpoint/HiBob transports, sample webhook
events, and API clients wired to the mocks.
"""

import json
import os
from datetime import date, datetime, timezone
from typing import Any

import pytest
import structlog

# Set test environment before importing application modules
os.environ["PINPOINT_API_KEY"] = "test-pinpoint-key"
os.environ["HIBOB_BASE64_TOKEN"] = "dGVzdDp0b2tlbg=="
os.environ["PINPOINT_API_BASE_URL"] = "https://pinpoint.test/api/v1"
os.environ["HIBOB_API_BASE_URL"] = "https://hibob.test/v1"

from onboarding.config import Settings, get_settings
from onboarding.tools.hibob import HiBobClient
from onboarding.tools.pinpoint import PinpointClient
from tests.mocks.mock_services import HIBOB_BASE_URL, PINPOINT_BASE_URL, MockServices


# --- Time Fixtures ---


@pytest.fixture
def frozen_now() -> datetime:
    """Fixed invocation time for deterministic tests."""
    return datetime(2025, 2, 6, 14, 30, 0, tzinfo=timezone.utc)


@pytest.fixture
def start_date() -> date:
    """Start date HiBob clients in tests are given (day after frozen_now)."""
    return date(2025, 2, 7)


# --- Settings Fixtures ---


@pytest.fixture
def settings() -> Settings:
    """Settings pointing at the mock services."""
    return Settings(
        pinpoint_api_key="test-pinpoint-key",
        pinpoint_api_base_url=PINPOINT_BASE_URL,
        hibob_base64_token="dGVzdDp0b2tlbg==",
        hibob_api_base_url=HIBOB_BASE_URL,
        hibob_default_site="New York (Demo)",
        environment="development",
        log_level="DEBUG",
    )


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Make every test read the environment afresh."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def request_log() -> structlog.stdlib.BoundLogger:
    return structlog.get_logger().bind(request_id="test-request-id")


# --- Mock Service Fixtures ---


@pytest.fixture
def mock_services() -> MockServices:
    """Pinpoint and HiBob mocks configured for a happy-path hire without CV."""
    return MockServices()


@pytest.fixture
def pinpoint_client(settings, request_log, mock_services):
    client = PinpointClient(settings, request_log, transport=mock_services.transport())
    yield client
    client.close()


@pytest.fixture
def hibob_client(settings, request_log, mock_services, start_date):
    client = HiBobClient(
        settings,
        request_log,
        transport=mock_services.transport(),
        start_date_provider=lambda: start_date,
    )
    yield client
    client.close()


# --- Event Fixtures ---


@pytest.fixture
def application_id() -> int:
    return 8863880


@pytest.fixture
def hired_payload(application_id: int) -> dict[str, Any]:
    """Pinpoint webhook body for a hired candidate."""
    return {
        "event": "application_hired",
        "data": {
            "application": {"id": application_id},
            "job": {"id": 4521},
        },
    }


@pytest.fixture
def api_gateway_event():
    """Factory wrapping a body in an API Gateway proxy event."""
    def _create(body: Any, base64_encoded: bool = False) -> dict[str, Any]:
        if not isinstance(body, str):
            body = json.dumps(body)
        return {
            "httpMethod": "POST",
            "path": "/webhooks/pinpoint",
            "headers": {"Content-Type": "application/json"},
            "isBase64Encoded": base64_encoded,
            "body": body,
        }
    return _create


@pytest.fixture
def hired_event(api_gateway_event, hired_payload) -> dict[str, Any]:
    return api_gateway_event(hired_payload)
