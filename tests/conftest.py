"""Pytest configuration and fixtures for test suite."""

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, Mock, patch

import pytest

from better_projects_ai.config import Settings
from better_projects_ai.services.summary_cache import SummaryCache
from better_projects_ai.services.summary_service import SummaryService
from better_projects_ai.services.task_draft_service import TaskDraftService
from better_projects_ai.utils.llm_client import LLMClient
from better_projects_ai.workspace import sample_workspace

GENERATED_SUMMARY = """# Executive Summary: API Integration for Payment Gateway

Work is progressing well.

## For the Product Owner
On track for the release.

## Risk Assessment
* **Low risk**: None worth noting"""


class FakeClock:
    """Controllable clock for cache expiry tests."""

    def __init__(self, start: datetime = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)):
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> None:
        self.current += timedelta(**kwargs)


@pytest.fixture
def settings():
    """Settings isolated from the environment and any .env file."""
    return Settings(
        _env_file=None,
        openrouter_api_key="test-key",
        default_model="openai/gpt-4o",
        stream_interval_ms=0,
    )


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    return SummaryCache(expiration=timedelta(hours=24), clock=clock)


@pytest.fixture
def workspace():
    return sample_workspace()


@pytest.fixture
def llm_client():
    """LLM client double returning a fixed Markdown summary."""
    client = Mock(spec=LLMClient)
    client.available = True
    client.complete = AsyncMock(return_value=GENERATED_SUMMARY)
    return client


@pytest.fixture
def summary_service(cache, llm_client, workspace, settings):
    return SummaryService(
        cache=cache,
        llm_client=llm_client,
        workspace=workspace,
        default_model=settings.default_model,
        allowed_models=settings.allowed_model_ids,
    )


@pytest.fixture
def task_draft_service(llm_client, summary_service):
    return TaskDraftService(llm_client, summary_service)


@pytest.fixture
def test_client(settings, llm_client):
    """TestClient running the app lifespan with the LLM double."""
    from fastapi.testclient import TestClient

    from better_projects_ai.main import create_app

    app = create_app(settings, llm_client=llm_client)
    with TestClient(app) as client:
        yield client


# Pytest configuration
def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers",
        "integration: mark test as integration test (deselect with '-m \"not integration\"')",
    )
    config.addinivalue_line(
        "markers", "slow: mark test as slow running (deselect with '-m \"not slow\"')"
    )


# Auto-use fixture to mock external dependencies
@pytest.fixture(autouse=True)
def mock_external_apis():
    """Mock external API calls for all tests."""
    with patch("litellm.acompletion", new_callable=AsyncMock) as mock_acompletion:
        mock_response = Mock()
        mock_response.choices = [Mock()]
        mock_response.choices[0].message = Mock(content="Mocked response")
        mock_response.choices[0].finish_reason = "stop"
        mock_acompletion.return_value = mock_response

        yield {"acompletion": mock_acompletion}
