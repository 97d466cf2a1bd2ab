"""Global test configuration and fixtures."""

import os
from unittest.mock import AsyncMock, Mock

import pytest

# Keep tests away from real keys, files and services
os.environ["ENVIRONMENT"] = "testing"
os.environ["OPENAI_API_KEY"] = ""
os.environ["GEMINI_API_KEY"] = ""
os.environ["PROJECT_STORAGE"] = "memory"
os.environ["LOG_FORMAT"] = "console"

from clprompt.application.scheduling import ManualScheduler
from clprompt.application.workspace import WorkspaceController
from clprompt.infra.storage.key_value import InMemoryKeyValueStore


@pytest.fixture
def scheduler() -> ManualScheduler:
    """Virtual clock; timers fire only when advanced."""
    return ManualScheduler()


@pytest.fixture
def code_service() -> Mock:
    service = Mock()
    service.generate_code = AsyncMock(return_value='note1.content: "hi"')
    return service


@pytest.fixture
def summary_service() -> Mock:
    service = Mock()
    service.summarize_code = AsyncMock(return_value="Shows a greeting")
    return service


@pytest.fixture
def assistant() -> Mock:
    service = Mock()
    service.ask = AsyncMock(return_value="Try a slider next.")
    return service


@pytest.fixture
def storage() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore(quota_bytes=64 * 1024)


@pytest.fixture
def workspace(scheduler, code_service, summary_service, assistant, storage) -> WorkspaceController:
    """Workspace with one slide, a manual clock and mocked services."""
    return WorkspaceController(
        scheduler=scheduler,
        code_service=code_service,
        summary_service=summary_service,
        assistant=assistant,
        storage=storage,
    )
