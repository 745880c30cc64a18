# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from daily_planner.core.state import AppState
from daily_planner.tasks.task_store import TaskStore

from .fakes import FakeLLMClient, FakeNotifier


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the LLM client.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated from the caller's environment and ~/.daily.
    """
    return SimpleNamespace(
        app_name="daily-test",
        log_level="WARNING",
        data_dir=tmp_path / "data",
        log_dir=tmp_path / "logs",
        reminder_time="09:00",
        openrouter_api_key=None,
        openrouter_base_url="https://openrouter.example/api/v1",
        llm_models=["model-a", "model-b"],
        llm_max_tokens=256,
        extra_headers={},
        llm_connect_timeout=1.0,
        llm_read_timeout=2.0,
        llm_first_token_timeout=2.0,
    )


@pytest.fixture()
def store(settings: SimpleNamespace) -> TaskStore:
    return TaskStore(settings.data_dir)


@pytest.fixture()
def state(settings: SimpleNamespace, store: TaskStore) -> AppState:
    """
    AppState wired with deterministic fakes.

    NOTE: the real TaskStore is used on tmp_path because its on-disk
    behaviour is part of what we want to test.
    """
    return AppState(
        settings=settings,
        task_store=store,
        notifier=FakeNotifier(),
        llm=FakeLLMClient(),
    )
