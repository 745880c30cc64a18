# src/daily_planner/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures the data directory exists (TaskStore creates its layout),
- wires concrete implementations into AppState (store, notifier, LLM).
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..connectors.desktop_notifier import DesktopNotifier
from ..core.ports import LLMClient
from ..core.state import AppState
from ..llm.client import OpenRouterLLMClient
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    return AppState(
        settings=settings,
        task_store=TaskStore(settings.data_dir),
        notifier=DesktopNotifier(),
    )


def get_llm(state: AppState) -> LLMClient:
    """Return the state's LLM client, creating the OpenRouter one on first use."""
    if state.llm is None:
        state.llm = OpenRouterLLMClient(state.settings)
        logger.debug("LLM client created models=%s", getattr(state.settings, "llm_models", []))
    return state.llm
