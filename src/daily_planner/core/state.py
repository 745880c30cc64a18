# src/daily_planner/core/state.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .ports import LLMClient, Notifier, TaskRepo


@dataclass
class AppState:
    # Settings are kept on the state so commands never read global config.
    settings: Any

    task_store: TaskRepo
    notifier: Notifier

    # Built on first use by the `claude` command (needs an API key).
    llm: LLMClient | None = None
