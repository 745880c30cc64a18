# src/daily_planner/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

Task services depend on Protocols instead of concrete implementations.
This keeps storage/LLM/notification backends swappable and makes testing easier.
"""

from datetime import date
from typing import Any, Iterable, Protocol

ChatMessage = dict[str, str]
# OpenAI-style chat messages: {"role": "...", "content": "..."}.


class LLMClient(Protocol):
    """Streaming chat completion client (OpenAI/OpenRouter-compatible)."""
    def stream_chat(self, messages: list[ChatMessage], system_prompt: str) -> Iterable[str]: ...


class Notifier(Protocol):
    """Best-effort user notification (desktop banner, terminal, ...)."""
    def notify(self, title: str, message: str) -> None: ...


class TaskRepo(Protocol):
    # Tasks
    def save_task(self, task: Any) -> None: ...
    def load_task(self, task_id: str) -> Any: ...
    def delete_task(self, task_id: str) -> None: ...
    def list_all_tasks(self) -> list[Any]: ...
    def list_tasks_by_category(self, category: str) -> list[Any]: ...

    # Days
    def save_day(self, day: Any) -> None: ...
    def load_day(self, day: date) -> Any: ...

    # Categories
    def save_category(self, category: Any) -> None: ...
    def list_categories(self) -> list[Any]: ...

    # Completion logs
    def log_daily_completion(self, task_id: str, title: str, on: date) -> None: ...
    def is_daily_completed_on_date(self, task_id: str, on: date) -> bool: ...
    def log_task_completion(self, task_id: str, title: str) -> None: ...
