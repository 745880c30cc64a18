# src/daily_planner/tasks/task_api.py

"""
Task services on top of the store.

Everything here works on a TaskRepo and plain model objects; printing and
argument parsing belong to the CLI.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import UTC, date, datetime, time
from itertools import groupby

from ..core.ports import ChatMessage, LLMClient, TaskRepo
from ..errors import AmbiguousPrefixError, DailyError, NotFoundError
from .task_models import Category, Day, Priority, Task

logger = logging.getLogger(__name__)

ASSISTANT_SYSTEM_PROMPT = (
    "You are a concise assistant inside a personal task manager. "
    "Use the provided task list as context when answering."
)


# ---- identifier resolution ----


def resolve_task(store: TaskRepo, ident: str) -> Task:
    """
    Find one task by exact id, falling back to id-prefix matching.

    Raises NotFoundError when nothing matches and AmbiguousPrefixError when
    the prefix matches more than one task.
    """
    ident = (ident or "").strip()
    if not ident:
        raise NotFoundError("Empty task ID")

    try:
        return store.load_task(ident)
    except NotFoundError:
        pass
    except DailyError as e:
        logger.debug("Exact lookup failed for id=%s, trying prefix: %s", ident, e)

    matches = [t for t in store.list_all_tasks() if t.id.startswith(ident)]
    if not matches:
        raise NotFoundError(f"No task found with ID starting with '{ident}'")
    if len(matches) > 1:
        raise AmbiguousPrefixError(ident, sorted(t.id for t in matches))
    return matches[0]


# ---- day aggregation ----


def tasks_for_day(store: TaskRepo, on: date) -> list[Task]:
    """
    Build the task list for `on`, without duplicate ids, from:
    1. tasks explicitly scheduled in the Day record (missing ones skipped),
    2. non-daily tasks due on that date (UTC calendar date),
    3. daily tasks with no completion logged for that date.
    """
    day = store.load_day(on)
    seen: set[str] = set()
    out: list[Task] = []

    for task_id in day.task_ids:
        if task_id in seen:
            continue
        try:
            task = store.load_task(task_id)
        except DailyError as e:
            logger.debug("Skipping scheduled task id=%s on %s: %s", task_id, on, e)
            continue
        seen.add(task.id)
        out.append(task)

    all_tasks = [t for t in store.list_all_tasks() if t.id not in seen]

    for task in all_tasks:
        if not task.is_daily and task.is_due_on(on):
            seen.add(task.id)
            out.append(task)

    for task in all_tasks:
        if task.is_daily and task.id not in seen and not store.is_daily_completed_on_date(task.id, on):
            seen.add(task.id)
            out.append(task)

    return out


def sort_for_day(tasks: Iterable[Task]) -> list[Task]:
    return sorted(tasks, key=lambda t: (t.category, -t.priority))


def sort_for_list(tasks: Iterable[Task]) -> list[Task]:
    return sorted(tasks, key=lambda t: (t.category, -t.priority, t.title))


def group_by_category(tasks: Iterable[Task]) -> list[tuple[str, list[Task]]]:
    """Split an already-sorted list into (category, tasks) runs, one per contiguous category."""
    return [(cat, list(group)) for cat, group in groupby(tasks, key=lambda t: t.category)]


# ---- task services ----


def due_from_date(day: date) -> datetime:
    """A due date given as a calendar day means the end of that day, UTC."""
    return datetime.combine(day, time(23, 59, 59), tzinfo=UTC)


def add_task(
    store: TaskRepo,
    *,
    title: str,
    priority: Priority = Priority.MEDIUM,
    category: str = "default",
    description: str | None = None,
    due: date | None = None,
    is_daily: bool = False,
) -> Task:
    task = Task.new(
        title,
        priority,
        category,
        description=description,
        due_date=due_from_date(due) if due is not None else None,
        is_daily=is_daily,
    )
    store.save_task(task)
    logger.info("Task added id=%s category=%s priority=%s daily=%s", task.id, category, priority.label, is_daily)
    return task


def filter_tasks(
    tasks: Iterable[Task],
    *,
    category: str | None = None,
    priority: Priority | None = None,
    incomplete: bool = False,
    completed: bool = False,
) -> list[Task]:
    out = list(tasks)
    if category is not None:
        out = [t for t in out if t.category == category]
    if priority is not None:
        out = [t for t in out if t.priority == priority]
    if incomplete:
        out = [t for t in out if not t.completed]
    elif completed:
        out = [t for t in out if t.completed]
    return out


def complete_task(store: TaskRepo, ident: str, *, on: date | None = None) -> Task:
    """
    Complete a task.

    Daily tasks are logged as done for `on` (default: today) and keep
    completed=False; other tasks are marked complete and recorded in history.
    """
    task = resolve_task(store, ident)
    if task.is_daily:
        day = on or date.today()
        store.log_daily_completion(task.id, task.title, day)
        return task

    task.mark_complete()
    store.save_task(task)
    store.log_task_completion(task.id, task.title)
    logger.info("Task completed id=%s", task.id)
    return task


def uncomplete_task(store: TaskRepo, ident: str) -> Task:
    task = resolve_task(store, ident)
    task.mark_incomplete()
    store.save_task(task)
    return task


def uncomplete_all(store: TaskRepo) -> int:
    count = 0
    for task in store.list_all_tasks():
        if task.completed:
            task.mark_incomplete()
            store.save_task(task)
            count += 1
    logger.info("Marked %d task(s) incomplete", count)
    return count


def delete_task(store: TaskRepo, ident: str) -> Task:
    task = resolve_task(store, ident)
    store.delete_task(task.id)
    return task


def set_priority(store: TaskRepo, ident: str, priority: Priority) -> Task:
    task = resolve_task(store, ident)
    task.update_priority(priority)
    store.save_task(task)
    return task


def move_task(store: TaskRepo, ident: str, category: str) -> Task:
    task = resolve_task(store, ident)
    task.update_category(category)
    store.save_task(task)
    return task


def set_daily(store: TaskRepo, ident: str, is_daily: bool) -> Task:
    task = resolve_task(store, ident)
    task.update_daily(is_daily)
    store.save_task(task)
    return task


def create_category(store: TaskRepo, name: str, description: str | None = None) -> Category:
    name = (name or "").strip()
    if not name:
        raise ValueError("category name is required")
    category = Category(name=name, description=description)
    store.save_category(category)
    return category


def schedule_task(store: TaskRepo, ident: str, on: date) -> tuple[Task, Day]:
    task = resolve_task(store, ident)
    day = store.load_day(on)
    day.add_task(task.id)
    store.save_day(day)
    logger.info("Task scheduled id=%s date=%s", task.id, on)
    return task, day


def unschedule_task(store: TaskRepo, ident: str, on: date) -> tuple[Task, Day]:
    task = resolve_task(store, ident)
    day = store.load_day(on)
    if task.id not in day.task_ids:
        raise NotFoundError(f"Task '{task.title}' is not scheduled for {on}")
    day.remove_task(task.id)
    store.save_day(day)
    return task, day


def set_day_notes(store: TaskRepo, on: date, notes: str | None) -> Day:
    day = store.load_day(on)
    day.notes = notes
    store.save_day(day)
    return day


# ---- LLM helpers ----


def build_task_context(tasks: Iterable[Task]) -> str:
    lines = ["Current tasks:"]
    for task in tasks:
        mark = "x" if task.completed else " "
        lines.append(f"- [{mark}] {task.title} (Priority: {task.priority.label}, Category: {task.category})")
    return "\n".join(lines) + "\n"


def build_user_message(prompt: str, context: str | None) -> ChatMessage:
    if context:
        return {"role": "user", "content": f"Context: {context}\n\nUser question: {prompt}"}
    return {"role": "user", "content": prompt}


def ask_llm(llm: LLMClient, prompt: str, context: str | None = None) -> str:
    """Send one prompt (with optional context) and return the full reply text."""
    chunks = llm.stream_chat([build_user_message(prompt, context)], ASSISTANT_SYSTEM_PROMPT)
    return "".join(chunks).strip()


def ask_about_tasks(llm: LLMClient, prompt: str, tasks: Iterable[Task]) -> str:
    return ask_llm(llm, prompt, build_task_context(tasks))
