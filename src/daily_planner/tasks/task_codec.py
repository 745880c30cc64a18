# src/daily_planner/tasks/task_codec.py

"""
Line-oriented `key: value` codec for tasks, days and categories.

Format rules:
- one field per line, split at the first ": "
- optional fields are omitted entirely when absent
- unknown keys and lines without a separator are ignored on decode
- values cannot span lines: anything after a newline is cut off on decode

Decoding is strict about required fields (MissingFieldError) and lenient about
values: a bad priority falls back to MEDIUM, a bad due_date is dropped.
"""

from __future__ import annotations

import logging
from datetime import UTC, date, datetime

from ..errors import MissingFieldError
from .task_models import Category, Day, Priority, Task

logger = logging.getLogger(__name__)

SEPARATOR = ": "


def _parse_lines(text: str) -> dict[str, str]:
    fields: dict[str, str] = {}
    # Only "\n" ends a line; other control characters are part of the value.
    for line in text.split("\n"):
        line = line.removesuffix("\r")
        key, sep, value = line.partition(SEPARATOR)
        if not sep:
            continue
        # First occurrence of a key wins.
        fields.setdefault(key.strip(), value)
    return fields


def _format_lines(pairs: list[tuple[str, str]]) -> str:
    return "\n".join(f"{k}{SEPARATOR}{v}" for k, v in pairs) + "\n"


def _required(fields: dict[str, str], record: str, key: str) -> str:
    value = fields.get(key)
    if value is None or value.strip() == "":
        raise MissingFieldError(record, key)
    return value


def _parse_bool(raw: str | None) -> bool:
    return (raw or "").strip().lower() == "true"


def _parse_timestamp(raw: str | None) -> datetime | None:
    if raw is None:
        return None
    try:
        ts = datetime.fromisoformat(raw.strip())
    except ValueError:
        return None
    # Timestamps without an offset are UTC.
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=UTC)
    return ts


def _format_timestamp(ts: datetime) -> str:
    return ts.isoformat()


# ---- tasks ----


def encode_task(task: Task) -> str:
    pairs = [
        ("id", task.id),
        ("title", task.title),
        ("priority", task.priority.label),
        ("category", task.category),
        ("completed", "true" if task.completed else "false"),
        ("created_at", _format_timestamp(task.created_at)),
        ("updated_at", _format_timestamp(task.updated_at)),
        ("is_daily", "true" if task.is_daily else "false"),
    ]
    if task.description is not None:
        pairs.append(("description", task.description))
    if task.due_date is not None:
        pairs.append(("due_date", _format_timestamp(task.due_date)))
    return _format_lines(pairs)


def decode_task(text: str) -> Task:
    fields = _parse_lines(text)

    task_id = _required(fields, "task", "id")
    title = _required(fields, "task", "title")

    # created_at/updated_at have no sensible default; treat them as required.
    created_at = _parse_timestamp(fields.get("created_at"))
    if created_at is None:
        raise MissingFieldError("task", "created_at")
    updated_at = _parse_timestamp(fields.get("updated_at"))
    if updated_at is None:
        raise MissingFieldError("task", "updated_at")

    due_raw = fields.get("due_date")
    due_date = _parse_timestamp(due_raw)
    if due_raw is not None and due_date is None:
        logger.debug("Dropping unparseable due_date=%r for task id=%s", due_raw, task_id)

    return Task(
        id=task_id,
        title=title,
        priority=Priority.from_text(fields.get("priority")),
        category=fields.get("category") or "default",
        completed=_parse_bool(fields.get("completed")),
        created_at=created_at,
        updated_at=updated_at,
        description=fields.get("description"),
        due_date=due_date,
        is_daily=_parse_bool(fields.get("is_daily")),
    )


# ---- days ----


def encode_day(day: Day) -> str:
    pairs = [("date", day.date.isoformat())]
    if day.task_ids:
        pairs.append(("tasks", ",".join(day.task_ids)))
    if day.notes is not None:
        pairs.append(("notes", day.notes))
    return _format_lines(pairs)


def decode_day(text: str) -> Day:
    fields = _parse_lines(text)

    raw_date = _required(fields, "day", "date")
    try:
        day_date = date.fromisoformat(raw_date.strip())
    except ValueError:
        raise MissingFieldError("day", "date") from None

    raw_tasks = fields.get("tasks") or ""
    task_ids = [t.strip() for t in raw_tasks.split(",") if t.strip()]

    return Day(date=day_date, task_ids=task_ids, notes=fields.get("notes"))


# ---- categories ----


def encode_category(category: Category) -> str:
    pairs = [("name", category.name)]
    if category.description is not None:
        pairs.append(("description", category.description))
    return _format_lines(pairs)


def decode_category(text: str) -> Category:
    fields = _parse_lines(text)
    return Category(
        name=_required(fields, "category", "name"),
        description=fields.get("description"),
    )
