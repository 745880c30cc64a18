# src/daily_planner/tasks/task_models.py

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import UTC, date, datetime
from enum import IntEnum

from ..errors import InvalidPriorityError


def _utcnow() -> datetime:
    return datetime.now(UTC)


class Priority(IntEnum):
    """
    Task priority.

    The integer value is the stable rank used for every sort:
    LOW(1) < MEDIUM(2) < HIGH(3) < CRITICAL(4).
    """

    LOW = 1
    MEDIUM = 2
    HIGH = 3
    CRITICAL = 4

    @property
    def label(self) -> str:
        return self.name.capitalize()

    @classmethod
    def parse(cls, raw: str) -> Priority:
        """Strict parse: full name or first letter, any case. Never defaults."""
        key = (raw or "").strip().lower()
        for p in cls:
            if key in (p.name.lower(), p.name[0].lower()):
                return p
        raise InvalidPriorityError(raw)

    @classmethod
    def from_text(cls, raw: str | None) -> Priority:
        """Lenient parse for stored records: anything unreadable becomes MEDIUM."""
        try:
            return cls.parse(raw or "")
        except InvalidPriorityError:
            return cls.MEDIUM


@dataclass(slots=True)
class Task:
    id: str
    title: str
    priority: Priority
    category: str
    completed: bool
    created_at: datetime
    updated_at: datetime

    description: str | None = None
    due_date: datetime | None = None
    is_daily: bool = False

    @classmethod
    def new(
        cls,
        title: str,
        priority: Priority = Priority.MEDIUM,
        category: str = "default",
        *,
        description: str | None = None,
        due_date: datetime | None = None,
        is_daily: bool = False,
    ) -> Task:
        if not title or not title.strip():
            raise ValueError("title is required")
        now = _utcnow()
        return cls(
            id=str(uuid.uuid4()),
            title=title,
            priority=priority,
            category=category,
            completed=False,
            created_at=now,
            updated_at=now,
            description=description,
            due_date=due_date,
            is_daily=is_daily,
        )

    # ---- mutations (each one refreshes updated_at) ----

    def _touch(self) -> None:
        self.updated_at = _utcnow()

    def mark_complete(self) -> None:
        self.completed = True
        self._touch()

    def mark_incomplete(self) -> None:
        self.completed = False
        self._touch()

    def update_priority(self, priority: Priority) -> None:
        self.priority = priority
        self._touch()

    def update_category(self, category: str) -> None:
        self.category = category
        self._touch()

    def update_daily(self, is_daily: bool) -> None:
        self.is_daily = is_daily
        self._touch()

    def is_due_on(self, day: date) -> bool:
        """True if due_date falls on `day` (calendar date in UTC)."""
        if self.due_date is None:
            return False
        return self.due_date.astimezone(UTC).date() == day


@dataclass(slots=True)
class Category:
    name: str
    description: str | None = None


@dataclass(slots=True)
class Day:
    date: date
    task_ids: list[str] = field(default_factory=list)
    notes: str | None = None

    def add_task(self, task_id: str) -> None:
        if task_id not in self.task_ids:
            self.task_ids.append(task_id)

    def remove_task(self, task_id: str) -> None:
        self.task_ids = [t for t in self.task_ids if t != task_id]


@dataclass(slots=True, frozen=True)
class DailyCompletion:
    """One line of the daily-completion log: task `task_id` was done on `date`."""

    task_id: str
    title: str
    date: date
