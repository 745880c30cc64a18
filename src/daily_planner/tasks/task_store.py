# src/daily_planner/tasks/task_store.py

from __future__ import annotations

import logging
import os
from collections.abc import Callable
from datetime import UTC, date, datetime
from pathlib import Path
from typing import TypeVar

from ..errors import DailyError, NotFoundError, StorageIOError
from .task_codec import decode_category, decode_day, decode_task, encode_category, encode_day, encode_task
from .task_models import Category, DailyCompletion, Day, Task

logger = logging.getLogger(__name__)

T = TypeVar("T")

RECORD_SUFFIX = ".txt"
DAILY_LOG_NAME = "daily_completions.log"
HISTORY_LOG_NAME = "history.log"


def _safe_name(name: str) -> bool:
    """A record name must map to exactly one file inside its directory."""
    return bool(name) and name not in (".", "..") and Path(name).name == name and "\\" not in name


def _read_text(path: Path) -> str:
    with open(path, encoding="utf-8", newline="") as f:
        return f.read()


def _log_field(value: str) -> str:
    return value.replace("\t", " ").replace("\r", " ").replace("\n", " ")


class TaskStore:
    """
    Flat-file task store.

    Layout under the data root:
    - tasks/<id>.txt, days/<YYYY-MM-DD>.txt, categories/<name>.txt (key: value records)
    - daily_completions.log: one "date<TAB>task_id<TAB>title" line per daily completion
    - history.log: one "timestamp<TAB>task_id<TAB>title" line per regular completion

    Writes go through a temp file + os.replace; last write wins, no locking.
    """

    def __init__(self, data_dir: str | Path) -> None:
        self._root = Path(data_dir)
        self._tasks_dir = self._root / "tasks"
        self._days_dir = self._root / "days"
        self._categories_dir = self._root / "categories"
        self._daily_log = self._root / DAILY_LOG_NAME
        self._history_log = self._root / HISTORY_LOG_NAME

        try:
            for d in (self._root, self._tasks_dir, self._days_dir, self._categories_dir):
                d.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageIOError(f"Cannot create data directory {self._root}: {e}") from e

        logger.debug("TaskStore ready root=%s", self._root)

    @property
    def root(self) -> Path:
        return self._root

    # ---- low-level helpers ----

    def _task_path(self, task_id: str) -> Path:
        return self._tasks_dir / f"{task_id}{RECORD_SUFFIX}"

    def _day_path(self, day: date) -> Path:
        return self._days_dir / f"{day.isoformat()}{RECORD_SUFFIX}"

    def _category_path(self, name: str) -> Path:
        return self._categories_dir / f"{name}{RECORD_SUFFIX}"

    @staticmethod
    def _write_atomic(path: Path, content: str) -> None:
        tmp = path.with_name(path.name + ".tmp")
        try:
            tmp.write_text(content, "utf-8", newline="")
            os.replace(tmp, path)
        except OSError as e:
            raise StorageIOError(f"Failed to write {path}: {e}") from e

    @staticmethod
    def _append_line(path: Path, line: str) -> None:
        try:
            with open(path, "a", encoding="utf-8") as f:
                f.write(line + "\n")
        except OSError as e:
            raise StorageIOError(f"Failed to append to {path}: {e}") from e

    @staticmethod
    def _read_all(directory: Path, decode: Callable[[str], T]) -> list[T]:
        """
        Decode every record file in `directory`.

        A single unreadable or malformed file is logged and skipped; it never
        aborts the listing.
        """
        out: list[T] = []
        try:
            paths = sorted(p for p in directory.iterdir() if p.suffix == RECORD_SUFFIX)
        except FileNotFoundError:
            return out
        except OSError as e:
            raise StorageIOError(f"Cannot list {directory}: {e}") from e

        for path in paths:
            try:
                out.append(decode(_read_text(path)))
            except (OSError, UnicodeDecodeError, DailyError) as e:
                logger.warning("Skipping unreadable record %s: %s", path, e)
        return out

    # ---- tasks ----

    def save_task(self, task: Task) -> None:
        if not _safe_name(task.id):
            raise ValueError(f"invalid task id: {task.id!r}")
        self._write_atomic(self._task_path(task.id), encode_task(task))
        logger.debug("Task saved id=%s", task.id)

    def load_task(self, task_id: str) -> Task:
        if not _safe_name(task_id):
            raise NotFoundError(f"No task found with ID '{task_id}'")
        path = self._task_path(task_id)
        try:
            text = _read_text(path)
        except FileNotFoundError:
            raise NotFoundError(f"No task found with ID '{task_id}'") from None
        except (OSError, UnicodeDecodeError) as e:
            raise StorageIOError(f"Failed to read {path}: {e}") from e
        return decode_task(text)

    def delete_task(self, task_id: str) -> None:
        if not _safe_name(task_id):
            raise NotFoundError(f"No task found with ID '{task_id}'")
        try:
            self._task_path(task_id).unlink()
        except FileNotFoundError:
            raise NotFoundError(f"No task found with ID '{task_id}'") from None
        except OSError as e:
            raise StorageIOError(f"Failed to delete task {task_id}: {e}") from e
        logger.info("Task deleted id=%s", task_id)

    def list_all_tasks(self) -> list[Task]:
        return self._read_all(self._tasks_dir, decode_task)

    def list_tasks_by_category(self, category: str) -> list[Task]:
        return [t for t in self.list_all_tasks() if t.category == category]

    def count_tasks(self) -> int:
        return len(self.list_all_tasks())

    # ---- days ----

    def save_day(self, day: Day) -> None:
        self._write_atomic(self._day_path(day.date), encode_day(day))
        logger.debug("Day saved date=%s tasks=%d", day.date, len(day.task_ids))

    def load_day(self, day: date) -> Day:
        """Return the stored Day, or a fresh empty one if nothing was saved for `day`."""
        path = self._day_path(day)
        try:
            text = _read_text(path)
        except FileNotFoundError:
            return Day(date=day)
        except (OSError, UnicodeDecodeError) as e:
            raise StorageIOError(f"Failed to read {path}: {e}") from e
        return decode_day(text)

    # ---- categories ----

    def save_category(self, category: Category) -> None:
        if not _safe_name(category.name):
            raise ValueError(f"invalid category name: {category.name!r}")
        self._write_atomic(self._category_path(category.name), encode_category(category))
        logger.debug("Category saved name=%s", category.name)

    def list_categories(self) -> list[Category]:
        return self._read_all(self._categories_dir, decode_category)

    # ---- completion logs ----

    def log_daily_completion(self, task_id: str, title: str, on: date) -> None:
        self._append_line(self._daily_log, f"{on.isoformat()}\t{task_id}\t{_log_field(title)}")
        logger.info("Daily completion logged id=%s date=%s", task_id, on)

    def list_daily_completions(self) -> list[DailyCompletion]:
        try:
            text = self._daily_log.read_text("utf-8")
        except FileNotFoundError:
            return []
        except (OSError, UnicodeDecodeError) as e:
            raise StorageIOError(f"Failed to read {self._daily_log}: {e}") from e

        out: list[DailyCompletion] = []
        for line in text.splitlines():
            parts = line.split("\t", 2)
            if len(parts) < 2:
                continue
            try:
                on = date.fromisoformat(parts[0])
            except ValueError:
                continue
            title = parts[2] if len(parts) > 2 else ""
            out.append(DailyCompletion(task_id=parts[1], title=title, date=on))
        return out

    def is_daily_completed_on_date(self, task_id: str, on: date) -> bool:
        return any(c.task_id == task_id and c.date == on for c in self.list_daily_completions())

    def log_task_completion(self, task_id: str, title: str) -> None:
        stamp = datetime.now(UTC).isoformat()
        self._append_line(self._history_log, f"{stamp}\t{task_id}\t{_log_field(title)}")
