# tests/test_task_store.py

from __future__ import annotations

from datetime import date, timedelta
from pathlib import Path

import pytest

from daily_planner.errors import NotFoundError
from daily_planner.tasks.task_models import Category, Day, Priority, Task
from daily_planner.tasks.task_store import TaskStore


def test_store_creates_layout_idempotently(tmp_path: Path) -> None:
    root = tmp_path / "daily"
    TaskStore(root)
    TaskStore(root)
    for sub in ("tasks", "days", "categories"):
        assert (root / sub).is_dir()


def test_task_save_load_delete(store: TaskStore) -> None:
    task = Task.new("Call mom", Priority.HIGH, "family", description="sunday")
    store.save_task(task)

    assert (store.root / "tasks" / f"{task.id}.txt").exists()
    assert store.load_task(task.id) == task

    task.mark_complete()
    store.save_task(task)
    assert store.load_task(task.id).completed is True

    store.delete_task(task.id)
    with pytest.raises(NotFoundError):
        store.load_task(task.id)
    with pytest.raises(NotFoundError):
        store.delete_task(task.id)


def test_load_task_rejects_path_like_ids(store: TaskStore) -> None:
    with pytest.raises(NotFoundError):
        store.load_task("../secrets")


def test_list_skips_corrupt_records(store: TaskStore) -> None:
    tasks = [Task.new(f"task {i}") for i in range(3)]
    for t in tasks:
        store.save_task(t)
    (store.root / "tasks" / "broken.txt").write_text("title: no id here\n", "utf-8")
    (store.root / "tasks" / "binary.txt").write_bytes(b"\xff\xfe\x00garbage")

    listed = store.list_all_tasks()
    assert sorted(t.id for t in listed) == sorted(t.id for t in tasks)
    assert store.count_tasks() == 3


@pytest.mark.parametrize("title", ["Call\rBob", "Page\x0cbreak", "tab\x0bstop", "para\u2028sep", "group\x1dmark"])
def test_control_characters_in_values_survive_reload(store: TaskStore, title: str) -> None:
    task = Task.new(title, description=f"about {title}")
    store.save_task(task)

    loaded = store.load_task(task.id)
    assert loaded.title == title
    assert loaded.description == f"about {title}"
    assert [t.title for t in store.list_all_tasks()] == [title]


def test_crlf_record_files_still_load(store: TaskStore) -> None:
    task = Task.new("Edited on Windows", category="work")
    store.save_task(task)
    path = store.root / "tasks" / f"{task.id}.txt"
    path.write_bytes(path.read_bytes().replace(b"\n", b"\r\n"))

    assert store.load_task(task.id) == task


def test_list_tasks_by_category(store: TaskStore) -> None:
    store.save_task(Task.new("a", category="work"))
    store.save_task(Task.new("b", category="home"))
    assert [t.title for t in store.list_tasks_by_category("work")] == ["a"]


def test_load_day_without_record_is_empty(store: TaskStore) -> None:
    day = store.load_day(date(2026, 10, 19))
    assert day == Day(date=date(2026, 10, 19))
    assert not (store.root / "days" / "2026-10-19.txt").exists()


def test_day_save_load(store: TaskStore) -> None:
    day = Day(date=date(2026, 10, 19), task_ids=["x", "y"], notes="busy")
    store.save_day(day)
    assert store.load_day(date(2026, 10, 19)) == day


def test_categories_save_and_list(store: TaskStore) -> None:
    store.save_category(Category("work", "day job"))
    store.save_category(Category("home"))
    (store.root / "categories" / "junk.txt").write_text("description: nameless\n", "utf-8")

    names = sorted(c.name for c in store.list_categories())
    assert names == ["home", "work"]


def test_save_category_rejects_path_separators(store: TaskStore) -> None:
    with pytest.raises(ValueError):
        store.save_category(Category("a/b"))


def test_daily_completion_is_per_date(store: TaskStore) -> None:
    task = Task.new("Stretch", is_daily=True)
    store.save_task(task)
    d = date(2026, 10, 19)

    store.log_daily_completion(task.id, task.title, d)

    assert store.is_daily_completed_on_date(task.id, d) is True
    assert store.is_daily_completed_on_date(task.id, d + timedelta(days=1)) is False
    assert store.is_daily_completed_on_date("someone-else", d) is False
    assert store.load_task(task.id).completed is False

    [entry] = store.list_daily_completions()
    assert (entry.task_id, entry.title, entry.date) == (task.id, "Stretch", d)


def test_daily_completion_log_is_append_only(store: TaskStore) -> None:
    d = date(2026, 10, 19)
    store.log_daily_completion("t1", "one", d)
    store.log_daily_completion("t1", "one", d + timedelta(days=1))
    store.log_daily_completion("t2", "tab\there", d)
    lines = (store.root / "daily_completions.log").read_text("utf-8").splitlines()
    assert len(lines) == 3
    assert lines[2] == "2026-10-19\tt2\ttab here"


def test_history_log_records_regular_completions(store: TaskStore) -> None:
    store.log_task_completion("t1", "Ship it")
    lines = (store.root / "history.log").read_text("utf-8").splitlines()
    assert len(lines) == 1
    assert lines[0].endswith("\tt1\tShip it")
