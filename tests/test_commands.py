# tests/test_commands.py

from __future__ import annotations

from datetime import date

import pytest

from daily_planner.cli import main as cli_main
from daily_planner.cli.commands import CommandRegistry, registry
from daily_planner.errors import AmbiguousPrefixError, InvalidPriorityError
from daily_planner.tasks.task_models import Task


def _run(state, *argv: str) -> str:
    emitted: list[str] = []
    out = registry.handle(state, list(argv), emit=emitted.append)
    return "\n".join([*emitted, out or ""])


def _only_task(state) -> Task:
    [task] = state.task_store.list_all_tasks()
    return task


def test_command_registry_routes_to_handler(state) -> None:
    reg = CommandRegistry(prog="t")
    called: list[str] = []

    def h(state, args, emit):
        called.append(args.name)
        emit("note")
        return "done"

    reg.register("hello", h, "say hello", lambda p: p.add_argument("name"), aliases=["hi"])

    notes: list[str] = []
    assert reg.handle(state, ["hello", "x"], emit=notes.append) == "done"
    assert reg.handle(state, ["hi", "y"], emit=notes.append) == "done"
    assert called == ["x", "y"]
    assert notes == ["note", "note"]


def test_unknown_command_is_a_usage_error(state) -> None:
    with pytest.raises(SystemExit) as exc:
        registry.handle(state, ["nope"])
    assert exc.value.code == 2


def test_add_then_list(state) -> None:
    out = _run(state, "add", "Buy milk", "-p", "h", "-c", "errands", "-d", "2 litres", "-D", "2026-10-20")
    assert "Task added successfully!" in out
    task = _only_task(state)
    assert "Priority: High" in out
    assert f"ID: {task.id}" in out

    listing = _run(state, "list")
    assert "1 task(s) found:" in listing
    assert "=== ERRANDS ===" in listing
    assert f"[ ] {task.id} - Buy milk (Priority: High)" in listing
    assert "    2 litres" in listing
    assert "    Due: 2026-10-20" in listing


def test_list_filtered_by_category(state) -> None:
    _run(state, "add", "w1", "-c", "work")
    _run(state, "add", "h1", "-c", "home", "-p", "high")

    listing = _run(state, "list", "-c", "home")
    assert "1 task(s) found:" in listing
    assert "h1" in listing
    assert "w1" not in listing

    assert "No tasks found." in _run(state, "list", "-c", "home", "-p", "low")


def test_add_with_invalid_priority_fails(state) -> None:
    with pytest.raises(InvalidPriorityError):
        _run(state, "add", "x", "-p", "urgent")
    assert state.task_store.list_all_tasks() == []


def test_list_prints_each_category_header_once(state) -> None:
    _run(state, "add", "w1", "-c", "work", "-p", "low")
    _run(state, "add", "h1", "-c", "home")
    _run(state, "add", "w2", "-c", "work", "-p", "critical")

    listing = _run(state, "list")
    assert listing.count("=== WORK ===") == 1
    assert listing.index("=== HOME ===") < listing.index("=== WORK ===")
    assert listing.index("w2") < listing.index("w1")

    assert "No tasks found." in _run(state, "list", "-C")


def test_complete_by_prefix_and_uncomplete(state) -> None:
    _run(state, "add", "Write tests")
    task = _only_task(state)

    assert "marked as complete" in _run(state, "complete", task.id[:6])
    assert _only_task(state).completed is True

    assert "1 task(s) marked as incomplete!" in _run(state, "uncomplete-all")
    assert _only_task(state).completed is False


def test_complete_daily_task_logs_for_today(state) -> None:
    _run(state, "add", "Stretch", "--daily")
    task = _only_task(state)

    out = _run(state, "complete", task.id)
    assert f"completed for {date.today().isoformat()}" in out
    assert _only_task(state).completed is False
    assert state.task_store.is_daily_completed_on_date(task.id, date.today())
    assert "No tasks scheduled for this day." in _run(state, "today")


def test_ambiguous_prefix_surfaces(state) -> None:
    for title in ("a", "b"):
        t = Task.new(title)
        t.id = f"same-{title}"
        state.task_store.save_task(t)
    with pytest.raises(AmbiguousPrefixError):
        _run(state, "delete", "same")


def test_schedule_and_show_day(state) -> None:
    _run(state, "add", "Dentist", "-c", "health")
    task = _only_task(state)

    assert "scheduled for 2026-11-02" in _run(state, "schedule", task.id[:8], "2026-11-02")
    _run(state, "note", "2026-11-02", "bring", "insurance", "card")

    out = _run(state, "day", "2026-11-02")
    assert "Tasks for 2026-11-02:" in out
    assert "=== HEALTH ===" in out
    assert "Dentist" in out
    assert "Notes: bring insurance card" in out

    _run(state, "unschedule", task.id, "2026-11-02")
    assert "No tasks scheduled for this day." in _run(state, "day", "2026-11-02")


def test_priority_move_daily_and_delete(state) -> None:
    _run(state, "add", "Refactor")
    task = _only_task(state)

    assert "priority updated to Critical" in _run(state, "priority", task.id, "c")
    assert "moved to category 'code'" in _run(state, "move", task.id, "code")
    assert "is now a daily recurring task" in _run(state, "daily", task.id, "true")
    assert "no longer a daily" in _run(state, "daily", task.id, "false")

    assert "deleted" in _run(state, "delete", task.id)
    assert state.task_store.list_all_tasks() == []


def test_categories(state) -> None:
    assert "No categories found." in _run(state, "categories")
    _run(state, "category", "work", "-d", "day job")
    out = _run(state, "categories")
    assert "- work" in out
    assert "  day job" in out


def test_claude_uses_llm_with_task_context(state) -> None:
    _run(state, "add", "Prepare slides", "-p", "high")
    state.llm.next_text = "Start with the slides."

    out = _run(state, "claude", "what", "should", "I", "do?")

    assert "Thinking..." in out
    assert "Start with the slides." in out
    [(messages, _)] = state.llm.calls
    assert "Prepare slides (Priority: High, Category: default)" in messages[0]["content"]
    assert messages[0]["content"].endswith("User question: what should I do?")


def test_main_reports_errors_and_exit_codes(monkeypatch, settings, capsys) -> None:
    monkeypatch.setattr(cli_main, "get_settings", lambda: settings)
    monkeypatch.setattr(cli_main, "setup_logging", lambda **_: None)

    assert cli_main.main(["add", "From main", "-p", "l"]) == 0
    assert "Task added successfully!" in capsys.readouterr().out

    assert cli_main.main(["complete", "does-not-exist"]) == 1
    assert "Error: No task found" in capsys.readouterr().err

    assert cli_main.main(["priority", "x", "bogus"]) == 1
    assert "Invalid priority" in capsys.readouterr().err


def test_main_without_api_key_reports_llm_config(monkeypatch, settings, capsys) -> None:
    monkeypatch.setattr(cli_main, "get_settings", lambda: settings)
    monkeypatch.setattr(cli_main, "setup_logging", lambda **_: None)

    assert cli_main.main(["claude", "hello"]) == 1
    assert "missing API key" in capsys.readouterr().err
