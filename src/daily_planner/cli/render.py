# src/daily_planner/cli/render.py

"""Plain-text rendering of task lists for the terminal."""

from __future__ import annotations

from collections.abc import Iterable

from ..tasks.task_api import group_by_category
from ..tasks.task_models import Category, Day, Task


def format_task_line(task: Task) -> str:
    status = "[✓]" if task.completed else "[ ]"
    daily = " [Daily]" if task.is_daily else ""
    return f"{status} {task.id} - {task.title}{daily} (Priority: {task.priority.label})"


def render_task_list(tasks: list[Task], *, details: bool = True) -> str:
    """
    Render tasks that are already sorted by category.

    One "=== CATEGORY ===" header per contiguous run of a category.
    """
    lines: list[str] = []
    for category, group in group_by_category(tasks):
        lines.append("")
        lines.append(f"=== {category.upper()} ===")
        for task in group:
            lines.append(format_task_line(task))
            if not details:
                continue
            if task.description is not None:
                lines.append(f"    {task.description}")
            if task.due_date is not None:
                lines.append(f"    Due: {task.due_date.strftime('%Y-%m-%d')}")
    return "\n".join(lines)


def render_list(tasks: list[Task]) -> str:
    if not tasks:
        return "No tasks found."
    return f"\n{len(tasks)} task(s) found:\n{render_task_list(tasks)}\n"


def render_day(day: Day, tasks: list[Task]) -> str:
    lines = [f"\nTasks for {day.date.isoformat()}:"]
    if not tasks:
        lines.append("\nNo tasks scheduled for this day.")
    else:
        lines.append(render_task_list(tasks, details=False))
    if day.notes:
        lines.append(f"\nNotes: {day.notes}")
    return "\n".join(lines) + "\n"


def render_categories(categories: Iterable[Category]) -> str:
    cats = sorted(categories, key=lambda c: c.name)
    if not cats:
        return "No categories found."
    lines = ["\nCategories:\n"]
    for cat in cats:
        lines.append(f"- {cat.name}")
        if cat.description:
            lines.append(f"  {cat.description}")
    return "\n".join(lines)
