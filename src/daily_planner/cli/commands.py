# src/daily_planner/cli/commands.py

from __future__ import annotations

import argparse
import asyncio
import logging
from collections.abc import Callable, Sequence
from datetime import date, time

from ..core.state import AppState
from ..errors import DailyError
from ..tasks import task_api
from ..tasks.task_models import Priority
from ..tasks.task_scheduler import parse_reminder_time, run_reminder_daemon
from .bootstrap import get_llm
from .render import render_categories, render_day, render_list

CommandEmitter = Callable[[str], None]
CommandHandler = Callable[[AppState, argparse.Namespace, CommandEmitter], str | None]
ParserConfigurator = Callable[[argparse.ArgumentParser], None]

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Subcommand registry: each command brings its handler, help text and argument setup."""

    def __init__(self, prog: str = "daily") -> None:
        self._prog = prog
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}
        self._configure: dict[str, ParserConfigurator | None] = {}
        self._aliases: dict[str, list[str]] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        configure: ParserConfigurator | None = None,
        aliases: list[str] | None = None,
    ) -> None:
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        self._configure[key] = configure
        self._aliases[key] = [a.lower() for a in (aliases or [])]

    def build_parser(self) -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(
            prog=self._prog,
            description="A CLI task management tool with AI integration",
        )
        subparsers = parser.add_subparsers(dest="command", required=True, metavar="<command>")
        for name, handler in self._handlers.items():
            sub = subparsers.add_parser(name, help=self._help[name], aliases=self._aliases[name])
            configure = self._configure[name]
            if configure is not None:
                configure(sub)
            sub.set_defaults(handler=handler)
        return parser

    def handle(
        self,
        state: AppState,
        argv: Sequence[str],
        emit: CommandEmitter = print,
    ) -> str | None:
        """
        Parse argv and run the matching handler.

        Returns the command's text output (or None). Usage errors exit via argparse.
        """
        args = self.build_parser().parse_args(list(argv))
        logger.debug("Running command=%s", args.command)
        return args.handler(state, args, emit)


registry = CommandRegistry()


# ---- argument types ----


def _date_arg(raw: str) -> date:
    try:
        return date.fromisoformat(raw.strip())
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid date '{raw}' (expected YYYY-MM-DD)") from None


def _bool_arg(raw: str) -> bool:
    v = raw.strip().lower()
    if v in ("true", "yes", "1", "on"):
        return True
    if v in ("false", "no", "0", "off"):
        return False
    raise argparse.ArgumentTypeError(f"invalid boolean '{raw}' (expected true/false)")


def _time_arg(raw: str) -> time:
    try:
        return parse_reminder_time(raw)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from None


def _id_arg(parser: argparse.ArgumentParser, name: str = "id") -> None:
    parser.add_argument(name, help="Task ID (a unique prefix is enough)")


# ---- handlers ----


def cmd_add(state: AppState, args: argparse.Namespace, emit: CommandEmitter) -> str:
    priority = Priority.parse(args.priority)
    task = task_api.add_task(
        state.task_store,
        title=args.title,
        priority=priority,
        category=args.category,
        description=args.description,
        due=args.due,
        is_daily=args.daily,
    )
    lines = [
        "Task added successfully!",
        f"ID: {task.id}",
        f"Title: {task.title}",
        f"Priority: {task.priority.label}",
        f"Category: {task.category}",
    ]
    if task.is_daily:
        lines.append("Type: Daily recurring task")
    return "\n".join(lines)


def _configure_add(p: argparse.ArgumentParser) -> None:
    p.add_argument("title", help="Task title")
    p.add_argument("-p", "--priority", default="medium", help="low, medium, high, critical (or l/m/h/c)")
    p.add_argument("-c", "--category", default="default", help="Task category")
    p.add_argument("-d", "--description", default=None, help="Task description")
    p.add_argument("-D", "--due", type=_date_arg, default=None, help="Due date (YYYY-MM-DD)")
    p.add_argument("--daily", action="store_true", help="Daily recurring task")


def cmd_list(state: AppState, args: argparse.Namespace, emit: CommandEmitter) -> str:
    priority = Priority.parse(args.priority) if args.priority else None
    if args.category is not None:
        source = state.task_store.list_tasks_by_category(args.category)
    else:
        source = state.task_store.list_all_tasks()
    tasks = task_api.filter_tasks(
        source,
        priority=priority,
        incomplete=args.incomplete,
        completed=args.completed,
    )
    return render_list(task_api.sort_for_list(tasks))


def _configure_list(p: argparse.ArgumentParser) -> None:
    p.add_argument("-c", "--category", default=None, help="Filter by category")
    p.add_argument("-p", "--priority", default=None, help="Filter by priority")
    group = p.add_mutually_exclusive_group()
    group.add_argument("-i", "--incomplete", action="store_true", help="Show only incomplete tasks")
    group.add_argument("-C", "--completed", action="store_true", help="Show only completed tasks")


def cmd_complete(state: AppState, args: argparse.Namespace, emit: CommandEmitter) -> str:
    today = date.today()
    task = task_api.complete_task(state.task_store, args.id, on=today)
    if task.is_daily:
        return f"Daily task '{task.title}' completed for {today.isoformat()}!"
    return f"Task '{task.title}' marked as complete!"


def cmd_uncomplete(state: AppState, args: argparse.Namespace, emit: CommandEmitter) -> str:
    task = task_api.uncomplete_task(state.task_store, args.id)
    return f"Task '{task.title}' marked as incomplete!"


def cmd_uncomplete_all(state: AppState, args: argparse.Namespace, emit: CommandEmitter) -> str:
    count = task_api.uncomplete_all(state.task_store)
    return f"{count} task(s) marked as incomplete!"


def cmd_delete(state: AppState, args: argparse.Namespace, emit: CommandEmitter) -> str:
    task = task_api.delete_task(state.task_store, args.id)
    return f"Task '{task.title}' deleted!"


def cmd_priority(state: AppState, args: argparse.Namespace, emit: CommandEmitter) -> str:
    priority = Priority.parse(args.priority)
    task = task_api.set_priority(state.task_store, args.id, priority)
    return f"Task '{task.title}' priority updated to {task.priority.label}!"


def _configure_priority(p: argparse.ArgumentParser) -> None:
    _id_arg(p)
    p.add_argument("priority", help="low, medium, high, critical (or l/m/h/c)")


def cmd_move(state: AppState, args: argparse.Namespace, emit: CommandEmitter) -> str:
    task = task_api.move_task(state.task_store, args.id, args.category)
    return f"Task '{task.title}' moved to category '{args.category}'!"


def _configure_move(p: argparse.ArgumentParser) -> None:
    _id_arg(p)
    p.add_argument("category", help="Target category")


def cmd_daily(state: AppState, args: argparse.Namespace, emit: CommandEmitter) -> str:
    task = task_api.set_daily(state.task_store, args.id, args.daily)
    if task.is_daily:
        return f"Task '{task.title}' is now a daily recurring task!"
    return f"Task '{task.title}' is no longer a daily recurring task!"


def _configure_daily(p: argparse.ArgumentParser) -> None:
    _id_arg(p)
    p.add_argument("daily", type=_bool_arg, help="true or false")


def cmd_category(state: AppState, args: argparse.Namespace, emit: CommandEmitter) -> str:
    category = task_api.create_category(state.task_store, args.name, args.description)
    return f"Category '{category.name}' created!"


def _configure_category(p: argparse.ArgumentParser) -> None:
    p.add_argument("name", help="Category name")
    p.add_argument("-d", "--description", default=None, help="Category description")


def cmd_categories(state: AppState, args: argparse.Namespace, emit: CommandEmitter) -> str:
    return render_categories(state.task_store.list_categories())


def _show_day(state: AppState, on: date) -> str:
    day = state.task_store.load_day(on)
    tasks = task_api.sort_for_day(task_api.tasks_for_day(state.task_store, on))
    return render_day(day, tasks)


def cmd_today(state: AppState, args: argparse.Namespace, emit: CommandEmitter) -> str:
    return _show_day(state, date.today())


def cmd_day(state: AppState, args: argparse.Namespace, emit: CommandEmitter) -> str:
    return _show_day(state, args.date)


def _configure_day(p: argparse.ArgumentParser) -> None:
    p.add_argument("date", type=_date_arg, help="Date (YYYY-MM-DD)")


def cmd_schedule(state: AppState, args: argparse.Namespace, emit: CommandEmitter) -> str:
    task, _ = task_api.schedule_task(state.task_store, args.task_id, args.date)
    return f"Task '{task.title}' scheduled for {args.date.isoformat()}!"


def cmd_unschedule(state: AppState, args: argparse.Namespace, emit: CommandEmitter) -> str:
    task, _ = task_api.unschedule_task(state.task_store, args.task_id, args.date)
    return f"Task '{task.title}' removed from {args.date.isoformat()}."


def _configure_schedule(p: argparse.ArgumentParser) -> None:
    _id_arg(p, "task_id")
    p.add_argument("date", type=_date_arg, help="Date (YYYY-MM-DD)")


def cmd_note(state: AppState, args: argparse.Namespace, emit: CommandEmitter) -> str:
    if args.clear:
        task_api.set_day_notes(state.task_store, args.date, None)
        return f"Notes cleared for {args.date.isoformat()}."
    text = " ".join(args.text).strip()
    if not text:
        raise DailyError("Note text is required (or use --clear).")
    task_api.set_day_notes(state.task_store, args.date, text)
    return f"Notes saved for {args.date.isoformat()}."


def _configure_note(p: argparse.ArgumentParser) -> None:
    p.add_argument("date", type=_date_arg, help="Date (YYYY-MM-DD)")
    p.add_argument("text", nargs="*", help="Note text (single line)")
    p.add_argument("--clear", action="store_true", help="Remove the notes for this date")


def cmd_daemon(state: AppState, args: argparse.Namespace, emit: CommandEmitter) -> str:
    target = args.time
    if target is None:
        try:
            target = parse_reminder_time(state.settings.reminder_time)
        except ValueError as e:
            raise DailyError(f"DAILY_REMINDER_TIME: {e}") from None

    emit("Starting daily prompt daemon...")
    emit(f"Daily prompt will appear at {target.strftime('%H:%M')}")
    emit("Press Ctrl+C to stop.")

    try:
        asyncio.run(run_reminder_daemon(state.notifier, target))
    except KeyboardInterrupt:
        logger.info("Daemon interrupted")
    return "Daemon stopped."


def _configure_daemon(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "-t",
        "--time",
        type=_time_arg,
        default=None,
        help="Time to show daily prompt (HH:MM, 24-hour; default DAILY_REMINDER_TIME or 09:00)",
    )


def cmd_claude(state: AppState, args: argparse.Namespace, emit: CommandEmitter) -> str:
    prompt = " ".join(args.prompt).strip()
    if not prompt:
        raise DailyError("Prompt is required.")
    llm = get_llm(state)
    tasks = state.task_store.list_all_tasks()

    emit("Thinking...")
    reply = task_api.ask_about_tasks(llm, prompt, tasks)
    return f"\nResponse:\n\n{reply}"


def _configure_claude(p: argparse.ArgumentParser) -> None:
    p.add_argument("prompt", nargs="+", help="Question or request; all current tasks are sent as context")


registry.register("add", cmd_add, "Add a new task", _configure_add)
registry.register("list", cmd_list, "List tasks", _configure_list, aliases=["ls"])
registry.register("complete", cmd_complete, "Complete a task", _id_arg, aliases=["done"])
registry.register("uncomplete", cmd_uncomplete, "Mark a task as incomplete", _id_arg)
registry.register("uncomplete-all", cmd_uncomplete_all, "Mark all tasks as incomplete")
registry.register("delete", cmd_delete, "Delete a task", _id_arg, aliases=["rm"])
registry.register("priority", cmd_priority, "Update task priority", _configure_priority)
registry.register("move", cmd_move, "Move task to a different category", _configure_move)
registry.register("daily", cmd_daily, "Set or clear the daily recurring flag", _configure_daily)
registry.register("category", cmd_category, "Create a new category", _configure_category)
registry.register("categories", cmd_categories, "List all categories")
registry.register("today", cmd_today, "Show tasks for today")
registry.register("day", cmd_day, "Show tasks for a specific date", _configure_day)
registry.register("schedule", cmd_schedule, "Add a task to a specific day", _configure_schedule)
registry.register("unschedule", cmd_unschedule, "Remove a task from a specific day", _configure_schedule)
registry.register("note", cmd_note, "Set notes for a specific day", _configure_note)
registry.register("daemon", cmd_daemon, "Start the daily prompt daemon", _configure_daemon)
registry.register("claude", cmd_claude, "Ask the AI assistant about your tasks", _configure_claude)
