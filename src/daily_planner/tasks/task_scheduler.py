# src/daily_planner/tasks/task_scheduler.py

from __future__ import annotations

"""
Daily reminder scheduler.

One coroutine that, forever:
- computes the seconds until the next occurrence of the reminder time,
- sleeps that long,
- fires the notifier,
- sleeps a short guard interval so the same minute never fires twice.

There is no persisted "last fired" state; restarting the process at the
wrong moment may skip or repeat one reminder.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from datetime import datetime, time

from ..core.ports import Notifier

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 86400

REMINDER_TITLE = "Daily Task Manager"
REMINDER_MESSAGE = "Time to review your daily tasks! Run 'daily today' to see them."


def parse_reminder_time(raw: str) -> time:
    """Parse "HH:MM" (24-hour). Raises ValueError on anything else."""
    try:
        return datetime.strptime((raw or "").strip(), "%H:%M").time()
    except ValueError:
        raise ValueError(f"Invalid time '{raw}'. Use HH:MM (24-hour).") from None


def _seconds_from_midnight(t: time) -> int:
    return t.hour * 3600 + t.minute * 60 + t.second


def seconds_until(now: time, target: time) -> int:
    """
    Seconds from `now` to the next `target` time of day.

    Later today if target is still ahead, otherwise tomorrow (an exact match
    waits a full day).
    """
    current = _seconds_from_midnight(now)
    goal = _seconds_from_midnight(target)
    if current < goal:
        return goal - current
    return SECONDS_PER_DAY - current + goal


async def run_reminder_daemon(
    notifier: Notifier,
    target: time,
    *,
    clock: Callable[[], datetime] = datetime.now,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    guard_seconds: float = 60.0,
) -> None:
    """
    Fire `notifier` once a day at `target` local time.

    To stop the daemon, cancel the coroutine/task (or kill the process).
    """
    while True:
        wait_s = seconds_until(clock().time(), target)
        logger.info("Next reminder in %ds (at %s)", wait_s, target.strftime("%H:%M"))

        await sleep(wait_s)

        try:
            notifier.notify(REMINDER_TITLE, REMINDER_MESSAGE)
            logger.info("Reminder fired")
        except Exception:
            logger.exception("Reminder notification failed")

        await sleep(guard_seconds)
