# src/daily_planner/connectors/desktop_notifier.py

from __future__ import annotations

import contextlib
import logging
import shutil
import subprocess
import sys
from datetime import datetime

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _osascript_quote(text: str) -> str:
    return '"' + text.replace("\\", "\\\\").replace('"', '\\"') + '"'


class DesktopNotifier:
    """
    Terminal banner + OS notification.

    The OS call is best-effort: missing tools, timeouts and non-zero exits are
    logged at DEBUG and otherwise ignored.
    """

    def __init__(self, *, desktop: bool = True, timeout_s: float = 10.0) -> None:
        self._desktop = desktop
        self._timeout_s = timeout_s

    def notify(self, title: str, message: str) -> None:
        print(f"\n[{_ts_local()}] === {title} ===")
        print(message)
        print("Run 'daily add \"task name\"' to add a new task.\n", flush=True)

        if not self._desktop:
            return

        cmd = self._command(title, message)
        if cmd is None:
            logger.debug("No desktop notification tool available on %s", sys.platform)
            return

        with contextlib.suppress(OSError, subprocess.SubprocessError):
            subprocess.run(cmd, capture_output=True, timeout=self._timeout_s, check=False)
            return
        logger.debug("Desktop notification failed cmd=%s", cmd[0])

    @staticmethod
    def _command(title: str, message: str) -> list[str] | None:
        if sys.platform == "darwin":
            script = f"display notification {_osascript_quote(message)} with title {_osascript_quote(title)}"
            return ["osascript", "-e", script]
        if shutil.which("notify-send"):
            return ["notify-send", title, message]
        return None
