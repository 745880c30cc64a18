# src/daily_planner/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, then dispatches one subcommand:
- command output goes to stdout,
- expected failures print "Error: ..." to stderr and exit 1.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Sequence

from ..cli.bootstrap import create_initial_state
from ..cli.commands import registry
from ..config import get_settings
from ..errors import DailyError, LLMError
from ..llm.client import friendly_llm_error_message
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


def main(argv: Sequence[str] | None = None) -> int:
    settings = get_settings()

    level_name = str(getattr(settings, "log_level", "WARNING")).upper()
    console_level = getattr(logging, level_name, logging.WARNING)
    setup_logging(log_dir=settings.log_dir, console_level=console_level)

    args = list(sys.argv[1:] if argv is None else argv)

    try:
        state = create_initial_state(settings=settings)
        output = registry.handle(state, args)
    except LLMError as e:
        logger.debug("LLM command failed", exc_info=True)
        print(f"Error: {friendly_llm_error_message(e)}", file=sys.stderr)
        return 1
    except (DailyError, ValueError) as e:
        logger.debug("Command failed args=%s", args, exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if output:
        print(output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
