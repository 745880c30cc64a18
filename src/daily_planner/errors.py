# src/daily_planner/errors.py

"""
Error taxonomy.

Everything raised on purpose by the app derives from DailyError so the CLI can
print a readable message and exit non-zero without catching foreign bugs.
"""

from __future__ import annotations

from collections.abc import Sequence


class DailyError(Exception):
    """Base class for expected, user-facing failures."""


class NotFoundError(DailyError):
    """No task/day/category matches the given identifier."""


class AmbiguousPrefixError(DailyError):
    def __init__(self, prefix: str, candidates: Sequence[str]) -> None:
        self.prefix = prefix
        self.candidates = list(candidates)
        super().__init__(
            f"Multiple tasks found with ID starting with '{prefix}' "
            f"({len(self.candidates)} matches). Please be more specific."
        )


class MissingFieldError(DailyError):
    """A stored record lacks a required field."""

    def __init__(self, record: str, field: str) -> None:
        self.record = record
        self.field = field
        super().__init__(f"{record} record is missing required field '{field}'")


class InvalidPriorityError(DailyError, ValueError):
    def __init__(self, raw: str) -> None:
        self.raw = raw
        super().__init__(f"Invalid priority '{raw}'. Use: low, medium, high, or critical")


class StorageIOError(DailyError):
    """Filesystem failure while reading or writing the data directory."""


class LLMError(DailyError):
    """Base for language-model call failures."""


class LLMTransportError(LLMError):
    """Network, timeout, rate limit or 'every model failed'."""


class LLMAuthError(LLMError):
    """Missing or rejected API credentials."""
