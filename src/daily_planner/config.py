# src/daily_planner/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app, passed explicitly to the store and clients.
- No secrets required at import time.
- Built lazily, so tests can point DAILY_DATA_DIR somewhere else before first use.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional

from dotenv import load_dotenv

ENV_PREFIX = "DAILY"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _first_env(*names: str, default: str | None = None) -> str | None:
    for n in names:
        v = os.getenv(n)
        if v is not None and v.strip() != "":
            return v
    return default


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_list(name: str, default: List[str]) -> List[str]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return list(default)
    return [p.strip() for p in raw.replace(",", " ").split() if p.strip()]


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Local data ----
    data_dir: Path
    log_dir: Path

    # ---- Reminder daemon ----
    reminder_time: str

    # ---- LLM / OpenRouter ----
    openrouter_api_key: Optional[str]
    openrouter_base_url: str
    llm_models: List[str]
    llm_max_tokens: int
    extra_headers: Dict[str, str]

    llm_connect_timeout: float
    llm_read_timeout: float
    llm_first_token_timeout: float

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "daily")
        # CLI output goes to stdout; keep console logs quiet unless asked.
        log_level = _env(_k("LOG_LEVEL"), "WARNING")

        data_dir = _env_path(_k("DATA_DIR"), Path.home() / ".daily")
        log_dir = _env_path(_k("LOG_DIR"), data_dir / "logs")

        reminder_time = _env(_k("REMINDER_TIME"), "09:00").strip() or "09:00"

        openrouter_api_key = _first_env(_k("OPENROUTER_API_KEY"), "OPENROUTER_API_KEY", default=None)
        openrouter_base_url = _env(_k("OPENROUTER_BASE_URL"), "https://openrouter.ai/api/v1")

        extra_headers = {
            "HTTP-Referer": _env(_k("HTTP_REFERER"), "https://example.com"),
            "X-Title": _env(_k("APP_TITLE"), app_name),
        }

        llm_models = _env_list(
            _k("LLM_MODELS"),
            [
                "anthropic/claude-3.5-sonnet",
                "anthropic/claude-3.5-haiku",
            ],
        )
        llm_max_tokens = _env_int(_k("LLM_MAX_TOKENS"), 1024)

        first_token = _env_float(_k("LLM_FIRST_TOKEN_TIMEOUT_SECONDS"), 20.0)
        read_timeout = _env_float(_k("LLM_READ_TIMEOUT_SECONDS"), 60.0)
        connect_timeout = _env_float(_k("LLM_CONNECT_TIMEOUT_SECONDS"), 5.0)

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            log_dir=log_dir,
            reminder_time=reminder_time,
            openrouter_api_key=openrouter_api_key,
            openrouter_base_url=openrouter_base_url,
            llm_models=llm_models,
            llm_max_tokens=llm_max_tokens,
            extra_headers=extra_headers,
            llm_connect_timeout=connect_timeout,
            # keep read >= first_token as a sane baseline
            llm_read_timeout=max(read_timeout, first_token),
            llm_first_token_timeout=first_token,
        )


_SETTINGS: Settings | None = None


def get_settings() -> Settings:
    global _SETTINGS
    if _SETTINGS is None:
        load_dotenv(override=False)
        _SETTINGS = Settings.from_env()
    return _SETTINGS
