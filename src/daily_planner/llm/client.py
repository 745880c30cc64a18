# src/daily_planner/llm/client.py

from __future__ import annotations

import logging
import time
from typing import Any, Dict, Iterable, List, Optional

import httpx
import openai
from openai import OpenAI

from ..core.ports import ChatMessage
from ..errors import LLMAuthError, LLMTransportError

logger = logging.getLogger(__name__)


def _is_auth_error(exc: Exception) -> bool:
    if isinstance(exc, (openai.AuthenticationError, openai.PermissionDeniedError)):
        return True
    return exc.__class__.__name__ in {"UnauthorizedError"}


def _is_rate_limit_error(exc: Exception) -> bool:
    if isinstance(exc, openai.RateLimitError):
        return True
    return exc.__class__.__name__ in {"TooManyRequestsError"}


def _is_connection_error(exc: Exception) -> bool:
    if isinstance(exc, (openai.APIConnectionError, httpx.TimeoutException, TimeoutError)):
        return True
    return exc.__class__.__name__ in {"Timeout", "ConnectTimeout", "ReadTimeout", "WriteTimeout"}


def _is_not_found_error(exc: Exception) -> bool:
    # OpenAI-compatible SDK uses NotFoundError for HTTP 404 (unknown model)
    return isinstance(exc, openai.NotFoundError)


def friendly_llm_error_message(err: Exception) -> str:
    msg = str(err).strip() or "LLM error."
    if "API key is not set" in msg:
        return "LLM is not configured (missing API key). Set DAILY_OPENROUTER_API_KEY in .env."
    if "model list is empty" in msg:
        return "LLM is not configured (no models). Set DAILY_LLM_MODELS in .env."
    return msg


def _close_stream(stream: Any) -> None:
    close = getattr(stream, "close", None)
    if callable(close):
        try:
            close()
        except Exception:
            logger.debug("Stream close failed", exc_info=True)


class OpenRouterLLMClient:
    """
    Streaming chat client for any OpenAI-compatible endpoint (OpenRouter by default).

    Behavior:
    - Tries models in the order from settings.llm_models.
    - If a model doesn't produce a first content token within the first-token timeout,
      abort and try the next model.
    - 404 (model not available) -> remember as bad for an hour, try next.
    - Rate limit / network issues -> try next.
    - Auth issues -> fail fast with LLMAuthError (no retries across models).
    """

    BAD_MODEL_TTL_S = 3600.0

    def __init__(self, settings: Any, *, client: OpenAI | None = None) -> None:
        api_key = getattr(settings, "openrouter_api_key", None)
        base_url = str(getattr(settings, "openrouter_base_url", "") or "")

        self._models: List[str] = [m.strip() for m in (getattr(settings, "llm_models", None) or []) if m.strip()]
        self._headers: Dict[str, str] = dict(getattr(settings, "extra_headers", None) or {})
        self._max_tokens = int(getattr(settings, "llm_max_tokens", 1024))
        self._first_token_timeout = float(getattr(settings, "llm_first_token_timeout", 20.0))
        self._timeout = httpx.Timeout(
            connect=float(getattr(settings, "llm_connect_timeout", 5.0)),
            read=float(getattr(settings, "llm_read_timeout", 60.0)),
            write=10.0,
            pool=float(getattr(settings, "llm_connect_timeout", 5.0)),
        )
        self._bad_models: dict[str, float] = {}  # model -> retry_at (monotonic)

        if client is not None:
            self._client = client
            return

        if not api_key or not str(api_key).strip():
            raise LLMAuthError("LLM API key is not set. Set DAILY_OPENROUTER_API_KEY in your .env.")
        if not base_url.strip():
            raise LLMTransportError("LLM base URL is not set. Set DAILY_OPENROUTER_BASE_URL in your .env.")

        # Automatic retries are disabled so fallback across models stays quick.
        self._client = OpenAI(
            base_url=base_url,
            api_key=str(api_key),
            timeout=self._timeout,
            max_retries=0,
        )

    def _create_stream(self, model: str, messages: list[ChatMessage]) -> Any:
        return self._client.chat.completions.create(
            model=model,
            stream=True,
            max_tokens=self._max_tokens,
            extra_headers=self._headers or None,
            messages=messages,
            timeout=self._timeout,
        )

    def stream_chat(self, messages: list[ChatMessage], system_prompt: str) -> Iterable[str]:
        """Stream the reply in text chunks, falling back across configured models."""
        if not self._models:
            raise LLMTransportError("LLM model list is empty. Set DAILY_LLM_MODELS in your .env.")

        last_error: Optional[Exception] = None
        now = time.monotonic()

        for model in self._models:
            retry_at = self._bad_models.get(model)
            if retry_at is not None and retry_at > now:
                continue

            logger.info("LLM: trying model=%s (first_token_timeout=%.1fs)", model, self._first_token_timeout)
            t0 = time.monotonic()
            deadline = t0 + self._first_token_timeout

            stream = None
            used_any = False

            try:
                stream = self._create_stream(
                    model,
                    [{"role": "system", "content": system_prompt}, *messages],
                )

                for chunk in stream:
                    if not used_any and time.monotonic() > deadline:
                        last_error = TimeoutError(f"First token timeout on model: {model}")
                        logger.info("LLM: first token timeout on model=%s -> trying next", model)
                        break

                    choices = getattr(chunk, "choices", None) or []
                    delta = getattr(choices[0], "delta", None) if choices else None
                    content = getattr(delta, "content", None) if delta is not None else None

                    if content:
                        if not used_any:
                            logger.info("LLM: first token from model=%s (%.2fs)", model, time.monotonic() - t0)
                        used_any = True
                        yield content

                if used_any:
                    logger.debug("LLM: completed with model=%s", model)
                    return

                if last_error is None:
                    last_error = LLMTransportError(f"Model returned no content: {model}")

            except Exception as e:
                if _is_auth_error(e):
                    raise LLMAuthError(
                        "LLM authentication failed. Check your API key (DAILY_OPENROUTER_API_KEY)."
                    ) from e

                # Part of the reply is already out; another model cannot continue it.
                if used_any:
                    logger.info("LLM: stream broke mid-reply on model=%s (%s)", model, e.__class__.__name__)
                    raise LLMTransportError(f"LLM stream interrupted on model: {model}") from e

                last_error = e

                if _is_not_found_error(e):
                    self._bad_models[model] = time.monotonic() + self.BAD_MODEL_TTL_S
                    logger.info("LLM: model not available (404): %s", model)
                elif _is_rate_limit_error(e):
                    logger.info("LLM: rate-limited on model=%s, trying next", model)
                elif _is_connection_error(e):
                    logger.info("LLM: network/timeout error on model=%s, trying next", model)
                else:
                    logger.info("LLM: error on model=%s (%s), trying next", model, e.__class__.__name__)

            finally:
                if stream is not None:
                    _close_stream(stream)

        if last_error is not None:
            if _is_rate_limit_error(last_error):
                raise LLMTransportError("LLM is rate-limited. Try again later.") from last_error
            if _is_connection_error(last_error):
                raise LLMTransportError("LLM network/timeout error. Try again later or change models.") from last_error
        raise LLMTransportError("All LLM models failed.") from last_error
