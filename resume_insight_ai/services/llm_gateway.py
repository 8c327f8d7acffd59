"""Chat-completion transport with bounded retry/backoff and typed failures."""

import asyncio
import logging
import math
import re
from typing import Any, Awaitable, Callable, Dict, List, Optional

import httpx
import openai
from openai import AsyncOpenAI

from resume_insight_ai.config import (
    KEY_MODE_OWN,
    KEY_MODE_PROVIDED,
    LLM_API_KEY,
    LLM_BACKOFF_BASE_SECONDS,
    LLM_BASE_URL,
    LLM_CONNECT_TIMEOUT_SECONDS,
    LLM_MAX_RETRIES,
    LLM_MAX_TOKENS,
    LLM_REQUEST_TIMEOUT_SECONDS,
    LLM_TEMPERATURE,
    MODEL_NAME,
    RETRY_HINT_BUFFER_SECONDS,
)
from resume_insight_ai.errors import (
    AuthError,
    NetworkError,
    RateLimitExceeded,
    ServerError,
    TransportError,
)
from resume_insight_ai.utils.logger import get_logger

logger = get_logger(__name__)

ChatMessage = Dict[str, str]

_RETRY_HINT = re.compile(r"try again in ([\d.]+)\s*s", re.IGNORECASE)


def _error_texts(exc: openai.APIStatusError) -> List[str]:
    """Human-readable strings carried by a provider error (body message first)."""
    texts: List[str] = []
    body = exc.body
    if isinstance(body, dict):
        inner = body.get("error", body)
        if isinstance(inner, dict) and isinstance(inner.get("message"), str):
            texts.append(inner["message"])
        elif isinstance(inner, str):
            texts.append(inner)
    elif isinstance(body, str):
        texts.append(body)
    texts.append(str(exc))
    return texts


def retry_hint_seconds(exc: openai.APIStatusError) -> Optional[float]:
    """Parse a 'try again in Ns' hint from a rate-limit error, if present."""
    for text in _error_texts(exc):
        match = _RETRY_HINT.search(text)
        if match:
            try:
                return float(match.group(1))
            except ValueError:
                continue
    return None


def _first_content(response: Any) -> str:
    choices = getattr(response, "choices", None) or []
    if not choices:
        return ""
    message = getattr(choices[0], "message", None)
    return getattr(message, "content", None) or ""


class LLMGateway:
    """
    Issues one chat-completion request per attempt. 429s and network-level failures
    share one retry budget (``max_retries``); 401 and 5xx fail immediately.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        key_mode: str = KEY_MODE_PROVIDED,
        client: Optional[Any] = None,
        model: str = MODEL_NAME,
        max_tokens: int = LLM_MAX_TOKENS,
        max_retries: int = LLM_MAX_RETRIES,
        backoff_base: float = LLM_BACKOFF_BASE_SECONDS,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        log: Optional[logging.Logger] = None,
    ) -> None:
        self.key_mode = key_mode
        self._model = model
        self._max_tokens = max_tokens
        self._max_retries = max_retries
        self._backoff_base = backoff_base
        self._sleep = sleep
        self._logger = log or logger
        if client is None:
            key = (api_key or "").strip()
            if not key:
                raise AuthError("No API key configured for the LLM provider.", key_mode=key_mode)
            # Retries are handled here, not by the SDK.
            client = AsyncOpenAI(
                api_key=key,
                base_url=LLM_BASE_URL,
                timeout=httpx.Timeout(LLM_REQUEST_TIMEOUT_SECONDS, connect=LLM_CONNECT_TIMEOUT_SECONDS),
                max_retries=0,
            )
        self._client = client

    @classmethod
    def from_config(cls, api_key: Optional[str] = None, **kwargs: Any) -> "LLMGateway":
        """A user-supplied key selects 'own key' mode; otherwise the configured key is used."""
        if api_key and api_key.strip():
            return cls(api_key=api_key, key_mode=KEY_MODE_OWN, **kwargs)
        return cls(api_key=LLM_API_KEY, key_mode=KEY_MODE_PROVIDED, **kwargs)

    def _backoff(self, attempt: int) -> float:
        return self._backoff_base * (2 ** (attempt - 1))

    def _rate_limit_delay(self, exc: openai.APIStatusError, attempt: int) -> float:
        hint = retry_hint_seconds(exc)
        if hint is None:
            return self._backoff(attempt)
        return math.ceil(hint * 1000) / 1000 + RETRY_HINT_BUFFER_SECONDS

    async def complete(
        self,
        messages: List[ChatMessage],
        temperature: float = LLM_TEMPERATURE,
    ) -> str:
        """Return the first completion's text ('' when the payload has none)."""
        retries = 0
        while True:
            try:
                response = await self._client.chat.completions.create(
                    model=self._model,
                    messages=messages,
                    temperature=temperature,
                    max_tokens=self._max_tokens,
                )
            except openai.AuthenticationError as e:
                self._logger.error("LLM request rejected: invalid API key (%s mode)", self.key_mode)
                raise AuthError(
                    "Invalid API key - please check your API key.",
                    key_mode=self.key_mode,
                    status_code=401,
                ) from e
            except openai.RateLimitError as e:
                if retries < self._max_retries:
                    retries += 1
                    delay = self._rate_limit_delay(e, retries)
                    self._logger.warning(
                        "Rate limited. Retrying in %.1fs (attempt %s/%s)", delay, retries, self._max_retries
                    )
                    await self._sleep(delay)
                    continue
                self._logger.error("Rate limit exceeded after %s retries", retries)
                raise RateLimitExceeded(
                    "Rate limit exceeded - maximum retries reached. Please wait a few minutes and try again.",
                    key_mode=self.key_mode,
                    status_code=429,
                ) from e
            except openai.InternalServerError as e:
                self._logger.error("LLM provider server error %s", e.status_code)
                raise ServerError(
                    "LLM provider server error - please try again later.",
                    key_mode=self.key_mode,
                    status_code=e.status_code,
                ) from e
            except openai.APIStatusError as e:
                self._logger.error("LLM API error %s: %s", e.status_code, e)
                raise TransportError(
                    f"LLM API error: {e.status_code} - {e.message}",
                    key_mode=self.key_mode,
                    status_code=e.status_code,
                ) from e
            except openai.APIConnectionError as e:
                if retries < self._max_retries:
                    retries += 1
                    delay = self._backoff(retries)
                    self._logger.warning(
                        "Network error (%s). Retrying in %.1fs (attempt %s/%s)",
                        e,
                        delay,
                        retries,
                        self._max_retries,
                    )
                    await self._sleep(delay)
                    continue
                self._logger.error("Network error after %s retries: %s", retries, e)
                raise NetworkError(
                    "Could not reach the LLM provider - network error.",
                    key_mode=self.key_mode,
                ) from e

            content = _first_content(response)
            self._logger.info("LLM response received: %s characters", len(content))
            return content
