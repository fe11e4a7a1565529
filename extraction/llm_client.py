"""
OpenAI client factory and the resilient chat-completion call.

This module exposes a single shared OpenAI client for the application and
`call_llm`, which performs one logical call with a bounded retry policy:
at most MAX_ATTEMPTS attempts, retrying only a first failure that carries a
rate-limit or service-unavailable status (429/503), after a fixed delay.
The SDK's built-in retries are disabled so this is the only retry policy.
"""

from __future__ import annotations

import time
from typing import Any, Callable, Dict, List, Optional

from openai import APIConnectionError, APIStatusError, APITimeoutError, OpenAI, OpenAIError

from config import DEFAULT_MODEL, MAX_ATTEMPTS, OPENAI_API_KEY, RETRY_DELAY_SECONDS, RETRY_STATUSES
from config.logging import get_logger
from domain.errors import ConfigurationError, UpstreamFatalError, UpstreamTransientError

LOG = get_logger("llm-client")

_client: OpenAI | None = None


def get_client() -> OpenAI:
    """Return a singleton OpenAI client instance."""
    global _client
    if _client is None:
        if not OPENAI_API_KEY:
            raise ConfigurationError("OpenAI API key not configured")
        _client = OpenAI(api_key=OPENAI_API_KEY, max_retries=0)
    return _client


def _attempt(client: Any, payload: Dict[str, Any], timeout: float) -> str:
    """Run one chat completion; map SDK failures onto the upstream error types."""
    try:
        response = client.chat.completions.create(timeout=timeout, **payload)
    except APITimeoutError as e:
        raise UpstreamFatalError(f"OpenAI request timed out after {timeout}s", details=str(e)) from e
    except APIStatusError as e:
        error_cls = UpstreamTransientError if e.status_code in RETRY_STATUSES else UpstreamFatalError
        raise error_cls(f"OpenAI returned HTTP {e.status_code}", status_code=e.status_code, details=str(e)) from e
    except APIConnectionError as e:
        raise UpstreamFatalError("OpenAI connection failed", details=str(e)) from e
    except OpenAIError as e:
        raise UpstreamFatalError("OpenAI request failed", details=str(e)) from e

    choices = getattr(response, "choices", None) or []
    if not choices:
        return ""
    content = choices[0].message.content
    return content.strip() if content else ""


def _call_with_budget(
    client: Any,
    payload: Dict[str, Any],
    timeout: float,
    attempts_left: int,
    sleep: Callable[[float], None],
) -> str:
    try:
        return _attempt(client, payload, timeout)
    except UpstreamTransientError as e:
        if attempts_left > 1:
            LOG.warning("%s from OpenAI, retrying in %.1fs", e.status_code, RETRY_DELAY_SECONDS)
            sleep(RETRY_DELAY_SECONDS)
            return _call_with_budget(client, payload, timeout, attempts_left - 1, sleep)
        LOG.error("OpenAI API request failed after retry: %s", e.details)
        raise UpstreamFatalError(str(e), status_code=e.status_code, details=e.details) from e
    except UpstreamFatalError as e:
        LOG.error("OpenAI API request failed: %s", e.details)
        raise


def call_chat(
    messages: List[Dict[str, Any]],
    *,
    timeout: float,
    model: str = DEFAULT_MODEL,
    temperature: float = 0,
    response_format: Optional[Dict[str, Any]] = None,
    client: Any = None,
    sleep: Callable[[float], None] = time.sleep,
) -> str:
    """
    Send a chat message list and return the trimmed reply text.

    Raises:
        ConfigurationError: no client given and OPENAI_API_KEY is not set
        UpstreamFatalError: the call failed terminally (including timeouts)
    """
    client = client or get_client()

    payload: Dict[str, Any] = {
        "model": model,
        "messages": messages,
        "temperature": temperature,
    }
    if response_format:
        payload["response_format"] = response_format

    return _call_with_budget(client, payload, timeout, MAX_ATTEMPTS, sleep)


def call_llm(system_prompt: str, user_prompt: str, **kwargs: Any) -> str:
    """Send one system+user prompt pair through `call_chat`."""
    return call_chat(
        [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_prompt},
        ],
        **kwargs,
    )
