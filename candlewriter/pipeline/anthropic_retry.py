"""Retry Anthropic API calls on rate limits, stepping down the model ladder.

Every retry also moves to the next (older, usually less loaded) model, so a
run trades some quality for availability. Once the ladder runs out the
last model is reused. Anything that is not a rate limit fails at once.
"""

from __future__ import annotations

import concurrent.futures
import threading
import time
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

import anthropic

from candlewriter import config
from candlewriter.config import BASE_DELAY, MAX_RETRIES
from candlewriter.errors import GenerationCancelled, ProviderError, RateLimitExceededError

RATE_LIMIT_MARKERS = ("rate limit", "quota", "429", "resource_exhausted")

RATE_LIMIT_MESSAGE = (
    "API rate limit exceeded. Please wait a few minutes and try again. "
    "The model provider limits the number of requests per minute."
)

CANCEL_POLL_INTERVAL = 0.1  # seconds between cancel checks while a call is in flight


@dataclass
class ModelAttempt:
    """Position in the fallback walk for a single generate() call."""

    model_index: int = 0
    retry_count: int = 0
    last_error: Optional[Exception] = None

    def advance(self, ladder_length: int) -> None:
        self.retry_count += 1
        self.model_index = min(self.retry_count, ladder_length - 1)


def model_for_retry(models: Sequence[str], retry_count: int) -> str:
    return models[min(retry_count, len(models) - 1)]


def backoff_delay(retry_count: int) -> float:
    """Seconds to wait before retry ``retry_count + 1``: 1, 2, 4."""
    return BASE_DELAY * (2 ** retry_count)


def is_rate_limit_error(error: BaseException, retry_overloaded: bool | None = None) -> bool:
    """True when the provider is throttling rather than failing.

    HTTP 529 ("overloaded") only counts when ``retry_overloaded`` is on,
    which defaults to the RETRY_ON_OVERLOADED setting.
    """
    if retry_overloaded is None:
        retry_overloaded = config.RETRY_ON_OVERLOADED

    if isinstance(error, anthropic.RateLimitError):
        return True

    status = getattr(error, "status_code", None) or getattr(error, "status", None)
    code = getattr(error, "code", None)
    if status == 429 or code in (429, "RESOURCE_EXHAUSTED"):
        return True
    if retry_overloaded and status == 529:
        return True

    message = str(error).lower()
    return any(marker in message for marker in RATE_LIMIT_MARKERS)


def _wait(delay: float, sleep: Callable[[float], None], cancel_event: threading.Event | None) -> None:
    if cancel_event is None:
        sleep(delay)
    elif cancel_event.wait(delay):
        raise GenerationCancelled("Generation cancelled during retry backoff")


def _check_cancelled(cancel_event: threading.Event | None) -> None:
    if cancel_event is not None and cancel_event.is_set():
        raise GenerationCancelled("Generation cancelled")


def _create(client: anthropic.Anthropic, model: str, cancel_event: threading.Event | None, kwargs: dict):
    """Run one messages.create call; with a cancel event, abandon it on cancel.

    The abandoned worker thread finishes on its own (bounded by the request
    timeout) and its result is dropped.
    """
    if cancel_event is None:
        return client.messages.create(model=model, **kwargs)

    pool = concurrent.futures.ThreadPoolExecutor(max_workers=1)
    try:
        future = pool.submit(client.messages.create, model=model, **kwargs)
        while True:
            done, _ = concurrent.futures.wait([future], timeout=CANCEL_POLL_INTERVAL)
            if done:
                return future.result()
            if cancel_event.is_set():
                future.cancel()
                raise GenerationCancelled(f"Generation cancelled during the {model} call")
    finally:
        pool.shutdown(wait=False)


def messages_create_with_fallback(
    client: anthropic.Anthropic,
    models: Sequence[str],
    max_retries: int = MAX_RETRIES,
    sleep: Callable[[float], None] = time.sleep,
    cancel_event: threading.Event | None = None,
    **kwargs,
):
    """Call client.messages.create(model=..., **kwargs) walking the ladder.

    Returns ``(message, attempt)`` where ``attempt`` tells which model
    answered. Raises RateLimitExceededError after ``max_retries`` throttled
    retries and ProviderError for any other failure. Setting
    ``cancel_event`` aborts a pending call or backoff with GenerationCancelled.
    """
    attempt = ModelAttempt()
    while True:
        _check_cancelled(cancel_event)
        model = model_for_retry(models, attempt.retry_count)
        try:
            message = _create(client, model, cancel_event, kwargs)
        except GenerationCancelled:
            raise
        except Exception as e:
            attempt.last_error = e
            print(f"  Error from {model} (retry {attempt.retry_count}): {e}")
            if not is_rate_limit_error(e):
                raise ProviderError(str(e) or "Failed to generate article. Please try again.", model=model) from e
            if attempt.retry_count >= max_retries:
                raise RateLimitExceededError(
                    RATE_LIMIT_MESSAGE,
                    attempts=attempt.retry_count + 1,
                    last_error=attempt.last_error,
                ) from e
            delay = backoff_delay(attempt.retry_count)
            next_model = model_for_retry(models, attempt.retry_count + 1)
            print(f"  .. Rate limit hit, retrying in {delay}s with {next_model} "
                  f"(attempt {attempt.retry_count + 2}/{max_retries + 1})...")
            _wait(delay, sleep, cancel_event)
            attempt.advance(len(models))
            continue

        # A result that lands after cancellation is discarded.
        _check_cancelled(cancel_event)
        return message, attempt


def message_text(message) -> str:
    """Concatenate the text blocks of a Messages API response."""
    parts = []
    for block in message.content:
        text = getattr(block, "text", None)
        if isinstance(text, str):
            parts.append(text)
    return "".join(parts)
