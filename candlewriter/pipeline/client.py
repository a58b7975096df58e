"""Anthropic client construction."""

from __future__ import annotations

import anthropic

from candlewriter import config
from candlewriter.errors import ConfigurationError


def _missing_key_message() -> str:
    if config.APP_ENV == "production":
        return (
            "ANTHROPIC_API_KEY is not set in environment variables. "
            "Add it to the deployment's environment settings and redeploy."
        )
    return "ANTHROPIC_API_KEY is not set. Add it to your .env file."


def create_client(api_key: str | None = None, timeout: float | None = None) -> anthropic.Anthropic:
    """Return an Anthropic client, failing fast when no key is configured.

    The SDK's own retries are disabled: rate limits are handled by the
    model ladder in the generator.
    """
    key = api_key or config.ANTHROPIC_API_KEY
    if not key:
        raise ConfigurationError(_missing_key_message())
    return anthropic.Anthropic(
        api_key=key,
        timeout=timeout if timeout is not None else config.REQUEST_TIMEOUT,
        max_retries=0,
    )
