"""Shared fixtures: a fake Anthropic client and canned model output."""

from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest


ARTICLE_MARKDOWN = """# Практика благодарности

Благодарность меняет то, как мы видим каждый день. В этой статье разберём простую практику.

## Почему благодарность работает

Когда мы замечаем хорошее, внимание перестаёт цепляться за тревогу.

## Как начать

Выделите пять минут вечером и запишите три события дня.

## Ритуал со свечой

Зажгите свечу и произнесите слова благодарности вслух.

Готовы начать? Зажгите свою первую свечу благодарности прямо сейчас."""


class ThrottledError(Exception):
    """Stand-in for a provider error carrying an HTTP status."""

    def __init__(self, message="Too many requests", status_code=429):
        super().__init__(message)
        self.status_code = status_code


def make_message(text):
    """Messages API response with a single text block."""
    return SimpleNamespace(content=[SimpleNamespace(type="text", text=text)])


@pytest.fixture
def article_markdown():
    return ARTICLE_MARKDOWN


@pytest.fixture
def fake_client():
    """Anthropic client whose messages.create is a MagicMock."""
    client = MagicMock()
    client.messages.create.return_value = make_message(ARTICLE_MARKDOWN)
    return client


@pytest.fixture
def sleeps():
    """Recorder used in place of time.sleep."""
    calls = []

    def _sleep(seconds):
        calls.append(seconds)

    _sleep.calls = calls
    return _sleep
