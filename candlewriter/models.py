"""Request and result types for article generation.

A request is either a ``StandardRequest`` (topic, candle type, language,
composed into a prompt by the pipeline) or a ``CustomPromptRequest``
(an already resolved template, sent to the model untouched).
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Optional, Union

from candlewriter.config import CANDLE_TYPES, DEFAULT_LANGUAGE, LANGUAGES
from candlewriter.errors import ValidationError


def _check_language(language: str) -> None:
    if language not in LANGUAGES:
        raise ValidationError(
            f"Unsupported language '{language}'. Expected one of: {', '.join(LANGUAGES)}"
        )


@dataclass(frozen=True)
class StandardRequest:
    """Generate from a topic using the built-in prompt."""

    topic: str
    candle_type: Optional[str] = None
    language: str = DEFAULT_LANGUAGE

    def __post_init__(self):
        if not isinstance(self.topic, str) or not self.topic.strip():
            raise ValidationError("Topic must be a non-empty string")
        if self.candle_type is not None and self.candle_type not in CANDLE_TYPES:
            raise ValidationError(
                f"Unknown candle type '{self.candle_type}'. "
                f"Expected one of: {', '.join(CANDLE_TYPES)}"
            )
        _check_language(self.language)


@dataclass(frozen=True)
class CustomPromptRequest:
    """Generate from a fully resolved prompt (template mode).

    ``topic`` is only used as the title fallback when the model output has
    no H1.
    """

    prompt: str
    topic: Optional[str] = None
    language: str = DEFAULT_LANGUAGE

    def __post_init__(self):
        if not isinstance(self.prompt, str) or not self.prompt.strip():
            raise ValidationError("Custom prompt must be a non-empty string")
        _check_language(self.language)


GenerationRequest = Union[StandardRequest, CustomPromptRequest]


def build_request(
    topic: str | None = None,
    candle_type: str | None = None,
    language: str = DEFAULT_LANGUAGE,
    custom_prompt: str | None = None,
) -> GenerationRequest:
    """Map loose caller parameters onto a request variant.

    A non-blank custom prompt wins; the topic then only serves as the
    title fallback. Without one, a topic is required.
    """
    if custom_prompt is not None and custom_prompt.strip():
        fallback_topic = topic.strip() if topic and topic.strip() else None
        return CustomPromptRequest(prompt=custom_prompt, topic=fallback_topic, language=language)
    if topic is None:
        raise ValidationError("Either a topic or a custom prompt is required")
    return StandardRequest(topic=topic.strip(), candle_type=candle_type or None, language=language)


@dataclass(frozen=True)
class GeneratedArticle:
    """A finished article, ready to be stored."""

    title: str
    content: str
    excerpt: str
    seo_title: str
    seo_description: str
    seo_keywords: tuple[str, ...]
    reading_time: int
    slug: str
    category_slug: Optional[str] = None

    def to_dict(self) -> dict:
        data = asdict(self)
        data["seo_keywords"] = list(self.seo_keywords)
        return data

    def to_record(self) -> dict:
        """Row for the articles table (column names as stored)."""
        return {
            "title": self.title,
            "slug": self.slug,
            "content": self.content,
            "excerpt": self.excerpt,
            "seo_title": self.seo_title,
            "seo_description": self.seo_description,
            "seo_keywords": list(self.seo_keywords),
            "reading_time": self.reading_time,
            "category_slug": self.category_slug,
        }
