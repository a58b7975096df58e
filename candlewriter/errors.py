"""Errors raised by the article generation pipeline.

Everything except ClassificationError reaches the caller. ``http_status``
is a hint for the web layer that maps these onto responses.
"""

from __future__ import annotations


class ArticleGenerationError(Exception):
    """Base class for pipeline failures."""

    http_status = 500


class ValidationError(ArticleGenerationError, ValueError):
    """The generation request cannot produce a usable instruction."""

    http_status = 400


class ConfigurationError(ArticleGenerationError):
    """Provider credentials are missing."""


class EmptyOutputError(ArticleGenerationError):
    """The model returned nothing usable. Not retried."""


class RateLimitExceededError(ArticleGenerationError):
    """Rate limiting persisted through every retry and model fallback."""

    http_status = 429

    def __init__(self, message: str, attempts: int = 0, last_error: Exception | None = None):
        super().__init__(message)
        self.attempts = attempts
        self.last_error = last_error


class ProviderError(ArticleGenerationError):
    """Any non-rate-limit failure of a model call. Not retried."""

    def __init__(self, message: str, model: str = ""):
        super().__init__(message)
        self.model = model


class ClassificationError(ArticleGenerationError):
    """Category lookup failed. Absorbed inside the classifier."""


class GenerationCancelled(Exception):
    """The caller cancelled the run. Kept outside ArticleGenerationError."""
