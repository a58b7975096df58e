"""Category labelling step.

A fast model picks one of the fixed category slugs for a finished article.
This is enrichment only: any failure degrades to DEFAULT_CATEGORY and never
aborts generation.
"""

from __future__ import annotations

import anthropic

from candlewriter.config import (
    CATEGORY_SLUGS,
    CLASSIFIER_EXCERPT_CHARS,
    CLASSIFIER_MODEL,
    DEFAULT_CATEGORY,
    REQUEST_TIMEOUT,
)
from candlewriter.errors import ClassificationError
from candlewriter.pipeline.anthropic_retry import message_text


def build_classification_prompt(title: str, content: str) -> str:
    return f"""Determine the category of this article. Choose exactly one:
- faq: questions and answers, explanations of how something works
- guides: step-by-step instructions and practical guides
- seo: articles about rituals, practices and everyday topics written for search
- news: news, announcements and updates

Title: {title}

Article excerpt:
{content[:CLASSIFIER_EXCERPT_CHARS]}

Respond with ONLY the category slug (faq, guides, seo or news)."""


def parse_category(response_text: str) -> str:
    """First known slug found in the answer, in CATEGORY_SLUGS order."""
    lowered = response_text.lower()
    for slug in CATEGORY_SLUGS:
        if slug in lowered:
            return slug
    return DEFAULT_CATEGORY


class CategoryClassifier:
    """Assigns a category slug with a single short model call."""

    def __init__(self, client: anthropic.Anthropic, model: str = CLASSIFIER_MODEL,
                 timeout: float = REQUEST_TIMEOUT):
        self.client = client
        self.model = model
        self.timeout = timeout

    def _request_category(self, title: str, content: str) -> str:
        try:
            message = self.client.messages.create(
                model=self.model,
                max_tokens=20,
                temperature=0,
                messages=[{"role": "user", "content": build_classification_prompt(title, content)}],
                timeout=self.timeout,
            )
            response_text = message_text(message)
        except Exception as e:
            raise ClassificationError(f"Category request failed: {e}") from e
        return parse_category(response_text)

    def classify(self, title: str, content: str) -> str:
        """Return a category slug; DEFAULT_CATEGORY when anything goes wrong."""
        print(f"  -> Classifying article ({self.model})...")
        try:
            category = self._request_category(title, content)
        except ClassificationError as e:
            print(f"  Warning: {e}. Using '{DEFAULT_CATEGORY}'")
            return DEFAULT_CATEGORY
        print(f"  OK Category: {category}")
        return category
