"""Orchestrate the full article generation pipeline.

Steps:
1. Prompt: built from the topic, or a resolved template used verbatim
2. Generation: model ladder with exponential backoff on rate limits
3. Cleanup: lift the H1 into the title, drop code-fence wrappers
4. Metadata: excerpt, reading time, SEO fields, slug
5. Category: best-effort label from a fast model
"""

from __future__ import annotations

import re
import threading
import time
from typing import Callable, Optional, Sequence

import anthropic

from candlewriter.config import (
    CLAUDE_MAX_TOKENS,
    CLAUDE_TEMPERATURE,
    MAX_RETRIES,
    MODEL_LADDER,
    PLACEHOLDER_TITLES,
    REQUEST_TIMEOUT,
)
from candlewriter.content import build_seo_metadata, excerpt, extract_title, reading_time, slugify
from candlewriter.errors import ArticleGenerationError, EmptyOutputError, GenerationCancelled
from candlewriter.models import (
    CustomPromptRequest,
    GeneratedArticle,
    GenerationRequest,
    build_request,
)
from candlewriter.pipeline.anthropic_retry import message_text, messages_create_with_fallback
from candlewriter.pipeline.classifier import CategoryClassifier
from candlewriter.pipeline.client import create_client
from candlewriter.pipeline.prompts import compose_prompt

FENCE_OPEN = re.compile(r"^```[\w-]*[ \t]*\n?")
FENCE_CLOSE = re.compile(r"\n?```\s*$")


# ── Output cleanup ────────────────────────────────────────────────────────


def resolve_prompt(request: GenerationRequest) -> str:
    if isinstance(request, CustomPromptRequest):
        return request.prompt
    return compose_prompt(request.topic, request.candle_type, request.language)


def strip_code_fence(text: str) -> str:
    """Remove a code fence wrapped around the whole document.

    Only a fence pair that opens the text and closes it, with no other
    fence in between, counts as a wrapper. An unpaired fence at either
    end is dropped; code blocks inside the body are left alone.
    """
    text = text.strip()
    fences = text.count("```")
    opens = text.startswith("```")
    closes = text.endswith("```") and len(text) > 3
    if opens and closes and fences == 2:
        text = FENCE_OPEN.sub("", text, count=1)
        text = FENCE_CLOSE.sub("", text, count=1)
    elif fences % 2 == 1:
        if closes:
            text = FENCE_CLOSE.sub("", text, count=1)
        elif opens:
            text = FENCE_OPEN.sub("", text, count=1)
    return text.strip()


def strip_leading_h1(text: str, title: str) -> str:
    """Drop the H1 that was lifted into the title."""
    if title:
        anchored = re.compile(r"^\s*#+\s*" + re.escape(title) + r"[ \t]*(?:\n|$)")
        if anchored.match(text):
            return anchored.sub("", text, count=1).strip()

    lines = text.split("\n")
    for i, line in enumerate(lines):
        if line.startswith("# "):
            if i == 0 or line[2:].strip() == title:
                del lines[i]
            break
    return "\n".join(lines).strip()


def split_title_and_body(raw: str, fallback_title: str) -> tuple[str, str]:
    """Return ``(title, body)`` from raw model output."""
    text = strip_code_fence(raw)
    title = extract_title(text) or fallback_title
    body = strip_leading_h1(text, title)
    return title, strip_code_fence(body)


# ── Generator ─────────────────────────────────────────────────────────────


class ArticleGenerator:
    """Turns a GenerationRequest into a GeneratedArticle.

    Holds no per-run state, so one instance can serve concurrent callers.
    """

    def __init__(
        self,
        client: Optional[anthropic.Anthropic] = None,
        models: Sequence[str] = MODEL_LADDER,
        max_retries: int = MAX_RETRIES,
        classifier: Optional[CategoryClassifier] = None,
        classify: bool = True,
        timeout: float = REQUEST_TIMEOUT,
        sleep: Callable[[float], None] = time.sleep,
    ):
        if not models:
            raise ValueError("Model ladder must not be empty")
        self.client = client if client is not None else create_client(timeout=timeout)
        self.models = tuple(models)
        self.max_retries = max_retries
        self.timeout = timeout
        self.sleep = sleep
        self.classifier = None
        if classify:
            self.classifier = classifier or CategoryClassifier(self.client, timeout=timeout)

    def generate(self, request: GenerationRequest,
                 cancel_event: threading.Event | None = None) -> GeneratedArticle:
        prompt = resolve_prompt(request)

        print(f"  -> Generating article ({self.models[0]}, ladder of {len(self.models)})...")
        start = time.time()
        message, attempt = messages_create_with_fallback(
            self.client,
            self.models,
            max_retries=self.max_retries,
            sleep=self.sleep,
            cancel_event=cancel_event,
            max_tokens=CLAUDE_MAX_TOKENS,
            temperature=CLAUDE_TEMPERATURE,
            messages=[{"role": "user", "content": prompt}],
            timeout=self.timeout,
        )
        elapsed = time.time() - start

        raw = message_text(message)
        if not raw.strip():
            raise EmptyOutputError("The model returned empty content")
        model = self.models[attempt.model_index]
        print(f"  OK Generated {len(raw.split())} words in {elapsed:.1f}s ({model})")

        return self._build_article(raw, request, cancel_event)

    def _build_article(self, raw: str, request: GenerationRequest,
                       cancel_event: threading.Event | None) -> GeneratedArticle:
        fallback_title = (request.topic or "").strip() or PLACEHOLDER_TITLES[request.language]
        title, content = split_title_and_body(raw, fallback_title)
        if not content:
            raise EmptyOutputError(
                "Article body is empty after cleanup. Check the prompt template."
            )

        seo = build_seo_metadata(title, content)
        slug = slugify(title)
        if not slug:
            raise ArticleGenerationError("Failed to generate a slug for the article")

        category_slug = None
        if self.classifier is not None:
            if cancel_event is not None and cancel_event.is_set():
                raise GenerationCancelled("Generation cancelled before classification")
            category_slug = self.classifier.classify(title, content)

        return GeneratedArticle(
            title=title,
            content=content,
            excerpt=excerpt(content),
            seo_title=seo.seo_title,
            seo_description=seo.seo_description,
            seo_keywords=tuple(seo.seo_keywords),
            reading_time=reading_time(content),
            slug=slug,
            category_slug=category_slug,
        )


def generate_article(
    topic: str | None = None,
    candle_type: str | None = None,
    language: str = "ru",
    custom_prompt: str | None = None,
    client: Optional[anthropic.Anthropic] = None,
    cancel_event: threading.Event | None = None,
) -> GeneratedArticle:
    """Generate a single article from loose parameters.

    Args:
        topic: Article topic (standard mode), or title fallback in template mode.
        candle_type: Optional candle type for the closing call to action.
        language: "ru" or "en".
        custom_prompt: Resolved template text. If provided, it is sent to
                       the model verbatim and the built-in prompt is skipped.
        client: Anthropic client; built from ANTHROPIC_API_KEY when omitted.
        cancel_event: Set it to abort the run.
    """
    request = build_request(topic=topic, candle_type=candle_type, language=language,
                            custom_prompt=custom_prompt)
    return ArticleGenerator(client=client).generate(request, cancel_event=cancel_event)

