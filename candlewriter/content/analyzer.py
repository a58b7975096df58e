"""Plain-text helpers over generated markdown.

None of these keep state; all of them accept any string, including "".
"""

import math
import re

from candlewriter.config import (
    BASE_KEYWORDS,
    EXCERPT_MAX_LENGTH,
    MAX_KEYWORDS,
    MAX_TITLE_KEYWORDS,
    STOP_WORDS,
    WORDS_PER_MINUTE,
)

MARKDOWN_PUNCTUATION = re.compile(r"[#*\[\]()]")


def reading_time(content: str) -> int:
    """Minutes to read at WORDS_PER_MINUTE, never less than 1."""
    word_count = len(content.split())
    return max(1, math.ceil(word_count / WORDS_PER_MINUTE))


def extract_title(content: str) -> str:
    """Return the first ``# `` heading, or "" when there is none."""
    for line in content.split("\n"):
        if line.startswith("# "):
            return line[2:].strip()
    return ""


def _truncate(text: str, limit: int) -> str:
    cut = text[:limit].strip()
    return cut + "..." if len(text) > limit else cut


def excerpt(content: str) -> str:
    """Plain-text preview of at most EXCERPT_MAX_LENGTH characters plus "..."."""
    # First fence to last: everything between them goes, prose included
    text = re.sub(r"```[\s\S]*```", " ", content)
    text = text.replace("```", " ")
    text = re.sub(r"`[^`\n]*`", " ", text)
    text = MARKDOWN_PUNCTUATION.sub("", text)
    text = re.sub(r"\s+", " ", text).strip()

    if not text:
        # Everything was markup; fall back to the raw text.
        text = re.sub(r"\s+", " ", content).strip()

    return _truncate(text, EXCERPT_MAX_LENGTH)


def extract_keywords(title: str, content: str = "") -> list[str]:
    """Base site keywords followed by up to three meaningful title words.

    ``content`` is accepted for interface stability and not inspected.
    """
    title_words = [
        word
        for word in title.lower().split()
        if len(word) > 3 and word not in STOP_WORDS
    ][:MAX_TITLE_KEYWORDS]
    return [*BASE_KEYWORDS, *title_words][:MAX_KEYWORDS]
