"""Individual quality checks and the main validate_article orchestrator."""

from __future__ import annotations

import re

from candlewriter.config import (
    EXCERPT_MAX_LENGTH,
    SEO_DESCRIPTION_MAX_LENGTH,
    SEO_TITLE_MAX_LENGTH,
    SITE_NAME,
    TARGET_WORDS_MAX,
    TARGET_WORDS_MIN,
)
from candlewriter.models import GeneratedArticle
from candlewriter.validation.report import compute_grade

CANDLE_WORDS = ("свеч", "candle")


# ── Main validation entry point ──────────────────────────────────────────


def validate_article(article: GeneratedArticle, candle_type: str | None = None) -> dict:
    """Run all checks on a generated article.

    Returns a dict with per-check results, issues, warnings, grade, and
    overall pass/fail. Never raises on odd content.
    """
    results = {
        "word_count": check_word_count(article.content),
        "h2_count": check_h2_count(article.content),
        "structure": check_structure(article.content),
        "cta": check_cta(article.content, candle_type),
        "seo": check_seo_fields(article),
    }

    issues, warnings = _collect_issues(results)
    results["issues"] = issues
    results["warnings"] = warnings
    results["pass"] = len(issues) == 0
    results["grade"] = compute_grade(issues, warnings)

    return results


# ── Issue aggregation ─────────────────────────────────────────────────────


def _collect_issues(results: dict) -> tuple[list[str], list[str]]:
    """Walk through all check results and collect issues/warnings."""
    issues = []
    warnings = []

    wc = results["word_count"]
    if wc["count"] < TARGET_WORDS_MIN * 0.75:
        issues.append(f"Too short: {wc['count']} words (need {TARGET_WORDS_MIN}+)")
    elif wc["count"] < TARGET_WORDS_MIN:
        warnings.append(f"Slightly short: {wc['count']} words (target {TARGET_WORDS_MIN}-{TARGET_WORDS_MAX})")
    if wc["count"] > TARGET_WORDS_MAX * 1.25:
        issues.append(f"Too long: {wc['count']} words (target {TARGET_WORDS_MAX} max)")
    elif wc["count"] > TARGET_WORDS_MAX:
        warnings.append(f"Slightly long: {wc['count']} words (target {TARGET_WORDS_MAX} max)")

    h2 = results["h2_count"]
    if h2["count"] < 3:
        issues.append(f"Too few H2s: {h2['count']} (need 3+)")

    structure = results["structure"]
    if structure["has_h1"]:
        issues.append("Content still contains an H1 heading")
    if structure["has_code_fence"]:
        issues.append("Content contains a code fence")
    if not structure["starts_with_paragraph"]:
        warnings.append("Article doesn't open with a paragraph")

    cta = results["cta"]
    if cta["required"] and not cta["pass"]:
        warnings.append("Closing paragraph doesn't mention a candle")

    seo = results["seo"]
    for field, ok in seo.items():
        if not ok:
            issues.append(f"SEO field out of bounds: {field}")

    return issues, warnings


# ── Individual check functions ────────────────────────────────────────────


def count_prose_words(content: str) -> int:
    """Count visible words: headers, link URLs and emphasis markers removed."""
    text = content
    text = re.sub(r"!\[[^\]]*\]\([^)]+\)", "", text)
    text = re.sub(r"\[([^\]]+)\]\([^)]+\)", r"\1", text)
    text = re.sub(r"^#{1,6}\s+", "", text, flags=re.MULTILINE)
    text = re.sub(r"\*{1,3}", "", text)
    text = re.sub(r"^\s*[-*+]\s+", "", text, flags=re.MULTILINE)
    text = re.sub(r"^\s*\d+\.\s+", "", text, flags=re.MULTILINE)
    text = re.sub(r"^\s*>\s*", "", text, flags=re.MULTILINE)
    text = re.sub(r"^[-*_]{3,}\s*$", "", text, flags=re.MULTILINE)
    return len(text.split())


def check_word_count(content: str) -> dict:
    count = count_prose_words(content)
    return {"count": count, "pass": TARGET_WORDS_MIN <= count <= TARGET_WORDS_MAX}


def check_h2_count(content: str) -> dict:
    h2s = re.findall(r"^## .+", content, re.MULTILINE)
    return {"count": len(h2s), "headers": h2s, "pass": len(h2s) >= 3}


def check_structure(content: str) -> dict:
    first_non_empty = next((line.strip() for line in content.split("\n") if line.strip()), "")
    return {
        "starts_with_paragraph": bool(first_non_empty) and not first_non_empty.startswith("#"),
        "has_h1": bool(re.search(r"^# ", content, re.MULTILINE)),
        "has_code_fence": "```" in content,
    }


def check_cta(content: str, candle_type: str | None) -> dict:
    """When a candle type was requested, the last paragraph should mention a candle."""
    if not candle_type:
        return {"required": False, "pass": True}
    paragraphs = [p for p in re.split(r"\n\s*\n", content) if p.strip()]
    closing = paragraphs[-1].lower() if paragraphs else ""
    return {"required": True, "pass": any(word in closing for word in CANDLE_WORDS)}


def check_seo_fields(article: GeneratedArticle) -> dict:
    return {
        "seo_title": len(article.seo_title) <= SEO_TITLE_MAX_LENGTH + len(f" | {SITE_NAME}"),
        "seo_description": len(article.seo_description) <= SEO_DESCRIPTION_MAX_LENGTH,
        "excerpt": len(article.excerpt) <= EXCERPT_MAX_LENGTH + 3,
    }
