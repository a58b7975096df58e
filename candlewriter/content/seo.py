"""SEO title, description and keywords for a generated article."""

import re
from typing import NamedTuple

from candlewriter.config import SEO_DESCRIPTION_MAX_LENGTH, SEO_TITLE_MAX_LENGTH, SITE_NAME
from candlewriter.content.analyzer import MARKDOWN_PUNCTUATION, extract_keywords


class SeoMetadata(NamedTuple):
    seo_title: str
    seo_description: str
    seo_keywords: list[str]


def build_seo_title(title: str) -> str:
    if len(title) > SEO_TITLE_MAX_LENGTH:
        return title[:SEO_TITLE_MAX_LENGTH].strip() + "..."
    return f"{title} | {SITE_NAME}"


def build_seo_description(content: str) -> str:
    plain = MARKDOWN_PUNCTUATION.sub("", content)
    plain = re.sub(r"\s+", " ", plain).strip()
    if len(plain) > SEO_DESCRIPTION_MAX_LENGTH:
        return plain[: SEO_DESCRIPTION_MAX_LENGTH - 3].strip() + "..."
    return plain


def build_seo_metadata(title: str, content: str) -> SeoMetadata:
    """Derive the title/description/keywords triad.

    The three parts are independent of each other.
    """
    return SeoMetadata(
        seo_title=build_seo_title(title),
        seo_description=build_seo_description(content),
        seo_keywords=extract_keywords(title, content),
    )
