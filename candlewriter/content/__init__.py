"""Deterministic text processing: slugs, excerpts, reading time, SEO fields."""

from candlewriter.content.analyzer import excerpt, extract_keywords, extract_title, reading_time
from candlewriter.content.seo import (
    SeoMetadata,
    build_seo_description,
    build_seo_metadata,
    build_seo_title,
)
from candlewriter.content.slug import slugify, transliterate

__all__ = [
    "excerpt",
    "extract_keywords",
    "extract_title",
    "reading_time",
    "SeoMetadata",
    "build_seo_description",
    "build_seo_metadata",
    "build_seo_title",
    "slugify",
    "transliterate",
]
