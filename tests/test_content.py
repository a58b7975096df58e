"""Tests for slug, excerpt, reading time and SEO helpers."""

import re

import pytest

from candlewriter.config import BASE_KEYWORDS
from candlewriter.content import (
    build_seo_description,
    build_seo_metadata,
    build_seo_title,
    excerpt,
    extract_keywords,
    extract_title,
    reading_time,
    slugify,
    transliterate,
)


# ===================================================================
# TestSlugify
# ===================================================================

class TestSlugify:

    @pytest.mark.parametrize("title,expected", [
        ("Как зажечь свечу", "kak-zazhech-svechu"),
        ("Привет мир", "privet-mir"),
        ("Статья - про - медитацию", "statya-pro-meditatsiyu"),
        ("Практика благодарности", "praktika-blagodarnosti"),
        ("Evening Calm: 5 Steps!", "evening-calm-5-steps"),
    ])
    def test_known_titles(self, title, expected):
        assert slugify(title) == expected

    def test_slug_shape(self):
        slug = slugify("  Ёлка, щука и   ЪЬ-знаки  ")
        assert re.fullmatch(r"[a-z0-9-]+", slug)
        assert not slug.startswith("-") and not slug.endswith("-")
        assert "--" not in slug

    def test_idempotent(self):
        once = slugify("Свеча памяти для близких")
        assert slugify(once) == once

    def test_unsluggable_title_gets_timestamp(self):
        assert re.fullmatch(r"article-\d+", slugify("🕯️✨"))
        assert re.fullmatch(r"article-\d+", slugify(""))

    def test_transliterate_keeps_latin(self):
        assert transliterate("abc щ") == "abc sch"


# ===================================================================
# TestAnalyzer
# ===================================================================

class TestAnalyzer:

    def test_reading_time_minimum_is_one(self):
        assert reading_time("") == 1
        assert reading_time("одно слово") == 1

    def test_reading_time_rounds_up(self):
        assert reading_time("слово " * 201) == 2
        assert reading_time("слово " * 400) == 2

    def test_extract_title(self, article_markdown):
        assert extract_title(article_markdown) == "Практика благодарности"
        assert extract_title("## Only a subheading\n\ntext") == ""
        assert extract_title("# First\n\n# Second") == "First"

    def test_excerpt_strips_markup(self):
        assert excerpt("## Заголовок\n\n**Жирный** текст") == "Заголовок Жирный текст"

    def test_excerpt_truncates(self):
        text = "слово " * 100
        result = excerpt(text)
        assert result.endswith("...")
        assert len(result) <= 153

    def test_excerpt_short_text_has_no_ellipsis(self):
        assert excerpt("Короткий текст.") == "Короткий текст."

    def test_excerpt_drops_code_from_first_to_last_fence(self):
        content = "Вступление\n```\na\n```\nсередина\n```python\nb\n```\nконец"
        assert excerpt(content) == "Вступление конец"

    def test_excerpt_drops_inline_code(self):
        assert excerpt("Запустите `make` сейчас") == "Запустите сейчас"

    def test_excerpt_falls_back_to_raw_text(self):
        assert excerpt("# ()") == "# ()"

    def test_keywords_from_title(self):
        keywords = extract_keywords("Практика благодарности")
        assert keywords == [*BASE_KEYWORDS, "практика", "благодарности"]

    def test_keywords_skip_stop_words_and_cap(self):
        keywords = extract_keywords("как для первая вторая третья четвертая")
        assert keywords[len(BASE_KEYWORDS):] == ["первая", "вторая", "третья"]
        assert len(extract_keywords("a " * 50)) <= 10


# ===================================================================
# TestSeo
# ===================================================================

class TestSeo:

    def test_short_title_gets_site_suffix(self):
        assert build_seo_title("Медитация") == "Медитация | CandleTime"

    def test_long_title_is_cut(self):
        title = "Очень длинный заголовок статьи " * 3
        seo_title = build_seo_title(title)
        assert seo_title.endswith("...")
        assert len(seo_title) <= 53
        assert "CandleTime" not in seo_title

    def test_description_limit(self):
        description = build_seo_description("## Раздел\n\n" + "текст " * 100)
        assert len(description) <= 160
        assert description.endswith("...")
        assert "#" not in description

    def test_metadata_triad(self, article_markdown):
        meta = build_seo_metadata("Практика благодарности", article_markdown)
        assert meta.seo_title == "Практика благодарности | CandleTime"
        assert meta.seo_keywords[:3] == list(BASE_KEYWORDS)
