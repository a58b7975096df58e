"""URL slugs from article titles (Cyrillic is transliterated)."""

import re
import time

TRANSLITERATION = {
    "а": "a", "б": "b", "в": "v", "г": "g", "д": "d", "е": "e", "ё": "yo",
    "ж": "zh", "з": "z", "и": "i", "й": "y", "к": "k", "л": "l", "м": "m",
    "н": "n", "о": "o", "п": "p", "р": "r", "с": "s", "т": "t", "у": "u",
    "ф": "f", "х": "h", "ц": "ts", "ч": "ch", "ш": "sh", "щ": "sch", "ъ": "",
    "ы": "y", "ь": "", "э": "e", "ю": "yu", "я": "ya",
}


def transliterate(text: str) -> str:
    """Replace Cyrillic letters with Latin ones; everything else is kept."""
    return "".join(TRANSLITERATION.get(ch, ch) for ch in text)


def slugify(title: str) -> str:
    """Turn a title into a slug matching ``^[a-z0-9-]+$``.

    Titles with nothing left after cleanup (emoji, CJK, punctuation) get
    ``article-<unix millis>``.
    """
    slug = transliterate((title or "").lower())
    slug = re.sub(r"[^a-z0-9\s-]", "", slug)
    slug = re.sub(r"\s+", "-", slug)
    slug = re.sub(r"-+", "-", slug)
    slug = slug.strip("-")
    if not slug:
        return f"article-{int(time.time() * 1000)}"
    return slug
