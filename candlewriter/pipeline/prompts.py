"""Build the article generation prompt for Claude.

Both languages carry a complete instruction text; nothing is translated at
runtime. Template mode bypasses this module entirely.
"""

from __future__ import annotations

from candlewriter.config import DEFAULT_LANGUAGE, SITE_NAME

# ── Candle type labels ────────────────────────────────────────────────────

CANDLE_TYPE_DESCRIPTIONS = {
    "calm": {
        "ru": "Спокойствие - для умиротворения и гармонии",
        "en": "Calm - for peace and harmony",
    },
    "support": {
        "ru": "Поддержка - чтобы поддержать кого-то",
        "en": "Support - to support someone",
    },
    "memory": {
        "ru": "Память - в память о ком-то или о чем-то",
        "en": "Memory - in memory of someone or something",
    },
    "gratitude": {
        "ru": "Благодарность - чтобы выразить благодарность",
        "en": "Gratitude - to express gratitude",
    },
    "focus": {
        "ru": "Фокус - для концентрации и намерений",
        "en": "Focus - for concentration and intentions",
    },
}

# "a candle of <label>" as it reads inside the example sentence
CANDLE_TYPE_LABELS = {
    "calm": {"ru": "спокойствия", "en": "calm"},
    "support": {"ru": "поддержки", "en": "support"},
    "memory": {"ru": "памяти", "en": "memory"},
    "gratitude": {"ru": "благодарности", "en": "gratitude"},
    "focus": {"ru": "фокуса", "en": "focus"},
}


def build_cta_clause(candle_type: str | None, language: str = DEFAULT_LANGUAGE) -> str:
    """Closing call-to-action instruction, or "" without a candle type."""
    if not candle_type:
        return ""
    description = CANDLE_TYPE_DESCRIPTIONS.get(candle_type, {}).get(language, candle_type)
    label = CANDLE_TYPE_LABELS.get(candle_type, {}).get(language, candle_type)
    if language == "ru":
        return (
            "\n\nВ конце статьи добавь мягкий призыв к действию с упоминанием "
            f'символической свечи типа "{description}". Например: "Готовы начать? '
            f'Зажгите свою первую свечу {label} прямо сейчас."'
        )
    return (
        "\n\nAt the end of the article, add a soft call to action mentioning a "
        f'symbolic candle of type "{description}". For example: "Ready to begin? '
        f'Light your first {label} candle right now."'
    )


# ── Prompt ────────────────────────────────────────────────────────────────


def compose_prompt(topic: str, candle_type: str | None = None, language: str = DEFAULT_LANGUAGE) -> str:
    """Return the full instruction for one article.

    Deterministic: the same arguments always give the same string.
    """
    cta = build_cta_clause(candle_type, language)
    if language == "ru":
        return _build_ru_prompt(topic, cta, bool(candle_type))
    return _build_en_prompt(topic, cta, bool(candle_type))


def _build_ru_prompt(topic: str, cta: str, with_cta: bool) -> str:
    closing = "Заключение с призывом к действию" if with_cta else "Заключение"
    return f"""Ты - эксперт по написанию SEO-оптимизированных статей для сайта {SITE_NAME}.

{SITE_NAME} - это тихое место для зажигания символических свечей онлайн. Без ленты и лайков, только спокойный жест внимания.

Задача: Напиши SEO-статью на тему "{topic}".

Требования:
- Длина: 1200-1800 слов
- Формат: Markdown (используй H1 для главного заголовка, H2 для разделов, H3 для подразделов, списки, параграфы)
- Тон: спокойный, теплый, без пафоса
- Стиль: простой, человеческий, без инфобизнеса
- Язык: Русский{cta}

Структура статьи:
1. H1 заголовок (главный заголовок статьи - только один, на первой строке, начинается с "# ")
2. Введение (2-3 параграфа, объясняющие тему)
3. Основной контент (несколько разделов с H2, каждый раздел может содержать подразделы H3)
4. Практические советы или примеры (если применимо)
5. {closing}

Важно:
- Используй реальные примеры и практические советы
- Пиши естественно, как будто разговариваешь с читателем
- Избегай клише и общих фраз
- Структурируй информацию логично
- Используй списки и подзаголовки для лучшей читаемости
- Не оборачивай ответ в блок кода

Верни только Markdown контент статьи, без дополнительных комментариев или объяснений."""


def _build_en_prompt(topic: str, cta: str, with_cta: bool) -> str:
    closing = "Conclusion with a call to action" if with_cta else "Conclusion"
    return f"""You are an expert writer of SEO-optimized articles for the {SITE_NAME} website.

{SITE_NAME} is a quiet place to light symbolic candles online. No feed and no likes, just a calm gesture of attention.

Task: Write an SEO article on the topic "{topic}".

Requirements:
- Length: 1200-1800 words
- Format: Markdown (use H1 for the main title, H2 for sections, H3 for subsections, lists, paragraphs)
- Tone: calm, warm, without pathos
- Style: simple and human, no info-business hype
- Language: English{cta}

Article structure:
1. H1 title (the main title - only one, on the first line, starting with "# ")
2. Introduction (2-3 paragraphs explaining the topic)
3. Main content (several H2 sections, each may contain H3 subsections)
4. Practical tips or examples (where relevant)
5. {closing}

Important:
- Use real examples and practical advice
- Write naturally, as if talking to the reader
- Avoid clichés and generic phrases
- Structure the information logically
- Use lists and subheadings for readability
- Do not wrap the answer in a code block

Return only the Markdown content of the article, with no extra comments or explanations."""
