"""Central configuration for the article generation pipeline."""

import os
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()

# ── Paths ──────────────────────────────────────────────────────────────────
ROOT_DIR = Path(__file__).resolve().parent.parent
ARTICLE_OUTPUT_DIR = ROOT_DIR / "output" / "articles"

# ── Environment ────────────────────────────────────────────────────────────
ANTHROPIC_API_KEY = os.getenv("ANTHROPIC_API_KEY", "")
APP_ENV = os.getenv("APP_ENV", "development")
SITE_NAME = "CandleTime"

# ── Claude settings ────────────────────────────────────────────────────────
# Fallback ladder, newest first. Retry N uses MODEL_LADDER[min(N, len - 1)].
MODEL_LADDER = (
    "claude-opus-4-6",
    "claude-sonnet-4-5-20250929",
    "claude-sonnet-4-20250514",
    "claude-haiku-4-5-20251001",
)
CLASSIFIER_MODEL = "claude-haiku-4-5-20251001"  # fast model for the category label
CLAUDE_MAX_TOKENS = 8000  # ~1800 words of Russian prose with headings
CLAUDE_TEMPERATURE = 0.7
REQUEST_TIMEOUT = float(os.getenv("REQUEST_TIMEOUT", "60"))  # seconds, per model call

# ── Retry settings ─────────────────────────────────────────────────────────
MAX_RETRIES = 3
BASE_DELAY = 1  # seconds; 1, 2, 4
# Treat HTTP 529 "overloaded" as throttling and walk the ladder on it
RETRY_ON_OVERLOADED = os.getenv("RETRY_ON_OVERLOADED", "false").lower() in ("1", "true", "yes")

# ── Article settings ───────────────────────────────────────────────────────
LANGUAGES = ("ru", "en")
DEFAULT_LANGUAGE = "ru"
CANDLE_TYPES = ("calm", "support", "memory", "gratitude", "focus")
WORDS_PER_MINUTE = 200
EXCERPT_MAX_LENGTH = 150
SEO_TITLE_MAX_LENGTH = 50
SEO_DESCRIPTION_MAX_LENGTH = 160
MAX_KEYWORDS = 10
MAX_TITLE_KEYWORDS = 3
TARGET_WORDS_MIN = 1200
TARGET_WORDS_MAX = 1800
PLACEHOLDER_TITLES = {
    "ru": "Новая статья",
    "en": "New article",
}

# ── Categories ─────────────────────────────────────────────────────────────
# Checked in this order when parsing the classifier's answer; first hit wins.
CATEGORY_SLUGS = ("faq", "guides", "seo", "news")
DEFAULT_CATEGORY = "faq"
CLASSIFIER_EXCERPT_CHARS = 500

# ── SEO keywords ───────────────────────────────────────────────────────────
BASE_KEYWORDS = (
    SITE_NAME,
    "символические свечи",
    "онлайн свечи",
)

STOP_WORDS = frozenset({
    "как", "что", "для", "это", "или", "и", "в", "на", "с", "по", "от", "до",
    "the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for", "of",
})
