"""Tests for ArticleGenerator: prompt choice, cleanup, metadata, classification."""

import re
import threading
from unittest.mock import MagicMock

import pytest

from candlewriter.config import BASE_KEYWORDS, MODEL_LADDER
from candlewriter.errors import (
    EmptyOutputError,
    GenerationCancelled,
    ProviderError,
    RateLimitExceededError,
)
from candlewriter.models import CustomPromptRequest, StandardRequest
from candlewriter.pipeline.generator import (
    ArticleGenerator,
    generate_article,
    split_title_and_body,
    strip_code_fence,
    strip_leading_h1,
)
from tests.conftest import ThrottledError, make_message


def _generator(client, sleeps, **kwargs):
    kwargs.setdefault("classify", False)
    return ArticleGenerator(client=client, sleep=sleeps, **kwargs)


# ===================================================================
# TestCleanup
# ===================================================================

class TestCleanup:

    def test_unwraps_markdown_fence(self):
        assert strip_code_fence("```markdown\n# Title\n\nBody\n```") == "# Title\n\nBody"

    def test_bare_fence(self):
        assert strip_code_fence("```\nBody\n```") == "Body"

    def test_leaves_inner_code_blocks(self):
        text = "Intro\n\n```\ncode\n```"
        assert strip_code_fence(text) == text

    def test_trailing_unpaired_fence(self):
        assert strip_code_fence("Body text\n```") == "Body text"

    def test_body_opening_with_code_block_is_kept(self):
        text = "```bash\necho hi\n```\n\nТекст после кода."
        assert strip_code_fence(text) == text

    def test_two_blocks_are_not_a_wrapper(self):
        text = "```bash\na\n```\n\nТекст\n\n```bash\nb\n```"
        assert strip_code_fence(text) == text

    def test_unclosed_wrapper(self):
        assert strip_code_fence("```markdown\n# Title\n\nBody") == "# Title\n\nBody"

    def test_strip_h1_matching_title(self):
        assert strip_leading_h1("# Свечи\n\nТекст", "Свечи") == "Текст"

    def test_strip_h1_on_first_line_only(self):
        text = "Вступление\n\n# Другой заголовок\n\nТекст"
        assert strip_leading_h1(text, "Свечи") == text

    def test_h2_is_kept(self):
        assert strip_leading_h1("## Раздел\n\nТекст", "Свечи") == "## Раздел\n\nТекст"

    def test_split_without_h1_uses_fallback(self):
        title, body = split_title_and_body("Просто текст.", "Запасной заголовок")
        assert title == "Запасной заголовок"
        assert body == "Просто текст."


# ===================================================================
# TestGenerate
# ===================================================================

class TestGenerate:

    def test_end_to_end(self, fake_client, sleeps):
        article = _generator(fake_client, sleeps).generate(
            StandardRequest(topic="Практика благодарности", candle_type="gratitude")
        )
        assert article.title == "Практика благодарности"
        assert article.slug == "praktika-blagodarnosti"
        assert not article.content.startswith("#")
        assert not re.search(r"^# ", article.content, re.MULTILINE)
        assert article.content.startswith("Благодарность меняет")
        assert article.seo_title == "Практика благодарности | CandleTime"
        assert article.seo_keywords == (*BASE_KEYWORDS, "практика", "благодарности")
        assert article.reading_time == 1
        assert len(article.excerpt) <= 153
        assert article.category_slug is None

    def test_short_stub_output(self, sleeps):
        client = MagicMock()
        client.messages.create.return_value = make_message(
            "# Практика благодарности\n\nТекст статьи о благодарности..."
        )
        article = _generator(client, sleeps).generate(
            StandardRequest(topic="Практика благодарности", candle_type="gratitude", language="ru")
        )
        assert article.content == "Текст статьи о благодарности..."
        assert article.slug == "praktika-blagodarnosti"
        assert article.reading_time >= 1

    def test_request_parameters(self, fake_client, sleeps):
        _generator(fake_client, sleeps, timeout=12).generate(StandardRequest(topic="Медитация"))
        kwargs = fake_client.messages.create.call_args.kwargs
        assert kwargs["model"] == MODEL_LADDER[0]
        assert kwargs["max_tokens"] == 8000
        assert kwargs["temperature"] == 0.7
        assert kwargs["timeout"] == 12
        assert "Медитация" in kwargs["messages"][0]["content"]

    def test_custom_prompt_sent_verbatim(self, fake_client, sleeps):
        prompt = "Напиши статью о свечах.\n\nИспользуй {braces} как есть."
        _generator(fake_client, sleeps).generate(CustomPromptRequest(prompt=prompt))
        assert fake_client.messages.create.call_args.kwargs["messages"] == [
            {"role": "user", "content": prompt}
        ]

    def test_fenced_output(self, sleeps):
        client = MagicMock()
        client.messages.create.return_value = make_message(
            "```markdown\n# Свеча памяти\n\nТекст статьи.\n\n## Раздел\n\nЕщё текст.\n```"
        )
        article = _generator(client, sleeps).generate(StandardRequest(topic="Память"))
        assert article.title == "Свеча памяти"
        assert article.slug == "svecha-pamyati"
        assert "```" not in article.content
        assert article.content.startswith("Текст статьи.")

    def test_body_opening_with_code_block(self, sleeps):
        client = MagicMock()
        client.messages.create.return_value = make_message(
            "# Свечи\n\n```bash\necho hi\n```\n\nТекст после кода."
        )
        article = _generator(client, sleeps).generate(StandardRequest(topic="Свечи"))
        assert article.title == "Свечи"
        assert article.content == "```bash\necho hi\n```\n\nТекст после кода."

    def test_missing_h1_uses_topic(self, sleeps):
        client = MagicMock()
        client.messages.create.return_value = make_message("Текст без заголовка.")
        article = _generator(client, sleeps).generate(StandardRequest(topic="Вечерний ритуал"))
        assert article.title == "Вечерний ритуал"
        assert article.slug == "vecherniy-ritual"

    def test_template_without_topic_uses_placeholder(self, sleeps):
        client = MagicMock()
        client.messages.create.return_value = make_message("Text without a heading.")
        article = _generator(client, sleeps).generate(
            CustomPromptRequest(prompt="Write something", language="en")
        )
        assert article.title == "New article"
        assert article.slug == "new-article"

    def test_rate_limits_fall_back(self, sleeps):
        client = MagicMock()
        client.messages.create.side_effect = [
            ThrottledError(), ThrottledError(), make_message("# Свечи\n\nТекст."),
        ]
        article = _generator(client, sleeps).generate(StandardRequest(topic="Свечи"))
        assert sleeps.calls == [1, 2]
        assert client.messages.create.call_args_list[2].kwargs["model"] == MODEL_LADDER[2]
        assert article.title == "Свечи"

    def test_rate_limit_exhaustion(self, sleeps):
        client = MagicMock()
        client.messages.create.side_effect = ThrottledError()
        with pytest.raises(RateLimitExceededError):
            _generator(client, sleeps).generate(StandardRequest(topic="Свечи"))
        assert client.messages.create.call_count == 4

    def test_generic_error_not_retried(self, sleeps):
        client = MagicMock()
        client.messages.create.side_effect = RuntimeError("invalid x-api-key")
        with pytest.raises(ProviderError):
            _generator(client, sleeps).generate(StandardRequest(topic="Свечи"))
        assert sleeps.calls == []
        assert client.messages.create.call_count == 1

    @pytest.mark.parametrize("raw", ["", "   \n ", "# Только заголовок"])
    def test_empty_output(self, sleeps, raw):
        client = MagicMock()
        client.messages.create.return_value = make_message(raw)
        with pytest.raises(EmptyOutputError):
            _generator(client, sleeps).generate(StandardRequest(topic="Свечи"))
        assert client.messages.create.call_count == 1

    def test_cancelled(self, fake_client, sleeps):
        event = threading.Event()
        event.set()
        with pytest.raises(GenerationCancelled):
            _generator(fake_client, sleeps).generate(StandardRequest(topic="Свечи"), cancel_event=event)

    def test_empty_ladder_rejected(self, fake_client):
        with pytest.raises(ValueError):
            ArticleGenerator(client=fake_client, models=())


# ===================================================================
# TestClassification
# ===================================================================

class TestClassification:

    def test_classifier_result_is_attached(self, fake_client, sleeps):
        classifier = MagicMock()
        classifier.classify.return_value = "guides"
        article = _generator(fake_client, sleeps, classify=True, classifier=classifier).generate(
            StandardRequest(topic="Практика благодарности")
        )
        assert article.category_slug == "guides"
        title, content = classifier.classify.call_args.args
        assert title == "Практика благодарности"
        assert content == article.content

    def test_default_classifier_uses_same_client(self, fake_client, sleeps):
        fake_client.messages.create.side_effect = [
            make_message("# Свечи\n\nТекст."),
            make_message("news"),
        ]
        article = _generator(fake_client, sleeps, classify=True).generate(StandardRequest(topic="Свечи"))
        assert article.category_slug == "news"

    def test_failing_classifier_defaults_to_faq(self, fake_client, sleeps):
        fake_client.messages.create.side_effect = [
            make_message("# Свечи\n\nТекст статьи."),
            RuntimeError("classifier unavailable"),
        ]
        article = _generator(fake_client, sleeps, classify=True).generate(StandardRequest(topic="Свечи"))
        assert article.category_slug == "faq"
        assert article.title == "Свечи"
        assert article.content == "Текст статьи."
        assert fake_client.messages.create.call_count == 2

    def test_generate_article_helper(self, fake_client, monkeypatch):
        monkeypatch.setattr("candlewriter.pipeline.classifier.CategoryClassifier.classify",
                            lambda self, title, content: "faq")
        article = generate_article(topic="Практика благодарности", client=fake_client)
        assert article.slug == "praktika-blagodarnosti"
        assert article.category_slug == "faq"
