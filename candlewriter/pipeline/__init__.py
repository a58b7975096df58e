"""Article generation: prompts, templates, Claude calls with fallback, categories."""

from candlewriter.pipeline.classifier import CategoryClassifier
from candlewriter.pipeline.client import create_client
from candlewriter.pipeline.generator import ArticleGenerator, generate_article
from candlewriter.pipeline.prompts import compose_prompt
from candlewriter.pipeline.templates import PromptTemplate, TemplateVariable, resolve_template

__all__ = [
    "ArticleGenerator",
    "CategoryClassifier",
    "PromptTemplate",
    "TemplateVariable",
    "compose_prompt",
    "create_client",
    "generate_article",
    "resolve_template",
]
