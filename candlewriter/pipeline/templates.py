"""Resolve stored prompt templates into a ready-to-send prompt.

Templates use ``{name}`` placeholders. The resolved string is passed to
the generator as a CustomPromptRequest and is not modified afterwards.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Optional, Union

from candlewriter.config import DEFAULT_LANGUAGE
from candlewriter.errors import ValidationError
from candlewriter.pipeline.prompts import build_cta_clause

PLACEHOLDER = re.compile(r"\{([^}]+)\}")

TEMPLATE_NAME_MIN = 3
TEMPLATE_NAME_MAX = 100
TEMPLATE_PROMPT_MIN = 50


@dataclass(frozen=True)
class TemplateVariable:
    name: str
    label: str = ""
    required: bool = True
    default_value: Optional[str] = None


@dataclass(frozen=True)
class PromptTemplate:
    name: str
    prompt: str
    variables: tuple[Union[str, TemplateVariable], ...] = field(default_factory=tuple)
    description: Optional[str] = None
    is_default: bool = False


def extract_variables(prompt: str) -> list[str]:
    """Unique placeholder names in order of first appearance."""
    names: list[str] = []
    for match in PLACEHOLDER.finditer(prompt or ""):
        name = match.group(1).strip()
        if name and name not in names:
            names.append(name)
    return names


def fill_template(template: str, variables: dict[str, Optional[str]]) -> str:
    """Substitute every provided variable; unknown placeholders stay as-is."""
    result = template
    for name, value in variables.items():
        result = re.sub(r"\{\s*" + re.escape(name) + r"\s*\}", lambda _m: value or "", result)
    return result


def missing_variables(template: PromptTemplate, provided: dict[str, str]) -> list[str]:
    """Required variables that are absent or blank in ``provided``.

    A plain string declaration is required only for ``topic``.
    """
    required = []
    for var in template.variables:
        if isinstance(var, str):
            if var == "topic":
                required.append(var)
        elif var.required:
            required.append(var.name)
    return [name for name in required if not (provided.get(name) or "").strip()]


def validate_prompt_template(name: str, prompt: str, variables: list[str] | None = None) -> list[str]:
    """Return a list of problems with a template; empty means valid."""
    errors = []
    if not name or len(name.strip()) < TEMPLATE_NAME_MIN:
        errors.append(f"Template name must be at least {TEMPLATE_NAME_MIN} characters")
    if name and len(name) > TEMPLATE_NAME_MAX:
        errors.append(f"Template name must not exceed {TEMPLATE_NAME_MAX} characters")
    if not prompt or len(prompt.strip()) < TEMPLATE_PROMPT_MIN:
        errors.append(f"Prompt must be at least {TEMPLATE_PROMPT_MIN} characters")

    declared = variables or []
    undeclared = [v for v in extract_variables(prompt) if v not in declared]
    if undeclared:
        print(f"  Warning: undeclared template variables: {', '.join(undeclared)}")

    return errors


def variables_from_simple_mode(
    topic: str,
    candle_type: str | None = None,
    language: str = DEFAULT_LANGUAGE,
    category_name: str | None = None,
) -> dict[str, str]:
    """Variables a template can use, built from the simple form fields."""
    variables = {
        "topic": topic,
        "language": language or DEFAULT_LANGUAGE,
        "ctaSection": build_cta_clause(candle_type, language),
        "candleTypeCTA": "",
    }
    if candle_type:
        variables["candleType"] = candle_type
        variables["candleTypeCTA"] = " с призывом к действию" if language == "ru" else " with a call to action"
    if category_name:
        variables["categoryName"] = category_name
    return variables


def resolve_template(template: PromptTemplate, variables: dict[str, str]) -> str:
    """Fill a template after checking its required variables.

    Declared defaults apply to variables the caller left out.
    """
    values = {
        var.name: var.default_value
        for var in template.variables
        if isinstance(var, TemplateVariable) and var.default_value is not None
    }
    values.update({k: v for k, v in variables.items() if v is not None})

    missing = missing_variables(template, values)
    if missing:
        raise ValidationError(f"Missing template variables: {', '.join(missing)}")
    return fill_template(template.prompt, values)
