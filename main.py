#!/usr/bin/env python3
"""Main pipeline: generate CandleTime articles with Claude.

Usage:
    python main.py --topic "Практика благодарности" --candle-type gratitude
    python main.py --topic "Evening calm" --language en
    python main.py --template prompts/faq.txt --var topic="Как зажечь свечу"
    python main.py --topics-csv data/topics.csv --limit 5
    python main.py --topic "Медитация" --dry-run     # Show the prompt, don't call API
"""

from __future__ import annotations

import argparse
import csv
import json
import os
import sys
from pathlib import Path

import markdown as md_lib

from candlewriter.config import ARTICLE_OUTPUT_DIR, CANDLE_TYPES, DEFAULT_LANGUAGE, LANGUAGES
from candlewriter.errors import ArticleGenerationError, ValidationError
from candlewriter.models import build_request
from candlewriter.pipeline import ArticleGenerator
from candlewriter.pipeline.generator import resolve_prompt
from candlewriter.pipeline.templates import (
    PromptTemplate,
    extract_variables,
    resolve_template,
    validate_prompt_template,
    variables_from_simple_mode,
)
from candlewriter.validation import format_validation_report, validate_article


def load_topics(csv_path: str) -> list[dict]:
    """Load topics from CSV (columns: topic, candle_type, language)."""
    topics = []
    with open(csv_path, "r", newline="", encoding="utf-8") as f:
        reader = csv.DictReader(f)
        for row in reader:
            topic = (row.get("topic") or row.get("Topic") or "").strip()
            if topic:
                topics.append({
                    "topic": topic,
                    "candle_type": (row.get("candle_type") or "").strip() or None,
                    "language": (row.get("language") or "").strip() or DEFAULT_LANGUAGE,
                })
    return topics


def parse_vars(pairs: list[str]) -> dict[str, str]:
    """Turn ``key=value`` arguments into a dict."""
    variables = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key.strip():
            raise ValueError(f"Expected key=value, got '{pair}'")
        variables[key.strip()] = value
    return variables


def load_template_prompt(path: str, job: dict, extra_vars: dict[str, str]) -> str:
    """Resolve a template file with the simple-mode variables plus --var overrides."""
    prompt = Path(path).read_text(encoding="utf-8")
    template = PromptTemplate(name=Path(path).name, prompt=prompt,
                              variables=tuple(extract_variables(prompt)))
    errors = validate_prompt_template(template.name, prompt, list(template.variables))
    if errors:
        raise ValidationError("; ".join(errors))
    variables = variables_from_simple_mode(
        topic=job.get("topic") or "",
        candle_type=job.get("candle_type"),
        language=job.get("language") or DEFAULT_LANGUAGE,
    )
    variables.update(extra_vars)
    return resolve_template(template, variables)


def render_html(content: str) -> str:
    return md_lib.markdown(content, extensions=["extra", "sane_lists", "smarty"])


def process_topic(job: dict, generator: ArticleGenerator | None, dry_run: bool = False,
                  html: bool = False, output_dir: Path = ARTICLE_OUTPUT_DIR) -> dict:
    """Process a single topic: build request, generate, save, validate."""
    label = job.get("topic") or "(template)"
    print(f"\n{'='*60}")
    print(f"Processing: {label}")
    print(f"{'='*60}")

    request = build_request(
        topic=job.get("topic"),
        candle_type=job.get("candle_type"),
        language=job.get("language") or DEFAULT_LANGUAGE,
        custom_prompt=job.get("custom_prompt"),
    )

    if dry_run:
        prompt = resolve_prompt(request)
        print(f"\n  [DRY RUN] Would send prompt ({len(prompt)} chars):\n")
        print(prompt)
        return {"topic": label, "dry_run": True}

    article = generator.generate(request)

    # ── Save article ──────────────────────────────────────────────────
    os.makedirs(output_dir, exist_ok=True)
    article_path = os.path.join(output_dir, f"{article.slug}.md")
    with open(article_path, "w", encoding="utf-8") as f:
        f.write(f"# {article.title}\n\n{article.content}\n")
    record_path = os.path.join(output_dir, f"{article.slug}.json")
    with open(record_path, "w", encoding="utf-8") as f:
        json.dump(article.to_record(), f, ensure_ascii=False, indent=2)
    if html:
        with open(os.path.join(output_dir, f"{article.slug}.html"), "w", encoding="utf-8") as f:
            f.write(render_html(article.content))
    print(f"  OK Saved to {article_path}")

    # ── Validate ──────────────────────────────────────────────────────
    validation = validate_article(article, candle_type=job.get("candle_type"))
    print(f"\n{format_validation_report(validation, article.title)}")
    with open(os.path.join(output_dir, f"{article.slug}_validation.json"), "w", encoding="utf-8") as f:
        json.dump(validation, f, ensure_ascii=False, indent=2, default=str)

    return {
        "topic": label,
        "title": article.title,
        "slug": article.slug,
        "category": article.category_slug,
        "article_path": article_path,
        "word_count": validation["word_count"]["count"],
        "grade": validation["grade"],
        "issues": validation["issues"],
    }


def main():
    parser = argparse.ArgumentParser(description="Generate CandleTime SEO articles")
    parser.add_argument("--topic", type=str, default="", help="Article topic")
    parser.add_argument("--candle-type", type=str, default=None, choices=CANDLE_TYPES,
                        help="Candle type for the closing call to action")
    parser.add_argument("--language", type=str, default=DEFAULT_LANGUAGE, choices=LANGUAGES)
    parser.add_argument("--template", type=str, default="",
                        help="Prompt template file with {variable} placeholders")
    parser.add_argument("--var", action="append", default=[],
                        help="Template variable as key=value (repeatable)")
    parser.add_argument("--topics-csv", type=str, default="",
                        help="CSV with topic,candle_type,language columns")
    parser.add_argument("--limit", type=int, default=0, help="Limit number of topics to process")
    parser.add_argument("--dry-run", action="store_true", help="Print prompts without calling Claude API")
    parser.add_argument("--html", action="store_true", help="Also write rendered HTML")
    parser.add_argument("--no-classify", action="store_true", help="Skip the category call")
    args = parser.parse_args()

    # Load jobs
    if args.topics_csv:
        jobs = load_topics(args.topics_csv)
        print(f"Loaded {len(jobs)} topics from {args.topics_csv}")
    elif args.topic or args.template:
        jobs = [{"topic": args.topic or None, "candle_type": args.candle_type, "language": args.language}]
    else:
        parser.error("Provide --topic, --template or --topics-csv")

    if args.limit > 0:
        jobs = jobs[:args.limit]
        print(f"Limited to {len(jobs)} topics")

    if not jobs:
        print("No topics to process!")
        sys.exit(1)

    try:
        extra_vars = parse_vars(args.var)
    except ValueError as e:
        parser.error(str(e))

    generator = None
    if not args.dry_run:
        try:
            generator = ArticleGenerator(classify=not args.no_classify)
        except ArticleGenerationError as e:
            print(f"Error: {e}")
            sys.exit(1)

    # Process
    results = []
    for i, job in enumerate(jobs, 1):
        print(f"\n[{i}/{len(jobs)}]", end="")
        try:
            if args.template:
                if not job.get("topic") and extra_vars.get("topic"):
                    job["topic"] = extra_vars["topic"]
                job["custom_prompt"] = load_template_prompt(args.template, job, extra_vars)
            result = process_topic(job, generator, dry_run=args.dry_run, html=args.html,
                                   output_dir=ARTICLE_OUTPUT_DIR)
        except (ArticleGenerationError, OSError) as e:
            print(f"  FAILED: {e}")
            result = {"topic": job.get("topic") or "(template)", "error": str(e),
                      "error_type": type(e).__name__}
        results.append(result)

    # Summary
    print(f"\n\n{'='*60}")
    print("SUMMARY")
    print(f"{'='*60}")
    for r in results:
        if r.get("dry_run"):
            print(f"  {r['topic']}: [dry run]")
        elif r.get("error"):
            print(f"  {r['topic']}: failed ({r['error_type']})")
        else:
            status = "ok" if not r.get("issues") else f"{len(r['issues'])} issues"
            print(f"  {r['title']}: {r.get('word_count', '?')} words, grade {r.get('grade', '?')} "
                  f"[{r.get('category')}] {status}")

    if not args.dry_run:
        summary_path = os.path.join(ARTICLE_OUTPUT_DIR, "_summary.json")
        os.makedirs(ARTICLE_OUTPUT_DIR, exist_ok=True)
        with open(summary_path, "w", encoding="utf-8") as f:
            json.dump(results, f, ensure_ascii=False, indent=2, default=str)
        print(f"\nSummary saved to {summary_path}")

    if all(r.get("error") for r in results):
        sys.exit(1)


if __name__ == "__main__":
    main()
