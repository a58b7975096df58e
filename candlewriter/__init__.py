"""AI article generator for the CandleTime articles section.

Package structure:
    candlewriter/config.py      – API keys, model ladder, limits, static tables
    candlewriter/models.py      – generation requests and the article record
    candlewriter/errors.py      – error types surfaced to callers
    candlewriter/content/       – slugs, excerpts, reading time, SEO fields
    candlewriter/pipeline/      – prompts, templates, Claude calls, categories
    candlewriter/validation/    – quality checks, grading, and report formatting
"""
