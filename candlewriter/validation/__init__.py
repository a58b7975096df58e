"""Article validation: quality checks, grading, and reporting."""

from candlewriter.validation.checks import validate_article
from candlewriter.validation.report import format_validation_report

__all__ = ["validate_article", "format_validation_report"]
