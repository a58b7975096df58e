"""Grading and human-readable report formatting for validation results."""

from candlewriter.config import TARGET_WORDS_MAX, TARGET_WORDS_MIN


def compute_grade(issues: list, warnings: list) -> str:
    """Compute article grade from issues and warnings.

    A+ = no issues, no warnings
    A  = no issues, some warnings
    A- = 1 issue
    B+ = 2 issues
    B  = 3 issues
    C  = 4-5 issues
    D  = 6+ issues
    """
    if len(issues) == 0 and len(warnings) == 0:
        return "A+"
    if len(issues) == 0:
        return "A"
    if len(issues) <= 1:
        return "A-"
    if len(issues) <= 2:
        return "B+"
    if len(issues) <= 3:
        return "B"
    if len(issues) <= 5:
        return "C"
    return "D"


def format_validation_report(results: dict, title: str) -> str:
    """Format validation results as a readable CLI report."""

    def _status(ok: bool) -> str:
        return "PASS" if ok else "FAIL"

    wc = results["word_count"]
    h2 = results["h2_count"]
    structure = results["structure"]
    cta = results["cta"]
    seo_ok = all(results["seo"].values())
    structure_ok = not structure["has_h1"] and not structure["has_code_fence"]

    lines = [
        f"{'='*60}",
        f"VALIDATION REPORT: {title}",
        f"{'='*60}",
        f"Grade: {results['grade']}",
        "",
        f"  [{_status(wc['pass'])}] Word count:       {wc['count']}  (target: {TARGET_WORDS_MIN}-{TARGET_WORDS_MAX})",
        f"  [{_status(h2['pass'])}] H2 headers:       {h2['count']}  (need: 3+)",
        f"  [{_status(structure_ok)}] Structure:        no H1, no code fences",
        f"  [{_status(seo_ok)}] SEO fields:       title, description, excerpt within limits",
    ]
    if cta["required"]:
        lines.append(f"  [{_status(cta['pass'])}] Closing CTA:      mentions a candle")

    if results["issues"]:
        lines.append("")
        lines.append("Issues:")
        lines.extend(f"  - {issue}" for issue in results["issues"])
    if results["warnings"]:
        lines.append("")
        lines.append("Warnings:")
        lines.extend(f"  - {warning}" for warning in results["warnings"])

    return "\n".join(lines)
