"""Output formatters for typing-test results."""

import json
import math
import re

from typescore.models.result import TypingTestResult
from typescore.scoring import AlignmentResult


def format_percent(rate: float) -> str:
    """Format a rate as a percentage with two decimals (0.25 -> "25.00%")."""
    if not math.isfinite(rate):
        return "n/a"
    return f"{rate * 100:.2f}%"


def format_countdown(seconds: float) -> str:
    """Format remaining seconds as MM:SS."""
    if not isinstance(seconds, (int, float)) or not math.isfinite(seconds) or seconds < 0:
        seconds = 0
    minutes, secs = divmod(int(seconds), 60)
    return f"{minutes:02d}:{secs:02d}"


def _escape_markdown(text: str) -> str:
    """Escape markdown special characters to prevent formatting issues."""
    special_chars = r'\\`*_{}[\]()#+\-.!|'
    return re.sub(f'([{re.escape(special_chars)}])', r'\\\1', text)


def to_text(result: AlignmentResult) -> str:
    """Plain-text summary, as shown at the end of a test."""
    lines = [
        f"Words in reference: {result.reference_word_count}",
        f"Edits: {result.edits}",
        f"WER: {format_percent(result.word_error_rate)}",
    ]
    if result.edits:
        lines.append(
            f"  (substitutions: {result.substitutions}, "
            f"insertions: {result.insertions}, "
            f"deletions: {result.deletions})"
        )
    return "\n".join(lines)


def to_markdown(result: AlignmentResult, test: TypingTestResult | None = None) -> str:
    """Markdown report, optionally with the session details of a test."""
    lines = ["# Typing Test Result", ""]

    if test is not None:
        lines.append(f"**Session:** {_escape_markdown(test.session_id)}")
        lines.append(f"**Finished:** {test.finished_at.strftime('%Y-%m-%d %H:%M:%S')}")
        status = "time ran out" if test.timed_out else "finished early"
        lines.append(
            f"**Time:** {format_countdown(test.elapsed_seconds)} of "
            f"{format_countdown(test.time_limit_seconds)} ({status})"
        )
        lines.append("")

    lines.extend([
        "| Metric | Value |",
        "| --- | --- |",
        f"| Words in reference | {result.reference_word_count} |",
        f"| Words typed | {result.hypothesis_word_count} |",
        f"| Edits | {result.edits} |",
        f"| Substitutions | {result.substitutions} |",
        f"| Insertions | {result.insertions} |",
        f"| Deletions | {result.deletions} |",
        f"| WER | {format_percent(result.word_error_rate)} |",
    ])

    if test is not None:
        lines.extend([
            "",
            "## Reference",
            "",
            _escape_markdown(test.reference_text) or "_(empty)_",
            "",
            "## Typed",
            "",
            _escape_markdown(test.typed_text) or "_(empty)_",
        ])

    return "\n".join(lines) + "\n"


def to_json(result: AlignmentResult, test: TypingTestResult | None = None, indent: int = 2) -> str:
    """JSON export with Unicode preserved."""
    if test is not None:
        return test.model_dump_json(indent=indent)
    return json.dumps(result.to_dict(), indent=indent, ensure_ascii=False)


def format_result(
    result: AlignmentResult,
    fmt: str = "text",
    test: TypingTestResult | None = None,
) -> str:
    """Format a result in the requested format.

    Args:
        result: Scoring result
        fmt: One of "text", "markdown", "json"
        test: Optional session result for richer output

    Raises:
        ValueError: If the format is unknown
    """
    if fmt == "text":
        return to_text(result)
    if fmt == "markdown":
        return to_markdown(result, test)
    if fmt == "json":
        return to_json(result, test)
    raise ValueError(f"Unknown format: {fmt}. Available: text, markdown, json")
