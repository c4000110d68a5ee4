"""Result formatting."""

from typescore.output.formatters import format_countdown, format_percent, format_result

__all__ = ["format_countdown", "format_percent", "format_result"]
