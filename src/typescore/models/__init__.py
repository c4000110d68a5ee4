"""Data models for typescore."""

from typescore.models.result import TypingTestResult

__all__ = ["TypingTestResult"]
