"""Typing-test scoring.

Normalizes reference and typed text and scores them with word-level
edit distance and Word Error Rate (WER).
"""

from typescore.scoring.normalizer import normalize, normalize_text
from typescore.scoring.scorer import AlignmentResult, score, score_text

__all__ = [
    "AlignmentResult",
    "normalize",
    "normalize_text",
    "score",
    "score_text",
]
