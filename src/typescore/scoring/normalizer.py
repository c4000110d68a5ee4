"""Text normalization for typing-test scoring.

Turns raw transcript text into canonical word tokens so that case,
punctuation and spacing differences are not counted as errors.
"""

import re

# Anything that is not a word character, apostrophe or whitespace
_PUNCTUATION_RE = re.compile(r"[^\w\s']")
_WHITESPACE_RE = re.compile(r"\s+")


def normalize_text(text: str) -> str:
    """Normalize text to its canonical single-spaced, lowercase form.

    1. Lowercase
    2. Replace punctuation and symbols with spaces (apostrophes are kept
       so contractions like "don't" stay one word)
    3. Collapse whitespace
    4. Strip leading/trailing whitespace

    Args:
        text: Raw reference or typed text

    Returns:
        Canonical text, possibly empty

    Raises:
        TypeError: If text is not a string
    """
    if not isinstance(text, str):
        raise TypeError(f"text must be a str, got {type(text).__name__}")

    # Lowercase before stripping so that characters whose lowercase form is
    # not a word character (e.g. "İ") are removed on the first pass
    text = text.lower()

    # Replace with space to avoid merging words ("end.start" -> "end start")
    text = _PUNCTUATION_RE.sub(" ", text)
    text = _WHITESPACE_RE.sub(" ", text)

    return text.strip()


def normalize(text: str) -> list[str]:
    """Normalize text into a list of word tokens.

    Empty or punctuation-only input yields an empty list, never [""].
    """
    canonical = normalize_text(text)
    if not canonical:
        return []
    return canonical.split(" ")
