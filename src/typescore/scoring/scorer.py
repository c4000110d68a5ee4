"""Word Error Rate scoring for typing tests.

Computes the word-level Levenshtein distance between the reference
transcript and the typed hypothesis:

    WER = (S + I + D) / N

Where:
- S = Substitutions (wrong word)
- I = Insertions (extra word typed)
- D = Deletions (word missing from typed text)
- N = Number of words in reference

WER is not clamped: typing far more words than the reference contains
gives WER > 1.0.
"""

from collections.abc import Sequence
from dataclasses import dataclass

from typescore.scoring.normalizer import normalize


@dataclass(frozen=True)
class AlignmentResult:
    """Result of scoring a typed hypothesis against a reference."""

    edits: int
    reference_word_count: int
    word_error_rate: float  # 0.0 = perfect, may exceed 1.0
    hypothesis_word_count: int = 0
    substitutions: int = 0
    insertions: int = 0
    deletions: int = 0

    @property
    def correct(self) -> int:
        """Number of reference words typed correctly."""
        return self.reference_word_count - self.substitutions - self.deletions

    @property
    def accuracy(self) -> float:
        """Word accuracy (1.0 - WER, clamped to [0, 1])."""
        return max(0.0, 1.0 - self.word_error_rate)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "edits": self.edits,
            "reference_word_count": self.reference_word_count,
            "hypothesis_word_count": self.hypothesis_word_count,
            "word_error_rate": self.word_error_rate,
            "substitutions": self.substitutions,
            "insertions": self.insertions,
            "deletions": self.deletions,
            "correct": self.correct,
            "accuracy": self.accuracy,
        }


def _check_tokens(name: str, tokens: Sequence[str]) -> list[str]:
    """Validate a token sequence and return it as a list.

    A bare string is rejected: scoring it would compare characters,
    not words.
    """
    if isinstance(tokens, (str, bytes)) or not isinstance(tokens, Sequence):
        raise TypeError(
            f"{name} must be a sequence of str tokens, got {type(tokens).__name__}"
        )
    for token in tokens:
        if not isinstance(token, str):
            raise TypeError(f"{name} tokens must be str, got {type(token).__name__}")
    return list(tokens)


def _edit_table(ref: list[str], hyp: list[str]) -> list[list[int]]:
    """Build the (N+1) x (M+1) Levenshtein distance table.

    dp[i][j] is the distance between ref[:i] and hyp[:j].
    """
    n = len(ref)
    m = len(hyp)

    dp = [[0] * (m + 1) for _ in range(n + 1)]

    # Base cases: delete all reference words / insert all typed words
    for i in range(n + 1):
        dp[i][0] = i
    for j in range(m + 1):
        dp[0][j] = j

    for i in range(1, n + 1):
        for j in range(1, m + 1):
            if ref[i - 1] == hyp[j - 1]:
                dp[i][j] = dp[i - 1][j - 1]
            else:
                dp[i][j] = 1 + min(
                    dp[i - 1][j],      # deletion
                    dp[i][j - 1],      # insertion
                    dp[i - 1][j - 1],  # substitution
                )

    return dp


def _count_operations(
    dp: list[list[int]], ref: list[str], hyp: list[str]
) -> tuple[int, int, int]:
    """Walk back through the table along one optimal alignment.

    Prefers match, then substitution, then insertion, then deletion
    when several paths are optimal.

    Returns:
        Tuple of (substitutions, insertions, deletions)
    """
    subs = ins = dels = 0
    i, j = len(ref), len(hyp)

    while i > 0 or j > 0:
        if i > 0 and j > 0 and ref[i - 1] == hyp[j - 1] and dp[i][j] == dp[i - 1][j - 1]:
            i -= 1
            j -= 1
        elif i > 0 and j > 0 and dp[i][j] == dp[i - 1][j - 1] + 1:
            subs += 1
            i -= 1
            j -= 1
        elif j > 0 and dp[i][j] == dp[i][j - 1] + 1:
            ins += 1
            j -= 1
        else:
            dels += 1
            i -= 1

    return subs, ins, dels


def score(reference: Sequence[str], hypothesis: Sequence[str]) -> AlignmentResult:
    """Score hypothesis tokens against reference tokens.

    Args:
        reference: Normalized reference tokens (what was spoken)
        hypothesis: Normalized typed tokens

    Returns:
        AlignmentResult with edit count, word counts and WER

    Raises:
        TypeError: If either argument is not a sequence of str
    """
    ref = _check_tokens("reference", reference)
    hyp = _check_tokens("hypothesis", hypothesis)
    n = len(ref)
    m = len(hyp)

    dp = _edit_table(ref, hyp)
    edits = dp[n][m]
    subs, ins, dels = _count_operations(dp, ref, hyp)

    if n > 0:
        wer = edits / n
    else:
        # Empty reference: perfect if nothing typed, otherwise capped at 1.0
        wer = 0.0 if m == 0 else 1.0

    return AlignmentResult(
        edits=edits,
        reference_word_count=n,
        word_error_rate=wer,
        hypothesis_word_count=m,
        substitutions=subs,
        insertions=ins,
        deletions=dels,
    )


def score_text(reference: str, hypothesis: str) -> AlignmentResult:
    """Normalize raw reference and typed text, then score them."""
    return score(normalize(reference), normalize(hypothesis))
