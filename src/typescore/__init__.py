"""typescore - Word Error Rate scoring for audio typing tests."""

from pathlib import Path

from dotenv import load_dotenv

# Load .env before config reads TYPESCORE_HOME
_env_file = Path(__file__).resolve().parents[2] / ".env"
load_dotenv(_env_file if _env_file.exists() else None)

__version__ = "0.1.0"

from typescore.scoring import AlignmentResult, normalize, normalize_text, score, score_text  # noqa: E402
from typescore.session import SessionState, SessionStateError, TypingTestSession  # noqa: E402

__all__ = [
    "AlignmentResult",
    "SessionState",
    "SessionStateError",
    "TypingTestSession",
    "__version__",
    "normalize",
    "normalize_text",
    "score",
    "score_text",
]
