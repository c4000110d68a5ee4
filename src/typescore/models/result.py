"""Pydantic models for typing-test results."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, model_validator

from typescore.scoring import AlignmentResult


class TypingTestResult(BaseModel):
    """Outcome of one finished typing test."""

    model_config = ConfigDict(validate_default=True)

    session_id: str = Field(min_length=1, description="Session identifier")
    reference_text: str = Field(description="Reference transcript as captured")
    typed_text: str = Field(description="Text typed by the user")
    edits: int = Field(ge=0, description="Minimum word-level edits")
    reference_word_count: int = Field(ge=0, description="Words in normalized reference")
    hypothesis_word_count: int = Field(ge=0, description="Words in normalized typed text")
    word_error_rate: float = Field(ge=0.0, description="WER (may exceed 1.0)")
    substitutions: int = Field(default=0, ge=0)
    insertions: int = Field(default=0, ge=0)
    deletions: int = Field(default=0, ge=0)
    time_limit_seconds: int = Field(gt=0, description="Time allowed for typing")
    elapsed_seconds: float = Field(ge=0.0, description="Time spent typing")
    timed_out: bool = Field(default=False, description="Whether the time limit ran out")
    finished_at: datetime = Field(
        default_factory=lambda: datetime.now(), description="When the test was scored"
    )

    @model_validator(mode="after")
    def validate_edit_breakdown(self) -> TypingTestResult:
        """Ensure the operation breakdown adds up to the edit count."""
        if self.substitutions + self.insertions + self.deletions != self.edits:
            raise ValueError("substitutions + insertions + deletions must equal edits")
        return self

    @classmethod
    def from_alignment(
        cls,
        alignment: AlignmentResult,
        **fields,
    ) -> TypingTestResult:
        """Build a result from an AlignmentResult plus session fields."""
        return cls(
            edits=alignment.edits,
            reference_word_count=alignment.reference_word_count,
            hypothesis_word_count=alignment.hypothesis_word_count,
            word_error_rate=alignment.word_error_rate,
            substitutions=alignment.substitutions,
            insertions=alignment.insertions,
            deletions=alignment.deletions,
            **fields,
        )

    @property
    def alignment(self) -> AlignmentResult:
        """The scoring part of this result."""
        return AlignmentResult(
            edits=self.edits,
            reference_word_count=self.reference_word_count,
            word_error_rate=self.word_error_rate,
            hypothesis_word_count=self.hypothesis_word_count,
            substitutions=self.substitutions,
            insertions=self.insertions,
            deletions=self.deletions,
        )
