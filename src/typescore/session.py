"""Typing-test session state machine.

A session moves through four states:

    idle -> recording -> idle -> typing -> finished
                                   ^          |
                                   +----------+  (retake)

Audio capture and speech recognition live outside this module. While
recording, the caller feeds recognition results in with
add_recognition_result(); only final results become part of the
reference transcript. Scoring happens once, on the typing -> finished
transition.
"""

import time
from enum import Enum
from typing import Callable

from typescore.config import DEFAULT_TIME_LIMIT_SECONDS
from typescore.logging import SessionLogger
from typescore.models.result import TypingTestResult
from typescore.scoring import normalize, score


class SessionState(str, Enum):
    """Lifecycle states of a typing test."""

    IDLE = "idle"
    RECORDING = "recording"
    TYPING = "typing"
    FINISHED = "finished"


class SessionStateError(RuntimeError):
    """Raised when a session operation is not valid in the current state."""


class TypingTestSession:
    """One record -> type -> score run of the audio typing test.

    Args:
        time_limit_seconds: Time allowed for typing
        session_id: Identifier used in results and logs
        logger: Optional session logger for structured events
        clock: Monotonic clock, injectable for tests
    """

    def __init__(
        self,
        time_limit_seconds: int = DEFAULT_TIME_LIMIT_SECONDS,
        session_id: str | None = None,
        logger: SessionLogger | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        if time_limit_seconds <= 0:
            raise ValueError(f"time_limit_seconds must be positive, got {time_limit_seconds}")

        self.time_limit_seconds = time_limit_seconds
        self.session_id = session_id or (logger.session_id if logger else "local")
        self._logger = logger
        self._clock = clock

        self._state = SessionState.IDLE
        self._final_transcript = ""
        self._has_recording = False
        self._typed_text = ""
        self._started_at: float | None = None
        self._result: TypingTestResult | None = None

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def reference_text(self) -> str:
        """Reference transcript accumulated from final recognition results."""
        return self._final_transcript.strip()

    @property
    def typed_text(self) -> str:
        return self._typed_text

    @property
    def has_recording(self) -> bool:
        return self._has_recording

    @property
    def result(self) -> TypingTestResult | None:
        return self._result

    def _require(self, *states: SessionState) -> None:
        if self._state not in states:
            allowed = ", ".join(s.value for s in states)
            raise SessionStateError(
                f"Cannot do this while {self._state.value} (expected: {allowed})"
            )

    # -------------------------------------------------------------------------
    # Recording
    # -------------------------------------------------------------------------

    def start_recording(self) -> None:
        """Start capturing a new reference, discarding any previous one."""
        self._require(SessionState.IDLE, SessionState.FINISHED)
        self._final_transcript = ""
        self._has_recording = False
        self._result = None
        self._state = SessionState.RECORDING

    def add_recognition_result(self, transcript: str, is_final: bool = True) -> None:
        """Feed one speech-recognition result into the reference.

        Interim results are ignored; they are superseded by a final one.
        """
        self._require(SessionState.RECORDING)
        if not isinstance(transcript, str):
            raise TypeError(f"transcript must be a str, got {type(transcript).__name__}")
        if is_final:
            self._final_transcript += transcript + " "

    def stop_recording(self) -> None:
        """Stop capturing; the session returns to idle with a recording."""
        self._require(SessionState.RECORDING)
        self._has_recording = True
        self._state = SessionState.IDLE
        if self._logger:
            self._logger.log_reference_captured(word_count=len(normalize(self.reference_text)))

    def set_reference(self, text: str) -> None:
        """Use a ready-made reference transcript instead of recording one."""
        self._require(SessionState.IDLE, SessionState.FINISHED)
        if not isinstance(text, str):
            raise TypeError(f"text must be a str, got {type(text).__name__}")
        self._final_transcript = text
        self._has_recording = True
        self._result = None
        self._state = SessionState.IDLE
        if self._logger:
            self._logger.log_reference_captured(
                word_count=len(normalize(self.reference_text)), source="text"
            )

    def clear(self) -> None:
        """Discard the recording and reference transcript."""
        self._require(SessionState.IDLE, SessionState.FINISHED)
        self._final_transcript = ""
        self._has_recording = False
        self._result = None
        self._state = SessionState.IDLE

    # -------------------------------------------------------------------------
    # Typing
    # -------------------------------------------------------------------------

    def start_test(self) -> None:
        """Start the timed typing phase.

        Raises:
            SessionStateError: If nothing has been recorded yet
        """
        self._require(SessionState.IDLE, SessionState.FINISHED)
        if not self._has_recording:
            raise SessionStateError("Please record audio first.")

        self._typed_text = ""
        self._result = None
        self._started_at = self._clock()
        self._state = SessionState.TYPING
        if self._logger:
            self._logger.log_test_started(time_limit_seconds=self.time_limit_seconds)

    def type_text(self, text: str) -> None:
        """Replace the typed text with the current contents of the input."""
        self._require(SessionState.TYPING)
        if not isinstance(text, str):
            raise TypeError(f"text must be a str, got {type(text).__name__}")
        self._typed_text = text

    @property
    def elapsed_seconds(self) -> float:
        """Seconds spent in the typing phase so far (0 before it starts)."""
        if self._started_at is None:
            return 0.0
        if self._result is not None:
            return self._result.elapsed_seconds
        return max(0.0, self._clock() - self._started_at)

    @property
    def remaining_seconds(self) -> int:
        """Whole seconds left on the countdown."""
        if self._state is not SessionState.TYPING:
            return 0 if self._state is SessionState.FINISHED else self.time_limit_seconds
        left = self.time_limit_seconds - self.elapsed_seconds
        # Count down like a wall clock: 59.2s left shows as 60
        return max(0, int(-(-left // 1)))

    @property
    def is_expired(self) -> bool:
        return self._state is SessionState.TYPING and self.elapsed_seconds >= self.time_limit_seconds

    def poll(self) -> TypingTestResult | None:
        """Finish the test if the time limit has run out.

        Meant to be called periodically by an event loop.
        """
        if self.is_expired:
            return self.finish()
        return None

    def finish(self) -> TypingTestResult:
        """Stop typing and score the typed text against the reference."""
        self._require(SessionState.TYPING)
        elapsed = self.elapsed_seconds
        timed_out = elapsed >= self.time_limit_seconds

        alignment = score(normalize(self.reference_text), normalize(self._typed_text))
        result = TypingTestResult.from_alignment(
            alignment,
            session_id=self.session_id,
            reference_text=self.reference_text,
            typed_text=self._typed_text,
            time_limit_seconds=self.time_limit_seconds,
            elapsed_seconds=round(min(elapsed, self.time_limit_seconds), 3),
            timed_out=timed_out,
        )

        self._result = result
        self._state = SessionState.FINISHED
        if self._logger:
            self._logger.log_test_finished(
                alignment.to_dict(),
                elapsed_seconds=result.elapsed_seconds,
                timed_out=timed_out,
            )
        return result
