"""Structured logging for typing-test sessions.

Logs sessions to ~/.typescore/logs/ in JSON-lines format so results can
be compared across runs.

Example usage:
    from typescore.logging import SessionLogger

    logger = SessionLogger()
    logger.log_reference_captured(word_count=42)
    logger.log_test_started(time_limit_seconds=60)
    logger.log_test_finished(result.to_dict(), elapsed_seconds=48.2, timed_out=False)
    logger.finalize()
"""

import atexit
import json
import sys
import threading
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any

from typescore import config as _config


def _logs_dir() -> Path:
    return _config.CONFIG_DIR / "logs"


@dataclass
class SessionMetrics:
    """Aggregated metrics for a typing-test session."""

    tests_finished: int = 0
    timeouts: int = 0
    word_error_rate: float | None = None
    edits: int = 0
    reference_words: int = 0
    typed_words: int = 0


@dataclass
class SessionLogger:
    """Session-based logger for typing-test events."""

    session_id: str = field(default_factory=lambda: datetime.now().strftime("%Y%m%d_%H%M%S"))
    log_file: Path = field(init=False)
    metrics: SessionMetrics = field(default_factory=SessionMetrics)
    buffer_size: int = 10
    _started: datetime = field(default_factory=datetime.now)
    _log_buffer: list[dict[str, Any]] = field(default_factory=list)
    _buffer_lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def __post_init__(self):
        logs_dir = _logs_dir()
        logs_dir.mkdir(parents=True, exist_ok=True)
        self.log_file = logs_dir / f"session_{self.session_id}.jsonl"
        self._write_event("session_start", {
            "timestamp": self._started.isoformat(),
        })

    def set_config(self, config: dict) -> None:
        """Record configuration for this session."""
        self._write_event("config", config)

    def log_reference_captured(self, word_count: int, source: str = "recognition") -> None:
        """Log that a reference transcript is ready for the test."""
        self._write_event("reference_captured", {
            "word_count": word_count,
            "source": source,
        })

    def log_test_started(self, time_limit_seconds: int) -> None:
        """Log the start of the typing phase."""
        self._write_event("test_started", {
            "time_limit_seconds": time_limit_seconds,
        })

    def log_test_finished(
        self,
        result: dict,
        elapsed_seconds: float,
        timed_out: bool,
    ) -> None:
        """Log a scored test.

        Args:
            result: AlignmentResult.to_dict() output
            elapsed_seconds: Time spent typing
            timed_out: Whether the time limit ran out
        """
        self.metrics.tests_finished += 1
        if timed_out:
            self.metrics.timeouts += 1
        self.metrics.word_error_rate = result.get("word_error_rate")
        self.metrics.edits = result.get("edits", 0)
        self.metrics.reference_words = result.get("reference_word_count", 0)
        self.metrics.typed_words = result.get("hypothesis_word_count", 0)

        self._write_event("test_finished", {
            **result,
            "elapsed_seconds": round(elapsed_seconds, 2),
            "timed_out": timed_out,
        })

    def log_error(self, error_type: str, message: str, details: dict | None = None) -> None:
        """Log an error event."""
        self._write_event("error", {
            "error_type": error_type,
            "message": message,
            "details": details or {},
        })

    def finalize(self) -> dict:
        """Finalize session and write summary.

        Returns:
            Summary metrics dict
        """
        elapsed = (datetime.now() - self._started).total_seconds()
        wer = self.metrics.word_error_rate

        summary = {
            "duration_seconds": round(elapsed, 2),
            "tests_finished": self.metrics.tests_finished,
            "timeouts": self.metrics.timeouts,
            "word_error_rate": round(wer, 4) if wer is not None else None,
            "edits": self.metrics.edits,
            "reference_words": self.metrics.reference_words,
            "typed_words": self.metrics.typed_words,
        }

        self._write_event("session_complete", summary)
        self._flush_logs()
        return summary

    def _write_event(self, event_type: str, data: dict) -> None:
        """Buffer a JSON event and flush when buffer is full.

        Thread-safe: Uses _buffer_lock to prevent concurrent buffer modifications.
        """
        event = {
            "event": event_type,
            "ts": datetime.now().isoformat(),
            **data,
        }

        with self._buffer_lock:
            self._log_buffer.append(event)

            critical_events = {"session_start", "session_complete", "error", "test_finished"}
            buffer_full = len(self._log_buffer) >= self.buffer_size
            should_flush = buffer_full or event_type in critical_events

        # Flush outside the lock to avoid holding lock during I/O
        if should_flush:
            self._flush_logs()

    def _flush_logs(self) -> None:
        """Flush buffered log events to disk.

        On I/O failure the buffer is kept for the next flush.
        """
        with self._buffer_lock:
            if not self._log_buffer:
                return
            events_to_write = self._log_buffer.copy()

        try:
            with open(self.log_file, "a", encoding="utf-8") as f:
                for event in events_to_write:
                    f.write(json.dumps(event, ensure_ascii=False, default=str) + "\n")

            with self._buffer_lock:
                # Events may have been added during the write
                self._log_buffer = self._log_buffer[len(events_to_write):]

        except OSError as e:
            print(f"Warning: Failed to flush logs to {self.log_file}: {e}", file=sys.stderr)


# Global logger instance for current session (thread-safe)
_current_logger: SessionLogger | None = None
_logger_lock = threading.Lock()


def get_logger() -> SessionLogger | None:
    """Get the current session logger (thread-safe)."""
    with _logger_lock:
        return _current_logger


def set_logger(logger: SessionLogger | None) -> None:
    """Set the current session logger (thread-safe)."""
    global _current_logger
    with _logger_lock:
        _current_logger = logger


def log_event(event_type: str, data: dict) -> None:
    """Log to current session if active (thread-safe)."""
    with _logger_lock:
        if _current_logger:
            _current_logger._write_event(event_type, data)


def _flush_on_exit():
    """Flush any pending log events on process exit."""
    with _logger_lock:
        if _current_logger and _current_logger._log_buffer:
            _current_logger._flush_logs()


atexit.register(_flush_on_exit)


def analyze_logs(limit: int = 10) -> dict[str, Any]:
    """Analyze recent log sessions.

    Returns aggregated results across the most recent sessions.
    """
    logs_dir = _logs_dir()
    if not logs_dir.exists():
        return {"error": "No logs directory found"}

    log_files = sorted(logs_dir.glob("session_*.jsonl"), reverse=True)[:limit]

    if not log_files:
        return {"error": "No log files found"}

    finished: list[dict] = []
    unreadable = 0

    for log_file in log_files:
        try:
            file_content = log_file.read_text(encoding="utf-8")
        except OSError:
            unreadable += 1
            continue

        for line in file_content.splitlines():
            if not line.strip():
                continue
            try:
                event = json.loads(line)
            except json.JSONDecodeError:
                # Skip malformed JSON lines
                continue
            if event.get("event") == "test_finished":
                finished.append(event)

    wers = [e["word_error_rate"] for e in finished if e.get("word_error_rate") is not None]

    return {
        "sessions_analyzed": len(log_files) - unreadable,
        "tests_finished": len(finished),
        "timeouts": sum(1 for e in finished if e.get("timed_out")),
        "avg_word_error_rate": round(sum(wers) / len(wers), 4) if wers else None,
        "best_word_error_rate": min(wers) if wers else None,
        "total_reference_words": sum(e.get("reference_word_count", 0) for e in finished),
        "total_edits": sum(e.get("edits", 0) for e in finished),
    }
