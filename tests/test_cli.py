"""Tests for the typescore CLI."""

import json

from typer.testing import CliRunner

from typescore import __version__
from typescore.cli import app

runner = CliRunner()


def test_version():
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_score_strings():
    result = runner.invoke(app, ["score", "the quick brown fox", "the quick brown cat"])
    assert result.exit_code == 0
    assert "Words in reference: 4" in result.output
    assert "Edits: 1" in result.output
    assert "WER: 25.00%" in result.output


def test_score_files_as_json(fixtures_dir):
    result = runner.invoke(app, [
        "score",
        str(fixtures_dir / "reference.txt"),
        str(fixtures_dir / "typed.txt"),
        "--file",
        "--format", "json",
    ])
    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data["reference_word_count"] == 9
    assert data["edits"] == 1
    assert data["substitutions"] == 1


def test_score_missing_file(tmp_path):
    result = runner.invoke(app, ["score", str(tmp_path / "nope.txt"), "x", "--file"])
    assert result.exit_code == 1
    assert "not found" in result.output


def test_score_unknown_format():
    result = runner.invoke(app, ["score", "a", "b", "--format", "html"])
    assert result.exit_code == 1
    assert "Unknown format" in result.output


def test_run_typing_test(config_home):
    result = runner.invoke(
        app,
        ["run", "--reference", "Good morning!", "-t", "600"],
        input="good morning everyone\n",
    )
    assert result.exit_code == 0
    assert "2 reference words" in result.output
    assert "WER: 50.00%" in result.output
    assert "Time ran out" not in result.output

    logs = list((config_home / "logs").glob("session_*.jsonl"))
    assert len(logs) == 1
    events = [json.loads(line)["event"] for line in logs[0].read_text().splitlines()]
    assert "test_finished" in events
    assert events[-1] == "session_complete"


def test_run_writes_json_output(tmp_path, fixtures_dir):
    out = tmp_path / "result.json"
    result = runner.invoke(
        app,
        ["run", "-r", str(fixtures_dir / "reference.txt"), "-o", str(out)],
        input="the quick brown fox jumps over the lazy dog\n",
    )
    assert result.exit_code == 0
    data = json.loads(out.read_text())
    assert data["edits"] == 0
    assert data["reference_word_count"] == 9
    assert data["time_limit_seconds"] == 60


def test_run_requires_reference():
    result = runner.invoke(app, ["run"])
    assert result.exit_code == 1
    assert "Reference required" in result.output


def test_run_rejects_bad_time_limit():
    result = runner.invoke(app, ["run", "--reference", "hi", "-t", "0"])
    assert result.exit_code == 1
    assert "Invalid time limit" in result.output


def test_config_show_and_reset(config_home):
    result = runner.invoke(app, ["config", "--reset"])
    assert result.exit_code == 0
    assert "reset to defaults" in result.output
    assert "time_limit_seconds: 60" in result.output
    assert "logging.enabled: True" in result.output


def test_logs_without_sessions():
    result = runner.invoke(app, ["logs"])
    assert result.exit_code == 0
    assert "Run a typing test first" in result.output


def test_logs_after_run():
    runner.invoke(app, ["run", "--reference", "one two", "-t", "600"], input="one three\n")
    result = runner.invoke(app, ["logs"])
    assert result.exit_code == 0
    assert "Tests finished: 1" in result.output
    assert "Average WER: 50.00%" in result.output
