"""CLI for the typescore typing test."""

from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console

from typescore import __version__
from typescore.config import TypescoreConfig, load_config, save_config
from typescore.logging import SessionLogger, analyze_logs, set_logger
from typescore.output.formatters import format_countdown, format_percent, format_result
from typescore.scoring import normalize, score_text
from typescore.session import SessionStateError, TypingTestSession

app = typer.Typer(
    name="typescore",
    help="Score typed transcripts against a reference with Word Error Rate.",
    no_args_is_help=True,
)
console = Console()

FORMATS = ("text", "markdown", "json")


def _cli_error(message: str, detail: str | None = None) -> None:
    """Print formatted error message to console."""
    if detail:
        console.print(f"[red]Error:[/red] {message}: {detail}")
    else:
        console.print(f"[red]Error:[/red] {message}")


def _read_text_file(path: Path, description: str) -> str:
    """Read a UTF-8 text file or exit with an error."""
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError:
        _cli_error(f"{description} file not found", str(path))
        raise typer.Exit(1)
    except (OSError, UnicodeDecodeError) as e:
        _cli_error(f"Failed to read {description} file", str(e))
        raise typer.Exit(1)


def _check_format(fmt: str) -> str:
    if fmt not in FORMATS:
        _cli_error("Unknown format", f"{fmt} (available: {', '.join(FORMATS)})")
        raise typer.Exit(1)
    return fmt


@app.command(name="score")
def score_cmd(
    reference: Annotated[str, typer.Argument(help="Reference text (or file with --file)")],
    hypothesis: Annotated[str, typer.Argument(help="Typed text (or file with --file)")],
    from_file: Annotated[
        bool,
        typer.Option("--file", "-f", help="Treat arguments as paths to text files")
    ] = False,
    fmt: Annotated[
        Optional[str],
        typer.Option("--format", help="Output format: text, markdown, json")
    ] = None,
):
    """Score a typed text against a reference.

    Examples:
        typescore score "the quick brown fox" "the quick brown cat"
        typescore score reference.txt typed.txt --file --format json
    """
    fmt = _check_format(fmt or load_config().output_format)

    if from_file:
        reference = _read_text_file(Path(reference), "Reference")
        hypothesis = _read_text_file(Path(hypothesis), "Typed text")

    result = score_text(reference, hypothesis)

    if fmt == "text":
        console.print(f"[bold]Words in reference:[/bold] {result.reference_word_count}")
        console.print(f"[bold]Edits:[/bold] {result.edits}")
        console.print(f"[bold]WER:[/bold] {format_percent(result.word_error_rate)}")
        if result.edits:
            console.print(
                f"  [dim]substitutions: {result.substitutions}, "
                f"insertions: {result.insertions}, "
                f"deletions: {result.deletions}[/dim]"
            )
    else:
        # Plain print so rich markup does not touch JSON/markdown
        print(format_result(result, fmt))


@app.command()
def run(
    reference_file: Annotated[
        Optional[Path],
        typer.Option("-r", "--reference-file", help="File containing the reference transcript")
    ] = None,
    reference_text: Annotated[
        Optional[str],
        typer.Option("--reference", help="Reference transcript text")
    ] = None,
    time_limit: Annotated[
        Optional[int],
        typer.Option("-t", "--time-limit", help="Time limit in seconds")
    ] = None,
    fmt: Annotated[
        Optional[str],
        typer.Option("--format", help="Output format: text, markdown, json")
    ] = None,
    output: Annotated[
        Optional[Path],
        typer.Option("-o", "--output", help="Also write the result to this file")
    ] = None,
):
    """Take a typing test in the terminal.

    The reference is whatever the audio contained; it is not shown.
    Type what you heard and press Enter to finish. Text entered after
    the time limit is still scored but marked as timed out.

    Examples:
        typescore run -r reference.txt
        typescore run --reference "good morning" -t 30
    """
    if reference_file is None and reference_text is None:
        _cli_error("Reference required", "Use -r/--reference-file or --reference")
        raise typer.Exit(1)

    config = load_config()
    fmt = _check_format(fmt or config.output_format)
    limit = time_limit if time_limit is not None else config.time_limit_seconds

    if limit <= 0:
        _cli_error("Invalid time limit", f"must be positive, got {limit}")
        raise typer.Exit(1)

    if reference_file is not None:
        reference_text = _read_text_file(reference_file, "Reference")

    logger = SessionLogger(buffer_size=config.logging.buffer_size) if config.logging.enabled else None
    set_logger(logger)
    if logger:
        logger.set_config(config.model_dump())

    session = TypingTestSession(time_limit_seconds=limit, logger=logger)
    session.set_reference(reference_text)

    words = len(normalize(session.reference_text))
    console.print(f"[bold]Typing test[/bold] ({words} reference words)")
    console.print(f"[dim]Time limit: {format_countdown(limit)}. Press Enter when done.[/dim]")
    console.print()

    try:
        session.start_test()
        session.type_text(console.input("[bold]> [/bold]"))
        result = session.finish()
    except SessionStateError as e:
        _cli_error("Test could not be run", str(e))
        if logger:
            logger.log_error("session_state", str(e))
        raise typer.Exit(1)
    finally:
        if logger:
            logger.finalize()
        set_logger(None)

    console.print()
    if result.timed_out:
        console.print("[yellow]Time ran out.[/yellow]")

    rendered = format_result(result.alignment, fmt, test=result)
    if fmt == "text":
        console.print(rendered)
    else:
        print(rendered)

    if output:
        content = format_result(result.alignment, "json" if output.suffix == ".json" else fmt, test=result)
        try:
            output.write_text(content, encoding="utf-8")
        except OSError as e:
            _cli_error("Failed to write result", str(e))
            raise typer.Exit(1)
        console.print(f"[green]Saved:[/green] {output}")


@app.command(name="config")
def config_cmd(
    show: Annotated[
        bool,
        typer.Option("--show", help="Show current configuration")
    ] = False,
    reset: Annotated[
        bool,
        typer.Option("--reset", help="Reset to default configuration")
    ] = False,
):
    """Manage typescore configuration."""
    from typescore.config import CONFIG_FILE

    if reset:
        save_config(TypescoreConfig())
        console.print("[green]Configuration reset to defaults.[/green]")

    if show or reset:
        config = load_config()
        console.print(f"[bold]Configuration:[/bold] {CONFIG_FILE}")
        console.print()
        for key, value in config.model_dump().items():
            if key == "logging":
                console.print(f"  [dim]logging.enabled:[/dim] {value['enabled']}")
                console.print(f"  [dim]logging.buffer_size:[/dim] {value['buffer_size']}")
            else:
                console.print(f"  [dim]{key}:[/dim] {value}")


@app.command()
def logs(
    sessions: Annotated[
        int,
        typer.Option("-n", "--sessions", help="Number of recent sessions to analyze")
    ] = 10,
):
    """Summarize recent typing-test sessions.

    Examples:
        typescore logs          # Last 10 sessions
        typescore logs -n 50    # Last 50 sessions
    """
    analysis = analyze_logs(limit=sessions)

    if "error" in analysis:
        console.print(f"[dim]{analysis['error']}. Run a typing test first.[/dim]")
        return

    console.print(f"[bold]Log Analysis[/bold] ({analysis['sessions_analyzed']} sessions)")
    console.print()
    console.print(f"  [dim]Tests finished:[/dim] {analysis['tests_finished']}")
    console.print(f"  [dim]Timed out:[/dim] {analysis['timeouts']}")
    if analysis["avg_word_error_rate"] is not None:
        console.print(f"  [dim]Average WER:[/dim] {format_percent(analysis['avg_word_error_rate'])}")
        console.print(f"  [dim]Best WER:[/dim] {format_percent(analysis['best_word_error_rate'])}")
    console.print(f"  [dim]Reference words:[/dim] {analysis['total_reference_words']:,}")
    console.print(f"  [dim]Total edits:[/dim] {analysis['total_edits']:,}")


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"typescore {__version__}")
        raise typer.Exit(0)


@app.callback()
def main_callback(
    version: Annotated[
        bool,
        typer.Option(
            "--version", "-v",
            help="Show version",
            callback=_version_callback,
            is_eager=True,
        )
    ] = False,
):
    """typescore - Word Error Rate scoring for audio typing tests."""


def main():
    """Entry point."""
    app()


if __name__ == "__main__":
    main()
