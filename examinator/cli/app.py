"""Typer CLI application for taking AI-generated quizzes."""

import logging
import mimetypes
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from examinator import __version__
from examinator.config.settings import Settings, get_settings
from examinator.errors import AnswerOutOfRangeError, ConfigurationError, GenerationError
from examinator.export.docx_generator import export_review_to_docx, option_label
from examinator.models.quiz import (
    DEFAULT_OPTIONS,
    DEFAULT_QUESTIONS,
    MAX_OPTIONS,
    MAX_QUESTIONS,
    MIN_OPTIONS,
    MIN_QUESTIONS,
    Difficulty,
    QuizConfiguration,
    QuizMode,
    QuizResult,
    ScoreBand,
    SourceDocument,
    build_configuration,
)
from examinator.providers.generator import BedrockQuestionProvider, QuestionProvider
from examinator.session.flow import finish_session, start_session
from examinator.session.state import QuizSession
from examinator.storage.backends import FileStorage
from examinator.storage.consent import ConsentFlag
from examinator.storage.history import HistoryStore

app = typer.Typer(
    name="examinator",
    help="Take AI-generated quizzes on any topic or document",
    add_completion=False,
)

console = Console()
logger = logging.getLogger(__name__)

BAND_STYLES = {
    ScoreBand.LOW: "red",
    ScoreBand.FAIR: "yellow",
    ScoreBand.GOOD: "green",
    ScoreBand.EXCELLENT: "blue",
}


def configure_logging(level: str) -> None:
    """Route log records through Rich, once per process."""
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[
            RichHandler(
                console=Console(stderr=True), rich_tracebacks=True, show_path=False
            )
        ],
        force=True,
    )


def get_provider(settings: Settings) -> QuestionProvider:
    """Question provider used by the ``take`` command."""
    return BedrockQuestionProvider(settings=settings)


def open_stores(settings: Settings) -> tuple[HistoryStore, ConsentFlag]:
    storage = FileStorage(settings.storage_dir)
    return HistoryStore(storage), ConsentFlag(storage)


def load_document(path: Path) -> SourceDocument:
    """
    Read a document from disk for use as the question source.

    Raises:
        ConfigurationError: If the file cannot be read or is empty
    """
    mime_type, _ = mimetypes.guess_type(path.name)
    try:
        return SourceDocument(
            data=path.read_bytes(),
            mime_type=mime_type or "application/pdf",
            filename=path.name,
        )
    except OSError as e:
        raise ConfigurationError(f"cannot read {path.name}: {e.strerror or e}") from e
    except ValidationError as e:
        raise ConfigurationError(f"{path.name} is empty") from e


def parse_choice(answer: str) -> int | None:
    """
    Turn typed input into an option index.

    Accepts a letter (A, B, ...) or a 1-based number. Returns None for input
    that is neither; range checking is left to the session.
    """
    answer = answer.strip()
    if not answer:
        return None
    if answer.isdigit():
        return int(answer) - 1
    if len(answer) == 1 and answer.isalpha():
        return ord(answer.upper()) - ord("A")
    return None


@app.command()
def take(
    topic: str = typer.Option(
        "",
        "--topic",
        "-t",
        help="Quiz topic (defaults to the document name or General Knowledge)",
    ),
    document: Optional[Path] = typer.Option(
        None,
        "--document",
        "-f",
        help="PDF to use as the only source for the questions",
        exists=True,
        dir_okay=False,
        readable=True,
    ),
    num_questions: int = typer.Option(
        DEFAULT_QUESTIONS,
        "--questions",
        "-q",
        help="Number of questions",
        min=MIN_QUESTIONS,
        max=MAX_QUESTIONS,
        clamp=True,
    ),
    num_options: int = typer.Option(
        DEFAULT_OPTIONS,
        "--options",
        "-n",
        help="Options per question in multiple-choice mode",
        min=MIN_OPTIONS,
        max=MAX_OPTIONS,
        clamp=True,
    ),
    mode: QuizMode = typer.Option(
        QuizMode.MULTIPLE_CHOICE,
        "--mode",
        "-m",
        help="Answer format",
        case_sensitive=False,
    ),
    difficulty: Difficulty = typer.Option(
        Difficulty.MEDIUM,
        "--difficulty",
        "-d",
        help="Difficulty level",
        case_sensitive=False,
    ),
    export: Optional[str] = typer.Option(
        None,
        "--export",
        "-o",
        help="Write a DOCX review of the finished quiz (file name without extension)",
    ),
) -> None:
    """
    Generate a quiz and take it in the terminal.

    Example:
        examinator take -t "Solar System" -q 3 -m true-false -d easy
    """
    settings = get_settings()
    history_store, consent_flag = open_stores(settings)

    if not consent_flag.has_consented():
        if typer.confirm(
            "We store your last results locally so you can review them. Allow this?",
            default=True,
        ):
            try:
                consent_flag.give()
            except OSError as e:
                logger.debug("Consent write failed", exc_info=e)
                console.print(
                    f"[yellow]Warning:[/yellow] could not save consent ({e.strerror or e}). "
                    "Results from this quiz will not be stored."
                )

    try:
        config = build_configuration(
            topic=topic,
            num_questions=num_questions,
            num_options=num_options,
            mode=mode,
            difficulty=difficulty,
            document=load_document(document) if document else None,
        )
    except ConfigurationError as e:
        console.print(f"[red]Error:[/red] invalid configuration: {e}", style="bold")
        raise typer.Exit(code=1)

    display_config(config)

    try:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
            transient=True,
        ) as progress:
            progress.add_task("[cyan]Generating quiz...", total=None)
            session = start_session(config, get_provider(settings))
    except GenerationError as e:
        logger.debug("Generation failed", exc_info=e)
        console.print(f"\n[red]Error:[/red] {e.user_message}", style="bold")
        raise typer.Exit(code=1)

    run_session(session)

    result = finish_session(session, config, history_store, consent_flag)
    display_result(result)

    if export:
        output_file = export_review_to_docx(session, result, export)
        console.print(f"\n[green]✓[/green] Review exported to: {output_file}")


def run_session(session: QuizSession) -> None:
    """Ask every question until the session finishes."""
    while not session.is_finished:
        progress = session.progress()
        question = session.current_question

        console.print()
        console.print(
            f"[bold]Question {progress.question_index + 1} / {progress.total_questions}[/bold]"
            f"   [cyan]Points: {progress.score}[/cyan]"
        )
        console.print(Panel(question.question, border_style="cyan"))
        for index, option in enumerate(question.options):
            console.print(f"  [bold]{option_label(index)}.[/bold] {option}")

        while session.selected_index is None:
            answer = typer.prompt("Your answer")
            choice = parse_choice(answer)
            if choice is None:
                console.print("[yellow]Type the letter of an option.[/yellow]")
                continue
            try:
                session.submit_answer(choice)
            except AnswerOutOfRangeError:
                console.print(
                    f"[yellow]Pick one of A-{option_label(len(question.options) - 1)}.[/yellow]"
                )

        if session.is_correct:
            console.print("[green bold]Correct![/green bold]")
        else:
            console.print(
                f"[red bold]Incorrect.[/red bold] The answer was "
                f"{option_label(question.correct_index)}. {question.correct_option}"
            )
        if question.explanation:
            console.print(f"[dim]{question.explanation}[/dim]")

        session.advance()


def display_config(config: QuizConfiguration) -> None:
    """Display the configuration before generation."""
    table = Table(title="Quiz Configuration", show_header=False, border_style="cyan")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="white")

    table.add_row("Topic", config.effective_topic)
    if config.document is not None:
        table.add_row("Document", config.document.filename or config.document.mime_type)
    table.add_row("Questions", str(config.num_questions))
    table.add_row("Mode", config.mode.value)
    if config.mode == QuizMode.MULTIPLE_CHOICE:
        table.add_row("Options", str(config.num_options))
    table.add_row("Difficulty", config.difficulty.value.capitalize())

    console.print()
    console.print(table)


def display_result(result: QuizResult) -> None:
    """Display the final score of a session."""
    style = BAND_STYLES[result.score_band]
    message = (
        "Good job! You passed the test."
        if result.passed
        else "Keep practising to improve your score."
    )
    console.print()
    console.print(
        Panel(
            f"[bold {style}]{result.score}/{result.total_questions}[/bold {style}]\n\n{message}",
            title=f"Quiz Complete: {result.topic}",
            border_style=style,
        )
    )


@app.command()
def history(
    clear: bool = typer.Option(
        False,
        "--clear",
        help="Delete all stored results",
    ),
) -> None:
    """Show your most recent results."""
    store, _ = open_stores(get_settings())

    if clear:
        try:
            store.clear()
        except OSError as e:
            console.print(f"[red]Error:[/red] could not clear history: {e.strerror or e}")
            raise typer.Exit(code=1)
        console.print("[green]✓[/green] History cleared.")
        return

    results = store.list()
    if not results:
        console.print("[dim]No previous tests yet. Take your first one![/dim]")
        return

    table = Table(title="Latest Results", border_style="cyan")
    table.add_column("Date", style="white")
    table.add_column("Topic", style="white")
    table.add_column("Difficulty", style="white")
    table.add_column("Score", justify="right")

    for result in results:
        style = BAND_STYLES[result.score_band]
        table.add_row(
            result.date.astimezone().strftime("%Y-%m-%d %H:%M"),
            result.topic,
            result.difficulty.capitalize(),
            f"[{style}]{result.score}/{result.total_questions}[/{style}]",
        )

    console.print(table)


@app.command()
def consent(
    give: bool = typer.Option(
        True,
        "--give/--revoke",
        help="Allow or stop storing results locally",
    ),
) -> None:
    """Manage consent for storing results locally."""
    _, flag = open_stores(get_settings())

    try:
        if give:
            flag.give()
        else:
            flag.revoke()
    except OSError as e:
        console.print(f"[red]Error:[/red] could not update consent: {e.strerror or e}")
        raise typer.Exit(code=1)

    if give:
        console.print("[green]✓[/green] Results will be stored locally.")
    else:
        console.print("[yellow]Results will no longer be stored.[/yellow]")


@app.command()
def info() -> None:
    """Display information about the quiz application."""
    settings = get_settings()
    info_text = f"""
[bold cyan]Examinator[/bold cyan]
Version: {__version__}

[bold]Features:[/bold]
  • Questions generated from a topic or a PDF document
  • Multiple choice (2-5 options) or true/false
  • Easy, medium and hard difficulty
  • Local history of your last 10 results
  • DOCX review export

[bold]Model:[/bold] {settings.model_name}
[bold]Storage:[/bold] {settings.storage_dir}
    """
    console.print(Panel(info_text, title="Examinator Info", border_style="cyan"))


@app.callback()
def callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """
    Examinator - Take AI-generated quizzes and keep track of your results.
    """
    configure_logging("DEBUG" if verbose else get_settings().log_level)


if __name__ == "__main__":
    app()
