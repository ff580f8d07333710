"""Typer CLI application for Study Royale."""

import random
from pathlib import Path
from typing import List, Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from study_royale import __version__
from study_royale.agents.checker import AnswerChecker
from study_royale.agents.tutor import StudyTutor
from study_royale.config.log import configure_logging
from study_royale.config.settings import get_settings
from study_royale.errors import QuizError
from study_royale.graph.workflow import run_generation
from study_royale.models.quiz import (
    GenerationOutcome,
    GenerationRequest,
    LabeledOptionsQuestion,
    MatchingQuestion,
    ParsedQuestion,
    ParseResult,
    QuestionType,
    ScoreReport,
    TrueFalseQuestion,
    TrueFalseVariant,
    ValidationResult,
)
from study_royale.parsing.parser import parse
from study_royale.parsing.validator import expected_counts, validate
from study_royale.providers.chat import build_checker_provider, build_tutor_provider
from study_royale.session.flashcards import FlashcardDeck
from study_royale.session.quiz_session import TEXT_QUESTIONS, QuizSession

app = typer.Typer(
    name="study-royale",
    help="Generate, check and take study quizzes from your notes",
    add_completion=False,
)

console = Console()


def read_text(path: Path) -> str:
    return path.read_text(encoding="utf-8")


@app.command()
def generate(
    source: Path = typer.Argument(
        ...,
        exists=True,
        dir_okay=False,
        help="Text file with the extracted study material",
    ),
    types: List[QuestionType] = typer.Option(
        ...,
        "--type",
        "-t",
        help="Question types (can specify multiple times: -t multiple-choice -t matching)",
        case_sensitive=False,
    ),
    count: int = typer.Option(
        10,
        "--count",
        "-n",
        help="Total number of questions across all types",
        min=1,
        max=50,
    ),
    instructions: str = typer.Option(
        "",
        "--instructions",
        "-i",
        help="Extra requirement every question should reflect",
    ),
    variant: TrueFalseVariant = typer.Option(
        TrueFalseVariant.TRADITIONAL,
        "--variant",
        help="True/false template",
        case_sensitive=False,
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Write the generated quiz text here instead of printing it",
    ),
) -> None:
    """
    Generate a quiz from study material.

    Example:
        study-royale generate notes.txt -t multiple-choice -t identification -n 10 -o quiz.txt
    """
    try:
        request = GenerationRequest(
            source_text=read_text(source),
            requested_types=types,
            total_count=count,
            special_instructions=instructions,
            true_false_variant=variant,
        )
    except ValidationError as e:
        console.print(f"[red]Error:[/red] invalid request\n{escape(str(e))}", style="bold")
        raise typer.Exit(code=1)

    display_config(request, output)

    try:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
        ) as progress:
            task = progress.add_task("[cyan]Generating questions...", total=None)
            outcome = run_generation(request)
            progress.update(task, description="[green]Generation complete!")
    except QuizError as e:
        console.print(f"\n[red]Error during quiz generation:[/red] {escape(str(e))}", style="bold")
        raise typer.Exit(code=1)

    display_outcome(request, outcome)

    if output:
        output.write_text(outcome.text, encoding="utf-8")
        console.print(f"\n[green]✓[/green] Quiz written to: {output}")
    else:
        console.print()
        console.print(outcome.text, markup=False)


@app.command("validate")
def validate_command(
    raw: Path = typer.Argument(..., exists=True, dir_okay=False, help="Generated quiz text"),
    types: List[QuestionType] = typer.Option(
        ..., "--type", "-t", help="Requested question types", case_sensitive=False
    ),
    count: int = typer.Option(10, "--count", "-n", help="Requested total", min=1),
) -> None:
    """Count questions in a generated quiz against the requested counts."""
    result = validate(read_text(raw), types, count)
    display_validation(result, expected_counts(types, count))
    if not result.is_complete:
        raise typer.Exit(code=1)


@app.command()
def show(
    raw: Path = typer.Argument(..., exists=True, dir_okay=False, help="Generated quiz text"),
    types: Optional[List[QuestionType]] = typer.Option(
        None, "--type", "-t", help="Question types the quiz was generated for", case_sensitive=False
    ),
    answers: bool = typer.Option(False, "--answers/--no-answers", help="Show correct answers"),
) -> None:
    """Print the questions parsed from a generated quiz."""
    result = parse(read_text(raw), types)
    if result.is_unparseable:
        console.print("[red]No questions could be parsed from this text.[/red]")
        raise typer.Exit(code=1)

    for number, question in enumerate(result.questions, 1):
        display_question(number, question, show_answer=answers)

    table = Table(title="Questions by Type", border_style="cyan")
    table.add_column("Type", style="cyan")
    table.add_column("Count", style="white")
    for question_type, total in result.counts_by_type().items():
        if total:
            table.add_row(question_type.display_name, str(total))
    console.print(table)


@app.command()
def take(
    raw: Path = typer.Argument(..., exists=True, dir_okay=False, help="Generated quiz text"),
    types: Optional[List[QuestionType]] = typer.Option(
        None, "--type", "-t", help="Question types the quiz was generated for", case_sensitive=False
    ),
    offline: bool = typer.Option(
        False, "--offline", help="Grade typed answers by exact comparison instead of the model"
    ),
) -> None:
    """Take a generated quiz in the terminal."""
    result = parse(read_text(raw), types)
    selected = list(dict.fromkeys(types or (q.question_type for q in result.questions)))

    checker = None if offline else AnswerChecker(build_checker_provider())
    session = QuizSession(checker)
    session.start()
    for question_type in selected or [QuestionType.MULTIPLE_CHOICE]:
        session.toggle_type(question_type)
    session.begin_generation()

    if not session.load(result):
        console.print("[red]No questions could be parsed from this text. Generate it again.[/red]")
        raise typer.Exit(code=1)
    session.start_quiz()

    if session.is_flashcard:
        run_flashcards(session.deck())
        session.exit()
        return

    for index, question in enumerate(session.questions):
        display_question(index + 1, question)
        ask_answer(session, index, question)

    unanswered = session.unanswered_count()
    if unanswered and not typer.confirm(
        f"You have {unanswered} unanswered question(s). Submit anyway?"
    ):
        session.exit()
        raise typer.Exit()

    with console.status("[cyan]Checking your answers..."):
        report = session.submit()
    display_report(report, session.answer_key())


@app.command()
def ask(
    raw: Path = typer.Argument(..., exists=True, dir_okay=False, help="Generated quiz text"),
    message: str = typer.Argument(..., help="What you want to know"),
    source: Optional[Path] = typer.Option(
        None, "--source", "-s", exists=True, dir_okay=False, help="Study material to draw on"
    ),
) -> None:
    """Ask the study tutor about a quiz."""
    result = parse(read_text(raw))
    settings = get_settings()
    tutor = StudyTutor(build_tutor_provider(settings), settings.tutor_source_char_limit)
    try:
        with console.status("[cyan]Thinking..."):
            reply = tutor.ask(
                message,
                questions=result.questions,
                source_text=read_text(source) if source else None,
            )
    except (QuizError, ValueError) as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}", style="bold")
        raise typer.Exit(code=1)
    console.print(Panel(escape(reply), title="Study Tutor", border_style="magenta"))


@app.command()
def info() -> None:
    """Display information about Study Royale."""
    settings = get_settings()
    type_names = ", ".join(t.value for t in QuestionType)
    info_text = f"""
[bold cyan]Study Royale[/bold cyan]
Version: {__version__}

[bold]Generation workflow:[/bold]
  • Generator - One primary model call per question type
  • Validator - Counts questions against the request
  • Filler - Secondary model generates only what is missing
  • Finalizer - Returns the complete or best attempt

[bold]Question types:[/bold]
  {type_names}

[bold]Models:[/bold]
  Primary:   {settings.primary_model_name} (AWS Bedrock)
  Secondary: {settings.secondary_model_name} (Anthropic)
    """
    console.print(Panel(info_text, title="Study Royale Info", border_style="cyan"))


def display_config(request: GenerationRequest, output: Optional[Path]) -> None:
    """Display the request before generation."""
    table = Table(title="Quiz Configuration", show_header=False, border_style="cyan")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="white")

    table.add_row("Types", ", ".join(t.display_name for t in request.effective_types))
    table.add_row("Total questions", str(request.total_count))
    table.add_row("True/False variant", request.true_false_variant.value)
    if request.special_instructions:
        table.add_row("Instructions", request.special_instructions)
    table.add_row("Output", str(output) if output else "stdout")

    console.print()
    console.print(table)


def display_validation(result: ValidationResult, expected: dict[QuestionType, int]) -> None:
    """Per-type counts against the requested counts."""
    table = Table(title="Question Counts", border_style="green")
    table.add_column("Type", style="cyan")
    table.add_column("Found", style="white")
    table.add_column("Expected", style="white")
    table.add_column("Status")

    for question_type, count in expected.items():
        actual = result.counts_by_type.get(question_type, 0)
        if actual >= count:
            status = "[green]ok[/green]"
        elif actual == 0:
            status = "[red]missing[/red]"
        else:
            status = f"[yellow]short {count - actual}[/yellow]"
        table.add_row(question_type.display_name, str(actual), str(count), status)

    console.print()
    console.print(table)


def display_outcome(request: GenerationRequest, outcome: GenerationOutcome) -> None:
    """Summary of a generation run."""
    if outcome.validation is not None:
        display_validation(outcome.validation, request.expected_counts())

    if outcome.is_complete:
        console.print("\n[bold green]All questions generated![/bold green]")
    else:
        missing = outcome.validation.missing if outcome.validation else request.total_count
        console.print(
            f"\n[yellow]Returning best effort result, {missing} question(s) missing.[/yellow]"
        )
    console.print(f"Attempts: {outcome.attempts}  Fill calls: {outcome.fill_calls}")
    for error in outcome.errors:
        console.print(f"  [dim]{escape(error)}[/dim]")


def display_question(number: int, question: ParsedQuestion, show_answer: bool = False) -> None:
    """Render one question as a panel."""
    body = escape(question.text)
    if isinstance(question, LabeledOptionsQuestion):
        body += "\n\n" + "\n".join(
            f"{label}) {escape(text)}" for label, text in question.options.items()
        )
    elif isinstance(question, MatchingQuestion):
        rights = [pair.right for pair in question.pairs]
        random.shuffle(rights)
        body += "\n\n[bold]Column A[/bold]\n" + "\n".join(
            f"{i}. {escape(pair.left)}" for i, pair in enumerate(question.pairs, 1)
        )
        body += "\n\n[bold]Column B[/bold]\n" + "\n".join(f"• {escape(right)}" for right in rights)
    if show_answer:
        body += f"\n\n[green]Answer:[/green] {escape(question.answer_text)}"

    console.print(
        Panel(
            body,
            title=f"{number}. {question.question_type.display_name}",
            border_style="cyan",
        )
    )


def ask_answer(session: QuizSession, index: int, question: ParsedQuestion) -> None:
    """Prompt for one answer; an empty reply leaves the question unanswered."""
    if isinstance(question, LabeledOptionsQuestion):
        label = typer.prompt("Your answer (A-D)", default="", show_default=False).strip()
        while label and label.upper() not in question.options:
            label = typer.prompt("Please answer A, B, C or D", default="", show_default=False)
        if label:
            session.select_option(index, label)
    elif isinstance(question, TrueFalseQuestion):
        reply = typer.prompt("True or False", default="", show_default=False).strip().lower()
        if reply[:1] in ("t", "f"):
            session.answer_bool(index, reply.startswith("t"))
    elif isinstance(question, TEXT_QUESTIONS):
        session.answer_text(index, typer.prompt("Your answer", default="", show_default=False))
    elif isinstance(question, MatchingQuestion):
        for left_index, pair in enumerate(question.pairs):
            right = typer.prompt(f"Match for '{pair.left}'", default="", show_default=False)
            if not right:
                continue
            if session.match_pair(index, left_index, right):
                console.print("[green]Correct match![/green]")
            else:
                console.print("[red]Incorrect match.[/red]")


def run_flashcards(deck: FlashcardDeck) -> None:
    """Flip through flashcards: [f]lip, [n]ext, [p]revious, [q]uit."""
    while deck.current is not None:
        side = "ANSWER" if deck.flipped else "QUESTION"
        console.print(Panel(escape(deck.visible_text), title=side, subtitle=deck.position, border_style="cyan"))
        command = typer.prompt("[f]lip [n]ext [p]revious [q]uit", default="f").strip().lower()
        if command.startswith("q"):
            break
        if command.startswith("n"):
            deck.next()
        elif command.startswith("p"):
            deck.previous()
        else:
            deck.flip()


def display_report(report: ScoreReport, answer_key: list[str]) -> None:
    """Score summary with per-question results and the answer key."""
    color = "green" if report.percentage >= 70 else "yellow"
    console.print(
        Panel(
            f"[bold]{report.correct} / {report.total}[/bold]\n"
            f"[{color}]{report.percentage}%[/{color}]\n\n{report.message}",
            title="Quiz Results",
            border_style=color,
        )
    )

    table = Table(title="Answers", border_style="cyan")
    table.add_column("#", style="cyan")
    table.add_column("Type", style="white")
    table.add_column("Result")
    table.add_column("Correct Answer", style="white")
    table.add_column("Explanation", style="dim")

    for result, answer in zip(report.results, answer_key):
        if result.is_correct:
            mark = "[green]✓[/green]"
        elif result.answered:
            mark = "[red]✗[/red]"
        else:
            mark = "[yellow]skipped[/yellow]"
        table.add_row(
            str(result.index + 1),
            result.question_type.display_name,
            mark,
            escape(answer),
            escape(result.explanation),
        )
    console.print(table)


@app.callback()
def callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    """
    Study Royale - Turn study material into quizzes with AI.
    """
    configure_logging("DEBUG" if verbose else get_settings().log_level)


if __name__ == "__main__":
    app()
