"""CLI commands for the tuition progress dashboard.

Commands:
- serve: Run the Web API with uvicorn
- report: Log in as a student and print their grade report
- hash-password: Produce a password_hash cell value
- note: Name the note nearest a frequency
"""

import asyncio

import typer
from rich.console import Console

from tuition.config.app_config import load_app_config
from tuition.core.credentials import InvalidCredentials, hash_password
from tuition.core.lessons import format_next_lesson
from tuition.core.link_titles import LinkTitleResolver
from tuition.core.progress_report import build_report, summarize
from tuition.core.records import ItemStatus
from tuition.core.tuner import note_for_frequency
from tuition.db.progress_repository import ProgressRepository
from tuition.db.sheets import DataUnavailable
from tuition.utils.validators import validate_email

app = typer.Typer(
    name="tuition",
    help="Student progress dashboard backed by a Google Sheet.",
    no_args_is_help=True,
)

console = Console()

STATUS_STYLES = {
    ItemStatus.COMPLETED: "[green]✓ Completed[/green]",
    ItemStatus.IN_PROGRESS: "[yellow]… In Progress[/yellow]",
    ItemStatus.NOT_STARTED: "[dim]· Not Started[/dim]",
}


def _get_repository() -> ProgressRepository:
    """Build the repository from config, or exit with a helpful error."""
    try:
        return ProgressRepository.from_config(load_app_config().sheets)
    except DataUnavailable as e:
        console.print(f"[red]✗ {e}[/red]")
        console.print("  Set SPREADSHEET_ID and SERVICE_ACCOUNT_JSON_B64 (or SERVICE_ACCOUNT_FILE)")
        raise typer.Exit(code=1)


def _truncate(text: str, max_len: int = 60) -> str:
    """Truncate text with ellipsis if too long."""
    if len(text) <= max_len:
        return text
    return text[:max_len - 3] + "..."


# =============================================================================
# SERVER
# =============================================================================


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", "--host", "-h", help="Bind address"),
    port: int = typer.Option(8000, "--port", "-p", help="Port"),
    reload: bool = typer.Option(False, "--reload", help="Auto-reload on code changes"),
) -> None:
    """Run the Web API."""
    import uvicorn

    console.print(f"[green]✓ Serving on http://{host}:{port}[/green]")
    uvicorn.run("tuition.web.api:app", host=host, port=port, reload=reload)


# =============================================================================
# REPORT
# =============================================================================


@app.command()
def report(
    email: str = typer.Option(..., "--email", "-e", help="Student email"),
    password: str = typer.Option(..., prompt=True, hide_input=True, help="Student password"),
    titles: bool = typer.Option(True, "--titles/--no-titles", help="Look up resource link titles"),
) -> None:
    """Log in as a student and print their progress by grade."""
    from rich.panel import Panel
    from rich.table import Table

    if not validate_email(email):
        console.print(f"[red]✗ Invalid email format: {email}[/red]")
        raise typer.Exit(code=1)

    repository = _get_repository()

    try:
        result = repository.login(email, password)
    except InvalidCredentials as e:
        console.print(f"[red]✗ {e}[/red]")
        raise typer.Exit(code=1)
    except DataUnavailable as e:
        console.print(f"[red]✗ {e}[/red]")
        raise typer.Exit(code=1)

    progress = result.progress
    if titles:
        links = load_app_config().links
        resolver = LinkTitleResolver(timeout=links.timeout, enabled=links.enrich_titles)
        progress = asyncio.run(resolver.enrich_items(progress))

    student = result.student
    sections = build_report(student, progress)
    summary = summarize(sections)

    header = f"[bold]{student.student_name or student.student_id}[/bold]"
    if student.current_grade:
        header += f" - {student.current_grade}"
    next_lesson = format_next_lesson(
        student.next_lesson_date, student.next_lesson_time, student.next_lesson_length
    )
    if next_lesson:
        header += f"\nNext lesson: {next_lesson}"
    if student.comments:
        header += f"\n[dim]{student.comments}[/dim]"
    header += f"\nOverall: {summary.completed}/{summary.total} ({summary.percentage}%)"
    console.print(Panel(header, title="[bold]Progress[/bold]", expand=False))

    if not sections:
        console.print("[yellow]⚠ No progress recorded yet[/yellow]")
        return

    for section in sections:
        title = section.grade or "(no grade)"
        if section.is_current:
            title += " [cyan](current)[/cyan]"
        table = Table(
            title=(
                f"{title} - {section.completed}/{section.total} ({section.percentage}%)"
                f", {section.remaining} left"
            ),
            show_header=True,
            header_style="bold",
        )
        table.add_column("Category", style="cyan", width=16)
        table.add_column("Detail", width=50)
        table.add_column("Status", width=16)
        table.add_column("Resources", width=30)

        for task in section.tasks:
            table.add_row(
                task.category,
                _truncate(task.detail),
                STATUS_STYLES[task.item_status],
                "\n".join(link.title for link in task.resource_links),
            )
        console.print(table)


# =============================================================================
# UTILITIES
# =============================================================================


@app.command(name="hash-password")
def hash_password_command(
    password: str = typer.Option(
        ..., prompt=True, hide_input=True, confirmation_prompt=True, help="Password to hash"
    ),
) -> None:
    """Print a value for a student's password_hash column."""
    rounds = load_app_config().auth.hash_rounds
    console.print(hash_password(password, rounds=rounds), soft_wrap=True)


@app.command()
def note(
    frequency: float = typer.Argument(..., help="Frequency in Hz"),
) -> None:
    """Name the note nearest a frequency."""
    reading = note_for_frequency(frequency)
    if reading is None:
        console.print(f"[red]✗ Invalid frequency: {frequency}[/red]")
        raise typer.Exit(code=1)

    if abs(reading.cents) <= 5:
        tuning = "[green]in tune[/green]"
    elif reading.cents > 0:
        tuning = f"[yellow]{reading.cents:+d} cents sharp[/yellow]"
    else:
        tuning = f"[yellow]{reading.cents:+d} cents flat[/yellow]"
    console.print(f"[bold]{reading.label}[/bold] (MIDI {reading.midi}) {tuning}")


if __name__ == "__main__":
    app()
