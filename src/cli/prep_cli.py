"""
Typer CLI for the type-rating prep engine.

Commands:
    prep categories              - Canonical category table
    prep match LABEL TARGET...   - Which matcher tier (if any) accepts a label
    prep assemble BANK.json      - Assemble a session from an exported bank
    prep review USER             - Review queue statistics for a user
    prep progress USER COURSE    - Module unlock/completion for a user
    prep init-db                 - Create review/progress tables

Usage:
    prep assemble bank.json --aircraft B737_FAMILY --category fuel --count 20
    prep assemble bank.json --mode review --user pilot-1
    prep progress pilot-1 course.json
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import NoReturn, Optional

import typer
from loguru import logger
from rich import print as rprint
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from sqlalchemy.exc import SQLAlchemyError

from config import get_settings
from src.categories.mappings import CANONICAL_CATEGORIES, canonicalize, expand_all
from src.categories.matcher import CategoryMatcher
from src.core.errors import PrepEngineError

console = Console()

app = typer.Typer(
    name="prep",
    help="Type-rating exam prep: categories, sessions, review queue and lesson progress",
    no_args_is_help=True,
)


def _sql_stores():
    """Lazy load SQL stores so pure commands never touch the database."""
    from src.db.database import init_db
    from src.stores.sql import SqlProgressStore, SqlReviewStore

    init_db()
    return SqlReviewStore(), SqlProgressStore()


def _fail(error: Exception) -> NoReturn:
    rprint(f"[red]Error:[/red] {escape(str(error))}")
    raise typer.Exit(code=1)


def _progress_bar(percent: int, width: int = 10) -> str:
    filled = int(percent / 100 * width)
    return "#" * filled + "-" * (width - filled)


# ========================================
# Categories
# ========================================


@app.command("categories")
def categories_cmd() -> None:
    """List canonical categories and their aliases."""
    table = Table(title="Canonical Categories")
    table.add_column("Key", style="cyan")
    table.add_column("Description")
    table.add_column("Aliases", style="dim")

    for category in CANONICAL_CATEGORIES.values():
        table.add_row(category.key, category.description, ", ".join(category.aliases))

    console.print(table)


@app.command("match")
def match_cmd(
    label: str = typer.Argument(..., help="Question category label"),
    targets: list[str] = typer.Argument(..., help="Requested category labels or keys"),
    aliases: bool = typer.Option(True, "--aliases/--no-aliases", help="Expand canonical keys"),
) -> None:
    """Show which matcher tier accepts LABEL for the given targets."""
    settings = get_settings()
    matcher = CategoryMatcher(min_token_length=settings.category_min_token_length)
    expanded = expand_all(targets) if aliases else []

    tier = matcher.match_tier(label, targets, expanded)
    wanted = ", ".join(targets)
    if tier is None:
        rprint(f"[yellow]No match[/yellow] for '{label}' against {wanted}")
    else:
        rprint(f"[green]Match[/green] ({tier.value}) for '{label}' against {wanted}")

    key = canonicalize(label)
    rprint(f"[dim]Canonical key: {key or 'unknown'}[/dim]")


# ========================================
# Sessions
# ========================================


@app.command("assemble")
def assemble_cmd(
    bank_path: Path = typer.Argument(..., help="Exported question bank (JSON array)"),
    aircraft: Optional[str] = typer.Option(None, "--aircraft", "-a", help="Aircraft tag, or ALL"),
    category: Optional[list[str]] = typer.Option(None, "--category", "-c", help="Category (repeatable)"),
    difficulty: Optional[str] = typer.Option(None, "--difficulty", "-d", help="beginner|intermediate|advanced"),
    count: Optional[int] = typer.Option(None, "--count", "-n", help="Number of questions"),
    mode: str = typer.Option("practice", "--mode", "-m", help="practice|timed|review"),
    seed: Optional[int] = typer.Option(None, "--seed", help="Seed for reproducible sampling"),
    user: str = typer.Option("default", "--user", "-u", help="User id (review mode)"),
) -> None:
    """Assemble a session from a question bank file."""
    from src.review.queue_manager import ReviewQueueManager
    from src.sessions.filters import SessionFilter
    from src.sessions.service import SessionService
    from src.stores.json_bank import JsonQuestionBank
    from src.stores.memory import InMemoryReviewStore

    settings = get_settings()
    try:
        session_filter = SessionFilter.from_params(
            settings,
            aircraft_type=aircraft,
            categories=category or [],
            difficulty=difficulty,
            count=count,
            mode=mode,
        )
        review_store = _sql_stores()[0] if session_filter.is_review else InMemoryReviewStore()
        service = SessionService(
            JsonQuestionBank(bank_path),
            ReviewQueueManager(review_store, settings=settings),
            settings=settings,
        )
        result = service.build_session(user, session_filter, seed=seed)
    except (PrepEngineError, SQLAlchemyError) as e:
        _fail(e)

    if result.excluded_ids:
        rprint(f"[yellow]Excluded {len(result.excluded_ids)} invalid questions:[/yellow] {', '.join(result.excluded_ids)}")

    if result.is_empty:
        rprint("[yellow]No questions available for this filter.[/yellow]")
        raise typer.Exit(code=0)

    table = Table(title=f"{result.mode.value.title()} session: {len(result)} of {result.requested}")
    table.add_column("#", justify="right", style="dim")
    table.add_column("ID", style="cyan")
    table.add_column("Aircraft")
    table.add_column("Category")
    table.add_column("Difficulty")
    table.add_column("Question")

    for index, question in enumerate(result, start=1):
        table.add_row(
            str(index),
            question.id,
            question.aircraft_type,
            question.category,
            question.difficulty,
            question.question[:60],
        )

    console.print(table)
    if result.is_partial:
        rprint(f"[yellow]Only {result.available} questions matched; requested {result.requested}.[/yellow]")


# ========================================
# Review queue
# ========================================


@app.command("review")
def review_cmd(
    user: str = typer.Argument(..., help="User id"),
    category: Optional[list[str]] = typer.Option(None, "--category", "-c", help="Narrow by category"),
) -> None:
    """Show a user's review queue."""
    from src.review.queue_manager import ReviewQueueManager

    try:
        review_store, _ = _sql_stores()
        manager = ReviewQueueManager(review_store)
        stats = manager.stats(user)
        unresolved = manager.list_unresolved(user, category)
    except (PrepEngineError, SQLAlchemyError) as e:
        _fail(e)

    rprint(
        f"[bold]{user}[/bold]: {stats.unresolved} unresolved, {stats.resolved} resolved "
        f"({stats.resolution_rate}% resolved)"
    )

    if not unresolved:
        rprint("[green]Nothing to review.[/green]")
        return

    table = Table(title="Unresolved")
    table.add_column("Question", style="cyan")
    table.add_column("Category")
    table.add_column("Aircraft")
    table.add_column("Attempts", justify="right")
    table.add_column("Last attempt")

    for record in unresolved:
        attempts = f"[red]{record.attempt_count}[/red]" if record in stats.hot else str(record.attempt_count)
        table.add_row(
            record.question_id,
            record.category,
            record.aircraft_type,
            attempts,
            record.last_attempt_at.strftime("%Y-%m-%d %H:%M"),
        )

    console.print(table)


# ========================================
# Progress
# ========================================


@app.command("progress")
def progress_cmd(
    user: str = typer.Argument(..., help="User id"),
    course_path: Path = typer.Argument(..., help="Course definition (JSON)"),
) -> None:
    """Show module unlock and completion state for a user."""
    from src.progress.modules import ModuleGraph
    from src.progress.state_machine import ProgressStateMachine

    settings = get_settings()
    try:
        with open(course_path, "r", encoding="utf-8") as f:
            course = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        _fail(e)

    try:
        graph = ModuleGraph.from_dict(course, foundation_id=settings.foundation_module_id)
        _, progress_store = _sql_stores()
        machine = ProgressStateMachine(
            progress_store,
            graph,
            course_id=str(course.get("id") or course_path.stem),
            settings=settings,
        )
        progress = machine.course_progress(user)
    except (PrepEngineError, SQLAlchemyError) as e:
        _fail(e)

    table = Table(title=course.get("title") or progress.course_id)
    table.add_column("Module", style="cyan")
    table.add_column("Title")
    table.add_column("Status")
    table.add_column("Lessons", justify="right")
    table.add_column("Progress")

    for module in progress.modules:
        if module.is_completed:
            status = "[green]complete[/green]"
        elif module.is_unlocked:
            status = "[yellow]unlocked[/yellow]"
        else:
            status = "[dim]locked[/dim]"
        table.add_row(
            module.module_id,
            module.title,
            status,
            f"{module.completed_lessons}/{module.total_lessons}",
            f"{_progress_bar(module.percent_complete)} {module.percent_complete}%",
        )

    console.print(table)
    if progress.completed_at is not None:
        rprint(f"[green]Course completed {progress.completed_at:%Y-%m-%d}[/green]")
    else:
        rprint(f"Course: {progress.completed_lessons}/{progress.total_lessons} lessons ({progress.percent_complete}%)")


@app.command("init-db")
def init_db_cmd() -> None:
    """Create the review and progress tables."""
    from src.db.database import init_db

    try:
        init_db()
    except (PrepEngineError, SQLAlchemyError) as e:
        _fail(e)
    rprint("[green]Database initialized.[/green]")


# =============================================================================
# Entry Point
# =============================================================================


def configure_logging() -> None:
    settings = get_settings()
    logger.remove()
    logger.add(
        sys.stderr,
        level=settings.log_level,
        format="<level>{message}</level>",
    )
    if settings.log_file:
        logger.add(settings.log_file, level=settings.log_level, rotation="10 MB")


def main() -> None:
    """CLI entry point."""
    configure_logging()
    app()


if __name__ == "__main__":
    main()
