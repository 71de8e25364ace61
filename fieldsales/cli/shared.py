"""Shared CLI helpers: console, logger, store factory, date parsing and report printing."""

from datetime import date
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from fieldsales.models.achievement import AchievementResult
from fieldsales.models.outcomes import CommitResult, InvalidRow, ParseResult, UploadReport
from fieldsales.store.sql import SqlDataStore
from fieldsales.utils.logger import get_logger

console = Console()
logger = get_logger("fieldsales.cli")

PREVIEW_LIMIT = 50


def get_store() -> SqlDataStore:
    """Store backed by DATABASE_URL."""
    return SqlDataStore()


def parse_day(value: Optional[str]) -> date:
    """YYYY-MM-DD to date; today when empty."""
    if not value:
        return date.today()
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise typer.BadParameter(f"Expected YYYY-MM-DD, got {value!r}") from None


def print_parse_result(result: ParseResult, limit: int = PREVIEW_LIMIT) -> None:
    """Preview table: every row with its action, invalid rows with their reason."""
    console.print(
        f"\n[bold]Preview ({result.schema_name})[/bold]  "
        f"[green]{result.valid_count} valid[/green]  [red]{result.invalid_count} invalid[/red]"
    )
    table = Table(show_header=True, header_style="bold")
    table.add_column("Line", justify="right")
    table.add_column("Status")
    table.add_column("Action / Reason")
    table.add_column("Data")
    for row in result.rows[:limit]:
        data = ", ".join(v for v in row.record.cells.values() if v)
        if isinstance(row, InvalidRow):
            table.add_row(str(row.line_number), "[red]invalid[/red]", row.reason, data)
        else:
            table.add_row(str(row.line_number), "[green]valid[/green]", row.action.value, data)
    console.print(table)
    if len(result.rows) > limit:
        console.print(f"[dim]... {len(result.rows) - limit} more rows[/dim]")


def print_commit_result(summary: CommitResult) -> None:
    if summary.replaced:
        for group, count in summary.replaced.items():
            console.print(f"  Replaced [bold]{group}[/bold]: {count} items")
    console.print(
        f"[bold]Added:[/bold] {summary.added}  [bold]Updated:[/bold] {summary.updated}  "
        f"[bold]Failed:[/bold] {summary.failed}"
    )
    for message in summary.errors:
        console.print(f"  [red]{message}[/red]")


def print_upload_report(report: UploadReport) -> None:
    print_parse_result(report.parse)
    if report.commit is None:
        console.print("[yellow]Nothing written.[/yellow]")
        return
    print_commit_result(report.commit)


def print_achievement(result: AchievementResult, title: str = "MSL Achievement") -> None:
    table = Table(title=title, show_header=True, header_style="bold")
    table.add_column("Store")
    table.add_column("Category")
    table.add_column("Matched", justify="right")
    table.add_column("Achievement", justify="right")
    for store in result.stores:
        table.add_row(
            store.store_id or "-",
            store.category,
            f"{store.matched}/{store.msl_size}",
            f"{store.achievement:.1f}%",
        )
    console.print(table)
    console.print(
        f"[bold]Overall:[/bold] {result.overall:.1f}%  "
        f"({result.included_count} stores scored, {result.excluded_count} without MSL)"
    )
