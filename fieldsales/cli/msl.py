"""MSL catalog commands: list, export, reorder, category stats and upload templates."""

import asyncio
from pathlib import Path
from typing import Optional

import typer
from rich.table import Table

from fieldsales.config import EXPORT_DIR
from fieldsales.reconcile.export import template_csv
from fieldsales.services import msl_catalog
from fieldsales.utils.csv_loader import write_csv_text

from .shared import console, get_store, logger


def list_msl(
    category: Optional[str] = typer.Option(None, "--category", "-c", help="Only this category"),
) -> None:
    """Show MSL items by category, highest priority first."""
    items = asyncio.run(msl_catalog.list_items(get_store(), category))
    if not items:
        console.print("[yellow]No MSL items.[/yellow]")
        return
    table = Table(show_header=True, header_style="bold")
    for column in ("Category", "Priority", "SKU", "Product", "Notes", "Id"):
        table.add_column(column)
    for item in items:
        table.add_row(item.category, str(item.priority), item.sku_code, item.product_name, item.notes or "", item.id or "")
    console.print(table)
    logger.info("msl.list", category=category, items=len(items))


def export_msl(
    output_dir: Path = typer.Option(EXPORT_DIR, "--output", "-o", help="Directory for the export"),
) -> None:
    """Write every MSL item to msl_export_<date>.csv."""
    filename, content = asyncio.run(msl_catalog.export_catalog(get_store()))
    path = write_csv_text(filename, content, output_dir)
    console.print(f"[green]Wrote {path}[/green]")


def reorder_msl(
    first_id: str = typer.Argument(..., help="Item being moved"),
    second_id: str = typer.Argument(..., help="Item it is dropped on"),
) -> None:
    """Swap the priorities of two MSL items of the same category."""
    try:
        first, second = asyncio.run(msl_catalog.swap_priority(get_store(), first_id, second_id))
    except (LookupError, ValueError) as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)
    console.print(
        f"[green]{first.sku_code} -> priority {first.priority}, {second.sku_code} -> priority {second.priority}[/green]"
    )


def categories() -> None:
    """MSL item and store counts per category."""
    stats = asyncio.run(msl_catalog.category_stats(get_store()))
    table = Table(show_header=True, header_style="bold")
    table.add_column("Category")
    table.add_column("MSL items", justify="right")
    table.add_column("Stores", justify="right")
    for stat in stats:
        table.add_row(stat.category, str(stat.item_count), str(stat.store_count))
    console.print(table)


def template(
    kind: str = typer.Argument(..., help="msl, products or stores"),
    output_dir: Path = typer.Option(EXPORT_DIR, "--output", "-o", help="Directory for the template"),
) -> None:
    """Write a sample upload file."""
    try:
        filename, content = template_csv(kind)
    except ValueError as e:
        raise typer.BadParameter(str(e))
    path = write_csv_text(filename, content, output_dir)
    console.print(f"[green]Wrote {path}[/green]")
