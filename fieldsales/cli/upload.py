"""Upload commands: MSL (replace per category), products and stores (upsert by key)."""

import asyncio
from pathlib import Path
from typing import Optional

import typer

from fieldsales.reconcile.errors import CommitError, ReconcileError
from fieldsales.services import catalog_sync, msl_catalog
from fieldsales.utils.csv_loader import read_csv_text
from fieldsales.utils.logger import log_context

from .shared import console, get_store, logger, print_upload_report

DRY_RUN = typer.Option(False, "--dry-run", "-n", help="Preview only; write nothing")
PARSER = typer.Option(None, "--parser", help="CSV parser: csv (quoted commas allowed) or naive")


def _read(path: Path) -> str:
    try:
        return read_csv_text(path)
    except FileNotFoundError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)


def _run_upload(command: str, path: Path, coro_factory) -> None:
    log = logger.bind(command=command, path=str(path))
    try:
        with log_context(command=command, upload_path=str(path)):
            report = asyncio.run(coro_factory(_read(path)))
    except ReconcileError as e:
        console.print(f"[red]{e}[/red]")
        log.warning("upload.rejected", error=str(e))
        raise typer.Exit(1)
    except ValueError as e:
        raise typer.BadParameter(str(e))
    except CommitError as e:
        for group, count in e.completed.items():
            console.print(f"  Replaced [bold]{group}[/bold]: {count} items")
        console.print(f"[red]{e}[/red]")
        log.error("upload.commit_failed", group=e.group, completed=list(e.completed))
        raise typer.Exit(1)
    print_upload_report(report)
    log.info(
        "upload.complete",
        valid=report.parse.valid_count,
        invalid=report.parse.invalid_count,
        committed=report.committed,
    )
    if report.commit is not None and report.commit.failed:
        raise typer.Exit(1)


def upload_msl(
    path: Path = typer.Argument(..., help="MSL CSV: CATEGORY,SKU_CODE,PRODUCT_NAME,PRIORITY[,NOTES]"),
    dry_run: bool = DRY_RUN,
    parser: Optional[str] = PARSER,
) -> None:
    """Replace the MSL of every category named in the file."""
    store = get_store()
    _run_upload(
        "upload-msl",
        path,
        lambda text: msl_catalog.upload_msl(store, text, dry_run=dry_run, parser_mode=parser),
    )


def upload_products(
    path: Path = typer.Argument(..., help="Product CSV: SKU_CODE,PRODUCT_NAME,BRAND,CATEGORY,PRICE[,DISCOUNT]"),
    dry_run: bool = DRY_RUN,
    parser: Optional[str] = PARSER,
) -> None:
    """Insert new products and update existing ones by SKU."""
    store = get_store()
    _run_upload(
        "upload-products",
        path,
        lambda text: catalog_sync.upload_products(store, text, dry_run=dry_run, parser_mode=parser),
    )


def upload_stores(
    path: Path = typer.Argument(..., help="Store CSV: KODE_TOKO,NAMA_TOKO,KATEGORI[,...]"),
    owner: Optional[str] = typer.Option(None, "--owner", "-o", help="Salesman id owning the stores"),
    dry_run: bool = DRY_RUN,
    parser: Optional[str] = PARSER,
) -> None:
    """Insert new stores and update existing ones by store code."""
    store = get_store()
    _run_upload(
        "upload-stores",
        path,
        lambda text: catalog_sync.upload_stores(
            store, text, owner_id=owner, dry_run=dry_run, parser_mode=parser
        ),
    )
