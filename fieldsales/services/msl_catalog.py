"""MSL catalog: listing, per-category upload, priority reordering, stats and export."""

from datetime import date
from typing import Optional

from pydantic import BaseModel

from fieldsales.achievement.calculator import sort_by_priority
from fieldsales.events import CategorySelected, DatasetChanged, EventBus, default_bus
from fieldsales.models.outcomes import UploadReport
from fieldsales.models.records import MSLItem
from fieldsales.reconcile.commit import commit
from fieldsales.reconcile.export import export_msl
from fieldsales.reconcile.parser import parse
from fieldsales.reconcile.schemas import MSL_SCHEMA
from fieldsales.store.protocol import MSL_ITEMS, STORES, DataStore
from fieldsales.utils.logger import get_logger, log_row_errors

logger = get_logger("fieldsales.services.msl_catalog")


class CategoryStats(BaseModel):
    category: str
    item_count: int = 0
    store_count: int = 0


async def list_items(store: DataStore, category: Optional[str] = None) -> list[MSLItem]:
    """MSL items sorted by category, then ascending priority."""
    rows = await store.select(MSL_ITEMS, {"category": category} if category else None)
    items = sort_by_priority(MSLItem(**r) for r in rows)
    return sorted(items, key=lambda i: i.category)


async def upload_msl(
    store: DataStore,
    raw_text: str,
    dry_run: bool = False,
    parser_mode: Optional[str] = None,
    bus: Optional[EventBus] = None,
) -> UploadReport:
    """Parse an MSL CSV and, unless dry_run or nothing is valid, replace the categories it names.

    Structural errors propagate before anything is written; CommitError
    propagates when a category fails to be replaced.
    """
    result = parse(raw_text, MSL_SCHEMA, parser_mode=parser_mode)
    log_row_errors(logger, result.errors())
    if dry_run or not result.valid_count:
        logger.info("msl.upload.preview", valid=result.valid_count, invalid=result.invalid_count, dry_run=dry_run)
        return UploadReport(parse=result)
    summary = await commit(store, MSL_SCHEMA, result, bus=bus)
    return UploadReport(parse=result, commit=summary)


async def swap_priority(
    store: DataStore, first_id: str, second_id: str, bus: Optional[EventBus] = None
) -> tuple[MSLItem, MSLItem]:
    """Exchange the priorities of two items of one category (drag-and-drop reorder)."""
    rows = await store.select(MSL_ITEMS, {"id": [first_id, second_id]})
    by_id = {r["id"]: MSLItem(**r) for r in rows}
    missing = [i for i in (first_id, second_id) if i not in by_id]
    if missing:
        raise LookupError(f"MSL item not found: {', '.join(missing)}")

    first, second = by_id[first_id], by_id[second_id]
    if first.category != second.category:
        raise ValueError(
            f"Cannot reorder across categories ({first.category!r} vs {second.category!r})"
        )
    if first_id == second_id:
        return first, second

    await store.update(MSL_ITEMS, {"id": first_id}, {"priority": second.priority})
    await store.update(MSL_ITEMS, {"id": second_id}, {"priority": first.priority})
    logger.info(
        "msl.priority_swapped",
        category=first.category,
        first=first.sku_code,
        second=second.sku_code,
    )
    (bus or default_bus).publish(
        DatasetChanged(collection=MSL_ITEMS, summary={"updated": 2, "category": first.category})
    )
    return (
        first.model_copy(update={"priority": second.priority}),
        second.model_copy(update={"priority": first.priority}),
    )


async def category_stats(store: DataStore) -> list[CategoryStats]:
    """MSL item and store counts for every category seen in either collection."""
    msl_rows = await store.select(MSL_ITEMS)
    store_rows = await store.select(STORES)
    stats: dict[str, CategoryStats] = {}
    for row in msl_rows:
        stats.setdefault(row["category"], CategoryStats(category=row["category"])).item_count += 1
    for row in store_rows:
        stats.setdefault(row["category"], CategoryStats(category=row["category"])).store_count += 1
    return sorted(stats.values(), key=lambda s: s.category)


async def export_catalog(store: DataStore, today: Optional[date] = None) -> tuple[str, str]:
    """Export every MSL item; returns (filename, csv_text)."""
    return export_msl(await list_items(store), today)


def focus_category(category: str, bus: Optional[EventBus] = None) -> int:
    """Ask subscribed views to show one category; returns the number notified."""
    return (bus or default_bus).publish(CategorySelected(category=category))
