"""Write validated rows to the store.

REPLACE_BY_GROUP deletes and re-inserts every group present in the upload;
groups not mentioned are untouched. Each group runs under an in-process
advisory lock, and as one transaction when the store supports atomic
replace. The first failing group raises CommitError; later groups are not
attempted.

UPSERT_BY_KEY updates or inserts each row independently. A failing row is
counted and logged and the batch continues.
"""

import asyncio
import weakref
from collections.abc import Iterable, Mapping
from typing import Any, Optional

from fieldsales.events import DatasetChanged, EventBus, default_bus
from fieldsales.models.outcomes import CommitMode, CommitResult, ParseResult, RowAction, ValidRow
from fieldsales.reconcile.errors import CommitError
from fieldsales.reconcile.schema import ColumnSchema
from fieldsales.store.protocol import AtomicReplaceStore, BulkUpsertStore, DataStore, Row, StoreError
from fieldsales.utils.logger import get_logger

logger = get_logger("fieldsales.reconcile.commit")

# Locks are bound to the loop that created them
_group_locks: "weakref.WeakKeyDictionary[asyncio.AbstractEventLoop, dict[tuple[str, str], asyncio.Lock]]" = (
    weakref.WeakKeyDictionary()
)


def _group_lock(collection: str, group: str) -> asyncio.Lock:
    locks = _group_locks.setdefault(asyncio.get_running_loop(), {})
    return locks.setdefault((collection, group), asyncio.Lock())


async def fetch_existing_keys(
    store: DataStore, schema: ColumnSchema, scope: Optional[Mapping[str, Any]] = None
) -> set[tuple[str, ...]]:
    """Snapshot of keys already stored, used to tag rows INSERT or UPDATE."""
    rows = await store.select(schema.collection, dict(scope) if scope else None)
    keys = {schema.store_key_of(r) for r in rows}
    logger.debug("reconcile.snapshot", collection=schema.collection, keys=len(keys))
    return keys


async def commit(
    store: DataStore,
    schema: ColumnSchema,
    rows: ParseResult | Iterable[ValidRow],
    mode: Optional[CommitMode] = None,
    scope: Optional[Mapping[str, Any]] = None,
    bus: Optional[EventBus] = None,
) -> CommitResult:
    """Commit valid rows. Invalid rows, if passed, are ignored."""
    mode = mode or schema.mode
    scope = dict(scope or {})
    source = rows.valid_rows() if isinstance(rows, ParseResult) else rows
    valid = [r for r in source if isinstance(r, ValidRow)]
    log = logger.bind(collection=schema.collection, mode=mode.value, rows=len(valid))
    log.info("reconcile.commit.start")

    result = CommitResult(mode=mode, collection=schema.collection)
    if mode is CommitMode.REPLACE_BY_GROUP:
        await _replace_by_group(store, schema, valid, scope, result)
    else:
        await _upsert_by_key(store, schema, valid, scope, result)

    log.info(
        "reconcile.commit.complete",
        added=result.added,
        updated=result.updated,
        failed=result.failed,
        replaced=result.replaced,
    )
    if result.written:
        (bus or default_bus).publish(
            DatasetChanged(collection=schema.collection, summary=result.model_dump(include={"added", "updated", "failed", "replaced"}))
        )
    return result


async def _replace_by_group(
    store: DataStore,
    schema: ColumnSchema,
    rows: list[ValidRow],
    scope: dict[str, Any],
    result: CommitResult,
) -> None:
    if not schema.group_field:
        raise ValueError(f"Schema {schema.name!r} has no group field; cannot replace by group")

    groups: dict[str, list[Row]] = {}
    for row in rows:
        group = getattr(row.item, schema.group_field)
        groups.setdefault(group, []).append({**schema.to_store_row(row.item), **scope})

    atomic = isinstance(store, AtomicReplaceStore)
    for group, group_rows in groups.items():
        filters = {schema.group_field: group, **scope}
        async with _group_lock(schema.collection, group):
            try:
                if atomic:
                    await store.replace(schema.collection, filters, group_rows)
                else:
                    await store.delete(schema.collection, filters)
                    await store.insert(schema.collection, group_rows)
            except StoreError as e:
                logger.error(
                    "reconcile.commit.group_failed",
                    collection=schema.collection,
                    group=group,
                    atomic=atomic,
                    completed=list(result.replaced),
                    error=str(e),
                )
                raise CommitError(group, result.replaced, str(e)) from e
        result.replaced[group] = len(group_rows)
        logger.debug("reconcile.commit.group_replaced", group=group, count=len(group_rows))


async def _upsert_by_key(
    store: DataStore,
    schema: ColumnSchema,
    rows: list[ValidRow],
    scope: dict[str, Any],
    result: CommitResult,
) -> None:
    key_fields = list(schema.key_fields) + [f for f in scope if f not in schema.key_fields]
    payload = [{**schema.to_store_row(r.item), **scope} for r in rows]

    if isinstance(store, BulkUpsertStore):
        statuses = await store.bulk_upsert(
            schema.collection, key_fields, payload, insert_only_fields=list(schema.insert_only_fields)
        )
        for row, status in zip(rows, statuses):
            if not status.ok:
                _record_failure(result, row, status.error or "upsert failed")
            elif status.action is RowAction.UPDATE:
                result.updated += 1
            else:
                result.added += 1
        return

    for row, data in zip(rows, payload):
        try:
            if row.action is RowAction.UPDATE:
                key_filter = {f: data.get(f) for f in key_fields}
                patch = {
                    k: v for k, v in data.items() if k not in key_fields and k not in schema.insert_only_fields
                }
                await store.update(schema.collection, key_filter, patch)
                result.updated += 1
            else:
                await store.insert(schema.collection, [data])
                result.added += 1
        except StoreError as e:
            _record_failure(result, row, str(e))


def _record_failure(result: CommitResult, row: ValidRow, message: str) -> None:
    result.failed += 1
    result.errors.append(f"Row {row.line_number}: {message}")
    logger.warning("reconcile.commit.row_failed", line=row.line_number, error=message)
