"""In-memory data stores: a plain four-verb store and a transactional variant.

Used by tests and dry runs. Failure injection (fail_when) lets callers reproduce
the partial-failure behavior of a remote backend.
"""

import copy
import uuid
from collections.abc import Callable
from typing import Any, Optional

from fieldsales.models.outcomes import RowAction
from fieldsales.store.filters import matches
from fieldsales.store.protocol import (
    MSL_ITEMS,
    PRODUCTS,
    STORES,
    Filters,
    Row,
    StoreError,
    UpsertStatus,
)
from fieldsales.utils.logger import get_logger

logger = get_logger("fieldsales.store.memory")

# Mirrors the unique constraints of the SQL tables
UNIQUE_KEYS: dict[str, list[tuple[str, ...]]] = {
    MSL_ITEMS: [("category", "sku_code")],
    PRODUCTS: [("sku_code",)],
    STORES: [("created_by", "store_code")],
}


class MemoryDataStore:
    """Dict-of-lists store implementing select/insert/update/delete."""

    def __init__(
        self,
        seed: Optional[dict[str, list[Row]]] = None,
        unique_keys: Optional[dict[str, list[tuple[str, ...]]]] = None,
    ):
        self._tables: dict[str, list[Row]] = {}
        self._unique_keys = UNIQUE_KEYS if unique_keys is None else unique_keys
        self._failures: list[tuple[str, str, Optional[Callable[[Any], bool]]]] = []
        self.calls: list[tuple[str, str]] = []
        for collection, rows in (seed or {}).items():
            self._insert(collection, rows)
        self.calls.clear()

    # ---------- test helpers ----------

    def fail_when(
        self, verb: str, collection: str, predicate: Optional[Callable[[Any], bool]] = None
    ) -> None:
        """Make verb on collection raise StoreError. predicate gets the row (insert) or filters (others)."""
        self._failures.append((verb, collection, predicate))

    def clear_failures(self) -> None:
        self._failures.clear()

    def dump(self, collection: str) -> list[Row]:
        return copy.deepcopy(self._tables.get(collection, []))

    # ---------- internals ----------

    def _check_failure(self, verb: str, collection: str, subject: Any) -> None:
        for f_verb, f_collection, predicate in self._failures:
            if f_verb == verb and f_collection == collection and (predicate is None or predicate(subject)):
                logger.debug("memory_store.injected_failure", verb=verb, collection=collection)
                raise StoreError(f"{verb} failed on {collection}", collection=collection, operation=verb)

    def _check_unique(self, collection: str, existing: list[Row], new_rows: list[Row]) -> None:
        for key in self._unique_keys.get(collection, []):
            seen = {tuple(r.get(f) for f in key) for r in existing}
            for row in new_rows:
                value = tuple(row.get(f) for f in key)
                if value in seen:
                    raise StoreError(
                        f"duplicate key value violates unique constraint {collection}{key}: {value}",
                        collection=collection,
                        operation="insert",
                    )
                seen.add(value)

    def _select(self, collection: str, filters: Optional[Filters]) -> list[Row]:
        self._check_failure("select", collection, filters)
        return [copy.deepcopy(r) for r in self._tables.get(collection, []) if matches(r, filters)]

    def _insert(self, collection: str, rows: list[Row]) -> list[Row]:
        new_rows = []
        for row in rows:
            self._check_failure("insert", collection, row)
            stored = copy.deepcopy(row)
            stored["id"] = stored.get("id") or uuid.uuid4().hex
            new_rows.append(stored)
        table = self._tables.setdefault(collection, [])
        self._check_unique(collection, table, new_rows)
        table.extend(new_rows)
        return [copy.deepcopy(r) for r in new_rows]

    def _update(self, collection: str, filters: Filters, patch: Row) -> int:
        self._check_failure("update", collection, filters)
        count = 0
        for row in self._tables.get(collection, []):
            if matches(row, filters):
                row.update(copy.deepcopy(patch))
                count += 1
        return count

    def _delete(self, collection: str, filters: Filters) -> int:
        self._check_failure("delete", collection, filters)
        table = self._tables.get(collection, [])
        kept = [r for r in table if not matches(r, filters)]
        self._tables[collection] = kept
        return len(table) - len(kept)

    # ---------- DataStore ----------

    async def select(self, collection: str, filters: Optional[Filters] = None) -> list[Row]:
        self.calls.append(("select", collection))
        return self._select(collection, filters)

    async def insert(self, collection: str, rows: list[Row]) -> list[Row]:
        self.calls.append(("insert", collection))
        return self._insert(collection, rows)

    async def update(self, collection: str, filters: Filters, patch: Row) -> int:
        self.calls.append(("update", collection))
        return self._update(collection, filters, patch)

    async def delete(self, collection: str, filters: Filters) -> int:
        self.calls.append(("delete", collection))
        return self._delete(collection, filters)


class TransactionalMemoryStore(MemoryDataStore):
    """Memory store that also supports atomic replace and bulk upsert."""

    async def replace(self, collection: str, filters: Filters, rows: list[Row]) -> int:
        self.calls.append(("replace", collection))
        snapshot = copy.deepcopy(self._tables.get(collection, []))
        try:
            self._delete(collection, filters)
            inserted = self._insert(collection, rows)
        except StoreError:
            self._tables[collection] = snapshot
            logger.warning("memory_store.replace_rolled_back", collection=collection)
            raise
        return len(inserted)

    async def bulk_upsert(
        self,
        collection: str,
        key_fields: list[str],
        rows: list[Row],
        insert_only_fields: Optional[list[str]] = None,
    ) -> list[UpsertStatus]:
        self.calls.append(("bulk_upsert", collection))
        skip = set(key_fields) | set(insert_only_fields or [])
        statuses: list[UpsertStatus] = []
        for row in rows:
            key_filter = {f: row.get(f) for f in key_fields}
            try:
                if self._select(collection, key_filter):
                    patch = {k: v for k, v in row.items() if k not in skip}
                    self._update(collection, key_filter, patch)
                    statuses.append(UpsertStatus(ok=True, action=RowAction.UPDATE))
                else:
                    self._insert(collection, [row])
                    statuses.append(UpsertStatus(ok=True, action=RowAction.INSERT))
            except StoreError as e:
                statuses.append(UpsertStatus(ok=False, error=str(e)))
        return statuses
