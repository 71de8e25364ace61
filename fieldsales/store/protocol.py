"""Data store protocol: the four verbs the engine consumes, plus optional transactional capabilities."""

from collections.abc import Mapping
from typing import Any, Optional, Protocol, runtime_checkable

from pydantic import BaseModel

from fieldsales.models.outcomes import RowAction

Row = dict[str, Any]
Filters = Mapping[str, Any]

# Collection names shared by every implementation
MSL_ITEMS = "msl_items"
PRODUCTS = "products"
STORES = "stores"
VISITS = "visits"
VISIT_ORDERS = "visit_orders"


class StoreError(Exception):
    """A store operation failed (network, constraint, unknown collection)."""

    def __init__(self, message: str, collection: str = "", operation: str = ""):
        super().__init__(message)
        self.collection = collection
        self.operation = operation


class UpsertStatus(BaseModel):
    """Per-row status returned by bulk_upsert, in input order."""

    ok: bool
    action: Optional[RowAction] = None
    error: Optional[str] = None


@runtime_checkable
class DataStore(Protocol):
    """Generic relational store. Every call is independent and may fail with StoreError."""

    async def select(self, collection: str, filters: Optional[Filters] = None) -> list[Row]:
        """Return rows matching filters (all rows when None)."""
        ...

    async def insert(self, collection: str, rows: list[Row]) -> list[Row]:
        """Insert rows; returns them as stored (ids assigned)."""
        ...

    async def update(self, collection: str, filters: Filters, patch: Row) -> int:
        """Apply patch to matching rows; returns the number updated."""
        ...

    async def delete(self, collection: str, filters: Filters) -> int:
        """Delete matching rows; returns the number deleted."""
        ...


@runtime_checkable
class AtomicReplaceStore(Protocol):
    """Store able to delete matching rows and insert replacements in one transaction."""

    async def replace(self, collection: str, filters: Filters, rows: list[Row]) -> int:
        ...


@runtime_checkable
class BulkUpsertStore(Protocol):
    """Store able to upsert many rows in one request, reporting per-row status."""

    async def bulk_upsert(
        self,
        collection: str,
        key_fields: list[str],
        rows: list[Row],
        insert_only_fields: Optional[list[str]] = None,
    ) -> list[UpsertStatus]:
        ...
