"""Data store: protocol, filters, in-memory and SQL implementations."""

from fieldsales.store.filters import Range, matches
from fieldsales.store.memory import MemoryDataStore, TransactionalMemoryStore
from fieldsales.store.protocol import (
    MSL_ITEMS,
    PRODUCTS,
    STORES,
    VISIT_ORDERS,
    VISITS,
    AtomicReplaceStore,
    BulkUpsertStore,
    DataStore,
    StoreError,
    UpsertStatus,
)
from fieldsales.store.sql import SqlDataStore

__all__ = [
    "DataStore",
    "AtomicReplaceStore",
    "BulkUpsertStore",
    "StoreError",
    "UpsertStatus",
    "Range",
    "matches",
    "MemoryDataStore",
    "TransactionalMemoryStore",
    "SqlDataStore",
    "MSL_ITEMS",
    "PRODUCTS",
    "STORES",
    "VISITS",
    "VISIT_ORDERS",
]
