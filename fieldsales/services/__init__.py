"""Application services over a DataStore: MSL catalog, catalog sync and visits."""

from fieldsales.services.catalog_sync import upload_products, upload_stores
from fieldsales.services.msl_catalog import (
    CategoryStats,
    category_stats,
    export_catalog,
    focus_category,
    list_items,
    swap_priority,
    upload_msl,
)
from fieldsales.services.visits import line_total, record_visit

__all__ = [
    "CategoryStats",
    "category_stats",
    "export_catalog",
    "focus_category",
    "list_items",
    "swap_priority",
    "upload_msl",
    "upload_products",
    "upload_stores",
    "line_total",
    "record_visit",
]
