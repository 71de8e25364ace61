"""Upload schemas for MSL items, products and stores, with their domain rules."""

import math
import re
from typing import Optional

from fieldsales.config import DEFAULT_STORE_ROUTE
from fieldsales.models.outcomes import CommitMode, Record
from fieldsales.models.records import MSLItem, Product, Store
from fieldsales.reconcile.errors import RowRejected
from fieldsales.reconcile.schema import ColumnSchema
from fieldsales.store.protocol import MSL_ITEMS, PRODUCTS, STORES

_INT_RE = re.compile(r"^[+-]?\d+$")

# msl_items.priority is a 32-bit INTEGER column
MAX_PRIORITY = 2**31 - 1

INVALID_PRIORITY = "Invalid priority (must be positive integer)"
INVALID_PRICE = "Invalid price"
# A non-numeric DISCOUNT is rejected rather than read as 0; only a blank cell means 0
INVALID_DISCOUNT = "Invalid discount (must be 0-100)"
INVALID_AVG_ORDER = "Invalid average order value"


def parse_int(value: str) -> Optional[int]:
    value = (value or "").strip()
    if not _INT_RE.match(value):
        return None
    return int(value)


def parse_number(value: str) -> Optional[float]:
    """Finite float or None. Underscore digit separators are not accepted."""
    value = (value or "").strip()
    if not value or "_" in value:
        return None
    try:
        number = float(value)
    except ValueError:
        return None
    return number if math.isfinite(number) else None


# ---------- MSL ----------

def validate_msl(record: Record) -> MSLItem:
    priority = parse_int(record.get("PRIORITY"))
    if priority is None or not 1 <= priority <= MAX_PRIORITY:
        raise RowRejected(INVALID_PRIORITY)
    return MSLItem(
        category=record.get("CATEGORY"),
        sku_code=record.get("SKU_CODE"),
        product_name=record.get("PRODUCT_NAME"),
        priority=priority,
        notes=record.get("NOTES") or None,
    )


MSL_SCHEMA = ColumnSchema(
    name="msl",
    collection=MSL_ITEMS,
    mode=CommitMode.REPLACE_BY_GROUP,
    required_columns=("CATEGORY", "SKU_CODE", "PRODUCT_NAME", "PRIORITY"),
    optional_columns=("NOTES",),
    row_validator=validate_msl,
    dedup_columns=("CATEGORY", "SKU_CODE"),
    key_fields=("category", "sku_code"),
    missing_reason="Missing required fields (CATEGORY, SKU_CODE, PRODUCT_NAME, PRIORITY)",
    duplicate_reason="Duplicate SKU in same category",
    to_store_row=lambda item: item.model_dump(exclude={"id"}),
    group_field="category",
)


# ---------- Products ----------

def validate_product(record: Record) -> Product:
    price = parse_number(record.get("PRICE"))
    if price is None or price <= 0:
        raise RowRejected(INVALID_PRICE)

    discount_raw = record.get("DISCOUNT")
    discount = parse_number(discount_raw) if discount_raw else 0.0
    if discount is None or not 0 <= discount <= 100:
        raise RowRejected(INVALID_DISCOUNT)

    return Product(
        sku_code=record.get("SKU_CODE"),
        product_name=record.get("PRODUCT_NAME"),
        brand=record.get("BRAND"),
        category=record.get("CATEGORY"),
        unit_price=price,
        discount=discount,
    )


PRODUCT_SCHEMA = ColumnSchema(
    name="products",
    collection=PRODUCTS,
    mode=CommitMode.UPSERT_BY_KEY,
    required_columns=("SKU_CODE", "PRODUCT_NAME", "BRAND", "CATEGORY", "PRICE"),
    optional_columns=("DISCOUNT",),
    row_validator=validate_product,
    dedup_columns=("SKU_CODE",),
    key_fields=("sku_code",),
    missing_reason="Missing required fields",
    duplicate_reason="Duplicate SKU in file",
    to_store_row=lambda item: item.model_dump(exclude={"id"}),
    insert_only_fields=("is_active",),
)


# ---------- Stores ----------

def validate_store(record: Record) -> Store:
    avg_raw = record.get("AVG_ORDER_VALUE")
    avg_order = parse_number(avg_raw) if avg_raw else 0.0
    if avg_order is None or avg_order < 0:
        raise RowRejected(INVALID_AVG_ORDER)

    return Store(
        store_code=record.get("KODE_TOKO"),
        store_name=record.get("NAMA_TOKO"),
        category=record.get("KATEGORI"),
        address=record.get("ALAMAT"),
        gmaps_link=record.get("GOOGLE_MAPS") or None,
        route=record.get("ROUTE") or DEFAULT_STORE_ROUTE,
        phone=record.get("TELEPON") or None,
        average_order_value=avg_order,
        order_frequency=record.get("FREKUENSI_ORDER") or None,
        key_contact=record.get("KONTAK_UTAMA") or None,
        notes=record.get("CATATAN") or None,
    )


STORE_SCHEMA = ColumnSchema(
    name="stores",
    collection=STORES,
    mode=CommitMode.UPSERT_BY_KEY,
    required_columns=("KODE_TOKO", "NAMA_TOKO", "KATEGORI"),
    optional_columns=(
        "ALAMAT",
        "GOOGLE_MAPS",
        "ROUTE",
        "TELEPON",
        "AVG_ORDER_VALUE",
        "FREKUENSI_ORDER",
        "KONTAK_UTAMA",
        "CATATAN",
    ),
    row_validator=validate_store,
    dedup_columns=("KODE_TOKO",),
    key_fields=("store_code",),
    missing_reason="Missing required fields (KODE_TOKO, NAMA_TOKO, KATEGORI)",
    duplicate_reason="Duplicate store code in file",
    # created_by comes from the commit scope
    to_store_row=lambda item: item.model_dump(exclude={"id", "created_by"}),
)


SCHEMAS: dict[str, ColumnSchema] = {
    MSL_SCHEMA.name: MSL_SCHEMA,
    PRODUCT_SCHEMA.name: PRODUCT_SCHEMA,
    STORE_SCHEMA.name: STORE_SCHEMA,
}


def get_schema(name: str) -> ColumnSchema:
    try:
        return SCHEMAS[name]
    except KeyError:
        raise ValueError(f"Unknown upload schema {name!r}. Expected one of: {', '.join(SCHEMAS)}") from None
