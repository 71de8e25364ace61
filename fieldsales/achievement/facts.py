"""Assemble per-store bought-SKU facts for a period from visits, order lines, products and stores."""

from datetime import date
from typing import Any, Optional

from fieldsales.models.achievement import StoreVisitFacts
from fieldsales.store.filters import Range
from fieldsales.store.protocol import PRODUCTS, STORES, VISIT_ORDERS, VISITS, DataStore, Row


async def fetch_visits(
    store: DataStore, start: date, end: date, salesman_id: Optional[str] = None
) -> tuple[list[Row], list[Row]]:
    """Visits dated within [start, end] (optionally one salesman) and the order lines of those with has_order."""
    filters: dict[str, Any] = {"visit_date": Range(low=start, high=end)}
    if salesman_id:
        filters["salesman_id"] = salesman_id
    visits = await store.select(VISITS, filters)
    if not visits:
        return [], []
    order_visit_ids = [v["id"] for v in visits if v.get("has_order")]
    if not order_visit_ids:
        return visits, []
    orders = await store.select(VISIT_ORDERS, {"visit_id": order_visit_ids})
    return visits, orders


async def collect_store_facts(
    store: DataStore,
    start: date,
    end: date,
    salesman_id: Optional[str] = None,
    include_unvisited: bool = False,
    owner_id: Optional[str] = None,
) -> list[StoreVisitFacts]:
    """One StoreVisitFacts per store, SKUs merged across all of its visits in the period.

    By default only visited stores appear (a visit without an order gives an
    empty set). include_unvisited lists every store in scope, owner_id limiting
    the scope to stores created by that user.
    """
    visits, orders = await fetch_visits(store, start, end, salesman_id)

    product_ids = list({o["product_id"] for o in orders})
    products = await store.select(PRODUCTS, {"id": product_ids}) if product_ids else []
    sku_by_product = {p["id"]: p["sku_code"] for p in products}

    store_of_visit = {v["id"]: v["store_id"] for v in visits}
    bought: dict[str, set[str]] = {v["store_id"]: set() for v in visits}
    for order in orders:
        sku = sku_by_product.get(order["product_id"])
        if sku:
            bought[store_of_visit[order["visit_id"]]].add(sku)

    store_filters: dict[str, Any] = {}
    if owner_id:
        store_filters["created_by"] = owner_id
    if not include_unvisited:
        if not bought:
            return []
        store_filters["id"] = list(bought)
    stores = await store.select(STORES, store_filters or None)

    return [
        StoreVisitFacts(
            store_id=s["id"],
            store_category=s["category"],
            bought_skus=frozenset(bought.get(s["id"], ())),
        )
        for s in stores
    ]
