"""Record store visits with their order lines."""

from collections.abc import Iterable
from datetime import date
from typing import Optional

from fieldsales.events import DatasetChanged, EventBus, default_bus
from fieldsales.models.records import Visit, VisitOrder
from fieldsales.store.protocol import VISIT_ORDERS, VISITS, DataStore
from fieldsales.utils.logger import get_logger

logger = get_logger("fieldsales.services.visits")


def line_total(quantity: float, unit_price: float, discount: float = 0) -> float:
    """quantity x unit_price x (1 - discount/100)."""
    return quantity * unit_price * (1 - discount / 100)


async def record_visit(
    store: DataStore,
    salesman_id: str,
    store_id: str,
    visit_date: date,
    lines: Optional[Iterable[VisitOrder]] = None,
    notes: Optional[str] = None,
    bus: Optional[EventBus] = None,
) -> tuple[Visit, list[VisitOrder]]:
    """Insert one visit and its order lines. has_order is set when there is at least one line."""
    orders = [
        line.model_copy(update={"line_total": line_total(line.quantity, line.unit_price, line.discount_percentage)})
        for line in (lines or [])
    ]
    visit = Visit(
        salesman_id=salesman_id,
        store_id=store_id,
        visit_date=visit_date,
        has_order=bool(orders),
        notes=notes,
    )
    [stored_visit] = await store.insert(VISITS, [visit.model_dump(exclude={"id"})])
    visit = visit.model_copy(update={"id": stored_visit["id"]})

    stored_orders: list[VisitOrder] = []
    if orders:
        rows = await store.insert(
            VISIT_ORDERS, [o.model_dump(exclude={"id"}) | {"visit_id": visit.id} for o in orders]
        )
        stored_orders = [
            o.model_copy(update={"id": r["id"], "visit_id": visit.id}) for o, r in zip(orders, rows)
        ]

    logger.info(
        "visit.recorded",
        visit_id=visit.id,
        store_id=store_id,
        salesman_id=salesman_id,
        lines=len(stored_orders),
        total=sum(o.line_total for o in stored_orders),
    )
    (bus or default_bus).publish(
        DatasetChanged(collection=VISITS, summary={"added": 1, "order_lines": len(stored_orders)})
    )
    return visit, stored_orders
