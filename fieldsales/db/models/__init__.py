"""Re-export all ORM models so Base.metadata has all tables."""

from fieldsales.db.models.master import ProductRow, StoreRow
from fieldsales.db.models.msl import MSLItemRow
from fieldsales.db.models.visit import VisitOrderRow, VisitRow

__all__ = [
    "MSLItemRow",
    "ProductRow",
    "StoreRow",
    "VisitRow",
    "VisitOrderRow",
]
