"""ORM model for the Must Selling List."""

from typing import Optional

from sqlalchemy import Index, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from fieldsales.db.base import Base, TimestampMixin, UuidPkMixin


class MSLItemRow(Base, UuidPkMixin, TimestampMixin):
    """One must-sell SKU for a store category. Replaced per category on upload."""

    __tablename__ = "msl_items"
    __table_args__ = (
        UniqueConstraint("category", "sku_code", name="uq_msl_items_category_sku"),
        Index("idx_msl_items_priority", "category", "priority"),
    )

    category: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    sku_code: Mapped[str] = mapped_column(String(64), nullable=False)
    product_name: Mapped[str] = mapped_column(String(256), nullable=False)
    priority: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
