"""ORM models for master data: Product, Store."""

from typing import Optional

from sqlalchemy import Boolean, Float, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from fieldsales.config import DEFAULT_STORE_CATEGORY, DEFAULT_STORE_ROUTE
from fieldsales.db.base import Base, TimestampMixin, UuidPkMixin


class ProductRow(Base, UuidPkMixin, TimestampMixin):
    """Catalog product keyed by SKU."""

    __tablename__ = "products"

    sku_code: Mapped[str] = mapped_column(String(64), unique=True, nullable=False, index=True)
    product_name: Mapped[str] = mapped_column(String(256), nullable=False)
    brand: Mapped[Optional[str]] = mapped_column(String(128), nullable=True)
    category: Mapped[str] = mapped_column(String(128), nullable=False)
    unit_price: Mapped[float] = mapped_column(Float, nullable=False)
    discount: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    image_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)


class StoreRow(Base, UuidPkMixin, TimestampMixin):
    """Outlet owned by a salesman; store_code unique per owner."""

    __tablename__ = "stores"
    __table_args__ = (UniqueConstraint("created_by", "store_code", name="uq_stores_owner_code"),)

    store_code: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    store_name: Mapped[str] = mapped_column(String(256), nullable=False)
    category: Mapped[str] = mapped_column(String(128), nullable=False, default=DEFAULT_STORE_CATEGORY, index=True)
    route: Mapped[str] = mapped_column(String(32), nullable=False, default=DEFAULT_STORE_ROUTE)
    address: Mapped[str] = mapped_column(Text, nullable=False, default="")
    gmaps_link: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    phone: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    average_order_value: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    order_frequency: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    key_contact: Mapped[Optional[str]] = mapped_column(String(256), nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_by: Mapped[Optional[str]] = mapped_column(String(64), nullable=True, index=True)
