"""Domain records: MSL items, products, stores, visits and order lines."""

from datetime import date
from typing import Optional

from pydantic import BaseModel, Field


class MSLItem(BaseModel):
    """Must Selling List entry. (category, sku_code) is unique; priority 1 is most important."""

    id: Optional[str] = None
    category: str
    sku_code: str
    product_name: str
    priority: int = Field(ge=1)
    notes: Optional[str] = None


class Product(BaseModel):
    """Catalog product keyed by sku_code."""

    id: Optional[str] = None
    sku_code: str
    product_name: str
    brand: Optional[str] = None
    category: str
    unit_price: float = Field(ge=0)
    discount: float = Field(default=0, ge=0, le=100)
    is_active: bool = True


class Store(BaseModel):
    """Outlet visited by a salesman. store_code is unique per owning salesman."""

    id: Optional[str] = None
    store_code: str
    store_name: str
    category: str
    route: str = "A"
    address: str = ""
    gmaps_link: Optional[str] = None
    phone: Optional[str] = None
    average_order_value: float = Field(default=0, ge=0)
    order_frequency: Optional[str] = None
    key_contact: Optional[str] = None
    notes: Optional[str] = None
    created_by: Optional[str] = None


class VisitOrder(BaseModel):
    """One order line of a visit. line_total = quantity x unit_price x (1 - discount/100)."""

    id: Optional[str] = None
    visit_id: Optional[str] = None
    product_id: str
    quantity: int = Field(gt=0)
    unit_price: float = Field(ge=0)
    discount_percentage: float = Field(default=0, ge=0, le=100)
    line_total: float = 0


class Visit(BaseModel):
    """A store visit; has_order marks an effective call."""

    id: Optional[str] = None
    salesman_id: str
    store_id: str
    visit_date: date
    has_order: bool = False
    notes: Optional[str] = None
