"""
Product and sale input records.

Both records are owned by the external store; the engine only reads them.
They are frozen so nothing downstream of the repositories can mutate a
product's stock level or a sale's quantity by accident.

``Product.status`` is an externally maintained label (e.g. ``"Out of Stock"``
set by the warehouse system). The engine never derives it; it only consults
it when counting low-stock products in the summary.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator

from supply_dashboard.utils.time_utils import ensure_utc


class Product(BaseModel):
    """A product tracked by the dashboard.

    Attributes:
        id: Opaque identifier assigned by the store.
        name: Display name.
        stock: Units currently on hand.
        status: Externally supplied stock label, or ``None``.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    stock: int
    status: Optional[str] = None

    @field_validator("id", "name")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("must not be empty.")
        return v.strip()

    @field_validator("stock")
    @classmethod
    def validate_stock(cls, v: int) -> int:
        if v < 0:
            raise ValueError(f"stock must be non-negative, got {v}.")
        return v


class Sale(BaseModel):
    """A single sale of one product.

    Attributes:
        id: Opaque identifier assigned by the store.
        product_id: FK to ``Product.id``.
        quantity: Units sold.
        date: When the sale happened; normalised to aware UTC.
        revenue: Money taken for the sale.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    product_id: str
    quantity: int
    date: datetime
    revenue: Decimal = Decimal("0")

    @field_validator("quantity")
    @classmethod
    def validate_quantity(cls, v: int) -> int:
        if v < 0:
            raise ValueError(f"quantity must be non-negative, got {v}.")
        return v

    @field_validator("revenue")
    @classmethod
    def validate_revenue(cls, v: Decimal) -> Decimal:
        if v < 0:
            raise ValueError(f"revenue must be non-negative, got {v}.")
        return v

    @field_validator("date")
    @classmethod
    def normalise_date(cls, v: datetime) -> datetime:
        return ensure_utc(v)
