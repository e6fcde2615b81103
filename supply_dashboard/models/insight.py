"""
Engine output models.

``Insight`` is the per-product result of the forecasting & recommendation
engine; ``Summary`` folds a sequence of insights into fleet-wide counts.
``StockView`` is the flattened per-product view used by the stock table.

``InsightReport`` and ``StockReport`` wrap those outputs with the
``generated_at`` timestamp that the service stamps at call time. The engine
itself never reads the clock.

All models are frozen: they are created fresh on every invocation and
discarded after the caller consumes them.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from enum import StrEnum
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator, model_validator


class StockStatus(StrEnum):
    """Stock-health classification of a product."""

    LOW_STOCK = "Low Stock"
    IN_STOCK = "In Stock"
    HIGH_STOCK = "High Stock"
    OUT_OF_STOCK = "Out of Stock"
    """Only ever supplied externally through ``Product.status``."""


class Severity(StrEnum):
    """Tag attached to a recommendation; renderers map it to a colour."""

    URGENT = "urgent"
    WARNING = "warning"
    INFO = "info"
    SUCCESS = "success"


class Insight(BaseModel):
    """Forecast, confidence and guidance for one product.

    Attributes:
        product_id: ``Product.id`` this insight describes.
        product_name: ``Product.name`` at evaluation time.
        current_stock: ``Product.stock`` at evaluation time.
        predicted_demand: Rounded moving-average daily demand.
        recommendation: Human-readable guidance text.
        recommendation_type: Severity tag of the guidance.
        confidence: Sample-size confidence in [0, 1], 2 decimals.
        days_of_stock: ``round(current_stock / max(predicted_demand, 1))``.
        status: Underlying stock status used for summary counts.
    """

    model_config = ConfigDict(frozen=True)

    product_id: str
    product_name: str
    current_stock: int
    predicted_demand: int
    recommendation: str
    recommendation_type: Severity
    confidence: float
    days_of_stock: int
    status: StockStatus

    @field_validator("confidence")
    @classmethod
    def validate_confidence(cls, v: float) -> float:
        if not 0.0 <= v <= 1.0:
            raise ValueError(f"confidence must be in [0.0, 1.0], got {v}.")
        return v

    @model_validator(mode="after")
    def validate_non_negative(self) -> "Insight":
        if self.current_stock < 0 or self.predicted_demand < 0 or self.days_of_stock < 0:
            raise ValueError(
                "current_stock, predicted_demand and days_of_stock must be non-negative."
            )
        return self


class Summary(BaseModel):
    """Fleet-wide counts over one set of insights.

    ``avg_confidence`` is 2-decimal text, or ``None`` when there were no
    products to average over.
    """

    model_config = ConfigDict(frozen=True)

    total_products: int
    low_stock_count: int
    urgent_actions: int
    avg_confidence: Optional[str] = None


class StockView(BaseModel):
    """Flattened per-product row merging an insight with its stock status."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    stock: int
    predicted_demand: int
    days_of_stock: int
    status: StockStatus
    confidence: float


class InsightReport(BaseModel):
    """``{insights, summary, generated_at}`` as served to the dashboard."""

    model_config = ConfigDict(frozen=True)

    insights: list[Insight]
    summary: Summary
    generated_at: datetime


class StockReport(BaseModel):
    """``{products, generated_at}`` — the flattened stock-level view."""

    model_config = ConfigDict(frozen=True)

    products: list[StockView]
    generated_at: datetime


class DailySales(BaseModel):
    """Units and revenue summed over one calendar day."""

    model_config = ConfigDict(frozen=True)

    day: date
    sales: int
    revenue: Decimal
