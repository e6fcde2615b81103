"""
Recommendation text and severity for one product.

Applies the same ladder as :mod:`supply_dashboard.engine.classifier` and
splits its IN STOCK band in two:

    days <  7        → urgent   "Increase production of ..."
    7  <= days < 14  → warning  "Monitor ... closely."
    days > 30        → info     "Consider reducing production of ..."
    14 <= days <= 30 → success  "... stock levels are optimal."
"""

from __future__ import annotations

from dataclasses import dataclass

from supply_dashboard.engine.classifier import (
    DEFAULT_THRESHOLDS,
    StockThresholds,
    classify,
    days_of_stock,
)
from supply_dashboard.models.insight import Severity, StockStatus
from supply_dashboard.models.product import Product

_TEMPLATES: dict[Severity, str] = {
    Severity.URGENT: (
        "Increase production of {name}. Current stock will last only {days} days."
    ),
    Severity.WARNING: (
        "Monitor {name} closely. Stock levels adequate for {days} days."
    ),
    Severity.INFO: (
        "Consider reducing production of {name}. High inventory levels detected."
    ),
    Severity.SUCCESS: (
        "{name} stock levels are optimal. Continue current production schedule."
    ),
}


@dataclass(frozen=True)
class Recommendation:
    """Guidance text plus the severity tag a renderer colours it by."""

    text: str
    type: Severity


def severity_for(
    days: float,
    thresholds: StockThresholds = DEFAULT_THRESHOLDS,
) -> Severity:
    """Severity tag for a days-of-stock figure."""
    status = classify(days, thresholds)
    if status is StockStatus.LOW_STOCK:
        return Severity.URGENT
    if status is StockStatus.HIGH_STOCK:
        return Severity.INFO
    if days < thresholds.adequate:
        return Severity.WARNING
    return Severity.SUCCESS


def recommend(
    product: Product,
    predicted_demand: int,
    thresholds: StockThresholds = DEFAULT_THRESHOLDS,
) -> Recommendation:
    """Build the recommendation for ``product`` at ``predicted_demand`` units/day.

    Args:
        product:          The product being evaluated.
        predicted_demand: Rounded daily demand from the forecaster.
        thresholds:       Ladder boundaries.

    Returns:
        ``Recommendation`` with the filled-in template and its severity.
    """
    days = days_of_stock(product.stock, predicted_demand)
    severity = severity_for(days, thresholds)
    text = _TEMPLATES[severity].format(name=product.name, days=days)
    return Recommendation(text=text, type=severity)
