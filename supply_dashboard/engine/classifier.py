"""
Stock-health classification from days of stock remaining.

Ladder (evaluated in order — first match wins):
    1. LOW STOCK  : days <  low       (7)
    2. IN STOCK   : days <  adequate  (14)
    3. HIGH STOCK : days >  high      (30)
    4. IN STOCK   : everything else   (14 <= days <= 30)

Days of stock divides by ``max(predicted_demand, 1)``. For products whose
demand rounds to zero this reports the stock count itself as the runway,
which understates how long dead stock actually lasts.
"""

from __future__ import annotations

from dataclasses import dataclass

from supply_dashboard.engine.forecaster import round_half_up
from supply_dashboard.models.insight import StockStatus


@dataclass(frozen=True)
class StockThresholds:
    """Boundaries of the days-of-stock ladder.

    Attributes:
        low:      Below this many days stock is low.
        adequate: Below this many days (and not low) stock is adequate.
        high:     Above this many days stock is excessive.
    """

    low: float = 7
    adequate: float = 14
    high: float = 30


DEFAULT_THRESHOLDS = StockThresholds()


def days_of_stock(stock: int, predicted_demand: int) -> int:
    """Days the current stock lasts at the predicted demand, rounded half-up."""
    return round_half_up(stock / max(predicted_demand, 1))


def classify(
    days: float,
    thresholds: StockThresholds = DEFAULT_THRESHOLDS,
) -> StockStatus:
    """Map days of stock onto a ``StockStatus``.

    Never returns ``OUT_OF_STOCK``; that label only comes from the store.
    """
    if days < thresholds.low:
        return StockStatus.LOW_STOCK
    if days < thresholds.adequate:
        return StockStatus.IN_STOCK
    if days > thresholds.high:
        return StockStatus.HIGH_STOCK
    return StockStatus.IN_STOCK
