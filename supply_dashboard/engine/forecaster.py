"""
Demand forecast: bounded moving average over the most recent sales.

    forecast = mean(quantity of the last ``window`` sales by date)

When fewer than ``window`` sales exist the mean is taken over the sales
that are available, not padded with zeros, so a new product's first few
days are not dragged towards zero. No sales at all gives ``0.0``.

Input order does not matter: sales are re-sorted by ``date`` here, so the
caller may pass them newest-first (as the store returns them) or oldest-first.
"""

from __future__ import annotations

from collections.abc import Sequence
from decimal import ROUND_HALF_UP, Decimal

from supply_dashboard.models.product import Sale

DEFAULT_WINDOW = 7


def forecast(sales: Sequence[Sale], window: int = DEFAULT_WINDOW) -> float:
    """Predicted per-period demand for one product.

    Args:
        sales:  The product's sale history, in any order.
        window: Number of most recent sales to average.

    Returns:
        Mean quantity of the selected sales, or ``0.0`` for no sales.

    Raises:
        ValueError: If ``window`` is less than 1.
    """
    if window < 1:
        raise ValueError(f"window must be >= 1, got {window}.")
    if not sales:
        return 0.0

    recent = sorted(sales, key=lambda s: s.date)[-window:]
    return sum(s.quantity for s in recent) / len(recent)


def round_half_up(value: float) -> int:
    """Round a non-negative value to the nearest integer, halves going up.

    Python's ``round()`` rounds halves to even (``round(2.5) == 2``); demand
    and days-of-stock figures round 2.5 to 3. The float is converted exactly,
    so a value just below a half still rounds down.
    """
    return int(Decimal(value).quantize(Decimal(1), rounding=ROUND_HALF_UP))
