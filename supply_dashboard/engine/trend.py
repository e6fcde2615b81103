"""
Recent sales trend for the dashboard chart.

Sales are bucketed by UTC calendar day, summing units and revenue. Only
days that actually had sales produce a bucket, so "last 14 days" means the
14 most recent trading days, not a padded calendar window.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Sequence
from datetime import date
from decimal import Decimal

from supply_dashboard.models.insight import DailySales
from supply_dashboard.models.product import Sale
from supply_dashboard.utils.time_utils import utc_day

DEFAULT_TREND_DAYS = 14


def daily_sales_trend(
    sales: Sequence[Sale],
    days: int = DEFAULT_TREND_DAYS,
) -> list[DailySales]:
    """Per-day unit and revenue totals, oldest first, last ``days`` buckets.

    Args:
        sales: Sales for any number of products, in any order.
        days:  Maximum number of day buckets to keep (most recent).

    Returns:
        List of ``DailySales`` sorted by day ascending.
    """
    if days < 1:
        return []

    units: dict[date, int] = defaultdict(int)
    revenue: dict[date, Decimal] = defaultdict(Decimal)
    for sale in sales:
        day = utc_day(sale.date)
        units[day] += sale.quantity
        revenue[day] += sale.revenue

    return [
        DailySales(day=day, sales=units[day], revenue=revenue[day])
        for day in sorted(units)[-days:]
    ]
