"""
Insight aggregation: runs the forecaster, confidence estimator and
recommender for every product and folds the results into a ``Summary``.

Usage flow
----------
1. partition_sales(sales)
   -> dict[product_id, list[Sale]]   (one pass over all sales)

2. InsightAggregator.build_insight(product, product_sales)
   -> Insight                        (per product, in input order)

3. summarize(insights)
   -> Summary

``aggregate(products, sales)`` runs all three with default settings.
``build_stock_views(insights)`` flattens insights for the stock table.

Summary counting rules
----------------------
    low_stock_count = insights whose status is LOW STOCK or OUT OF STOCK
    urgent_actions  = insights whose recommendation_type is urgent
    avg_confidence  = mean confidence as "0.00" text, halves rounded up;
                      None for no insights

OUT OF STOCK is never computed here. It is copied from ``Product.status``
when the store has marked the product that way.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Sequence
from decimal import ROUND_HALF_UP, Decimal

from supply_dashboard.engine.classifier import (
    DEFAULT_THRESHOLDS,
    StockThresholds,
    classify,
    days_of_stock,
)
from supply_dashboard.engine.confidence import DEFAULT_SCALE, confidence
from supply_dashboard.engine.forecaster import DEFAULT_WINDOW, forecast, round_half_up
from supply_dashboard.engine.recommender import recommend
from supply_dashboard.models.insight import (
    Insight,
    Severity,
    StockStatus,
    StockView,
    Summary,
)
from supply_dashboard.models.product import Product, Sale

logger = logging.getLogger(__name__)

_LOW_STATUSES = frozenset({StockStatus.LOW_STOCK, StockStatus.OUT_OF_STOCK})


def partition_sales(sales: Sequence[Sale]) -> dict[str, list[Sale]]:
    """Group sales by ``product_id``, preserving their incoming order."""
    groups: dict[str, list[Sale]] = defaultdict(list)
    for sale in sales:
        groups[sale.product_id].append(sale)
    return dict(groups)


class InsightAggregator:
    """Stateless per-call engine configured with window, scale and thresholds.

    One instance can serve any number of concurrent ``aggregate()`` calls;
    nothing is stored between them.

    Attributes:
        window:     Number of recent sales averaged by the forecaster.
        scale:      Decay scale of the confidence curve.
        thresholds: Days-of-stock ladder boundaries.
    """

    def __init__(
        self,
        window: int = DEFAULT_WINDOW,
        scale: float = DEFAULT_SCALE,
        thresholds: StockThresholds = DEFAULT_THRESHOLDS,
    ) -> None:
        if window < 1:
            raise ValueError(f"window must be >= 1, got {window}.")
        self.window = window
        self.scale = scale
        self.thresholds = thresholds

    def build_insight(self, product: Product, product_sales: Sequence[Sale]) -> Insight:
        """Evaluate one product against its own sale history."""
        predicted = round_half_up(forecast(product_sales, window=self.window))
        days = days_of_stock(product.stock, predicted)
        rec = recommend(product, predicted, self.thresholds)

        return Insight(
            product_id=product.id,
            product_name=product.name,
            current_stock=product.stock,
            predicted_demand=predicted,
            recommendation=rec.text,
            recommendation_type=rec.type,
            confidence=confidence(product_sales, scale=self.scale),
            days_of_stock=days,
            status=_underlying_status(product, days, self.thresholds),
        )

    def aggregate(
        self,
        products: Sequence[Product],
        sales: Sequence[Sale],
    ) -> tuple[list[Insight], Summary]:
        """Produce one insight per product plus the fleet summary.

        Args:
            products: Products to evaluate; output keeps this order.
            sales:    All sales for all products, in any order.

        Returns:
            ``(insights, summary)``.
        """
        groups = partition_sales(sales)

        known = {p.id for p in products}
        orphaned = sum(len(g) for pid, g in groups.items() if pid not in known)
        if orphaned:
            logger.debug("Ignoring %d sale(s) for unknown products.", orphaned)

        insights = [self.build_insight(p, groups.get(p.id, [])) for p in products]
        summary = summarize(insights)

        logger.debug(
            "Aggregated %d product(s) from %d sale(s): low=%d urgent=%d",
            summary.total_products, len(sales),
            summary.low_stock_count, summary.urgent_actions,
        )
        return insights, summary


def summarize(insights: Sequence[Insight]) -> Summary:
    """Fold insights into fleet-wide counts.

    ``avg_confidence`` is ``None`` when ``insights`` is empty rather than
    failing on a zero division.
    """
    if insights:
        mean = sum(i.confidence for i in insights) / len(insights)
        avg_confidence = str(Decimal(mean).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))
    else:
        avg_confidence = None

    return Summary(
        total_products=len(insights),
        low_stock_count=sum(1 for i in insights if i.status in _LOW_STATUSES),
        urgent_actions=sum(1 for i in insights if i.recommendation_type is Severity.URGENT),
        avg_confidence=avg_confidence,
    )


def build_stock_views(insights: Sequence[Insight]) -> list[StockView]:
    """Flatten insights into per-product stock rows (same order)."""
    return [
        StockView(
            id=i.product_id,
            name=i.product_name,
            stock=i.current_stock,
            predicted_demand=i.predicted_demand,
            days_of_stock=i.days_of_stock,
            status=i.status,
            confidence=i.confidence,
        )
        for i in insights
    ]


def aggregate(
    products: Sequence[Product],
    sales: Sequence[Sale],
) -> tuple[list[Insight], Summary]:
    """Run the engine with the default window, scale and thresholds."""
    return InsightAggregator().aggregate(products, sales)


# ── Helper ────────────────────────────────────────────────────────────────────

def _underlying_status(
    product: Product,
    days: int,
    thresholds: StockThresholds,
) -> StockStatus:
    if product.status and product.status.strip().lower() == StockStatus.OUT_OF_STOCK.lower():
        return StockStatus.OUT_OF_STOCK
    return classify(days, thresholds)
