"""
Insight service — the boundary between the store and the engine.

``InsightService`` receives its store explicitly. Anything with
``list_products()`` and ``list_sales()`` works: the SQLite adapter below,
an in-memory fixture in tests, or a remote client. There is no module-level
client.

Facades
-------
insight_report() -> InsightReport   {insights, summary, generated_at}
stock_report()   -> StockReport     {products: [StockView], generated_at}
sales_trend(n)   -> list[DailySales]

``generated_at`` is stamped here from the injected ``clock``; the engine
itself never reads the time.

Errors
------
Store failures are logged and re-raised unchanged. The CLI and dashboard
translate them into user-visible failures.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional, Protocol

from supply_dashboard.config import AppConfig
from supply_dashboard.db.connection import get_connection
from supply_dashboard.db.repositories.inventory_repo import (
    ProductRepository,
    SaleRepository,
)
from supply_dashboard.engine.aggregator import InsightAggregator, build_stock_views
from supply_dashboard.engine.classifier import StockThresholds
from supply_dashboard.engine.trend import DEFAULT_TREND_DAYS, daily_sales_trend
from supply_dashboard.models.insight import DailySales, InsightReport, StockReport
from supply_dashboard.models.product import Product, Sale
from supply_dashboard.utils.time_utils import utcnow

logger = logging.getLogger(__name__)


class InventoryStore(Protocol):
    """Source of product and sale records."""

    def list_products(self) -> list[Product]: ...

    def list_sales(self) -> list[Sale]: ...


class SQLiteInventoryStore:
    """``InventoryStore`` backed by the SQLite database.

    Opens a fresh connection per call so one store instance can be shared
    by concurrent dashboard sessions.
    """

    def __init__(
        self,
        db_path: str,
        wal_mode: bool = True,
        busy_timeout_ms: int = 5000,
    ) -> None:
        self.db_path = db_path
        self.wal_mode = wal_mode
        self.busy_timeout_ms = busy_timeout_ms

    def list_products(self) -> list[Product]:
        """All products ordered by name."""
        with self._connect() as conn:
            return ProductRepository(conn).list_all()

    def list_sales(self) -> list[Sale]:
        """All sales, newest first."""
        with self._connect() as conn:
            return SaleRepository(conn).list_all(ascending=False)

    def _connect(self):
        return get_connection(
            self.db_path,
            wal_mode=self.wal_mode,
            busy_timeout_ms=self.busy_timeout_ms,
        )


class InMemoryInventoryStore:
    """``InventoryStore`` over fixed lists; used by tests and demos."""

    def __init__(self, products: list[Product], sales: list[Sale]) -> None:
        self._products = list(products)
        self._sales = list(sales)

    def list_products(self) -> list[Product]:
        return list(self._products)

    def list_sales(self) -> list[Sale]:
        return list(self._sales)


class InsightService:
    """Fetches inputs from a store, runs the engine, stamps the result.

    Attributes:
        store:      Where products and sales come from.
        aggregator: Configured engine instance.
        clock:      Returns the ``generated_at`` timestamp.
    """

    def __init__(
        self,
        store: InventoryStore,
        aggregator: Optional[InsightAggregator] = None,
        clock: Callable = utcnow,
    ) -> None:
        self.store = store
        self.aggregator = aggregator or InsightAggregator()
        self.clock = clock

    @classmethod
    def from_config(
        cls,
        config: AppConfig,
        store: Optional[InventoryStore] = None,
    ) -> "InsightService":
        """Build a service wired to the configured database and engine settings."""
        if store is None:
            store = SQLiteInventoryStore(
                config.database.db_path,
                wal_mode=config.database.wal_mode,
                busy_timeout_ms=config.database.busy_timeout_ms,
            )
        aggregator = InsightAggregator(
            window=config.forecast.window,
            scale=config.forecast.confidence_scale,
            thresholds=StockThresholds(
                low=config.thresholds.low_days,
                adequate=config.thresholds.adequate_days,
                high=config.thresholds.high_days,
            ),
        )
        return cls(store=store, aggregator=aggregator)

    def insight_report(self) -> InsightReport:
        """Insights for every product plus the fleet summary."""
        products, sales = self._fetch()
        insights, summary = self.aggregator.aggregate(products, sales)
        logger.info(
            "Generated %d insight(s): low_stock=%d urgent=%d avg_confidence=%s",
            summary.total_products, summary.low_stock_count,
            summary.urgent_actions, summary.avg_confidence,
        )
        return InsightReport(
            insights=insights,
            summary=summary,
            generated_at=self.clock(),
        )

    def stock_report(self) -> StockReport:
        """Flattened per-product stock rows."""
        products, sales = self._fetch()
        insights, _ = self.aggregator.aggregate(products, sales)
        return StockReport(
            products=build_stock_views(insights),
            generated_at=self.clock(),
        )

    def sales_trend(self, days: int = DEFAULT_TREND_DAYS) -> list[DailySales]:
        """Per-day sales totals across all products."""
        try:
            sales = self.store.list_sales()
        except Exception as exc:
            logger.error("Failed to fetch sales: %s", exc)
            raise
        return daily_sales_trend(sales, days=days)

    def _fetch(self) -> tuple[list[Product], list[Sale]]:
        try:
            products = self.store.list_products()
        except Exception as exc:
            logger.error("Failed to fetch products: %s", exc)
            raise
        try:
            sales = self.store.list_sales()
        except Exception as exc:
            logger.error("Failed to fetch sales: %s", exc)
            raise
        logger.debug("Fetched %d product(s), %d sale(s).", len(products), len(sales))
        return products, sales
