"""
Tests for supply_dashboard/service.py.

What we test
------------
InsightService (in-memory store):
  - insight_report() stamps generated_at from the injected clock.
  - stock_report() mirrors insight statuses.
  - sales_trend() buckets all sales.
  - Store failures propagate unchanged.

InsightService.from_config():
  - Engine settings come from AppConfig.

SQLiteInventoryStore:
  - End to end through a temp database file.
"""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from supply_dashboard.config import AppConfig, ForecastConfig, ThresholdsConfig
from supply_dashboard.db.connection import get_connection
from supply_dashboard.db.repositories.inventory_repo import (
    ProductRepository,
    SaleRepository,
)
from supply_dashboard.db.schema import apply_schema
from supply_dashboard.models.insight import Severity, StockStatus
from supply_dashboard.service import (
    InMemoryInventoryStore,
    InsightService,
    SQLiteInventoryStore,
)

FIXED_NOW = datetime(2026, 3, 10, 8, 0, tzinfo=timezone.utc)


class _BrokenStore:
    def list_products(self):
        raise ConnectionError("store unreachable")

    def list_sales(self):
        raise ConnectionError("store unreachable")


@pytest.fixture
def service(sample_products, sample_sales) -> InsightService:
    store = InMemoryInventoryStore(sample_products, sample_sales)
    return InsightService(store, clock=lambda: FIXED_NOW)


class TestInsightService:
    def test_insight_report(self, service):
        report = service.insight_report()
        assert report.generated_at == FIXED_NOW
        assert report.summary.total_products == 4
        assert report.summary.urgent_actions == 1
        assert [i.product_id for i in report.insights] == ["bolt", "gear", "nut", "spring"]

    def test_stock_report(self, service):
        report = service.stock_report()
        assert report.generated_at == FIXED_NOW
        statuses = {v.id: v.status for v in report.products}
        assert statuses == {
            "bolt": StockStatus.LOW_STOCK,
            "gear": StockStatus.IN_STOCK,
            "nut": StockStatus.IN_STOCK,
            "spring": StockStatus.HIGH_STOCK,
        }

    def test_sales_trend(self, service):
        trend = service.sales_trend(days=3)
        assert len(trend) == 3
        assert all(d.sales == 40 for d in trend)

    def test_store_failure_propagates(self):
        svc = InsightService(_BrokenStore())
        with pytest.raises(ConnectionError, match="unreachable"):
            svc.insight_report()
        with pytest.raises(ConnectionError):
            svc.sales_trend()

    def test_empty_store(self):
        svc = InsightService(InMemoryInventoryStore([], []), clock=lambda: FIXED_NOW)
        report = svc.insight_report()
        assert report.insights == []
        assert report.summary.avg_confidence is None


class TestFromConfig:
    def test_engine_settings_applied(self, sample_products, sample_sales):
        config = AppConfig(
            forecast=ForecastConfig(window=3, confidence_scale=5.0),
            thresholds=ThresholdsConfig(low_days=2, adequate_days=4, high_days=60),
        )
        store = InMemoryInventoryStore(sample_products, sample_sales)
        svc = InsightService.from_config(config, store=store)

        assert svc.aggregator.window == 3
        assert svc.aggregator.scale == 5.0
        assert svc.aggregator.thresholds.high == 60

        by_id = {i.product_id: i for i in svc.insight_report().insights}
        # 3 days of stock is no longer low under low_days=2.
        assert by_id["bolt"].recommendation_type is Severity.WARNING
        # 50 days is no longer excessive under high_days=60.
        assert by_id["spring"].recommendation_type is Severity.SUCCESS

    def test_default_store_is_sqlite(self):
        svc = InsightService.from_config(AppConfig())
        assert isinstance(svc.store, SQLiteInventoryStore)


class TestSQLiteInventoryStore:
    def test_end_to_end(self, tmp_path, sample_products, sample_sales):
        db_path = str(tmp_path / "store.db")
        with get_connection(db_path) as conn:
            apply_schema(conn)
            ProductRepository(conn).upsert_many(sample_products)
            SaleRepository(conn).insert_many(sample_sales)

        store = SQLiteInventoryStore(db_path)
        assert [p.name for p in store.list_products()] == ["Bolt", "Gear", "Nut", "Spring"]
        dates = [s.date for s in store.list_sales()]
        assert dates == sorted(dates, reverse=True)

        report = InsightService(store, clock=lambda: FIXED_NOW).insight_report()
        assert report.summary.total_products == 4
        assert report.summary.avg_confidence == "0.65"
