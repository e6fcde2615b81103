"""
Tests for supply_dashboard/engine/classifier.py.

What we test
------------
days_of_stock():
  - Divides by demand and rounds half-up.
  - Zero demand divides by 1 (stock itself is the runway).

classify():
  - Ladder boundaries: <7 low, 7..13.9 in, 14..30 in, >30 high.
  - Never returns OUT_OF_STOCK.
  - Custom thresholds move the boundaries.
"""

from __future__ import annotations

import pytest

from supply_dashboard.engine.classifier import StockThresholds, classify, days_of_stock
from supply_dashboard.models.insight import StockStatus


class TestDaysOfStock:
    def test_simple_division(self):
        assert days_of_stock(100, 10) == 10

    def test_rounds_half_up(self):
        assert days_of_stock(25, 10) == 3

    def test_zero_demand_uses_one(self):
        assert days_of_stock(100, 0) == 100

    def test_zero_stock(self):
        assert days_of_stock(0, 12) == 0


class TestClassify:
    @pytest.mark.parametrize(
        "days, expected",
        [
            (0, StockStatus.LOW_STOCK),
            (6.9, StockStatus.LOW_STOCK),
            (7.0, StockStatus.IN_STOCK),
            (13.9, StockStatus.IN_STOCK),
            (14, StockStatus.IN_STOCK),
            (30.0, StockStatus.IN_STOCK),
            (30.1, StockStatus.HIGH_STOCK),
            (100, StockStatus.HIGH_STOCK),
        ],
    )
    def test_ladder(self, days, expected):
        assert classify(days) is expected

    def test_never_out_of_stock(self):
        statuses = {classify(d) for d in range(0, 60)}
        assert StockStatus.OUT_OF_STOCK not in statuses

    def test_custom_thresholds(self):
        t = StockThresholds(low=3, adequate=5, high=10)
        assert classify(4, t) is StockStatus.IN_STOCK
        assert classify(2, t) is StockStatus.LOW_STOCK
        assert classify(11, t) is StockStatus.HIGH_STOCK

    def test_dead_stock_is_high(self):
        assert classify(days_of_stock(100, 0)) is StockStatus.HIGH_STOCK
