"""Tests for Insight, Summary and the report wrappers."""

from __future__ import annotations

from datetime import date, datetime, timezone
from decimal import Decimal

import pytest
from pydantic import ValidationError

from supply_dashboard.models.insight import (
    DailySales,
    Insight,
    InsightReport,
    Severity,
    StockStatus,
    Summary,
)


def _insight(**overrides) -> Insight:
    fields = dict(
        product_id="p1",
        product_name="Widget",
        current_stock=30,
        predicted_demand=10,
        recommendation="Increase production of Widget. Current stock will last only 3 days.",
        recommendation_type=Severity.URGENT,
        confidence=0.65,
        days_of_stock=3,
        status=StockStatus.LOW_STOCK,
    )
    fields.update(overrides)
    return Insight(**fields)


class TestEnums:
    def test_status_wire_values(self):
        assert [s.value for s in StockStatus] == [
            "Low Stock", "In Stock", "High Stock", "Out of Stock",
        ]

    def test_severity_wire_values(self):
        assert [s.value for s in Severity] == ["urgent", "warning", "info", "success"]


class TestInsight:
    def test_valid(self):
        assert _insight().status is StockStatus.LOW_STOCK

    @pytest.mark.parametrize("value", [-0.01, 1.01])
    def test_confidence_bounds(self, value):
        with pytest.raises(ValidationError, match="confidence"):
            _insight(confidence=value)

    def test_negative_days_rejected(self):
        with pytest.raises(ValidationError):
            _insight(days_of_stock=-1)

    def test_json_dump_uses_wire_strings(self):
        data = _insight().model_dump(mode="json")
        assert data["status"] == "Low Stock"
        assert data["recommendation_type"] == "urgent"


class TestReports:
    def test_summary_default_avg_is_none(self):
        s = Summary(total_products=0, low_stock_count=0, urgent_actions=0)
        assert s.avg_confidence is None

    def test_report_serialises_timestamp(self):
        report = InsightReport(
            insights=[_insight()],
            summary=Summary(total_products=1, low_stock_count=1, urgent_actions=1,
                            avg_confidence="0.65"),
            generated_at=datetime(2026, 3, 1, 12, tzinfo=timezone.utc),
        )
        data = report.model_dump(mode="json")
        assert data["generated_at"].startswith("2026-03-01T12:00:00")
        assert data["summary"]["avg_confidence"] == "0.65"

    def test_daily_sales(self):
        d = DailySales(day=date(2026, 3, 1), sales=9, revenue=Decimal("22.50"))
        assert d.model_dump(mode="json")["day"] == "2026-03-01"
