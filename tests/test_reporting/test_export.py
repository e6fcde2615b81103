"""Tests for supply_dashboard.reporting.export."""

from __future__ import annotations

import csv
import json
from datetime import datetime, timezone

from supply_dashboard.engine.aggregator import aggregate
from supply_dashboard.models.insight import InsightReport
from supply_dashboard.reporting.export import (
    INSIGHT_CSV_COLUMNS,
    export_to_csv,
    export_to_json,
    write_insight_report,
)


class TestExportHelpers:
    def test_csv_uses_first_record_keys(self, tmp_path):
        path = export_to_csv([{"a": 1, "b": 2}, {"a": 3, "b": 4}], tmp_path / "out.csv")
        rows = list(csv.DictReader(path.open(encoding="utf-8")))
        assert rows == [{"a": "1", "b": "2"}, {"a": "3", "b": "4"}]

    def test_csv_empty_records(self, tmp_path):
        path = export_to_csv([], tmp_path / "sub" / "empty.csv")
        assert path.read_text(encoding="utf-8") == ""

    def test_json_creates_parents(self, tmp_path):
        path = export_to_json({"k": [1, 2]}, tmp_path / "a" / "b.json")
        assert json.loads(path.read_text(encoding="utf-8")) == {"k": [1, 2]}


class TestWriteInsightReport:
    def test_writes_csv_and_json(self, tmp_path, sample_products, sample_sales):
        insights, summary = aggregate(sample_products, sample_sales)
        report = InsightReport(
            insights=insights,
            summary=summary,
            generated_at=datetime(2026, 3, 10, 8, 0, tzinfo=timezone.utc),
        )

        csv_path, json_path = write_insight_report(report, tmp_path)

        assert csv_path.name == "insights_2026-03-10.csv"
        assert json_path.name == "insights_2026-03-10.json"

        with csv_path.open(encoding="utf-8") as f:
            reader = csv.DictReader(f)
            assert reader.fieldnames == INSIGHT_CSV_COLUMNS
            rows = list(reader)
        assert [r["product_id"] for r in rows] == ["bolt", "gear", "nut", "spring"]
        assert rows[0]["status"] == "Low Stock"
        assert rows[0]["recommendation_type"] == "urgent"

        payload = json.loads(json_path.read_text(encoding="utf-8"))
        assert payload["summary"]["avg_confidence"] == "0.65"
        assert len(payload["insights"]) == 4
        assert payload["generated_at"].startswith("2026-03-10T08:00:00")
