"""
Export helpers for spreadsheet analysis and archiving.

All functions write to disk and return the written ``Path``.

Output files (written by ``supply-dashboard export``)
-----------------------------------------------------
  data/outputs/insights/
    insights_{date}.csv   -- one flat row per product
    insights_{date}.json  -- full report: insights, summary, generated_at
"""

from __future__ import annotations

import csv
import json
import logging
from pathlib import Path

from supply_dashboard.models.insight import InsightReport

logger = logging.getLogger(__name__)

INSIGHT_CSV_COLUMNS: list[str] = [
    "product_id", "product_name", "current_stock", "predicted_demand",
    "days_of_stock", "status", "recommendation_type", "confidence",
    "recommendation",
]


def export_to_csv(
    records: list[dict],
    path: Path,
    fieldnames: list[str] | None = None,
) -> Path:
    """Write ``records`` to a UTF-8 CSV file.

    Args:
        records:    List of row dicts.
        path:       Destination file path (parent dirs created if missing).
        fieldnames: Column order.  If None, uses the keys of the first record.

    Returns:
        ``path`` as written.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    cols = fieldnames or (list(records[0].keys()) if records else [])
    if not cols:
        path.write_text("", encoding="utf-8")
        return path
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=cols, extrasaction="ignore")
        writer.writeheader()
        writer.writerows(records)
    return path


def export_to_json(data: dict | list, path: Path) -> Path:
    """Write ``data`` to a pretty-printed JSON file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2, default=str), encoding="utf-8")
    return path


def write_insight_report(report: InsightReport, output_dir: Path) -> tuple[Path, Path]:
    """Write the report as ``insights_{date}.csv`` and ``insights_{date}.json``.

    The date label is the UTC day of ``report.generated_at``; a second export
    on the same day overwrites the first.

    Returns:
        ``(csv_path, json_path)``.
    """
    stamp = report.generated_at.date().isoformat()
    payload = report.model_dump(mode="json")

    csv_path = export_to_csv(
        payload["insights"],
        output_dir / f"insights_{stamp}.csv",
        fieldnames=INSIGHT_CSV_COLUMNS,
    )
    json_path = export_to_json(payload, output_dir / f"insights_{stamp}.json")

    logger.info(
        "Insight report written: %s, %s (%d row(s))",
        csv_path, json_path, len(report.insights),
    )
    return csv_path, json_path
