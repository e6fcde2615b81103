"""
ASCII terminal formatters for CLI reporting commands.

All formatters accept report models and return plain multi-line strings
suitable for ``typer.echo()``. No third-party dependencies.

Severity markers
----------------
The terminal has no colour badges, so each recommendation row is prefixed
with a fixed-width marker::

  [URGENT]  [WARN]  [INFO]  [OK]
"""

from __future__ import annotations

from supply_dashboard.models.insight import (
    InsightReport,
    Severity,
    StockReport,
    Summary,
)

_SEVERITY_MARKERS: dict[Severity, str] = {
    Severity.URGENT:  "[URGENT]",
    Severity.WARNING: "[WARN]",
    Severity.INFO:    "[INFO]",
    Severity.SUCCESS: "[OK]",
}


def format_summary(summary: Summary) -> str:
    """Four-line fleet summary block."""
    if summary.avg_confidence is None:
        avg = "n/a"
    else:
        avg = f"{float(summary.avg_confidence) * 100:.0f}%"
    return "\n".join([
        f"  Total products:   {summary.total_products}",
        f"  Low stock items:  {summary.low_stock_count}",
        f"  Urgent actions:   {summary.urgent_actions}",
        f"  Avg confidence:   {avg}",
    ])


def format_insights_table(report: InsightReport) -> str:
    """Summary block, then one block per product with its recommendation."""
    lines = [
        f"Insights generated at {report.generated_at.isoformat(timespec='seconds')}",
        "",
        format_summary(report.summary),
        "",
    ]
    if not report.insights:
        lines.append("  (no products)")
        return "\n".join(lines)

    for ins in report.insights:
        marker = _SEVERITY_MARKERS[ins.recommendation_type]
        lines.append(f"  {marker:<9}{ins.product_name}")
        lines.append(
            f"           stock={ins.current_stock}  demand/day={ins.predicted_demand}"
            f"  days={ins.days_of_stock}  confidence={ins.confidence * 100:.0f}%"
        )
        lines.append(f"           {ins.recommendation}")
    return "\n".join(lines)


def format_stock_table(report: StockReport) -> str:
    """Fixed-width stock-level table."""
    header = (
        f"  {'Product':<28} {'Stock':>7} {'Demand':>7} {'Days':>6} "
        f"{'Status':<13} {'Conf':>5}"
    )
    rule = "  " + "-" * (len(header) - 2)
    lines = [header, rule]
    for row in report.products:
        name = row.name if len(row.name) <= 28 else row.name[:27] + "…"
        lines.append(
            f"  {name:<28} {row.stock:>7} {row.predicted_demand:>7} "
            f"{row.days_of_stock:>6} {row.status.value:<13} {row.confidence:>5.2f}"
        )
    if not report.products:
        lines.append("  (no products)")
    return "\n".join(lines)
