"""
Supply Dashboard — Streamlit app
================================

Reads products and sales through ``InsightService`` and renders:

  1. Summary cards  — total products, low stock items, urgent actions,
                      average forecast confidence.
  2. Current Stock  — per-product stock table with a status badge.
  3. Sales Trend    — units sold per day over the last N trading days.
  4. Insights       — one card per product, coloured by recommendation type.

Usage
-----
    pip install -e ".[dashboard]"
    streamlit run dashboard/app.py

    # Use a different config file (passed after the double-dash):
    streamlit run dashboard/app.py -- --config config/local.toml
"""

from __future__ import annotations

import argparse
import sys
from datetime import datetime
from pathlib import Path

# ── Ensure project root is importable ────────────────────────────────────────
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import streamlit as st

# ── Must be the first Streamlit call ─────────────────────────────────────────
st.set_page_config(
    page_title="Supply Dashboard",
    layout="wide",
    initial_sidebar_state="expanded",
)

import pandas as pd

from dashboard.data_loader import get_config, load_insights, load_sales_trend, load_stocks


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(add_help=False)
    parser.add_argument("--config", default=None)
    args, _ = parser.parse_known_args()
    return args


_ARGS = _parse_args()
_CONFIG = get_config(_ARGS.config)

# Severity → (Streamlit callout, label). Presentation only; the engine
# emits the bare tag.
_SEVERITY_STYLE = {
    "urgent":  (st.error,   "Urgent"),
    "warning": (st.warning, "Warning"),
    "info":    (st.info,    "Info"),
    "success": (st.success, "Optimal"),
}

_STATUS_BADGE = {
    "Low Stock":    "🔴 Low Stock",
    "Out of Stock": "⚫ Out of Stock",
    "In Stock":     "🟢 In Stock",
    "High Stock":   "🔵 High Stock",
}


# ── Sidebar ───────────────────────────────────────────────────────────────────

with st.sidebar:
    st.title("Supply Dashboard")
    st.caption("Demand forecasting and inventory recommendations")
    st.divider()

    trend_days = st.number_input(
        "Sales trend window (days)",
        min_value=1,
        max_value=90,
        value=_CONFIG.dashboard.trend_days,
        step=1,
    )

    if st.button("Refresh", help="Re-read products and sales from the store."):
        st.cache_data.clear()
        st.rerun()

    st.divider()
    st.caption("Load data from the command line:")
    st.code("supply-dashboard import-csv --products p.csv --sales s.csv")


# ── Load ──────────────────────────────────────────────────────────────────────

try:
    report = load_insights(_ARGS.config)
    stock_rows = load_stocks(_ARGS.config)
    trend_rows = load_sales_trend(_ARGS.config, int(trend_days))
except Exception as exc:
    st.error(f"Failed to load data from the store: {exc}")
    st.stop()

summary = report["summary"]
generated_at = datetime.fromisoformat(report["generated_at"])


# ── Header ────────────────────────────────────────────────────────────────────

col_title, col_updated = st.columns([4, 1])
with col_title:
    st.header("Supply Dashboard")
    st.caption("Manufacturing intelligence and demand forecasting")
with col_updated:
    st.metric("Last Updated", generated_at.strftime("%H:%M:%S"))


# ── Summary cards ─────────────────────────────────────────────────────────────

c1, c2, c3, c4 = st.columns(4)
c1.metric("Total Products", summary["total_products"])
c2.metric("Low Stock Items", summary["low_stock_count"])
c3.metric("Urgent Actions", summary["urgent_actions"])
avg = summary.get("avg_confidence")
c4.metric("Avg Confidence", f"{float(avg) * 100:.0f}%" if avg is not None else "—")


# ── Stock table + trend chart ─────────────────────────────────────────────────

col_stock, col_trend = st.columns(2)

with col_stock:
    st.subheader("Current Stock")
    st.caption("Inventory levels and days of stock at predicted demand")
    if not stock_rows:
        st.info("No products in the store yet.")
    else:
        df_stock = pd.DataFrame(stock_rows)
        df_stock["status"] = df_stock["status"].map(lambda s: _STATUS_BADGE.get(s, s))
        df_stock = df_stock.rename(columns={
            "name": "Product",
            "stock": "Stock",
            "predicted_demand": "Demand / day",
            "days_of_stock": "Days",
            "status": "Status",
            "confidence": "Confidence",
        })
        st.dataframe(
            df_stock[["Product", "Stock", "Demand / day", "Days", "Status", "Confidence"]],
            use_container_width=True,
            hide_index=True,
        )

with col_trend:
    st.subheader("Recent Sales Trend")
    st.caption(f"Last {int(trend_days)} days of sales activity")
    if not trend_rows:
        st.info("No sales recorded yet.")
    else:
        df_trend = pd.DataFrame(trend_rows)
        df_trend["day"] = pd.to_datetime(df_trend["day"])
        df_trend["revenue"] = pd.to_numeric(df_trend["revenue"], errors="coerce")
        st.line_chart(df_trend.set_index("day")[["sales"]], height=300)
        with st.expander("Daily totals"):
            st.dataframe(df_trend, use_container_width=True, hide_index=True)


# ── Insight cards ─────────────────────────────────────────────────────────────

st.subheader("Insights & Recommendations")
st.caption("Moving-average demand forecast with sample-size confidence")

if not report["insights"]:
    st.info("No products to evaluate.")

for insight in report["insights"]:
    callout, label = _SEVERITY_STYLE.get(
        insight["recommendation_type"], (st.info, insight["recommendation_type"])
    )
    callout(
        f"**{insight['product_name']}** · {label} · "
        f"{insight['confidence'] * 100:.0f}% confident\n\n"
        f"{insight['recommendation']}\n\n"
        f"Current Stock: {insight['current_stock']} units | "
        f"Predicted Daily Demand: {insight['predicted_demand']} units | "
        f"Days of Stock: {insight['days_of_stock']}"
    )
