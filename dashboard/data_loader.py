"""
Dashboard data loader.

Every loader is wrapped in ``st.cache_data`` with a short TTL so repeated
widget interactions inside one refresh window do not re-query the store.
The "Refresh" button in the app clears the cache.

Loaders return plain dicts / lists (``model_dump(mode="json")``) so Streamlit
can hash and pickle them cheaply and pandas can build frames directly.
Store errors propagate; the app shows them with ``st.error``.
"""

from __future__ import annotations

from pathlib import Path

import streamlit as st

from supply_dashboard.config import AppConfig, load_config
from supply_dashboard.service import InsightService


@st.cache_resource
def get_config(config_path: str | None = None) -> AppConfig:
    """Load the application config once per Streamlit server process."""
    return load_config(Path(config_path) if config_path else None)


def _service(config: AppConfig) -> InsightService:
    return InsightService.from_config(config)


@st.cache_data(ttl=60, show_spinner=False)
def load_insights(config_path: str | None = None) -> dict:
    """``{insights, summary, generated_at}`` as JSON-ready dicts."""
    config = get_config(config_path)
    return _service(config).insight_report().model_dump(mode="json")


@st.cache_data(ttl=60, show_spinner=False)
def load_stocks(config_path: str | None = None) -> list[dict]:
    """Per-product stock rows."""
    config = get_config(config_path)
    return _service(config).stock_report().model_dump(mode="json")["products"]


@st.cache_data(ttl=60, show_spinner=False)
def load_sales_trend(config_path: str | None = None, days: int = 14) -> list[dict]:
    """Daily unit and revenue totals for the last ``days`` trading days."""
    config = get_config(config_path)
    return [d.model_dump(mode="json") for d in _service(config).sales_trend(days)]
