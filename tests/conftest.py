"""
Shared pytest fixtures for the supply dashboard test suite.

Provides:
  - ``in_memory_db``: A fresh in-memory SQLite connection with the schema
    applied. Created anew for each test that requests it.
  - ``make_product`` / ``make_sales``: factories for domain objects.
  - ``sample_products`` / ``sample_sales``: a small fleet covering every
    recommendation type.
"""

from __future__ import annotations

import sqlite3
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Callable, Generator

import pytest

from supply_dashboard.db.schema import apply_schema
from supply_dashboard.models.product import Product, Sale

BASE_DATE = datetime(2026, 3, 1, 12, 0, 0, tzinfo=timezone.utc)


# ── Database fixture ──────────────────────────────────────────────────────────

@pytest.fixture
def in_memory_db() -> Generator[sqlite3.Connection, None, None]:
    """Yield a fresh in-memory SQLite connection with the schema applied.

    Foreign key enforcement is ON. Connection is closed after the test.
    """
    conn = sqlite3.connect(":memory:")
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON;")
    apply_schema(conn)
    yield conn
    conn.close()


# ── Domain object factories ───────────────────────────────────────────────────

@pytest.fixture
def make_product() -> Callable[..., Product]:
    """Factory: ``make_product(stock=100, id="p1", name="Widget")``."""

    def _make(
        stock: int = 100,
        id: str = "p1",
        name: str = "Widget",
        status: str | None = None,
    ) -> Product:
        return Product(id=id, name=name, stock=stock, status=status)

    return _make


@pytest.fixture
def make_sales() -> Callable[..., list[Sale]]:
    """Factory: one sale per day starting at ``BASE_DATE``, oldest first.

    ``make_sales([10, 20, 30], product_id="p1")`` returns three sales on
    consecutive days with quantities 10, 20 and 30.
    """

    def _make(
        quantities: list[int],
        product_id: str = "p1",
        start: datetime = BASE_DATE,
        price: Decimal = Decimal("2.50"),
    ) -> list[Sale]:
        return [
            Sale(
                id=f"{product_id}-s{i}",
                product_id=product_id,
                quantity=q,
                date=start + timedelta(days=i),
                revenue=price * q,
            )
            for i, q in enumerate(quantities)
        ]

    return _make


@pytest.fixture
def sample_products() -> list[Product]:
    """Four products, one per recommendation type at the sample sales."""
    return [
        Product(id="bolt", name="Bolt", stock=30),          # 10/day → 3 days   urgent
        Product(id="gear", name="Gear", stock=100),         # 10/day → 10 days  warning
        Product(id="nut", name="Nut", stock=200),           # 10/day → 20 days  success
        Product(id="spring", name="Spring", stock=500),     # 10/day → 50 days  info
    ]


@pytest.fixture
def sample_sales(make_sales) -> list[Sale]:
    """Seven sales of 10 units for every sample product, newest first."""
    sales: list[Sale] = []
    for pid in ("bolt", "gear", "nut", "spring"):
        sales.extend(make_sales([10] * 7, product_id=pid))
    return sorted(sales, key=lambda s: s.date, reverse=True)
