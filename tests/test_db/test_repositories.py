"""
Tests for ProductRepository and SaleRepository.

What we test
------------
ProductRepository:
  - upsert inserts, then updates the same id in place.
  - upsert_many of an empty list writes nothing.
  - get_by_id returns None for unknown ids.
  - list_all orders by name.

SaleRepository:
  - Inserted sales read back with UTC dates and exact Decimal revenue.
  - list_all is newest first by default, oldest first with ascending=True.
  - list_for_product filters by product, oldest first.
  - Duplicate ids raise IntegrityError.
"""

from __future__ import annotations

import sqlite3
from datetime import timezone
from decimal import Decimal

import pytest

from supply_dashboard.db.repositories.inventory_repo import (
    ProductRepository,
    SaleRepository,
)
from supply_dashboard.models.product import Product


@pytest.fixture
def products(in_memory_db) -> ProductRepository:
    return ProductRepository(in_memory_db)


@pytest.fixture
def sales(in_memory_db) -> SaleRepository:
    return SaleRepository(in_memory_db)


class TestProductRepository:
    def test_upsert_and_get(self, products):
        products.upsert(Product(id="p1", name="Widget", stock=10))
        fetched = products.get_by_id("p1")
        assert fetched == Product(id="p1", name="Widget", stock=10)

    def test_upsert_updates_existing(self, products):
        products.upsert(Product(id="p1", name="Widget", stock=10))
        products.upsert(Product(id="p1", name="Widget v2", stock=0, status="Out of Stock"))
        fetched = products.get_by_id("p1")
        assert fetched.name == "Widget v2"
        assert fetched.stock == 0
        assert fetched.status == "Out of Stock"
        assert products.count() == 1

    def test_upsert_many_empty(self, products):
        assert products.upsert_many([]) == 0
        assert products.count() == 0

    def test_get_unknown(self, products):
        assert products.get_by_id("nope") is None

    def test_list_all_ordered_by_name(self, products):
        products.upsert_many([
            Product(id="z", name="Zinc", stock=1),
            Product(id="a", name="Bolt", stock=1),
            Product(id="m", name="Anchor", stock=1),
        ])
        assert [p.name for p in products.list_all()] == ["Anchor", "Bolt", "Zinc"]


class TestSaleRepository:
    @pytest.fixture(autouse=True)
    def _seed_products(self, products):
        products.upsert_many([
            Product(id="p1", name="Widget", stock=10),
            Product(id="p2", name="Gadget", stock=10),
        ])

    def test_round_trip_preserves_values(self, sales, make_sales):
        original = make_sales([3], price=Decimal("1.10"))[0]
        sales.insert(original)
        (fetched,) = sales.list_all()
        assert fetched == original
        assert fetched.date.tzinfo == timezone.utc
        assert fetched.revenue == Decimal("3.30")

    def test_list_all_newest_first(self, sales, make_sales):
        sales.insert_many(make_sales([1, 2, 3]))
        assert [s.quantity for s in sales.list_all()] == [3, 2, 1]
        assert [s.quantity for s in sales.list_all(ascending=True)] == [1, 2, 3]

    def test_list_for_product(self, sales, make_sales):
        sales.insert_many(make_sales([1, 2], product_id="p1") + make_sales([9], product_id="p2"))
        result = sales.list_for_product("p1")
        assert [s.quantity for s in result] == [1, 2]
        assert sales.count() == 3

    def test_duplicate_id_raises(self, sales, make_sales):
        sale = make_sales([1])[0]
        sales.insert(sale)
        with pytest.raises(sqlite3.IntegrityError):
            sales.insert(sale)

    def test_insert_many_empty(self, sales):
        assert sales.insert_many([]) == 0
