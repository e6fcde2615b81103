"""
Repositories for products and sales.
"""

from __future__ import annotations

import logging
import sqlite3
from decimal import Decimal
from typing import Optional

from supply_dashboard.db.repositories.base import BaseRepository
from supply_dashboard.models.product import Product, Sale
from supply_dashboard.utils.time_utils import ensure_utc, parse_timestamp

logger = logging.getLogger(__name__)

_UPSERT_PRODUCT = """
INSERT INTO products (id, name, stock, status)
VALUES (?, ?, ?, ?)
ON CONFLICT(id) DO UPDATE SET
    name       = excluded.name,
    stock      = excluded.stock,
    status     = excluded.status,
    updated_at = strftime('%Y-%m-%dT%H:%M:%SZ', 'now');
"""

_INSERT_SALE = """
INSERT INTO sales (id, product_id, quantity, date, revenue)
VALUES (?, ?, ?, ?, ?);
"""


class ProductRepository(BaseRepository):
    """Read/write access to the ``products`` table."""

    def upsert(self, product: Product) -> str:
        """Insert a product or update the existing row with the same id.

        Returns:
            The product id.
        """
        self.execute(_UPSERT_PRODUCT, _product_params(product))
        return product.id

    def upsert_many(self, products: list[Product]) -> int:
        """Upsert a batch of products. Returns the number of rows written."""
        if not products:
            return 0
        self.executemany(_UPSERT_PRODUCT, [_product_params(p) for p in products])
        return len(products)

    def get_by_id(self, product_id: str) -> Optional[Product]:
        """Fetch a product by id, or ``None``."""
        row = self.fetchone("SELECT * FROM products WHERE id = ?;", (product_id,))
        return _row_to_product(row) if row else None

    def list_all(self) -> list[Product]:
        """All products ordered by name."""
        rows = self.fetchall("SELECT * FROM products ORDER BY name, id;")
        return [_row_to_product(r) for r in rows]

    def count(self) -> int:
        """Return total number of products."""
        return self.count_rows("products")


class SaleRepository(BaseRepository):
    """Read/write access to the ``sales`` table."""

    def insert(self, sale: Sale) -> str:
        """Insert one sale.

        Raises:
            sqlite3.IntegrityError: If the id already exists or the product
                does not.
        """
        self.execute(_INSERT_SALE, _sale_params(sale))
        return sale.id

    def insert_many(self, sales: list[Sale]) -> int:
        """Insert a batch of sales. Returns the number of rows written."""
        if not sales:
            return 0
        self.executemany(_INSERT_SALE, [_sale_params(s) for s in sales])
        return len(sales)

    def list_all(self, ascending: bool = False) -> list[Sale]:
        """All sales ordered by date (newest first unless ``ascending``)."""
        direction = "ASC" if ascending else "DESC"
        rows = self.fetchall(f"SELECT * FROM sales ORDER BY date {direction}, id;")
        return [_row_to_sale(r) for r in rows]

    def list_for_product(self, product_id: str) -> list[Sale]:
        """Sales of one product, oldest first."""
        rows = self.fetchall(
            "SELECT * FROM sales WHERE product_id = ? ORDER BY date, id;",
            (product_id,),
        )
        return [_row_to_sale(r) for r in rows]

    def count(self) -> int:
        """Return total number of sales."""
        return self.count_rows("sales")


# ── Row mappers ────────────────────────────────────────────────────────────────

def _product_params(product: Product) -> tuple:
    return (product.id, product.name, product.stock, product.status)


def _sale_params(sale: Sale) -> tuple:
    return (
        sale.id,
        sale.product_id,
        sale.quantity,
        ensure_utc(sale.date).isoformat(),
        str(sale.revenue),
    )


def _row_to_product(row: sqlite3.Row) -> Product:
    return Product(
        id=row["id"],
        name=row["name"],
        stock=row["stock"],
        status=row["status"],
    )


def _row_to_sale(row: sqlite3.Row) -> Sale:
    return Sale(
        id=row["id"],
        product_id=row["product_id"],
        quantity=row["quantity"],
        date=parse_timestamp(row["date"]),
        revenue=Decimal(row["revenue"]),
    )
