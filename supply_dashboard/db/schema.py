"""
SQLite schema DDL for the product and sales store.

All statements use ``IF NOT EXISTS`` so ``apply_schema()`` is idempotent.

Tables:
  1. products  (no FKs)
  2. sales     (→ products)

Timestamps are stored as ISO-8601 UTC text; revenue as TEXT so decimal
values round-trip exactly.
"""

from __future__ import annotations

import logging
import sqlite3

logger = logging.getLogger(__name__)

_DDL_PRODUCTS = """
CREATE TABLE IF NOT EXISTS products (
    id          TEXT    PRIMARY KEY,
    name        TEXT    NOT NULL,
    stock       INTEGER NOT NULL DEFAULT 0 CHECK (stock >= 0),
    status      TEXT,
    created_at  TEXT    NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ', 'now')),
    updated_at  TEXT    NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ', 'now'))
);
"""

_DDL_SALES = """
CREATE TABLE IF NOT EXISTS sales (
    id          TEXT    PRIMARY KEY,
    product_id  TEXT    NOT NULL REFERENCES products(id) ON DELETE CASCADE,
    quantity    INTEGER NOT NULL CHECK (quantity >= 0),
    date        TEXT    NOT NULL,
    revenue     TEXT    NOT NULL DEFAULT '0',
    created_at  TEXT    NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ', 'now'))
);
"""

_DDL_INDEXES = """
CREATE INDEX IF NOT EXISTS idx_products_name ON products(name);
CREATE INDEX IF NOT EXISTS idx_sales_product_date ON sales(product_id, date);
CREATE INDEX IF NOT EXISTS idx_sales_date ON sales(date);
"""

ALL_TABLE_NAMES: list[str] = ["products", "sales"]

_ALL_DDL: list[str] = [_DDL_PRODUCTS, _DDL_SALES, _DDL_INDEXES]


def apply_schema(conn: sqlite3.Connection) -> None:
    """Create all tables and indexes if they do not already exist.

    Args:
        conn: An open SQLite connection.
    """
    for ddl in _ALL_DDL:
        for statement in _split_ddl(ddl):
            conn.execute(statement)
    conn.commit()
    logger.info("Schema applied: %d tables verified.", len(ALL_TABLE_NAMES))


def _split_ddl(ddl: str) -> list[str]:
    """Split a multi-statement DDL block on ``;``."""
    return [s.strip() for s in ddl.split(";") if s.strip()]


def get_existing_tables(conn: sqlite3.Connection) -> list[str]:
    """Return the user tables present in the database, sorted by name."""
    rows = conn.execute(
        "SELECT name FROM sqlite_master WHERE type = 'table' "
        "AND name NOT LIKE 'sqlite_%' ORDER BY name;"
    ).fetchall()
    return [r[0] for r in rows]
