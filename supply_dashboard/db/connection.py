"""
Connections to the product and sales store.

Both the CLI (``init-db``, ``import-csv``) and ``SQLiteInventoryStore`` open
the store through ``get_connection()``. A store read happens once per report,
so connections are short-lived: opened, used for one unit of work, then
committed (or rolled back) and closed.

Every connection gets the same pragmas: foreign keys on (sales cascade with
their product), an optional WAL journal so the Streamlit page can read while
``import-csv`` writes, and a busy timeout.
"""

from __future__ import annotations

import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

logger = logging.getLogger(__name__)

MEMORY_DB = ":memory:"


def _apply_pragmas(conn: sqlite3.Connection, wal_mode: bool, busy_timeout_ms: int) -> None:
    conn.execute("PRAGMA foreign_keys = ON;")
    conn.execute(f"PRAGMA busy_timeout = {int(busy_timeout_ms)};")
    if wal_mode:
        conn.execute("PRAGMA journal_mode = WAL;")


@contextmanager
def get_connection(
    db_path: str,
    wal_mode: bool = True,
    busy_timeout_ms: int = 5000,
) -> Iterator[sqlite3.Connection]:
    """Open the store, yield it, then commit and close.

    Missing parent directories of ``db_path`` are created so a fresh checkout
    can run ``supply-dashboard init-db`` straight away. Any exception inside
    the ``with`` block rolls the unit of work back and is re-raised.

    Args:
        db_path: SQLite file, or ``":memory:"``.
        wal_mode: Use the WAL journal.
        busy_timeout_ms: How long to wait on a lock held by another writer.
    """
    if db_path != MEMORY_DB:
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    logger.debug("Opening store %s (wal=%s)", db_path, wal_mode)
    conn = sqlite3.connect(db_path, timeout=busy_timeout_ms / 1000)
    conn.row_factory = sqlite3.Row
    try:
        _apply_pragmas(conn, wal_mode, busy_timeout_ms)
        yield conn
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()
