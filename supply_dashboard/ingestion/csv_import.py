"""
CSV import parsers for products and sales.

Format — comma delimited, with a header row.

products.csv
  Required columns: id, name, stock
  Optional columns: status  (empty string → None)

sales.csv
  Required columns: id, product_id, quantity, date
  Optional columns: revenue (empty string → 0)

Date format:
  date → ISO 8601, e.g. 2026-03-01T09:30:00Z, 2026-03-01T09:30:00+00:00
         or a bare 2026-03-01 (midnight UTC). Naive values are read as UTC.

Every row is validated before anything is returned. If **any** row fails,
a single ``ValueError`` lists the first 10 failures, so a half-imported
file never reaches the store.
"""

from __future__ import annotations

import csv
import logging
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Callable, Optional, TypeVar

from pydantic import ValidationError

from supply_dashboard.models.product import Product, Sale
from supply_dashboard.utils.time_utils import parse_timestamp

logger = logging.getLogger(__name__)

REQUIRED_PRODUCT_COLUMNS = frozenset({"id", "name", "stock"})
REQUIRED_SALE_COLUMNS = frozenset({"id", "product_id", "quantity", "date"})

_MAX_ERRORS_SHOWN = 10

T = TypeVar("T")


def parse_products_csv(path: Path) -> list[Product]:
    """Parse a products CSV into validated :class:`Product` objects.

    Raises:
        FileNotFoundError: If ``path`` does not exist.
        ValueError: If required columns are missing or any row fails validation.
    """
    return _parse_csv(path, REQUIRED_PRODUCT_COLUMNS, _row_to_product, "product")


def parse_sales_csv(path: Path) -> list[Sale]:
    """Parse a sales CSV into validated :class:`Sale` objects.

    Raises:
        FileNotFoundError: If ``path`` does not exist.
        ValueError: If required columns are missing or any row fails validation.
    """
    return _parse_csv(path, REQUIRED_SALE_COLUMNS, _row_to_sale, "sale")


# ── Private helpers ────────────────────────────────────────────────────────────

def _parse_csv(
    path: Path,
    required: frozenset[str],
    convert: Callable[[dict[str, str]], T],
    label: str,
) -> list[T]:
    if not path.exists():
        raise FileNotFoundError(f"{label.capitalize()} CSV file not found: {path}")

    with open(path, encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)

        if reader.fieldnames is None:
            raise ValueError(f"CSV file is empty or has no header row: {path}")

        actual_cols = {c.strip() for c in reader.fieldnames}
        missing = required - actual_cols
        if missing:
            raise ValueError(
                f"CSV missing required columns: {sorted(missing)}\n"
                f"Found columns: {sorted(actual_cols)}"
            )

        rows = [{(k or "").strip(): v for k, v in row.items()} for row in reader]

    if not rows:
        logger.warning("%s CSV is empty (header only): %s", label.capitalize(), path)
        return []

    records: list[T] = []
    errors: list[tuple[int, str]] = []

    for i, row in enumerate(rows):
        line_no = i + 2  # 1-based, skip header row
        try:
            records.append(convert(row))
        except (ValueError, ValidationError) as exc:
            errors.append((line_no, str(exc)))

    if errors:
        detail = "\n".join(f"  Row {ln}: {msg}" for ln, msg in errors[:_MAX_ERRORS_SHOWN])
        extra = len(errors) - _MAX_ERRORS_SHOWN
        suffix = f"\n  … and {extra} more" if extra > 0 else ""
        raise ValueError(
            f"{len(errors)} row(s) failed validation in {path.name}:\n{detail}{suffix}"
        )

    logger.info("Parsed %d %s row(s) from %s", len(records), label, path.name)
    return records


def _row_to_product(row: dict[str, str]) -> Product:
    return Product(
        id=_req(row, "id"),
        name=_req(row, "name"),
        stock=_parse_int(row, "stock"),
        status=_opt(row, "status"),
    )


def _row_to_sale(row: dict[str, str]) -> Sale:
    return Sale(
        id=_req(row, "id"),
        product_id=_req(row, "product_id"),
        quantity=_parse_int(row, "quantity"),
        date=parse_timestamp(_req(row, "date")),
        revenue=_parse_decimal(row, "revenue"),
    )


def _req(row: dict[str, str], col: str) -> str:
    val = (row.get(col) or "").strip()
    if not val:
        raise ValueError(f"Required column '{col}' is empty.")
    return val


def _opt(row: dict[str, str], col: str) -> Optional[str]:
    val = (row.get(col) or "").strip()
    return val or None


def _parse_int(row: dict[str, str], col: str) -> int:
    raw = _req(row, col)
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"Column '{col}' must be an integer, got '{raw}'.") from None


def _parse_decimal(row: dict[str, str], col: str) -> Decimal:
    raw = _opt(row, col)
    if raw is None:
        return Decimal("0")
    try:
        value = Decimal(raw)
    except InvalidOperation:
        value = None
    if value is None or not value.is_finite():
        raise ValueError(f"Column '{col}' must be a decimal number, got '{raw}'.")
    return value
