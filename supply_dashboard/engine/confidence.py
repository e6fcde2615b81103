"""
Sample-size confidence for a demand forecast.

    confidence = min(1.0, round(0.5 + 0.5 * (1 - exp(-n / scale)), 2))

No history is a neutral 0.5. The curve rises monotonically with ``n`` and
saturates: n=20 → 0.82, n=60 → 0.98, n≥~100 → 1.00 after rounding.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from typing import Optional

from supply_dashboard.models.product import Sale

NEUTRAL_CONFIDENCE = 0.5
DEFAULT_SCALE = 20.0


def confidence(sales: Optional[Sequence[Sale]], scale: float = DEFAULT_SCALE) -> float:
    """Confidence in [0.5, 1.0] derived from the number of sales.

    Args:
        sales: The product's sale history, or ``None``.
        scale: Decay scale of the curve; larger means slower saturation.

    Returns:
        Confidence rounded to 2 decimals.
    """
    if not sales:
        return NEUTRAL_CONFIDENCE

    n = len(sales)
    value = NEUTRAL_CONFIDENCE + 0.5 * (1 - math.exp(-n / scale))
    return min(1.0, round(value, 2))
