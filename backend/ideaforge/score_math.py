"""Shared numeric helpers for the scoring code.

Every score that leaves this service is an integer produced by
``round_half_up`` after ``_clamp``.  Python's built-in ``round`` uses
banker's rounding (``round(66.5) == 66``), which is not what the dashboard
expects, so it is never used for scores.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional, Union

Number = Union[int, float, Decimal]


def _clamp(value: Number, lo: Number = 0, hi: Number = 100) -> Number:
    """Clamp *value* to [lo, hi]."""
    return max(lo, min(hi, value))


def round_half_up(value: Number) -> int:
    """Round to the nearest integer, ties away from zero.

    Raises ValueError for NaN and infinities.
    """
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    if not value.is_finite():
        raise ValueError(f"cannot round non-finite value {value}")
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def to_score(value: Number) -> int:
    """Clamp to [0, 100] then round half-up."""
    return round_half_up(_clamp(value))


def mean(values: Iterable[Number]) -> Optional[float]:
    items = [float(v) for v in values]
    if not items:
        return None
    return sum(items) / len(items)
