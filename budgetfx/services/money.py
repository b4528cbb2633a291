"""Money / rounding helpers.

Centralized so conversion display, aggregation, warnings and summaries use
identical rounding semantics: scale to cents, round half away from zero on the
scaled value, scale back.
"""

from __future__ import annotations
from decimal import Decimal, ROUND_HALF_UP


def round2(value: float) -> float:
    cents = Decimal(repr(value * 100)).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return float(cents) / 100


def percentage(part: float, whole: float) -> float:
    """`part` as a percent of `whole` to 2 decimals; 0 when `whole` is not positive."""
    if whole <= 0:
        return 0.0
    return round2((part / whole) * 100)
