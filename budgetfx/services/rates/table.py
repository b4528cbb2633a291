"""Static fallback exchange rates, USD based (units of currency per 1 USD)."""

from __future__ import annotations

from types import MappingProxyType
from typing import Dict, Mapping

from budgetfx.models.constants import Currency

_FALLBACK_RATES: Dict[Currency, float] = {
    Currency.USD: 1.0,
    Currency.EUR: 0.92,
    Currency.GBP: 0.79,
    Currency.JPY: 149.85,
    Currency.CAD: 1.37,
    Currency.AUD: 1.52,
    Currency.CHF: 0.91,
    Currency.CNY: 7.31,
    Currency.INR: 83.12,
    Currency.SGD: 1.34,
    Currency.HKD: 7.80,
    Currency.NZD: 1.64,
}

FALLBACK_RATES: Mapping[Currency, float] = MappingProxyType(_FALLBACK_RATES)


def fallback_rates() -> Dict[Currency, float]:
    """Fresh mutable copy of the full table."""
    return dict(_FALLBACK_RATES)
