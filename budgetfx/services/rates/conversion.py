from __future__ import annotations

from dataclasses import dataclass

from budgetfx.models.constants import PIVOT_CURRENCY, Currency, parse_currency
from budgetfx.services.money import round2
from .base import SupportsRateLookup

"""Cross-currency conversion through the USD pivot.

`convert` and `get_exchange_rate` return full precision; callers round.
`convert_with_details` is the presentation helper and rounds the converted
amount to cents.
"""


@dataclass(frozen=True)
class ConversionResult:
    original_amount: float
    from_currency: Currency
    to_currency: Currency
    rate: float
    converted_amount: float


class Converter:
    def __init__(self, rates: SupportsRateLookup):
        self._rates = rates

    def _usd_per_unit(self, currency: Currency) -> float:
        if currency == PIVOT_CURRENCY:
            return 1.0
        return 1 / self._rates.get_rate(currency)

    def _units_per_usd(self, currency: Currency) -> float:
        if currency == PIVOT_CURRENCY:
            return 1.0
        return self._rates.get_rate(currency)

    def get_exchange_rate(self, from_currency: Currency | str, to_currency: Currency | str) -> float:
        from_currency = parse_currency(from_currency)
        to_currency = parse_currency(to_currency)
        if from_currency == to_currency:
            return 1.0
        return self._usd_per_unit(from_currency) * self._units_per_usd(to_currency)

    def convert(
        self, amount: float, from_currency: Currency | str, to_currency: Currency | str
    ) -> float:
        from_currency = parse_currency(from_currency)
        to_currency = parse_currency(to_currency)
        if from_currency == to_currency:
            return amount
        return amount * self._usd_per_unit(from_currency) * self._units_per_usd(to_currency)

    def convert_with_details(
        self, amount: float, from_currency: Currency | str, to_currency: Currency | str
    ) -> ConversionResult:
        from_currency = parse_currency(from_currency)
        to_currency = parse_currency(to_currency)
        converted = self.convert(amount, from_currency, to_currency)
        return ConversionResult(
            original_amount=amount,
            from_currency=from_currency,
            to_currency=to_currency,
            rate=self.get_exchange_rate(from_currency, to_currency),
            converted_amount=round2(converted),
        )
