from __future__ import annotations

"""Rate provider abstraction.

Providers return a USD based table in one batch call; the rate cache decides
when to call them and how to merge partial answers with the fallback table.
"""
from abc import ABC, abstractmethod
from typing import Dict, Protocol

from budgetfx.models.constants import Currency


class RateProvider(ABC):
    name: str = "abstract"

    @abstractmethod
    def fetch_usd_rates(self) -> Dict[Currency, float]:
        """Return units of currency per 1 USD for the currencies the source knows.

        May return a subset of supported currencies. Raises RateProviderError
        when the source is unreachable or its payload is unusable.
        """
        raise NotImplementedError


class SupportsRateLookup(Protocol):
    def get_rate(self, currency: Currency | str) -> float: ...
