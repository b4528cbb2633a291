from __future__ import annotations

"""Concrete rate providers and factory.

'external-http' queries exchangerate-api.com style endpoints
(`<base_url>/USD` -> {"base": "USD", "rates": {"EUR": 0.92, ...}}).
'static' serves the fallback table and never touches the network.
"""
import logging
import math
from typing import Any, Callable, Dict, Mapping, TYPE_CHECKING

from budgetfx.core.errors import RateProviderError
from budgetfx.models.constants import PIVOT_CURRENCY, Currency
from budgetfx.services.http_client import HttpError, get_json
from .base import RateProvider
from .table import fallback_rates

if TYPE_CHECKING:  # pragma: no cover
    from budgetfx.core.config import Settings

logger = logging.getLogger("budgetfx.rates.providers")

JsonFetcher = Callable[..., Dict[str, Any]]


class StaticRateProvider(RateProvider):
    name = "static"

    def fetch_usd_rates(self) -> Dict[Currency, float]:
        return fallback_rates()


def parse_rates_payload(payload: Mapping[str, Any]) -> Dict[Currency, float]:
    """Map an upstream payload into {Currency: rate}.

    Unknown codes and non-positive, non-finite or non-numeric values are dropped; a missing
    `rates` object or a non-USD base is a provider error.
    """
    base = payload.get("base") or payload.get("base_code")
    if base is not None and str(base).upper() != PIVOT_CURRENCY.value:
        raise RateProviderError(f"expected USD based rates, got base '{base}'")
    rates = payload.get("rates")
    if not isinstance(rates, Mapping):
        raise RateProviderError("response has no 'rates' object")
    parsed: Dict[Currency, float] = {}
    for currency in Currency:
        value = rates.get(currency.value)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            continue
        if value > 0 and math.isfinite(value):
            parsed[currency] = float(value)
    return parsed


class ExternalHTTPRateProvider(RateProvider):
    name = "external-http"

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 5.0,
        retries: int = 1,
        fetch: JsonFetcher = get_json,
    ):
        self._url = f"{str(base_url).rstrip('/')}/{PIVOT_CURRENCY.value}"
        self._timeout = timeout
        self._retries = retries
        self._fetch = fetch

    @property
    def url(self) -> str:
        return self._url

    def fetch_usd_rates(self) -> Dict[Currency, float]:
        try:
            payload = self._fetch(self._url, timeout=self._timeout, retries=self._retries)
        except HttpError as e:
            raise RateProviderError(str(e)) from e
        return parse_rates_payload(payload)


def make_rate_provider(kind: str, settings: "Settings") -> RateProvider:
    if kind == "static":
        return StaticRateProvider()
    if kind == "external-http":
        return ExternalHTTPRateProvider(
            str(settings.exchange_api_base_url),
            timeout=settings.http_timeout_seconds,
            retries=settings.http_retries,
        )
    raise ValueError(f"Unknown rate provider kind '{kind}'")
