"""Tests for the USD pivoted rate cache."""
import threading
import time

import pytest

from budgetfx.core.errors import InvalidCurrencyError, RateProviderError
from budgetfx.models import Currency
from budgetfx.services.rates.cache_service import RateCache
from budgetfx.services.rates.table import FALLBACK_RATES

from conftest import START, FakeProvider


def test_first_access_populates_from_provider(rate_cache, provider):
    assert rate_cache.last_fetch is None
    assert rate_cache.get_rate("GBP") == 0.8
    assert provider.calls == 1
    assert rate_cache.last_fetch == START
    assert rate_cache.last_source == "live"


def test_usd_rate_is_one(rate_cache):
    assert rate_cache.get_rate(Currency.USD) == 1.0


def test_cold_start_outage_uses_fallback_table(clock):
    provider = FakeProvider(error=RateProviderError("connection refused"))
    cache = RateCache(provider, clock=clock)

    for currency in Currency:
        rate = cache.get_rate(currency)
        assert rate > 0
        assert rate == FALLBACK_RATES[currency]
    assert cache.last_source == "fallback"
    assert cache.last_fetch == START


def test_failed_refresh_still_rate_limits_retries(clock):
    provider = FakeProvider(error=RateProviderError("timeout"))
    cache = RateCache(provider, ttl_seconds=3600, clock=clock)

    cache.get_rate("EUR")
    clock.advance(minutes=30)
    cache.get_rate("EUR")
    assert provider.calls == 1

    clock.advance(minutes=31)
    cache.get_rate("EUR")
    assert provider.calls == 2


def test_within_ttl_uses_cached_batch(rate_cache, provider, clock):
    rate_cache.get_rate("EUR")
    clock.advance(seconds=3600)
    provider.rates[Currency.EUR] = 0.5
    assert rate_cache.get_rate("EUR") == 0.9
    assert provider.calls == 1


def test_expired_batch_is_refreshed(rate_cache, provider, clock):
    rate_cache.get_rate("EUR")
    clock.advance(seconds=3601)
    provider.rates[Currency.EUR] = 0.5
    assert rate_cache.get_rate("EUR") == 0.5
    assert provider.calls == 2
    assert rate_cache.last_fetch == clock()


def test_partial_response_is_merged_with_fallback(clock):
    provider = FakeProvider(rates={Currency.EUR: 0.95})
    cache = RateCache(provider, clock=clock)

    assert cache.get_rate("EUR") == 0.95
    assert cache.get_rate("GBP") == FALLBACK_RATES[Currency.GBP]
    assert cache.last_source == "partial"


def test_failure_after_success_reinstates_fallback(rate_cache, provider):
    assert rate_cache.get_rate("GBP") == 0.8
    provider.error = RateProviderError("HTTP 503")

    assert rate_cache.force_refresh() == "fallback"
    assert rate_cache.get_rate("GBP") == FALLBACK_RATES[Currency.GBP]


def test_non_positive_upstream_values_are_ignored(clock):
    provider = FakeProvider(rates={Currency.EUR: 0.0, Currency.GBP: -1.0})
    cache = RateCache(provider, clock=clock)

    assert cache.get_rate("EUR") == FALLBACK_RATES[Currency.EUR]
    assert cache.get_rate("GBP") == FALLBACK_RATES[Currency.GBP]
    assert cache.last_source == "fallback"


def test_force_refresh_bypasses_ttl(rate_cache, provider):
    rate_cache.get_rate("EUR")
    provider.rates[Currency.EUR] = 0.7
    assert rate_cache.force_refresh() == "live"
    assert provider.calls == 2
    assert rate_cache.get_rate("EUR") == 0.7


def test_unknown_currency_rejected_before_refresh(rate_cache, provider):
    with pytest.raises(InvalidCurrencyError):
        rate_cache.get_rate("XYZ")
    assert provider.calls == 0


def test_lowercase_code_accepted(rate_cache):
    assert rate_cache.get_rate("gbp") == 0.8


def test_list_rates_covers_every_currency(rate_cache):
    entries = rate_cache.list_rates()
    assert [e.to_currency for e in entries] == list(Currency)
    assert all(e.from_currency == Currency.USD for e in entries)
    assert all(e.fetched_at == START for e in entries)


def test_ensure_fresh_is_explicit_warmup(rate_cache, provider):
    rate_cache.ensure_fresh()
    rate_cache.ensure_fresh()
    assert provider.calls == 1


def test_ttl_must_be_positive(provider):
    with pytest.raises(ValueError):
        RateCache(provider, ttl_seconds=0)


class SlowProvider(FakeProvider):
    def fetch_usd_rates(self):
        time.sleep(0.05)
        return super().fetch_usd_rates()


def test_concurrent_cold_lookups_refresh_once(clock):
    provider = SlowProvider()
    cache = RateCache(provider, clock=clock)
    results = []

    def lookup():
        results.append(cache.get_rate("JPY"))

    threads = [threading.Thread(target=lookup) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert provider.calls == 1
    assert results == [150.0] * 8


def test_unexpected_provider_error_falls_back(clock):
    provider = FakeProvider(error=RuntimeError("decoder blew up"))
    cache = RateCache(provider, clock=clock)
    assert cache.get_rate("JPY") == FALLBACK_RATES[Currency.JPY]
    assert cache.last_source == "fallback"
    assert cache.last_fetch == START


def test_non_finite_upstream_rate_is_replaced_by_fallback(clock):
    rates = dict(FakeProvider().rates)
    rates[Currency.EUR] = float("inf")
    cache = RateCache(FakeProvider(rates=rates), clock=clock)
    assert cache.get_rate("EUR") == FALLBACK_RATES[Currency.EUR]
    assert cache.last_source == "partial"
