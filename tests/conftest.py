"""Pytest configuration and fixtures."""
from datetime import datetime, timezone

import pytest

from budgetfx.core.clock import FrozenClock
from budgetfx.core.config import Settings
from budgetfx.models import Budget, Currency, Expense
from budgetfx.services.rates.base import RateProvider
from budgetfx.services.rates.cache_service import RateCache
from budgetfx.services.rates.conversion import Converter

# Fixed snapshot, units per 1 USD
SNAPSHOT = {
    Currency.USD: 1.0,
    Currency.EUR: 0.9,
    Currency.GBP: 0.8,
    Currency.JPY: 150.0,
    Currency.CAD: 1.35,
    Currency.AUD: 1.5,
    Currency.CHF: 0.88,
    Currency.CNY: 7.2,
    Currency.INR: 83.0,
    Currency.SGD: 1.35,
    Currency.HKD: 7.8,
    Currency.NZD: 1.6,
}

START = datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)


class FakeProvider(RateProvider):
    """Provider returning a fixed table, or raising `error` when set."""

    name = "fake"

    def __init__(self, rates=None, error=None):
        self.rates = dict(SNAPSHOT if rates is None else rates)
        self.error = error
        self.calls = 0

    def fetch_usd_rates(self):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return dict(self.rates)


@pytest.fixture
def clock():
    return FrozenClock(START)


@pytest.fixture
def provider():
    return FakeProvider()


@pytest.fixture
def rate_cache(provider, clock):
    return RateCache(provider, ttl_seconds=3600, clock=clock)


@pytest.fixture
def converter(rate_cache):
    return Converter(rate_cache)


@pytest.fixture
def settings():
    return Settings(_env_file=None, exchange_rate_provider="static", seed_demo_data=False)


def make_expense(id="e1", amount=10.0, currency="USD", category="Food", date="2024-01-10", **kw):
    return Expense(
        id=id,
        title=kw.pop("title", f"expense {id}"),
        amount=amount,
        currency=currency,
        category=category,
        date=date,
        **kw,
    )


def make_budget(id="b1", amount=400.0, spent=0.0, month="2024-01", category="Food", **kw):
    return Budget(
        id=id,
        name=kw.pop("name", f"budget {id}"),
        category=category,
        amount=amount,
        currency=kw.pop("currency", "USD"),
        month=month,
        spent=spent,
        created_at=START,
        updated_at=START,
        **kw,
    )
