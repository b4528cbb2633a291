from __future__ import annotations

from dataclasses import dataclass

from budgetfx.core.clock import Clock, utc_now
from budgetfx.core.config import Settings
from budgetfx.db.memory import BudgetStore, ExpenseStore
from budgetfx.db.seed import seed_stores
from budgetfx.services.aggregation import SpendAggregator
from budgetfx.services.budget_service import BudgetService
from budgetfx.services.expense_service import ExpenseService
from budgetfx.services.rates.base import RateProvider
from budgetfx.services.rates.cache_service import RateCache, build_rate_cache
from budgetfx.services.rates.conversion import Converter

"""Explicit object graph for one application instance.

Each app gets its own cache, stores and services; nothing here is a module
level singleton, so tests can build isolated graphs with a fake provider.
"""


@dataclass
class ServiceContainer:
    settings: Settings
    rate_cache: RateCache
    converter: Converter
    expenses: ExpenseService
    budgets: BudgetService

    def start(self) -> None:
        self.rate_cache.ensure_fresh()
        self.budgets.start()


def build_services(
    settings: Settings,
    provider: RateProvider | None = None,
    clock: Clock = utc_now,
) -> ServiceContainer:
    rate_cache = build_rate_cache(settings, provider=provider, clock=clock)
    converter = Converter(rate_cache)
    expense_store = ExpenseStore()
    budget_store = BudgetStore(clock=clock)
    if settings.seed_demo_data:
        seed_stores(expense_store, budget_store)

    expenses = ExpenseService(expense_store, converter)
    budgets = BudgetService(
        budget_store, expense_store, SpendAggregator(converter, clock=clock)
    )
    expenses.add_listener(budgets.on_expenses_changed)
    return ServiceContainer(
        settings=settings,
        rate_cache=rate_cache,
        converter=converter,
        expenses=expenses,
        budgets=budgets,
    )
