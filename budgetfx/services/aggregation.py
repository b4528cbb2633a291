"""Budget spend aggregation.

A budget's `spent` is the sum of its category's expenses for its month,
converted into the budget currency and rounded to cents. Matching is
case-insensitive on category; the month is rebuilt from each expense's parsed
date rather than compared as a string prefix.
"""

from __future__ import annotations

import logging
import math
import threading
from typing import Iterable, List

from budgetfx.core.clock import Clock, utc_now
from budgetfx.models import Budget, Currency, Expense
from budgetfx.models.constants import month_key, parse_currency, validate_month
from budgetfx.services.money import round2
from budgetfx.services.rates.conversion import Converter

logger = logging.getLogger("budgetfx.aggregation")


def matching_expenses(
    category: str, month: str, expenses: Iterable[Expense]
) -> List[Expense]:
    wanted = category.lower()
    return [
        e for e in expenses
        if e.category.lower() == wanted and month_key(e.date) == month
    ]


class SpendAggregator:
    def __init__(self, converter: Converter, clock: Clock = utc_now):
        self._converter = converter
        self._clock = clock
        self._lock = threading.Lock()

    def compute_spent(
        self,
        category: str,
        month: str,
        target_currency: Currency | str,
        expenses: Iterable[Expense],
    ) -> float:
        month = validate_month(month)
        target_currency = parse_currency(target_currency)
        converted = [
            self._converter.convert(e.amount, e.currency, target_currency)
            for e in matching_expenses(category, month, expenses)
        ]
        # fsum keeps the total independent of expense order
        return round2(math.fsum(converted))

    def refresh_all(self, budgets: Iterable[Budget], expenses: Iterable[Expense]) -> List[Budget]:
        """Recompute `spent` on every budget in place and stamp it.

        Passes are serialized so two refreshes never interleave writes.
        """
        expenses = list(expenses)
        with self._lock:
            refreshed = []
            for budget in budgets:
                budget.spent = self.compute_spent(
                    budget.category, budget.month, budget.currency, expenses
                )
                now = self._clock()
                budget.spent_computed_at = now
                budget.updated_at = now
                refreshed.append(budget)
        logger.debug("recomputed spent for %d budgets", len(refreshed), extra={"count": len(refreshed)})
        return refreshed
