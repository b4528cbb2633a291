from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Dict, Iterable, List

from budgetfx.models import Budget, Currency, Expense
from budgetfx.services.money import percentage, round2
from budgetfx.services.rates.conversion import Converter

"""Budget and expense roll-ups.

Budget amounts are summed as stored, without currency conversion, the same way
the budgets screen adds them up. Expense spending is converted into one
requested currency first. Category breakdown keeps the order in which each
category first appears in the input; callers wanting a stable order sort it.
"""


@dataclass(frozen=True)
class CategoryBreakdownItem:
    category: str
    budget_count: int
    total_budget: float
    total_spent: float
    utilization: float


@dataclass(frozen=True)
class BudgetSummary:
    total_budgets: int
    total_budget_amount: float
    total_spent: float
    remaining_amount: float
    average_utilization: float
    category_breakdown: List[CategoryBreakdownItem] = field(default_factory=list)


@dataclass
class _Bucket:
    budget_count: int = 0
    total_budget: float = 0.0
    total_spent: float = 0.0


def summarize(budgets: Iterable[Budget]) -> BudgetSummary:
    budgets = list(budgets)
    total_amount = sum(b.amount for b in budgets)
    total_spent = sum(b.spent for b in budgets)

    buckets: Dict[str, _Bucket] = {}
    for b in budgets:
        bucket = buckets.setdefault(b.category, _Bucket())
        bucket.budget_count += 1
        bucket.total_budget += b.amount
        bucket.total_spent += b.spent

    breakdown = [
        CategoryBreakdownItem(
            category=category,
            budget_count=bucket.budget_count,
            total_budget=round2(bucket.total_budget),
            total_spent=round2(bucket.total_spent),
            utilization=percentage(bucket.total_spent, bucket.total_budget),
        )
        for category, bucket in buckets.items()
    ]
    return BudgetSummary(
        total_budgets=len(budgets),
        total_budget_amount=round2(total_amount),
        total_spent=round2(total_spent),
        remaining_amount=round2(total_amount - total_spent),
        average_utilization=percentage(total_spent, total_amount),
        category_breakdown=breakdown,
    )


@dataclass(frozen=True)
class CategorySpend:
    category: str
    count: int
    total: float


@dataclass(frozen=True)
class SpendingSummary:
    currency: Currency
    total_expenses: int
    total_amount: float
    average_amount: float
    category_summary: List[CategorySpend] = field(default_factory=list)


def summarize_spending(
    expenses: Iterable[Expense], converter: Converter, currency: Currency
) -> SpendingSummary:
    """Expense totals in `currency`, each expense converted at the cached rate."""
    counts: Dict[str, int] = {}
    amounts: Dict[str, List[float]] = {}
    converted: List[float] = []
    for e in expenses:
        value = converter.convert(e.amount, e.currency, currency)
        converted.append(value)
        counts[e.category] = counts.get(e.category, 0) + 1
        amounts.setdefault(e.category, []).append(value)

    total = math.fsum(converted)
    return SpendingSummary(
        currency=currency,
        total_expenses=len(converted),
        total_amount=round2(total),
        average_amount=round2(total / len(converted)) if converted else 0.0,
        category_summary=[
            CategorySpend(category=c, count=counts[c], total=round2(math.fsum(amounts[c])))
            for c in counts
        ],
    )
