"""Budget threshold warnings.

Levels by percent of budget used:
  info     50 <= pct < 80
  warning  80 <= pct < 100
  danger   pct >= 100
Budgets under 50% produce no warning. Month listings are sorted by percentage,
highest first; ties keep input order (stable sort).
"""

from __future__ import annotations
from typing import Iterable, List, Optional

from budgetfx.models import Budget, BudgetWarning
from budgetfx.models.budget import WarningLevel
from budgetfx.models.constants import (
    WARN_DANGER_PCT,
    WARN_INFO_PCT,
    WARN_WARNING_PCT,
    validate_month,
)
from budgetfx.services.money import percentage


def warning_level(pct: float) -> Optional[WarningLevel]:
    if pct >= WARN_DANGER_PCT:
        return "danger"
    if pct >= WARN_WARNING_PCT:
        return "warning"
    if pct >= WARN_INFO_PCT:
        return "info"
    return None


class WarningClassifier:
    def classify(self, budget: Budget) -> Optional[BudgetWarning]:
        pct = percentage(budget.spent, budget.amount)
        level = warning_level(pct)
        if level is None:
            return None
        return BudgetWarning(
            budget_id=budget.id,
            budget_name=budget.name,
            category=budget.category,
            percentage=pct,
            amount=budget.spent,
            budget_amount=budget.amount,
            currency=budget.currency,
            warning_level=level,
        )

    def classify_month(self, month: str, budgets: Iterable[Budget]) -> List[BudgetWarning]:
        month = validate_month(month)
        warnings = [
            w for w in (self.classify(b) for b in budgets if b.month == month)
            if w is not None
        ]
        warnings.sort(key=lambda w: w.percentage, reverse=True)
        return warnings


__all__ = ["WarningClassifier", "warning_level"]
