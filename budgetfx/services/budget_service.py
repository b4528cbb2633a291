"""Budget service: budget records plus their derived spend, warnings and summaries.

Recomputation policy is eager-on-write:
    - `start()` runs the first full pass; call it once when the app starts.
    - Every expense mutation made through `ExpenseService` calls
      `refresh_spent()` (the service registers itself as a listener).
    - Creating a budget computes its initial spent; changing a budget's
      category, month or currency recomputes that one budget.
Reads never trigger recomputation.
"""

from __future__ import annotations

import logging
import threading
from datetime import date
from typing import List, Optional

from budgetfx.core.errors import NotFoundError
from budgetfx.db.memory import BudgetStore, ExpenseStore
from budgetfx.models import Budget, BudgetIn, BudgetUpdateIn, BudgetWarning
from budgetfx.models.constants import current_month, validate_month
from budgetfx.services.aggregation import SpendAggregator
from budgetfx.services.alerts import WarningClassifier
from budgetfx.services.summary import BudgetSummary, summarize

logger = logging.getLogger("budgetfx.budgets")


class BudgetService:
    def __init__(
        self,
        budgets: BudgetStore,
        expenses: ExpenseStore,
        aggregator: SpendAggregator,
        classifier: WarningClassifier | None = None,
    ):
        self._budgets = budgets
        self._expenses = expenses
        self._aggregator = aggregator
        self._classifier = classifier or WarningClassifier()
        self._write_lock = threading.Lock()
        self._started = False

    # Lifecycle -------------------------------------------------
    def start(self) -> None:
        self.refresh_spent()
        self._started = True
        logger.info("budget service started")

    @property
    def started(self) -> bool:
        return self._started

    def refresh_spent(self) -> int:
        """Recompute spent for every budget; returns the number refreshed."""
        with self._write_lock:
            budgets = self._aggregator.refresh_all(
                self._budgets.list_all(), self._expenses.list_all()
            )
            count = 0
            for b in budgets:
                try:
                    self._budgets.set_spent(b.id, b.spent, b.spent_computed_at)
                except NotFoundError:
                    # deleted while the pass was running
                    continue
                count += 1
        return count

    def on_expenses_changed(self) -> None:
        self.refresh_spent()

    # Budget CRUD -----------------------------------------------
    def list_budgets(self, month: Optional[str] = None) -> List[Budget]:
        if month is None:
            return self._budgets.list_all()
        return self._budgets.list_by_month(month)

    def get_budget(self, budget_id: str) -> Budget:
        return self._budgets.get(budget_id)

    def create_budget(self, payload: BudgetIn) -> Budget:
        with self._write_lock:
            spent = self._aggregator.compute_spent(
                payload.category, payload.month, payload.currency, self._expenses.list_all()
            )
            budget = self._budgets.create(payload, spent=spent)
        logger.info("budget created", extra={"budget_id": budget.id, "month": budget.month})
        return budget

    def update_budget(self, budget_id: str, payload: BudgetUpdateIn) -> Budget:
        # A running refresh pass must not write back spent for the old fields
        with self._write_lock:
            budget = self._budgets.update(budget_id, payload)
            if payload.affects_spent:
                spent = self._aggregator.compute_spent(
                    budget.category, budget.month, budget.currency, self._expenses.list_all()
                )
                budget = self._budgets.set_spent(budget_id, spent)
        return budget

    def delete_budget(self, budget_id: str) -> None:
        self._budgets.delete(budget_id)

    # Derived views ---------------------------------------------
    def get_warnings(self, month: str) -> List[BudgetWarning]:
        month = validate_month(month)
        return self._classifier.classify_month(month, self._budgets.list_by_month(month))

    def get_current_month_warnings(self, today: date | None = None) -> List[BudgetWarning]:
        return self.get_warnings(current_month(today))

    def get_summary(self, month: Optional[str] = None) -> BudgetSummary:
        return summarize(self.list_budgets(month))

    def available_categories(self) -> List[str]:
        return self._expenses.categories()
