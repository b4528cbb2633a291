"""In-memory record stores for expenses and budgets.

Responsibilities
----------------
- Hold expense and budget records for the life of the process.
- Hand out copies so callers cannot mutate stored records directly.
- Keep `spent`, `created_at` and ids out of client control; `updated_at`
  advances on every mutation, including spent recomputation.
"""

from __future__ import annotations

import threading
import uuid
from datetime import date, datetime
from typing import Dict, Iterable, List, Optional

from budgetfx.core.clock import Clock, utc_now
from budgetfx.core.errors import NotFoundError
from budgetfx.models import (
    Budget,
    BudgetIn,
    BudgetUpdateIn,
    Expense,
    ExpenseIn,
    ExpenseUpdateIn,
)
from budgetfx.models.constants import validate_month


def _new_id() -> str:
    return uuid.uuid4().hex


class ExpenseStore:
    def __init__(self, expenses: Iterable[Expense] = ()):
        self._lock = threading.RLock()
        self._rows: Dict[str, Expense] = {e.id: e.model_copy(deep=True) for e in expenses}

    # ------------------------------------------------------------------
    # Queries
    def list_all(self) -> List[Expense]:
        with self._lock:
            return [e.model_copy(deep=True) for e in self._rows.values()]

    def get(self, expense_id: str) -> Expense:
        with self._lock:
            row = self._rows.get(expense_id)
            if row is None:
                raise NotFoundError("expense", expense_id)
            return row.model_copy(deep=True)

    def list_by_category(self, category: str) -> List[Expense]:
        wanted = category.lower()
        return [e for e in self.list_all() if e.category.lower() == wanted]

    def list_by_date_range(self, start: date, end: date) -> List[Expense]:
        if start > end:
            raise ValueError("start date cannot be after end date")
        return [e for e in self.list_all() if start <= e.date <= end]

    def search(self, query: str) -> List[Expense]:
        needle = query.lower()
        return [
            e for e in self.list_all()
            if needle in e.title.lower()
            or (e.description is not None and needle in e.description.lower())
        ]

    def recent(self, limit: int = 10) -> List[Expense]:
        return sorted(self.list_all(), key=lambda e: e.date, reverse=True)[:limit]

    def categories(self) -> List[str]:
        return sorted({e.category for e in self.list_all()})

    # ------------------------------------------------------------------
    # Mutations
    def create(self, payload: ExpenseIn) -> Expense:
        expense = Expense(id=_new_id(), **payload.model_dump())
        with self._lock:
            self._rows[expense.id] = expense
        return expense.model_copy(deep=True)

    def update(self, expense_id: str, payload: ExpenseUpdateIn) -> Expense:
        changes = payload.model_dump(exclude_unset=True)
        with self._lock:
            row = self._rows.get(expense_id)
            if row is None:
                raise NotFoundError("expense", expense_id)
            # Re-validate the merged record
            updated = Expense.model_validate({**row.model_dump(), **changes, "id": expense_id})
            self._rows[expense_id] = updated
            return updated.model_copy(deep=True)

    def delete(self, expense_id: str) -> None:
        with self._lock:
            if self._rows.pop(expense_id, None) is None:
                raise NotFoundError("expense", expense_id)


class BudgetStore:
    def __init__(self, clock: Clock = utc_now):
        self._lock = threading.RLock()
        self._rows: Dict[str, Budget] = {}
        self._clock = clock

    # ------------------------------------------------------------------
    # Queries
    def list_all(self) -> List[Budget]:
        with self._lock:
            return [b.model_copy(deep=True) for b in self._rows.values()]

    def list_by_month(self, month: str) -> List[Budget]:
        month = validate_month(month)
        return [b for b in self.list_all() if b.month == month]

    def get(self, budget_id: str) -> Budget:
        with self._lock:
            row = self._rows.get(budget_id)
            if row is None:
                raise NotFoundError("budget", budget_id)
            return row.model_copy(deep=True)

    # ------------------------------------------------------------------
    # Mutations
    def create(self, payload: BudgetIn, spent: Optional[float] = None) -> Budget:
        """Insert a budget; without `spent` it is left uncomputed (0, no stamp)."""
        now = self._clock()
        budget = Budget(
            id=_new_id(),
            **payload.model_dump(),
            spent=spent if spent is not None else 0.0,
            spent_computed_at=now if spent is not None else None,
            created_at=now,
            updated_at=now,
        )
        with self._lock:
            self._rows[budget.id] = budget
        return budget.model_copy(deep=True)

    def update(self, budget_id: str, payload: BudgetUpdateIn) -> Budget:
        changes = payload.model_dump(exclude_unset=True)
        with self._lock:
            row = self._rows.get(budget_id)
            if row is None:
                raise NotFoundError("budget", budget_id)
            updated = Budget.model_validate(
                {
                    **row.model_dump(),
                    **changes,
                    "id": budget_id,
                    "spent": row.spent,
                    "created_at": row.created_at,
                    "updated_at": self._clock(),
                }
            )
            self._rows[budget_id] = updated
            return updated.model_copy(deep=True)

    def set_spent(
        self, budget_id: str, spent: float, computed_at: Optional[datetime] = None
    ) -> Budget:
        with self._lock:
            row = self._rows.get(budget_id)
            if row is None:
                raise NotFoundError("budget", budget_id)
            now = computed_at or self._clock()
            row.spent = spent
            row.spent_computed_at = now
            row.updated_at = now
            return row.model_copy(deep=True)

    def delete(self, budget_id: str) -> None:
        with self._lock:
            if self._rows.pop(budget_id, None) is None:
                raise NotFoundError("budget", budget_id)
