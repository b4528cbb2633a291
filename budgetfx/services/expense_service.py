"""Expense service: store access plus change notification.

Listeners run synchronously after each successful create, update or delete so
dependent derived values (budget spent) are current when the call returns.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Callable, List, Optional

from budgetfx.db.memory import ExpenseStore
from budgetfx.models import Currency, Expense, ExpenseIn, ExpenseUpdateIn, parse_currency
from budgetfx.services.rates.conversion import Converter
from budgetfx.services.summary import SpendingSummary, summarize_spending

logger = logging.getLogger("budgetfx.expenses")

ChangeListener = Callable[[], None]


class ExpenseService:
    def __init__(self, store: ExpenseStore, converter: Converter):
        self._store = store
        self._converter = converter
        self._listeners: List[ChangeListener] = []

    def add_listener(self, listener: ChangeListener) -> None:
        self._listeners.append(listener)

    def _notify(self) -> None:
        for listener in self._listeners:
            listener()

    def list_expenses(
        self,
        category: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        search: Optional[str] = None,
    ) -> List[Expense]:
        if category:
            rows = self._store.list_by_category(category)
        elif start_date and end_date:
            rows = self._store.list_by_date_range(start_date, end_date)
        else:
            rows = self._store.list_all()
        if start_date:
            rows = [e for e in rows if e.date >= start_date]
        if end_date:
            rows = [e for e in rows if e.date <= end_date]
        if search:
            ids = {e.id for e in self._store.search(search)}
            rows = [e for e in rows if e.id in ids]
        return rows

    def recent_expenses(self, limit: int = 10) -> List[Expense]:
        """Most recent first, by expense date."""
        return self._store.recent(limit)

    def spending_summary(self, currency: Currency | str = Currency.USD) -> SpendingSummary:
        return summarize_spending(
            self._store.list_all(), self._converter, parse_currency(currency)
        )

    def get_expense(self, expense_id: str) -> Expense:
        return self._store.get(expense_id)

    def create_expense(self, payload: ExpenseIn) -> Expense:
        expense = self._store.create(payload)
        logger.info("expense created", extra={"expense_id": expense.id})
        self._notify()
        return expense

    def update_expense(self, expense_id: str, payload: ExpenseUpdateIn) -> Expense:
        expense = self._store.update(expense_id, payload)
        self._notify()
        return expense

    def delete_expense(self, expense_id: str) -> None:
        self._store.delete(expense_id)
        logger.info("expense deleted", extra={"expense_id": expense_id})
        self._notify()
