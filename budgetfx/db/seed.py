"""Demo records loaded at startup when `seed_demo_data` is enabled.

Three expenses dated today and three USD budgets for the current month.
Seeding only adds records to empty stores, so it can be safely re-run.
"""

from __future__ import annotations
from datetime import date

from budgetfx.models import BudgetIn, Currency, ExpenseIn, Tag, current_month

from .memory import BudgetStore, ExpenseStore


def demo_expenses(today: date | None = None) -> list[ExpenseIn]:
    today = today or date.today()
    essential = Tag(id="tag1", name="Essential", color="green")
    return [
        ExpenseIn(
            title="Groceries",
            amount=75.50,
            currency=Currency.USD,
            category="Food",
            date=today,
            description="Weekly grocery shopping",
            tags=[essential, Tag(id="tag2", name="Weekly", color="blue")],
        ),
        ExpenseIn(
            title="Gas",
            amount=45.00,
            currency=Currency.USD,
            category="Transportation",
            date=today,
            description="Fuel for car",
            tags=[essential, Tag(id="tag3", name="Vehicle", color="red")],
        ),
        ExpenseIn(
            title="Movie Tickets",
            amount=20.00,
            currency=Currency.GBP,
            category="Entertainment",
            date=today,
            description="Cinema tickets for weekend",
            tags=[Tag(id="tag4", name="Fun", color="purple")],
        ),
    ]


def demo_budgets(month: str | None = None) -> list[BudgetIn]:
    month = month or current_month()
    return [
        BudgetIn(name="Monthly Groceries", category="Food", amount=400, month=month),
        BudgetIn(name="Transportation Budget", category="Transportation", amount=200, month=month),
        BudgetIn(name="Entertainment Fund", category="Entertainment", amount=150, month=month),
    ]


def seed_stores(expenses: ExpenseStore, budgets: BudgetStore) -> None:
    # Budgets go in with spent=0; the owning service recomputes on start()
    if not expenses.list_all():
        for e in demo_expenses():
            expenses.create(e)
    if not budgets.list_all():
        for b in demo_budgets():
            budgets.create(b)
