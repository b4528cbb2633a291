"""Pydantic domain models for the multi-currency budget tracker."""

from .constants import (
    PIVOT_CURRENCY,
    Currency,
    current_month,
    month_key,
    parse_currency,
    validate_month,
)  # re-export
from .expense import Expense, ExpenseIn, ExpenseUpdateIn, Tag
from .budget import Budget, BudgetIn, BudgetUpdateIn, BudgetWarning
from .rates import RateEntry

__all__ = [
    "PIVOT_CURRENCY",
    "Currency",
    "current_month",
    "month_key",
    "parse_currency",
    "validate_month",
    "Expense",
    "ExpenseIn",
    "ExpenseUpdateIn",
    "Tag",
    "Budget",
    "BudgetIn",
    "BudgetUpdateIn",
    "BudgetWarning",
    "RateEntry",
]
