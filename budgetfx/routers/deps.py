from fastapi import Request

from budgetfx.services.budget_service import BudgetService
from budgetfx.services.container import ServiceContainer
from budgetfx.services.expense_service import ExpenseService
from budgetfx.services.rates.cache_service import RateCache
from budgetfx.services.rates.conversion import Converter


def get_services(request: Request) -> ServiceContainer:
    return request.app.state.services


def get_rate_cache(request: Request) -> RateCache:
    return get_services(request).rate_cache


def get_converter(request: Request) -> Converter:
    return get_services(request).converter


def get_budget_service(request: Request) -> BudgetService:
    return get_services(request).budgets


def get_expense_service(request: Request) -> ExpenseService:
    return get_services(request).expenses
