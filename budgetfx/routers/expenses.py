from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from budgetfx.models import Expense, ExpenseIn, ExpenseUpdateIn
from budgetfx.routers.deps import get_expense_service
from budgetfx.services.expense_service import ExpenseService
from budgetfx.services.summary import SpendingSummary

router = APIRouter(prefix="/expenses", tags=["expenses"])

# Mutations recompute budget spent before returning, which may refresh rates;
# handlers are plain `def` so that work runs in the threadpool.


@router.post("/", response_model=Expense, status_code=201, summary="Create an expense")
def create_expense(payload: ExpenseIn, svc: ExpenseService = Depends(get_expense_service)):
    return svc.create_expense(payload)


@router.get("/", response_model=List[Expense], summary="List expenses with optional filters")
def list_expenses(
    category: Optional[str] = Query(None, description="Filter: category (case-insensitive)"),
    start_date: Optional[date] = Query(None, description="Filter: start date inclusive"),
    end_date: Optional[date] = Query(None, description="Filter: end date inclusive"),
    q: Optional[str] = Query(None, description="Search title and description"),
    svc: ExpenseService = Depends(get_expense_service),
):
    if start_date and end_date and start_date > end_date:
        raise HTTPException(status_code=400, detail="start_date cannot be after end_date")
    return svc.list_expenses(category=category, start_date=start_date, end_date=end_date, search=q)


@router.get("/recent", response_model=List[Expense], summary="Most recent expenses")
def recent_expenses(
    limit: int = Query(10, ge=1, le=100),
    svc: ExpenseService = Depends(get_expense_service),
):
    return svc.recent_expenses(limit)


@router.get("/summary", response_model=SpendingSummary, summary="Spending totals in one currency")
def spending_summary(
    currency: str = Query("USD", description="Currency to report totals in"),
    svc: ExpenseService = Depends(get_expense_service),
):
    return svc.spending_summary(currency)


@router.get("/{expense_id}", response_model=Expense, summary="Get an expense")
def get_expense(expense_id: str, svc: ExpenseService = Depends(get_expense_service)):
    return svc.get_expense(expense_id)


@router.patch("/{expense_id}", response_model=Expense, summary="Edit an expense (partial)")
def patch_expense(
    expense_id: str,
    payload: ExpenseUpdateIn,
    svc: ExpenseService = Depends(get_expense_service),
):
    return svc.update_expense(expense_id, payload)


@router.delete("/{expense_id}", status_code=204, summary="Delete an expense")
def delete_expense(expense_id: str, svc: ExpenseService = Depends(get_expense_service)):
    svc.delete_expense(expense_id)
    return None
