from typing import List, Optional

from fastapi import APIRouter, Depends, Path, Query
from pydantic import BaseModel

from budgetfx.models import Budget, BudgetIn, BudgetUpdateIn, BudgetWarning
from budgetfx.routers.deps import get_budget_service
from budgetfx.services.budget_service import BudgetService
from budgetfx.services.summary import BudgetSummary

router = APIRouter(prefix="/budgets", tags=["budgets"])

MONTH_PATH = Path(..., description="Month key in YYYY-MM form", examples=["2024-01"])


class RefreshOut(BaseModel):
    status: str
    refreshed: int


# Fixed paths are declared before /{budget_id} so they are not shadowed.
@router.get("/warnings", response_model=List[BudgetWarning], summary="Current month warnings")
def current_warnings(svc: BudgetService = Depends(get_budget_service)):
    return svc.get_current_month_warnings()


@router.get(
    "/warnings/{month}", response_model=List[BudgetWarning], summary="Warnings for a month"
)
def month_warnings(month: str = MONTH_PATH, svc: BudgetService = Depends(get_budget_service)):
    return svc.get_warnings(month)


@router.get("/summary", response_model=BudgetSummary, summary="Summary over all budgets")
def overall_summary(svc: BudgetService = Depends(get_budget_service)):
    return svc.get_summary()


@router.get("/summary/{month}", response_model=BudgetSummary, summary="Summary for a month")
def month_summary(month: str = MONTH_PATH, svc: BudgetService = Depends(get_budget_service)):
    return svc.get_summary(month)


@router.get("/categories", response_model=List[str], summary="Categories seen in expenses")
def categories(svc: BudgetService = Depends(get_budget_service)):
    return svc.available_categories()


@router.post("/refresh", response_model=RefreshOut, summary="Recompute spent for all budgets")
def refresh_spent(svc: BudgetService = Depends(get_budget_service)):
    return RefreshOut(status="ok", refreshed=svc.refresh_spent())


@router.get("/", response_model=List[Budget], summary="List budgets, optionally by month")
def list_budgets(
    month: Optional[str] = Query(None, description="Filter: YYYY-MM"),
    svc: BudgetService = Depends(get_budget_service),
):
    return svc.list_budgets(month)


@router.post("/", response_model=Budget, status_code=201, summary="Create a budget")
def create_budget(payload: BudgetIn, svc: BudgetService = Depends(get_budget_service)):
    return svc.create_budget(payload)


@router.get("/{budget_id}", response_model=Budget, summary="Get a budget")
def get_budget(budget_id: str, svc: BudgetService = Depends(get_budget_service)):
    return svc.get_budget(budget_id)


@router.put("/{budget_id}", response_model=Budget, summary="Update a budget (partial)")
def update_budget(
    budget_id: str,
    payload: BudgetUpdateIn,
    svc: BudgetService = Depends(get_budget_service),
):
    return svc.update_budget(budget_id, payload)


@router.delete("/{budget_id}", status_code=204, summary="Delete a budget")
def delete_budget(budget_id: str, svc: BudgetService = Depends(get_budget_service)):
    svc.delete_budget(budget_id)
    return None
