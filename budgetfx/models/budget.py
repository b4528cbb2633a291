from __future__ import annotations

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .constants import Currency, parse_currency, validate_month

WarningLevel = Literal["info", "warning", "danger"]


class BudgetIn(BaseModel):
    name: str
    category: str
    amount: float = Field(..., gt=0)
    currency: Currency = Currency.USD
    month: str

    @field_validator("currency", mode="before")
    @classmethod
    def valid_currency(cls, v):
        return parse_currency(v)

    @field_validator("month")
    @classmethod
    def valid_month(cls, v: str) -> str:
        return validate_month(v)

    @field_validator("name", "category")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("cannot be empty")
        return v.strip()


class Budget(BudgetIn):
    """A monthly category budget.

    `spent` is a cached derived value written only by the spend aggregator;
    `spent_computed_at` is None until the first recomputation.
    """

    id: str
    spent: float = 0.0
    spent_computed_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class BudgetUpdateIn(BaseModel):
    """Partial update. `spent`, `id` and timestamps are not client settable."""

    model_config = ConfigDict(extra="forbid")

    name: Optional[str] = None
    category: Optional[str] = None
    amount: Optional[float] = Field(None, gt=0)
    currency: Optional[Currency] = None
    month: Optional[str] = None

    @field_validator("name", "category", "amount", "currency", "month", mode="before")
    @classmethod
    def not_null(cls, v):
        if v is None:
            raise ValueError("cannot be null")
        return v

    @field_validator("currency", mode="before")
    @classmethod
    def valid_currency(cls, v):
        return parse_currency(v) if v is not None else v

    @field_validator("month")
    @classmethod
    def valid_month(cls, v: Optional[str]) -> Optional[str]:
        return validate_month(v) if v is not None else v

    @field_validator("name", "category")
    @classmethod
    def not_blank(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            raise ValueError("cannot be empty")
        return v.strip() if v is not None else None

    @model_validator(mode="after")
    def at_least_one(self) -> "BudgetUpdateIn":
        if not self.model_fields_set:
            raise ValueError("at least one field must be provided for update")
        return self

    @property
    def affects_spent(self) -> bool:
        return bool({"category", "month", "currency"} & self.model_fields_set)


class BudgetWarning(BaseModel):
    budget_id: str
    budget_name: str
    category: str
    percentage: float
    amount: float
    budget_amount: float
    currency: Currency
    warning_level: WarningLevel
