from __future__ import annotations

from datetime import date as date_type
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from .constants import Currency, parse_currency

TagColor = Literal["blue", "green", "red", "yellow", "purple", "pink", "indigo", "gray"]


class Tag(BaseModel):
    id: str
    name: str
    color: TagColor = "gray"


class ExpenseIn(BaseModel):
    title: str
    amount: float = Field(..., gt=0)
    currency: Currency = Currency.USD
    category: str
    date: date_type
    description: Optional[str] = None
    tags: List[Tag] = Field(default_factory=list)

    @field_validator("currency", mode="before")
    @classmethod
    def valid_currency(cls, v):
        return parse_currency(v)

    @field_validator("title", "category")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("cannot be empty")
        return v.strip()


class Expense(ExpenseIn):
    id: str


class ExpenseUpdateIn(BaseModel):
    """Partial update; at least one field must be provided."""

    title: Optional[str] = None
    amount: Optional[float] = Field(None, gt=0)
    currency: Optional[Currency] = None
    category: Optional[str] = None
    date: Optional[date_type] = None
    description: Optional[str] = None
    tags: Optional[List[Tag]] = None

    @field_validator("title", "amount", "currency", "category", "date", "tags", mode="before")
    @classmethod
    def not_null(cls, v):
        # omitted means unchanged; an explicit null is not a value
        if v is None:
            raise ValueError("cannot be null")
        return v

    @field_validator("currency", mode="before")
    @classmethod
    def valid_currency(cls, v):
        return parse_currency(v) if v is not None else v

    @field_validator("title", "category")
    @classmethod
    def not_blank(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            raise ValueError("cannot be empty")
        return v.strip() if v is not None else None

    @model_validator(mode="after")
    def at_least_one(self) -> "ExpenseUpdateIn":
        if not self.model_fields_set:
            raise ValueError("at least one field must be provided for update")
        return self
