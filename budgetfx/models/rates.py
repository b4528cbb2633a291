from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .constants import PIVOT_CURRENCY, Currency


class RateEntry(BaseModel):
    """USD -> `to_currency` rate. Cross rates are derived, never stored."""

    model_config = ConfigDict(frozen=True)

    from_currency: Currency = PIVOT_CURRENCY
    to_currency: Currency
    rate: float = Field(..., gt=0)
    fetched_at: datetime

    @field_validator("from_currency")
    @classmethod
    def pivot_only(cls, v: Currency) -> Currency:
        if v != PIVOT_CURRENCY:
            raise ValueError("rate entries are always USD based")
        return v
