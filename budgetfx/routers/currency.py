from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from budgetfx.models import RateEntry
from budgetfx.routers.deps import get_converter, get_rate_cache
from budgetfx.services.rates.cache_service import RateCache
from budgetfx.services.rates.conversion import ConversionResult, Converter

"""Currency router.

Endpoints:
    - GET  /currency/rates    -> all USD based rates plus last refresh time
    - GET  /currency/convert  -> convert ?amount=&from=&to=
    - POST /currency/refresh  -> force a refresh regardless of TTL

Handlers are plain `def` so a blocking upstream refresh runs in the threadpool.
"""

router = APIRouter(prefix="/currency", tags=["currency"])


class RatesOut(BaseModel):
    rates: List[RateEntry]
    last_updated: Optional[datetime]
    source: Optional[str]


class RefreshOut(BaseModel):
    status: str
    source: str
    last_updated: Optional[datetime]


@router.get("/rates", response_model=RatesOut, summary="List current exchange rates")
def list_rates(cache: RateCache = Depends(get_rate_cache)):
    rates = cache.list_rates()
    return RatesOut(rates=rates, last_updated=cache.last_fetch, source=cache.last_source)


@router.get("/convert", response_model=ConversionResult, summary="Convert an amount")
def convert(
    amount: float = Query(..., description="Amount in the source currency"),
    from_currency: str = Query(..., alias="from", examples=["GBP"]),
    to_currency: str = Query(..., alias="to", examples=["USD"]),
    converter: Converter = Depends(get_converter),
):
    return converter.convert_with_details(amount, from_currency, to_currency)


@router.post("/refresh", response_model=RefreshOut, summary="Force refresh exchange rates")
def refresh_rates(cache: RateCache = Depends(get_rate_cache)):
    source = cache.force_refresh()
    return RefreshOut(status="ok", source=source, last_updated=cache.last_fetch)
