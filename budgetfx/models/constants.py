"""Domain constants and enumerations for validation."""

import re
from datetime import date, datetime
from enum import Enum
from typing import Union

from budgetfx.core.errors import InvalidCurrencyError, InvalidMonthFormatError


class Currency(str, Enum):
    USD = "USD"
    EUR = "EUR"
    GBP = "GBP"
    JPY = "JPY"
    CAD = "CAD"
    AUD = "AUD"
    CHF = "CHF"
    CNY = "CNY"
    INR = "INR"
    SGD = "SGD"
    HKD = "HKD"
    NZD = "NZD"


PIVOT_CURRENCY = Currency.USD

MONTH_PATTERN = re.compile(r"^\d{4}-\d{2}$")

# Warning thresholds, percent of budget used
WARN_INFO_PCT = 50
WARN_WARNING_PCT = 80
WARN_DANGER_PCT = 100


def parse_currency(code: Union[str, Currency]) -> Currency:
    if isinstance(code, Currency):
        return code
    if not isinstance(code, str):
        raise InvalidCurrencyError(code)
    try:
        return Currency(code.strip().upper())
    except ValueError:
        raise InvalidCurrencyError(code) from None


def validate_month(month: str) -> str:
    """Return `month` unchanged if it is a 7-character YYYY-MM key."""
    if not isinstance(month, str) or not MONTH_PATTERN.match(month):
        raise InvalidMonthFormatError(month)
    if not 1 <= int(month[5:7]) <= 12:
        raise InvalidMonthFormatError(month)
    return month


def month_key(value: Union[date, datetime, str]) -> str:
    """Year-month key of a date, rebuilt from its parsed parts."""
    if isinstance(value, str):
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    return f"{value.year:04d}-{value.month:02d}"


def current_month(today: date | None = None) -> str:
    return month_key(today or date.today())
