"""Domain exceptions and their HTTP translations.

Services raise the domain exceptions below; the FastAPI handlers registered in
`budgetfx.main` turn them into JSON error bodies of the form
``{"error": <code>, "detail": <text>}``.
"""

import logging

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette import status

logger = logging.getLogger("budgetfx.errors")


class BudgetFxError(Exception):
    """Base class for all domain errors."""

    code = "error"


class InvalidCurrencyError(BudgetFxError, ValueError):
    code = "invalid_currency"

    def __init__(self, currency: object):
        self.currency = currency
        super().__init__(f"unsupported currency '{currency}'")


class InvalidMonthFormatError(BudgetFxError, ValueError):
    code = "invalid_month_format"

    def __init__(self, month: object):
        self.month = month
        super().__init__(f"month must be in YYYY-MM format, got '{month}'")


class NotFoundError(BudgetFxError, LookupError):
    code = "not_found"

    def __init__(self, kind: str, record_id: str):
        self.kind = kind
        self.record_id = record_id
        super().__init__(f"{kind} '{record_id}' not found")


class RateProviderError(BudgetFxError):
    """Upstream rate source failed (transport, status or payload).

    Always recovered inside the rate cache; never reaches API callers.
    """

    code = "rate_provider_error"


def _error_body(code: str, detail) -> dict:
    return {"error": code, "detail": detail}


def http_error_handler(request: Request, exc):  # type: ignore
    if exc.status_code == status.HTTP_404_NOT_FOUND and exc.detail == "Not Found":
        # Starlette's default for unmatched routes
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content=_error_body(
                "not_found", f"No route for {request.method} {request.url.path}"
            ),
        )
    code = "not_found" if exc.status_code == status.HTTP_404_NOT_FOUND else "http_error"
    return JSONResponse(status_code=exc.status_code, content=_error_body(code, exc.detail))


def domain_error_handler(request: Request, exc: BudgetFxError):  # type: ignore
    if isinstance(exc, NotFoundError):
        status_code = status.HTTP_404_NOT_FOUND
    else:
        status_code = status.HTTP_400_BAD_REQUEST
    return JSONResponse(status_code=status_code, content=_error_body(exc.code, str(exc)))


def validation_error_handler(request: Request, exc: RequestValidationError):  # type: ignore
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=_error_body("validation_error", jsonable_errors(exc)),
    )


def jsonable_errors(exc: RequestValidationError) -> list:
    # pydantic v2 puts the raised exception object under ctx["error"]
    errors = []
    for err in exc.errors():
        err = dict(err)
        ctx = err.get("ctx")
        if ctx:
            err["ctx"] = {k: str(v) for k, v in ctx.items()}
        errors.append(err)
    return errors


def server_error_handler(request: Request, exc: Exception):  # type: ignore
    logger.exception("unhandled exception")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body("internal_error", "An unexpected error occurred."),
    )
