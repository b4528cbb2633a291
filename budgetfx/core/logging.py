"""JSON line logging with per-request context.

Every record carries the request id and route of the HTTP request that
produced it ("-" outside a request), so a rate refresh or budget recompute
triggered by a write can be traced back to that write. Domain fields passed
through `extra=` (see CONTEXT_FIELDS) are copied into the line.
"""
import json
import logging
import sys
import time
import uuid
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Dict

request_id_ctx: ContextVar[str | None] = ContextVar("request_id", default=None)
route_ctx: ContextVar[str | None] = ContextVar("route", default=None)

REQUEST_ID_HEADER = "X-Request-ID"

CONTEXT_FIELDS = (
    "currency",
    "source",
    "provider",
    "month",
    "budget_id",
    "expense_id",
    "count",
    "status",
    "duration_ms",
)

# uvicorn's access log repeats what the request middleware already records
_QUIET_LOGGERS = ("uvicorn.access",)


class RequestContextFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_ctx.get() or "-"
        record.route = route_ctx.get() or "-"
        return True


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        stamp = datetime.fromtimestamp(record.created, tz=timezone.utc)
        line: Dict[str, Any] = {
            "time": stamp.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "request_id": getattr(record, "request_id", "-"),
            "route": getattr(record, "route", "-"),
        }
        line.update(
            (name, getattr(record, name))
            for name in CONTEXT_FIELDS
            if getattr(record, name, None) is not None
        )
        if record.exc_info:
            line["exc_info"] = self.formatException(record.exc_info)
        # Enums and datetimes in extras fall back to str()
        return json.dumps(line, ensure_ascii=False, default=str)


class _BudgetFxHandler(logging.StreamHandler):
    """Marker type so repeated init only replaces our own handler."""


def init_logging(debug: bool = False) -> None:
    root = logging.getLogger()
    for handler in [h for h in root.handlers if isinstance(h, _BudgetFxHandler)]:
        root.removeHandler(handler)
    level = logging.DEBUG if debug else logging.INFO
    root.setLevel(level)

    handler = _BudgetFxHandler(sys.stdout)
    handler.setLevel(level)
    handler.addFilter(RequestContextFilter())
    handler.setFormatter(JsonFormatter())
    root.addHandler(handler)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


async def request_context_middleware(request, call_next):  # type: ignore
    """Bind request id and route for the request, then log one access line."""
    rid = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
    rid_token = request_id_ctx.set(rid)
    route_token = route_ctx.set(f"{request.method} {request.url.path}")
    logger = logging.getLogger("budgetfx.request")
    started = time.perf_counter()
    status = 500
    try:
        response = await call_next(request)
        status = response.status_code
        response.headers[REQUEST_ID_HEADER] = rid
        return response
    finally:
        logger.info(
            "request handled",
            extra={
                "status": status,
                "duration_ms": round((time.perf_counter() - started) * 1000, 1),
            },
        )
        route_ctx.reset(route_token)
        request_id_ctx.reset(rid_token)
