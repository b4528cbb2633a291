import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from .core import errors
from .core.clock import Clock, utc_now
from .core.config import Settings, get_settings
from .core.logging import init_logging, request_context_middleware
from .routers import budgets, currency, expenses
from .services.container import build_services
from .services.rates.base import RateProvider


def create_app(
    settings_override: Settings | None = None,
    provider: RateProvider | None = None,
    clock: Clock = utc_now,
) -> FastAPI:
    """Application factory.

    settings_override: pass an already constructed Settings instance for tests.
    provider: replaces the configured upstream rate provider (tests inject fakes).
    """
    if settings_override is not None:
        settings_override.init_post_load()
    settings = settings_override or get_settings()
    # Initialize logging early
    init_logging(debug=settings.debug)

    services = build_services(settings, provider=provider, clock=clock)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Warm the rate cache and compute spent once before serving
        services.start()
        logging.getLogger("budgetfx").info("startup complete")
        yield

    app = FastAPI(
        title=settings.app_name,
        debug=settings.debug,
        version=settings.version,
        lifespan=lifespan,
    )
    app.state.services = services

    # Middleware (request id / structured logging)
    app.middleware("http")(request_context_middleware)

    # Error handlers
    app.add_exception_handler(StarletteHTTPException, errors.http_error_handler)
    app.add_exception_handler(errors.BudgetFxError, errors.domain_error_handler)
    app.add_exception_handler(RequestValidationError, errors.validation_error_handler)
    app.add_exception_handler(Exception, errors.server_error_handler)

    # Routers
    app.include_router(currency.router)
    app.include_router(expenses.router)
    app.include_router(budgets.router)

    @app.get("/")
    async def root():
        return {"message": f"{settings.app_name} API", "version": settings.version}

    return app
