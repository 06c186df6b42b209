"""FastAPI application factory."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from nomina_engine import __version__
from nomina_engine.api.routes import (
    advances_router,
    employees_router,
    health_router,
    novelties_router,
    payroll_router,
    rates_router,
)
from nomina_engine.calculators.dates import InvalidMonthError
from nomina_engine.database import create_schema, dispose_db
from nomina_engine.services import (
    AdvanceNotFoundError,
    EmployeeNotFoundError,
    NoveltyNotFoundError,
    PayrollNotFoundError,
)

logger = logging.getLogger(__name__)

_NOT_FOUND_CODES: dict[type[Exception], str] = {
    EmployeeNotFoundError: "EMPLOYEE_NOT_FOUND",
    NoveltyNotFoundError: "NOVELTY_NOT_FOUND",
    AdvanceNotFoundError: "ADVANCE_NOT_FOUND",
    PayrollNotFoundError: "PAYROLL_NOT_FOUND",
}


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler."""
    # Startup
    await create_schema()
    yield
    # Shutdown
    await dispose_db()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="Nomina Engine API",
        description="Colombian monthly payroll",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Exception handlers
    async def not_found_handler(request: Request, exc: Exception) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"detail": str(exc), "code": _NOT_FOUND_CODES[type(exc)]},
        )

    for exc_class in _NOT_FOUND_CODES:
        app.add_exception_handler(exc_class, not_found_handler)

    @app.exception_handler(InvalidMonthError)
    async def invalid_month_handler(request: Request, exc: InvalidMonthError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"detail": str(exc), "code": "INVALID_MONTH"},
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Handle unexpected exceptions."""
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "detail": "An unexpected error occurred",
                "code": "INTERNAL_ERROR",
            },
        )

    # Include routers
    app.include_router(health_router)
    for router in (
        employees_router,
        novelties_router,
        advances_router,
        rates_router,
        payroll_router,
    ):
        app.include_router(router, prefix="/api/v1")

    return app


# Default app instance for uvicorn
app = create_app()
