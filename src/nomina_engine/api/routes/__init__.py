"""API routes."""

from nomina_engine.api.routes.advances import router as advances_router
from nomina_engine.api.routes.employees import router as employees_router
from nomina_engine.api.routes.health import router as health_router
from nomina_engine.api.routes.novelties import router as novelties_router
from nomina_engine.api.routes.payroll import router as payroll_router
from nomina_engine.api.routes.rates import router as rates_router

__all__ = [
    "advances_router",
    "employees_router",
    "health_router",
    "novelties_router",
    "payroll_router",
    "rates_router",
]
