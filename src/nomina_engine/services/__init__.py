"""Services layer."""

from nomina_engine.services.payroll_service import (
    AdvanceNotFoundError,
    EmployeeNotFoundError,
    NoveltyNotFoundError,
    PayrollNotFoundError,
    PayrollService,
)

__all__ = [
    "AdvanceNotFoundError",
    "EmployeeNotFoundError",
    "NoveltyNotFoundError",
    "PayrollNotFoundError",
    "PayrollService",
]
