"""SQLAlchemy ORM models."""

from nomina_engine.models.base import Base, TimestampMixin
from nomina_engine.models.employee import EmployeeRecord
from nomina_engine.models.payroll import (
    AdvanceRecord,
    NoveltyRecord,
    PayrollSnapshot,
    RatesRecord,
)

__all__ = [
    "AdvanceRecord",
    "Base",
    "EmployeeRecord",
    "NoveltyRecord",
    "PayrollSnapshot",
    "RatesRecord",
    "TimestampMixin",
]
