"""Calendar helpers for month keys and employment windows."""

from __future__ import annotations

import calendar
import math
import re
from datetime import date, datetime, time, timedelta, timezone

from nomina_engine.calculators.types import Employee

MONTH_KEY_RE = re.compile(r"^\d{4}-(0[1-9]|1[0-2])$")

MONTH_NAMES_ES = (
    "Enero",
    "Febrero",
    "Marzo",
    "Abril",
    "Mayo",
    "Junio",
    "Julio",
    "Agosto",
    "Septiembre",
    "Octubre",
    "Noviembre",
    "Diciembre",
)

# Colombia is UTC-5 with no daylight saving
COLOMBIA_OFFSET = timedelta(hours=5)


class InvalidMonthError(ValueError):
    """Raised when a month key is not YYYY-MM."""

    def __init__(self, value: str):
        self.value = value
        super().__init__(f"Invalid month key {value!r}, expected YYYY-MM")


def parse_month(month: str) -> tuple[int, int]:
    """Split a YYYY-MM key into (year, month)."""
    if not MONTH_KEY_RE.match(month or ""):
        raise InvalidMonthError(month)
    year, mon = month.split("-")
    return int(year), int(mon)


def month_key(day: date) -> str:
    return day.strftime("%Y-%m")


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def month_bounds(month: str) -> tuple[date, date]:
    """First and last calendar day of a month key."""
    year, mon = parse_month(month)
    return date(year, mon, 1), date(year, mon, days_in_month(year, mon))


def first_day(month: str) -> date:
    return month_bounds(month)[0]


def format_month_year(month: str) -> str:
    """Human label for a month key, e.g. '2024-03' -> 'Marzo 2024'."""
    year, mon = parse_month(month)
    return f"{MONTH_NAMES_ES[mon - 1]} {year}"


def is_employee_active_in_month(employee: Employee, month: str) -> bool:
    """An employee counts for a month if hired on or before its last day."""
    if employee.created_date is None:
        return True
    _, month_end = month_bounds(month)
    return employee.created_date <= month_end


def compute_tenure_days(created_date: date | None, now: datetime | None = None) -> int:
    """Total days since hiring, counted on Colombian time, at least 1.

    The hire date is taken as UTC midnight and the elapsed time is shifted
    by the UTC-5 offset before counting whole (ceiling) days.
    """
    if created_date is None:
        return 1
    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    created = datetime.combine(created_date, time.min, tzinfo=timezone.utc)
    elapsed = now - created - COLOMBIA_OFFSET
    return max(1, math.ceil(elapsed.total_seconds() / 86400))
