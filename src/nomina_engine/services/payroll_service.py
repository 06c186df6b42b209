"""Payroll service - orchestrates storage and the calculation engine."""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, datetime
from uuid import uuid4

from nomina_engine.calculators.dates import (
    compute_tenure_days,
    is_employee_active_in_month,
    month_key,
    parse_month,
)
from nomina_engine.calculators.engine import PayrollEngine
from nomina_engine.calculators.novelty_resolver import resolve_monthly
from nomina_engine.calculators.types import (
    RECURRING_TYPES,
    AdvancePayment,
    DeductionRates,
    Employee,
    Novelty,
    PayrollRun,
)
from nomina_engine.config import Settings, get_settings
from nomina_engine.repository import PayrollRepository

logger = logging.getLogger(__name__)


class EmployeeNotFoundError(Exception):
    """Raised when an employee id is not in the roster."""

    def __init__(self, employee_id: str):
        self.employee_id = employee_id
        super().__init__(f"Employee {employee_id} not found")


class NoveltyNotFoundError(Exception):
    """Raised when a novelty id is not stored."""

    def __init__(self, novelty_id: str):
        self.novelty_id = novelty_id
        super().__init__(f"Novelty {novelty_id} not found")


class AdvanceNotFoundError(Exception):
    """Raised when an advance id is not stored."""

    def __init__(self, advance_id: str):
        self.advance_id = advance_id
        super().__init__(f"Advance {advance_id} not found")


class PayrollNotFoundError(Exception):
    """Raised when no payroll has been calculated for a month."""

    def __init__(self, month: str):
        self.month = month
        super().__init__(f"No payroll calculated for {month}")


class PayrollService:
    """Service for roster upkeep and monthly payroll runs.

    Operations:
    - calculate_month: run the engine over current snapshots and keep the
      result as the month's payroll
    - preview_month: same calculation, nothing saved
    - get_month / list_months: historical lookups
    - novelty, advance, employee and rate upkeep
    - refresh_tenure: recompute each employee's worked_days_total
    """

    def __init__(self, repository: PayrollRepository, settings: Settings | None = None):
        self.repository = repository
        self.settings = settings or get_settings()

    # === Payroll runs ===

    async def calculate_month(self, month: str, as_of: date | None = None) -> PayrollRun:
        """Calculate ``month`` and replace any previously saved run for it."""
        run = await self.preview_month(month, as_of)
        await self.repository.save_monthly_payroll(run)
        logger.info("Saved payroll for %s (%d employees)", month, run.employee_count)
        return run

    async def preview_month(self, month: str, as_of: date | None = None) -> PayrollRun:
        parse_month(month)
        employees = await self.repository.load_employees()
        novelties = await self.repository.load_novelties()
        advances = await self.repository.load_advances()
        rates = await self.repository.load_rates()

        engine = PayrollEngine(rates, engine_version=self.settings.engine_version)
        return engine.calculate_run(employees, novelties, advances, month, as_of)

    async def get_month(self, month: str) -> PayrollRun:
        parse_month(month)
        run = await self.repository.load_monthly_payroll(month)
        if run is None:
            raise PayrollNotFoundError(month)
        return run

    async def list_months(self) -> list[str]:
        return await self.repository.list_payroll_months()

    # === Employees ===

    async def list_employees(self, month: str | None = None) -> list[Employee]:
        employees = await self.repository.load_employees()
        if month is None:
            return employees
        return [e for e in employees if is_employee_active_in_month(e, month)]

    async def get_employee(self, employee_id: str) -> Employee:
        for employee in await self.repository.load_employees():
            if employee.id == employee_id:
                return employee
        raise EmployeeNotFoundError(employee_id)

    async def add_employee(self, employee: Employee, now: datetime | None = None) -> Employee:
        if not employee.id:
            employee = replace(employee, id=str(uuid4()))
        if employee.created_date is not None:
            employee = replace(
                employee, worked_days_total=compute_tenure_days(employee.created_date, now)
            )
        employees = await self.repository.load_employees()
        employees.append(employee)
        await self.repository.save_employees(employees)
        logger.info("Added employee %s (%s)", employee.id, employee.contract_type.value)
        return employee

    async def update_employee(self, employee: Employee) -> Employee:
        employees = await self.repository.load_employees()
        for i, current in enumerate(employees):
            if current.id == employee.id:
                # Tenure is only ever recomputed, never edited
                employees[i] = replace(employee, worked_days_total=current.worked_days_total)
                await self.repository.save_employees(employees)
                return employees[i]
        raise EmployeeNotFoundError(employee.id)

    async def delete_employee(self, employee_id: str) -> None:
        employees = await self.repository.load_employees()
        remaining = [e for e in employees if e.id != employee_id]
        if len(remaining) == len(employees):
            raise EmployeeNotFoundError(employee_id)
        await self.repository.save_employees(remaining)

    async def refresh_tenure(self, now: datetime | None = None) -> list[Employee]:
        """Recompute worked_days_total for employees with a hire date."""
        employees = await self.repository.load_employees()
        changed = 0
        refreshed: list[Employee] = []
        for employee in employees:
            if employee.created_date is not None:
                days = compute_tenure_days(employee.created_date, now)
                if days != employee.worked_days_total:
                    employee = replace(employee, worked_days_total=days)
                    changed += 1
            refreshed.append(employee)
        if changed:
            await self.repository.save_employees(refreshed)
        logger.info("Tenure refreshed for %d employees", changed)
        return refreshed

    # === Novelties ===

    async def list_novelties(
        self,
        month: str | None = None,
        employee_id: str | None = None,
    ) -> list[Novelty]:
        """Stored novelties, or the month's effective set when ``month`` is given."""
        novelties = await self.repository.load_novelties()
        if employee_id is not None:
            novelties = [n for n in novelties if n.employee_id == employee_id]
        if month is None:
            return novelties

        effective: list[Novelty] = []
        for employee in await self.list_employees(month):
            if employee_id is not None and employee.id != employee_id:
                continue
            own = [n for n in novelties if n.employee_id == employee.id]
            effective.extend(resolve_monthly(own, employee.hire_month, month))
        return effective

    async def add_novelty(self, novelty: Novelty) -> Novelty:
        employee = await self.get_employee(novelty.employee_id)
        if not novelty.id:
            novelty = replace(novelty, id=str(uuid4()))
        novelty = replace(novelty, employee_name=employee.name)
        if novelty.type in RECURRING_TYPES:
            novelty = replace(
                novelty,
                is_recurring=True,
                start_month=novelty.start_month or month_key(novelty.date),
            )

        novelties = await self.repository.load_novelties()
        novelties.append(novelty)
        await self.repository.save_novelties(novelties)
        logger.info(
            "Added novelty %s (%s) for employee %s",
            novelty.id,
            novelty.type.value,
            novelty.employee_id,
        )
        return novelty

    async def delete_novelty(self, novelty_id: str) -> bool:
        """Delete a stored novelty.

        Returns True when the row was a recurring origin, i.e. its license
        stops applying to every later month.
        """
        novelties = await self.repository.load_novelties()
        target = next((n for n in novelties if n.id == novelty_id), None)
        if target is None:
            raise NoveltyNotFoundError(novelty_id)
        await self.repository.save_novelties([n for n in novelties if n.id != novelty_id])
        if target.is_recurring_license:
            logger.info(
                "Deleted recurring origin %s; license stops from %s on",
                novelty_id,
                target.start_month,
            )
        return target.is_recurring_license

    # === Advances ===

    async def list_advances(self, month: str | None = None) -> list[AdvancePayment]:
        advances = await self.repository.load_advances()
        if month is None:
            return advances
        return [a for a in advances if a.month == month]

    async def add_advance(self, advance: AdvancePayment) -> AdvancePayment:
        employee = await self.get_employee(advance.employee_id)
        if not advance.id:
            advance = replace(advance, id=str(uuid4()))
        advance = replace(advance, employee_name=employee.name)
        advances = await self.repository.load_advances()
        advances.append(advance)
        await self.repository.save_advances(advances)
        return advance

    async def delete_advance(self, advance_id: str) -> None:
        advances = await self.repository.load_advances()
        remaining = [a for a in advances if a.id != advance_id]
        if len(remaining) == len(advances):
            raise AdvanceNotFoundError(advance_id)
        await self.repository.save_advances(remaining)

    # === Rates ===

    async def get_rates(self) -> DeductionRates:
        return await self.repository.load_rates()

    async def update_rates(self, rates: DeductionRates) -> DeductionRates:
        await self.repository.save_rates(rates)
        logger.info("Deduction rates updated")
        return rates

    async def reset_rates(self) -> DeductionRates:
        rates = DeductionRates(minimum_salary=self.settings.minimum_salary)
        await self.repository.save_rates(rates)
        return rates
