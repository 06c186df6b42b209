"""Payroll calculation engine - main orchestrator."""

from __future__ import annotations

import hashlib
import json
import logging
from collections import defaultdict
from collections.abc import Iterable
from datetime import date
from decimal import Decimal
from typing import Any

from nomina_engine.calculators.bonus_aggregator import BonusAggregator
from nomina_engine.calculators.dates import (
    is_employee_active_in_month,
    month_bounds,
)
from nomina_engine.calculators.deduction_aggregator import (
    DeductionAggregator,
    daily_salary,
    total_discount_days,
)
from nomina_engine.calculators.novelty_resolver import NoveltyResolver
from nomina_engine.calculators.rounding import round_to_step
from nomina_engine.calculators.types import (
    PAYROLL_DAYS,
    ZERO,
    AdvancePayment,
    ContractType,
    DeductionRates,
    Employee,
    Novelty,
    PayrollCalculation,
    PayrollRun,
)

logger = logging.getLogger(__name__)

DEFAULT_ENGINE_VERSION = "1.0.0"

# Transport subsidy is paid below this multiple of the minimum wage
TRANSPORT_CEILING_MULTIPLE = 2


class PayrollEngine:
    """Main payroll calculation engine.

    Calculation pipeline (stable order per active employee):
    1) Resolve the month's effective novelties
    2) Count discounted days (absence-class novelties)
    3) Worked days on a flat 30-day month, pro-rated from a mid-month hire
    4) Daily salary and gross salary
    5) Transport subsidy (NOMINA contracts under 2 minimum salaries)
    6) Bonus and deduction breakdowns
    7) Total earned
    8) Net salary (may be negative; surfaced, not corrected)

    Every monetary figure is rounded to the 500/1000 step when computed.
    The engine holds no state between runs and performs no I/O.
    """

    def __init__(
        self,
        rates: DeductionRates | None = None,
        engine_version: str = DEFAULT_ENGINE_VERSION,
    ):
        self.rates = rates or DeductionRates()
        self.engine_version = engine_version
        self.resolver = NoveltyResolver()
        self.bonus_aggregator = BonusAggregator(self.rates)
        self.deduction_aggregator = DeductionAggregator(self.rates)

    def calculate_run(
        self,
        employees: Iterable[Employee],
        novelties: Iterable[Novelty],
        advances: Iterable[AdvancePayment],
        target_month: str,
        as_of: date | None = None,
    ) -> PayrollRun:
        """Calculate a month for every employee active in it."""
        _, month_end = month_bounds(target_month)
        if as_of is None:
            as_of = month_end

        novelties_by_employee: dict[str, list[Novelty]] = defaultdict(list)
        for novelty in novelties:
            novelties_by_employee[novelty.employee_id].append(novelty)

        advances_by_employee: dict[str, list[AdvancePayment]] = defaultdict(list)
        for advance in advances:
            if advance.month == target_month:
                advances_by_employee[advance.employee_id].append(advance)

        active = [e for e in employees if is_employee_active_in_month(e, target_month)]
        logger.info(
            "Calculating payroll for %s (as of %s): %d active employees",
            target_month,
            as_of,
            len(active),
        )

        calculations = [
            self.calculate_employee(
                employee,
                novelties_by_employee.get(employee.id, []),
                advances_by_employee.get(employee.id, []),
                target_month,
                as_of,
            )
            for employee in active
        ]

        run = PayrollRun(month=target_month, as_of=as_of, calculations=calculations)
        logger.info(
            "Payroll %s calculated: gross=%s deductions=%s net=%s",
            target_month,
            run.total_gross,
            run.total_deductions,
            run.total_net,
        )
        return run

    def calculate_employee(
        self,
        employee: Employee,
        novelties: Iterable[Novelty],
        advances: Iterable[AdvancePayment],
        target_month: str,
        as_of: date | None = None,
    ) -> PayrollCalculation:
        """Calculate one employee's month.

        ``novelties`` are the employee's stored rows (any month); the month's
        effective set is resolved here. ``advances`` are filtered to the
        employee and month.
        """
        month_start, month_end = month_bounds(target_month)
        if as_of is None:
            as_of = month_end
        advances = list(advances)

        effective = self.resolver.resolve(novelties, employee.hire_month, target_month)
        discounted = total_discount_days(effective)
        worked = self._worked_days(employee, discounted, month_start, month_end)

        daily = daily_salary(employee)
        gross = round_to_step(daily * worked)
        transport = self._transport_allowance(employee, worked)

        bonuses = self.bonus_aggregator.aggregate(effective)
        deductions = self.deduction_aggregator.aggregate(
            effective, gross, employee, advances, target_month
        )

        total_earned = round_to_step(gross + transport + bonuses.total)
        net = round_to_step(total_earned - deductions.total)
        if net < 0:
            logger.warning(
                "Negative net salary for employee %s in %s: %s",
                employee.id,
                target_month,
                net,
            )

        inputs_fingerprint = self._compute_inputs_fingerprint(employee, effective, advances)
        calculation_id = self._generate_calculation_id(
            target_month, employee.id, as_of, inputs_fingerprint
        )

        return PayrollCalculation(
            calculation_id=calculation_id,
            month=target_month,
            employee=employee,
            worked_days=worked,
            discounted_days=discounted,
            base_salary=employee.salary,
            daily_salary=daily,
            gross_salary=gross,
            transport_allowance=transport,
            bonus_calculations=bonuses,
            deductions=deductions,
            total_earned=total_earned,
            net_salary=net,
            novelties=effective,
        )

    @staticmethod
    def _worked_days(
        employee: Employee,
        discounted: Decimal,
        month_start: date,
        month_end: date,
    ) -> Decimal:
        """Pro-rated days on the flat 30-day base.

        A hire inside the month counts calendar days from the hire date to
        the month end, inclusive.
        """
        hired = employee.created_date
        if hired is not None and month_start <= hired <= month_end:
            available = Decimal(month_end.day - hired.day + 1)
        else:
            available = Decimal(PAYROLL_DAYS)
        return max(ZERO, available - discounted)

    def _transport_allowance(self, employee: Employee, worked: Decimal) -> Decimal:
        rates = self.rates
        if (
            employee.contract_type is ContractType.NOMINA
            and employee.salary < rates.minimum_salary * TRANSPORT_CEILING_MULTIPLE
        ):
            daily_transport = round_to_step(rates.transport_allowance / PAYROLL_DAYS)
            return round_to_step(daily_transport * worked)
        return ZERO

    def _generate_calculation_id(
        self,
        month: str,
        employee_id: str,
        as_of: date,
        inputs_fingerprint: str,
    ) -> str:
        """Generate deterministic calculation ID."""
        data = {
            "month": month,
            "employee_id": employee_id,
            "as_of": str(as_of),
            "engine_version": self.engine_version,
            "inputs_fingerprint": inputs_fingerprint,
        }
        json_str = json.dumps(data, sort_keys=True)
        return hashlib.sha256(json_str.encode()).hexdigest()[:32]

    def _compute_inputs_fingerprint(
        self,
        employee: Employee,
        novelties: list[Novelty],
        advances: list[AdvancePayment],
    ) -> str:
        """Compute fingerprint of everything a calculation read."""
        inputs: dict[str, Any] = {
            "employee": employee.to_dict(),
            "novelties": sorted((n.to_dict() for n in novelties), key=lambda d: d["id"]),
            "advances": sorted((a.to_dict() for a in advances), key=lambda d: d["id"]),
            "rates": self.rates.to_dict(),
        }
        json_str = json.dumps(inputs, sort_keys=True)
        return hashlib.sha256(json_str.encode()).hexdigest()[:32]


def calculate_payroll(
    employees: Iterable[Employee],
    novelties: Iterable[Novelty],
    advances: Iterable[AdvancePayment],
    rates: DeductionRates,
    target_month: str,
    as_of: date | None = None,
) -> list[PayrollCalculation]:
    """One calculation record per employee active in ``target_month``."""
    run = PayrollEngine(rates).calculate_run(employees, novelties, advances, target_month, as_of)
    return run.calculations
