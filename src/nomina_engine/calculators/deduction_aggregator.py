"""Statutory and ad-hoc deduction aggregation."""

from __future__ import annotations

from collections.abc import Iterable
from decimal import Decimal

from nomina_engine.calculators.rounding import round_to_step
from nomina_engine.calculators.types import (
    DAY_DEDUCTION_TYPES,
    PAYROLL_DAYS,
    ZERO,
    AdvancePayment,
    DeductionBreakdown,
    DeductionRates,
    Employee,
    Novelty,
    NoveltySide,
)

# Salary multiple of the minimum wage from which solidarity applies
SOLIDARITY_THRESHOLD_MULTIPLE = 4


def total_discount_days(novelties: Iterable[Novelty]) -> Decimal:
    """Days discounted by absence-class novelties."""
    return sum(
        (n.discount_days for n in novelties if n.type in DAY_DEDUCTION_TYPES),
        ZERO,
    )


def daily_salary(employee: Employee) -> Decimal:
    return round_to_step(employee.salary / PAYROLL_DAYS)


class DeductionAggregator:
    """Computes a deduction breakdown for one employee-month.

    Components, each rounded on its own:
    - health: gross x health%
    - pension: gross x pension%, skipped for pensioned employees
    - solidarity: gross x solidarity%, only from 4 minimum salaries up
    - absence: daily salary x discounted days
    - six ad-hoc categories: sum of individually rounded amounts
    - advance: rounded sum of advances offset against the month

    The total is the rounded sum of the rounded components.
    """

    def __init__(self, rates: DeductionRates):
        self.rates = rates

    def aggregate(
        self,
        novelties: Iterable[Novelty],
        gross_salary: Decimal,
        employee: Employee,
        advances: Iterable[AdvancePayment] = (),
        month: str | None = None,
    ) -> DeductionBreakdown:
        novelties = list(novelties)
        rates = self.rates
        breakdown = DeductionBreakdown()

        breakdown.health = round_to_step(gross_salary * rates.health / 100)
        if not employee.is_pensioned:
            breakdown.pension = round_to_step(gross_salary * rates.pension / 100)
        if employee.salary >= rates.minimum_salary * SOLIDARITY_THRESHOLD_MULTIPLE:
            breakdown.solidarity = round_to_step(gross_salary * rates.solidarity / 100)

        breakdown.absence = round_to_step(daily_salary(employee) * total_discount_days(novelties))

        for novelty in novelties:
            spec = novelty.spec
            if spec.side is not NoveltySide.MONEY_DEDUCTION:
                continue
            current = getattr(breakdown, spec.category)
            setattr(breakdown, spec.category, current + round_to_step(novelty.bonus_amount))

        breakdown.advance = round_to_step(
            sum(
                (
                    a.amount
                    for a in advances
                    if a.employee_id == employee.id and (month is None or a.month == month)
                ),
                ZERO,
            )
        )

        breakdown.total = round_to_step(
            breakdown.health
            + breakdown.pension
            + breakdown.solidarity
            + breakdown.absence
            + breakdown.plan_corporativo
            + breakdown.recordar
            + breakdown.inventarios_cruces
            + breakdown.multas
            + breakdown.fondo_empleados
            + breakdown.cartera_empleados
            + breakdown.advance
        )
        return breakdown


def aggregate_deductions(
    novelties: Iterable[Novelty],
    gross_salary: Decimal,
    employee: Employee,
    advances: Iterable[AdvancePayment],
    rates: DeductionRates,
    month: str | None = None,
) -> DeductionBreakdown:
    """Deduction breakdown for one employee-month."""
    return DeductionAggregator(rates).aggregate(
        novelties, gross_salary, employee, advances, month
    )
