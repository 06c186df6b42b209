"""Aggregation of earned additions (bonificaciones) from novelties."""

from __future__ import annotations

from collections.abc import Iterable
from decimal import Decimal

from nomina_engine.calculators.rounding import round_to_step
from nomina_engine.calculators.types import (
    ZERO,
    BonusBreakdown,
    DeductionRates,
    Novelty,
    NoveltySide,
    UnitType,
)


class BonusAggregator:
    """Sums addition-side novelties into a typed breakdown.

    Pricing per novelty type comes from the novelty catalogue:
    - MONEY types contribute their recorded amount
    - HOURS types contribute the recorded amount, or hours x rate
    - SUNDAY_WORK contributes the recorded amount, or days x sunday1

    Each contribution is rounded before it is added to its category.
    Deduction-side types contribute nothing here.
    """

    def __init__(self, rates: DeductionRates):
        self.rates = rates

    def contribution(self, novelty: Novelty) -> Decimal:
        """Rounded amount one novelty adds to the payslip."""
        spec = novelty.spec
        if spec.side is not NoveltySide.ADDITION:
            return ZERO

        if spec.rate_field is None:
            return round_to_step(novelty.bonus_amount)

        # A zero amount means "not entered", so the quantity is priced
        if novelty.bonus_amount:
            return round_to_step(novelty.bonus_amount)

        quantity = novelty.hours if spec.unit is UnitType.HOURS else novelty.days
        rate: Decimal = getattr(self.rates, spec.rate_field)
        return round_to_step((quantity or ZERO) * rate)

    def aggregate(self, novelties: Iterable[Novelty]) -> BonusBreakdown:
        breakdown = BonusBreakdown()
        for novelty in novelties:
            category = novelty.spec.category
            if novelty.spec.side is not NoveltySide.ADDITION or category is None:
                continue
            current = getattr(breakdown, category)
            setattr(breakdown, category, current + self.contribution(novelty))

        breakdown.total = round_to_step(
            breakdown.fixed_compensation
            + breakdown.sales_bonus
            + breakdown.fixed_overtime
            + breakdown.unexpected_overtime
            + breakdown.night_surcharge
            + breakdown.sunday_work
            + breakdown.gas_allowance
            + breakdown.study_license
        )
        return breakdown


def aggregate_bonuses(novelties: Iterable[Novelty], rates: DeductionRates) -> BonusBreakdown:
    """Bonus breakdown for a resolved novelty list."""
    return BonusAggregator(rates).aggregate(novelties)
