"""Payroll calculation engine."""

from nomina_engine.calculators.bonus_aggregator import BonusAggregator, aggregate_bonuses
from nomina_engine.calculators.deduction_aggregator import (
    DeductionAggregator,
    aggregate_deductions,
)
from nomina_engine.calculators.engine import PayrollEngine, calculate_payroll
from nomina_engine.calculators.novelty_resolver import NoveltyResolver, resolve_monthly
from nomina_engine.calculators.rounding import round_to_step

__all__ = [
    "BonusAggregator",
    "DeductionAggregator",
    "NoveltyResolver",
    "PayrollEngine",
    "aggregate_bonuses",
    "aggregate_deductions",
    "calculate_payroll",
    "resolve_monthly",
    "round_to_step",
]
