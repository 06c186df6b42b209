"""Monetary rounding policy.

Every monetary subtotal is rounded to a 500/1000 COP step as soon as it is
computed, not once at the end. Totals built from already rounded parts are
rounded again, so drift compounds exactly as in historical payslips.
"""

from __future__ import annotations

from decimal import ROUND_CEILING, ROUND_FLOOR, Decimal
from typing import Any

from nomina_engine.calculators.types import ZERO, as_decimal

STEP = Decimal("1000")
HALF_STEP = Decimal("500")


def round_to_step(amount: Any) -> Decimal:
    """Round to the nearest 500/1000 step.

    A remainder of up to 500 past the last thousand goes to the 500 mark
    (500 itself included); anything above goes up to the next thousand.
    Exact thousands are left alone.

    >>> round_to_step(Decimal("1499"))
    Decimal('1500')
    >>> round_to_step(Decimal("1501"))
    Decimal('2000')
    """
    amount = as_decimal(amount)
    # Decimal % keeps the sign of the dividend
    remainder = amount % STEP
    if remainder <= HALF_STEP:
        base = (amount / STEP).to_integral_value(rounding=ROUND_FLOOR) * STEP
        return base + (HALF_STEP if remainder > 0 else ZERO)
    return (amount / STEP).to_integral_value(rounding=ROUND_CEILING) * STEP

