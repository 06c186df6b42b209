"""Tests for the 500/1000 COP rounding step."""

from decimal import Decimal

import pytest
from hypothesis import given
from hypothesis import strategies as st

from nomina_engine.calculators.rounding import round_to_step


class TestRoundToStep:
    """Boundary behaviour of the rounding step."""

    @pytest.mark.parametrize(
        ("amount", "expected"),
        [
            ("0", "0"),
            ("1", "500"),
            ("500", "500"),
            ("501", "1000"),
            ("1000", "1000"),
            ("1499", "1500"),
            ("1500", "1500"),
            ("1501", "2000"),
            ("67200", "67500"),
            ("43333.33", "43500"),
            ("5400", "5500"),
            ("60000", "60000"),
            ("-500", "-1000"),
            ("-1000", "-1000"),
            ("-1250", "-2000"),
            ("-1500", "-2000"),
        ],
    )
    def test_known_values(self, amount, expected):
        assert round_to_step(Decimal(amount)) == Decimal(expected)

    def test_accepts_ints_and_strings(self):
        assert round_to_step(1250) == Decimal("1500")
        assert round_to_step("1750") == Decimal("2000")

    def test_exact_thousands_untouched(self):
        assert round_to_step(Decimal("1680000")) == Decimal("1680000")


class TestRoundToStepProperties:
    """Properties over whole amounts."""

    @given(st.integers(min_value=0, max_value=10**10))
    def test_result_is_a_multiple_of_500(self, amount):
        assert round_to_step(amount) % 500 == 0

    @given(st.integers(min_value=0, max_value=10**10))
    def test_never_rounds_down_and_moves_less_than_half_step(self, amount):
        result = round_to_step(amount)
        assert result >= amount
        assert result - amount < 500

    @given(st.integers(min_value=-(10**10), max_value=-1))
    def test_negatives_go_down_to_a_thousand(self, amount):
        result = round_to_step(amount)
        assert result % 1000 == 0
        assert result <= amount
        assert amount - result < 1000

    @given(
        st.decimals(
            min_value=-(10**9),
            max_value=10**9,
            places=2,
            allow_nan=False,
            allow_infinity=False,
        )
    )
    def test_idempotent(self, amount):
        once = round_to_step(amount)
        assert round_to_step(once) == once
