"""Tests for bonus (earned additions) aggregation."""

from datetime import date
from decimal import Decimal

from nomina_engine.calculators.bonus_aggregator import BonusAggregator, aggregate_bonuses
from nomina_engine.calculators.types import DeductionRates, NoveltyType


class TestContributions:
    """Pricing of a single novelty with the default rate table."""

    def test_money_amount_is_rounded(self, rates, make_novelty):
        novelty = make_novelty(type=NoveltyType.SALES_BONUS, bonus_amount=Decimal("123400"))
        assert BonusAggregator(rates).contribution(novelty) == Decimal("123500")

    def test_fixed_overtime_priced_at_ordinary_hour(self, rates, make_novelty):
        novelty = make_novelty(type=NoveltyType.FIXED_OVERTIME, hours=Decimal("5"))
        assert BonusAggregator(rates).contribution(novelty) == Decimal("31000")

    def test_unexpected_overtime_priced_at_overtime_rate(self, rates, make_novelty):
        novelty = make_novelty(type=NoveltyType.UNEXPECTED_OVERTIME, hours=Decimal("3"))
        # 3 x 7,800 = 23,400
        assert BonusAggregator(rates).contribution(novelty) == Decimal("23500")

    def test_night_surcharge(self, rates, make_novelty):
        novelty = make_novelty(type=NoveltyType.NIGHT_SURCHARGE, hours=Decimal("10"))
        assert BonusAggregator(rates).contribution(novelty) == Decimal("22000")

    def test_sunday_work_priced_per_day(self, rates, make_novelty):
        novelty = make_novelty(type=NoveltyType.SUNDAY_WORK, days=Decimal("2"))
        # 2 x 37,200 = 74,400
        assert BonusAggregator(rates).contribution(novelty) == Decimal("74500")

    def test_recorded_amount_overrides_rate(self, rates, make_novelty):
        novelty = make_novelty(
            type=NoveltyType.SUNDAY_WORK,
            days=Decimal("1"),
            bonus_amount=Decimal("50000"),
        )
        assert BonusAggregator(rates).contribution(novelty) == Decimal("50000")

    def test_custom_rates(self, make_novelty):
        rates = DeductionRates(ordinary_hour=Decimal("10000"))
        novelty = make_novelty(type=NoveltyType.FIXED_OVERTIME, hours=Decimal("2"))
        assert BonusAggregator(rates).contribution(novelty) == Decimal("20000")

    def test_deduction_types_contribute_nothing(self, rates, make_novelty):
        aggregator = BonusAggregator(rates)
        assert aggregator.contribution(make_novelty(discount_days=Decimal("2"))) == 0
        multa = make_novelty(type=NoveltyType.MULTAS, bonus_amount=Decimal("20000"))
        assert aggregator.contribution(multa) == 0


class TestAggregate:
    def test_breakdown_by_category(self, rates, make_novelty):
        novelties = [
            make_novelty(type=NoveltyType.SALES_BONUS, bonus_amount=Decimal("123400")),
            make_novelty(type=NoveltyType.FIXED_OVERTIME, hours=Decimal("5")),
            make_novelty(type=NoveltyType.UNEXPECTED_OVERTIME, hours=Decimal("3")),
            make_novelty(type=NoveltyType.SUNDAY_WORK, days=Decimal("2")),
            make_novelty(type=NoveltyType.GAS_ALLOWANCE, bonus_amount=Decimal("80200")),
            make_novelty(type=NoveltyType.STUDY_LICENSE, bonus_amount=Decimal("200000")),
            make_novelty(discount_days=Decimal("1")),
        ]

        breakdown = aggregate_bonuses(novelties, rates)

        assert breakdown.sales_bonus == Decimal("123500")
        assert breakdown.fixed_overtime == Decimal("31000")
        assert breakdown.unexpected_overtime == Decimal("23500")
        assert breakdown.sunday_work == Decimal("74500")
        assert breakdown.gas_allowance == Decimal("80500")
        assert breakdown.study_license == Decimal("200000")
        assert breakdown.fixed_compensation == 0
        assert breakdown.night_surcharge == 0
        assert breakdown.total == Decimal("533000")

    def test_each_item_rounded_before_summing(self, rates, make_novelty):
        novelties = [
            make_novelty(type=NoveltyType.SALES_BONUS, bonus_amount=Decimal("100100")),
            make_novelty(type=NoveltyType.SALES_BONUS, bonus_amount=Decimal("100100")),
        ]

        breakdown = aggregate_bonuses(novelties, rates)

        assert breakdown.sales_bonus == Decimal("201000")
        assert breakdown.total == Decimal("201000")

    def test_empty(self, rates):
        breakdown = aggregate_bonuses([], rates)
        assert breakdown.total == 0

    def test_synthesized_license_counts(self, rates, make_novelty):
        row = make_novelty(
            id="recurring-lic-1-2024-03",
            type=NoveltyType.STUDY_LICENSE,
            date=date(2024, 3, 1),
            bonus_amount=Decimal("200000"),
            origin_id="lic-1",
        )
        assert aggregate_bonuses([row], rates).study_license == Decimal("200000")
