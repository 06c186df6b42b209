"""Unit tests for PayrollEngine.

Tests the full per-employee pipeline on in-memory inputs.
"""

import logging
from datetime import date
from decimal import Decimal

from nomina_engine.calculators.engine import PayrollEngine, calculate_payroll
from nomina_engine.calculators.types import ContractType, NoveltyType


class TestCalculationIdGeneration:
    """Test deterministic calculation ID generation."""

    def test_same_inputs_produce_same_id(self):
        engine = PayrollEngine()

        id1 = engine._generate_calculation_id("2024-03", "emp-1", date(2024, 3, 31), "abc123")
        id2 = engine._generate_calculation_id("2024-03", "emp-1", date(2024, 3, 31), "abc123")

        assert id1 == id2
        assert len(id1) == 32

    def test_different_inputs_produce_different_id(self):
        engine = PayrollEngine()

        id1 = engine._generate_calculation_id("2024-03", "emp-1", date(2024, 3, 31), "abc123")
        id2 = engine._generate_calculation_id("2024-03", "emp-1", date(2024, 3, 31), "xyz789")

        assert id1 != id2

    def test_engine_version_changes_id(self):
        args = ("2024-03", "emp-1", date(2024, 3, 31), "abc123")

        assert PayrollEngine(engine_version="1.0.0")._generate_calculation_id(
            *args
        ) != PayrollEngine(engine_version="1.1.0")._generate_calculation_id(*args)


class TestCalculateEmployee:
    """End-to-end month for one employee."""

    def test_reference_month(self, rates, make_employee, make_novelty, make_advance):
        employee = make_employee()
        absence = make_novelty(discount_days=Decimal("2"))
        advance = make_advance(amount=Decimal("100000"))

        calc = PayrollEngine(rates).calculate_employee(employee, [absence], [advance], "2024-03")

        assert calc.discounted_days == Decimal("2")
        assert calc.worked_days == Decimal("28")
        assert calc.total_days_in_month == 30
        assert calc.daily_salary == Decimal("60000")
        assert calc.gross_salary == Decimal("1680000")
        # round(162,000 / 30) = 5,500 a day
        assert calc.transport_allowance == Decimal("154000")
        assert calc.bonuses == 0
        assert calc.deductions.health == Decimal("67500")
        assert calc.deductions.pension == Decimal("67500")
        assert calc.deductions.absence == Decimal("120000")
        assert calc.deductions.advance == Decimal("100000")
        assert calc.deductions.total == Decimal("355000")
        assert calc.total_earned == Decimal("1834000")
        assert calc.net_salary == Decimal("1479000")
        assert calc.novelties == [absence]

    def test_ops_contract_gets_no_transport(self, rates, make_employee, make_novelty):
        employee = make_employee(contract_type=ContractType.OPS)
        absence = make_novelty(discount_days=Decimal("2"))

        calc = PayrollEngine(rates).calculate_employee(employee, [absence], [], "2024-03")

        assert calc.transport_allowance == 0
        assert calc.total_earned == Decimal("1680000")
        assert calc.net_salary == Decimal("1680000") - Decimal("255000")

    def test_no_transport_from_two_minimum_salaries(self, rates, make_employee):
        employee = make_employee(salary=Decimal("2600000"))

        calc = PayrollEngine(rates).calculate_employee(employee, [], [], "2024-03")

        assert calc.transport_allowance == 0

    def test_transport_just_below_two_minimum_salaries(self, rates, make_employee):
        employee = make_employee(salary=Decimal("2599999"))

        calc = PayrollEngine(rates).calculate_employee(employee, [], [], "2024-03")

        assert calc.transport_allowance > 0

    def test_mid_month_hire_is_prorated(self, rates, make_employee):
        employee = make_employee(salary=Decimal("1300000"), created_date=date(2024, 3, 16))

        calc = PayrollEngine(rates).calculate_employee(employee, [], [], "2024-03")

        assert calc.worked_days == Decimal("16")
        assert calc.daily_salary == Decimal("43500")
        assert calc.gross_salary == Decimal("696000")
        assert calc.transport_allowance == Decimal("88000")

    def test_hire_on_first_of_long_month_counts_calendar_days(self, rates, make_employee):
        employee = make_employee(created_date=date(2024, 3, 1))

        calc = PayrollEngine(rates).calculate_employee(employee, [], [], "2024-03")

        assert calc.worked_days == Decimal("31")

    def test_worked_days_never_negative(self, rates, make_employee, make_novelty):
        absence = make_novelty(discount_days=Decimal("35"))

        calc = PayrollEngine(rates).calculate_employee(make_employee(), [absence], [], "2024-03")

        assert calc.worked_days == 0
        assert calc.gross_salary == 0

    def test_negative_net_is_surfaced(self, rates, make_employee, make_novelty, caplog):
        employee = make_employee(
            salary=Decimal("1000000"),
            contract_type=ContractType.OPS,
        )
        absence = make_novelty(discount_days=Decimal("30"))

        with caplog.at_level(logging.WARNING, logger="nomina_engine.calculators.engine"):
            calc = PayrollEngine(rates).calculate_employee(employee, [absence], [], "2024-03")

        assert calc.gross_salary == 0
        assert calc.deductions.absence == Decimal("1005000")
        assert calc.net_salary == Decimal("-1005000")
        assert "Negative net salary" in caplog.text

    def test_bonuses_flow_into_total_earned(self, rates, make_employee, make_novelty):
        employee = make_employee(contract_type=ContractType.OPS)
        novelties = [
            make_novelty(type=NoveltyType.SALES_BONUS, bonus_amount=Decimal("100000")),
            make_novelty(type=NoveltyType.FIXED_OVERTIME, hours=Decimal("5")),
        ]

        calc = PayrollEngine(rates).calculate_employee(employee, novelties, [], "2024-03")

        assert calc.bonuses == Decimal("131000")
        assert calc.total_earned == Decimal("1800000") + Decimal("131000")

    def test_recurring_license_paid_in_later_month(self, rates, make_employee, study_license):
        calc = PayrollEngine(rates).calculate_employee(
            make_employee(), [study_license], [], "2024-03"
        )

        assert calc.bonus_calculations.study_license == Decimal("200000")
        assert [n.id for n in calc.novelties] == ["recurring-lic-1-2024-03"]

    def test_advances_of_other_months_ignored(self, rates, make_employee, make_advance):
        advance = make_advance(month="2024-02")

        calc = PayrollEngine(rates).calculate_employee(make_employee(), [], [advance], "2024-03")

        assert calc.deductions.advance == 0


class TestCalculateRun:
    def test_only_active_employees(self, rates, make_employee):
        current = make_employee(id="emp-1")
        future = make_employee(id="emp-2", created_date=date(2024, 4, 2))

        run = PayrollEngine(rates).calculate_run([current, future], [], [], "2024-03")

        assert [c.employee.id for c in run.calculations] == ["emp-1"]
        assert run.as_of == date(2024, 3, 31)

    def test_novelties_and_advances_routed_per_employee(
        self, rates, make_employee, make_novelty, make_advance
    ):
        employees = [make_employee(id="emp-1"), make_employee(id="emp-2")]
        novelties = [make_novelty(employee_id="emp-2", discount_days=Decimal("2"))]
        advances = [make_advance(employee_id="emp-1")]

        run = PayrollEngine(rates).calculate_run(employees, novelties, advances, "2024-03")
        by_id = {c.employee.id: c for c in run.calculations}

        assert by_id["emp-1"].worked_days == Decimal("30")
        assert by_id["emp-1"].deductions.advance == Decimal("100000")
        assert by_id["emp-2"].worked_days == Decimal("28")
        assert by_id["emp-2"].deductions.advance == 0

    def test_totals(self, rates, make_employee):
        employees = [make_employee(id="emp-1"), make_employee(id="emp-2")]

        run = PayrollEngine(rates).calculate_run(employees, [], [], "2024-03")

        assert run.employee_count == 2
        assert run.total_gross == Decimal("3600000")
        assert run.total_transport == Decimal("330000")
        assert run.total_net == sum(c.net_salary for c in run.calculations)

    def test_deterministic(self, rates, make_employee, make_novelty, study_license):
        inputs = ([make_employee()], [make_novelty(), study_license], [])

        first = PayrollEngine(rates).calculate_run(*inputs, "2024-03", date(2024, 3, 31))
        second = PayrollEngine(rates).calculate_run(*inputs, "2024-03", date(2024, 3, 31))

        assert first.to_dict() == second.to_dict()

    def test_as_of_changes_calculation_id(self, rates, make_employee):
        engine = PayrollEngine(rates)

        a = engine.calculate_run([make_employee()], [], [], "2024-03", date(2024, 3, 31))
        b = engine.calculate_run([make_employee()], [], [], "2024-03", date(2024, 4, 2))

        assert a.calculations[0].calculation_id != b.calculations[0].calculation_id
        assert a.calculations[0].net_salary == b.calculations[0].net_salary

    def test_calculate_payroll_function(self, rates, make_employee):
        calculations = calculate_payroll([make_employee()], [], [], rates, "2024-03")

        assert len(calculations) == 1
        assert calculations[0].gross_salary == Decimal("1800000")
