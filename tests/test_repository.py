"""Tests for the in-memory and SQLAlchemy repositories."""

from datetime import date
from decimal import Decimal

import pytest

from nomina_engine.calculators.engine import PayrollEngine
from nomina_engine.calculators.novelty_resolver import resolve_monthly
from nomina_engine.calculators.types import DeductionRates, NoveltyType
from nomina_engine.repository import InMemoryRepository, SqlAlchemyRepository

pytestmark = pytest.mark.asyncio


class TestInMemoryRepository:
    async def test_loads_are_copies(self, make_employee):
        repo = InMemoryRepository(employees=[make_employee()])

        loaded = await repo.load_employees()
        loaded[0].name = "Changed"
        loaded.append(make_employee(id="emp-2"))

        again = await repo.load_employees()
        assert [e.name for e in again] == ["Ana Gómez"]

    async def test_saves_are_copies(self, make_novelty):
        repo = InMemoryRepository()
        novelties = [make_novelty()]

        await repo.save_novelties(novelties)
        novelties[0].description = "changed"

        assert (await repo.load_novelties())[0].description == ""

    async def test_rates_default(self):
        assert await InMemoryRepository().load_rates() == DeductionRates()

    async def test_monthly_payroll(self, make_employee):
        repo = InMemoryRepository()
        run = PayrollEngine().calculate_run([make_employee()], [], [], "2024-03")

        await repo.save_monthly_payroll(run)

        assert await repo.load_monthly_payroll("2024-02") is None
        assert (await repo.load_monthly_payroll("2024-03")).to_dict() == run.to_dict()
        assert await repo.list_payroll_months() == ["2024-03"]


class TestSqlAlchemyRepository:
    async def test_employee_round_trip(self, session, make_employee):
        repo = SqlAlchemyRepository(session)
        employees = [
            make_employee(id="emp-1", name="Ana Gómez", eps="Sura"),
            make_employee(
                id="emp-2",
                name="Bruno Díaz",
                is_pensioned=True,
                created_date=None,
                date_of_birth=date(1980, 5, 17),
            ),
        ]

        await repo.save_employees(employees)
        loaded = await repo.load_employees()

        assert loaded == employees

    async def test_save_replaces_collection(self, session, make_employee):
        repo = SqlAlchemyRepository(session)
        await repo.save_employees([make_employee(id="emp-1"), make_employee(id="emp-2")])

        current = await repo.load_employees()
        await repo.save_employees([e for e in current if e.id != "emp-1"])

        assert [e.id for e in await repo.load_employees()] == ["emp-2"]

    async def test_novelty_round_trip(self, session, make_novelty, study_license):
        repo = SqlAlchemyRepository(session)
        novelties = [
            study_license,
            make_novelty(id="nov-a", discount_days=Decimal("1.5")),
            make_novelty(id="nov-b", type=NoveltyType.FIXED_OVERTIME, hours=Decimal("4")),
        ]

        await repo.save_novelties(novelties)
        loaded = {n.id: n for n in await repo.load_novelties()}

        assert loaded["lic-1"] == study_license
        assert loaded["nov-a"].discount_days == Decimal("1.5")
        assert loaded["nov-b"].hours == Decimal("4")
        assert loaded["nov-b"].days is None

    async def test_synthesized_novelties_are_not_stored(self, session, study_license):
        repo = SqlAlchemyRepository(session)
        synthesized = resolve_monthly([study_license], None, "2024-03")

        await repo.save_novelties([study_license, *synthesized])

        assert [n.id for n in await repo.load_novelties()] == ["lic-1"]

    async def test_advance_round_trip(self, session, make_advance):
        repo = SqlAlchemyRepository(session)
        advance = make_advance(employee_fund=Decimal("10000"), description="Quincena")

        await repo.save_advances([advance])
        loaded = await repo.load_advances()

        assert loaded == [advance]
        assert loaded[0].net_to_employee == Decimal("90000")

    async def test_rates_fall_back_to_defaults(self, session):
        repo = SqlAlchemyRepository(session)

        assert await repo.load_rates() == DeductionRates()

        custom = DeductionRates(health=Decimal("4.5"), sunday1=Decimal("40000"))
        await repo.save_rates(custom)
        assert await repo.load_rates() == custom

        await repo.save_rates(DeductionRates())
        assert await repo.load_rates() == DeductionRates()

    async def test_monthly_payroll_is_replaced(self, session, make_employee, make_novelty):
        repo = SqlAlchemyRepository(session)
        engine = PayrollEngine()
        first = engine.calculate_run([make_employee()], [], [], "2024-03")
        second = engine.calculate_run(
            [make_employee()], [make_novelty(discount_days=Decimal("2"))], [], "2024-03"
        )

        await repo.save_monthly_payroll(first)
        await repo.save_monthly_payroll(second)
        loaded = await repo.load_monthly_payroll("2024-03")

        assert loaded.to_dict() == second.to_dict()
        assert loaded.calculations[0].worked_days == Decimal("28")
        assert await repo.list_payroll_months() == ["2024-03"]
        assert await repo.load_monthly_payroll("2024-04") is None
