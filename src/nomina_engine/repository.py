"""Persistence port for roster, novelties, advances, rates and payroll history.

The calculation engine never touches storage; callers load snapshots through
a repository, hand them to the engine and save whatever comes back.
"""

from __future__ import annotations

import copy
import logging
from typing import Protocol

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from nomina_engine.calculators.types import (
    AdvancePayment,
    DeductionRates,
    Employee,
    Novelty,
    PayrollRun,
)
from nomina_engine.models import (
    AdvanceRecord,
    EmployeeRecord,
    NoveltyRecord,
    PayrollSnapshot,
    RatesRecord,
)

logger = logging.getLogger(__name__)


class PayrollRepository(Protocol):
    """Load/save operations the payroll service needs."""

    async def load_employees(self) -> list[Employee]: ...

    async def save_employees(self, employees: list[Employee]) -> None: ...

    async def load_novelties(self) -> list[Novelty]: ...

    async def save_novelties(self, novelties: list[Novelty]) -> None: ...

    async def load_advances(self) -> list[AdvancePayment]: ...

    async def save_advances(self, advances: list[AdvancePayment]) -> None: ...

    async def load_rates(self) -> DeductionRates: ...

    async def save_rates(self, rates: DeductionRates) -> None: ...

    async def load_monthly_payroll(self, month: str) -> PayrollRun | None: ...

    async def save_monthly_payroll(self, run: PayrollRun) -> None: ...

    async def list_payroll_months(self) -> list[str]: ...


class InMemoryRepository:
    """Repository backed by plain lists; copies on the way in and out."""

    def __init__(
        self,
        employees: list[Employee] | None = None,
        novelties: list[Novelty] | None = None,
        advances: list[AdvancePayment] | None = None,
        rates: DeductionRates | None = None,
    ):
        self._employees = copy.deepcopy(employees or [])
        self._novelties = copy.deepcopy(novelties or [])
        self._advances = copy.deepcopy(advances or [])
        self._rates = rates
        self._payrolls: dict[str, PayrollRun] = {}

    async def load_employees(self) -> list[Employee]:
        return copy.deepcopy(self._employees)

    async def save_employees(self, employees: list[Employee]) -> None:
        self._employees = copy.deepcopy(employees)

    async def load_novelties(self) -> list[Novelty]:
        return copy.deepcopy(self._novelties)

    async def save_novelties(self, novelties: list[Novelty]) -> None:
        self._novelties = copy.deepcopy(novelties)

    async def load_advances(self) -> list[AdvancePayment]:
        return copy.deepcopy(self._advances)

    async def save_advances(self, advances: list[AdvancePayment]) -> None:
        self._advances = copy.deepcopy(advances)

    async def load_rates(self) -> DeductionRates:
        return self._rates or DeductionRates()

    async def save_rates(self, rates: DeductionRates) -> None:
        self._rates = rates

    async def load_monthly_payroll(self, month: str) -> PayrollRun | None:
        run = self._payrolls.get(month)
        return copy.deepcopy(run) if run is not None else None

    async def save_monthly_payroll(self, run: PayrollRun) -> None:
        self._payrolls[run.month] = copy.deepcopy(run)

    async def list_payroll_months(self) -> list[str]:
        return sorted(self._payrolls)


class SqlAlchemyRepository:
    """Repository over an async SQLAlchemy session.

    Collections are saved whole: the stored rows are replaced by the list
    given, matching how the roster screens edit them.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def load_employees(self) -> list[Employee]:
        result = await self.session.execute(
            select(EmployeeRecord).order_by(EmployeeRecord.name)
        )
        return [r.to_domain() for r in result.scalars().all()]

    async def save_employees(self, employees: list[Employee]) -> None:
        await self.session.execute(delete(EmployeeRecord))
        self.session.add_all([EmployeeRecord.from_domain(e) for e in employees])
        await self.session.commit()

    async def load_novelties(self) -> list[Novelty]:
        result = await self.session.execute(
            select(NoveltyRecord).order_by(NoveltyRecord.novelty_date, NoveltyRecord.novelty_id)
        )
        return [r.to_domain() for r in result.scalars().all()]

    async def save_novelties(self, novelties: list[Novelty]) -> None:
        synthetic = [n.id for n in novelties if n.is_synthetic]
        if synthetic:
            # Materialized recurring rows are derived data, never stored
            logger.debug("Skipping %d synthesized novelties on save", len(synthetic))
        await self.session.execute(delete(NoveltyRecord))
        self.session.add_all(
            [NoveltyRecord.from_domain(n) for n in novelties if not n.is_synthetic]
        )
        await self.session.commit()

    async def load_advances(self) -> list[AdvancePayment]:
        result = await self.session.execute(
            select(AdvanceRecord).order_by(AdvanceRecord.month, AdvanceRecord.advance_id)
        )
        return [r.to_domain() for r in result.scalars().all()]

    async def save_advances(self, advances: list[AdvancePayment]) -> None:
        await self.session.execute(delete(AdvanceRecord))
        self.session.add_all([AdvanceRecord.from_domain(a) for a in advances])
        await self.session.commit()

    async def load_rates(self) -> DeductionRates:
        record = await self.session.get(RatesRecord, 1)
        if record is None:
            return DeductionRates()
        return record.to_domain()

    async def save_rates(self, rates: DeductionRates) -> None:
        record = await self.session.get(RatesRecord, 1)
        if record is None:
            self.session.add(RatesRecord(rates_id=1, rates_json=rates.to_dict()))
        else:
            record.rates_json = rates.to_dict()
        await self.session.commit()

    async def load_monthly_payroll(self, month: str) -> PayrollRun | None:
        snapshot = await self.session.get(PayrollSnapshot, month)
        if snapshot is None:
            return None
        return snapshot.to_domain()

    async def save_monthly_payroll(self, run: PayrollRun) -> None:
        snapshot = await self.session.get(PayrollSnapshot, run.month)
        if snapshot is None:
            self.session.add(
                PayrollSnapshot(month=run.month, as_of=run.as_of, payload=run.to_dict())
            )
        else:
            snapshot.as_of = run.as_of
            snapshot.payload = run.to_dict()
        await self.session.commit()

    async def list_payroll_months(self) -> list[str]:
        result = await self.session.execute(
            select(PayrollSnapshot.month).order_by(PayrollSnapshot.month)
        )
        return list(result.scalars().all())
