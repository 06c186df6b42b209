"""Pytest fixtures for nomina engine tests."""

from __future__ import annotations

from collections.abc import AsyncGenerator, Callable
from datetime import date
from decimal import Decimal
from typing import Any

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from nomina_engine.calculators.types import (
    AdvancePayment,
    ContractType,
    DeductionRates,
    Employee,
    Novelty,
    NoveltyType,
)
from nomina_engine.config import Settings
from nomina_engine.models import Base

# In-memory SQLite shared across the connections of one engine
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
def rates() -> DeductionRates:
    """Default rate table (minimum salary 1,300,000)."""
    return DeductionRates()


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        database_url=TEST_DATABASE_URL,
        engine_version="1.0.0",
        host="127.0.0.1",
        port=8000,
        debug=False,
        log_level="DEBUG",
        minimum_salary=Decimal("1300000"),
    )


@pytest.fixture
def make_employee() -> Callable[..., Employee]:
    """Factory for roster entries; NOMINA, 1,800,000 COP, hired 2023-01-10."""

    def _make(**overrides: Any) -> Employee:
        values: dict[str, Any] = {
            "id": "emp-1",
            "name": "Ana Gómez",
            "cedula": "1020304050",
            "contract_type": ContractType.NOMINA,
            "salary": Decimal("1800000"),
            "created_date": date(2023, 1, 10),
        }
        values.update(overrides)
        return Employee(**values)

    return _make


@pytest.fixture
def make_novelty() -> Callable[..., Novelty]:
    """Factory for novelties; defaults to a one-day absence on 2024-03-05."""
    counter = iter(range(1, 10_000))

    def _make(**overrides: Any) -> Novelty:
        values: dict[str, Any] = {
            "id": f"nov-{next(counter)}",
            "employee_id": "emp-1",
            "type": NoveltyType.ABSENCE,
            "date": date(2024, 3, 5),
        }
        values.update(overrides)
        return Novelty(**values)

    return _make


@pytest.fixture
def make_advance() -> Callable[..., AdvancePayment]:
    counter = iter(range(1, 10_000))

    def _make(**overrides: Any) -> AdvancePayment:
        values: dict[str, Any] = {
            "id": f"adv-{next(counter)}",
            "employee_id": "emp-1",
            "amount": Decimal("100000"),
            "month": "2024-03",
            "date": date(2024, 3, 15),
        }
        values.update(overrides)
        return AdvancePayment(**values)

    return _make


@pytest.fixture
def study_license(make_novelty) -> Novelty:
    """Recurring study license recorded in January 2024."""
    return make_novelty(
        id="lic-1",
        type=NoveltyType.STUDY_LICENSE,
        date=date(2024, 1, 10),
        bonus_amount=Decimal("200000"),
        description="Licencia por estudio",
        is_recurring=True,
        start_month="2024-01",
    )


@pytest_asyncio.fixture
async def db_engine():
    """Create test database engine with the schema in place."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def session(db_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a database session for each test."""
    session_factory = async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

    async with session_factory() as session:
        yield session
        await session.rollback()
