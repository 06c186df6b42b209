"""Novelty, advance, rate and payroll snapshot models."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Any

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    Date,
    DateTime,
    Integer,
    Numeric,
    String,
    Text,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column

from nomina_engine.calculators.types import (
    AdvancePayment,
    DeductionRates,
    Novelty,
    NoveltyType,
    PayrollRun,
    UnitType,
)
from nomina_engine.models.base import Base, TimestampMixin


class NoveltyRecord(Base, TimestampMixin):
    """Stored novelty row. A recurring origin row doubles as its schedule."""

    __tablename__ = "novelty"

    novelty_id: Mapped[str] = mapped_column(String, primary_key=True)
    employee_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    employee_name: Mapped[str] = mapped_column(String, nullable=False, default="")
    novelty_type: Mapped[str] = mapped_column(String, nullable=False)
    unit_type: Mapped[str] = mapped_column(String, nullable=False)
    novelty_date: Mapped[date] = mapped_column(Date, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")

    discount_days: Mapped[Decimal] = mapped_column(Numeric(7, 2), nullable=False, default=0)
    bonus_amount: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False, default=0)
    hours: Mapped[Decimal | None] = mapped_column(Numeric(7, 2), nullable=True)
    days: Mapped[Decimal | None] = mapped_column(Numeric(7, 2), nullable=True)

    is_recurring: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    start_month: Mapped[str | None] = mapped_column(String(7), nullable=True)

    __table_args__ = (
        CheckConstraint("unit_type IN ('DAYS', 'MONEY', 'HOURS')", name="novelty_unit_type_check"),
        CheckConstraint(
            "NOT is_recurring OR start_month IS NOT NULL",
            name="novelty_recurring_start_month",
        ),
    )

    def to_domain(self) -> Novelty:
        return Novelty(
            id=self.novelty_id,
            employee_id=self.employee_id,
            employee_name=self.employee_name,
            type=NoveltyType(self.novelty_type),
            unit_type=UnitType(self.unit_type),
            date=self.novelty_date,
            description=self.description,
            discount_days=Decimal(self.discount_days),
            bonus_amount=Decimal(self.bonus_amount),
            hours=Decimal(self.hours) if self.hours is not None else None,
            days=Decimal(self.days) if self.days is not None else None,
            is_recurring=self.is_recurring,
            start_month=self.start_month,
        )

    @classmethod
    def from_domain(cls, novelty: Novelty) -> NoveltyRecord:
        return cls(
            novelty_id=novelty.id,
            employee_id=novelty.employee_id,
            employee_name=novelty.employee_name,
            novelty_type=novelty.type.value,
            unit_type=novelty.unit_type.value,
            novelty_date=novelty.date,
            description=novelty.description,
            discount_days=novelty.discount_days,
            bonus_amount=novelty.bonus_amount,
            hours=novelty.hours,
            days=novelty.days,
            is_recurring=novelty.is_recurring,
            start_month=novelty.start_month,
        )


class AdvanceRecord(Base, TimestampMixin):
    """Stored salary advance."""

    __tablename__ = "advance_payment"

    advance_id: Mapped[str] = mapped_column(String, primary_key=True)
    employee_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    employee_name: Mapped[str] = mapped_column(String, nullable=False, default="")
    amount: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    employee_fund: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False, default=0)
    employee_loan: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False, default=0)
    advance_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    month: Mapped[str] = mapped_column(String(7), nullable=False, index=True)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")

    def to_domain(self) -> AdvancePayment:
        return AdvancePayment(
            id=self.advance_id,
            employee_id=self.employee_id,
            employee_name=self.employee_name,
            amount=Decimal(self.amount),
            employee_fund=Decimal(self.employee_fund),
            employee_loan=Decimal(self.employee_loan),
            date=self.advance_date,
            month=self.month,
            description=self.description,
        )

    @classmethod
    def from_domain(cls, advance: AdvancePayment) -> AdvanceRecord:
        return cls(
            advance_id=advance.id,
            employee_id=advance.employee_id,
            employee_name=advance.employee_name,
            amount=advance.amount,
            employee_fund=advance.employee_fund,
            employee_loan=advance.employee_loan,
            advance_date=advance.date,
            month=advance.month,
            description=advance.description,
        )


class RatesRecord(Base):
    """Single-row rate table; missing row means legal defaults."""

    __tablename__ = "deduction_rates"

    rates_id: Mapped[int] = mapped_column(Integer, primary_key=True, default=1)
    rates_json: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    def to_domain(self) -> DeductionRates:
        return DeductionRates.from_dict(self.rates_json)


class PayrollSnapshot(Base):
    """Calculated month kept for historical lookups, keyed by month."""

    __tablename__ = "payroll_snapshot"

    month: Mapped[str] = mapped_column(String(7), primary_key=True)
    as_of: Mapped[date] = mapped_column(Date, nullable=False)
    payload: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)
    computed_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    def to_domain(self) -> PayrollRun:
        return PayrollRun.from_dict(self.payload)
