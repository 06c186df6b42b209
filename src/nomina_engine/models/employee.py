"""Employee roster model."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from sqlalchemy import Boolean, CheckConstraint, Date, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from nomina_engine.calculators.types import ContractType, Employee
from nomina_engine.models.base import Base, TimestampMixin


class EmployeeRecord(Base, TimestampMixin):
    """Stored roster entry."""

    __tablename__ = "employee"

    employee_id: Mapped[str] = mapped_column(String, primary_key=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    cedula: Mapped[str] = mapped_column(String, nullable=False)
    contract_type: Mapped[str] = mapped_column(String, nullable=False)
    salary: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    is_pensioned: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    worked_days_total: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    date_of_birth: Mapped[date | None] = mapped_column(Date, nullable=True)
    phone: Mapped[str | None] = mapped_column(String, nullable=True)
    email: Mapped[str | None] = mapped_column(String, nullable=True)
    eps: Mapped[str | None] = mapped_column(String, nullable=True)

    __table_args__ = (
        CheckConstraint("salary >= 0", name="employee_salary_non_negative"),
        CheckConstraint(
            "contract_type IN ('OPS', 'NOMINA')",
            name="employee_contract_type_check",
        ),
    )

    def to_domain(self) -> Employee:
        return Employee(
            id=self.employee_id,
            name=self.name,
            cedula=self.cedula,
            contract_type=ContractType(self.contract_type),
            salary=Decimal(self.salary),
            is_pensioned=self.is_pensioned,
            created_date=self.created_date,
            worked_days_total=self.worked_days_total,
            date_of_birth=self.date_of_birth,
            phone=self.phone,
            email=self.email,
            eps=self.eps,
        )

    @classmethod
    def from_domain(cls, employee: Employee) -> EmployeeRecord:
        return cls(
            employee_id=employee.id,
            name=employee.name,
            cedula=employee.cedula,
            contract_type=employee.contract_type.value,
            salary=employee.salary,
            is_pensioned=employee.is_pensioned,
            created_date=employee.created_date,
            worked_days_total=employee.worked_days_total,
            date_of_birth=employee.date_of_birth,
            phone=employee.phone,
            email=employee.email,
            eps=employee.eps,
        )
