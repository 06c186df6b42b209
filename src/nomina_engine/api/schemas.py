"""Pydantic schemas for API request/response models."""

import datetime as dt
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from nomina_engine.calculators.types import (
    NOVELTY_TYPES,
    AdvancePayment,
    ContractType,
    DeductionRates,
    Employee,
    Novelty,
    NoveltySide,
    NoveltyType,
    PayrollRun,
    UnitType,
)

MONTH_PATTERN = r"^\d{4}-(0[1-9]|1[0-2])$"

_DEFAULT_RATES = DeductionRates()


class ErrorResponse(BaseModel):
    """Error body."""

    detail: str
    code: str


# ============================================================================
# Employee schemas
# ============================================================================


class EmployeeBase(BaseModel):
    """Editable employee fields."""

    name: str = Field(min_length=1)
    cedula: str = Field(min_length=1)
    contract_type: ContractType
    salary: Decimal = Field(ge=0)
    is_pensioned: bool = False
    created_date: dt.date | None = None
    date_of_birth: dt.date | None = None
    phone: str | None = None
    email: str | None = None
    eps: str | None = None


class EmployeeCreate(EmployeeBase):
    """Schema for adding an employee to the roster."""

    id: str | None = None

    def to_domain(self, employee_id: str | None = None) -> Employee:
        return Employee(
            id=employee_id or self.id or "",
            name=self.name,
            cedula=self.cedula,
            contract_type=self.contract_type,
            salary=self.salary,
            is_pensioned=self.is_pensioned,
            created_date=self.created_date,
            date_of_birth=self.date_of_birth,
            phone=self.phone,
            email=self.email,
            eps=self.eps,
        )


class EmployeeResponse(EmployeeBase):
    """Schema for employee response."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    worked_days_total: int


# ============================================================================
# Novelty schemas
# ============================================================================


class NoveltyCreate(BaseModel):
    """Schema for recording a novelty.

    The payload field must match the type: discount_days for absence-class
    types, bonus_amount for money types, hours for hour types and days for
    Sunday work. Hour and day additions may carry a bonus_amount that
    overrides the rate table. A zero in a field the type does not use
    counts as unset.
    """

    employee_id: str = Field(min_length=1)
    type: NoveltyType
    unit_type: UnitType | None = None
    date: dt.date
    description: str = ""
    discount_days: Decimal | None = Field(default=None, ge=0)
    bonus_amount: Decimal | None = Field(default=None, ge=0)
    hours: Decimal | None = Field(default=None, ge=0)
    days: Decimal | None = Field(default=None, ge=0)

    @model_validator(mode="after")
    def check_payload_matches_type(self) -> "NoveltyCreate":
        spec = NOVELTY_TYPES[self.type]
        if self.unit_type is not None and self.unit_type != spec.unit:
            raise ValueError(
                f"{self.type.value} is measured in {spec.unit.value}, not {self.unit_type.value}"
            )

        if spec.side is NoveltySide.DAY_DEDUCTION:
            required, allowed = "discount_days", {"discount_days"}
        elif spec.unit is UnitType.MONEY:
            required, allowed = "bonus_amount", {"bonus_amount"}
        elif spec.unit is UnitType.HOURS:
            required, allowed = "hours", {"hours", "bonus_amount"}
        else:
            required, allowed = "days", {"days", "bonus_amount"}

        if getattr(self, required) is None:
            raise ValueError(f"{self.type.value} requires {required}")
        extra = [
            name
            for name in ("discount_days", "bonus_amount", "hours", "days")
            if name not in allowed and getattr(self, name)
        ]
        if extra:
            raise ValueError(f"{self.type.value} does not accept {', '.join(extra)}")
        return self

    def to_domain(self) -> Novelty:
        return Novelty(
            id="",
            employee_id=self.employee_id,
            type=self.type,
            unit_type=NOVELTY_TYPES[self.type].unit,
            date=self.date,
            description=self.description,
            discount_days=self.discount_days or Decimal("0"),
            bonus_amount=self.bonus_amount or Decimal("0"),
            hours=self.hours,
            days=self.days,
        )


class NoveltyResponse(BaseModel):
    """Schema for novelty response (stored or synthesized)."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    employee_id: str
    employee_name: str
    type: NoveltyType
    unit_type: UnitType
    date: dt.date
    description: str
    discount_days: Decimal
    bonus_amount: Decimal
    hours: Decimal | None = None
    days: Decimal | None = None
    is_recurring: bool
    start_month: str | None = None
    origin_id: str | None = None


class NoveltyDeleteResponse(BaseModel):
    """Result of deleting a novelty."""

    deleted: str
    was_recurring_origin: bool


# ============================================================================
# Advance schemas
# ============================================================================


class AdvanceCreate(BaseModel):
    """Schema for recording a salary advance."""

    employee_id: str = Field(min_length=1)
    amount: Decimal = Field(ge=0)
    employee_fund: Decimal = Field(default=Decimal("0"), ge=0)
    employee_loan: Decimal = Field(default=Decimal("0"), ge=0)
    date: dt.date | None = None
    month: str = Field(pattern=MONTH_PATTERN)
    description: str = ""

    def to_domain(self) -> AdvancePayment:
        return AdvancePayment(
            id="",
            employee_id=self.employee_id,
            amount=self.amount,
            employee_fund=self.employee_fund,
            employee_loan=self.employee_loan,
            date=self.date,
            month=self.month,
            description=self.description,
        )


class AdvanceResponse(BaseModel):
    """Schema for advance response."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    employee_id: str
    employee_name: str
    amount: Decimal
    employee_fund: Decimal
    employee_loan: Decimal
    net_to_employee: Decimal
    date: dt.date | None = None
    month: str
    description: str


# ============================================================================
# Rate schemas
# ============================================================================


class RatesSchema(BaseModel):
    """Rate table; percentages for health/pension/solidarity, COP elsewhere."""

    model_config = ConfigDict(from_attributes=True)

    health: Decimal = Field(default=_DEFAULT_RATES.health, ge=0, le=100)
    pension: Decimal = Field(default=_DEFAULT_RATES.pension, ge=0, le=100)
    solidarity: Decimal = Field(default=_DEFAULT_RATES.solidarity, ge=0, le=100)
    transport_allowance: Decimal = Field(default=_DEFAULT_RATES.transport_allowance, ge=0)
    sunday1: Decimal = Field(default=_DEFAULT_RATES.sunday1, ge=0)
    sunday2: Decimal = Field(default=_DEFAULT_RATES.sunday2, ge=0)
    sunday3: Decimal = Field(default=_DEFAULT_RATES.sunday3, ge=0)
    overtime: Decimal = Field(default=_DEFAULT_RATES.overtime, ge=0)
    night_sellers: Decimal = Field(default=_DEFAULT_RATES.night_sellers, ge=0)
    night_surcharge: Decimal = Field(default=_DEFAULT_RATES.night_surcharge, ge=0)
    ordinary_hour: Decimal = Field(default=_DEFAULT_RATES.ordinary_hour, ge=0)
    minimum_salary: Decimal = Field(default=_DEFAULT_RATES.minimum_salary, gt=0)

    def to_domain(self) -> DeductionRates:
        return DeductionRates(**self.model_dump())


# ============================================================================
# Payroll schemas
# ============================================================================


class BonusBreakdownResponse(BaseModel):
    """Earned additions by category."""

    model_config = ConfigDict(from_attributes=True)

    fixed_compensation: Decimal
    sales_bonus: Decimal
    fixed_overtime: Decimal
    unexpected_overtime: Decimal
    night_surcharge: Decimal
    sunday_work: Decimal
    gas_allowance: Decimal
    study_license: Decimal
    total: Decimal


class DeductionBreakdownResponse(BaseModel):
    """Deductions by category."""

    model_config = ConfigDict(from_attributes=True)

    health: Decimal
    pension: Decimal
    solidarity: Decimal
    absence: Decimal
    advance: Decimal
    plan_corporativo: Decimal
    recordar: Decimal
    inventarios_cruces: Decimal
    multas: Decimal
    fondo_empleados: Decimal
    cartera_empleados: Decimal
    total: Decimal


class PayrollCalculationResponse(BaseModel):
    """One employee's calculated month."""

    model_config = ConfigDict(from_attributes=True)

    calculation_id: str
    month: str
    employee: EmployeeResponse
    worked_days: Decimal
    total_days_in_month: int
    discounted_days: Decimal
    base_salary: Decimal
    daily_salary: Decimal
    gross_salary: Decimal
    transport_allowance: Decimal
    bonuses: Decimal
    bonus_calculations: BonusBreakdownResponse
    deductions: DeductionBreakdownResponse
    total_earned: Decimal
    net_salary: Decimal
    novelties: list[NoveltyResponse]


class PayrollTotals(BaseModel):
    """Run-level sums shown on the preview screen."""

    employee_count: int
    gross: Decimal
    transport: Decimal
    bonuses: Decimal
    deductions: Decimal
    advances: Decimal
    net: Decimal


class PayrollRunResponse(BaseModel):
    """Schema for a calculated payroll month."""

    month: str
    as_of: dt.date
    calculations: list[PayrollCalculationResponse]
    totals: PayrollTotals

    @classmethod
    def from_domain(cls, run: PayrollRun) -> "PayrollRunResponse":
        return cls(
            month=run.month,
            as_of=run.as_of,
            calculations=[PayrollCalculationResponse.model_validate(c) for c in run.calculations],
            totals=PayrollTotals(
                employee_count=run.employee_count,
                gross=run.total_gross,
                transport=run.total_transport,
                bonuses=run.total_bonuses,
                deductions=run.total_deductions,
                advances=run.total_advances,
                net=run.total_net,
            ),
        )


class PayrollMonthsResponse(BaseModel):
    """Months with a saved payroll."""

    months: list[str]
