"""Type definitions for the payroll calculation pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any

ZERO = Decimal("0")

# Days in the payroll month, regardless of the calendar month length
PAYROLL_DAYS = 30


def as_decimal(value: Any) -> Decimal:
    """Coerce a JSON-ish number to Decimal (None -> 0)."""
    if value is None or value == "":
        return ZERO
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def _opt_decimal(value: Any) -> Decimal | None:
    return None if value is None else as_decimal(value)


def _opt_date(value: Any) -> date | None:
    if value is None or value == "":
        return None
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def _money_dict(obj: Any) -> dict[str, str]:
    return {f.name: str(getattr(obj, f.name)) for f in fields(obj)}


class ContractType(str, Enum):
    """Contract class. Only NOMINA contracts earn transport subsidy."""

    OPS = "OPS"
    NOMINA = "NOMINA"


class UnitType(str, Enum):
    """Unit in which a novelty payload is expressed."""

    DAYS = "DAYS"
    MONEY = "MONEY"
    HOURS = "HOURS"


class NoveltySide(str, Enum):
    """Which side of the payslip a novelty lands on."""

    ADDITION = "ADDITION"
    DAY_DEDUCTION = "DAY_DEDUCTION"
    MONEY_DEDUCTION = "MONEY_DEDUCTION"


class NoveltyType(str, Enum):
    """Closed set of novelty (novedad) types."""

    ABSENCE = "ABSENCE"
    LATE = "LATE"
    EARLY_LEAVE = "EARLY_LEAVE"
    MEDICAL_LEAVE = "MEDICAL_LEAVE"
    VACATION = "VACATION"
    FIXED_COMPENSATION = "FIXED_COMPENSATION"
    SALES_BONUS = "SALES_BONUS"
    FIXED_OVERTIME = "FIXED_OVERTIME"
    UNEXPECTED_OVERTIME = "UNEXPECTED_OVERTIME"
    NIGHT_SURCHARGE = "NIGHT_SURCHARGE"
    SUNDAY_WORK = "SUNDAY_WORK"
    GAS_ALLOWANCE = "GAS_ALLOWANCE"
    STUDY_LICENSE = "STUDY_LICENSE"
    PLAN_CORPORATIVO = "PLAN_CORPORATIVO"
    RECORDAR = "RECORDAR"
    INVENTARIOS_CRUCES = "INVENTARIOS_CRUCES"
    MULTAS = "MULTAS"
    FONDO_EMPLEADOS = "FONDO_EMPLEADOS"
    CARTERA_EMPLEADOS = "CARTERA_EMPLEADOS"


@dataclass(frozen=True)
class NoveltyTypeSpec:
    """How one novelty type is measured and priced.

    ``category`` names the breakdown field the contribution lands in.
    ``rate_field`` names the DeductionRates attribute that prices a
    quantity (hours or days) when no explicit amount was recorded.
    """

    unit: UnitType
    side: NoveltySide
    label: str
    category: str | None = None
    rate_field: str | None = None


NOVELTY_TYPES: dict[NoveltyType, NoveltyTypeSpec] = {
    NoveltyType.ABSENCE: NoveltyTypeSpec(UnitType.DAYS, NoveltySide.DAY_DEDUCTION, "Ausencia"),
    NoveltyType.LATE: NoveltyTypeSpec(UnitType.DAYS, NoveltySide.DAY_DEDUCTION, "Llegada tarde"),
    NoveltyType.EARLY_LEAVE: NoveltyTypeSpec(
        UnitType.DAYS, NoveltySide.DAY_DEDUCTION, "Salida temprana"
    ),
    NoveltyType.MEDICAL_LEAVE: NoveltyTypeSpec(
        UnitType.DAYS, NoveltySide.DAY_DEDUCTION, "Incapacidad médica"
    ),
    NoveltyType.VACATION: NoveltyTypeSpec(UnitType.DAYS, NoveltySide.DAY_DEDUCTION, "Vacaciones"),
    NoveltyType.FIXED_COMPENSATION: NoveltyTypeSpec(
        UnitType.MONEY, NoveltySide.ADDITION, "Compensatorios fijos", "fixed_compensation"
    ),
    NoveltyType.SALES_BONUS: NoveltyTypeSpec(
        UnitType.MONEY, NoveltySide.ADDITION, "Bonificación en venta", "sales_bonus"
    ),
    NoveltyType.FIXED_OVERTIME: NoveltyTypeSpec(
        UnitType.HOURS, NoveltySide.ADDITION, "Horas extra fijas", "fixed_overtime", "ordinary_hour"
    ),
    NoveltyType.UNEXPECTED_OVERTIME: NoveltyTypeSpec(
        UnitType.HOURS, NoveltySide.ADDITION, "Horas extra NE", "unexpected_overtime", "overtime"
    ),
    NoveltyType.NIGHT_SURCHARGE: NoveltyTypeSpec(
        UnitType.HOURS,
        NoveltySide.ADDITION,
        "Recargos nocturnos",
        "night_surcharge",
        "night_surcharge",
    ),
    NoveltyType.SUNDAY_WORK: NoveltyTypeSpec(
        UnitType.DAYS, NoveltySide.ADDITION, "Festivos", "sunday_work", "sunday1"
    ),
    NoveltyType.GAS_ALLOWANCE: NoveltyTypeSpec(
        UnitType.MONEY, NoveltySide.ADDITION, "Auxilio de gasolina", "gas_allowance"
    ),
    NoveltyType.STUDY_LICENSE: NoveltyTypeSpec(
        UnitType.MONEY, NoveltySide.ADDITION, "Licencia por estudio", "study_license"
    ),
    NoveltyType.PLAN_CORPORATIVO: NoveltyTypeSpec(
        UnitType.MONEY, NoveltySide.MONEY_DEDUCTION, "Plan corporativo", "plan_corporativo"
    ),
    NoveltyType.RECORDAR: NoveltyTypeSpec(
        UnitType.MONEY, NoveltySide.MONEY_DEDUCTION, "Recordar", "recordar"
    ),
    NoveltyType.INVENTARIOS_CRUCES: NoveltyTypeSpec(
        UnitType.MONEY, NoveltySide.MONEY_DEDUCTION, "Inventarios y cruces", "inventarios_cruces"
    ),
    NoveltyType.MULTAS: NoveltyTypeSpec(
        UnitType.MONEY, NoveltySide.MONEY_DEDUCTION, "Multas", "multas"
    ),
    NoveltyType.FONDO_EMPLEADOS: NoveltyTypeSpec(
        UnitType.MONEY, NoveltySide.MONEY_DEDUCTION, "Fondo de empleados", "fondo_empleados"
    ),
    NoveltyType.CARTERA_EMPLEADOS: NoveltyTypeSpec(
        UnitType.MONEY, NoveltySide.MONEY_DEDUCTION, "Cartera empleados", "cartera_empleados"
    ),
}

DAY_DEDUCTION_TYPES = frozenset(
    t for t, spec in NOVELTY_TYPES.items() if spec.side is NoveltySide.DAY_DEDUCTION
)
RECURRING_TYPES = frozenset({NoveltyType.STUDY_LICENSE})


@dataclass
class Employee:
    """Employee as held in the roster."""

    id: str
    name: str
    cedula: str
    contract_type: ContractType
    salary: Decimal
    is_pensioned: bool = False
    created_date: date | None = None  # hire date; None means always active
    worked_days_total: int = 0  # tenure counter, not used by a month's calculation

    date_of_birth: date | None = None
    phone: str | None = None
    email: str | None = None
    eps: str | None = None

    @property
    def hire_month(self) -> str | None:
        if self.created_date is None:
            return None
        return self.created_date.strftime("%Y-%m")

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "cedula": self.cedula,
            "contract_type": self.contract_type.value,
            "salary": str(self.salary),
            "is_pensioned": self.is_pensioned,
            "created_date": self.created_date.isoformat() if self.created_date else None,
            "worked_days_total": self.worked_days_total,
            "date_of_birth": self.date_of_birth.isoformat() if self.date_of_birth else None,
            "phone": self.phone,
            "email": self.email,
            "eps": self.eps,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Employee:
        return cls(
            id=str(data["id"]),
            name=data.get("name", ""),
            cedula=str(data.get("cedula", "")),
            contract_type=ContractType(data.get("contract_type", ContractType.NOMINA)),
            salary=as_decimal(data.get("salary")),
            is_pensioned=bool(data.get("is_pensioned", False)),
            created_date=_opt_date(data.get("created_date")),
            worked_days_total=int(data.get("worked_days_total") or 0),
            date_of_birth=_opt_date(data.get("date_of_birth")),
            phone=data.get("phone"),
            email=data.get("email"),
            eps=data.get("eps"),
        )


@dataclass
class Novelty:
    """A dated payroll event attached to one employee."""

    id: str
    employee_id: str
    type: NoveltyType
    date: date
    unit_type: UnitType | None = None  # defaults to the type's fixed unit
    employee_name: str = ""
    description: str = ""

    # Payload (exactly one is meaningful, per unit and side)
    discount_days: Decimal = ZERO
    bonus_amount: Decimal = ZERO
    hours: Decimal | None = None
    days: Decimal | None = None

    # Recurrence (study license only)
    is_recurring: bool = False
    start_month: str | None = None

    # Set on rows synthesized from a recurring origin
    origin_id: str | None = None

    def __post_init__(self) -> None:
        if self.unit_type is None:
            self.unit_type = NOVELTY_TYPES[self.type].unit

    @property
    def spec(self) -> NoveltyTypeSpec:
        return NOVELTY_TYPES[self.type]

    @property
    def month(self) -> str:
        """Year-month key of the occurrence date."""
        return self.date.strftime("%Y-%m")

    @property
    def is_recurring_license(self) -> bool:
        return (
            self.is_recurring
            and self.start_month is not None
            and self.type in RECURRING_TYPES
        )

    @property
    def is_synthetic(self) -> bool:
        return self.origin_id is not None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "employee_id": self.employee_id,
            "employee_name": self.employee_name,
            "type": self.type.value,
            "unit_type": self.unit_type.value if self.unit_type else None,
            "date": self.date.isoformat(),
            "description": self.description,
            "discount_days": str(self.discount_days),
            "bonus_amount": str(self.bonus_amount),
            "hours": str(self.hours) if self.hours is not None else None,
            "days": str(self.days) if self.days is not None else None,
            "is_recurring": self.is_recurring,
            "start_month": self.start_month,
            "origin_id": self.origin_id,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Novelty:
        """Build a novelty from a stored row.

        Study licenses saved before recurrence existed carry no flag; they
        load as recurring from the month of their date.
        """
        unit = data.get("unit_type")
        novelty_type = NoveltyType(data["type"])
        novelty_date = _opt_date(data["date"])
        is_recurring = data.get("is_recurring")
        if is_recurring is None:
            is_recurring = novelty_type in RECURRING_TYPES
        start_month = data.get("start_month")
        if is_recurring and not start_month and novelty_date is not None:
            start_month = novelty_date.strftime("%Y-%m")
        return cls(
            id=str(data["id"]),
            employee_id=str(data["employee_id"]),
            type=novelty_type,
            date=novelty_date,
            unit_type=UnitType(unit) if unit else None,
            employee_name=data.get("employee_name", ""),
            description=data.get("description") or "",
            discount_days=as_decimal(data.get("discount_days")),
            bonus_amount=as_decimal(data.get("bonus_amount")),
            hours=_opt_decimal(data.get("hours")),
            days=_opt_decimal(data.get("days")),
            is_recurring=bool(is_recurring),
            start_month=start_month,
            origin_id=data.get("origin_id"),
        )


@dataclass
class AdvancePayment:
    """Mid-period cash advance (anticipo quincena) offset against one month."""

    id: str
    employee_id: str
    amount: Decimal
    month: str  # payroll month it offsets, independent of the issue date
    date: date | None = None
    employee_name: str = ""
    employee_fund: Decimal = ZERO  # withheld from the advance, not from payroll
    employee_loan: Decimal = ZERO
    description: str = ""

    @property
    def net_to_employee(self) -> Decimal:
        return self.amount - self.employee_fund - self.employee_loan

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "employee_id": self.employee_id,
            "employee_name": self.employee_name,
            "amount": str(self.amount),
            "employee_fund": str(self.employee_fund),
            "employee_loan": str(self.employee_loan),
            "date": self.date.isoformat() if self.date else None,
            "month": self.month,
            "description": self.description,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AdvancePayment:
        return cls(
            id=str(data["id"]),
            employee_id=str(data["employee_id"]),
            amount=as_decimal(data.get("amount")),
            month=data["month"],
            date=_opt_date(data.get("date")),
            employee_name=data.get("employee_name", ""),
            employee_fund=as_decimal(data.get("employee_fund")),
            employee_loan=as_decimal(data.get("employee_loan")),
            description=data.get("description") or "",
        )


@dataclass(frozen=True)
class DeductionRates:
    """Rate table for one calculation run (COP).

    health, pension and solidarity are percentages; the rest are flat
    amounts. sunday2, sunday3 and night_sellers are kept for the rate
    screen but no novelty type prices with them.
    """

    health: Decimal = Decimal("4")
    pension: Decimal = Decimal("4")
    solidarity: Decimal = Decimal("1")
    transport_allowance: Decimal = Decimal("162000")
    sunday1: Decimal = Decimal("37200")
    sunday2: Decimal = Decimal("25500")
    sunday3: Decimal = Decimal("23200")
    overtime: Decimal = Decimal("7800")
    night_sellers: Decimal = Decimal("32800")
    night_surcharge: Decimal = Decimal("2200")
    ordinary_hour: Decimal = Decimal("6200")
    minimum_salary: Decimal = Decimal("1300000")

    def to_dict(self) -> dict[str, str]:
        return _money_dict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> DeductionRates:
        """Build rates, keeping defaults for any field not supplied."""
        if not data:
            return cls()
        known = {f.name for f in fields(cls)}
        return cls(**{k: as_decimal(v) for k, v in data.items() if k in known and v is not None})


@dataclass
class BonusBreakdown:
    """Earned additions by category."""

    fixed_compensation: Decimal = ZERO
    sales_bonus: Decimal = ZERO
    fixed_overtime: Decimal = ZERO
    unexpected_overtime: Decimal = ZERO
    night_surcharge: Decimal = ZERO
    sunday_work: Decimal = ZERO
    gas_allowance: Decimal = ZERO
    study_license: Decimal = ZERO
    total: Decimal = ZERO

    def to_dict(self) -> dict[str, str]:
        return _money_dict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> BonusBreakdown:
        return cls(**{k: as_decimal(v) for k, v in data.items()})


@dataclass
class DeductionBreakdown:
    """Statutory and ad-hoc deductions by category."""

    health: Decimal = ZERO
    pension: Decimal = ZERO
    solidarity: Decimal = ZERO
    absence: Decimal = ZERO
    advance: Decimal = ZERO
    plan_corporativo: Decimal = ZERO
    recordar: Decimal = ZERO
    inventarios_cruces: Decimal = ZERO
    multas: Decimal = ZERO
    fondo_empleados: Decimal = ZERO
    cartera_empleados: Decimal = ZERO
    total: Decimal = ZERO

    def to_dict(self) -> dict[str, str]:
        return _money_dict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DeductionBreakdown:
        return cls(**{k: as_decimal(v) for k, v in data.items()})


@dataclass
class PayrollCalculation:
    """Result of calculating one employee's month."""

    calculation_id: str
    month: str
    employee: Employee
    worked_days: Decimal
    discounted_days: Decimal
    base_salary: Decimal
    daily_salary: Decimal
    gross_salary: Decimal
    transport_allowance: Decimal
    bonus_calculations: BonusBreakdown
    deductions: DeductionBreakdown
    total_earned: Decimal
    net_salary: Decimal
    novelties: list[Novelty] = field(default_factory=list)
    total_days_in_month: int = PAYROLL_DAYS

    @property
    def bonuses(self) -> Decimal:
        return self.bonus_calculations.total

    def to_dict(self) -> dict[str, Any]:
        return {
            "calculation_id": self.calculation_id,
            "month": self.month,
            "employee": self.employee.to_dict(),
            "worked_days": str(self.worked_days),
            "total_days_in_month": self.total_days_in_month,
            "discounted_days": str(self.discounted_days),
            "base_salary": str(self.base_salary),
            "daily_salary": str(self.daily_salary),
            "gross_salary": str(self.gross_salary),
            "transport_allowance": str(self.transport_allowance),
            "bonuses": str(self.bonuses),
            "bonus_calculations": self.bonus_calculations.to_dict(),
            "deductions": self.deductions.to_dict(),
            "total_earned": str(self.total_earned),
            "net_salary": str(self.net_salary),
            "novelties": [n.to_dict() for n in self.novelties],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PayrollCalculation:
        return cls(
            calculation_id=data["calculation_id"],
            month=data["month"],
            employee=Employee.from_dict(data["employee"]),
            worked_days=as_decimal(data["worked_days"]),
            total_days_in_month=int(data.get("total_days_in_month", PAYROLL_DAYS)),
            discounted_days=as_decimal(data["discounted_days"]),
            base_salary=as_decimal(data["base_salary"]),
            daily_salary=as_decimal(data["daily_salary"]),
            gross_salary=as_decimal(data["gross_salary"]),
            transport_allowance=as_decimal(data["transport_allowance"]),
            bonus_calculations=BonusBreakdown.from_dict(data["bonus_calculations"]),
            deductions=DeductionBreakdown.from_dict(data["deductions"]),
            total_earned=as_decimal(data["total_earned"]),
            net_salary=as_decimal(data["net_salary"]),
            novelties=[Novelty.from_dict(n) for n in data.get("novelties", [])],
        )


@dataclass
class PayrollRun:
    """Result of one "calculate" action over the roster."""

    month: str
    as_of: date
    calculations: list[PayrollCalculation] = field(default_factory=list)

    @property
    def employee_count(self) -> int:
        return len(self.calculations)

    @property
    def total_gross(self) -> Decimal:
        return sum((c.gross_salary for c in self.calculations), ZERO)

    @property
    def total_transport(self) -> Decimal:
        return sum((c.transport_allowance for c in self.calculations), ZERO)

    @property
    def total_bonuses(self) -> Decimal:
        return sum((c.bonuses for c in self.calculations), ZERO)

    @property
    def total_deductions(self) -> Decimal:
        return sum((c.deductions.total for c in self.calculations), ZERO)

    @property
    def total_advances(self) -> Decimal:
        return sum((c.deductions.advance for c in self.calculations), ZERO)

    @property
    def total_net(self) -> Decimal:
        return sum((c.net_salary for c in self.calculations), ZERO)

    def to_dict(self) -> dict[str, Any]:
        return {
            "month": self.month,
            "as_of": self.as_of.isoformat(),
            "calculations": [c.to_dict() for c in self.calculations],
            "totals": {
                "employee_count": self.employee_count,
                "gross": str(self.total_gross),
                "transport": str(self.total_transport),
                "bonuses": str(self.total_bonuses),
                "deductions": str(self.total_deductions),
                "advances": str(self.total_advances),
                "net": str(self.total_net),
            },
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PayrollRun:
        return cls(
            month=data["month"],
            as_of=_opt_date(data["as_of"]),
            calculations=[PayrollCalculation.from_dict(c) for c in data.get("calculations", [])],
        )
