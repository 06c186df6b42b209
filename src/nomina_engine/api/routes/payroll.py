"""Monthly payroll endpoints."""

from datetime import date
from typing import Annotated

from fastapi import APIRouter, Path, Query

from nomina_engine.api.dependencies import Service
from nomina_engine.api.schemas import (
    MONTH_PATTERN,
    ErrorResponse,
    PayrollMonthsResponse,
    PayrollRunResponse,
)

router = APIRouter(prefix="/payroll", tags=["payroll"])

MonthPath = Annotated[str, Path(pattern=MONTH_PATTERN)]


@router.get("", response_model=PayrollMonthsResponse)
async def list_payroll_months(service: Service) -> PayrollMonthsResponse:
    """Months with a saved payroll, oldest first."""
    return PayrollMonthsResponse(months=await service.list_months())


@router.post(
    "/{month}/calculate",
    response_model=PayrollRunResponse,
    responses={422: {"model": ErrorResponse}},
)
async def calculate_payroll(
    service: Service,
    month: MonthPath,
    as_of: Annotated[date | None, Query()] = None,
) -> PayrollRunResponse:
    """Calculate the month and save it, replacing any earlier run."""
    run = await service.calculate_month(month, as_of)
    return PayrollRunResponse.from_domain(run)


@router.get("/{month}/preview", response_model=PayrollRunResponse)
async def preview_payroll(
    service: Service,
    month: MonthPath,
    as_of: Annotated[date | None, Query()] = None,
) -> PayrollRunResponse:
    """Calculate without saving. Deterministic for the same inputs and as_of."""
    run = await service.preview_month(month, as_of)
    return PayrollRunResponse.from_domain(run)


@router.get(
    "/{month}",
    response_model=PayrollRunResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_payroll(service: Service, month: MonthPath) -> PayrollRunResponse:
    run = await service.get_month(month)
    return PayrollRunResponse.from_domain(run)
