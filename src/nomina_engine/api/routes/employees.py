"""Employee roster endpoints."""

from typing import Annotated

from fastapi import APIRouter, Path, Query, status

from nomina_engine.api.dependencies import Service
from nomina_engine.api.schemas import (
    MONTH_PATTERN,
    EmployeeCreate,
    EmployeeResponse,
    ErrorResponse,
)

router = APIRouter(prefix="/employees", tags=["employees"])


@router.get("", response_model=list[EmployeeResponse])
async def list_employees(
    service: Service,
    month: Annotated[str | None, Query(pattern=MONTH_PATTERN)] = None,
) -> list[EmployeeResponse]:
    """List the roster, or only employees hired on or before ``month``."""
    employees = await service.list_employees(month)
    return [EmployeeResponse.model_validate(e) for e in employees]


@router.post(
    "",
    response_model=EmployeeResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_employee(service: Service, payload: EmployeeCreate) -> EmployeeResponse:
    employee = await service.add_employee(payload.to_domain())
    return EmployeeResponse.model_validate(employee)


@router.post("/tenure/refresh", response_model=list[EmployeeResponse])
async def refresh_tenure(service: Service) -> list[EmployeeResponse]:
    """Recompute worked_days_total for the whole roster."""
    employees = await service.refresh_tenure()
    return [EmployeeResponse.model_validate(e) for e in employees]


@router.get(
    "/{employee_id}",
    response_model=EmployeeResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_employee(
    service: Service,
    employee_id: Annotated[str, Path()],
) -> EmployeeResponse:
    return EmployeeResponse.model_validate(await service.get_employee(employee_id))


@router.put(
    "/{employee_id}",
    response_model=EmployeeResponse,
    responses={404: {"model": ErrorResponse}},
)
async def update_employee(
    service: Service,
    employee_id: Annotated[str, Path()],
    payload: EmployeeCreate,
) -> EmployeeResponse:
    employee = await service.update_employee(payload.to_domain(employee_id))
    return EmployeeResponse.model_validate(employee)


@router.delete(
    "/{employee_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}},
)
async def delete_employee(
    service: Service,
    employee_id: Annotated[str, Path()],
) -> None:
    await service.delete_employee(employee_id)
