"""Salary advance endpoints."""

from typing import Annotated

from fastapi import APIRouter, Path, Query, status

from nomina_engine.api.dependencies import Service
from nomina_engine.api.schemas import (
    MONTH_PATTERN,
    AdvanceCreate,
    AdvanceResponse,
    ErrorResponse,
)

router = APIRouter(prefix="/advances", tags=["advances"])


@router.get("", response_model=list[AdvanceResponse])
async def list_advances(
    service: Service,
    month: Annotated[str | None, Query(pattern=MONTH_PATTERN)] = None,
) -> list[AdvanceResponse]:
    advances = await service.list_advances(month)
    return [AdvanceResponse.model_validate(a) for a in advances]


@router.post(
    "",
    response_model=AdvanceResponse,
    status_code=status.HTTP_201_CREATED,
    responses={404: {"model": ErrorResponse}},
)
async def create_advance(service: Service, payload: AdvanceCreate) -> AdvanceResponse:
    advance = await service.add_advance(payload.to_domain())
    return AdvanceResponse.model_validate(advance)


@router.delete(
    "/{advance_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}},
)
async def delete_advance(
    service: Service,
    advance_id: Annotated[str, Path()],
) -> None:
    await service.delete_advance(advance_id)
