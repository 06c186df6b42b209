"""Novelty endpoints."""

from typing import Annotated

from fastapi import APIRouter, Path, Query, status

from nomina_engine.api.dependencies import Service
from nomina_engine.api.schemas import (
    MONTH_PATTERN,
    ErrorResponse,
    NoveltyCreate,
    NoveltyDeleteResponse,
    NoveltyResponse,
)

router = APIRouter(prefix="/novelties", tags=["novelties"])


@router.get("", response_model=list[NoveltyResponse])
async def list_novelties(
    service: Service,
    month: Annotated[str | None, Query(pattern=MONTH_PATTERN)] = None,
    employee_id: str | None = None,
) -> list[NoveltyResponse]:
    """List novelties.

    With ``month`` the response is the month's effective set, including
    study-license rows carried over from earlier months.
    """
    novelties = await service.list_novelties(month=month, employee_id=employee_id)
    return [NoveltyResponse.model_validate(n) for n in novelties]


@router.post(
    "",
    response_model=NoveltyResponse,
    status_code=status.HTTP_201_CREATED,
    responses={404: {"model": ErrorResponse}},
)
async def create_novelty(service: Service, payload: NoveltyCreate) -> NoveltyResponse:
    novelty = await service.add_novelty(payload.to_domain())
    return NoveltyResponse.model_validate(novelty)


@router.delete(
    "/{novelty_id}",
    response_model=NoveltyDeleteResponse,
    responses={404: {"model": ErrorResponse}},
)
async def delete_novelty(
    service: Service,
    novelty_id: Annotated[str, Path()],
) -> NoveltyDeleteResponse:
    was_origin = await service.delete_novelty(novelty_id)
    return NoveltyDeleteResponse(deleted=novelty_id, was_recurring_origin=was_origin)
