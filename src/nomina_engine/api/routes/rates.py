"""Rate table endpoints."""

from fastapi import APIRouter

from nomina_engine.api.dependencies import Service
from nomina_engine.api.schemas import RatesSchema

router = APIRouter(prefix="/rates", tags=["rates"])


@router.get("", response_model=RatesSchema)
async def get_rates(service: Service) -> RatesSchema:
    return RatesSchema.model_validate(await service.get_rates())


@router.put("", response_model=RatesSchema)
async def update_rates(service: Service, payload: RatesSchema) -> RatesSchema:
    """Replace the whole rate table; omitted fields take their defaults."""
    rates = await service.update_rates(payload.to_domain())
    return RatesSchema.model_validate(rates)


@router.post("/reset", response_model=RatesSchema)
async def reset_rates(service: Service) -> RatesSchema:
    return RatesSchema.model_validate(await service.reset_rates())
