"""
Pricing API endpoints.
"""

from fastapi import APIRouter

from ooh_billing.deps.di_container import get_container
from ooh_billing.schemas.pricing import (
    DateSpanRequest,
    DateSpanResponse,
    EffectivePriceRequest,
    EffectivePriceResponse,
    RentRequest,
    RentResponse,
)

router = APIRouter()


@router.post("/effective-price", response_model=EffectivePriceResponse)
async def effective_price(request: EffectivePriceRequest) -> EffectivePriceResponse:
    """Resolve the authoritative monthly rate for a plan or campaign item."""
    controller = get_container().pricing_controller()
    return await controller.effective_price(request)


@router.post("/rent", response_model=RentResponse)
async def rent(request: RentRequest) -> RentResponse:
    """Pro-rata rent and daily rate for a booking window."""
    controller = get_container().pricing_controller()
    return await controller.rent(request)


@router.post("/date-span", response_model=DateSpanResponse)
async def date_span(request: DateSpanRequest) -> DateSpanResponse:
    """Complete a (start, end, days) triple from a start date and either an end date or a day count."""
    controller = get_container().pricing_controller()
    return await controller.date_span(request)
