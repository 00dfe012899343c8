"""
Pricing controller.
Exposes the effective price, rent and date-span calculations.
"""

from ooh_billing.controllers.base_controller import BaseController
from ooh_billing.schemas.pricing import (
    DateSpanRequest,
    DateSpanResponse,
    EffectivePriceRequest,
    EffectivePriceResponse,
    RentRequest,
    RentResponse,
)
from ooh_billing.utils.date_span import days_between_inclusive, end_from_start_and_days, to_canonical_date_string
from ooh_billing.utils.effective_price import resolve_effective_price
from ooh_billing.utils.rent_calculator import compute_rent, pro_rata_factor


class PricingController(BaseController):
    """Controller for stateless pricing calculations."""

    async def effective_price(self, request: EffectivePriceRequest) -> EffectivePriceResponse:
        resolved = resolve_effective_price(request, request.context)
        return EffectivePriceResponse(
            context=request.context,
            effective_price=resolved.value,
            source_field=resolved.source_field,
        )

    async def rent(self, request: RentRequest) -> RentResponse:
        result = compute_rent(request.monthly_rate, request.start_date, request.end_date, request.billing_mode)
        return RentResponse(
            booked_days=result.booked_days,
            daily_rate=result.daily_rate,
            rent_amount=result.rent_amount,
            billing_mode=result.billing_mode.value,
            pro_rata_factor=pro_rata_factor(result.booked_days),
        )

    async def date_span(self, request: DateSpanRequest) -> DateSpanResponse:
        """An explicit end date wins over a day count."""
        if request.end_date is not None:
            end = request.end_date
            days = days_between_inclusive(request.start_date, end)
        else:
            days = request.booked_days
            end = end_from_start_and_days(request.start_date, days)
        return DateSpanResponse(
            start_date=to_canonical_date_string(request.start_date),
            end_date=to_canonical_date_string(end),
            booked_days=days,
        )
