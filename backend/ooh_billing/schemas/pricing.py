"""
Pricing calculation schemas.
"""

from pydantic import BaseModel, Field, model_validator
from typing import Optional
from datetime import date
from decimal import Decimal

from ooh_billing.schemas.line_item import PricingContext


class EffectivePriceRequest(BaseModel):
    """Candidate price fields; any may be missing, zero or negative."""
    context: PricingContext = "plan"
    negotiated_price: Optional[Decimal] = None
    negotiated_rate: Optional[Decimal] = None
    sales_price: Optional[Decimal] = None
    final_price: Optional[Decimal] = None
    card_rate: Optional[Decimal] = None


class EffectivePriceResponse(BaseModel):
    context: PricingContext
    effective_price: Decimal
    source_field: Optional[str] = None


class RentRequest(BaseModel):
    # Range and mode checks run in the calculator so they raise pricing errors
    monthly_rate: Decimal
    start_date: date
    end_date: date
    billing_mode: str = "PRORATA_30"


class RentResponse(BaseModel):
    booked_days: int
    daily_rate: Decimal
    rent_amount: Decimal
    billing_mode: str
    pro_rata_factor: Decimal


class DateSpanRequest(BaseModel):
    """Start date plus either an end date or a day count."""
    start_date: date
    end_date: Optional[date] = None
    booked_days: Optional[int] = Field(None, ge=1)

    @model_validator(mode="after")
    def _one_of_end_or_days(self) -> "DateSpanRequest":
        if self.end_date is None and self.booked_days is None:
            raise ValueError("Provide end_date or booked_days")
        return self


class DateSpanResponse(BaseModel):
    start_date: str  # ISO date string "YYYY-MM-DD"
    end_date: str
    booked_days: int
