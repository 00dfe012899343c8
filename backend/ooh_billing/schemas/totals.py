"""
Plan/campaign document totals schemas.
"""

from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import date
from decimal import Decimal

from ooh_billing.schemas.line_item import LineItem, PricingContext


class BookingDocument(BaseModel):
    """Parent plan or campaign of a set of line items."""
    name: str = Field(default="Plan", max_length=255)
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    gst_percent: Decimal = Field(default=Decimal("0"), ge=0)
    manual_discount_amount: Decimal = Field(default=Decimal("0"))
    billing_cycle: Optional[str] = None


class BillingPeriod(BaseModel):
    """One month (or the whole span, for short bookings) of a billing schedule."""
    month_key: str  # "YYYY-MM"
    label: str  # "January 2024"
    period_start: date
    period_end: date
    days_in_period: int
    pro_rata_factor: Decimal
    is_first_month: bool
    is_last_month: bool
    is_current_month: bool


class DocumentTotals(BaseModel):
    """Totals for a plan or campaign; every figure is rounded once from full precision."""
    display_cost: Decimal
    line_rent_total: Decimal
    printing_cost: Decimal
    mounting_cost: Decimal
    gross_amount: Decimal
    manual_discount_amount: Decimal
    taxable_amount: Decimal
    gst_rate: Decimal
    gst_amount: Decimal
    grand_total: Decimal
    one_time_charges: Decimal
    period_start: Optional[date] = None
    period_end: Optional[date] = None
    duration_days: int = 0
    total_months: int = 0
    monthly_display_rent: Decimal
    billing_periods: List[BillingPeriod] = []
    total_assets: int


class PeriodAmount(BaseModel):
    base_rent: Decimal
    printing: Decimal
    mounting: Decimal
    discount: Decimal
    subtotal: Decimal
    gst_amount: Decimal
    total: Decimal


class DocumentTotalsRequest(BaseModel):
    document: BookingDocument
    items: List[LineItem]
    context: PricingContext = "plan"


class PeriodAmountRequest(DocumentTotalsRequest):
    month_key: str = Field(..., pattern=r"^\d{4}-\d{2}$")
    include_printing: bool = False
    include_mounting: bool = False
