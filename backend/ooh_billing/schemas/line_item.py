"""
Bookable line item Pydantic schemas for request/response validation.
"""

from pydantic import BaseModel, Field, field_validator, model_validator
from typing import Optional, List, Literal, Set
from datetime import date
from decimal import Decimal

from ooh_billing.utils.date_span import as_calendar_date, days_between_inclusive
from ooh_billing.utils.rent_calculator import BillingMode


PricingContext = Literal["plan", "campaign"]
ApplyMode = Literal["selected", "all"]
MountingMode = Literal["sqft", "fixed"]


class LineItem(BaseModel):
    """One media asset's commercial terms inside a plan or campaign."""
    id: str = Field(..., min_length=1)
    asset_code: Optional[str] = None
    card_rate: Decimal = Field(default=Decimal("0"), ge=0)
    negotiated_price: Optional[Decimal] = None
    negotiated_rate: Optional[Decimal] = None
    sales_price: Optional[Decimal] = None
    final_price: Optional[Decimal] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    booked_days: Optional[int] = Field(None, ge=1)
    billing_mode: BillingMode = BillingMode.PRORATA_30
    total_sqft: Decimal = Field(default=Decimal("0"), ge=0)
    printing_rate: Optional[Decimal] = None
    printing_charges: Decimal = Field(default=Decimal("0"), ge=0)
    mounting_mode: MountingMode = "sqft"
    mounting_rate: Optional[Decimal] = None
    mounting_charges: Decimal = Field(default=Decimal("0"), ge=0)
    rent_amount: Optional[Decimal] = None
    daily_rate: Optional[Decimal] = None

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def _parse_calendar_date(cls, value):
        if value is None or value == "":
            return None
        return as_calendar_date(value)

    @model_validator(mode="after")
    def _check_window(self) -> "LineItem":
        if self.start_date and self.end_date:
            # raises InvalidDateRangeError for inverted windows
            self.booked_days = days_between_inclusive(self.start_date, self.end_date)
        return self


class LineItemUpdate(BaseModel):
    """Field changes for one line item produced by an edit or bulk operation."""
    item_id: str
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    booked_days: Optional[int] = None
    negotiated_price: Optional[Decimal] = None
    negotiated_rate: Optional[Decimal] = None
    printing_rate: Optional[Decimal] = None
    printing_charges: Optional[Decimal] = None
    mounting_mode: Optional[MountingMode] = None
    mounting_rate: Optional[Decimal] = None
    mounting_charges: Optional[Decimal] = None
    rent_amount: Optional[Decimal] = None
    daily_rate: Optional[Decimal] = None

    def changed_fields(self) -> dict:
        return self.model_dump(exclude_none=True, exclude={"item_id"})


class SkippedItem(BaseModel):
    item_id: str
    reason: str


class BulkUpdateResult(BaseModel):
    """Updates for every targeted item, applied by the caller as one unit."""
    updates: List[LineItemUpdate] = []
    skipped: List[SkippedItem] = []

    @property
    def updated_count(self) -> int:
        return len(self.updates)


class BulkTarget(BaseModel):
    """Which line items a bulk operation applies to."""
    items: List[LineItem]
    apply_mode: ApplyMode = "selected"
    selected_ids: Set[str] = set()
    context: PricingContext = "plan"
    document_start_date: Optional[date] = None
    document_end_date: Optional[date] = None


class BulkDatesRequest(BulkTarget):
    start_date: date
    end_date: date


class BulkDaysRequest(BulkTarget):
    booked_days: int


class BulkNegotiatedRateRequest(BulkTarget):
    rate: Decimal
    override_existing: bool = False


class BulkPrintingRequest(BulkTarget):
    rate_per_sqft: Decimal
    override_existing: bool = False


class BulkMountingRequest(BulkTarget):
    mode: MountingMode = "sqft"
    value: Decimal
    override_existing: bool = False


class NewLineItemRequest(BaseModel):
    """An asset being added to a plan or campaign."""
    item_id: str = Field(..., min_length=1)
    card_rate: Decimal = Field(..., ge=0)
    asset_code: Optional[str] = None
    total_sqft: Decimal = Field(default=Decimal("0"), ge=0)
    document_start_date: Optional[date] = None
    document_end_date: Optional[date] = None


class LineItemEditRequest(BaseModel):
    """One line item plus the document dates it falls back to."""
    item: LineItem
    context: PricingContext = "plan"
    document_start_date: Optional[date] = None
    document_end_date: Optional[date] = None


class LineItemPriceRequest(LineItemEditRequest):
    negotiated_price: Decimal = Field(..., gt=0)


class LineItemDatesRequest(LineItemEditRequest):
    start_date: date
    end_date: date


class LineItemDaysRequest(LineItemEditRequest):
    booked_days: int
