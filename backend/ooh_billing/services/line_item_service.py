"""
Line item service.
Creates bookable line items and keeps booked days, rent and daily rate in
step with their price and dates after every edit.
"""

import logging
from datetime import date
from decimal import Decimal
from typing import Optional, Tuple

from ooh_billing.core.config import settings
from ooh_billing.core.exceptions import InvalidBulkRequestError
from ooh_billing.schemas.line_item import LineItem
from ooh_billing.services.base_service import BaseService
from ooh_billing.utils.date_span import (
    DateLike,
    as_calendar_date,
    days_between_inclusive,
    end_from_start_and_days,
    optional_calendar_date,
)
from ooh_billing.utils.effective_price import NEGOTIATED_FIELD_BY_CONTEXT, resolve_effective_price
from ooh_billing.utils.rent_calculator import RentResult, compute_rent

logger = logging.getLogger(__name__)


class LineItemService(BaseService):
    """Service for single line item edits."""

    def booking_window(
        self,
        item: LineItem,
        document_start: Optional[date] = None,
        document_end: Optional[date] = None,
    ) -> Tuple[Optional[date], Optional[date]]:
        """Item dates, each falling back to the parent document's date."""
        return item.start_date or document_start, item.end_date or document_end

    def compute_item_rent(
        self,
        item: LineItem,
        context: str = "plan",
        document_start: Optional[date] = None,
        document_end: Optional[date] = None,
        monthly_rate: Optional[Decimal] = None,
    ) -> Optional[RentResult]:
        """Rent for the item's window, or None if the window is not known yet."""
        start, end = self.booking_window(item, document_start, document_end)
        if start is None or end is None:
            return None
        if monthly_rate is None:
            monthly_rate = resolve_effective_price(item, context).value
        return compute_rent(monthly_rate, start, end, item.billing_mode)

    def recalculate(
        self,
        item: LineItem,
        context: str = "plan",
        document_start: Optional[date] = None,
        document_end: Optional[date] = None,
    ) -> LineItem:
        """Return a copy with booked_days, rent_amount and daily_rate re-derived."""
        rent = self.compute_item_rent(item, context, document_start, document_end)
        if rent is None:
            return item.model_copy(update={"rent_amount": None, "daily_rate": None})
        return item.model_copy(
            update={
                "booked_days": rent.booked_days,
                "rent_amount": rent.rent_amount,
                "daily_rate": rent.daily_rate,
            }
        )

    def new_line_item(
        self,
        item_id: str,
        card_rate: Decimal,
        document_start: Optional[DateLike] = None,
        document_end: Optional[DateLike] = None,
        asset_code: Optional[str] = None,
        total_sqft: Decimal = Decimal("0"),
    ) -> LineItem:
        """
        Create a line item for an asset added to a plan or campaign.

        The card rate is copied in and the dates default to the document's
        range. Without a document range booked_days defaults to the standard
        30 day cycle.

        Raises:
            InvalidDateRangeError: If the document range is inverted.
        """
        start = optional_calendar_date(document_start)
        end = optional_calendar_date(document_end)
        if start is not None and end is not None:
            # raises InvalidDateRangeError before the item is built
            days_between_inclusive(start, end)
        if start is not None and end is None:
            end = end_from_start_and_days(start, settings.DEFAULT_BOOKED_DAYS)

        item = LineItem(
            id=item_id,
            asset_code=asset_code,
            card_rate=card_rate,
            start_date=start,
            end_date=end,
            booked_days=settings.DEFAULT_BOOKED_DAYS,
            billing_mode=settings.DEFAULT_BILLING_MODE,
            total_sqft=total_sqft,
        )
        return self.recalculate(item)

    def apply_price(
        self,
        item: LineItem,
        negotiated_price: Decimal,
        context: str = "plan",
        document_start: Optional[date] = None,
        document_end: Optional[date] = None,
    ) -> LineItem:
        """Set the negotiated price in the field the context prices from, then recompute rent."""
        field = NEGOTIATED_FIELD_BY_CONTEXT[context]
        updated = item.model_copy(update={field: negotiated_price})
        return self.recalculate(updated, context, document_start, document_end)

    def apply_dates(self, item: LineItem, start: DateLike, end: DateLike, context: str = "plan") -> LineItem:
        """
        Set both dates; booked_days follows.

        Raises:
            InvalidDateRangeError: If end is before start.
        """
        start_day = as_calendar_date(start)
        end_day = as_calendar_date(end)
        booked_days = days_between_inclusive(start_day, end_day)
        updated = item.model_copy(
            update={"start_date": start_day, "end_date": end_day, "booked_days": booked_days}
        )
        return self.recalculate(updated, context)

    def apply_days(
        self,
        item: LineItem,
        days: int,
        context: str = "plan",
        document_start: Optional[date] = None,
    ) -> LineItem:
        """
        Set booked days; the end date moves, the start date stays.

        Raises:
            InvalidBookedDaysError: If days is below 1.
            InvalidBulkRequestError: If neither the item nor the document has a start date.
        """
        start = item.start_date or document_start
        if start is None:
            raise InvalidBulkRequestError(
                "A start date is required to set booked days",
                details={"item_id": item.id},
            )
        end = end_from_start_and_days(start, days)
        updated = item.model_copy(update={"start_date": start, "end_date": end, "booked_days": days})
        return self.recalculate(updated, context)
