"""
Bulk pricing service.

Applies one change (dates, day count, negotiated rate, printing or mounting)
to a selected subset of line items, or to all of them. The whole request is
validated before any update is produced; the result is a list of per-item
updates that the caller writes in one transaction.
"""

import logging
from decimal import Decimal
from typing import List

from ooh_billing.core.exceptions import InvalidBookedDaysError, InvalidBulkRequestError, InvalidDateRangeError
from ooh_billing.schemas.line_item import (
    BulkDatesRequest,
    BulkDaysRequest,
    BulkMountingRequest,
    BulkNegotiatedRateRequest,
    BulkPrintingRequest,
    BulkTarget,
    BulkUpdateResult,
    LineItem,
    LineItemUpdate,
    SkippedItem,
)
from ooh_billing.services.base_service import BaseService
from ooh_billing.services.line_item_service import LineItemService
from ooh_billing.utils.date_span import days_between_inclusive, end_from_start_and_days, to_canonical_date_string
from ooh_billing.utils.effective_price import NEGOTIATED_FIELD_BY_CONTEXT, ZERO, to_decimal
from ooh_billing.utils.rent_calculator import round_money

logger = logging.getLogger(__name__)


def _is_set(value) -> bool:
    amount = to_decimal(value)
    return amount is not None and amount > ZERO


class BulkPricingService(BaseService):
    """Service for bulk edits across plan or campaign line items."""

    def __init__(self, line_item_service: LineItemService = None):
        self.line_item_service = line_item_service or LineItemService()

    def target_items(self, request: BulkTarget) -> List[LineItem]:
        """Items the request applies to, in document order."""
        if request.apply_mode == "all":
            return list(request.items)
        return [item for item in request.items if item.id in request.selected_ids]

    def _require_targets(self, request: BulkTarget) -> List[LineItem]:
        targets = self.target_items(request)
        if not targets:
            raise InvalidBulkRequestError("No line items selected")
        return targets

    def _require_positive(self, value: Decimal, label: str) -> Decimal:
        amount = to_decimal(value)
        if amount is None or amount <= ZERO:
            raise InvalidBulkRequestError(f"{label} must be greater than 0", details={label: str(value)})
        return amount

    def apply_dates(self, request: BulkDatesRequest) -> BulkUpdateResult:
        """
        Give every target the same booking window.

        Raises:
            InvalidDateRangeError: If end_date is before start_date; nothing is updated.
        """
        if request.end_date < request.start_date:
            raise InvalidDateRangeError(request.start_date, request.end_date)
        targets = self._require_targets(request)

        days = days_between_inclusive(request.start_date, request.end_date)
        start_str = to_canonical_date_string(request.start_date)
        end_str = to_canonical_date_string(request.end_date)

        updates = []
        for item in targets:
            rent = self.line_item_service.compute_item_rent(
                item.model_copy(update={"start_date": request.start_date, "end_date": request.end_date}),
                request.context,
            )
            updates.append(
                LineItemUpdate(
                    item_id=item.id,
                    start_date=start_str,
                    end_date=end_str,
                    booked_days=days,
                    rent_amount=rent.rent_amount,
                    daily_rate=rent.daily_rate,
                )
            )

        logger.info(f"Bulk dates {start_str}..{end_str} ({days} days) for {len(updates)} line items")
        return BulkUpdateResult(updates=updates)

    def apply_days(self, request: BulkDaysRequest) -> BulkUpdateResult:
        """
        Give every target the same day count, keeping each item's start date.

        Items with no start date of their own fall back to the document start;
        items with neither are skipped.
        """
        if request.booked_days < 1:
            raise InvalidBookedDaysError(request.booked_days)
        targets = self._require_targets(request)

        updates = []
        skipped = []
        for item in targets:
            start = item.start_date or request.document_start_date
            if start is None:
                skipped.append(SkippedItem(item_id=item.id, reason="no start date"))
                continue
            end = end_from_start_and_days(start, request.booked_days)
            rent = self.line_item_service.compute_item_rent(
                item.model_copy(update={"start_date": start, "end_date": end}),
                request.context,
            )
            updates.append(
                LineItemUpdate(
                    item_id=item.id,
                    start_date=to_canonical_date_string(start),
                    end_date=to_canonical_date_string(end),
                    booked_days=request.booked_days,
                    rent_amount=rent.rent_amount,
                    daily_rate=rent.daily_rate,
                )
            )

        if not updates:
            raise InvalidBulkRequestError(
                "All selected line items require a start date to update days",
                details={"skipped": [s.item_id for s in skipped]},
            )

        logger.info(
            f"Bulk days={request.booked_days} for {len(updates)} line items",
            extra={"skipped": len(skipped)},
        )
        return BulkUpdateResult(updates=updates, skipped=skipped)

    def apply_negotiated_rate(self, request: BulkNegotiatedRateRequest) -> BulkUpdateResult:
        """
        Set the negotiated rate and recompute rent.

        Plans store it as negotiated_price and campaigns as negotiated_rate,
        the field each context's effective price reads first. Items that
        already have one keep it unless override_existing is set.
        """
        rate = self._require_positive(request.rate, "rate")
        targets = self._require_targets(request)
        field = NEGOTIATED_FIELD_BY_CONTEXT[request.context]

        updates = []
        skipped = []
        for item in targets:
            if _is_set(getattr(item, field)) and not request.override_existing:
                skipped.append(SkippedItem(item_id=item.id, reason="existing rate preserved"))
                continue
            rent = self.line_item_service.compute_item_rent(
                item.model_copy(update={field: rate}),
                request.context,
                request.document_start_date,
                request.document_end_date,
            )
            updates.append(
                LineItemUpdate(
                    item_id=item.id,
                    rent_amount=rent.rent_amount if rent else None,
                    daily_rate=rent.daily_rate if rent else None,
                    **{field: rate},
                )
            )

        logger.info(f"Bulk negotiated rate {rate}: {len(updates)} updated, {len(skipped)} skipped")
        return BulkUpdateResult(updates=updates, skipped=skipped)

    def apply_printing(self, request: BulkPrintingRequest) -> BulkUpdateResult:
        """Printing charges = rate per sqft x asset sqft. Never pro-rated."""
        rate = self._require_positive(request.rate_per_sqft, "rate_per_sqft")
        targets = self._require_targets(request)

        updates = []
        skipped = []
        for item in targets:
            if _is_set(item.printing_rate) and not request.override_existing:
                skipped.append(SkippedItem(item_id=item.id, reason="existing printing preserved"))
                continue
            updates.append(
                LineItemUpdate(
                    item_id=item.id,
                    printing_rate=rate,
                    printing_charges=round_money(rate * item.total_sqft),
                )
            )

        logger.info(f"Bulk printing {rate}/sqft: {len(updates)} updated, {len(skipped)} skipped")
        return BulkUpdateResult(updates=updates, skipped=skipped)

    def apply_mounting(self, request: BulkMountingRequest) -> BulkUpdateResult:
        """Mounting charges per sqft or as a fixed amount per asset. Never pro-rated."""
        value = self._require_positive(request.value, "value")
        targets = self._require_targets(request)

        updates = []
        skipped = []
        for item in targets:
            if _is_set(item.mounting_rate) and not request.override_existing:
                skipped.append(SkippedItem(item_id=item.id, reason="existing mounting preserved"))
                continue
            cost = value if request.mode == "fixed" else value * item.total_sqft
            updates.append(
                LineItemUpdate(
                    item_id=item.id,
                    mounting_mode=request.mode,
                    mounting_rate=value,
                    mounting_charges=round_money(cost),
                )
            )

        logger.info(f"Bulk mounting ({request.mode}) {value}: {len(updates)} updated, {len(skipped)} skipped")
        return BulkUpdateResult(updates=updates, skipped=skipped)

    def apply_updates(self, items: List[LineItem], result: BulkUpdateResult) -> List[LineItem]:
        """Merge a bulk result into the items, returning new item objects."""
        changes = {update.item_id: update.changed_fields() for update in result.updates}
        merged = []
        for item in items:
            fields = changes.get(item.id)
            if fields is None:
                merged.append(item)
                continue
            merged.append(LineItem.model_validate({**item.model_dump(), **fields}))
        return merged
