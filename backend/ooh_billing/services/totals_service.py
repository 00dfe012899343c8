"""
Document totals service.

Totals for a plan or campaign are built from the unrounded pro-rata rent of
every line item and rounded once. Rounding each line first and adding the
results drifts from the true total on large documents; both figures are
reported so exports can show the per-line values next to the grand total.
"""

import calendar
import logging
from datetime import date, timedelta
from decimal import Decimal
from typing import List, Optional

from ooh_billing.core.config import settings
from ooh_billing.core.exceptions import PricingValidationError
from ooh_billing.schemas.line_item import LineItem
from ooh_billing.schemas.totals import BillingPeriod, BookingDocument, DocumentTotals, PeriodAmount
from ooh_billing.services.base_service import BaseService
from ooh_billing.services.line_item_service import LineItemService
from ooh_billing.utils.date_span import starts_in_period
from ooh_billing.utils.effective_price import resolve_effective_price
from ooh_billing.utils.rent_calculator import BILLING_CYCLE_DAYS, period_rent_amount, round_money, sum_raw

logger = logging.getLogger(__name__)


def _month_end(day: date) -> date:
    return date(day.year, day.month, calendar.monthrange(day.year, day.month)[1])


def _next_month_start(day: date) -> date:
    return _month_end(day) + timedelta(days=1)


def _same_month(a: date, b: date) -> bool:
    return a.year == b.year and a.month == b.month


class TotalsService(BaseService):
    """Service for plan/campaign financial totals."""

    def __init__(self, line_item_service: LineItemService = None):
        self.line_item_service = line_item_service or LineItemService()

    def compute_totals(
        self,
        document: BookingDocument,
        items: List[LineItem],
        context: str = "plan",
        today: Optional[date] = None,
    ) -> DocumentTotals:
        """
        Compute display cost, charges, discount, GST and grand total.

        Line items without dates use the document dates. Items with no
        window at all contribute charges but no rent.
        """
        raw_rents = []
        rounded_rents = []
        period_start = document.start_date
        period_end = document.end_date

        for item in items:
            rent = self.line_item_service.compute_item_rent(
                item, context, document.start_date, document.end_date
            )
            if rent is None:
                continue
            raw_rents.append(rent.raw_rent_amount)
            rounded_rents.append(rent.rent_amount)

            start, end = self.line_item_service.booking_window(item, document.start_date, document.end_date)
            if period_start is None or start < period_start:
                period_start = start
            if period_end is None or end > period_end:
                period_end = end

        display_cost = round_money(sum_raw(raw_rents))
        line_rent_total = round_money(sum_raw(rounded_rents))
        printing_cost = round_money(sum_raw(item.printing_charges for item in items))
        mounting_cost = round_money(sum_raw(item.mounting_charges for item in items))

        gross_amount = round_money(display_cost + printing_cost + mounting_cost)
        discount = min(max(document.manual_discount_amount, Decimal("0")), gross_amount)
        taxable_amount = round_money(gross_amount - discount)
        gst_rate = document.gst_percent
        gst_amount = round_money(taxable_amount * gst_rate / 100)
        grand_total = round_money(taxable_amount + gst_amount)

        billing_periods = []
        duration_days = 0
        if period_start is not None and period_end is not None and period_end >= period_start:
            duration_days = (period_end - period_start).days + 1
            billing_periods = self.billing_periods(period_start, period_end, today=today)

        total_months = len(billing_periods)
        monthly_display_rent = round_money(display_cost / total_months) if total_months else display_cost

        if display_cost != line_rent_total:
            logger.debug(
                f"Aggregate rent {display_cost} differs from per-line sum {line_rent_total}",
                extra={"items": len(items)},
            )

        return DocumentTotals(
            display_cost=display_cost,
            line_rent_total=line_rent_total,
            printing_cost=printing_cost,
            mounting_cost=mounting_cost,
            gross_amount=gross_amount,
            manual_discount_amount=round_money(discount),
            taxable_amount=taxable_amount,
            gst_rate=gst_rate,
            gst_amount=gst_amount,
            grand_total=grand_total,
            one_time_charges=round_money(printing_cost + mounting_cost),
            period_start=period_start,
            period_end=period_end,
            duration_days=duration_days,
            total_months=total_months,
            monthly_display_rent=monthly_display_rent,
            billing_periods=billing_periods,
            total_assets=len(items),
        )

    def billing_periods(self, start: date, end: date, today: Optional[date] = None) -> List[BillingPeriod]:
        """
        Split a booking span into monthly billing periods.

        A span of 30 days or less is a single period. Longer spans get one
        period per calendar month, clipped to the span; a whole calendar
        month counts as 30 days with factor 1.
        """
        if end < start:
            raise PricingValidationError("Billing span ends before it starts")
        today = today or date.today()
        total_days = (end - start).days + 1

        if total_days <= BILLING_CYCLE_DAYS:
            return [
                BillingPeriod(
                    month_key=start.strftime("%Y-%m"),
                    label=start.strftime("%B %Y"),
                    period_start=start,
                    period_end=end,
                    days_in_period=total_days,
                    pro_rata_factor=round_money(Decimal(total_days) / BILLING_CYCLE_DAYS),
                    is_first_month=True,
                    is_last_month=True,
                    is_current_month=_same_month(start, today),
                )
            ]

        periods = []
        cursor = date(start.year, start.month, 1)
        while cursor <= end and len(periods) < settings.MAX_BILLING_PERIODS:
            month_end = _month_end(cursor)
            period_start = max(start, cursor)
            period_end = min(end, month_end)
            days = (period_end - period_start).days + 1
            full_month = period_start == cursor and period_end == month_end

            periods.append(
                BillingPeriod(
                    month_key=period_start.strftime("%Y-%m"),
                    label=period_start.strftime("%B %Y"),
                    period_start=period_start,
                    period_end=period_end,
                    days_in_period=BILLING_CYCLE_DAYS if full_month else days,
                    pro_rata_factor=Decimal("1.00") if full_month else round_money(Decimal(days) / BILLING_CYCLE_DAYS),
                    is_first_month=not periods,
                    is_last_month=False,
                    is_current_month=_same_month(period_start, today),
                )
            )
            cursor = _next_month_start(cursor)

        if periods:
            periods[-1].is_last_month = True
        return periods

    def period_amount(
        self,
        period: BillingPeriod,
        totals: DocumentTotals,
        document: BookingDocument,
        items: List[LineItem],
        context: str = "plan",
        include_printing: bool = False,
        include_mounting: bool = False,
    ) -> PeriodAmount:
        """
        Invoice amounts for one billing period.

        Each asset is billed for the days its window shares with the period;
        the unrounded amounts are added up and rounded once. Printing and
        mounting are billed in the period the asset starts in. The discount
        is shared in proportion to the period's part of the display cost.
        """
        raw_rents = []
        printing_charges = []
        mounting_charges = []

        for item in items:
            start, end = self.line_item_service.booking_window(item, document.start_date, document.end_date)
            if start is None or end is None:
                continue
            raw_rents.append(
                period_rent_amount(
                    resolve_effective_price(item, context).value,
                    start,
                    end,
                    period.period_start,
                    period.period_end,
                    item.billing_mode,
                    for_display=False,
                )
            )
            if starts_in_period(start, period.period_start, period.period_end):
                printing_charges.append(item.printing_charges)
                mounting_charges.append(item.mounting_charges)

        base_rent = round_money(sum_raw(raw_rents))
        if totals.display_cost > 0:
            discount = round_money(totals.manual_discount_amount * base_rent / totals.display_cost)
        else:
            discount = round_money(0)

        printing = round_money(sum_raw(printing_charges)) if include_printing else round_money(0)
        mounting = round_money(sum_raw(mounting_charges)) if include_mounting else round_money(0)
        subtotal = round_money(max(base_rent + printing + mounting - discount, Decimal("0")))
        gst_amount = round_money(subtotal * totals.gst_rate / 100)

        logger.debug(
            f"Period {period.month_key}: rent {base_rent} from {len(raw_rents)} line items",
            extra={"printing": str(printing), "mounting": str(mounting)},
        )

        return PeriodAmount(
            base_rent=base_rent,
            printing=printing,
            mounting=mounting,
            discount=discount,
            subtotal=subtotal,
            gst_amount=gst_amount,
            total=round_money(subtotal + gst_amount),
        )


    def find_period(self, totals: DocumentTotals, month_key: str) -> BillingPeriod:
        for period in totals.billing_periods:
            if period.month_key == month_key:
                return period
        raise PricingValidationError(f"No billing period for {month_key}", details={"month_key": month_key})
