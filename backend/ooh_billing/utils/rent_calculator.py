"""
Pro-rata rent calculation.

A month is billed as 30 days: daily rate = monthly rate / 30 and rent =
daily rate x inclusive booked days. Rounding to 2 places happens once, on
the final figure. Callers that total many line items must add up
`raw_rent_amount` and round the aggregate with `round_money`.
"""

import enum
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Iterable, Union

from ooh_billing.core.exceptions import NegativeRateError, PricingValidationError, UnsupportedBillingModeError
from ooh_billing.utils.date_span import DateLike, days_between_inclusive, overlap_days
from ooh_billing.utils.effective_price import to_decimal


BILLING_CYCLE_DAYS = 30
TWO_PLACES = Decimal("0.01")


class BillingMode(str, enum.Enum):
    """Supported billing modes."""
    PRORATA_30 = "PRORATA_30"


BILLING_MODE_LABELS = {
    BillingMode.PRORATA_30: "Pro-rata (30-day)",
}


@dataclass(frozen=True)
class RentResult:
    """Rent for one line item. `daily_rate` and `rent_amount` are rounded independently."""
    booked_days: int
    daily_rate: Decimal
    rent_amount: Decimal
    billing_mode: BillingMode
    raw_daily_rate: Decimal
    raw_rent_amount: Decimal


def round_money(value: Union[Decimal, int, float, str]) -> Decimal:
    """Round a monetary value to 2 places, half up."""
    return Decimal(str(value)).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def sum_raw(values: Iterable[Decimal]) -> Decimal:
    """Full precision sum; round the result with round_money when displaying it."""
    return sum(values, Decimal("0"))


def parse_billing_mode(mode: Any) -> BillingMode:
    """
    Resolve a billing mode value.

    Raises:
        UnsupportedBillingModeError: For anything other than a supported mode.
    """
    if isinstance(mode, BillingMode):
        return mode
    try:
        return BillingMode(mode)
    except ValueError:
        raise UnsupportedBillingModeError(mode) from None


def _monthly_rate(monthly_rate: Any) -> Decimal:
    rate = to_decimal(monthly_rate)
    if rate is None:
        raise PricingValidationError(
            f"Monthly rate must be a number, got {monthly_rate!r}",
            details={"monthly_rate": str(monthly_rate)},
        )
    if rate < 0:
        raise NegativeRateError(rate)
    return rate


def compute_daily_rate(monthly_rate: Any, billing_mode: Any = BillingMode.PRORATA_30, for_display: bool = True) -> Decimal:
    """Monthly rate / 30; rounded only when for_display is set."""
    parse_billing_mode(billing_mode)
    raw = _monthly_rate(monthly_rate) / BILLING_CYCLE_DAYS
    return round_money(raw) if for_display else raw


def compute_rent(
    monthly_rate: Any,
    start_date: DateLike,
    end_date: DateLike,
    billing_mode: Any = BillingMode.PRORATA_30,
) -> RentResult:
    """
    Compute rent and daily rate for a booking window.

    Raises:
        NegativeRateError: If monthly_rate is negative.
        PricingValidationError: If monthly_rate is not a number.
        InvalidDateRangeError: If end_date is before start_date.
        UnsupportedBillingModeError: For an unknown billing mode.
    """
    mode = parse_billing_mode(billing_mode)
    rate = _monthly_rate(monthly_rate)
    booked_days = days_between_inclusive(start_date, end_date)

    raw_daily_rate = rate / BILLING_CYCLE_DAYS
    raw_rent_amount = raw_daily_rate * booked_days

    return RentResult(
        booked_days=booked_days,
        daily_rate=round_money(raw_daily_rate),
        rent_amount=round_money(raw_rent_amount),
        billing_mode=mode,
        raw_daily_rate=raw_daily_rate,
        raw_rent_amount=raw_rent_amount,
    )


def pro_rata_factor(booked_days: int) -> Decimal:
    """Share of a 30-day cycle, e.g. 15 days -> 0.50."""
    return round_money(Decimal(booked_days) / BILLING_CYCLE_DAYS)


def period_rent_amount(
    monthly_rate: Any,
    asset_start: DateLike,
    asset_end: DateLike,
    period_start: DateLike,
    period_end: DateLike,
    billing_mode: Any = BillingMode.PRORATA_30,
    for_display: bool = True,
) -> Decimal:
    """
    Rent for the part of a booking that falls inside a billing period.

    Pass for_display=False when adding several assets up, then round the sum.
    """
    days = overlap_days(asset_start, asset_end, period_start, period_end)
    raw = compute_daily_rate(monthly_rate, billing_mode, for_display=False) * days
    return round_money(raw) if for_display else raw


def format_billing_mode(mode: Any) -> str:
    return BILLING_MODE_LABELS[parse_billing_mode(mode)]
