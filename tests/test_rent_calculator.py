"""
Unit tests for pro-rata rent calculation.
"""

from datetime import date
from decimal import Decimal

import pytest

from ooh_billing.core.exceptions import (
    InvalidDateRangeError,
    NegativeRateError,
    PricingValidationError,
    UnsupportedBillingModeError,
)
from ooh_billing.utils.rent_calculator import (
    BillingMode,
    compute_daily_rate,
    compute_rent,
    format_billing_mode,
    period_rent_amount,
    pro_rata_factor,
    round_money,
    sum_raw,
)


class TestComputeRent:
    """Tests for compute_rent under PRORATA_30."""

    def test_known_answer(self):
        result = compute_rent(9000, "2024-01-01", "2024-01-10", BillingMode.PRORATA_30)
        assert result.booked_days == 10
        assert result.daily_rate == Decimal("300.00")
        assert result.rent_amount == Decimal("3000.00")
        assert result.billing_mode is BillingMode.PRORATA_30

    def test_mode_given_as_string(self):
        assert compute_rent(9000, date(2024, 1, 1), date(2024, 1, 10), "PRORATA_30").rent_amount == Decimal("3000.00")

    def test_rent_is_rounded_from_full_precision(self):
        # 1000/30 = 33.333...; two days are 66.67, not 2 x 33.33
        result = compute_rent(1000, "2024-01-01", "2024-01-02")
        assert result.daily_rate == Decimal("33.33")
        assert result.rent_amount == Decimal("66.67")
        assert result.rent_amount != result.daily_rate * result.booked_days

    def test_long_booking_has_no_drift(self):
        assert compute_rent(50000, "2024-01-01", "2024-06-28").rent_amount == Decimal("300000.00")

    def test_same_day_booking_bills_one_day(self):
        result = compute_rent(3000, "2024-05-05", "2024-05-05")
        assert result.booked_days == 1
        assert result.rent_amount == Decimal("100.00")

    def test_zero_rate(self):
        result = compute_rent(0, "2024-01-01", "2024-01-31")
        assert result.rent_amount == Decimal("0.00")
        assert result.daily_rate == Decimal("0.00")

    def test_inverted_range_never_yields_negative_days(self):
        with pytest.raises(InvalidDateRangeError):
            compute_rent(9000, "2024-01-10", "2024-01-01")

    def test_negative_rate(self):
        with pytest.raises(NegativeRateError):
            compute_rent(-1, "2024-01-01", "2024-01-10")

    def test_non_numeric_rate(self):
        with pytest.raises(PricingValidationError):
            compute_rent("lots", "2024-01-01", "2024-01-10")

    @pytest.mark.parametrize("mode", ["FULL_MONTH", "DAILY", "prorata_30", None])
    def test_unsupported_mode_does_not_fall_back(self, mode):
        with pytest.raises(UnsupportedBillingModeError) as exc_info:
            compute_rent(9000, "2024-01-01", "2024-01-10", mode)
        assert "Unsupported billing mode" in exc_info.value.message


class TestAggregateRounding:
    """Totals sum full precision rents and round once."""

    def test_aggregate_differs_from_sum_of_rounded_lines(self):
        results = [compute_rent(1000, "2024-01-01", "2024-01-01") for _ in range(3)]

        grand_total = round_money(sum_raw(r.raw_rent_amount for r in results))
        per_line_total = sum_raw(r.rent_amount for r in results)

        assert grand_total == Decimal("100.00")
        assert per_line_total == Decimal("99.99")
        assert grand_total - per_line_total == Decimal("0.01")

    def test_each_line_still_rounds_for_display(self):
        result = compute_rent(1000, "2024-01-01", "2024-01-01")
        assert result.rent_amount == Decimal("33.33")
        assert result.raw_rent_amount > result.rent_amount


class TestHelpers:
    def test_daily_rate_display_and_raw(self):
        assert compute_daily_rate(1000) == Decimal("33.33")
        assert compute_daily_rate(1000, for_display=False) * 3 == pytest.approx(Decimal("100"))

    def test_pro_rata_factor(self):
        assert pro_rata_factor(15) == Decimal("0.50")
        assert pro_rata_factor(45) == Decimal("1.50")
        assert pro_rata_factor(10) == Decimal("0.33")

    def test_period_rent(self):
        amount = period_rent_amount(30000, "2024-01-15", "2024-03-10", "2024-02-01", "2024-02-29")
        assert amount == Decimal("29000.00")

    def test_period_rent_without_overlap(self):
        assert period_rent_amount(30000, "2024-01-01", "2024-01-10", "2024-02-01", "2024-02-29") == Decimal("0.00")

    def test_period_rent_unrounded_for_sums(self):
        raw = period_rent_amount(1000, "2024-01-01", "2024-01-01", "2024-01-01", "2024-01-31", for_display=False)
        assert round_money(raw * 3) == Decimal("100.00")
        assert period_rent_amount(1000, "2024-01-01", "2024-01-01", "2024-01-01", "2024-01-31") == Decimal("33.33")

    def test_round_money_half_up(self):
        assert round_money(Decimal("2.345")) == Decimal("2.35")
        assert round_money(Decimal("2.344")) == Decimal("2.34")

    def test_format_billing_mode(self):
        assert format_billing_mode("PRORATA_30") == "Pro-rata (30-day)"
