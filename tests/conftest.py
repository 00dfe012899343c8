"""
Pytest configuration and fixtures.
Provides an ASGI test client and sample plan line items.
"""

from datetime import date
from decimal import Decimal

import pytest
from httpx import ASGITransport, AsyncClient

from ooh_billing.main import app
from ooh_billing.schemas.line_item import LineItem
from ooh_billing.schemas.totals import BookingDocument


@pytest.fixture(scope="function")
async def test_client():
    """
    Create a test HTTP client bound to the app.
    """
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client


@pytest.fixture
def plan_items():
    """
    Three plan line items:
    A has its own January window, B has no dates but a negotiated price,
    C has a short February window.
    """
    return [
        LineItem(
            id="A",
            asset_code="HYD-001",
            card_rate=Decimal("30000"),
            start_date=date(2024, 1, 1),
            end_date=date(2024, 1, 30),
            total_sqft=Decimal("200"),
        ),
        LineItem(
            id="B",
            asset_code="HYD-002",
            card_rate=Decimal("60000"),
            negotiated_price=Decimal("45000"),
            total_sqft=Decimal("120"),
            printing_rate=Decimal("10"),
            printing_charges=Decimal("1200"),
        ),
        LineItem(
            id="C",
            asset_code="HYD-003",
            card_rate=Decimal("9000"),
            start_date=date(2024, 2, 1),
            end_date=date(2024, 2, 10),
            total_sqft=Decimal("50"),
        ),
    ]


@pytest.fixture
def fractional_items():
    """Three items at 1000/month whose 10-day rent is 333.333... each."""
    return [LineItem(id=f"F{i}", card_rate=Decimal("1000")) for i in range(3)]


@pytest.fixture
def ten_day_document():
    return BookingDocument(
        name="January Plan",
        start_date=date(2024, 1, 1),
        end_date=date(2024, 1, 10),
        gst_percent=Decimal("18"),
    )
