"""
API tests for pricing, bulk line item and document endpoints.
"""

from decimal import Decimal
from io import BytesIO
from urllib.parse import quote

import pytest
from openpyxl import load_workbook


def _item(item_id, card_rate, start=None, end=None, **fields):
    return {"id": item_id, "card_rate": card_rate, "start_date": start, "end_date": end, **fields}


@pytest.fixture
def document_payload():
    return {
        "document": {"name": "January Plan", "start_date": "2024-01-01", "end_date": "2024-01-10", "gst_percent": 18},
        "items": [_item(f"F{i}", 1000) for i in range(3)],
    }


class TestPricingEndpoints:
    @pytest.mark.asyncio
    async def test_effective_price(self, test_client):
        response = await test_client.post(
            "/api/v1/pricing/effective-price",
            json={"negotiated_price": 0, "sales_price": 4200, "card_rate": 5000},
        )
        assert response.status_code == 200
        data = response.json()
        assert Decimal(data["effective_price"]) == Decimal("4200")
        assert data["source_field"] == "sales_price"

    @pytest.mark.asyncio
    async def test_rent(self, test_client):
        response = await test_client.post(
            "/api/v1/pricing/rent",
            json={"monthly_rate": 9000, "start_date": "2024-01-01", "end_date": "2024-01-10"},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["booked_days"] == 10
        assert Decimal(data["daily_rate"]) == Decimal("300.00")
        assert Decimal(data["rent_amount"]) == Decimal("3000.00")
        assert Decimal(data["pro_rata_factor"]) == Decimal("0.33")

    @pytest.mark.asyncio
    async def test_rent_inverted_range(self, test_client):
        response = await test_client.post(
            "/api/v1/pricing/rent",
            json={"monthly_rate": 9000, "start_date": "2024-01-10", "end_date": "2024-01-01"},
        )
        assert response.status_code == 422
        assert response.json()["error"]["message"] == "End date must be on or after start date"

    @pytest.mark.asyncio
    async def test_rent_unsupported_mode(self, test_client):
        response = await test_client.post(
            "/api/v1/pricing/rent",
            json={
                "monthly_rate": 9000,
                "start_date": "2024-01-01",
                "end_date": "2024-01-10",
                "billing_mode": "FULL_MONTH",
            },
        )
        assert response.status_code == 422
        assert "Unsupported billing mode" in response.json()["error"]["message"]

    @pytest.mark.asyncio
    async def test_date_span_from_days(self, test_client):
        response = await test_client.post(
            "/api/v1/pricing/date-span",
            json={"start_date": "2024-12-30", "booked_days": 3},
        )
        assert response.status_code == 200
        assert response.json() == {"start_date": "2024-12-30", "end_date": "2025-01-01", "booked_days": 3}

    @pytest.mark.asyncio
    async def test_date_span_end_date_wins(self, test_client):
        response = await test_client.post(
            "/api/v1/pricing/date-span",
            json={"start_date": "2024-01-01", "end_date": "2024-01-31", "booked_days": 5},
        )
        assert response.json()["booked_days"] == 31

    @pytest.mark.asyncio
    async def test_date_span_needs_end_or_days(self, test_client):
        response = await test_client.post("/api/v1/pricing/date-span", json={"start_date": "2024-01-01"})
        assert response.status_code == 422
        assert response.json()["error"]["message"] == "Validation error"


class TestBulkEndpoints:
    @pytest.mark.asyncio
    async def test_bulk_dates(self, test_client):
        response = await test_client.post(
            "/api/v1/line-items/bulk/dates",
            json={
                "items": [_item("A", 30000, "2024-01-01", "2024-01-30")],
                "apply_mode": "all",
                "start_date": "2024-03-01",
                "end_date": "2024-03-15",
            },
        )
        assert response.status_code == 200
        [update] = response.json()["updates"]
        assert update["booked_days"] == 15
        assert Decimal(update["rent_amount"]) == Decimal("15000.00")

    @pytest.mark.asyncio
    async def test_bulk_dates_inverted(self, test_client):
        response = await test_client.post(
            "/api/v1/line-items/bulk/dates",
            json={
                "items": [_item("A", 30000)],
                "apply_mode": "all",
                "start_date": "2024-03-15",
                "end_date": "2024-03-01",
            },
        )
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_bulk_printing_reports_skips(self, test_client):
        response = await test_client.post(
            "/api/v1/line-items/bulk/printing",
            json={
                "items": [_item("A", 30000, total_sqft=200), _item("B", 30000, total_sqft=100, printing_rate=8)],
                "apply_mode": "all",
                "rate_per_sqft": 12,
            },
        )
        data = response.json()
        assert Decimal(data["updates"][0]["printing_charges"]) == Decimal("2400.00")
        assert data["skipped"] == [{"item_id": "B", "reason": "existing printing preserved"}]

    @pytest.mark.asyncio
    async def test_bulk_with_empty_selection(self, test_client):
        response = await test_client.post(
            "/api/v1/line-items/bulk/mounting",
            json={"items": [_item("A", 30000)], "mode": "fixed", "value": 1500},
        )
        assert response.status_code == 422
        assert response.json()["error"]["message"] == "No line items selected"


class TestDocumentEndpoints:
    @pytest.mark.asyncio
    async def test_totals(self, test_client, document_payload):
        response = await test_client.post("/api/v1/documents/totals", json=document_payload)
        assert response.status_code == 200
        data = response.json()
        assert Decimal(data["display_cost"]) == Decimal("1000.00")
        assert Decimal(data["line_rent_total"]) == Decimal("999.99")
        assert Decimal(data["grand_total"]) == Decimal("1180.00")
        assert len(data["billing_periods"]) == 1

    @pytest.mark.asyncio
    async def test_totals_rejects_inverted_item_window(self, test_client, document_payload):
        document_payload["items"].append(_item("Z", 1000, "2024-01-10", "2024-01-01"))
        response = await test_client.post("/api/v1/documents/totals", json=document_payload)
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_period_amount(self, test_client, document_payload):
        response = await test_client.post(
            "/api/v1/documents/period-amount",
            json={**document_payload, "month_key": "2024-01"},
        )
        assert response.status_code == 200
        assert Decimal(response.json()["total"]) == Decimal("1180.00")

    @pytest.mark.asyncio
    async def test_period_amount_unknown_month(self, test_client, document_payload):
        response = await test_client.post(
            "/api/v1/documents/period-amount",
            json={**document_payload, "month_key": "2030-01"},
        )
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_export_excel(self, test_client, document_payload):
        response = await test_client.post("/api/v1/documents/export/excel", json=document_payload)
        assert response.status_code == 200
        assert response.headers["content-type"].startswith(
            "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
        )
        assert 'filename="January_Plan.xlsx"' in response.headers["content-disposition"]

        ws = load_workbook(BytesIO(response.content)).active
        assert ws.cell(row=1, column=1).value == "January Plan"

    @pytest.mark.asyncio
    async def test_export_excel_with_non_latin_name(self, test_client, document_payload):
        document_payload["document"]["name"] = "हैदराबाद Plan"
        response = await test_client.post("/api/v1/documents/export/excel", json=document_payload)

        assert response.status_code == 200
        disposition = response.headers["content-disposition"]
        assert 'filename="Plan.xlsx"' in disposition
        assert f"filename*=UTF-8''{quote('हैदराबाद_Plan.xlsx')}" in disposition

        ws = load_workbook(BytesIO(response.content)).active
        assert ws.cell(row=1, column=1).value == "हैदराबाद Plan"


class TestLineItemEndpoints:
    @pytest.mark.asyncio
    async def test_create(self, test_client):
        response = await test_client.post(
            "/api/v1/line-items",
            json={
                "item_id": "a1",
                "card_rate": 30000,
                "document_start_date": "2024-01-01",
                "document_end_date": "2024-01-15",
            },
        )
        assert response.status_code == 200
        data = response.json()
        assert data["booked_days"] == 15
        assert Decimal(data["rent_amount"]) == Decimal("15000.00")

    @pytest.mark.asyncio
    async def test_create_with_inverted_document_range(self, test_client):
        response = await test_client.post(
            "/api/v1/line-items",
            json={
                "item_id": "a1",
                "card_rate": 30000,
                "document_start_date": "2024-01-15",
                "document_end_date": "2024-01-01",
            },
        )
        assert response.status_code == 422
        assert response.json()["error"]["message"] == "End date must be on or after start date"

    @pytest.mark.asyncio
    async def test_campaign_price(self, test_client):
        response = await test_client.post(
            "/api/v1/line-items/price",
            json={
                "item": _item("a1", 30000, "2024-01-01", "2024-01-30"),
                "context": "campaign",
                "negotiated_price": 15000,
            },
        )
        data = response.json()
        assert Decimal(data["negotiated_rate"]) == Decimal("15000")
        assert Decimal(data["rent_amount"]) == Decimal("15000.00")

    @pytest.mark.asyncio
    async def test_dates(self, test_client):
        response = await test_client.post(
            "/api/v1/line-items/dates",
            json={"item": _item("a1", 30000), "start_date": "2024-02-01", "end_date": "2024-02-29"},
        )
        data = response.json()
        assert data["booked_days"] == 29
        assert Decimal(data["rent_amount"]) == Decimal("29000.00")

    @pytest.mark.asyncio
    async def test_days(self, test_client):
        response = await test_client.post(
            "/api/v1/line-items/days",
            json={"item": _item("a1", 30000, "2024-01-01", "2024-01-15"), "booked_days": 45},
        )
        data = response.json()
        assert data["end_date"] == "2024-02-14"
        assert Decimal(data["rent_amount"]) == Decimal("45000.00")

    @pytest.mark.asyncio
    async def test_days_without_start(self, test_client):
        response = await test_client.post(
            "/api/v1/line-items/days",
            json={"item": _item("a1", 30000), "booked_days": 10},
        )
        assert response.status_code == 422
