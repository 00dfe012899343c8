"""
Line item controller.
Coordinates single line item edits and bulk pricing operations over plan
and campaign line items.
"""

from ooh_billing.controllers.base_controller import BaseController
from ooh_billing.schemas.line_item import (
    BulkDatesRequest,
    BulkDaysRequest,
    BulkMountingRequest,
    BulkNegotiatedRateRequest,
    BulkPrintingRequest,
    BulkUpdateResult,
    LineItem,
    LineItemDatesRequest,
    LineItemDaysRequest,
    LineItemPriceRequest,
    NewLineItemRequest,
)
from ooh_billing.services.bulk_pricing_service import BulkPricingService
from ooh_billing.services.line_item_service import LineItemService


class LineItemController(BaseController):
    """Controller for line item operations."""

    def __init__(
        self,
        line_item_service: LineItemService = None,
        bulk_pricing_service: BulkPricingService = None,
    ):
        self.line_item_service = line_item_service or LineItemService()
        self.bulk_pricing_service = bulk_pricing_service or BulkPricingService(self.line_item_service)

    async def create(self, request: NewLineItemRequest) -> LineItem:
        return self.line_item_service.new_line_item(
            request.item_id,
            request.card_rate,
            request.document_start_date,
            request.document_end_date,
            asset_code=request.asset_code,
            total_sqft=request.total_sqft,
        )

    async def set_price(self, request: LineItemPriceRequest) -> LineItem:
        return self.line_item_service.apply_price(
            request.item,
            request.negotiated_price,
            request.context,
            request.document_start_date,
            request.document_end_date,
        )

    async def set_dates(self, request: LineItemDatesRequest) -> LineItem:
        return self.line_item_service.apply_dates(request.item, request.start_date, request.end_date, request.context)

    async def set_days(self, request: LineItemDaysRequest) -> LineItem:
        return self.line_item_service.apply_days(
            request.item,
            request.booked_days,
            request.context,
            request.document_start_date,
        )

    async def bulk_dates(self, request: BulkDatesRequest) -> BulkUpdateResult:
        return self.bulk_pricing_service.apply_dates(request)

    async def bulk_days(self, request: BulkDaysRequest) -> BulkUpdateResult:
        return self.bulk_pricing_service.apply_days(request)

    async def bulk_negotiated_rate(self, request: BulkNegotiatedRateRequest) -> BulkUpdateResult:
        return self.bulk_pricing_service.apply_negotiated_rate(request)

    async def bulk_printing(self, request: BulkPrintingRequest) -> BulkUpdateResult:
        return self.bulk_pricing_service.apply_printing(request)

    async def bulk_mounting(self, request: BulkMountingRequest) -> BulkUpdateResult:
        return self.bulk_pricing_service.apply_mounting(request)
