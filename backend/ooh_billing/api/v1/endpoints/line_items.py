"""
Line item endpoints: single item edits and bulk operations.
"""

from fastapi import APIRouter

from ooh_billing.deps.di_container import get_container
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

router = APIRouter()


@router.post("", response_model=LineItem)
async def create_line_item(request: NewLineItemRequest) -> LineItem:
    """Line item for an asset added to a plan or campaign, priced from its card rate."""
    controller = get_container().line_item_controller()
    return await controller.create(request)


@router.post("/price", response_model=LineItem)
async def set_line_item_price(request: LineItemPriceRequest) -> LineItem:
    controller = get_container().line_item_controller()
    return await controller.set_price(request)


@router.post("/dates", response_model=LineItem)
async def set_line_item_dates(request: LineItemDatesRequest) -> LineItem:
    controller = get_container().line_item_controller()
    return await controller.set_dates(request)


@router.post("/days", response_model=LineItem)
async def set_line_item_days(request: LineItemDaysRequest) -> LineItem:
    """Set booked days; the end date moves with them."""
    controller = get_container().line_item_controller()
    return await controller.set_days(request)


@router.post("/bulk/dates", response_model=BulkUpdateResult)
async def bulk_dates(request: BulkDatesRequest) -> BulkUpdateResult:
    """Apply one booking window to the selected line items."""
    controller = get_container().line_item_controller()
    return await controller.bulk_dates(request)


@router.post("/bulk/days", response_model=BulkUpdateResult)
async def bulk_days(request: BulkDaysRequest) -> BulkUpdateResult:
    """Apply one day count to the selected line items."""
    controller = get_container().line_item_controller()
    return await controller.bulk_days(request)


@router.post("/bulk/negotiated-rate", response_model=BulkUpdateResult)
async def bulk_negotiated_rate(request: BulkNegotiatedRateRequest) -> BulkUpdateResult:
    controller = get_container().line_item_controller()
    return await controller.bulk_negotiated_rate(request)


@router.post("/bulk/printing", response_model=BulkUpdateResult)
async def bulk_printing(request: BulkPrintingRequest) -> BulkUpdateResult:
    controller = get_container().line_item_controller()
    return await controller.bulk_printing(request)


@router.post("/bulk/mounting", response_model=BulkUpdateResult)
async def bulk_mounting(request: BulkMountingRequest) -> BulkUpdateResult:
    controller = get_container().line_item_controller()
    return await controller.bulk_mounting(request)
