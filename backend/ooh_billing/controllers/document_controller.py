"""
Document controller.
Coordinates totals and export for a plan or campaign.
"""

import io

from ooh_billing.controllers.base_controller import BaseController
from ooh_billing.schemas.totals import DocumentTotals, DocumentTotalsRequest, PeriodAmount, PeriodAmountRequest
from ooh_billing.services.excel_export_service import ExcelExportService
from ooh_billing.services.totals_service import TotalsService


class DocumentController(BaseController):
    """Controller for document totals and exports."""

    def __init__(self, totals_service: TotalsService = None, excel_export_service: ExcelExportService = None):
        self.totals_service = totals_service or TotalsService()
        self.excel_export_service = excel_export_service or ExcelExportService(totals_service=self.totals_service)

    async def totals(self, request: DocumentTotalsRequest) -> DocumentTotals:
        return self.totals_service.compute_totals(request.document, request.items, request.context)

    async def period_amount(self, request: PeriodAmountRequest) -> PeriodAmount:
        """Amounts for the billing period named by month_key."""
        totals = self.totals_service.compute_totals(request.document, request.items, request.context)
        period = self.totals_service.find_period(totals, request.month_key)
        return self.totals_service.period_amount(
            period,
            totals,
            request.document,
            request.items,
            request.context,
            include_printing=request.include_printing,
            include_mounting=request.include_mounting,
        )

    async def export_excel(self, request: DocumentTotalsRequest) -> io.BytesIO:
        return self.excel_export_service.export_plan(request.document, request.items, request.context)
