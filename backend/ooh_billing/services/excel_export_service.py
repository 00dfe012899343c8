"""
Excel export service for plans and campaigns.
"""

import logging
import io
from typing import List

from openpyxl import Workbook
from openpyxl.styles import Font, Alignment, PatternFill
from openpyxl.utils import get_column_letter

from ooh_billing.core.config import settings
from ooh_billing.schemas.line_item import LineItem
from ooh_billing.schemas.totals import BookingDocument, DocumentTotals
from ooh_billing.services.base_service import BaseService
from ooh_billing.services.line_item_service import LineItemService
from ooh_billing.services.totals_service import TotalsService
from ooh_billing.utils.date_span import to_canonical_date_string
from ooh_billing.utils.effective_price import resolve_effective_price
from ooh_billing.utils.rent_calculator import round_money

logger = logging.getLogger(__name__)

PLAN_SHEET_TITLE = "Plan"
LINE_HEADERS = [
    "Asset",
    "Start Date",
    "End Date",
    "Days",
    "Monthly Rate",
    "Daily Rate",
    "Rent",
    "Printing",
    "Mounting",
    "Line Total",
]
MONEY_FORMAT = "#,##0.00"
HEADER_FILL = PatternFill(start_color="1F4E78", end_color="1F4E78", fill_type="solid")


class ExcelExportService(BaseService):
    """Service for exporting plan line items to Excel."""

    def __init__(self, line_item_service: LineItemService = None, totals_service: TotalsService = None):
        self.line_item_service = line_item_service or LineItemService()
        self.totals_service = totals_service or TotalsService(self.line_item_service)

    def export_plan(self, document: BookingDocument, items: List[LineItem], context: str = "plan") -> io.BytesIO:
        """
        Export line items and the document summary to an .xlsx workbook.

        Line rows carry per-line rounded figures; the summary block comes from
        the aggregate totals so the grand total is rounded once.
        """
        totals = self.totals_service.compute_totals(document, items, context)

        wb = Workbook()
        ws = wb.active
        ws.title = PLAN_SHEET_TITLE

        ws.append([document.name])
        ws["A1"].font = Font(bold=True, size=14)
        ws.append([])

        ws.append(LINE_HEADERS)
        header_row = ws.max_row
        for col in range(1, len(LINE_HEADERS) + 1):
            cell = ws.cell(row=header_row, column=col)
            cell.font = Font(bold=True, color="FFFFFF")
            cell.fill = HEADER_FILL
            cell.alignment = Alignment(horizontal="center")

        for item in items:
            ws.append(self._line_row(document, item, context))
            for col in range(5, len(LINE_HEADERS) + 1):
                ws.cell(row=ws.max_row, column=col).number_format = MONEY_FORMAT

        ws.append([])
        self._write_summary(ws, totals)

        for col in range(1, len(LINE_HEADERS) + 1):
            ws.column_dimensions[get_column_letter(col)].width = 16

        output = io.BytesIO()
        wb.save(output)
        output.seek(0)

        logger.info(
            f"Exported plan '{document.name}' with {len(items)} line items",
            extra={"grand_total": str(totals.grand_total)},
        )
        return output

    def _line_row(self, document: BookingDocument, item: LineItem, context: str) -> list:
        monthly_rate = resolve_effective_price(item, context).value
        rent = self.line_item_service.compute_item_rent(item, context, document.start_date, document.end_date)
        start, end = self.line_item_service.booking_window(item, document.start_date, document.end_date)

        rent_amount = rent.rent_amount if rent else round_money(0)
        line_total = round_money(rent_amount + item.printing_charges + item.mounting_charges)
        return [
            item.asset_code or item.id,
            to_canonical_date_string(start) if start else "",
            to_canonical_date_string(end) if end else "",
            rent.booked_days if rent else item.booked_days,
            float(round_money(monthly_rate)),
            float(rent.daily_rate) if rent else None,
            float(rent_amount),
            float(round_money(item.printing_charges)),
            float(round_money(item.mounting_charges)),
            float(line_total),
        ]

    def _write_summary(self, ws, totals: DocumentTotals) -> None:
        rows = [
            ("Display Cost", totals.display_cost),
            ("Printing", totals.printing_cost),
            ("Mounting", totals.mounting_cost),
            ("Discount", totals.manual_discount_amount),
            (f"GST ({totals.gst_rate}%)", totals.gst_amount),
            (f"Grand Total ({settings.CURRENCY_SYMBOL})", totals.grand_total),
        ]
        for label, value in rows:
            ws.append([label, float(value)])
            ws.cell(row=ws.max_row, column=1).font = Font(bold=True)
            ws.cell(row=ws.max_row, column=2).number_format = MONEY_FORMAT
