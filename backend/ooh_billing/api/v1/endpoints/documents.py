"""
Plan/campaign document endpoints: totals, billing periods and Excel export.
"""

import re
import unicodedata
from urllib.parse import quote

from fastapi import APIRouter, Request
from fastapi.responses import StreamingResponse

from ooh_billing.core.rate_limit import EXPORT_RATE_LIMIT, limiter
from ooh_billing.deps.di_container import get_container
from ooh_billing.schemas.totals import DocumentTotals, DocumentTotalsRequest, PeriodAmount, PeriodAmountRequest

router = APIRouter()

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def _content_disposition(name: str) -> str:
    """Attachment header with an ASCII filename and the full name as RFC 5987 filename*."""
    base = (name or "plan").strip().replace(" ", "_") or "plan"
    ascii_base = unicodedata.normalize("NFKD", base).encode("ascii", "ignore").decode("ascii")
    ascii_base = re.sub(r"[^A-Za-z0-9._-]+", "_", ascii_base).strip("_") or "plan"
    return f"attachment; filename=\"{ascii_base}.xlsx\"; filename*=UTF-8''{quote(base + '.xlsx')}"


@router.post("/totals", response_model=DocumentTotals)
async def document_totals(request: DocumentTotalsRequest) -> DocumentTotals:
    """Totals and billing periods for a plan or campaign."""
    controller = get_container().document_controller()
    return await controller.totals(request)


@router.post("/period-amount", response_model=PeriodAmount)
async def period_amount(request: PeriodAmountRequest) -> PeriodAmount:
    """Invoice amounts for one monthly billing period."""
    controller = get_container().document_controller()
    return await controller.period_amount(request)


@router.post("/export/excel")
@limiter.limit(EXPORT_RATE_LIMIT)
async def export_excel(request: Request, body: DocumentTotalsRequest) -> StreamingResponse:
    """Export line items and totals to an Excel workbook."""
    controller = get_container().document_controller()
    output = await controller.export_excel(body)
    return StreamingResponse(
        output,
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": _content_disposition(body.document.name)},
    )
