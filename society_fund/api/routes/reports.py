"""
Reports API Routes

Provides fund summaries, the collection/expense balance, and Excel/PDF
exports of the fund and expense reports.
"""

from fastapi import APIRouter, Depends, Query
from fastapi.responses import FileResponse

from ...reporting.aggregator import ALL_BLOCKS
from ...reporting.service import ReportService
from ..dependencies import get_report_service

router = APIRouter(prefix="/reports", tags=["reports"])


def _file_response(service: ReportService, path, fmt: str) -> FileResponse:
    return FileResponse(path=path, filename=path.name, media_type=service.media_type(fmt))


@router.get("/funds/summary")
async def get_fund_summary(
    scope: str = Query(ALL_BLOCKS),
    service: ReportService = Depends(get_report_service),
) -> dict:
    """Overall and per-block collection statistics.

    Args:
        scope: "all" or a block name
        service: Report service

    Returns:
        Overall statistics and one entry per non-empty block
    """
    return service.fund_summary(scope).to_dict()


@router.get("/balance")
async def get_balance(
    service: ReportService = Depends(get_report_service),
) -> dict:
    """Total paid collection, total expenses and the resulting balance."""
    return service.balance_summary()


@router.get("/funds/export")
async def export_fund_report(
    scope: str = Query(ALL_BLOCKS),
    fmt: str = Query("xlsx", alias="format"),
    service: ReportService = Depends(get_report_service),
) -> FileResponse:
    """Download the fund collection report.

    Args:
        scope: "all" (summary plus every block) or a block name
        fmt: "xlsx" or "pdf"
        service: Report service

    Returns:
        Generated file
    """
    path = service.export_fund_report(scope, fmt)
    return _file_response(service, path, fmt)


@router.get("/funds/summary/export")
async def export_fund_summary(
    fmt: str = Query("pdf", alias="format"),
    service: ReportService = Depends(get_report_service),
) -> FileResponse:
    """Download the summary-only fund report."""
    path = service.export_summary_report(fmt)
    return _file_response(service, path, fmt)


@router.get("/expenses/export")
async def export_expense_report(
    fmt: str = Query("xlsx", alias="format"),
    service: ReportService = Depends(get_report_service),
) -> FileResponse:
    """Download the expense and balance report."""
    path = service.export_expense_report(fmt)
    return _file_response(service, path, fmt)
