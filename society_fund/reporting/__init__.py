"""
Reporting Module

Aggregates fund and expense entries and exports them as Excel workbooks and
PDF documents.
"""

from .aggregator import (
    ALL_BLOCKS,
    FundSummary,
    GroupStats,
    balance,
    filter_scope,
    format_unit_label,
    fund_summary,
    group_by_block,
    per_group_stats,
    sort_by_unit,
    total_amount,
    total_by_status,
)
from .excel_exporter import ExcelExporter
from .pdf_exporter import PdfExporter
from .report_builder import DocumentPlan, ReportBuilder, ReportRow, ReportSection, RowKind
from .service import ReportService

__all__ = [
    "ALL_BLOCKS",
    "FundSummary",
    "GroupStats",
    "balance",
    "filter_scope",
    "format_unit_label",
    "fund_summary",
    "group_by_block",
    "per_group_stats",
    "sort_by_unit",
    "total_amount",
    "total_by_status",
    "ExcelExporter",
    "PdfExporter",
    "DocumentPlan",
    "ReportBuilder",
    "ReportRow",
    "ReportSection",
    "RowKind",
    "ReportService",
]
