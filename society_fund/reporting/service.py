"""
Report Service Module

Runs one render cycle: fetch entries from the store, aggregate, build a
document plan and hand it to an exporter.
"""

import logging
from pathlib import Path

from ..config import SocietyConfig
from ..errors import NotFoundError, StoreConnectionError, ValidationError
from ..ledger.entries import ExpenseEntry, FundEntry, FundStatus
from ..ledger.store import EntryStore
from .aggregator import (
    ALL_BLOCKS,
    FundSummary,
    balance,
    filter_scope,
    fund_summary,
    total_amount,
    total_by_status,
    validate_scope,
)
from .excel_exporter import ExcelExporter
from .pdf_exporter import PdfExporter
from .report_builder import DocumentPlan, ReportBuilder

logger = logging.getLogger(__name__)

EXPORT_FORMATS = ("xlsx", "pdf")


class ReportService:
    """Builds reports from the current contents of the store."""

    def __init__(self, store: EntryStore, config: SocietyConfig | None = None):
        """Initialize the service.

        Args:
            store: Entry store
            config: Society configuration (defaults loaded if None)
        """
        self.store = store
        self.config = config or SocietyConfig()
        self.builder = ReportBuilder(self.config)
        self.exporters = {
            "xlsx": ExcelExporter(self.config),
            "pdf": PdfExporter(self.config),
        }
        self.funds: list[FundEntry] = []
        self.expenses: list[ExpenseEntry] = []

    def load_funds(self) -> list[FundEntry]:
        """Fetch fund entries, clearing the held list if the fetch fails."""
        try:
            self.funds = self.store.list_funds()
        except StoreConnectionError:
            self.funds = []
            raise
        return self.funds

    def load_expenses(self) -> list[ExpenseEntry]:
        """Fetch expense entries, clearing the held list if the fetch fails."""
        try:
            self.expenses = self.store.list_expenses()
        except StoreConnectionError:
            self.expenses = []
            raise
        return self.expenses

    def fund_summary(self, scope: str = ALL_BLOCKS) -> FundSummary:
        return fund_summary(filter_scope(self.load_funds(), scope))

    def balance_summary(self) -> dict:
        funds = self.load_funds()
        expenses = self.load_expenses()
        return {
            "total_collection": float(total_by_status(funds, FundStatus.PAID)),
            "total_expenses": float(total_amount(expenses)),
            "balance": float(balance(funds, expenses)),
        }

    def export_fund_report(self, scope: str = ALL_BLOCKS, fmt: str = "xlsx") -> Path:
        """Export the fund collection report for a scope.

        Raises:
            ValidationError: Unknown scope or format
            NotFoundError: Single-block scope with no entries
        """
        validate_scope(scope)
        exporter = self._exporter(fmt)
        plan = self.builder.build_fund_report(self.load_funds(), scope)
        if plan.is_empty:
            raise NotFoundError(f"No fund entries in block {scope}")
        return self._export(exporter, plan)

    def export_summary_report(self, fmt: str = "pdf") -> Path:
        exporter = self._exporter(fmt)
        plan = self.builder.build_summary_report(self.load_funds())
        return self._export(exporter, plan)

    def export_expense_report(self, fmt: str = "xlsx") -> Path:
        exporter = self._exporter(fmt)
        plan = self.builder.build_expense_report(self.load_funds(), self.load_expenses())
        return self._export(exporter, plan)

    def media_type(self, fmt: str) -> str:
        return self._exporter(fmt).MEDIA_TYPE

    def _exporter(self, fmt: str) -> ExcelExporter | PdfExporter:
        try:
            return self.exporters[fmt]
        except KeyError:
            raise ValidationError(
                f"Unknown export format '{fmt}'; expected one of {', '.join(EXPORT_FORMATS)}"
            ) from None

    def _export(self, exporter: ExcelExporter | PdfExporter, plan: DocumentPlan) -> Path:
        path = exporter.export(plan, self.config.output_dir)
        logger.info(f"Exported {plan.name} ({len(plan.sections)} sections) to {path}")
        return path
