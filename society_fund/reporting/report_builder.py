"""
Report Builder Module

Turns aggregated figures into an ordered document plan: sections made of
typed rows that the Excel and PDF exporters render. Money is carried as
Decimal and counts as int so each exporter can format them its own way.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Sequence

from ..config import SocietyConfig
from ..ledger.entries import BLOCKS, PREFIXED_BLOCKS, ExpenseEntry, FundEntry, FundStatus
from .aggregator import (
    ALL_BLOCKS,
    GroupStats,
    balance,
    filter_scope,
    format_unit_label,
    group_by_block,
    per_group_stats,
    sort_by_unit,
    total_amount,
    total_by_status,
    validate_scope,
)

logger = logging.getLogger(__name__)


class RowKind(Enum):
    """Role of a row inside a section."""
    TITLE = "title"
    HEADING = "heading"
    HEADER = "header"
    DATA = "data"
    FOOTER = "footer"
    STAT = "stat"
    BLANK = "blank"


@dataclass
class ReportRow:
    """One printable row."""

    kind: RowKind
    cells: list[Any] = field(default_factory=list)
    status: FundStatus | None = None
    status_column: int | None = None


@dataclass
class ReportSection:
    """A sheet in a workbook, a page in a document."""

    title: str
    heading: str
    column_widths: list[int]
    rows: list[ReportRow] = field(default_factory=list)

    def add(self, kind: RowKind, *cells: Any, status: FundStatus | None = None,
            status_column: int | None = None) -> None:
        self.rows.append(ReportRow(kind, list(cells), status, status_column))

    def rows_of(self, kind: RowKind) -> list[ReportRow]:
        return [row for row in self.rows if row.kind == kind]


@dataclass
class DocumentPlan:
    """Ordered sections for one export; ``name`` is the file stem."""

    name: str
    title: str
    sections: list[ReportSection] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.sections


def block_label(block: str) -> str:
    """Display label for a block ("Block A", "Shop", "Other")."""
    if block in PREFIXED_BLOCKS or block not in BLOCKS:
        return block
    return f"Block {block}"


class ReportBuilder:
    """Builds document plans for fund and expense reports."""

    SUMMARY_COLUMNS = [18, 15, 15, 15, 15, 18]
    BLOCK_COLUMNS = [28, 15, 12, 10, 30]
    EXPENSE_COLUMNS = [14, 40, 15]

    def __init__(self, config: SocietyConfig | None = None):
        """Initialize the builder.

        Args:
            config: Society configuration (defaults loaded if None)
        """
        self.config = config or SocietyConfig()
        reports = self.config.reports
        self.file_prefix = reports["file_prefix"]
        self.status_tokens = {
            FundStatus.PAID: reports["status_tokens"]["paid"],
            FundStatus.UNPAID: reports["status_tokens"]["unpaid"],
        }

    def status_token(self, status: FundStatus) -> str:
        return self.status_tokens[status]

    def plan_name(self, scope: str) -> str:
        if scope == ALL_BLOCKS:
            return f"{self.file_prefix}-all"
        return f"{self.file_prefix}-block-{scope}"

    # ------------------------------------------------------------------
    # Plans
    # ------------------------------------------------------------------

    def build_fund_report(self, entries: Sequence[FundEntry], scope: str = ALL_BLOCKS) -> DocumentPlan:
        """Build the fund collection report.

        For scope "all" a summary section comes first, then one detail
        section per non-empty block in block order. For a single block only
        that block's detail section is produced (none if it has no entries).

        Args:
            entries: All fund entries
            scope: "all" or a block name

        Returns:
            DocumentPlan
        """
        validate_scope(scope)
        plan = DocumentPlan(
            name=self.plan_name(scope),
            title=f"{self.config.society_name} - Fund Collection Details",
        )

        if scope == ALL_BLOCKS:
            plan.sections.append(self.summary_section(entries))

        for block, group in group_by_block(filter_scope(entries, scope)).items():
            plan.sections.append(self.block_section(block, group))

        logger.debug(f"Built fund report {plan.name} with {len(plan.sections)} sections")
        return plan

    def build_summary_report(self, entries: Sequence[FundEntry]) -> DocumentPlan:
        """Build the summary-only report (overall and block-wise figures)."""
        return DocumentPlan(
            name=f"{self.file_prefix}-summary",
            title=f"{self.config.society_name} - Summary",
            sections=[self.summary_section(entries)],
        )

    def build_expense_report(
        self,
        fund_entries: Sequence[FundEntry],
        expense_entries: Sequence[ExpenseEntry],
    ) -> DocumentPlan:
        """Build the expense and balance report."""
        return DocumentPlan(
            name=f"{self.file_prefix}-balance-report",
            title=f"{self.config.society_name} - Fund Balance Report",
            sections=[self.expense_section(fund_entries, expense_entries)],
        )

    # ------------------------------------------------------------------
    # Sections
    # ------------------------------------------------------------------

    def summary_section(self, entries: Sequence[FundEntry]) -> ReportSection:
        """Overall totals, one row per non-empty block, then a grand total."""
        section = ReportSection(
            title="Summary",
            heading=f"{self.config.society_name} - Fund Collection Summary",
            column_widths=self.SUMMARY_COLUMNS,
        )
        overall = per_group_stats(entries)

        section.add(RowKind.TITLE, section.heading)
        section.add(RowKind.BLANK)
        section.add(RowKind.HEADING, "Overall Summary")
        self._add_amount_stats(section, overall)
        section.add(RowKind.BLANK)
        section.add(RowKind.HEADING, "Block-wise Summary")
        section.add(
            RowKind.HEADER,
            "Block", "Total Flats", "Paid Count", "Unpaid Count", "Total Amount", "Collected Amount",
        )

        groups = group_by_block(entries)
        for block, group in groups.items():
            stats = per_group_stats(group)
            section.add(
                RowKind.DATA,
                block_label(block),
                stats.count,
                stats.paid_count,
                stats.unpaid_count,
                stats.total_amount,
                stats.collected_amount,
            )

        # Sums exactly the listed rows
        grand = per_group_stats([entry for group in groups.values() for entry in group])
        section.add(
            RowKind.FOOTER,
            "Grand Total",
            grand.count,
            grand.paid_count,
            grand.unpaid_count,
            grand.total_amount,
            grand.collected_amount,
        )
        return section

    def block_section(self, block: str, entries: Sequence[FundEntry]) -> ReportSection:
        """Detail section for one block."""
        label = block_label(block)
        section = ReportSection(
            title=label,
            heading=f"{label} - Fund Collection Details",
            column_widths=self.BLOCK_COLUMNS,
        )
        stats = per_group_stats(entries)

        section.add(RowKind.TITLE, section.heading)
        section.add(RowKind.BLANK)
        section.add(RowKind.HEADING, "Block Summary")
        self._add_amount_stats(section, stats)
        section.add(RowKind.BLANK)
        section.add(RowKind.HEADING, "Details")
        section.add(RowKind.HEADER, "Name", "Flat Number", "Amount", "Status", "Comments")

        for entry in sort_by_unit(entries):
            section.add(
                RowKind.DATA,
                entry.name,
                format_unit_label(entry, within_block=True),
                entry.amount,
                self.status_token(entry.status),
                entry.comment or "",
                status=entry.status,
                status_column=3,
            )

        section.add(RowKind.BLANK)
        section.add(RowKind.HEADING, "Statistics")
        section.add(RowKind.STAT, "Total Flats", stats.count)
        section.add(RowKind.STAT, "Paid Count", stats.paid_count)
        section.add(RowKind.STAT, "Unpaid Count", stats.unpaid_count)
        section.add(RowKind.STAT, "Total Amount", stats.total_amount)
        section.add(RowKind.STAT, "Collected Amount", stats.collected_amount)
        section.add(RowKind.STAT, "Pending Amount", stats.pending_amount)
        return section

    def expense_section(
        self,
        fund_entries: Sequence[FundEntry],
        expense_entries: Sequence[ExpenseEntry],
    ) -> ReportSection:
        """Collection, expenses and balance, then the expense list."""
        section = ReportSection(
            title="Balance Report",
            heading=f"{self.config.society_name} - Fund Balance Report",
            column_widths=self.EXPENSE_COLUMNS,
        )
        collected = total_by_status(fund_entries, FundStatus.PAID)
        expenses_total = total_amount(expense_entries)
        remaining = balance(fund_entries, expense_entries)

        section.add(RowKind.TITLE, section.heading)
        section.add(RowKind.BLANK)
        section.add(RowKind.HEADING, "Balance Summary")
        section.add(RowKind.STAT, "Total Collection", collected)
        section.add(RowKind.STAT, "Total Expenses", expenses_total)
        section.add(RowKind.STAT, "Balance", remaining)
        section.add(RowKind.BLANK)
        section.add(RowKind.HEADING, "Expense Details")
        section.add(RowKind.HEADER, "Date", "Details", "Amount")

        for expense in expense_entries:
            section.add(RowKind.DATA, expense.date, expense.details, expense.amount)

        section.add(RowKind.FOOTER, "Total Expenses", "", expenses_total)
        section.add(RowKind.FOOTER, "Balance", "", remaining)
        return section

    @staticmethod
    def _add_amount_stats(section: ReportSection, stats: GroupStats) -> None:
        section.add(RowKind.STAT, "Total Amount", stats.total_amount)
        section.add(RowKind.STAT, "Total Paid", stats.collected_amount)
        section.add(RowKind.STAT, "Total Pending", stats.pending_amount)
