"""
Tests for the Report Builder

Tests section order, row contents and plan naming for fund and expense
reports.
"""

from datetime import date
from decimal import Decimal
from pathlib import Path

import pytest

from society_fund.config import SocietyConfig
from society_fund.errors import ValidationError
from society_fund.ledger.entries import ExpenseEntry, FundEntry, FundStatus
from society_fund.reporting.aggregator import per_group_stats
from society_fund.reporting.report_builder import ReportBuilder, RowKind, block_label


@pytest.fixture
def builder(society_config: SocietyConfig) -> ReportBuilder:
    return ReportBuilder(society_config)


class TestFundReport:
    """Tests for build_fund_report."""

    def test_all_scope_starts_with_summary(self, builder: ReportBuilder, sample_funds):
        plan = builder.build_fund_report(sample_funds, "all")

        assert plan.name == "society-fund-all"
        assert [section.title for section in plan.sections] == ["Summary", "Block A", "Block C", "Shop"]

    def test_single_block_has_no_summary(self, builder: ReportBuilder, sample_funds):
        plan = builder.build_fund_report(sample_funds, "C")

        assert plan.name == "society-fund-block-C"
        assert [section.title for section in plan.sections] == ["Block C"]

    def test_block_without_entries_gives_empty_plan(self, builder: ReportBuilder, sample_funds):
        assert builder.build_fund_report(sample_funds, "J").is_empty

    def test_unknown_scope(self, builder: ReportBuilder, sample_funds):
        with pytest.raises(ValidationError):
            builder.build_fund_report(sample_funds, "Tower")


class TestSummarySection:
    """Tests for summary_section."""

    def test_lists_non_empty_blocks_and_grand_total(self, builder: ReportBuilder):
        entries = [
            FundEntry(name="P", block="C", unit="1", amount=Decimal("300"), status=FundStatus.UNPAID),
            FundEntry(name="Q", block="A", unit="1", amount=Decimal("100"), status=FundStatus.PAID),
            FundEntry(name="R", block="A", unit="2", amount=Decimal("200"), status=FundStatus.UNPAID),
        ]

        section = builder.summary_section(entries)
        data = section.rows_of(RowKind.DATA)
        footer = section.rows_of(RowKind.FOOTER)

        assert [row.cells[0] for row in data] == ["Block A", "Block C"]
        assert data[0].cells[1:] == [2, 1, 1, Decimal("300"), Decimal("100")]
        assert len(footer) == 1
        assert footer[0].cells == ["Grand Total", 3, 1, 2, Decimal("600"), Decimal("100")]
        assert section.rows[-1] is footer[0]

    def test_grand_total_matches_whole_list(self, builder: ReportBuilder, sample_funds):
        section = builder.summary_section(sample_funds)
        footer = section.rows_of(RowKind.FOOTER)[0]
        overall = per_group_stats(sample_funds)

        assert footer.cells[1:] == [
            overall.count,
            overall.paid_count,
            overall.unpaid_count,
            overall.total_amount,
            overall.collected_amount,
        ]
        assert sum(row.cells[4] for row in section.rows_of(RowKind.DATA)) == footer.cells[4]

    def test_overall_statistics(self, builder: ReportBuilder, sample_funds):
        section = builder.summary_section(sample_funds)
        stats = {row.cells[0]: row.cells[1] for row in section.rows_of(RowKind.STAT)}

        assert stats == {
            "Total Amount": Decimal("2550.50"),
            "Total Paid": Decimal("1600"),
            "Total Pending": Decimal("950.50"),
        }

    def test_title_uses_society_name(self, builder: ReportBuilder, sample_funds):
        section = builder.summary_section(sample_funds)

        assert section.rows[0].kind == RowKind.TITLE
        assert section.rows[0].cells == ["Green Park Society - Fund Collection Summary"]


class TestBlockSection:
    """Tests for block_section."""

    def test_rows_sorted_by_unit_as_strings(self, builder: ReportBuilder, sample_funds):
        section = builder.block_section("C", [entry for entry in sample_funds if entry.block == "C"])

        assert [row.cells[1] for row in section.rows_of(RowKind.DATA)] == ["10", "2"]

    def test_status_rendered_as_tokens(self, builder: ReportBuilder, sample_funds):
        section = builder.block_section("A", [entry for entry in sample_funds if entry.block == "A"])
        data = section.rows_of(RowKind.DATA)

        assert [row.cells[3] for row in data] == ["Yes", "No"]
        assert [row.status for row in data] == [FundStatus.PAID, FundStatus.UNPAID]
        assert all(row.status_column == 3 for row in data)
        for row in section.rows:
            assert "Paid" not in row.cells
            assert "Unpaid" not in row.cells

    def test_shop_units_carry_block_name(self, builder: ReportBuilder, sample_funds):
        section = builder.block_section("Shop", [entry for entry in sample_funds if entry.block == "Shop"])

        assert section.title == "Shop"
        assert section.rows_of(RowKind.DATA)[0].cells[1] == "Shop-12"

    def test_comment_defaults_to_blank(self, builder: ReportBuilder, sample_funds):
        section = builder.block_section("C", [entry for entry in sample_funds if entry.block == "C"])

        assert [row.cells[4] for row in section.rows_of(RowKind.DATA)] == ["Will pay next month", ""]

    def test_trailing_statistics(self, builder: ReportBuilder, sample_funds):
        section = builder.block_section("C", [entry for entry in sample_funds if entry.block == "C"])
        stats = section.rows_of(RowKind.STAT)[-6:]

        assert [row.cells for row in stats] == [
            ["Total Flats", 2],
            ["Paid Count", 1],
            ["Unpaid Count", 1],
            ["Total Amount", Decimal("1250.50")],
            ["Collected Amount", Decimal("500")],
            ["Pending Amount", Decimal("750.50")],
        ]
        assert section.rows[-1] is stats[-1]

    def test_custom_status_tokens(self, tmp_path: Path, sample_funds):
        config_dir = tmp_path / "custom"
        config_dir.mkdir()
        (config_dir / "society_config.yaml").write_text("""
reports:
  status_tokens:
    paid: "PAID"
    unpaid: "DUE"
""")
        builder = ReportBuilder(SocietyConfig(config_dir))

        section = builder.block_section("A", [entry for entry in sample_funds if entry.block == "A"])

        assert [row.cells[3] for row in section.rows_of(RowKind.DATA)] == ["PAID", "DUE"]


class TestExpenseReport:
    """Tests for build_expense_report."""

    def test_balance_summary_and_rows(self, builder: ReportBuilder, sample_funds, sample_expenses):
        plan = builder.build_expense_report(sample_funds, sample_expenses)
        section = plan.sections[0]

        assert plan.name == "society-fund-balance-report"
        assert [row.cells for row in section.rows_of(RowKind.STAT)] == [
            ["Total Collection", Decimal("1600")],
            ["Total Expenses", Decimal("50")],
            ["Balance", Decimal("1550")],
        ]
        assert [row.cells[0] for row in section.rows_of(RowKind.DATA)] == [date(2024, 1, 2), date(2024, 1, 1)]
        assert [row.cells[0] for row in section.rows_of(RowKind.FOOTER)] == ["Total Expenses", "Balance"]

    def test_deficit_is_not_clamped(self, builder: ReportBuilder):
        funds = [FundEntry(name="P", block="A", unit="1", amount=Decimal("100"), status=FundStatus.PAID)]
        expenses = [ExpenseEntry(details="Pump", amount=Decimal("150"), date=date(2024, 5, 1))]

        section = builder.expense_section(funds, expenses)

        assert section.rows_of(RowKind.FOOTER)[-1].cells == ["Balance", "", Decimal("-50")]

    def test_summary_report(self, builder: ReportBuilder, sample_funds):
        plan = builder.build_summary_report(sample_funds)

        assert plan.name == "society-fund-summary"
        assert [section.title for section in plan.sections] == ["Summary"]


def test_block_labels():
    assert block_label("A") == "Block A"
    assert block_label("Shop") == "Shop"
    assert block_label("Other") == "Other"
