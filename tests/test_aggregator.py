"""
Tests for the Aggregator

Tests totals, block grouping, per-group statistics, balance and unit ordering.
"""

from datetime import date
from decimal import Decimal

import pytest

from society_fund.errors import ValidationError
from society_fund.ledger.entries import BLOCKS, ExpenseEntry, FundEntry, FundStatus
from society_fund.reporting.aggregator import (
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


def fund(block: str, unit: str, amount: str, status: FundStatus = FundStatus.PAID, name: str = "Resident") -> FundEntry:
    return FundEntry(name=name, block=block, unit=unit, amount=Decimal(amount), status=status)


# =============================================================================
# Totals
# =============================================================================

class TestTotals:
    """Tests for total_amount and total_by_status."""

    def test_total_of_empty_list_is_zero(self):
        assert total_amount([]) == Decimal("0")

    def test_total_amount(self, sample_funds):
        assert total_amount(sample_funds) == Decimal("2550.50")

    def test_total_by_status(self, sample_funds):
        paid = total_by_status(sample_funds, FundStatus.PAID)
        unpaid = total_by_status(sample_funds, FundStatus.UNPAID)

        assert paid == Decimal("1600")
        assert unpaid == Decimal("950.50")
        assert paid + unpaid == total_amount(sample_funds)

    def test_total_amount_of_expenses(self, sample_expenses):
        assert total_amount(sample_expenses) == Decimal("50")


# =============================================================================
# Grouping
# =============================================================================

class TestGroupByBlock:
    """Tests for group_by_block."""

    def test_buckets_follow_block_order(self, sample_funds):
        groups = group_by_block(sample_funds)

        assert list(groups) == ["A", "C", "Shop"]

    def test_order_independent_of_input_order(self, sample_funds):
        assert list(group_by_block(reversed(sample_funds))) == list(group_by_block(sample_funds))

    def test_only_non_empty_buckets(self, sample_funds):
        groups = group_by_block(sample_funds)

        assert "B" not in groups
        assert all(groups.values())

    def test_every_entry_in_exactly_one_group(self, sample_funds):
        groups = group_by_block(sample_funds)
        grouped = [entry for group in groups.values() for entry in group]

        assert len(grouped) == len(sample_funds)
        assert {id(entry) for entry in grouped} == {id(entry) for entry in sample_funds}
        for block, group in groups.items():
            assert all(entry.block == block for entry in group)

    def test_input_order_kept_within_bucket(self):
        first = fund("B", "5", "10")
        second = fund("B", "1", "10")

        assert group_by_block([first, second])["B"] == [first, second]

    def test_unknown_block_trails_known_blocks(self):
        entries = [fund("Annex", "1", "10"), fund("J", "1", "10"), fund("A", "1", "10")]

        assert list(group_by_block(entries)) == ["A", "J", "Annex"]

    def test_empty_list(self):
        assert group_by_block([]) == {}


# =============================================================================
# Statistics
# =============================================================================

class TestPerGroupStats:
    """Tests for per_group_stats and fund_summary."""

    def test_block_stats(self):
        entries = [
            fund("A", "1", "100", FundStatus.PAID),
            fund("A", "2", "200", FundStatus.UNPAID),
        ]

        stats = per_group_stats(group_by_block(entries)["A"])

        assert stats.count == 2
        assert stats.paid_count == 1
        assert stats.unpaid_count == 1
        assert stats.total_amount == Decimal("300")
        assert stats.collected_amount == Decimal("100")
        assert stats.pending_amount == Decimal("200")

    def test_invariants_hold_for_every_group_and_whole(self, sample_funds):
        summary = fund_summary(sample_funds)

        for stats in [summary.overall, *summary.blocks.values()]:
            assert stats.paid_count + stats.unpaid_count == stats.count
            assert stats.collected_amount + stats.pending_amount == stats.total_amount

    def test_empty_group(self):
        stats = per_group_stats([])

        assert stats.count == 0
        assert stats.paid_count + stats.unpaid_count == 0
        assert stats.total_amount == Decimal("0")

    def test_summary_lists_only_non_empty_blocks_in_order(self):
        entries = [
            fund("C", "1", "300", FundStatus.UNPAID),
            fund("A", "1", "100"),
            fund("A", "2", "50", FundStatus.UNPAID),
        ]

        summary = fund_summary(entries)

        assert list(summary.blocks) == ["A", "C"]
        assert summary.blocks["A"].count + summary.blocks["C"].count == summary.overall.count
        assert summary.overall.total_amount == Decimal("450")

    def test_repeated_runs_give_identical_results(self, sample_funds):
        assert fund_summary(sample_funds) == fund_summary(sample_funds)

    def test_summary_to_dict(self, sample_funds):
        data = fund_summary(sample_funds).to_dict()

        assert data["overall"]["count"] == 5
        assert [block["block"] for block in data["blocks"]] == ["A", "C", "Shop"]
        assert data["blocks"][1]["pending_amount"] == 750.5


# =============================================================================
# Balance
# =============================================================================

class TestBalance:
    """Tests for balance."""

    def test_balance_is_paid_collection_minus_expenses(self):
        funds = [fund("A", "1", "100", FundStatus.PAID), fund("A", "2", "400", FundStatus.UNPAID)]
        expenses = [
            ExpenseEntry(details="Cleaning", amount=Decimal("30"), date=date(2024, 1, 1)),
            ExpenseEntry(details="Paint", amount=Decimal("20"), date=date(2024, 1, 2)),
        ]

        assert balance(funds, expenses) == Decimal("50")

    def test_deficit_keeps_its_sign(self):
        funds = [fund("A", "1", "100", FundStatus.PAID)]
        expenses = [ExpenseEntry(details="Pump", amount=Decimal("150"), date=date(2024, 3, 1))]

        assert balance(funds, expenses) == Decimal("-50")

    def test_balance_without_entries(self):
        assert balance([], []) == Decimal("0")


# =============================================================================
# Ordering and labels
# =============================================================================

class TestUnitOrdering:
    """Tests for sort_by_unit and format_unit_label."""

    def test_units_sort_as_strings(self):
        entries = [fund("A", "2", "10"), fund("A", "10", "10"), fund("A", "1", "10")]

        assert [entry.unit for entry in sort_by_unit(entries)] == ["1", "10", "2"]

    def test_units_collate_case_insensitively(self):
        entries = [fund("Shop", "B2", "10"), fund("Shop", "a1", "10"), fund("Shop", "b1", "10")]

        assert [entry.unit for entry in sort_by_unit(entries)] == ["a1", "b1", "B2"]

    def test_lowercase_first_when_units_differ_only_in_case(self):
        entries = [fund("Shop", "A1", "10"), fund("Shop", "a1", "10")]

        assert [entry.unit for entry in sort_by_unit(entries)] == ["a1", "A1"]

    def test_sort_is_stable(self):
        first = fund("A", "5", "10", name="First")
        second = fund("A", "5", "10", name="Second")

        assert [entry.name for entry in sort_by_unit([first, second])] == ["First", "Second"]

    def test_plain_block_label_within_own_section(self):
        assert format_unit_label(fund("A", "101", "10"), within_block=True) == "101"

    def test_plain_block_label_elsewhere_carries_block(self):
        assert format_unit_label(fund("A", "101", "10")) == "A-101"

    @pytest.mark.parametrize("within_block", [True, False])
    def test_shop_label_always_prefixed(self, within_block):
        assert format_unit_label(fund("Shop", "12", "10"), within_block=within_block) == "Shop-12"

    def test_other_with_empty_unit(self):
        assert format_unit_label(fund("Other", "", "10"), within_block=True) == "Other"


class TestScope:
    """Tests for filter_scope."""

    def test_all_keeps_everything(self, sample_funds):
        assert filter_scope(sample_funds, "all") == sample_funds

    def test_single_block(self, sample_funds):
        assert {entry.unit for entry in filter_scope(sample_funds, "C")} == {"2", "10"}

    def test_block_without_entries(self, sample_funds):
        assert filter_scope(sample_funds, "J") == []

    def test_unknown_scope_rejected(self, sample_funds):
        with pytest.raises(ValidationError):
            filter_scope(sample_funds, "Z")

    def test_every_block_is_a_valid_scope(self):
        for block in BLOCKS:
            assert filter_scope([], block) == []
