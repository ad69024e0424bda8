"""
Aggregator Module

Pure functions deriving totals, groupings and balances from in-memory entry
lists. Nothing here keeps state between calls.
"""

import locale
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Iterable, Sequence

from ..errors import ValidationError
from ..ledger.entries import BLOCKS, PREFIXED_BLOCKS, ExpenseEntry, FundEntry, FundStatus

ALL_BLOCKS = "all"


@dataclass
class GroupStats:
    """Counts and amounts for one group of fund entries."""

    count: int = 0
    paid_count: int = 0
    unpaid_count: int = 0
    total_amount: Decimal = Decimal("0")
    collected_amount: Decimal = Decimal("0")
    pending_amount: Decimal = Decimal("0")

    def to_dict(self) -> dict:
        return {
            "count": self.count,
            "paid_count": self.paid_count,
            "unpaid_count": self.unpaid_count,
            "total_amount": float(self.total_amount),
            "collected_amount": float(self.collected_amount),
            "pending_amount": float(self.pending_amount),
        }


@dataclass
class FundSummary:
    """Whole-list statistics plus one entry per non-empty block."""

    overall: GroupStats
    blocks: dict[str, GroupStats] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "overall": self.overall.to_dict(),
            "blocks": [
                {"block": block, **stats.to_dict()}
                for block, stats in self.blocks.items()
            ],
        }


def total_amount(entries: Iterable[FundEntry | ExpenseEntry]) -> Decimal:
    """Sum of amounts; zero for an empty list."""
    return sum((entry.amount for entry in entries), Decimal("0"))


def total_by_status(entries: Iterable[FundEntry], status: FundStatus) -> Decimal:
    """Sum of amounts over entries with the given status."""
    return total_amount(entry for entry in entries if entry.status == status)


def group_by_block(entries: Iterable[FundEntry]) -> dict[str, list[FundEntry]]:
    """Partition entries by block.

    Buckets come out in BLOCKS order whatever the input order, and only
    non-empty buckets are kept. Entries with a block outside BLOCKS get
    trailing buckets in first-seen order so no entry is dropped.

    Args:
        entries: Fund entries

    Returns:
        Ordered mapping of block to entries (input order kept within a bucket)
    """
    buckets: dict[str, list[FundEntry]] = {}
    for entry in entries:
        buckets.setdefault(entry.block, []).append(entry)

    ordered = {block: buckets.pop(block) for block in BLOCKS if block in buckets}
    ordered.update(buckets)
    return ordered


def per_group_stats(entries: Sequence[FundEntry]) -> GroupStats:
    """Counts and amounts for a group of entries.

    Unpaid count and pending amount are derived from the totals, so
    ``paid_count + unpaid_count == count`` and
    ``collected_amount + pending_amount == total_amount`` always hold.
    """
    total = total_amount(entries)
    collected = total_by_status(entries, FundStatus.PAID)
    paid_count = sum(1 for entry in entries if entry.status == FundStatus.PAID)

    return GroupStats(
        count=len(entries),
        paid_count=paid_count,
        unpaid_count=len(entries) - paid_count,
        total_amount=total,
        collected_amount=collected,
        pending_amount=total - collected,
    )


def balance(fund_entries: Iterable[FundEntry], expense_entries: Iterable[ExpenseEntry]) -> Decimal:
    """Paid collections minus expenses. Negative means a deficit."""
    return total_by_status(fund_entries, FundStatus.PAID) - total_amount(expense_entries)


def fund_summary(entries: Sequence[FundEntry]) -> FundSummary:
    """Overall and per-block statistics."""
    return FundSummary(
        overall=per_group_stats(entries),
        blocks={
            block: per_group_stats(group)
            for block, group in group_by_block(entries).items()
        },
    )


def unit_sort_key(unit: str) -> tuple[str, str]:
    """Case-insensitive collation first, lowercase before uppercase on ties."""
    unit = unit or ""
    return locale.strxfrm(unit.casefold()), locale.strxfrm(unit.swapcase())


def sort_by_unit(entries: Iterable[FundEntry]) -> list[FundEntry]:
    """Stable sort by unit label as strings, so "10" comes before "2"."""
    return sorted(entries, key=lambda entry: unit_sort_key(entry.unit))


def format_unit_label(entry: FundEntry, within_block: bool = False) -> str:
    """Render the unit label of an entry.

    Shop and Other entries always carry their block name. Other blocks are
    shown bare inside their own block section and as "{block}-{unit}"
    everywhere else.

    Args:
        entry: Fund entry
        within_block: True when rendered inside the entry's own block section

    Returns:
        Display label
    """
    if within_block and entry.block not in PREFIXED_BLOCKS:
        return entry.unit
    if not entry.unit:
        return entry.block
    return f"{entry.block}-{entry.unit}"


def validate_scope(scope: str) -> str:
    if scope != ALL_BLOCKS and scope not in BLOCKS:
        raise ValidationError(f"Unknown scope '{scope}'; expected 'all' or one of {', '.join(BLOCKS)}")
    return scope


def filter_scope(entries: Iterable[FundEntry], scope: str) -> list[FundEntry]:
    """Keep the entries inside a reporting scope ("all" or one block)."""
    validate_scope(scope)
    if scope == ALL_BLOCKS:
        return list(entries)
    return [entry for entry in entries if entry.block == scope]
