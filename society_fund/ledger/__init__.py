"""
Ledger Module

Fund and expense records, their validation, and the store that holds them.
"""

from .entries import (
    BLOCKS,
    EXPENSES,
    FUNDS,
    OTHER_BLOCK,
    SHOP_BLOCK,
    ExpenseEntry,
    FundEntry,
    FundStatus,
)
from .store import EntryStore
from .validation import (
    ensure_valid_expense_entry,
    ensure_valid_fund_entry,
    merge_expense_patch,
    merge_fund_patch,
)

__all__ = [
    "BLOCKS",
    "EXPENSES",
    "FUNDS",
    "OTHER_BLOCK",
    "SHOP_BLOCK",
    "ExpenseEntry",
    "FundEntry",
    "FundStatus",
    "EntryStore",
    "ensure_valid_expense_entry",
    "ensure_valid_fund_entry",
    "merge_expense_patch",
    "merge_fund_patch",
]
