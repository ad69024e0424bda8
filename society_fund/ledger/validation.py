"""
Entry Validation Module

Required-field and invariant checks applied before anything reaches the store,
plus merging of partial updates into existing records.
"""

import dataclasses
import logging
from decimal import Decimal
from typing import Any

from ..errors import ValidationError
from .entries import (
    AMOUNT_DECIMAL_PLACES,
    AMOUNT_MAX_DIGITS,
    BLOCKS,
    NAME_MAX_LENGTH,
    OTHER_BLOCK,
    UNIT_MAX_LENGTH,
    ExpenseEntry,
    FundEntry,
    FundStatus,
)

logger = logging.getLogger(__name__)

FUND_PATCH_FIELDS = frozenset({"name", "block", "unit", "amount", "status", "comment"})
EXPENSE_PATCH_FIELDS = frozenset({"details", "amount", "date"})

AMOUNT_LIMIT = Decimal(10) ** (AMOUNT_MAX_DIGITS - AMOUNT_DECIMAL_PLACES)


def validate_amount(amount: Decimal | None) -> list[str]:
    """Amount must be positive and fit the stored precision."""
    if amount is None or amount <= 0:
        return ["Amount must be greater than zero"]
    if amount >= AMOUNT_LIMIT:
        return [f"Amount must be less than {AMOUNT_LIMIT:,}"]
    if amount.as_tuple().exponent < -AMOUNT_DECIMAL_PLACES:
        return [f"Amount can have at most {AMOUNT_DECIMAL_PLACES} decimal places"]
    return []


def validate_fund_entry(entry: FundEntry) -> list[str]:
    """Validate a fund entry.

    Args:
        entry: FundEntry to validate

    Returns:
        List of validation errors
    """
    errors = []

    if not entry.name or not entry.name.strip():
        errors.append("Name is required")
    elif len(entry.name) > NAME_MAX_LENGTH:
        errors.append(f"Name must be at most {NAME_MAX_LENGTH} characters")

    if not entry.block:
        errors.append("Block is required")
    elif entry.block not in BLOCKS:
        errors.append(f"Unknown block '{entry.block}'; expected one of {', '.join(BLOCKS)}")

    # Unit may be left empty only for the catch-all category
    if entry.block != OTHER_BLOCK and not (entry.unit or "").strip():
        errors.append("Unit is required unless block is Other")
    elif len(entry.unit or "") > UNIT_MAX_LENGTH:
        errors.append(f"Unit must be at most {UNIT_MAX_LENGTH} characters")

    errors.extend(validate_amount(entry.amount))

    if not isinstance(entry.status, FundStatus):
        errors.append("Status must be Paid or Unpaid")

    return errors


def validate_expense_entry(entry: ExpenseEntry) -> list[str]:
    """Validate an expense entry.

    Args:
        entry: ExpenseEntry to validate

    Returns:
        List of validation errors
    """
    errors = []

    if not entry.details or not entry.details.strip():
        errors.append("Details are required")

    errors.extend(validate_amount(entry.amount))

    if entry.date is None:
        errors.append("Date is required")

    return errors


def ensure_valid_fund_entry(entry: FundEntry) -> FundEntry:
    errors = validate_fund_entry(entry)
    if errors:
        raise ValidationError(errors)
    return entry


def ensure_valid_expense_entry(entry: ExpenseEntry) -> ExpenseEntry:
    errors = validate_expense_entry(entry)
    if errors:
        raise ValidationError(errors)
    return entry


def _merge(entry: Any, patch: dict, allowed: frozenset) -> Any:
    unknown = set(patch) - allowed
    if unknown:
        raise ValidationError(f"Fields cannot be updated: {', '.join(sorted(unknown))}")
    return dataclasses.replace(entry, **patch)


def merge_fund_patch(entry: FundEntry, patch: dict) -> FundEntry:
    """Apply a partial update to a fund entry and re-validate the result.

    Args:
        entry: Stored entry
        patch: Fields to replace (only those set by the caller)

    Returns:
        Merged entry

    Raises:
        ValidationError: If the patch names unknown fields or the merged
            entry breaks an invariant
    """
    if "unit" in patch and patch["unit"] is None:
        patch = {**patch, "unit": ""}
    return ensure_valid_fund_entry(_merge(entry, patch, FUND_PATCH_FIELDS))


def merge_expense_patch(entry: ExpenseEntry, patch: dict) -> ExpenseEntry:
    """Apply a partial update to an expense entry and re-validate the result."""
    return ensure_valid_expense_entry(_merge(entry, patch, EXPENSE_PATCH_FIELDS))
