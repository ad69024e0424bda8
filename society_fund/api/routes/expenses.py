"""
Expenses API Routes

Provides list/create/update/delete endpoints for expense entries.
"""

import datetime
from decimal import Decimal

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field

from ...ledger.entries import AMOUNT_DECIMAL_PLACES, AMOUNT_MAX_DIGITS, EXPENSES, ExpenseEntry
from ...ledger.store import EntryStore
from ...ledger.validation import ensure_valid_expense_entry, merge_expense_patch
from ..dependencies import get_store

router = APIRouter(prefix="/expenses", tags=["expenses"])


class ExpenseCreateInput(BaseModel):
    """Input model for creating an expense."""

    model_config = ConfigDict(extra="forbid")

    details: str
    amount: Decimal = Field(gt=0, max_digits=AMOUNT_MAX_DIGITS, decimal_places=AMOUNT_DECIMAL_PLACES)
    date: datetime.date | None = None


class ExpensePatchInput(BaseModel):
    """Fields that may be replaced on an existing expense."""

    model_config = ConfigDict(extra="forbid")

    details: str | None = None
    amount: Decimal | None = Field(
        default=None, gt=0, max_digits=AMOUNT_MAX_DIGITS, decimal_places=AMOUNT_DECIMAL_PLACES,
    )
    date: datetime.date | None = None


class ExpenseResponse(BaseModel):
    """Expense model."""

    id: str
    details: str
    amount: float
    date: datetime.date


@router.get("", response_model=list[ExpenseResponse])
async def list_expenses(
    store: EntryStore = Depends(get_store),
) -> list[ExpenseResponse]:
    """List expenses, newest first."""
    return [ExpenseResponse(**expense.to_dict()) for expense in store.list_expenses()]


@router.post("", response_model=ExpenseResponse)
async def create_expense(
    input_data: ExpenseCreateInput,
    store: EntryStore = Depends(get_store),
) -> ExpenseResponse:
    """Create an expense. The date defaults to today.

    Args:
        input_data: Expense input data
        store: Entry store

    Returns:
        Created expense with its identifier
    """
    expense = ExpenseEntry(details=input_data.details, amount=input_data.amount)
    if input_data.date is not None:
        expense.date = input_data.date

    ensure_valid_expense_entry(expense)
    row = store.insert(EXPENSES, expense.to_row())
    return ExpenseResponse(**ExpenseEntry.from_row(row).to_dict())


@router.put("/{entry_id}", response_model=ExpenseResponse)
async def update_expense(
    entry_id: str,
    patch: ExpensePatchInput,
    store: EntryStore = Depends(get_store),
) -> ExpenseResponse:
    """Replace some or all fields of an expense.

    Args:
        entry_id: Expense ID
        patch: Fields to replace
        store: Entry store

    Returns:
        Updated expense
    """
    existing = ExpenseEntry.from_row(store.get(EXPENSES, entry_id))
    changes = patch.model_dump(exclude_unset=True)
    merged = merge_expense_patch(existing, changes)

    row = store.update(EXPENSES, entry_id, merged.to_row(fields=changes))
    return ExpenseResponse(**ExpenseEntry.from_row(row).to_dict())


@router.delete("/{entry_id}")
async def delete_expense(
    entry_id: str,
    store: EntryStore = Depends(get_store),
) -> dict:
    """Delete an expense permanently."""
    store.delete(EXPENSES, entry_id)
    return {"message": "Expense deleted", "id": entry_id}
