"""
Fund Entries API Routes

Provides list/create/update/delete endpoints for fund collection entries.
"""

from decimal import Decimal

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, ConfigDict, Field

from ...ledger.entries import (
    AMOUNT_DECIMAL_PLACES,
    AMOUNT_MAX_DIGITS,
    FUNDS,
    NAME_MAX_LENGTH,
    UNIT_MAX_LENGTH,
    FundEntry,
    FundStatus,
)
from ...ledger.store import EntryStore
from ...ledger.validation import ensure_valid_fund_entry, merge_fund_patch
from ...reporting.aggregator import filter_scope
from ..dependencies import get_store

router = APIRouter(prefix="/funds", tags=["funds"])


class FundEntryCreateInput(BaseModel):
    """Input model for creating a fund entry."""

    model_config = ConfigDict(extra="forbid")

    name: str = Field(max_length=NAME_MAX_LENGTH)
    block: str
    unit: str = Field(default="", max_length=UNIT_MAX_LENGTH)
    amount: Decimal = Field(gt=0, max_digits=AMOUNT_MAX_DIGITS, decimal_places=AMOUNT_DECIMAL_PLACES)
    status: FundStatus = FundStatus.UNPAID
    comment: str | None = None


class FundEntryPatchInput(BaseModel):
    """Fields that may be replaced on an existing fund entry."""

    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(default=None, max_length=NAME_MAX_LENGTH)
    block: str | None = None
    unit: str | None = Field(default=None, max_length=UNIT_MAX_LENGTH)
    amount: Decimal | None = Field(
        default=None, gt=0, max_digits=AMOUNT_MAX_DIGITS, decimal_places=AMOUNT_DECIMAL_PLACES,
    )
    status: FundStatus | None = None
    comment: str | None = None


class FundEntryResponse(BaseModel):
    """Fund entry model."""

    id: str
    name: str
    block: str
    unit: str
    amount: float
    status: FundStatus
    comment: str | None


@router.get("", response_model=list[FundEntryResponse])
async def list_fund_entries(
    block: str | None = Query(None),
    store: EntryStore = Depends(get_store),
) -> list[FundEntryResponse]:
    """List fund entries ordered by block and unit.

    Args:
        block: Only return entries of this block
        store: Entry store

    Returns:
        List of fund entries
    """
    entries = store.list_funds()
    if block:
        entries = filter_scope(entries, block)
    return [FundEntryResponse(**entry.to_dict()) for entry in entries]


@router.post("", response_model=FundEntryResponse)
async def create_fund_entry(
    input_data: FundEntryCreateInput,
    store: EntryStore = Depends(get_store),
) -> FundEntryResponse:
    """Create a fund entry.

    Args:
        input_data: Fund entry input data
        store: Entry store

    Returns:
        Created fund entry with its identifier
    """
    entry = ensure_valid_fund_entry(FundEntry(**input_data.model_dump()))
    row = store.insert(FUNDS, entry.to_row())
    return FundEntryResponse(**FundEntry.from_row(row).to_dict())


@router.put("/{entry_id}", response_model=FundEntryResponse)
async def update_fund_entry(
    entry_id: str,
    patch: FundEntryPatchInput,
    store: EntryStore = Depends(get_store),
) -> FundEntryResponse:
    """Replace some or all fields of a fund entry.

    Args:
        entry_id: Fund entry ID
        patch: Fields to replace
        store: Entry store

    Returns:
        Updated fund entry
    """
    existing = FundEntry.from_row(store.get(FUNDS, entry_id))
    changes = patch.model_dump(exclude_unset=True)
    merged = merge_fund_patch(existing, changes)

    row = store.update(FUNDS, entry_id, merged.to_row(fields=changes))
    return FundEntryResponse(**FundEntry.from_row(row).to_dict())


@router.delete("/{entry_id}")
async def delete_fund_entry(
    entry_id: str,
    store: EntryStore = Depends(get_store),
) -> dict:
    """Delete a fund entry permanently.

    Args:
        entry_id: Fund entry ID
        store: Entry store

    Returns:
        Success message
    """
    store.delete(FUNDS, entry_id)
    return {"message": "Fund entry deleted", "id": entry_id}
