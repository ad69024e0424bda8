"""
Ledger Entries Module

Fund collection and expense records as held in memory for one request.
"""

from dataclasses import dataclass, field
import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Iterable

# Report row order and the allowed values for the block field.
BLOCKS: tuple[str, ...] = ("A", "B", "C", "D", "E", "F", "G", "H", "I", "J", "Shop", "Other")

SHOP_BLOCK = "Shop"
OTHER_BLOCK = "Other"

# Blocks whose unit label always carries the block name.
PREFIXED_BLOCKS = (SHOP_BLOCK, OTHER_BLOCK)

# Store column limits
NAME_MAX_LENGTH = 200
UNIT_MAX_LENGTH = 50
AMOUNT_MAX_DIGITS = 12
AMOUNT_DECIMAL_PLACES = 2

FUNDS = "funds"
EXPENSES = "expenses"


class FundStatus(str, Enum):
    """Payment status of a fund entry."""
    PAID = "Paid"
    UNPAID = "Unpaid"


def to_decimal(value: Any) -> Decimal:
    """Convert a stored numeric value to Decimal without float noise."""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def to_date(value: Any) -> datetime.date:
    """Convert a stored date (date, datetime or ISO string) to a date."""
    if isinstance(value, datetime.datetime):
        return value.date()
    if isinstance(value, datetime.date):
        return value
    return datetime.date.fromisoformat(str(value)[:10])


@dataclass
class FundEntry:
    """Single fund collection record."""

    name: str
    block: str
    amount: Decimal
    unit: str = ""
    status: FundStatus = FundStatus.UNPAID
    comment: str | None = None
    id: str | None = None

    @property
    def is_paid(self) -> bool:
        return self.status == FundStatus.PAID

    @classmethod
    def from_row(cls, row: dict) -> "FundEntry":
        return cls(
            id=row.get("id"),
            name=row["name"],
            block=row["block"],
            unit=row.get("unit") or "",
            amount=to_decimal(row["amount"]),
            status=FundStatus(row.get("status") or FundStatus.UNPAID.value),
            comment=row.get("comment"),
        )

    def to_row(self, fields: Iterable[str] | None = None) -> dict:
        """Column values for the store (without the identifier).

        Args:
            fields: Only include these entry fields (all if None)
        """
        row = {
            "name": self.name,
            "block": self.block,
            "unit": self.unit,
            "amount": self.amount,
            "status": self.status.value,
            "comment": self.comment,
        }
        if fields is None:
            return row
        return {column: value for column, value in row.items() if column in fields}

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "block": self.block,
            "unit": self.unit,
            "amount": float(self.amount),
            "status": self.status.value,
            "comment": self.comment,
        }


@dataclass
class ExpenseEntry:
    """Single expense record."""

    details: str
    amount: Decimal
    date: datetime.date = field(default_factory=datetime.date.today)
    id: str | None = None

    @classmethod
    def from_row(cls, row: dict) -> "ExpenseEntry":
        return cls(
            id=row.get("id"),
            details=row["details"],
            amount=to_decimal(row["amount"]),
            date=to_date(row["expense_date"]),
        )

    # Entry field -> store column
    COLUMNS = {
        "details": "details",
        "amount": "amount",
        "date": "expense_date",
    }

    def to_row(self, fields: Iterable[str] | None = None) -> dict:
        """Column values for the store (without the identifier).

        Args:
            fields: Only include these entry fields (all if None)
        """
        selected = self.COLUMNS if fields is None else {
            name: column for name, column in self.COLUMNS.items() if name in fields
        }
        return {column: getattr(self, name) for name, column in selected.items()}

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "details": self.details,
            "amount": float(self.amount),
            "date": self.date.isoformat(),
        }
