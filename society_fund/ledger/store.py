"""
Entry Store Module

CRUD access to the fund and expense collections through SQLAlchemy.
The store is created once per process and injected into request handlers.
"""

import logging
import uuid
from contextlib import contextmanager
from datetime import datetime
from typing import Generator

from sqlalchemy import (
    Column,
    Date,
    DateTime,
    Index,
    MetaData,
    Numeric,
    String,
    Table,
    Text,
    create_engine,
    delete,
    insert,
    select,
    update,
)
from sqlalchemy.engine import Connection, Engine, make_url
from sqlalchemy.exc import ArgumentError, DataError, InterfaceError, NoSuchModuleError, OperationalError

from ..config import get_database_url
from ..errors import NotFoundError, StoreConnectionError, ValidationError
from .entries import (
    AMOUNT_DECIMAL_PLACES,
    AMOUNT_MAX_DIGITS,
    EXPENSES,
    FUNDS,
    NAME_MAX_LENGTH,
    UNIT_MAX_LENGTH,
    ExpenseEntry,
    FundEntry,
)

logger = logging.getLogger(__name__)

metadata = MetaData()

funds_table = Table(
    FUNDS,
    metadata,
    Column("id", String(32), primary_key=True),
    Column("name", String(NAME_MAX_LENGTH), nullable=False),
    Column("block", String(20), nullable=False),
    Column("unit", String(UNIT_MAX_LENGTH), nullable=False, default=""),
    Column("amount", Numeric(AMOUNT_MAX_DIGITS, AMOUNT_DECIMAL_PLACES), nullable=False),
    Column("status", String(10), nullable=False),
    Column("comment", Text, nullable=True),
    Column("created_at", DateTime, nullable=False),
    Index("ix_funds_block_unit", "block", "unit"),
    Index("ix_funds_status", "status"),
)

expenses_table = Table(
    EXPENSES,
    metadata,
    Column("id", String(32), primary_key=True),
    Column("details", Text, nullable=False),
    Column("amount", Numeric(AMOUNT_MAX_DIGITS, AMOUNT_DECIMAL_PLACES), nullable=False),
    Column("expense_date", Date, nullable=False),
    Column("created_at", DateTime, nullable=False),
    Index("ix_expenses_expense_date", "expense_date"),
)

TABLES = {
    FUNDS: funds_table,
    EXPENSES: expenses_table,
}


class EntryStore:
    """Document-style CRUD over the ``funds`` and ``expenses`` tables."""

    def __init__(self, database_url: str | None = None, engine: Engine | None = None):
        """Initialize the store.

        Args:
            database_url: SQLAlchemy URL (read from the environment if None)
            engine: Pre-built engine, mainly for tests
        """
        self.database_url = database_url or get_database_url()
        self.engine = engine or self._create_engine(self.database_url)

    @staticmethod
    def _create_engine(database_url: str) -> Engine:
        try:
            url = make_url(database_url)
            if url.get_backend_name() == "sqlite":
                return create_engine(url, connect_args={"check_same_thread": False})
            return create_engine(
                url,
                pool_pre_ping=True,
                pool_size=5,
                max_overflow=10,
            )
        except (ArgumentError, NoSuchModuleError, ImportError) as exc:
            raise StoreConnectionError(f"Invalid store configuration: {exc}") from exc

    @contextmanager
    def _connect(self, write: bool = False) -> Generator[Connection, None, None]:
        """Open a connection, inside a transaction for writes."""
        try:
            with (self.engine.begin() if write else self.engine.connect()) as conn:
                yield conn
        except (OperationalError, InterfaceError) as exc:
            logger.error(f"Store unavailable: {exc}")
            raise StoreConnectionError("Store is unreachable") from exc
        except DataError as exc:
            logger.warning(f"Store rejected value: {exc.orig}")
            raise ValidationError("Value does not fit the stored field") from exc

    @staticmethod
    def _table(collection: str) -> Table:
        try:
            return TABLES[collection]
        except KeyError:
            raise ValueError(f"Unknown collection: {collection}") from None

    def ensure_schema(self) -> None:
        """Create tables and indexes if they do not exist."""
        with self._connect(write=True) as conn:
            metadata.create_all(conn)
        logger.info("Store schema ready")

    def dispose(self) -> None:
        self.engine.dispose()

    def list_entries(self, collection: str) -> list[dict]:
        """List every record in a collection.

        Funds are ordered by (block, unit); expenses by date, newest first.

        Args:
            collection: Collection name

        Returns:
            List of record dictionaries
        """
        table = self._table(collection)
        if collection == FUNDS:
            order = (table.c.block, table.c.unit)
        else:
            order = (table.c.expense_date.desc(), table.c.created_at.desc())

        with self._connect() as conn:
            result = conn.execute(select(table).order_by(*order))
            return [dict(row._mapping) for row in result]

    def get(self, collection: str, entry_id: str) -> dict:
        """Get a single record.

        Raises:
            NotFoundError: If no record has this identifier
        """
        table = self._table(collection)
        with self._connect() as conn:
            return self._get(conn, table, entry_id)

    @staticmethod
    def _get(conn: Connection, table: Table, entry_id: str) -> dict:
        row = conn.execute(select(table).where(table.c.id == entry_id)).first()
        if row is None:
            raise NotFoundError(f"Entry {entry_id} not found in {table.name}")
        return dict(row._mapping)

    def insert(self, collection: str, fields: dict) -> dict:
        """Insert a record and return it with its new identifier.

        Args:
            collection: Collection name
            fields: Column values

        Returns:
            Inserted record
        """
        table = self._table(collection)
        entry_id = uuid.uuid4().hex
        values = {**fields, "id": entry_id, "created_at": datetime.now()}

        with self._connect(write=True) as conn:
            conn.execute(insert(table).values(**values))
            row = self._get(conn, table, entry_id)

        logger.info(f"Inserted {collection} entry {entry_id}")
        return row

    def update(self, collection: str, entry_id: str, fields: dict) -> dict:
        """Replace the given fields of a record.

        Args:
            collection: Collection name
            entry_id: Record identifier
            fields: Column values to set

        Returns:
            Updated record

        Raises:
            NotFoundError: If no record has this identifier
        """
        table = self._table(collection)
        unknown = set(fields) - set(table.c.keys())
        if unknown or "id" in fields:
            raise ValueError(f"Cannot update fields: {sorted(unknown | ({'id'} & set(fields)))}")

        with self._connect(write=True) as conn:
            if fields:
                result = conn.execute(
                    update(table).where(table.c.id == entry_id).values(**fields)
                )
                if result.rowcount == 0:
                    raise NotFoundError(f"Entry {entry_id} not found in {collection}")
            row = self._get(conn, table, entry_id)

        logger.info(f"Updated {collection} entry {entry_id}: {sorted(fields)}")
        return row

    def delete(self, collection: str, entry_id: str) -> None:
        """Delete a record permanently.

        Raises:
            NotFoundError: If no record has this identifier
        """
        table = self._table(collection)
        with self._connect(write=True) as conn:
            result = conn.execute(delete(table).where(table.c.id == entry_id))
            if result.rowcount == 0:
                raise NotFoundError(f"Entry {entry_id} not found in {collection}")

        logger.info(f"Deleted {collection} entry {entry_id}")

    def list_funds(self) -> list[FundEntry]:
        return [FundEntry.from_row(row) for row in self.list_entries(FUNDS)]

    def list_expenses(self) -> list[ExpenseEntry]:
        return [ExpenseEntry.from_row(row) for row in self.list_entries(EXPENSES)]
