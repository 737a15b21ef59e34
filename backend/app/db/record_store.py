"""
Record Store.

Owner-scoped create/read/update/delete over one entity table. Each call
opens its own session and commits on its own, so two calls are never
atomic together: a failure between them leaves the first one committed.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Generic, List, Optional, Type, TypeVar

from sqlalchemy import select, delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import async_sessionmaker

from backend.app.core.exceptions import StoreError
from backend.app.models.balance_adjustment import BalanceAdjustment
from backend.app.models.client import Client
from backend.app.models.payment_transaction import PaymentTransaction

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT")


class RecordStore(Generic[ModelT]):
    """
    Per-entity store bound to one owner.

    Every query filters on ``user_id``; rows of other owners are invisible,
    so updating or deleting them is the same no-op as a missing id.
    """

    def __init__(
        self,
        model: Type[ModelT],
        session_factory: async_sessionmaker,
        owner_id: int,
        label: str,
        default_order: str = "created_at",
    ):
        self.model = model
        self.session_factory = session_factory
        self.owner_id = owner_id
        self.label = label
        self.default_order = default_order

    def _column(self, name: str):
        column = getattr(self.model, name, None)
        if column is None or name.startswith("_"):
            raise ValueError(f"Unknown column '{name}' for {self.label}")
        return column

    def _fail(self, action: str, exc: Exception) -> StoreError:
        logger.error("Failed to %s %s for user %s: %s", action, self.label, self.owner_id, exc)
        return StoreError(
            message=f"Failed to {action} {self.label}",
            details={"entity": self.label, "action": action}
        )

    async def list(self, order_by: Optional[str] = None, ascending: bool = False) -> List[ModelT]:
        """List the owner's rows, newest first unless told otherwise."""
        column = self._column(order_by or self.default_order)
        ordering = column.asc() if ascending else column.desc()
        # Tie-break on id so rows written within the same clock tick keep insertion order
        tiebreak = self.model.id.asc() if ascending else self.model.id.desc()

        query = select(self.model).where(
            self.model.user_id == self.owner_id
        ).order_by(ordering, tiebreak)

        try:
            async with self.session_factory() as session:
                result = await session.execute(query)
                return list(result.scalars().all())
        except SQLAlchemyError as e:
            raise self._fail("load", e) from e

    async def get(self, record_id: int) -> Optional[ModelT]:
        """Fetch one of the owner's rows, or None."""
        query = select(self.model).where(
            self.model.id == record_id,
            self.model.user_id == self.owner_id
        )
        try:
            async with self.session_factory() as session:
                result = await session.execute(query)
                return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            raise self._fail("load", e) from e

    async def insert(self, row: Dict[str, Any]) -> ModelT:
        """Insert a row owned by the bound user and return it with store-assigned fields."""
        record = self.model(**{**row, "user_id": self.owner_id})
        try:
            async with self.session_factory() as session:
                session.add(record)
                await session.commit()
                await session.refresh(record)
                return record
        except SQLAlchemyError as e:
            raise self._fail("add", e) from e

    async def update(self, record_id: int, partial: Dict[str, Any]) -> Optional[ModelT]:
        """
        Apply a partial update.

        Returns the refreshed row, or None when no row of this owner has
        that id (treated as benign by callers).
        """
        query = select(self.model).where(
            self.model.id == record_id,
            self.model.user_id == self.owner_id
        )
        try:
            async with self.session_factory() as session:
                record = (await session.execute(query)).scalar_one_or_none()
                if record is None:
                    return None
                for field, value in partial.items():
                    setattr(record, field, value)
                await session.commit()
                await session.refresh(record)
                return record
        except SQLAlchemyError as e:
            raise self._fail("update", e) from e

    async def delete(self, record_id: int) -> None:
        """Delete one of the owner's rows; a missing id is not an error."""
        statement = delete(self.model).where(
            self.model.id == record_id,
            self.model.user_id == self.owner_id
        )
        try:
            async with self.session_factory() as session:
                await session.execute(statement)
                await session.commit()
        except SQLAlchemyError as e:
            raise self._fail("delete", e) from e


@dataclass
class LedgerStores:
    """The three owner-scoped stores the ledger works against."""
    clients: RecordStore
    adjustments: RecordStore
    transactions: RecordStore

    @property
    def owner_id(self) -> int:
        return self.clients.owner_id


def build_ledger_stores(session_factory: async_sessionmaker, owner_id: int) -> LedgerStores:
    """Bind the client, adjustment and transaction stores to one owner."""
    return LedgerStores(
        clients=RecordStore(Client, session_factory, owner_id, "client"),
        adjustments=RecordStore(BalanceAdjustment, session_factory, owner_id, "adjustment"),
        transactions=RecordStore(
            PaymentTransaction, session_factory, owner_id, "transaction",
            default_order="payment_date"
        ),
    )
