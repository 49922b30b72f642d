"""SQLModel implementation of Transaction repository."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable, Optional

from sqlmodel import Session, select

from ...clock import as_aware
from ...domain.repositories.transaction import TransactionFilter
from ...models.transaction import Transaction, TransactionType


def to_storage(value: datetime) -> datetime:
    """Normalise to an aware UTC instant; naive input is read as UTC."""

    return as_aware(value).astimezone(timezone.utc)


def _restore(transaction: Transaction) -> Transaction:
    # SQLite DATETIME columns drop the offset; values read back are UTC.
    transaction.occurred_at = as_aware(transaction.occurred_at)
    return transaction


class SQLModelTransactionRepository:
    """SQLModel-based transaction repository implementation."""

    def __init__(self, session_factory: Callable[[], Session]):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def get_by_id(self, transaction_id: int, *, user_id: int) -> Optional[Transaction]:
        """Retrieve a transaction by ID."""
        with self.session_factory() as session:
            obj = session.exec(
                select(Transaction)
                .where(Transaction.id == transaction_id)
                .where(Transaction.user_id == user_id)
            ).first()
            if obj is None:
                return None
            session.expunge(obj)
            return _restore(obj)

    def list(self, filters: Optional[TransactionFilter] = None, *, user_id: int) -> list[Transaction]:
        """List transactions oldest first; ``filters.end`` is inclusive."""
        filters = filters or TransactionFilter()
        with self.session_factory() as session:
            statement = select(Transaction).where(Transaction.user_id == user_id)
            if filters.start is not None:
                statement = statement.where(Transaction.occurred_at >= to_storage(filters.start))
            if filters.end is not None:
                statement = statement.where(Transaction.occurred_at <= to_storage(filters.end))
            if filters.txn_type is not None:
                statement = statement.where(
                    Transaction.txn_type == TransactionType(filters.txn_type).value
                )
            statement = statement.order_by(Transaction.occurred_at, Transaction.id)  # type: ignore
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return [_restore(row) for row in rows]

    def create(self, transaction: Transaction, *, user_id: int) -> Transaction:
        """Create a new transaction."""
        return self._save(transaction, user_id=user_id)

    def update(self, transaction: Transaction, *, user_id: int) -> Transaction:
        """Update an existing transaction."""
        return self._save(transaction, user_id=user_id)

    def _save(self, transaction: Transaction, *, user_id: int) -> Transaction:
        with self.session_factory() as session:
            transaction.user_id = user_id
            transaction.txn_type = TransactionType(transaction.txn_type).value
            transaction.occurred_at = to_storage(transaction.occurred_at)
            session.add(transaction)
            session.commit()
            session.refresh(transaction)
            session.expunge(transaction)
            return _restore(transaction)

    def delete(self, transaction_id: int, *, user_id: int) -> None:
        """Delete a transaction by ID."""
        with self.session_factory() as session:
            transaction = session.exec(
                select(Transaction)
                .where(Transaction.id == transaction_id)
                .where(Transaction.user_id == user_id)
            ).first()
            if transaction:
                session.delete(transaction)
                session.commit()
