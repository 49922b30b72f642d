"""Transaction repository protocol."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Protocol

from ...models.transaction import Transaction, TransactionType


@dataclass(frozen=True)
class TransactionFilter:
    """Optional bounds for a transaction listing; ``end`` is inclusive."""

    start: Optional[datetime] = None
    end: Optional[datetime] = None
    txn_type: Optional[TransactionType] = None


class TransactionRepository(Protocol):
    """Read/write access to a user's transactions."""

    def get_by_id(self, transaction_id: int, *, user_id: int) -> Optional[Transaction]:
        """Retrieve a transaction by ID."""
        ...

    def list(self, filters: Optional[TransactionFilter] = None, *, user_id: int) -> list[Transaction]:
        """List transactions matching ``filters`` with timezone-aware timestamps."""
        ...

    def create(self, transaction: Transaction, *, user_id: int) -> Transaction:
        """Create a new transaction."""
        ...

    def update(self, transaction: Transaction, *, user_id: int) -> Transaction:
        """Update an existing transaction."""
        ...

    def delete(self, transaction_id: int, *, user_id: int) -> None:
        """Delete a transaction by ID."""
        ...
