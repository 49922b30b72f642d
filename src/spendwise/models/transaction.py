"""SQLModel definitions for ledger transactions."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import ClassVar, Optional

from sqlmodel import Field, SQLModel

from .money import MONEY_DIGITS, STORED_PLACES


class TransactionType(str, Enum):
    """Direction of a transaction; amounts themselves are always positive."""

    INCOME = "income"
    EXPENSE = "expense"


class Transaction(SQLModel, table=True):
    """A single dated, categorised income or expense entry."""

    __tablename__: ClassVar[str] = "transaction"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    txn_type: str = Field(default=TransactionType.EXPENSE.value, nullable=False, index=True, max_length=16)
    category: str = Field(default="Uncategorized", nullable=False, index=True, max_length=64)
    amount: Decimal = Field(nullable=False, max_digits=MONEY_DIGITS, decimal_places=STORED_PLACES, description="Always positive")
    occurred_at: datetime = Field(nullable=False, index=True, description="Stored as UTC")
    description: str = Field(default="", max_length=255)

    @property
    def is_income(self) -> bool:
        return TransactionType(self.txn_type) is TransactionType.INCOME

    @property
    def is_expense(self) -> bool:
        return TransactionType(self.txn_type) is TransactionType.EXPENSE
