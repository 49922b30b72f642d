"""SQLModel table exports."""

from .savings_plan import SavingsPlan
from .service_post import ServicePost
from .transaction import Transaction, TransactionType
from .user import User

__all__ = [
    "SavingsPlan",
    "ServicePost",
    "Transaction",
    "TransactionType",
    "User",
]
