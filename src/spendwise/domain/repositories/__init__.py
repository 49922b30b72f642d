"""Repository protocol definitions for domain layer."""

from .savings_plan import SavingsPlanRepository
from .service_post import ServicePostRepository
from .transaction import TransactionFilter, TransactionRepository

__all__ = [
    "SavingsPlanRepository",
    "ServicePostRepository",
    "TransactionFilter",
    "TransactionRepository",
]
