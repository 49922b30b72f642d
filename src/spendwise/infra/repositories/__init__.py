"""SQLModel repository implementations."""

from .savings_plan import SQLModelSavingsPlanRepository
from .service_post import SQLModelServicePostRepository
from .transaction import SQLModelTransactionRepository

__all__ = [
    "SQLModelSavingsPlanRepository",
    "SQLModelServicePostRepository",
    "SQLModelTransactionRepository",
]
