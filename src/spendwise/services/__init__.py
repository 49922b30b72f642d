"""Service module exports."""

from . import (
    analytics,
    budgeting,
    periods,
    ratings,
    savings_plans,
    service_posts,
    transaction_stats,
)

__all__ = [
    "analytics",
    "budgeting",
    "periods",
    "ratings",
    "savings_plans",
    "service_posts",
    "transaction_stats",
]
