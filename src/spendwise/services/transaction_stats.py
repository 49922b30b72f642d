"""Income/expense statistics for the analytics views."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, tzinfo
from decimal import Decimal
from typing import Any, Mapping, Optional

from ..clock import ClockSource, end_of_day, start_of_day, today
from ..domain.repositories.transaction import TransactionFilter, TransactionRepository
from ..logging_config import get_logger
from .analytics import CategorySummary, Series, aggregate, category_breakdown
from .periods import DEFAULT_MAX_BUCKETS, RangePolicy, build_axis, resolve_range

logger = get_logger(__name__)


@dataclass(frozen=True)
class TransactionStats:
    """Totals and a gap-filled series for one analytics view."""

    period: str
    start: date
    end: date
    series: Series
    categories: list[CategorySummary]

    @property
    def total_income(self) -> Decimal:
        return self.series.total_income

    @property
    def total_expenses(self) -> Decimal:
        return self.series.total_expenses

    def to_chart_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "period": self.period,
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "total_income": self.total_income,
            "total_expenses": self.total_expenses,
        }
        payload.update(self.series.to_chart_payload())
        return payload


def fetch_transaction_stats(
    repository: TransactionRepository,
    period: str,
    *,
    user_id: int,
    clock: ClockSource,
    tz: tzinfo,
    policies: Optional[Mapping[str, RangePolicy]] = None,
    max_buckets: int = DEFAULT_MAX_BUCKETS,
) -> TransactionStats:
    """Build the ``daily``/``monthly``/``yearly`` view ending today.

    The store is queried for exactly the window the axis covers, so nothing
    fetched is dropped as out of range.
    """

    window = resolve_range(period, today(clock, tz), policies)
    axis = build_axis(window.granularity, window.start, window.end, tz, max_buckets=max_buckets)
    transactions = repository.list(
        TransactionFilter(start=start_of_day(window.start, tz), end=end_of_day(window.end, tz)),
        user_id=user_id,
    )
    series = aggregate(transactions, axis, window.granularity, tz)
    logger.info(
        "Transaction stats computed",
        extra={
            "period": str(period),
            "buckets": len(axis),
            "transactions": len(transactions),
        },
    )
    return TransactionStats(
        period=str(getattr(period, "value", period)),
        start=window.start,
        end=window.end,
        series=series,
        categories=category_breakdown(transactions),
    )


__all__ = ["TransactionStats", "fetch_transaction_stats"]
