"""Fold transaction streams into chart series and summaries.

Transactions whose bucket is not on the requested axis are dropped without
complaint: that is how a series is restricted to a window. If the axis and
the window the caller fetched disagree, totals come out low rather than
raising, so build both from the same range.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date, datetime, tzinfo
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional, Protocol, Sequence

from ..clock import month_bounds
from ..models.transaction import TransactionType
from .periods import BucketKey, Granularity, build_axis, key_for

ZERO = Decimal(0)
_PERCENT_QUANTUM = Decimal("0.01")


class LedgerEntry(Protocol):
    """Read-only view of a transaction as the engine consumes it."""

    txn_type: str
    category: str
    amount: Decimal
    occurred_at: datetime


def _amount(entry: LedgerEntry) -> Decimal:
    raw = entry.amount
    value = Decimal(str(raw)) if isinstance(raw, float) else Decimal(raw)
    if value <= 0:
        raise ValueError(f"transaction amounts must be positive, got {value}")
    return value


def _kind(entry: LedgerEntry) -> TransactionType:
    return TransactionType(entry.txn_type)


@dataclass(frozen=True)
class SeriesPoint:
    key: BucketKey
    label: str
    income: Decimal
    expense: Decimal


@dataclass(frozen=True)
class Series:
    """Income and expense per bucket, gap-filled and oldest first."""

    granularity: Granularity
    buckets: tuple[BucketKey, ...]
    income_by_bucket: dict[BucketKey, Decimal] = field(default_factory=dict)
    expense_by_bucket: dict[BucketKey, Decimal] = field(default_factory=dict)

    @classmethod
    def empty(cls, granularity: Granularity, axis: Sequence[BucketKey]) -> "Series":
        buckets = tuple(axis)
        return cls(
            granularity=Granularity(granularity),
            buckets=buckets,
            income_by_bucket={key: ZERO for key in buckets},
            expense_by_bucket={key: ZERO for key in buckets},
        )

    @property
    def labels(self) -> list[str]:
        return [key.label for key in self.buckets]

    @property
    def total_income(self) -> Decimal:
        return sum(self.income_by_bucket.values(), ZERO)

    @property
    def total_expenses(self) -> Decimal:
        return sum(self.expense_by_bucket.values(), ZERO)

    @property
    def net(self) -> Decimal:
        return self.total_income - self.total_expenses

    def points(self) -> list[SeriesPoint]:
        return [
            SeriesPoint(
                key=key,
                label=key.label,
                income=self.income_by_bucket[key],
                expense=self.expense_by_bucket[key],
            )
            for key in self.buckets
        ]

    def merge(self, other: "Series") -> "Series":
        """Add two series built over the same axis, e.g. from split inputs."""

        if other.granularity is not self.granularity or other.buckets != self.buckets:
            raise ValueError("can only merge series built over the same axis")
        return Series(
            granularity=self.granularity,
            buckets=self.buckets,
            income_by_bucket={
                key: self.income_by_bucket[key] + other.income_by_bucket[key] for key in self.buckets
            },
            expense_by_bucket={
                key: self.expense_by_bucket[key] + other.expense_by_bucket[key] for key in self.buckets
            },
        )

    def to_chart_payload(self) -> dict[str, list]:
        """Parallel lists for a line chart, one entry per bucket."""

        return {
            "dates": [key.iso for key in self.buckets],
            "labels": self.labels,
            "income": [self.income_by_bucket[key] for key in self.buckets],
            "expense": [self.expense_by_bucket[key] for key in self.buckets],
        }


@dataclass(frozen=True)
class Totals:
    total_income: Decimal
    total_expenses: Decimal

    @property
    def net(self) -> Decimal:
        return self.total_income - self.total_expenses


@dataclass(frozen=True)
class CategorySummary:
    category: str
    total_amount: Decimal
    count: int
    percentage_of_total: Decimal


def aggregate(
    transactions: Iterable[LedgerEntry],
    axis: Sequence[BucketKey],
    granularity: Granularity,
    tz: tzinfo,
) -> Series:
    """Sum income and expenses onto ``axis``.

    Every axis bucket appears in the result, zero when nothing landed there.
    Transactions outside the axis are skipped. An empty axis gives an empty
    series.
    """

    granularity = Granularity(granularity)
    if any(key.granularity is not granularity for key in axis):
        raise ValueError(f"axis contains keys that are not {granularity.value}")

    series = Series.empty(granularity, axis)
    income = series.income_by_bucket
    expense = series.expense_by_bucket
    for entry in transactions:
        key = key_for(entry.occurred_at, granularity, tz)
        if key not in income:
            continue
        if _kind(entry) is TransactionType.INCOME:
            income[key] += _amount(entry)
        else:
            expense[key] += _amount(entry)
    return series


def summarize(transactions: Iterable[LedgerEntry]) -> Totals:
    """Straight income and expense totals, regardless of dates."""

    total_income = ZERO
    total_expenses = ZERO
    for entry in transactions:
        if _kind(entry) is TransactionType.INCOME:
            total_income += _amount(entry)
        else:
            total_expenses += _amount(entry)
    return Totals(total_income=total_income, total_expenses=total_expenses)


def category_breakdown(
    transactions: Iterable[LedgerEntry],
    *,
    txn_type: Optional[TransactionType | str] = None,
) -> list[CategorySummary]:
    """Group amounts by category, largest first, ties by name.

    ``txn_type`` narrows the grouping to income or expenses; by default every
    transaction is grouped.
    """

    wanted = TransactionType(txn_type) if txn_type is not None else None
    totals: dict[str, Decimal] = defaultdict(lambda: ZERO)
    counts: dict[str, int] = defaultdict(int)
    for entry in transactions:
        if wanted is not None and _kind(entry) is not wanted:
            continue
        totals[entry.category] += _amount(entry)
        counts[entry.category] += 1

    grand_total = sum(totals.values(), ZERO)
    ordered = sorted(totals.items(), key=lambda item: (-item[1], item[0]))
    return [
        CategorySummary(
            category=category,
            total_amount=amount,
            count=counts[category],
            percentage_of_total=(
                (amount / grand_total * 100).quantize(_PERCENT_QUANTUM, rounding=ROUND_HALF_UP)
                if grand_total
                else ZERO
            ),
        )
        for category, amount in ordered
    ]


def spent_on(transactions: Iterable[LedgerEntry], day: date, tz: tzinfo) -> Decimal:
    """Expenses that fall on calendar ``day`` in ``tz``."""

    axis = (BucketKey.of(day, Granularity.DAILY),)
    return aggregate(transactions, axis, Granularity.DAILY, tz).total_expenses


def spent_month_to_date(
    transactions: Iterable[LedgerEntry],
    year: int,
    month: int,
    through_day: int,
    tz: tzinfo,
) -> Decimal:
    """Expenses from the 1st of the month through ``through_day`` inclusive."""

    first, _ = month_bounds(year, month)
    axis = build_axis(Granularity.DAILY, first, date(year, month, through_day), tz)
    return aggregate(transactions, axis, Granularity.DAILY, tz).total_expenses


__all__ = [
    "CategorySummary",
    "LedgerEntry",
    "Series",
    "SeriesPoint",
    "Totals",
    "aggregate",
    "category_breakdown",
    "spent_month_to_date",
    "spent_on",
    "summarize",
]
