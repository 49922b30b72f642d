"""Calendar bucketing for analytics series.

Every instant is reduced to a calendar date in the configured zone before it
is bucketed, so two instants on the same local day/month/year always share a
``BucketKey`` and DST shifts can neither skip nor duplicate a bucket.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta, tzinfo
from enum import Enum
from typing import Mapping

from ..clock import add_months, as_aware, days_in_month, local_date
from ..errors import InvalidRange

DEFAULT_MAX_BUCKETS = 3660

_MONTH_ABBR = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)


class Granularity(str, Enum):
    """Period size used to bucket transactions."""

    DAILY = "daily"
    MONTHLY = "monthly"
    YEARLY = "yearly"


@dataclass(frozen=True, order=True)
class BucketKey:
    """One day, month or year slot on an analytics axis.

    Keys of the same granularity order chronologically. Monthly keys pin
    ``day`` to 1 and yearly keys pin both ``month`` and ``day`` to 1.
    """

    year: int
    month: int
    day: int
    granularity: Granularity

    def __post_init__(self) -> None:
        # Validates the calendar fields (raises ValueError on e.g. Feb 30).
        date(self.year, self.month, self.day)
        if self.granularity is not Granularity.DAILY and self.day != 1:
            raise ValueError("monthly and yearly keys must have day=1")
        if self.granularity is Granularity.YEARLY and self.month != 1:
            raise ValueError("yearly keys must have month=1")

    @classmethod
    def of(cls, day: date, granularity: Granularity) -> "BucketKey":
        """Key of the period containing calendar date ``day``."""

        granularity = Granularity(granularity)
        if granularity is Granularity.DAILY:
            return cls(day.year, day.month, day.day, granularity)
        if granularity is Granularity.MONTHLY:
            return cls(day.year, day.month, 1, granularity)
        return cls(day.year, 1, 1, granularity)

    @property
    def start(self) -> date:
        return date(self.year, self.month, self.day)

    @property
    def end(self) -> date:
        """Last calendar day covered by this bucket."""

        if self.granularity is Granularity.DAILY:
            return self.start
        if self.granularity is Granularity.MONTHLY:
            return date(self.year, self.month, days_in_month(self.year, self.month))
        return date(self.year, 12, 31)

    def next(self) -> "BucketKey":
        return BucketKey.of(self.end + timedelta(days=1), self.granularity)

    @property
    def label(self) -> str:
        """Short chart label: ``Jan 05``, ``Feb`` or ``2024``."""

        if self.granularity is Granularity.DAILY:
            return f"{_MONTH_ABBR[self.month - 1]} {self.day:02d}"
        if self.granularity is Granularity.MONTHLY:
            return _MONTH_ABBR[self.month - 1]
        return str(self.year)

    @property
    def iso(self) -> str:
        """Sortable text form: ``2024-01-05``, ``2024-01`` or ``2024``."""

        if self.granularity is Granularity.DAILY:
            return self.start.isoformat()
        if self.granularity is Granularity.MONTHLY:
            return f"{self.year:04d}-{self.month:02d}"
        return f"{self.year:04d}"

    def __str__(self) -> str:
        return self.iso


def key_for(instant: date | datetime, granularity: Granularity, tz: tzinfo) -> BucketKey:
    """Return the bucket containing ``instant`` as seen from ``tz``.

    Naive datetimes are read as UTC; plain dates are used as-is.
    """

    return BucketKey.of(local_date(instant, tz), granularity)


def bucket_span(first: BucketKey, last: BucketKey) -> int:
    """Number of buckets from ``first`` to ``last`` inclusive."""

    if first.granularity is Granularity.DAILY:
        return (last.start - first.start).days + 1
    if first.granularity is Granularity.MONTHLY:
        return (last.year - first.year) * 12 + (last.month - first.month) + 1
    return last.year - first.year + 1


def _starts_after(start: date | datetime, end: date | datetime, tz: tzinfo) -> bool:
    if isinstance(start, datetime) and isinstance(end, datetime):
        return as_aware(start) > as_aware(end)
    return local_date(start, tz) > local_date(end, tz)


def build_axis(
    granularity: Granularity,
    start: date | datetime,
    end: date | datetime,
    tz: tzinfo,
    *,
    max_buckets: int = DEFAULT_MAX_BUCKETS,
) -> tuple[BucketKey, ...]:
    """Return every bucket from ``start`` to ``end`` inclusive, oldest first.

    Raises:
        InvalidRange: ``start`` is after ``end`` or the axis would be longer
            than ``max_buckets``.
    """

    granularity = Granularity(granularity)
    if _starts_after(start, end, tz):
        raise InvalidRange("start_after_end", "range start must not be after range end")

    first = key_for(start, granularity, tz)
    last = key_for(end, granularity, tz)
    span = bucket_span(first, last)
    if span > max_buckets:
        raise InvalidRange(
            "range_too_long",
            f"range covers {span} {granularity.value} buckets, more than the allowed {max_buckets}",
        )

    axis = [first]
    while len(axis) < span:
        axis.append(axis[-1].next())
    return tuple(axis)


@dataclass(frozen=True)
class RangePolicy:
    """How far back an analytics view looks and how it buckets.

    ``span`` counts days when ``unit`` is ``"days"`` and calendar months
    (including the current one) when it is ``"months"``.
    """

    span: int
    unit: str
    granularity: Granularity

    def __post_init__(self) -> None:
        if self.span < 1:
            raise ValueError("span must be at least 1")
        if self.unit not in {"days", "months"}:
            raise ValueError(f"unit must be 'days' or 'months', got {self.unit!r}")

    def window(self, today: date) -> tuple[date, date]:
        """Inclusive (start, end) calendar window ending on ``today``."""

        if self.unit == "days":
            return today - timedelta(days=self.span - 1), today
        return add_months(today, -(self.span - 1)), today


DEFAULT_RANGE_POLICIES: Mapping[str, RangePolicy] = {
    "daily": RangePolicy(span=7, unit="days", granularity=Granularity.DAILY),
    "monthly": RangePolicy(span=30, unit="days", granularity=Granularity.DAILY),
    "yearly": RangePolicy(span=12, unit="months", granularity=Granularity.MONTHLY),
}


@dataclass(frozen=True)
class ResolvedRange:
    start: date
    end: date
    granularity: Granularity


def resolve_range(
    period: str,
    today: date,
    policies: Mapping[str, RangePolicy] | None = None,
) -> ResolvedRange:
    """Turn an analytics view name into a concrete window and granularity."""

    table = dict(DEFAULT_RANGE_POLICIES)
    if policies:
        table.update(policies)
    key = period.value if isinstance(period, Enum) else str(period).strip().lower()
    try:
        policy = table[key]
    except KeyError as exc:
        raise ValueError(f"Unknown analytics period: {period!r}") from exc
    start, end = policy.window(today)
    return ResolvedRange(start=start, end=end, granularity=policy.granularity)


__all__ = [
    "BucketKey",
    "DEFAULT_MAX_BUCKETS",
    "DEFAULT_RANGE_POLICIES",
    "Granularity",
    "RangePolicy",
    "ResolvedRange",
    "bucket_span",
    "build_axis",
    "key_for",
    "resolve_range",
]
