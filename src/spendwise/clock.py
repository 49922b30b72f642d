"""Clock sources and calendar facts.

Nothing in the engine reads the wall clock directly; callers hand in a
``ClockSource`` so date math stays a pure function of explicit inputs.
"""

from __future__ import annotations

from calendar import monthrange
from datetime import date, datetime, timedelta, timezone, tzinfo
from typing import Protocol


class ClockSource(Protocol):
    """Supplies the current instant."""

    def now(self) -> datetime:  # pragma: no cover - interface
        """Return the current time as a timezone-aware datetime."""
        ...


class SystemClock:
    """Clock backed by the host's wall clock."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class FixedClock:
    """Clock frozen at a given instant, movable by hand in tests."""

    def __init__(self, instant: datetime) -> None:
        self._instant = as_aware(instant)

    def now(self) -> datetime:
        return self._instant

    def advance(self, **delta: float) -> None:
        """Move the clock forward by ``timedelta(**delta)``."""

        self._instant = self._instant + timedelta(**delta)


def as_aware(value: datetime, assume: tzinfo = timezone.utc) -> datetime:
    """Attach ``assume`` to naive datetimes; aware values pass through."""

    if value.tzinfo is None:
        return value.replace(tzinfo=assume)
    return value


def local_date(value: date | datetime, tz: tzinfo) -> date:
    """Calendar date of ``value`` as seen from ``tz``.

    Naive datetimes are taken to be UTC, which is how the stores persist them.
    Plain dates are already calendar dates and are returned unchanged.
    """

    if isinstance(value, datetime):
        return as_aware(value).astimezone(tz).date()
    return value


def today(clock: ClockSource, tz: tzinfo) -> date:
    """Calendar date of ``clock.now()`` in ``tz``."""

    return local_date(clock.now(), tz)


def days_in_month(year: int, month: int) -> int:
    """Number of days in the month, leap years included."""

    return monthrange(year, month)[1]


def day_of_month(value: date | datetime, tz: tzinfo) -> int:
    """1-based index of ``value``'s day within its month in ``tz``."""

    return local_date(value, tz).day


def month_bounds(year: int, month: int) -> tuple[date, date]:
    """First and last calendar day of the month."""

    return date(year, month, 1), date(year, month, days_in_month(year, month))


def add_months(value: date, months: int) -> date:
    """Shift to the first day of the month ``months`` away from ``value``."""

    index = value.year * 12 + (value.month - 1) + months
    return date(index // 12, index % 12 + 1, 1)


def start_of_day(day: date, tz: tzinfo) -> datetime:
    """First instant of ``day`` in ``tz``."""

    return datetime(day.year, day.month, day.day, tzinfo=tz)


def end_of_day(day: date, tz: tzinfo) -> datetime:
    """Last representable instant of ``day`` in ``tz``."""

    return start_of_day(day + timedelta(days=1), tz) - timedelta(microseconds=1)


__all__ = [
    "ClockSource",
    "FixedClock",
    "SystemClock",
    "add_months",
    "as_aware",
    "day_of_month",
    "days_in_month",
    "end_of_day",
    "local_date",
    "month_bounds",
    "start_of_day",
    "today",
]
