"""Budgeting domain services.

Turns a monthly declaration (income, fixed costs, savings percentage) into a
per-day spending allowance and reports consumption against it. All money is
``Decimal``; allowances are floored to the currency's minor unit and the
floor remainder is added to the last day so the month's allowances sum to the
spend budget exactly.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_FLOOR, ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Union

from ..errors import InvalidDeclaration

CENT = Decimal("0.01")
HUNDRED = Decimal(100)

Number = Union[Decimal, int, str]


def _to_decimal(value: Number | float) -> Decimal:
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


@dataclass(frozen=True, slots=True)
class BudgetDeclaration:
    """A user's stated budget for one calendar month.

    Immutable: a change is modelled as a brand new declaration that replaces
    the old one, never as a patch.
    """

    year: int
    month: int
    fixed_income: Decimal
    fixed_costs: Decimal
    savings_percentage: Decimal

    def __post_init__(self) -> None:
        if not 1 <= self.month <= 12:
            raise ValueError(f"month must be between 1 and 12, got {self.month}")
        for name in ("fixed_income", "fixed_costs", "savings_percentage"):
            object.__setattr__(self, name, _to_decimal(getattr(self, name)))

    @property
    def disposable_income(self) -> Decimal:
        return self.fixed_income - self.fixed_costs


class ProgressMode(str, Enum):
    """What ``spent_so_far`` is measured against."""

    TODAY = "today"
    MONTH_TO_DATE = "month_to_date"


@dataclass(frozen=True, slots=True)
class BudgetState:
    """Derived view of a declaration at a given day of the month."""

    declaration: BudgetDeclaration
    days_in_month: int
    day_of_month: int
    daily_limit: Decimal
    spent_so_far: Decimal
    progress_percent: Decimal
    mode: ProgressMode
    allowance: Decimal

    @property
    def remaining(self) -> Decimal:
        """What is left of the allowance; negative once overspent."""

        return self.allowance - self.spent_so_far

    @property
    def overspent(self) -> bool:
        return self.spent_so_far > self.allowance


def validate_declaration(declaration: BudgetDeclaration) -> None:
    """Raise ``InvalidDeclaration`` naming the first violated rule."""

    if declaration.fixed_income < 0 or declaration.fixed_costs < 0:
        raise InvalidDeclaration("negative_amount", "income and fixed costs must not be negative")
    if not 0 <= declaration.savings_percentage <= 100:
        raise InvalidDeclaration(
            "percentage_out_of_bounds", "savings percentage must be between 0 and 100"
        )
    if declaration.fixed_costs >= declaration.fixed_income:
        raise InvalidDeclaration("costs_exceed_income", "fixed costs must be less than income")


def _check_days(days_in_month: int) -> None:
    if not 1 <= days_in_month <= 31:
        raise ValueError(f"days_in_month must be between 1 and 31, got {days_in_month}")


def monthly_spend_budget(declaration: BudgetDeclaration, *, quantum: Decimal = CENT) -> Decimal:
    """Savings-adjusted money available for day-to-day spending this month."""

    validate_declaration(declaration)
    keep = 1 - declaration.savings_percentage / HUNDRED
    return (declaration.disposable_income * keep).quantize(quantum, rounding=ROUND_FLOOR)


def savings_target(declaration: BudgetDeclaration, *, quantum: Decimal = CENT) -> Decimal:
    """Amount set aside this month; complements the spend budget exactly."""

    spend = monthly_spend_budget(declaration, quantum=quantum)
    return (declaration.disposable_income - spend).quantize(quantum)


def compute_daily_limit(
    declaration: BudgetDeclaration,
    days_in_month: int,
    *,
    quantum: Decimal = CENT,
) -> Decimal:
    """Return the floored per-day allowance for an ordinary day of the month.

    Raises:
        InvalidDeclaration: the declaration breaks a budget rule or leaves
            nothing to spend per day.
    """

    _check_days(days_in_month)
    budget = monthly_spend_budget(declaration, quantum=quantum)
    daily_limit = (budget / days_in_month).quantize(quantum, rounding=ROUND_FLOOR)
    if daily_limit <= 0:
        raise InvalidDeclaration(
            "non_positive_daily_limit", "declaration leaves no money to spend per day"
        )
    return daily_limit


def daily_allowances(
    declaration: BudgetDeclaration,
    days_in_month: int,
    *,
    quantum: Decimal = CENT,
) -> list[Decimal]:
    """Per-day allowances for the whole month, remainder on the last day."""

    daily_limit = compute_daily_limit(declaration, days_in_month, quantum=quantum)
    budget = monthly_spend_budget(declaration, quantum=quantum)
    remainder = budget - daily_limit * days_in_month
    allowances = [daily_limit] * days_in_month
    allowances[-1] = daily_limit + remainder
    return allowances


def allowance_for_day(
    declaration: BudgetDeclaration,
    days_in_month: int,
    day_of_month: int,
    *,
    quantum: Decimal = CENT,
) -> Decimal:
    _check_day(day_of_month, days_in_month)
    return daily_allowances(declaration, days_in_month, quantum=quantum)[day_of_month - 1]


def cumulative_allowance(
    declaration: BudgetDeclaration,
    days_in_month: int,
    through_day: int,
    *,
    quantum: Decimal = CENT,
) -> Decimal:
    """Allowance accrued from day 1 through ``through_day`` inclusive."""

    _check_day(through_day, days_in_month)
    return sum(daily_allowances(declaration, days_in_month, quantum=quantum)[:through_day], Decimal(0))


def _check_day(day_of_month: int, days_in_month: int) -> None:
    _check_days(days_in_month)
    if not 1 <= day_of_month <= days_in_month:
        raise ValueError(f"day_of_month must be between 1 and {days_in_month}, got {day_of_month}")


def compute_state(
    declaration: BudgetDeclaration,
    days_in_month: int,
    day_of_month: int,
    spent_so_far: Number | float,
    *,
    mode: ProgressMode = ProgressMode.TODAY,
    quantum: Decimal = CENT,
) -> BudgetState:
    """Measure spending against the declaration.

    ``ProgressMode.TODAY`` compares ``spent_so_far`` with the allowance of
    ``day_of_month`` and caps progress at 100. ``ProgressMode.MONTH_TO_DATE``
    compares it with the allowance accrued since day 1 and is not capped, so
    overspending shows up as more than 100.
    """

    mode = ProgressMode(mode)
    spent = _to_decimal(spent_so_far)
    if spent < 0:
        raise ValueError("spent_so_far must not be negative")

    daily_limit = compute_daily_limit(declaration, days_in_month, quantum=quantum)
    if mode is ProgressMode.TODAY:
        allowance = allowance_for_day(declaration, days_in_month, day_of_month, quantum=quantum)
        progress = min(HUNDRED, spent / allowance * HUNDRED)
    else:
        allowance = cumulative_allowance(declaration, days_in_month, day_of_month, quantum=quantum)
        progress = spent / allowance * HUNDRED

    return BudgetState(
        declaration=declaration,
        days_in_month=days_in_month,
        day_of_month=day_of_month,
        daily_limit=daily_limit,
        spent_so_far=spent,
        progress_percent=progress.quantize(CENT, rounding=ROUND_HALF_UP),
        mode=mode,
        allowance=allowance,
    )


__all__ = [
    "BudgetDeclaration",
    "BudgetState",
    "ProgressMode",
    "allowance_for_day",
    "compute_daily_limit",
    "compute_state",
    "cumulative_allowance",
    "daily_allowances",
    "monthly_spend_budget",
    "savings_target",
    "validate_declaration",
]
