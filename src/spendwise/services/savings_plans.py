"""Savings plan workflow: declare, replace, delete and track a monthly plan."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, tzinfo
from decimal import Decimal
from typing import Optional, Union

from ..clock import ClockSource, days_in_month, end_of_day, local_date, month_bounds, start_of_day, today
from ..domain.repositories.savings_plan import SavingsPlanRepository
from ..domain.repositories.transaction import TransactionFilter, TransactionRepository
from ..errors import DuplicatePlan, InvalidDeclaration, PlanNotFound
from ..logging_config import get_logger
from ..models.savings_plan import SavingsPlan
from ..models.transaction import Transaction, TransactionType
from .analytics import Series, aggregate, spent_month_to_date, spent_on
from .budgeting import (
    CENT,
    BudgetDeclaration,
    BudgetState,
    ProgressMode,
    compute_daily_limit,
    compute_state,
    monthly_spend_budget,
    savings_target,
)
from .periods import Granularity, build_axis

logger = get_logger(__name__)


@dataclass(frozen=True)
class SpendingEntry:
    """One expense as listed under a plan."""

    day: date
    amount: Decimal
    category: str
    description: str = ""


@dataclass(frozen=True)
class PlanStatus:
    """Everything a plan screen shows, derived fresh on every call."""

    plan: SavingsPlan
    as_of: date
    today: BudgetState
    month_to_date: BudgetState
    monthly_spend_budget: Decimal
    savings_target: Decimal
    daily_history: Series
    spending: list[SpendingEntry]

    @property
    def remaining_today(self) -> Decimal:
        return self.today.remaining


class SavingsPlanService:
    """Coordinates plan storage, the transaction store and the budget math."""

    def __init__(
        self,
        plans: SavingsPlanRepository,
        transactions: TransactionRepository,
        *,
        user_id: int,
        clock: ClockSource,
        tz: tzinfo,
        quantum: Decimal = CENT,
    ) -> None:
        self.plans = plans
        self.transactions = transactions
        self.user_id = user_id
        self.clock = clock
        self.tz = tz
        self.quantum = quantum

    def _validate(self, declaration: BudgetDeclaration) -> None:
        try:
            compute_daily_limit(
                declaration,
                days_in_month(declaration.year, declaration.month),
                quantum=self.quantum,
            )
        except InvalidDeclaration as exc:
            logger.warning(
                "Savings plan rejected",
                extra={"code": exc.code, "year": declaration.year, "month": declaration.month},
            )
            raise

    def current_plan(self) -> Optional[SavingsPlan]:
        """Plan declared for the current calendar month, if any."""

        now = today(self.clock, self.tz)
        return self.plans.get_current(now.year, now.month, user_id=self.user_id)

    def plan_history(self) -> list[SavingsPlan]:
        return self.plans.list_history(user_id=self.user_id)

    def create_plan(self, declaration: BudgetDeclaration) -> SavingsPlan:
        """Store a new plan; a month can hold only one."""

        self._validate(declaration)
        existing = self.plans.get_current(declaration.year, declaration.month, user_id=self.user_id)
        if existing is not None:
            raise DuplicatePlan(
                f"a savings plan for {declaration.year}-{declaration.month:02d} already exists"
            )
        plan = self.plans.create(
            SavingsPlan.from_declaration(declaration, user_id=self.user_id), user_id=self.user_id
        )
        logger.info(
            "Savings plan created",
            extra={"plan_id": plan.id, "year": plan.year, "month": plan.month},
        )
        return plan

    def replace_plan(self, plan_id: int, declaration: BudgetDeclaration) -> SavingsPlan:
        """Swap a plan for a new declaration (delete, then create).

        The returned row has a new id; derive status again from it.
        """

        self._validate(declaration)
        old = self.plans.get_by_id(plan_id, user_id=self.user_id)
        if old is None:
            raise PlanNotFound(f"savings plan {plan_id} not found")
        if (old.year, old.month) != (declaration.year, declaration.month):
            clash = self.plans.get_current(declaration.year, declaration.month, user_id=self.user_id)
            if clash is not None:
                raise DuplicatePlan(
                    f"a savings plan for {declaration.year}-{declaration.month:02d} already exists"
                )
        plan = self.plans.replace(
            plan_id,
            SavingsPlan.from_declaration(declaration, user_id=self.user_id),
            user_id=self.user_id,
        )
        logger.info("Savings plan replaced", extra={"old_plan_id": plan_id, "plan_id": plan.id})
        return plan

    def delete_plan(self, plan_id: int) -> None:
        if self.plans.get_by_id(plan_id, user_id=self.user_id) is None:
            raise PlanNotFound(f"savings plan {plan_id} not found")
        self.plans.delete(plan_id, user_id=self.user_id)
        logger.info("Savings plan deleted", extra={"plan_id": plan_id})

    def record_expense(
        self,
        amount: Union[Decimal, int, str],
        category: str,
        occurred_at: Optional[datetime] = None,
        description: str = "",
    ) -> Transaction:
        """Add an expense to the transaction store.

        Raises:
            ValueError: ``amount`` is not positive or has more decimal places
                than the currency allows.
        """

        value = Decimal(amount)
        if value <= 0:
            raise ValueError("expense amount must be positive")
        if value != value.quantize(self.quantum):
            raise ValueError(f"expense amount {value} is finer than the currency unit {self.quantum}")
        txn = Transaction(
            user_id=self.user_id,
            txn_type=TransactionType.EXPENSE.value,
            category=category or "Uncategorized",
            amount=value,
            occurred_at=occurred_at or self.clock.now(),
            description=description,
        )
        saved = self.transactions.create(txn, user_id=self.user_id)
        logger.info(
            "Expense recorded",
            extra={"transaction_id": saved.id, "category": saved.category, "amount": str(saved.amount)},
        )
        return saved

    def _as_of(self, plan: SavingsPlan) -> date:
        """Day of the plan month that progress is reported for."""

        now = today(self.clock, self.tz)
        first, last = month_bounds(plan.year, plan.month)
        if now < first:
            return first
        if now > last:
            return last
        return now

    def plan_status(self, plan: Optional[SavingsPlan] = None) -> Optional[PlanStatus]:
        """Derive today's and month-to-date progress for ``plan``.

        Defaults to the current month's plan; returns None when there is none.
        """

        plan = plan or self.current_plan()
        if plan is None:
            return None

        declaration = plan.to_declaration()
        month_days = days_in_month(plan.year, plan.month)
        first, _ = month_bounds(plan.year, plan.month)
        as_of = self._as_of(plan)

        expenses = self.transactions.list(
            TransactionFilter(
                start=start_of_day(first, self.tz),
                end=end_of_day(as_of, self.tz),
                txn_type=TransactionType.EXPENSE,
            ),
            user_id=self.user_id,
        )

        today_state = compute_state(
            declaration,
            month_days,
            as_of.day,
            spent_on(expenses, as_of, self.tz),
            mode=ProgressMode.TODAY,
            quantum=self.quantum,
        )
        month_state = compute_state(
            declaration,
            month_days,
            as_of.day,
            spent_month_to_date(expenses, plan.year, plan.month, as_of.day, self.tz),
            mode=ProgressMode.MONTH_TO_DATE,
            quantum=self.quantum,
        )
        history = aggregate(
            expenses,
            build_axis(Granularity.DAILY, first, as_of, self.tz),
            Granularity.DAILY,
            self.tz,
        )
        spending = [
            SpendingEntry(
                day=local_date(txn.occurred_at, self.tz),
                amount=Decimal(txn.amount),
                category=txn.category,
                description=txn.description,
            )
            for txn in expenses
        ]

        return PlanStatus(
            plan=plan,
            as_of=as_of,
            today=today_state,
            month_to_date=month_state,
            monthly_spend_budget=monthly_spend_budget(declaration, quantum=self.quantum),
            savings_target=savings_target(declaration, quantum=self.quantum),
            daily_history=history,
            spending=spending,
        )


__all__ = ["PlanStatus", "SavingsPlanService", "SpendingEntry"]
