"""SQLModel implementation of SavingsPlan repository."""

from __future__ import annotations

from typing import Callable, Optional

from sqlmodel import Session, select

from ...errors import PlanNotFound
from ...models.savings_plan import SavingsPlan


class SQLModelSavingsPlanRepository:
    """SQLModel-based savings plan repository implementation."""

    def __init__(self, session_factory: Callable[[], Session]):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def get_by_id(self, plan_id: int, *, user_id: int) -> Optional[SavingsPlan]:
        """Retrieve a plan by ID."""
        with self.session_factory() as session:
            obj = session.exec(
                select(SavingsPlan)
                .where(SavingsPlan.id == plan_id)
                .where(SavingsPlan.user_id == user_id)
            ).first()
            if obj:
                session.expunge(obj)
            return obj

    def get_current(self, year: int, month: int, *, user_id: int) -> Optional[SavingsPlan]:
        """Return the plan declared for exactly this month."""
        with self.session_factory() as session:
            obj = session.exec(
                select(SavingsPlan)
                .where(SavingsPlan.user_id == user_id)
                .where(SavingsPlan.year == year)
                .where(SavingsPlan.month == month)
            ).first()
            if obj:
                session.expunge(obj)
            return obj

    def list_history(self, *, user_id: int) -> list[SavingsPlan]:
        """All plans, newest month first."""
        with self.session_factory() as session:
            statement = (
                select(SavingsPlan)
                .where(SavingsPlan.user_id == user_id)
                .order_by(SavingsPlan.year.desc(), SavingsPlan.month.desc())  # type: ignore
            )
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def create(self, plan: SavingsPlan, *, user_id: int) -> SavingsPlan:
        """Store a new plan."""
        with self.session_factory() as session:
            plan.user_id = user_id
            session.add(plan)
            session.commit()
            session.refresh(plan)
            session.expunge(plan)
            return plan

    def replace(self, plan_id: int, plan: SavingsPlan, *, user_id: int) -> SavingsPlan:
        """Delete the old row and insert ``plan`` in the same transaction."""
        with self.session_factory() as session:
            existing = session.exec(
                select(SavingsPlan)
                .where(SavingsPlan.id == plan_id)
                .where(SavingsPlan.user_id == user_id)
            ).first()
            if existing is None:
                raise PlanNotFound(f"savings plan {plan_id} not found")
            session.delete(existing)
            # Flush the delete first so the (user, year, month) slot is free.
            session.flush()
            plan.id = None
            plan.user_id = user_id
            session.add(plan)
            session.commit()
            session.refresh(plan)
            session.expunge(plan)
            return plan

    def delete(self, plan_id: int, *, user_id: int) -> None:
        """Delete a plan by ID."""
        with self.session_factory() as session:
            plan = session.exec(
                select(SavingsPlan)
                .where(SavingsPlan.id == plan_id)
                .where(SavingsPlan.user_id == user_id)
            ).first()
            if plan:
                session.delete(plan)
                session.commit()
