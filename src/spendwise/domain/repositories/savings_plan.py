"""Savings plan repository protocol."""

from __future__ import annotations

from typing import Optional, Protocol

from ...models.savings_plan import SavingsPlan


class SavingsPlanRepository(Protocol):
    """Persistence for monthly plans; there is deliberately no field update."""

    def get_by_id(self, plan_id: int, *, user_id: int) -> Optional[SavingsPlan]:
        """Retrieve a plan by ID."""
        ...

    def get_current(self, year: int, month: int, *, user_id: int) -> Optional[SavingsPlan]:
        """Return the plan declared for the given month, if any."""
        ...

    def list_history(self, *, user_id: int) -> list[SavingsPlan]:
        """All plans, newest month first."""
        ...

    def create(self, plan: SavingsPlan, *, user_id: int) -> SavingsPlan:
        """Store a new plan and return it with its ID."""
        ...

    def replace(self, plan_id: int, plan: SavingsPlan, *, user_id: int) -> SavingsPlan:
        """Delete ``plan_id`` and store ``plan`` in its place, atomically."""
        ...

    def delete(self, plan_id: int, *, user_id: int) -> None:
        """Delete a plan by ID."""
        ...
