"""Monthly savings plan rows."""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from typing import TYPE_CHECKING, ClassVar, Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel

from .money import MONEY_DIGITS, STORED_PLACES

if TYPE_CHECKING:  # pragma: no cover
    from ..services.budgeting import BudgetDeclaration


class SavingsPlan(SQLModel, table=True):
    """A user's declared budget for one calendar month.

    Rows are never patched field by field: a change is stored as a delete of
    the old row followed by a new row.
    """

    __tablename__: ClassVar[str] = "savings_plan"
    __table_args__ = (
        UniqueConstraint("user_id", "year", "month", name="uq_savings_plan_month"),
        # replaced plans never hand their id to the next row
        {"sqlite_autoincrement": True},
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    year: int = Field(nullable=False, index=True)
    month: int = Field(nullable=False, index=True)
    fixed_income: Decimal = Field(nullable=False, max_digits=MONEY_DIGITS, decimal_places=STORED_PLACES)
    fixed_costs: Decimal = Field(nullable=False, max_digits=MONEY_DIGITS, decimal_places=STORED_PLACES)
    savings_percentage: Decimal = Field(nullable=False, max_digits=5, decimal_places=2)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    def to_declaration(self) -> "BudgetDeclaration":
        """Convert the stored row into the immutable engine value."""

        from ..services.budgeting import BudgetDeclaration

        return BudgetDeclaration(
            year=self.year,
            month=self.month,
            fixed_income=Decimal(self.fixed_income),
            fixed_costs=Decimal(self.fixed_costs),
            savings_percentage=Decimal(self.savings_percentage),
        )

    @classmethod
    def from_declaration(cls, declaration: "BudgetDeclaration", *, user_id: int) -> "SavingsPlan":
        return cls(
            user_id=user_id,
            year=declaration.year,
            month=declaration.month,
            fixed_income=declaration.fixed_income,
            fixed_costs=declaration.fixed_costs,
            savings_percentage=declaration.savings_percentage,
        )
