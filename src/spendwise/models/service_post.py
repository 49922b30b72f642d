"""Service posts published by providers and rated by clients."""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from typing import ClassVar, Optional

from sqlmodel import Field, SQLModel

from .money import MONEY_DIGITS, RATING_DIGITS, STORED_PLACES


class ServicePost(SQLModel, table=True):
    """A listed service; ``rating`` holds the running aggregate rating."""

    __tablename__: ClassVar[str] = "service_post"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    title: str = Field(nullable=False, max_length=128)
    description: str = Field(default="", max_length=1024)
    category: str = Field(default="", index=True, max_length=64)
    price: Decimal = Field(default=Decimal("0"), max_digits=MONEY_DIGITS, decimal_places=STORED_PLACES)
    location: str = Field(default="", max_length=128)
    status: str = Field(default="active", nullable=False, index=True, max_length=16)
    rating: Decimal = Field(default=Decimal("0"), nullable=False, max_digits=RATING_DIGITS, decimal_places=STORED_PLACES)
    rating_count: int = Field(default=0, nullable=False)
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
