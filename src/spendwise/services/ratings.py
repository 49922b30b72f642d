"""Running ratings for service posts.

The default rule halves the distance to each new rating:
``round((current + incoming) / 2)``. It is not a mean; repeated identical
ratings move the aggregate toward that value without ever resetting it.
``RunningMeanAccumulator`` is the separate, true-average alternative.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from decimal import ROUND_HALF_UP, Decimal
from typing import Union

from ..errors import InvalidRating

RatingValue = Union[Decimal, int, str]


def _to_decimal(value: RatingValue | float) -> Decimal:
    return Decimal(str(value)) if isinstance(value, float) else Decimal(value)


@dataclass(frozen=True)
class RatingScale:
    """Inclusive bounds and rounding precision for ratings."""

    minimum: Decimal = Decimal(0)
    maximum: Decimal = Decimal(5)
    places: int = 2

    def __post_init__(self) -> None:
        object.__setattr__(self, "minimum", _to_decimal(self.minimum))
        object.__setattr__(self, "maximum", _to_decimal(self.maximum))
        if self.minimum >= self.maximum:
            raise ValueError("rating scale minimum must be below its maximum")
        if self.places < 0:
            raise ValueError("rating places must be zero or positive")

    @property
    def quantum(self) -> Decimal:
        return Decimal(1).scaleb(-self.places)

    def check(self, value: RatingValue | float) -> Decimal:
        rating = _to_decimal(value)
        if not self.minimum <= rating <= self.maximum:
            raise InvalidRating(
                "rating_out_of_scale",
                f"rating {rating} is outside the scale {self.minimum}..{self.maximum}",
            )
        return rating

    def round(self, value: Decimal) -> Decimal:
        return value.quantize(self.quantum, rounding=ROUND_HALF_UP)


FIVE_STAR = RatingScale()
PERCENT = RatingScale(minimum=Decimal(0), maximum=Decimal(100), places=2)


@dataclass(frozen=True)
class RatingState:
    entity_id: int
    current_rating: Decimal
    count: int = 0


def apply_rating(
    current: RatingValue | float,
    incoming: RatingValue | float,
    scale: RatingScale = FIVE_STAR,
) -> Decimal:
    """Fold ``incoming`` into ``current`` with the halving rule.

    Raises:
        InvalidRating: ``incoming`` is outside ``scale``.
    """

    rating = scale.check(incoming)
    return scale.round((_to_decimal(current) + rating) / 2)


class RatingAccumulator:
    """Applies the halving rule to persisted rating states."""

    def __init__(self, scale: RatingScale = FIVE_STAR) -> None:
        self.scale = scale

    def apply(self, state: RatingState, incoming: RatingValue | float) -> RatingState:
        return replace(
            state,
            current_rating=apply_rating(state.current_rating, incoming, self.scale),
            count=state.count + 1,
        )


@dataclass(frozen=True)
class MeanRatingState:
    entity_id: int
    total: Decimal = Decimal(0)
    count: int = 0


class RunningMeanAccumulator:
    """True running average, tracked as (sum, count)."""

    def __init__(self, scale: RatingScale = FIVE_STAR) -> None:
        self.scale = scale

    def apply(self, state: MeanRatingState, incoming: RatingValue | float) -> MeanRatingState:
        rating = self.scale.check(incoming)
        return replace(state, total=state.total + rating, count=state.count + 1)

    def current(self, state: MeanRatingState) -> Decimal:
        if state.count == 0:
            return self.scale.round(Decimal(0))
        return self.scale.round(state.total / state.count)


__all__ = [
    "FIVE_STAR",
    "MeanRatingState",
    "PERCENT",
    "RatingAccumulator",
    "RatingScale",
    "RatingState",
    "RunningMeanAccumulator",
    "apply_rating",
]
