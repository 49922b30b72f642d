"""Tests for the halving rating rule and the running-mean alternative."""

from __future__ import annotations

from decimal import Decimal

import pytest

from spendwise.errors import InvalidRating
from spendwise.services.ratings import (
    FIVE_STAR,
    PERCENT,
    MeanRatingState,
    RatingAccumulator,
    RatingScale,
    RatingState,
    RunningMeanAccumulator,
    apply_rating,
)


class TestApplyRating:
    """apply_rating() moves halfway to each new rating."""

    def test_repeated_fours_from_zero(self):
        current = Decimal("0")
        seen = []
        for _ in range(5):
            current = apply_rating(current, 4)
            seen.append(current)

        assert seen == [Decimal("2.00"), Decimal("3.00"), Decimal("3.50"), Decimal("3.75"), Decimal("3.88")]

    def test_is_not_a_mean(self):
        # mean of (5, 1) would be 3; the fold weights the latest rating by half
        current = apply_rating(Decimal("0"), 5)
        current = apply_rating(current, 1)

        assert current == Decimal("1.75")

    @pytest.mark.parametrize(
        "current,target,expected",
        [
            ("0", "2.5", "1.25"),
            ("0", "5", "2.50"),
            ("1.5", "0", "0.75"),
            ("1.5", "5", "3.25"),
            ("2.98", "0", "1.49"),
            ("2.98", "5", "3.99"),
            ("4.96", "2.5", "3.73"),
            ("4.96", "5", "4.98"),
            ("5", "0", "2.50"),
        ],
    )
    def test_single_step_stops_short_of_distant_target(self, current, target, expected):
        result = apply_rating(Decimal(current), target)

        assert result == Decimal(expected)
        assert result != Decimal(target)

    def test_one_step_away_rounds_onto_target(self):
        # 4.995 rounds half up to the target itself
        assert apply_rating(Decimal("4.99"), 5) == Decimal("5.00")
        assert apply_rating(Decimal("4.98"), 5) == Decimal("4.99")

    def test_already_at_target_stays_put(self):
        assert apply_rating(Decimal("4.00"), 4) == Decimal("4.00")

    def test_converges_toward_target(self):
        current = Decimal("0")
        gaps = []
        for _ in range(12):
            current = apply_rating(current, 5)
            gaps.append(Decimal(5) - current)

        assert all(later <= earlier for earlier, later in zip(gaps, gaps[1:]))
        assert gaps[-1] <= Decimal("0.01")

    def test_half_up_rounding(self):
        assert apply_rating(Decimal("3.75"), 4) == Decimal("3.88")
        assert apply_rating(Decimal("0.01"), 0) == Decimal("0.01")

    @pytest.mark.parametrize("bad", ["-0.01", "5.01", 6, -1])
    def test_out_of_scale_rejected(self, bad):
        with pytest.raises(InvalidRating) as excinfo:
            apply_rating(Decimal("3"), bad)

        assert excinfo.value.code == "rating_out_of_scale"

    def test_scale_bounds_are_inclusive(self):
        assert apply_rating(Decimal("0"), 0) == Decimal("0.00")
        assert apply_rating(Decimal("5"), 5) == Decimal("5.00")

    def test_float_input_read_through_str(self):
        assert apply_rating(0.1, 0.2) == Decimal("0.15")

    def test_percent_scale(self):
        assert apply_rating(Decimal("80"), 95, PERCENT) == Decimal("87.50")
        with pytest.raises(InvalidRating):
            apply_rating(Decimal("80"), 101, PERCENT)

    def test_whole_number_scale(self):
        stars = RatingScale(minimum=1, maximum=5, places=0)

        assert apply_rating(Decimal("1"), 4, stars) == Decimal("3")
        with pytest.raises(InvalidRating):
            apply_rating(Decimal("3"), 0, stars)


class TestRatingScale:
    def test_quantum_follows_places(self):
        assert FIVE_STAR.quantum == Decimal("0.01")
        assert RatingScale(places=0).quantum == Decimal("1")

    def test_inverted_bounds_rejected(self):
        with pytest.raises(ValueError):
            RatingScale(minimum=5, maximum=5)

    def test_negative_places_rejected(self):
        with pytest.raises(ValueError):
            RatingScale(places=-1)


class TestAccumulators:
    def test_rating_accumulator_counts_events(self):
        accumulator = RatingAccumulator()
        state = RatingState(entity_id=7, current_rating=Decimal("0"))

        state = accumulator.apply(state, 4)
        state = accumulator.apply(state, 4)

        assert state == RatingState(entity_id=7, current_rating=Decimal("3.00"), count=2)

    def test_rejected_rating_leaves_state_untouched(self):
        accumulator = RatingAccumulator()
        state = RatingState(entity_id=1, current_rating=Decimal("2.5"), count=3)

        with pytest.raises(InvalidRating):
            accumulator.apply(state, 9)

        assert state.current_rating == Decimal("2.5")
        assert state.count == 3

    def test_running_mean_is_a_true_average(self):
        accumulator = RunningMeanAccumulator()
        state = MeanRatingState(entity_id=3)
        for rating in (5, 1, 3, 4):
            state = accumulator.apply(state, rating)

        assert state.count == 4
        assert accumulator.current(state) == Decimal("3.25")

    def test_running_mean_of_nothing_is_zero(self):
        assert RunningMeanAccumulator().current(MeanRatingState(entity_id=1)) == Decimal("0.00")

    def test_running_mean_rejects_out_of_scale(self):
        with pytest.raises(InvalidRating):
            RunningMeanAccumulator().apply(MeanRatingState(entity_id=1), 7)
