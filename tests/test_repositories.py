"""Unit tests for repository implementations."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from decimal import Decimal
from zoneinfo import ZoneInfo

import pytest
from sqlmodel import select

from spendwise.clock import FixedClock, as_aware
from spendwise.domain.repositories import TransactionFilter
from spendwise.errors import InvalidRating, PlanNotFound, ServicePostNotFound
from spendwise.models import SavingsPlan, ServicePost, TransactionType
from spendwise.services.ratings import PERCENT
from spendwise.services.service_posts import rate_service_post

UTC = timezone.utc


def test_transaction_repository_crud(transaction_repo, transaction_factory, user_id):
    txn = transaction_factory("expense", "42.10", datetime(2024, 1, 15, 10, 0, tzinfo=UTC), "Food", "lunch")
    assert txn.id is not None

    fetched = transaction_repo.get_by_id(txn.id, user_id=user_id)
    assert fetched is not None
    assert fetched.amount == Decimal("42.10")
    assert fetched.description == "lunch"
    assert fetched.is_expense

    fetched.category = "Dining"
    transaction_repo.update(fetched, user_id=user_id)
    assert transaction_repo.get_by_id(txn.id, user_id=user_id).category == "Dining"

    transaction_repo.delete(txn.id, user_id=user_id)
    assert transaction_repo.get_by_id(txn.id, user_id=user_id) is None


def test_transaction_times_come_back_as_utc(transaction_repo, transaction_factory, user_id):
    kolkata = ZoneInfo("Asia/Kolkata")
    txn = transaction_factory("expense", "10", datetime(2024, 1, 2, 1, 30, tzinfo=kolkata))

    stored = transaction_repo.get_by_id(txn.id, user_id=user_id)

    assert stored.occurred_at.tzinfo is not None
    assert stored.occurred_at == datetime(2024, 1, 1, 20, 0, tzinfo=UTC)


def test_filter_bounds_in_another_zone(transaction_repo, transaction_factory, user_id):
    kolkata = ZoneInfo("Asia/Kolkata")
    # 2024-01-02 local midnight is 18:30 UTC on the 1st
    transaction_factory("expense", "1", datetime(2024, 1, 1, 18, 29, tzinfo=UTC))
    inside = transaction_factory("expense", "2", datetime(2024, 1, 1, 18, 30, tzinfo=UTC))
    last = transaction_factory("expense", "3", datetime(2024, 1, 2, 18, 29, tzinfo=UTC))
    transaction_factory("expense", "4", datetime(2024, 1, 2, 18, 30, tzinfo=UTC))

    found = transaction_repo.list(
        TransactionFilter(
            start=datetime(2024, 1, 2, tzinfo=kolkata),
            end=datetime(2024, 1, 2, 23, 59, tzinfo=kolkata),
        ),
        user_id=user_id,
    )

    assert [t.id for t in found] == [inside.id, last.id]


def test_transaction_filter_is_inclusive_and_ordered(transaction_repo, transaction_factory, user_id):
    base = datetime(2024, 1, 1, tzinfo=UTC)
    for offset in (4, 0, 2, 6):
        transaction_factory("expense", "1", base + timedelta(days=offset))
    transaction_factory("income", "500", base + timedelta(days=2), "Salary")

    window = transaction_repo.list(
        TransactionFilter(start=base, end=base + timedelta(days=4)),
        user_id=user_id,
    )
    expenses = transaction_repo.list(
        TransactionFilter(txn_type=TransactionType.EXPENSE),
        user_id=user_id,
    )

    assert [t.occurred_at.day for t in window] == [1, 3, 3, 5]
    assert len(expenses) == 4
    assert all(t.is_expense for t in expenses)


def test_transactions_scoped_to_user(transaction_repo, transaction_factory):
    transaction_factory("expense", "1", datetime(2024, 1, 1, tzinfo=UTC))

    assert transaction_repo.list(user_id=999) == []


def test_plan_replace_is_atomic(plan_repo, user_id):
    original = plan_repo.create(
        SavingsPlan(
            user_id=user_id,
            year=2024,
            month=5,
            fixed_income=Decimal("5000"),
            fixed_costs=Decimal("2000"),
            savings_percentage=Decimal("10"),
        ),
        user_id=user_id,
    )
    replacement = SavingsPlan(
        user_id=user_id,
        year=2024,
        month=5,
        fixed_income=Decimal("6000"),
        fixed_costs=Decimal("2000"),
        savings_percentage=Decimal("10"),
    )

    saved = plan_repo.replace(original.id, replacement, user_id=user_id)

    assert saved.id != original.id
    assert plan_repo.get_by_id(original.id, user_id=user_id) is None
    assert plan_repo.get_current(2024, 5, user_id=user_id).fixed_income == Decimal("6000")
    assert len(plan_repo.list_history(user_id=user_id)) == 1


def test_deleted_plan_id_not_reused(plan_repo, user_id):
    def plan(month):
        return SavingsPlan(
            user_id=user_id,
            year=2024,
            month=month,
            fixed_income=Decimal("100"),
            fixed_costs=Decimal("0"),
            savings_percentage=Decimal("0"),
        )

    first = plan_repo.create(plan(7), user_id=user_id)
    plan_repo.delete(first.id, user_id=user_id)

    second = plan_repo.create(plan(8), user_id=user_id)

    assert second.id > first.id
    assert plan_repo.get_by_id(first.id, user_id=user_id) is None


def test_plan_replace_unknown_id(plan_repo, user_id):
    plan = SavingsPlan(
        user_id=user_id,
        year=2024,
        month=5,
        fixed_income=Decimal("1"),
        fixed_costs=Decimal("0"),
        savings_percentage=Decimal("0"),
    )

    with pytest.raises(PlanNotFound):
        plan_repo.replace(12345, plan, user_id=user_id)

    assert plan_repo.list_history(user_id=user_id) == []


def _post(post_repo, user_id, **overrides) -> ServicePost:
    fields = {"title": "Plumbing", "category": "Home", "price": Decimal("80")}
    fields.update(overrides)
    return post_repo.create(ServicePost(user_id=user_id, **fields), user_id=user_id)


def test_service_post_listing(post_repo, user_id):
    first = _post(post_repo, user_id)
    second = _post(post_repo, user_id, title="Tutoring", status="paused")

    assert [p.id for p in post_repo.list_all(user_id=user_id)] == [second.id, first.id]
    assert [p.id for p in post_repo.list_all(user_id=user_id, status="active")] == [first.id]


def test_save_rating_touches_only_rating_columns(post_repo, session_factory, user_id):
    post = _post(post_repo, user_id)
    post.title = "changed in memory"
    post.rating = Decimal("4.50")
    post.rating_count = 1

    post_repo.save_rating(post, user_id=user_id)

    with session_factory() as session:
        stored = session.exec(select(ServicePost).where(ServicePost.id == post.id)).one()
    assert stored.title == "Plumbing"
    assert stored.rating == Decimal("4.50")
    assert stored.rating_count == 1


def test_save_rating_unknown_post(post_repo, user_id):
    ghost = ServicePost(id=777, user_id=user_id, title="Ghost")

    with pytest.raises(ServicePostNotFound):
        post_repo.save_rating(ghost, user_id=user_id)


class TestRateServicePost:
    """rate_service_post() persists the halving fold."""

    clock = FixedClock(datetime(2024, 6, 1, 12, 30, tzinfo=UTC))

    def test_sequence_of_fours(self, post_repo, user_id):
        post = _post(post_repo, user_id)

        for expected in ("2.00", "3.00", "3.50"):
            updated = rate_service_post(post_repo, post.id, 4, user_id=user_id, clock=self.clock)
            assert updated.rating == Decimal(expected)

        stored = post_repo.get_by_id(post.id, user_id=user_id)
        assert stored.rating == Decimal("3.50")
        assert stored.rating_count == 3
        assert as_aware(stored.updated_at) == self.clock.now()

    def test_out_of_scale_rating_not_saved(self, post_repo, user_id):
        post = _post(post_repo, user_id)

        with pytest.raises(InvalidRating):
            rate_service_post(post_repo, post.id, 6, user_id=user_id, clock=self.clock)

        stored = post_repo.get_by_id(post.id, user_id=user_id)
        assert stored.rating == Decimal("0")
        assert stored.rating_count == 0

    def test_other_scale(self, post_repo, user_id):
        post = _post(post_repo, user_id)

        updated = rate_service_post(post_repo, post.id, 90, user_id=user_id, clock=self.clock, scale=PERCENT)

        assert updated.rating == Decimal("45.00")

    def test_unknown_post(self, post_repo, user_id):
        with pytest.raises(ServicePostNotFound):
            rate_service_post(post_repo, 404, 3, user_id=user_id, clock=self.clock)
