"""Pytest configuration and shared fixtures for Spendwise tests.

Provides an isolated SQLite database per test, a session factory shaped like
the one repositories expect, and small builders for in-memory transactions
so engine tests never touch a database.
"""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal

import pytest
from sqlmodel import Session, SQLModel, create_engine, select

from spendwise.models import SavingsPlan, ServicePost, Transaction, TransactionType, User  # noqa: F401
from spendwise.infra.repositories import (
    SQLModelSavingsPlanRepository,
    SQLModelServicePostRepository,
    SQLModelTransactionRepository,
)

UTC = timezone.utc


def make_txn(
    kind: str,
    amount: str | int | Decimal,
    occurred_at: datetime,
    category: str = "Food",
    description: str = "",
) -> Transaction:
    """Build an unsaved transaction for engine tests."""

    return Transaction(
        user_id=1,
        txn_type=TransactionType(kind).value,
        category=category,
        amount=Decimal(amount),
        occurred_at=occurred_at,
        description=description,
    )


def expense(amount, occurred_at, category: str = "Food") -> Transaction:
    return make_txn("expense", amount, occurred_at, category)


def income(amount, occurred_at, category: str = "Salary") -> Transaction:
    return make_txn("income", amount, occurred_at, category)


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture(scope="function")
def db_engine(tmp_path):
    """Create an isolated SQLite database for each test.

    Yields:
        Engine: SQLModel engine with all tables created
    """
    engine = create_engine(f"sqlite:///{tmp_path / 'spendwise-test.db'}", echo=False)
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture(scope="function")
def session_factory(db_engine):
    """Session factory matching the ``Callable[[], Session]`` repositories take.

    A default user is bootstrapped and exposed as ``factory.user``.
    """

    def factory():
        return Session(db_engine, expire_on_commit=False)

    with factory() as session:
        existing = session.exec(select(User).where(User.username == "tester")).first()
        if existing is None:
            existing = User(username="tester")
            session.add(existing)
            session.commit()
            session.refresh(existing)
        factory.user = existing  # type: ignore[attr-defined]

    return factory


@pytest.fixture
def user_id(session_factory) -> int:
    return session_factory.user.id


@pytest.fixture
def transaction_repo(session_factory) -> SQLModelTransactionRepository:
    return SQLModelTransactionRepository(session_factory)


@pytest.fixture
def plan_repo(session_factory) -> SQLModelSavingsPlanRepository:
    return SQLModelSavingsPlanRepository(session_factory)


@pytest.fixture
def post_repo(session_factory) -> SQLModelServicePostRepository:
    return SQLModelServicePostRepository(session_factory)


@pytest.fixture
def transaction_factory(transaction_repo, user_id):
    """Factory for persisted transactions.

    Returns:
        Callable: creates and stores a Transaction, returning the saved row
    """

    def _create(
        kind: str,
        amount: str | int | Decimal,
        occurred_at: datetime,
        category: str = "Food",
        description: str = "",
    ) -> Transaction:
        txn = make_txn(kind, amount, occurred_at, category, description)
        return transaction_repo.create(txn, user_id=user_id)

    return _create
