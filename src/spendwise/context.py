"""Application context for dependency injection."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import tzinfo
from typing import Callable, Optional

from sqlmodel import Session, select

from .clock import ClockSource, SystemClock
from .config import BaseConfig
from .infra.database import bootstrap_database
from .infra.repositories import (
    SQLModelSavingsPlanRepository,
    SQLModelServicePostRepository,
    SQLModelTransactionRepository,
)
from .logging_config import get_logger
from .models.service_post import ServicePost
from .models.user import User
from .services.ratings import RatingScale, RatingValue
from .services.savings_plans import SavingsPlanService
from .services.service_posts import rate_service_post
from .services.transaction_stats import TransactionStats, fetch_transaction_stats

logger = get_logger(__name__)

DEFAULT_USERNAME = "local"


@dataclass
class AppContext:
    """Wired configuration, repositories and services for one user."""

    config: BaseConfig
    session_factory: Callable[[], Session]
    clock: ClockSource
    tz: tzinfo
    user: User

    transaction_repo: SQLModelTransactionRepository
    savings_plan_repo: SQLModelSavingsPlanRepository
    service_post_repo: SQLModelServicePostRepository

    savings_plans: SavingsPlanService
    rating_scale: RatingScale

    @property
    def user_id(self) -> int:
        if self.user.id is None:
            raise RuntimeError("User has not been persisted")
        return self.user.id

    def transaction_stats(self, period: str) -> TransactionStats:
        """Income and expense series for ``period`` under the configured zone and range cap."""

        return fetch_transaction_stats(
            self.transaction_repo,
            period,
            user_id=self.user_id,
            clock=self.clock,
            tz=self.tz,
            max_buckets=self.config.MAX_RANGE_BUCKETS,
        )

    def rate_post(self, post_id: int, rating: RatingValue | float) -> ServicePost:
        return rate_service_post(
            self.service_post_repo,
            post_id,
            rating,
            user_id=self.user_id,
            clock=self.clock,
            scale=self.rating_scale,
        )


def ensure_user(session_factory: Callable[[], Session], username: str = DEFAULT_USERNAME) -> User:
    """Create or return the user that scopes every row."""

    with session_factory() as session:
        user = session.exec(select(User).where(User.username == username)).first()
        if user is None:
            user = User(username=username)
            session.add(user)
            session.commit()
            session.refresh(user)
            logger.info("User created", extra={"username": username})
        session.expunge(user)
        return user


def create_app_context(
    config: Optional[BaseConfig] = None,
    *,
    clock: Optional[ClockSource] = None,
    username: str = DEFAULT_USERNAME,
) -> AppContext:
    """Create and initialize the application context."""

    config = config or BaseConfig()
    clock = clock or SystemClock()
    tz = config.timezone()

    _, session_factory = bootstrap_database(config)
    user = ensure_user(session_factory, username)

    transaction_repo = SQLModelTransactionRepository(session_factory)
    savings_plan_repo = SQLModelSavingsPlanRepository(session_factory)
    service_post_repo = SQLModelServicePostRepository(session_factory)

    savings_plans = SavingsPlanService(
        savings_plan_repo,
        transaction_repo,
        user_id=user.id,
        clock=clock,
        tz=tz,
        quantum=config.money_quantum(),
    )

    return AppContext(
        config=config,
        session_factory=session_factory,
        clock=clock,
        tz=tz,
        user=user,
        transaction_repo=transaction_repo,
        savings_plan_repo=savings_plan_repo,
        service_post_repo=service_post_repo,
        savings_plans=savings_plans,
        rating_scale=config.rating_scale(),
    )
