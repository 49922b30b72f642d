"""Rating workflow for service posts."""

from __future__ import annotations

from decimal import Decimal

from ..clock import ClockSource
from ..domain.repositories.service_post import ServicePostRepository
from ..errors import InvalidRating, ServicePostNotFound
from ..logging_config import get_logger
from ..models.service_post import ServicePost
from .ratings import FIVE_STAR, RatingAccumulator, RatingScale, RatingState, RatingValue

logger = get_logger(__name__)


def rate_service_post(
    repository: ServicePostRepository,
    post_id: int,
    rating: RatingValue | float,
    *,
    user_id: int,
    clock: ClockSource,
    scale: RatingScale = FIVE_STAR,
) -> ServicePost:
    """Fold one client rating into a post and persist the new aggregate.

    ``updated_at`` is stamped from ``clock``.
    """

    post = repository.get_by_id(post_id, user_id=user_id)
    if post is None:
        raise ServicePostNotFound(f"service post {post_id} not found")

    state = RatingState(entity_id=post_id, current_rating=Decimal(post.rating), count=post.rating_count)
    try:
        updated = RatingAccumulator(scale).apply(state, rating)
    except InvalidRating as exc:
        logger.warning("Rating rejected", extra={"post_id": post_id, "code": exc.code})
        raise

    post.rating = updated.current_rating
    post.rating_count = updated.count
    post.updated_at = clock.now()
    saved = repository.save_rating(post, user_id=user_id)
    logger.info(
        "Rating applied",
        extra={"post_id": post_id, "rating": str(rating), "aggregate": str(updated.current_rating)},
    )
    return saved


__all__ = ["rate_service_post"]
