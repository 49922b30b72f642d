"""SQLModel implementation of ServicePost repository."""

from __future__ import annotations

from typing import Callable, Optional

from sqlmodel import Session, select

from ...errors import ServicePostNotFound
from ...models.service_post import ServicePost


class SQLModelServicePostRepository:
    """SQLModel-based service post repository implementation."""

    def __init__(self, session_factory: Callable[[], Session]):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def get_by_id(self, post_id: int, *, user_id: int) -> Optional[ServicePost]:
        """Retrieve a post by ID."""
        with self.session_factory() as session:
            obj = session.exec(
                select(ServicePost)
                .where(ServicePost.id == post_id)
                .where(ServicePost.user_id == user_id)
            ).first()
            if obj:
                session.expunge(obj)
            return obj

    def list_all(self, *, user_id: int, status: Optional[str] = None) -> list[ServicePost]:
        """List posts, newest first."""
        with self.session_factory() as session:
            statement = select(ServicePost).where(ServicePost.user_id == user_id)
            if status:
                statement = statement.where(ServicePost.status == status)
            statement = statement.order_by(ServicePost.id.desc())  # type: ignore
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def create(self, post: ServicePost, *, user_id: int) -> ServicePost:
        """Create a new post."""
        with self.session_factory() as session:
            post.user_id = user_id
            session.add(post)
            session.commit()
            session.refresh(post)
            session.expunge(post)
            return post

    def save_rating(self, post: ServicePost, *, user_id: int) -> ServicePost:
        """Write back only the rating columns of ``post``."""
        with self.session_factory() as session:
            stored = session.exec(
                select(ServicePost)
                .where(ServicePost.id == post.id)
                .where(ServicePost.user_id == user_id)
            ).first()
            if stored is None:
                raise ServicePostNotFound(f"service post {post.id} not found")
            stored.rating = post.rating
            stored.rating_count = post.rating_count
            stored.updated_at = post.updated_at
            session.add(stored)
            session.commit()
            session.refresh(stored)
            session.expunge(stored)
            return stored
