"""Service post repository protocol."""

from __future__ import annotations

from typing import Optional, Protocol

from ...models.service_post import ServicePost


class ServicePostRepository(Protocol):
    """Storage for rated service posts."""

    def get_by_id(self, post_id: int, *, user_id: int) -> Optional[ServicePost]:
        """Retrieve a post by ID."""
        ...

    def list_all(self, *, user_id: int, status: Optional[str] = None) -> list[ServicePost]:
        """List posts, optionally only those with ``status``."""
        ...

    def create(self, post: ServicePost, *, user_id: int) -> ServicePost:
        """Create a new post."""
        ...

    def save_rating(self, post: ServicePost, *, user_id: int) -> ServicePost:
        """Persist the post's ``rating`` and ``rating_count``."""
        ...
