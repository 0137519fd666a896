"""Post repository protocol."""

from typing import Protocol

from domain.entities.post import Post


class IPostRepository(Protocol):
    """Repository interface for Post entities (images included)."""

    async def get(self, id: int) -> Post | None:
        """Get a post with its images."""
        ...

    async def create(self, post: Post) -> Post:
        """Create a post together with its images."""
        ...

    async def delete(self, id: int) -> bool:
        """Delete a post and return success status."""
        ...
