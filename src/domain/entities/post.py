"""Post domain entities."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

MAX_POST_IMAGES = 10


@dataclass
class PostImage:
    """A stored image attached to a post."""

    path: str
    position: int = 0
    id: Optional[int] = None
    post_id: Optional[int] = None


@dataclass
class Post:
    """Domain entity for a user post."""

    user_id: int
    title: str
    description: Optional[str] = None
    id: Optional[int] = None
    images: list[PostImage] = field(default_factory=list)
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    def is_owned_by(self, user_id: int) -> bool:
        """Check whether the post belongs to the given user."""
        return self.user_id == user_id
