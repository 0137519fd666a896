"""Profile domain entity."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


@dataclass
class Profile:
    """Domain entity for the one-to-one profile attached to a user."""

    user_id: Optional[int] = None
    id: Optional[int] = None
    phone: Optional[str] = None
    description: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    commercial: bool = False
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    def __post_init__(self) -> None:
        """Ensure updated_at is always at least as recent as created_at."""
        if self.updated_at < self.created_at:
            self.updated_at = self.created_at
