"""User domain entity."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from domain.entities.profile import Profile


@dataclass
class User:
    """Domain entity for a registered user.

    Users are created only when a registration confirmation token is redeemed.
    """

    email: str
    password_hash: str
    first_name: str
    last_name: str
    id: Optional[int] = None
    avatar: Optional[str] = None
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    def __post_init__(self) -> None:
        """Normalize the email so lookups are case-insensitive."""
        self.email = normalize_email(self.email)


def normalize_email(email: str) -> str:
    """Strip whitespace and lower-case an email address."""
    return (email or "").strip().lower()


@dataclass(frozen=True, slots=True)
class UserWithProfile:
    """Read-only value object: a User bundled with its Profile."""

    user: User
    profile: Profile
