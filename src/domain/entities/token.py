"""Token value objects."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from typing import Any


class TokenPurpose(StrEnum):
    """The single use a signed token is valid for."""

    CONFIRM_REGISTRATION = "confirm-registration"
    SESSION = "session"
    RESET_PASSWORD = "reset-password"


# Purposes whose tokens are recorded as active and can be revoked
TRACKED_PURPOSES = frozenset({TokenPurpose.SESSION, TokenPurpose.RESET_PASSWORD})


@dataclass(frozen=True)
class IssuedToken:
    """A freshly signed token with the metadata needed to track it."""

    token: str
    jti: str
    subject: str
    purpose: TokenPurpose
    expires_at: datetime


@dataclass(frozen=True)
class TokenClaims:
    """Verified claims extracted from a token."""

    subject: str
    purpose: TokenPurpose
    jti: str
    issued_at: datetime
    expires_at: datetime
    extra: dict[str, Any] = field(default_factory=dict)

    @property
    def user_id(self) -> int:
        """Subject as a user ID (session and reset tokens only)."""
        return int(self.subject)
