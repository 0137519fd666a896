"""Active token repository protocol."""

from datetime import datetime
from typing import Protocol

from domain.entities.auth_token import AuthToken


class ITokenRepository(Protocol):
    """Repository interface for active session/reset token records."""

    async def get(self, jti: str) -> AuthToken | None:
        """Get an active token record by JWT id."""
        ...

    async def add(self, token: AuthToken) -> AuthToken:
        """Record a token as active."""
        ...

    async def delete(self, jti: str) -> bool:
        """Revoke a token and return whether it was active."""
        ...

    async def delete_for_user(self, user_id: int, purpose: str) -> int:
        """Revoke all of a user's tokens of one purpose."""
        ...

    async def delete_expired(self, now: datetime) -> int:
        """Delete expired records and return how many were removed."""
        ...
