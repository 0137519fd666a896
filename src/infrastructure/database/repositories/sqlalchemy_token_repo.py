"""SQLAlchemy implementation of the active token repository."""

from datetime import datetime

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.auth_token import AuthToken
from infrastructure.database.models import AuthTokenModel


class SQLAlchemyTokenRepository:
    """SQLAlchemy implementation of ITokenRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, jti: str) -> AuthToken | None:
        """Get an active token record by JWT id."""
        stmt = select(AuthTokenModel).where(AuthTokenModel.jti == jti)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def add(self, token: AuthToken) -> AuthToken:
        """Record a token as active."""
        model = AuthTokenModel(
            jti=token.jti,
            user_id=token.user_id,
            purpose=token.purpose,
            created_at=token.created_at,
            expires_at=token.expires_at,
        )
        self._session.add(model)
        await self._session.flush()
        return self._to_entity(model)

    async def delete(self, jti: str) -> bool:
        """Revoke a token."""
        stmt = delete(AuthTokenModel).where(AuthTokenModel.jti == jti)
        result = await self._session.execute(stmt)
        await self._session.flush()
        return (result.rowcount or 0) > 0  # type: ignore[attr-defined]

    async def delete_for_user(self, user_id: int, purpose: str) -> int:
        """Revoke all of a user's tokens of one purpose."""
        stmt = delete(AuthTokenModel).where(
            AuthTokenModel.user_id == user_id,
            AuthTokenModel.purpose == purpose,
        )
        result = await self._session.execute(stmt)
        await self._session.flush()
        return result.rowcount or 0  # type: ignore[attr-defined]

    async def delete_expired(self, now: datetime) -> int:
        """Delete expired records."""
        stmt = delete(AuthTokenModel).where(AuthTokenModel.expires_at <= now)
        result = await self._session.execute(stmt)
        await self._session.flush()
        return result.rowcount or 0  # type: ignore[attr-defined]

    def _to_entity(self, model: AuthTokenModel) -> AuthToken:
        """Convert ORM model to domain entity."""
        return AuthToken(
            jti=model.jti,
            user_id=model.user_id,
            purpose=model.purpose,
            created_at=model.created_at,
            expires_at=model.expires_at,
        )
