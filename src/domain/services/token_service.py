"""Token lifecycle: issue, verify and revoke purpose-bound tokens."""

from collections.abc import Callable
from datetime import datetime, timedelta
from typing import Any, Optional

import structlog

from core.exceptions import TokenNotFoundError
from domain.entities.auth_token import AuthToken
from domain.entities.token import TRACKED_PURPOSES, IssuedToken, TokenClaims, TokenPurpose
from domain.ports import ITokenProvider
from domain.repositories.unit_of_work import IUnitOfWork

logger = structlog.get_logger()


class TokenService:
    """Service layer for token business logic.

    Session and reset tokens are recorded as active when issued. A token
    whose record is gone (logout, consumed reset link) fails verification
    even before its natural expiry. Confirmation tokens are stateless.
    """

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        provider: ITokenProvider,
    ) -> None:
        self._uow_factory = uow_factory
        self._provider = provider

    async def issue(
        self,
        subject: int | str,
        purpose: TokenPurpose,
        ttl: Optional[timedelta] = None,
        claims: Optional[dict[str, Any]] = None,
    ) -> IssuedToken:
        """Sign a token and, for session/reset tokens, record it as active."""
        issued = self._provider.issue(str(subject), purpose, ttl=ttl, claims=claims)

        if purpose in TRACKED_PURPOSES:
            async with self._uow_factory() as uow:
                await uow.tokens.add(
                    AuthToken(
                        jti=issued.jti,
                        user_id=int(subject),
                        purpose=purpose.value,
                        expires_at=issued.expires_at,
                    )
                )
                await uow.commit()

        return issued

    async def verify(self, token: str, expected_purpose: TokenPurpose) -> TokenClaims:
        """Verify a token for one purpose.

        Raises:
            InvalidTokenSignatureError: Token is malformed or tampered with.
            TokenExpiredError: Token is past its expiry.
            TokenPurposeMismatchError: Token was issued for another purpose.
            TokenNotFoundError: Token was revoked or never recorded.
        """
        claims = self._provider.decode(token, expected_purpose)

        if expected_purpose in TRACKED_PURPOSES:
            async with self._uow_factory() as uow:
                record = await uow.tokens.get(claims.jti)
            if record is None or record.purpose != expected_purpose.value:
                raise TokenNotFoundError()

        return claims

    async def verify_any(
        self, token: str, accepted_purposes: tuple[TokenPurpose, ...]
    ) -> TokenClaims:
        """Verify a token that may carry any of several purposes.

        The unverified purpose claim only selects which purpose to verify
        against; the full check still runs for that purpose.
        """
        claimed = self._provider.peek_purpose(token)
        for purpose in accepted_purposes:
            if claimed == purpose.value:
                return await self.verify(token, purpose)
        # Fall through to a normal check so the caller gets the precise error
        return await self.verify(token, accepted_purposes[0])

    async def revoke(self, claims: TokenClaims) -> bool:
        """Mark a token unusable before its natural expiry."""
        async with self._uow_factory() as uow:
            revoked = await uow.tokens.delete(claims.jti)
            await uow.commit()

        logger.info(
            "token_revoked",
            purpose=claims.purpose.value,
            subject=claims.subject,
            was_active=revoked,
        )
        return revoked  # type: ignore[no-any-return]

    async def purge_expired(self, now: Optional[datetime] = None) -> int:
        """Delete expired token records."""
        async with self._uow_factory() as uow:
            deleted = await uow.tokens.delete_expired(now or datetime.utcnow())
            await uow.commit()
            return deleted  # type: ignore[no-any-return]
