"""JWT token provider implementation.

Every token is an HS256-signed JWT with the payload:
    {
        "sub": "42",                      # user id, or email for confirmation
        "purpose": "session",
        "jti": "5f0c...",
        "iat": 1234567000,
        "exp": 1234567890,
        ...purpose-specific claims
    }
"""

import logging
import secrets
from datetime import datetime, timedelta
from typing import Any, Optional

from jose import ExpiredSignatureError, JWTError, jwt

from core.config import settings
from core.exceptions import (
    InvalidTokenSignatureError,
    TokenExpiredError,
    TokenPurposeMismatchError,
)
from domain.entities.token import IssuedToken, TokenClaims, TokenPurpose

logger = logging.getLogger(__name__)

_RESERVED_CLAIMS = frozenset({"sub", "purpose", "jti", "iat", "exp"})


def default_ttls() -> dict[TokenPurpose, timedelta]:
    """Configured lifetime for each token purpose."""
    return {
        TokenPurpose.CONFIRM_REGISTRATION: timedelta(minutes=settings.confirm_token_expire_minutes),
        TokenPurpose.SESSION: timedelta(minutes=settings.session_token_expire_minutes),
        TokenPurpose.RESET_PASSWORD: timedelta(minutes=settings.reset_token_expire_minutes),
    }


class JWTTokenProvider:
    """JWT-based token provider.

    Signature verification goes through the HMAC backend of python-jose,
    which compares digests in constant time.
    """

    def __init__(
        self,
        secret_key: str = settings.jwt_secret_key,
        algorithm: str = settings.jwt_algorithm,
        ttls: Optional[dict[TokenPurpose, timedelta]] = None,
    ) -> None:
        self._secret_key = secret_key
        self._algorithm = algorithm
        self._ttls = ttls or default_ttls()

    def issue(
        self,
        subject: str,
        purpose: TokenPurpose,
        ttl: Optional[timedelta] = None,
        claims: Optional[dict[str, Any]] = None,
    ) -> IssuedToken:
        """Sign a token for a subject."""
        now = datetime.utcnow().replace(microsecond=0)
        expires_at = now + (ttl if ttl is not None else self._ttls[purpose])
        jti = secrets.token_hex(16)

        payload: dict[str, Any] = {
            key: value for key, value in (claims or {}).items() if key not in _RESERVED_CLAIMS
        }
        payload.update(
            {
                "sub": str(subject),
                "purpose": purpose.value,
                "jti": jti,
                "iat": now,
                "exp": expires_at,
            }
        )

        token = jwt.encode(payload, self._secret_key, algorithm=self._algorithm)
        return IssuedToken(
            token=token,
            jti=jti,
            subject=str(subject),
            purpose=purpose,
            expires_at=expires_at,
        )

    def decode(self, token: str, expected_purpose: TokenPurpose) -> TokenClaims:
        """Verify signature, expiry and purpose of a token."""
        try:
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self._algorithm],
                options={"verify_aud": False, "require_exp": True, "require_sub": True},
            )
        except ExpiredSignatureError:
            raise TokenExpiredError()
        except JWTError:
            raise InvalidTokenSignatureError()

        purpose = payload.get("purpose")
        if purpose != expected_purpose.value:
            logger.info(
                "Token purpose mismatch: expected %s, got %s", expected_purpose.value, purpose
            )
            raise TokenPurposeMismatchError(expected_purpose.value, purpose)

        jti = payload.get("jti")
        if not jti:
            raise InvalidTokenSignatureError()

        return TokenClaims(
            subject=payload["sub"],
            purpose=expected_purpose,
            jti=jti,
            issued_at=datetime.utcfromtimestamp(payload.get("iat", 0)),
            expires_at=datetime.utcfromtimestamp(payload["exp"]),
            extra={k: v for k, v in payload.items() if k not in _RESERVED_CLAIMS},
        )

    def peek_purpose(self, token: str) -> Optional[str]:
        """Read the purpose claim without verifying the token."""
        try:
            purpose = jwt.get_unverified_claims(token).get("purpose")
        except JWTError:
            return None
        return purpose if isinstance(purpose, str) else None
