"""Authentication dependencies for FastAPI."""

from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from api.dependencies.services import get_token_service
from core.exceptions import AuthTokenMissingError
from domain.entities.token import TokenClaims, TokenPurpose
from domain.services.token_service import TokenService

# Security scheme for OpenAPI docs
security = HTTPBearer(auto_error=False)


async def get_session_claims(
    credentials: Annotated[
        HTTPAuthorizationCredentials | None,
        Depends(security),
    ],
    token_service: TokenService = Depends(get_token_service),
) -> TokenClaims:
    """
    Dependency to get the claims of a valid session token.

    Raises:
        AuthTokenMissingError: If no bearer token is provided (403)
        AuthenticationError: If the token is invalid, expired, revoked
            or not a session token (401)
    """
    if not credentials:
        raise AuthTokenMissingError()

    return await token_service.verify(credentials.credentials, TokenPurpose.SESSION)


async def get_password_change_claims(
    credentials: Annotated[
        HTTPAuthorizationCredentials | None,
        Depends(security),
    ],
    token_service: TokenService = Depends(get_token_service),
) -> TokenClaims:
    """
    Dependency for password changes: accepts a session token or a reset token.
    """
    if not credentials:
        raise AuthTokenMissingError()

    return await token_service.verify_any(
        credentials.credentials,
        (TokenPurpose.SESSION, TokenPurpose.RESET_PASSWORD),
    )


# Type aliases for convenience in route handlers
CurrentSession = Annotated[TokenClaims, Depends(get_session_claims)]
PasswordChangeAuth = Annotated[TokenClaims, Depends(get_password_change_claims)]
