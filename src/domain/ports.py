"""Protocols for the external services the domain depends on."""

from datetime import timedelta
from typing import Any, Optional, Protocol

from domain.entities.mail import MailMessage
from domain.entities.token import IssuedToken, TokenClaims, TokenPurpose
from domain.entities.upload import UploadedFile


class ITokenProvider(Protocol):
    """Signs and verifies purpose-bound tokens."""

    def issue(
        self,
        subject: str,
        purpose: TokenPurpose,
        ttl: Optional[timedelta] = None,
        claims: Optional[dict[str, Any]] = None,
    ) -> IssuedToken:
        """
        Sign a token for a subject.

        Args:
            subject: User ID (or pending email for confirmation tokens)
            purpose: What the token may be used for
            ttl: Lifetime; defaults to the configured lifetime for the purpose
            claims: Additional purpose-specific claims

        Returns:
            The signed token with its JWT id and absolute expiry
        """
        ...

    def decode(self, token: str, expected_purpose: TokenPurpose) -> TokenClaims:
        """
        Verify signature, expiry and purpose of a token.

        Raises:
            InvalidTokenSignatureError: Token is malformed or tampered with
            TokenExpiredError: Token is past its expiry
            TokenPurposeMismatchError: Token was issued for another purpose
        """
        ...

    def peek_purpose(self, token: str) -> Optional[str]:
        """Read the purpose claim without verifying the token."""
        ...


class IPasswordHasher(Protocol):
    """Hashes and verifies passwords."""

    def hash(self, password: str) -> str:
        ...

    def verify(self, password: str, password_hash: str | None) -> bool:
        """Verify a password; a missing hash still costs one comparison."""
        ...


class IMailer(Protocol):
    """Outgoing mail transport."""

    async def send(self, message: MailMessage) -> None:
        """
        Deliver a message.

        Raises:
            MailDeliveryError: If the transport could not deliver it
        """
        ...


class IFileStorage(Protocol):
    """Stores uploaded files."""

    def save(self, file: UploadedFile, folder: str) -> str:
        """Persist a file and return the stored (relative) path."""
        ...

    def delete(self, path: str) -> bool:
        """Remove a stored file, returning whether it existed."""
        ...

    def url(self, path: str) -> str:
        """Public URL for a stored file."""
        ...
