"""Authentication service: registration, login, logout and password reset."""

import asyncio
from collections.abc import Callable

import structlog

from core.exceptions import (
    AuthenticationError,
    ErrorCode,
    InvalidCredentialsError,
    MailDeliveryError,
    UserAlreadyExistsError,
    UserNotFoundError,
)
from domain.entities.mail import MailMessage
from domain.entities.profile import Profile
from domain.entities.token import IssuedToken, TokenClaims, TokenPurpose
from domain.entities.user import User, UserWithProfile, normalize_email
from domain.ports import IMailer, IPasswordHasher
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services import emails
from domain.services.token_service import TokenService

logger = structlog.get_logger()


class AuthService:
    """Service layer for the credential and token workflows."""

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        token_service: TokenService,
        hasher: IPasswordHasher,
        mailer: IMailer,
        public_base_url: str,
        password_reset_url: str | None = None,
        confirm_expire_minutes: int = 10,
        reset_expire_minutes: int = 30,
    ) -> None:
        self._uow_factory = uow_factory
        self._tokens = token_service
        self._hasher = hasher
        self._mailer = mailer
        self._public_base_url = public_base_url
        self._password_reset_url = (
            password_reset_url or f"{public_base_url.rstrip('/')}/reset-password"
        )
        self._confirm_expire_minutes = confirm_expire_minutes
        self._reset_expire_minutes = reset_expire_minutes

    async def ensure_email_available(self, email: str) -> None:
        """Raise UserAlreadyExistsError if the email is taken."""
        email = normalize_email(email)
        async with self._uow_factory() as uow:
            if await uow.users.exists_with_email(email):
                raise UserAlreadyExistsError(email)

    async def request_registration(
        self,
        email: str,
        password: str,
        first_name: str,
        last_name: str,
    ) -> IssuedToken:
        """Start registration: email a confirmation link, write nothing.

        The pending registration travels inside the confirmation token, so
        no row exists until the link is redeemed.

        Raises:
            UserAlreadyExistsError: If the email is taken.
            MailDeliveryError: If the confirmation email could not be sent.
        """
        email = normalize_email(email)
        await self.ensure_email_available(email)

        password_hash = await asyncio.to_thread(self._hasher.hash, password)
        issued = await self._tokens.issue(
            email,
            TokenPurpose.CONFIRM_REGISTRATION,
            claims={
                "password_hash": password_hash,
                "first_name": first_name,
                "last_name": last_name,
            },
        )

        await self._send(
            emails.registration_confirmation(
                to=email,
                first_name=first_name,
                base_url=self._public_base_url,
                token=issued.token,
                expires_minutes=self._confirm_expire_minutes,
            )
        )
        logger.info("registration_requested", email=email)
        return issued

    async def confirm_registration(self, token: str) -> UserWithProfile:
        """Redeem a confirmation token and create the User and Profile.

        Both rows are written in one unit of work; if either fails neither
        is persisted.

        Raises:
            TokenExpiredError / InvalidTokenSignatureError /
            TokenPurposeMismatchError: If the token is not a live confirmation token.
            UserAlreadyExistsError: If the email was registered in the meantime.
        """
        claims = await self._tokens.verify(token, TokenPurpose.CONFIRM_REGISTRATION)
        email = normalize_email(claims.subject)

        password_hash = claims.extra.get("password_hash")
        first_name = claims.extra.get("first_name")
        last_name = claims.extra.get("last_name")
        if not password_hash or not first_name or not last_name:
            raise AuthenticationError("Invalid token", ErrorCode.INVALID_TOKEN)

        async with self._uow_factory() as uow:
            if await uow.users.exists_with_email(email):
                raise UserAlreadyExistsError(email)

            user = await uow.users.create(
                User(
                    email=email,
                    password_hash=password_hash,
                    first_name=first_name,
                    last_name=last_name,
                )
            )
            profile = await uow.profiles.create(Profile(user_id=user.id))
            await uow.commit()

        logger.info("user_registered", user_id=user.id)
        return UserWithProfile(user=user, profile=profile)

    async def login(self, email: str, password: str) -> tuple[User, IssuedToken]:
        """Check credentials and issue a session token.

        Raises:
            InvalidCredentialsError: Same error for unknown email and wrong password.
        """
        email = normalize_email(email)
        async with self._uow_factory() as uow:
            user = await uow.users.get_by_email(email)

        valid = await asyncio.to_thread(
            self._hasher.verify, password, user.password_hash if user else None
        )
        if user is None or not valid:
            logger.info("login_failed", email=email)
            raise InvalidCredentialsError()

        issued = await self._tokens.issue(user.id, TokenPurpose.SESSION)  # type: ignore[arg-type]
        logger.info("login_succeeded", user_id=user.id)
        return user, issued

    async def logout(self, claims: TokenClaims) -> None:
        """Revoke the session token used for the request."""
        await self._tokens.revoke(claims)

    async def forgot_password(self, email: str) -> IssuedToken:
        """Email a password reset token.

        Unlike login, an unknown email is reported explicitly.

        Raises:
            UserNotFoundError: If no user has this email.
            MailDeliveryError: If the reset email could not be sent.
        """
        email = normalize_email(email)
        async with self._uow_factory() as uow:
            user = await uow.users.get_by_email(email)

        if user is None:
            raise UserNotFoundError(email)

        issued = await self._tokens.issue(user.id, TokenPurpose.RESET_PASSWORD)  # type: ignore[arg-type]
        await self._send(
            emails.password_reset(
                to=user.email,
                first_name=user.first_name,
                reset_url=self._password_reset_url,
                token=issued.token,
                expires_minutes=self._reset_expire_minutes,
            )
        )
        logger.info("password_reset_requested", user_id=user.id)
        return issued

    async def change_password(self, claims: TokenClaims, new_password: str) -> None:
        """Replace the stored password hash.

        A reset token is consumed: it and any other outstanding reset tokens
        of the user are revoked in the same transaction.
        """
        password_hash = await asyncio.to_thread(self._hasher.hash, new_password)

        async with self._uow_factory() as uow:
            user = await uow.users.get(claims.user_id)
            if user is None:
                raise AuthenticationError("User no longer exists", ErrorCode.INVALID_TOKEN)

            user.password_hash = password_hash
            await uow.users.update(user)

            if claims.purpose == TokenPurpose.RESET_PASSWORD:
                await uow.tokens.delete_for_user(user.id, TokenPurpose.RESET_PASSWORD.value)

            await uow.commit()

        logger.info("password_changed", user_id=claims.user_id, via=claims.purpose.value)

    async def _send(self, message: MailMessage) -> None:
        try:
            await self._mailer.send(message)
        except MailDeliveryError:
            logger.warning("mail_delivery_failed", to=message.to, subject=message.subject)
            raise
