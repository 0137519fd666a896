"""Dependency injection factories for the API."""

from functools import lru_cache
from typing import Callable

from core.config import settings
from domain.ports import IFileStorage, IMailer
from domain.services.auth_service import AuthService
from domain.services.post_service import PostService
from domain.services.token_service import TokenService
from domain.services.user_service import UserService
from infrastructure.auth.jwt_provider import JWTTokenProvider
from infrastructure.auth.passwords import PasswordHasher
from infrastructure.database.session import async_session_factory
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork
from infrastructure.mail import InMemoryMailer, SMTPMailer
from infrastructure.storage import LocalStorage


def get_uow_factory() -> Callable[[], SQLAlchemyUnitOfWork]:
    """Factory for creating Unit of Work instances."""

    def factory() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(async_session_factory)

    return factory


@lru_cache
def get_password_hasher() -> PasswordHasher:
    """Get password hasher instance."""
    return PasswordHasher()


@lru_cache
def get_mailer() -> IMailer:
    """Get the configured mail transport."""
    if settings.mail_backend == "memory":
        return InMemoryMailer()
    return SMTPMailer()


@lru_cache
def get_storage() -> IFileStorage:
    """Get the upload storage backend."""
    return LocalStorage()


@lru_cache
def get_token_service() -> TokenService:
    """Get Token service instance."""
    return TokenService(get_uow_factory(), JWTTokenProvider())


@lru_cache
def get_auth_service() -> AuthService:
    """Get Auth service instance."""
    return AuthService(
        get_uow_factory(),
        token_service=get_token_service(),
        hasher=get_password_hasher(),
        mailer=get_mailer(),
        public_base_url=settings.public_base_url,
        password_reset_url=settings.password_reset_url or None,
        confirm_expire_minutes=settings.confirm_token_expire_minutes,
        reset_expire_minutes=settings.reset_token_expire_minutes,
    )


@lru_cache
def get_user_service() -> UserService:
    """Get User service instance."""
    return UserService(
        get_uow_factory(),
        storage=get_storage(),
        max_upload_size_bytes=settings.max_upload_size_bytes,
    )


@lru_cache
def get_post_service() -> PostService:
    """Get Post service instance."""
    return PostService(
        get_uow_factory(),
        storage=get_storage(),
        max_upload_size_bytes=settings.max_upload_size_bytes,
    )
