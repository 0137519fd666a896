"""User service layer: profile read/update and avatar management."""

from collections.abc import Callable
from typing import Any, Optional

import structlog

from core.exceptions import AuthenticationError, AvatarNotFoundError, ErrorCode
from domain.entities.profile import Profile
from domain.entities.upload import UploadedFile
from domain.entities.user import User, UserWithProfile
from domain.ports import IFileStorage
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.uploads import validate_image

logger = structlog.get_logger()

AVATAR_FOLDER = "avatars"

USER_FIELDS = frozenset({"first_name", "last_name"})
PROFILE_FIELDS = frozenset(
    {"phone", "description", "latitude", "longitude", "commercial"}
)


class UserService:
    """Service layer for User and Profile business logic."""

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        storage: IFileStorage,
        max_upload_size_bytes: int = 5 * 1024 * 1024,
    ) -> None:
        self._uow_factory = uow_factory
        self._storage = storage
        self._max_upload_size_bytes = max_upload_size_bytes

    async def get_profile(self, user_id: int) -> UserWithProfile:
        """Get a user together with their profile."""
        async with self._uow_factory() as uow:
            user = await self._get_user(uow, user_id)
            profile = await uow.profiles.get_for_user(user_id)
            return UserWithProfile(user=user, profile=profile or Profile(user_id=user_id))

    async def update_profile(self, user_id: int, changes: dict[str, Any]) -> UserWithProfile:
        """Apply the provided fields; fields absent from ``changes`` keep their value."""
        unknown = set(changes) - USER_FIELDS - PROFILE_FIELDS
        if unknown:
            raise ValueError(f"Unknown profile fields: {sorted(unknown)}")

        async with self._uow_factory() as uow:
            user = await self._get_user(uow, user_id)

            user_changes = {k: v for k, v in changes.items() if k in USER_FIELDS}
            if user_changes:
                for field_name, value in user_changes.items():
                    setattr(user, field_name, value)
                user = await uow.users.update(user)

            profile = await uow.profiles.get_for_user(user_id)
            profile_changes = {k: v for k, v in changes.items() if k in PROFILE_FIELDS}
            if profile is None:
                profile = await uow.profiles.create(Profile(user_id=user_id, **profile_changes))
            elif profile_changes:
                for field_name, value in profile_changes.items():
                    setattr(profile, field_name, value)
                profile = await uow.profiles.update(profile)

            await uow.commit()

        logger.info("profile_updated", user_id=user_id, fields=sorted(changes))
        return UserWithProfile(user=user, profile=profile)

    async def set_avatar(self, user_id: int, file: UploadedFile) -> str:
        """Store a new avatar, replacing (and deleting) the previous one.

        Returns:
            The stored relative path of the new avatar.
        """
        validate_image(file, self._max_upload_size_bytes)

        path = self._storage.save(file, AVATAR_FOLDER)
        previous: Optional[str] = None
        try:
            async with self._uow_factory() as uow:
                user = await self._get_user(uow, user_id)
                previous = user.avatar
                user.avatar = path
                await uow.users.update(user)
                await uow.commit()
        except Exception:
            self._storage.delete(path)
            raise

        if previous:
            self._storage.delete(previous)

        logger.info("avatar_updated", user_id=user_id, path=path)
        return path

    async def delete_avatar(self, user_id: int) -> None:
        """Remove the user's avatar.

        Raises:
            AvatarNotFoundError: If the user has no avatar.
        """
        async with self._uow_factory() as uow:
            user = await self._get_user(uow, user_id)
            if not user.avatar:
                raise AvatarNotFoundError()

            previous = user.avatar
            user.avatar = None
            await uow.users.update(user)
            await uow.commit()

        self._storage.delete(previous)
        logger.info("avatar_deleted", user_id=user_id)

    def avatar_url(self, user: User) -> str | None:
        """Public URL of the user's avatar, if any."""
        return self.file_url(user.avatar) if user.avatar else None

    def file_url(self, path: str) -> str:
        return self._storage.url(path)

    async def _get_user(self, uow: IUnitOfWork, user_id: int) -> User:
        user = await uow.users.get(user_id)
        if user is None:
            # Token outlived its account
            raise AuthenticationError("User no longer exists", ErrorCode.INVALID_TOKEN)
        return user
