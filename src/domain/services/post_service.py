"""Post service layer with business logic."""

from collections.abc import Callable
from typing import Optional

import structlog

from core.exceptions import ErrorCode, PostNotFoundError, UploadError
from domain.entities.post import MAX_POST_IMAGES, Post, PostImage
from domain.entities.upload import UploadedFile
from domain.ports import IFileStorage
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.uploads import validate_image

logger = structlog.get_logger()

POST_FOLDER = "posts"


class PostService:
    """Service layer for Post business logic."""

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        storage: IFileStorage,
        max_upload_size_bytes: int = 5 * 1024 * 1024,
    ) -> None:
        self._uow_factory = uow_factory
        self._storage = storage
        self._max_upload_size_bytes = max_upload_size_bytes

    async def create(
        self,
        user_id: int,
        title: str,
        files: list[UploadedFile],
        description: Optional[str] = None,
    ) -> Post:
        """Create a post with 1..10 images.

        Every file is checked before anything is stored; stored files are
        removed again if the database write fails.
        """
        if not files:
            raise UploadError(ErrorCode.FILES_REQUIRED, "At least one image is required")
        if len(files) > MAX_POST_IMAGES:
            raise UploadError(
                ErrorCode.TOO_MANY_FILES,
                f"A post can have at most {MAX_POST_IMAGES} images",
            )
        for file in files:
            validate_image(file, self._max_upload_size_bytes)

        stored: list[str] = []
        try:
            for file in files:
                stored.append(self._storage.save(file, POST_FOLDER))

            post = Post(
                user_id=user_id,
                title=title,
                description=description,
                images=[PostImage(path=path, position=i) for i, path in enumerate(stored)],
            )

            async with self._uow_factory() as uow:
                created = await uow.posts.create(post)
                await uow.commit()
        except Exception:
            for path in stored:
                self._storage.delete(path)
            raise

        logger.info("post_created", post_id=created.id, user_id=user_id, images=len(stored))
        return created  # type: ignore[no-any-return]

    async def get(self, post_id: int) -> Post:
        """Get a post by ID."""
        async with self._uow_factory() as uow:
            post = await uow.posts.get(post_id)
            if not post:
                raise PostNotFoundError(post_id)
            return post  # type: ignore[no-any-return]

    async def delete(self, post_id: int, user_id: int) -> None:
        """Delete a post owned by the user, along with its stored images.

        A post owned by someone else is reported as not found.
        """
        async with self._uow_factory() as uow:
            post = await uow.posts.get(post_id)
            if not post or not post.is_owned_by(user_id):
                raise PostNotFoundError(post_id)

            await uow.posts.delete(post_id)
            await uow.commit()

        for image in post.images:
            self._storage.delete(image.path)

        logger.info("post_deleted", post_id=post_id, user_id=user_id)

    def image_urls(self, post: Post) -> list[str]:
        """Public URLs of a post's images, in order."""
        return [self._storage.url(image.path) for image in post.images]
