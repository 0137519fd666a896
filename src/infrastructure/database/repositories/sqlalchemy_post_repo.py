"""SQLAlchemy implementation of Post repository."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from domain.entities.post import Post, PostImage
from infrastructure.database.models import PostImageModel, PostModel


class SQLAlchemyPostRepository:
    """SQLAlchemy implementation of IPostRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, id: int) -> Post | None:
        """Get a post with its images."""
        model = await self._get_model(id)
        return self._to_entity(model) if model else None

    async def create(self, post: Post) -> Post:
        """Create a post together with its images."""
        model = PostModel(
            user_id=post.user_id,
            title=post.title,
            description=post.description,
            created_at=post.created_at,
            updated_at=post.updated_at,
            images=[
                PostImageModel(path=image.path, position=image.position)
                for image in post.images
            ],
        )
        self._session.add(model)
        await self._session.flush()

        created = await self._get_model(model.id)
        assert created is not None
        return self._to_entity(created)

    async def delete(self, id: int) -> bool:
        """Delete a post (images cascade)."""
        model = await self._get_model(id)

        if not model:
            return False

        await self._session.delete(model)
        await self._session.flush()
        return True

    async def _get_model(self, id: int) -> PostModel | None:
        stmt = (
            select(PostModel)
            .options(selectinload(PostModel.images))
            .where(PostModel.id == id)
            .execution_options(populate_existing=True)
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    def _to_entity(self, model: PostModel) -> Post:
        """Convert ORM model to domain entity."""
        return Post(
            id=model.id,
            user_id=model.user_id,
            title=model.title,
            description=model.description,
            images=[
                PostImage(
                    id=image.id,
                    post_id=image.post_id,
                    path=image.path,
                    position=image.position,
                )
                for image in sorted(model.images, key=lambda i: i.position)
            ],
            created_at=model.created_at,
            updated_at=model.updated_at,
        )
