"""Post API routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile, status

from api.dependencies.auth import CurrentSession
from api.dependencies.services import get_post_service
from api.schemas.common import MessageResponse
from api.schemas.post import PostDetailResponse, PostResponse
from api.uploads import read_upload
from core.rate_limit import READ_RATE_LIMIT, WRITE_RATE_LIMIT, limiter
from domain.entities.post import Post
from domain.services.post_service import PostService

router = APIRouter(prefix="/post", tags=["posts"])


def to_post_response(post: Post, service: PostService) -> PostResponse:
    return PostResponse(
        id=post.id,  # type: ignore[arg-type]
        user_id=post.user_id,
        title=post.title,
        description=post.description,
        images=service.image_urls(post),
        created_at=post.created_at,
    )


@router.post(
    "/create",
    response_model=PostDetailResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a post",
    responses={
        201: {"description": "Post created"},
        400: {"description": "Missing, too many or invalid images"},
        401: {"description": "Invalid token"},
        403: {"description": "Token required"},
    },
)
@limiter.limit(WRITE_RATE_LIMIT)  # type: ignore[untyped-decorator]
async def create_post(
    request: Request,
    claims: CurrentSession,
    title: Annotated[str, Form(min_length=1, max_length=255)],
    description: Annotated[str | None, Form(max_length=2000)] = None,
    gallery: Annotated[list[UploadFile] | None, File()] = None,
    service: PostService = Depends(get_post_service),
) -> PostDetailResponse:
    """Create a post with between one and ten images sent as ``gallery``."""
    files = [await read_upload(upload) for upload in gallery or []]
    post = await service.create(
        user_id=claims.user_id,
        title=title,
        files=files,
        description=description,
    )
    return PostDetailResponse(message="Post created", data=to_post_response(post, service))


@router.delete(
    "/{post_id}",
    response_model=MessageResponse,
    summary="Delete a post",
    responses={
        200: {"description": "Post deleted"},
        404: {"description": "Post not found"},
    },
)
@limiter.limit(WRITE_RATE_LIMIT)  # type: ignore[untyped-decorator]
async def delete_post(
    request: Request,
    post_id: int,
    claims: CurrentSession,
    service: PostService = Depends(get_post_service),
) -> MessageResponse:
    """Delete one of the caller's posts together with its images."""
    await service.delete(post_id, claims.user_id)
    return MessageResponse(message="Post deleted")


@router.get(
    "/info/{post_id}",
    response_model=PostDetailResponse,
    summary="Get a post",
    responses={404: {"description": "Post not found"}},
)
@limiter.limit(READ_RATE_LIMIT)  # type: ignore[untyped-decorator]
async def get_post(
    request: Request,
    post_id: int,
    claims: CurrentSession,
    service: PostService = Depends(get_post_service),
) -> PostDetailResponse:
    """Get a single post by ID."""
    post = await service.get(post_id)
    return PostDetailResponse(message="Post found", data=to_post_response(post, service))
