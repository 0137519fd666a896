"""User profile API routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, File, Request, UploadFile

from api.dependencies.auth import CurrentSession
from api.dependencies.services import get_user_service
from api.schemas.common import MessageResponse
from api.schemas.user import AvatarResponse, ProfileResponse, ProfileUpdate
from api.uploads import read_upload
from core.exceptions import ErrorCode, UploadError
from core.rate_limit import READ_RATE_LIMIT, WRITE_RATE_LIMIT, limiter
from domain.entities.user import UserWithProfile
from domain.services.user_service import UserService

router = APIRouter(prefix="/user", tags=["users"])


def to_profile_response(item: UserWithProfile, service: UserService) -> ProfileResponse:
    user, profile = item.user, item.profile
    return ProfileResponse(
        first_name=user.first_name,
        last_name=user.last_name,
        email=user.email,
        avatar=service.avatar_url(user),
        phone=profile.phone,
        description=profile.description,
        latitude=profile.latitude,
        longitude=profile.longitude,
        commercial=profile.commercial,
    )


@router.post(
    "/update",
    response_model=ProfileResponse,
    summary="Update profile",
    responses={400: {"description": "Validation error"}},
)
@limiter.limit(WRITE_RATE_LIMIT)  # type: ignore[untyped-decorator]
async def update_profile(
    request: Request,
    body: ProfileUpdate,
    claims: CurrentSession,
    service: UserService = Depends(get_user_service),
) -> ProfileResponse:
    """Update the caller's name and profile. Only provided fields are changed."""
    updated = await service.update_profile(claims.user_id, body.model_dump(exclude_unset=True))
    return to_profile_response(updated, service)


@router.post(
    "/avatar",
    response_model=AvatarResponse,
    summary="Upload avatar",
    responses={
        200: {"description": "Avatar stored"},
        400: {"description": "Empty, oversized or non-image file"},
    },
)
@limiter.limit(WRITE_RATE_LIMIT)  # type: ignore[untyped-decorator]
async def upload_avatar(
    request: Request,
    claims: CurrentSession,
    avatar: Annotated[UploadFile | None, File()] = None,
    service: UserService = Depends(get_user_service),
) -> AvatarResponse:
    """Store a new avatar image, replacing the previous one."""
    if avatar is None:
        raise UploadError(ErrorCode.EMPTY_FILE, "No file uploaded")

    path = await service.set_avatar(claims.user_id, await read_upload(avatar))
    return AvatarResponse(message="File saved", avatar=service.file_url(path))


@router.delete(
    "/avatar",
    response_model=MessageResponse,
    summary="Delete avatar",
    responses={409: {"description": "User has no avatar"}},
)
@limiter.limit(WRITE_RATE_LIMIT)  # type: ignore[untyped-decorator]
async def delete_avatar(
    request: Request,
    claims: CurrentSession,
    service: UserService = Depends(get_user_service),
) -> MessageResponse:
    """Remove the caller's avatar."""
    await service.delete_avatar(claims.user_id)
    return MessageResponse(message="File deleted")


@router.get(
    "/profile",
    response_model=ProfileResponse,
    summary="Get profile",
)
@limiter.limit(READ_RATE_LIMIT)  # type: ignore[untyped-decorator]
async def get_profile(
    request: Request,
    claims: CurrentSession,
    service: UserService = Depends(get_user_service),
) -> ProfileResponse:
    """Get the caller's profile."""
    return to_profile_response(await service.get_profile(claims.user_id), service)
