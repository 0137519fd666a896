"""Pydantic schemas for Post API."""

from datetime import datetime

from api.schemas.common import CamelModel


class PostResponse(CamelModel):
    """Schema for Post response."""

    id: int
    user_id: int
    title: str
    description: str | None = None
    images: list[str]
    created_at: datetime


class PostDetailResponse(CamelModel):
    """Schema for single Post."""

    message: str
    data: PostResponse
