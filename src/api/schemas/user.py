"""Pydantic schemas for User and Profile API."""

from datetime import datetime

from pydantic import ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from api.schemas.common import CamelModel


class UserResponse(CamelModel):
    """Schema for the account part of a user."""

    id: int
    email: str
    first_name: str
    last_name: str
    avatar: str | None = None
    created_at: datetime


class ProfileResponse(CamelModel):
    """Schema for the full user profile."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "firstName": "Andrew",
                "lastName": "Pavlov",
                "email": "example@gmail.com",
                "avatar": None,
                "phone": "+380965528451",
                "description": "Have a nice day!",
                "latitude": 43.12543,
                "longitude": 153.63234,
                "commercial": True,
            }
        },
    )

    first_name: str
    last_name: str
    email: str
    avatar: str | None = None
    phone: str | None = None
    description: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    commercial: bool = False


class ProfileUpdate(CamelModel):
    """Schema for updating a profile. Omitted fields are left unchanged."""

    first_name: str | None = Field(None, min_length=1, max_length=100)
    last_name: str | None = Field(None, min_length=1, max_length=100)
    phone: str | None = Field(None, max_length=15, pattern=r"^\+?[0-9]{5,14}$")
    description: str | None = Field(None, max_length=255)
    latitude: float | None = Field(None, ge=-90, le=90)
    longitude: float | None = Field(None, ge=-180, le=180)
    commercial: bool | None = None

    @field_validator("first_name", "last_name", "commercial")
    @classmethod
    def reject_null(cls, v: object) -> object:
        if v is None:
            raise ValueError("Field cannot be null")
        return v


class AvatarResponse(CamelModel):
    """Schema for a stored avatar."""

    message: str
    avatar: str
