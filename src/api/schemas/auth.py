"""Pydantic schemas for the authentication API."""

from pydantic import EmailStr, Field

from api.schemas.common import CamelModel
from api.schemas.user import UserResponse

PASSWORD_MIN_LENGTH = 5
PASSWORD_MAX_LENGTH = 8


class RegisterRequest(CamelModel):
    """Schema for starting a registration."""

    email: EmailStr
    password: str = Field(..., min_length=PASSWORD_MIN_LENGTH, max_length=PASSWORD_MAX_LENGTH)
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)


class LoginRequest(CamelModel):
    """Schema for logging in."""

    email: EmailStr
    password: str = Field(..., min_length=PASSWORD_MIN_LENGTH, max_length=PASSWORD_MAX_LENGTH)


class ForgotPasswordRequest(CamelModel):
    """Schema for requesting a password reset email."""

    email: EmailStr


class ChangePasswordRequest(CamelModel):
    """Schema for setting a new password."""

    password: str = Field(..., min_length=PASSWORD_MIN_LENGTH, max_length=PASSWORD_MAX_LENGTH)


class LoginResponse(CamelModel):
    """Schema for a successful login."""

    token: str
    user: UserResponse
