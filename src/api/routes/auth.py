"""Authentication API routes."""

from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, Query, Request, status

from api.dependencies.auth import CurrentSession, PasswordChangeAuth
from api.dependencies.services import get_auth_service, get_user_service
from api.routes.users import to_profile_response
from api.schemas.auth import (
    ChangePasswordRequest,
    ForgotPasswordRequest,
    LoginRequest,
    LoginResponse,
    RegisterRequest,
)
from api.schemas.common import MessageResponse
from api.schemas.user import ProfileResponse, UserResponse
from api.validation import parse_body
from core.rate_limit import AUTH_RATE_LIMIT, limiter
from domain.services.auth_service import AuthService
from domain.services.user_service import UserService

router = APIRouter(tags=["auth"])


@router.post(
    "/register",
    response_model=MessageResponse,
    summary="Start registration",
    responses={
        200: {"description": "Confirmation email sent"},
        400: {"description": "Validation error"},
        409: {"description": "User with this email already exists"},
        418: {"description": "Confirmation email could not be sent"},
    },
)
@limiter.limit(AUTH_RATE_LIMIT)  # type: ignore[untyped-decorator]
async def register(
    request: Request,
    payload: Annotated[dict[str, Any], Body()],
    service: AuthService = Depends(get_auth_service),
) -> MessageResponse:
    """Validate the registration and email a confirmation link. Nothing is stored yet.

    An already registered email is reported as 409 before the other fields
    are validated.
    """
    email = payload.get("email")
    if isinstance(email, str) and email.strip():
        await service.ensure_email_available(email)

    body = parse_body(RegisterRequest, payload)
    await service.request_registration(
        email=body.email,
        password=body.password,
        first_name=body.first_name,
        last_name=body.last_name,
    )
    return MessageResponse(message="Email sent")


@router.get(
    "/register/confirm",
    response_model=ProfileResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Confirm registration",
    responses={
        201: {"description": "User created"},
        401: {"description": "Invalid or expired confirmation token"},
        409: {"description": "User with this email already exists"},
    },
)
async def confirm_registration(
    tkey: Annotated[str, Query(min_length=1)],
    service: AuthService = Depends(get_auth_service),
    user_service: UserService = Depends(get_user_service),
) -> ProfileResponse:
    """Redeem the emailed confirmation token and create the user with an empty profile."""
    created = await service.confirm_registration(tkey)
    return to_profile_response(created, user_service)


@router.post(
    "/login",
    response_model=LoginResponse,
    summary="Log in",
    responses={
        200: {"description": "Logged in"},
        400: {"description": "Validation error"},
        401: {"description": "Login or password incorrect"},
    },
)
@limiter.limit(AUTH_RATE_LIMIT)  # type: ignore[untyped-decorator]
async def login(
    request: Request,
    body: LoginRequest,
    service: AuthService = Depends(get_auth_service),
    user_service: UserService = Depends(get_user_service),
) -> LoginResponse:
    """Check credentials and return a session token."""
    user, issued = await service.login(body.email, body.password)
    return LoginResponse(
        token=issued.token,
        user=UserResponse(
            id=user.id,  # type: ignore[arg-type]
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
            avatar=user_service.avatar_url(user),
            created_at=user.created_at,
        ),
    )


@router.get(
    "/logout",
    response_model=MessageResponse,
    summary="Log out",
    responses={
        200: {"description": "Session token revoked"},
        401: {"description": "Invalid token"},
        403: {"description": "Token required"},
    },
)
async def logout(
    claims: CurrentSession,
    service: AuthService = Depends(get_auth_service),
) -> MessageResponse:
    """Revoke the session token used for this request."""
    await service.logout(claims)
    return MessageResponse(message="Done")


@router.post(
    "/forgotpassword",
    response_model=MessageResponse,
    summary="Request a password reset",
    responses={
        200: {"description": "Reset email sent"},
        400: {"description": "Validation error"},
        401: {"description": "User with this email was not found"},
        418: {"description": "Reset email could not be sent"},
    },
)
@limiter.limit(AUTH_RATE_LIMIT)  # type: ignore[untyped-decorator]
async def forgot_password(
    request: Request,
    body: ForgotPasswordRequest,
    service: AuthService = Depends(get_auth_service),
) -> MessageResponse:
    """Email a password reset token to the user."""
    await service.forgot_password(body.email)
    return MessageResponse(message="Email sent")


@router.post(
    "/changepassword",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Change password",
    responses={
        201: {"description": "Password changed"},
        400: {"description": "Validation error"},
        401: {"description": "Invalid token"},
        403: {"description": "Token required"},
    },
)
async def change_password(
    claims: PasswordChangeAuth,
    body: ChangePasswordRequest,
    service: AuthService = Depends(get_auth_service),
) -> MessageResponse:
    """Set a new password using a session token or an emailed reset token."""
    await service.change_password(claims, body.password)
    return MessageResponse(message="Password changed")
