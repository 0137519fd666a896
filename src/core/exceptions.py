"""Custom exceptions and error codes."""

from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    """Standardized error codes for the API."""

    # Authentication errors (401)
    UNAUTHORIZED = "UNAUTHORIZED"
    INVALID_TOKEN = "INVALID_TOKEN"
    TOKEN_EXPIRED = "TOKEN_EXPIRED"
    TOKEN_PURPOSE_MISMATCH = "TOKEN_PURPOSE_MISMATCH"
    TOKEN_NOT_FOUND = "TOKEN_NOT_FOUND"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"

    # Authorization errors (403)
    FORBIDDEN = "FORBIDDEN"
    AUTH_TOKEN_MISSING = "AUTH_TOKEN_MISSING"

    # Not found errors (404)
    USER_NOT_FOUND = "USER_NOT_FOUND"
    POST_NOT_FOUND = "POST_NOT_FOUND"

    # Validation errors (400)
    VALIDATION_ERROR = "VALIDATION_ERROR"
    FILES_REQUIRED = "FILES_REQUIRED"
    TOO_MANY_FILES = "TOO_MANY_FILES"
    EMPTY_FILE = "EMPTY_FILE"
    FILE_TOO_LARGE = "FILE_TOO_LARGE"
    UNSUPPORTED_FILE_TYPE = "UNSUPPORTED_FILE_TYPE"

    # Conflict errors (409)
    USER_ALREADY_EXISTS = "USER_ALREADY_EXISTS"
    AVATAR_NOT_FOUND = "AVATAR_NOT_FOUND"
    CONFLICT = "CONFLICT"

    # Mail delivery (418, project convention)
    MAIL_DELIVERY_FAILED = "MAIL_DELIVERY_FAILED"

    # Rate limiting (429)
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"

    # Server errors (500)
    INTERNAL_ERROR = "INTERNAL_ERROR"


class AppException(Exception):
    """Base application exception."""

    def __init__(
        self,
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: Any | None = None,
    ) -> None:
        self.error_code = error_code
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)


class ValidationError(AppException):
    """Request data failed validation.

    ``details`` is a list of ``{"path", "message", "location", "type"}`` items.
    """

    def __init__(
        self,
        details: list[dict[str, Any]],
        message: str = "Request validation failed",
    ) -> None:
        super().__init__(
            error_code=ErrorCode.VALIDATION_ERROR,
            message=message,
            status_code=400,
            details=details,
        )


class AuthenticationError(AppException):
    """Authentication failed."""

    def __init__(
        self,
        message: str = "Authentication required",
        error_code: ErrorCode = ErrorCode.UNAUTHORIZED,
    ) -> None:
        super().__init__(
            error_code=error_code,
            message=message,
            status_code=401,
        )


class AuthorizationError(AppException):
    """Authorization failed."""

    def __init__(
        self,
        message: str = "Access denied",
        error_code: ErrorCode = ErrorCode.FORBIDDEN,
    ) -> None:
        super().__init__(
            error_code=error_code,
            message=message,
            status_code=403,
        )


class AuthTokenMissingError(AuthorizationError):
    """No bearer token was supplied."""

    def __init__(self) -> None:
        super().__init__(
            message="Authorization token is required",
            error_code=ErrorCode.AUTH_TOKEN_MISSING,
        )


class InvalidTokenSignatureError(AuthenticationError):
    """Token is malformed or its signature does not verify."""

    def __init__(self) -> None:
        super().__init__(message="Invalid token", error_code=ErrorCode.INVALID_TOKEN)


class TokenExpiredError(AuthenticationError):
    """Token is past its expiry."""

    def __init__(self) -> None:
        super().__init__(message="Token has expired", error_code=ErrorCode.TOKEN_EXPIRED)


class TokenPurposeMismatchError(AuthenticationError):
    """Token was issued for a different purpose."""

    def __init__(self, expected: str, actual: str | None) -> None:
        super().__init__(
            message="Token is not valid for this operation",
            error_code=ErrorCode.TOKEN_PURPOSE_MISMATCH,
        )
        self.details = {"expected": expected, "actual": actual}


class TokenNotFoundError(AuthenticationError):
    """Token was revoked or never recorded as active."""

    def __init__(self) -> None:
        super().__init__(
            message="Token has been revoked",
            error_code=ErrorCode.TOKEN_NOT_FOUND,
        )


class InvalidCredentialsError(AuthenticationError):
    """Login failed.

    The message is identical whether the email or the password was wrong.
    """

    def __init__(self) -> None:
        super().__init__(
            message="Login or password incorrect",
            error_code=ErrorCode.INVALID_CREDENTIALS,
        )


class UserAlreadyExistsError(AppException):
    """A user with this email is already registered."""

    def __init__(self, email: str) -> None:
        super().__init__(
            error_code=ErrorCode.USER_ALREADY_EXISTS,
            message="A user with this email already exists",
            status_code=409,
            details={"email": email},
        )


class UserNotFoundError(AppException):
    """No user with this email (forgot-password answers with 401)."""

    def __init__(self, email: str) -> None:
        super().__init__(
            error_code=ErrorCode.USER_NOT_FOUND,
            message="User with this email address was not found",
            status_code=401,
            details={"email": email},
        )


class PostNotFoundError(AppException):
    """Post not found."""

    def __init__(self, post_id: int) -> None:
        super().__init__(
            error_code=ErrorCode.POST_NOT_FOUND,
            message=f"Post not found: {post_id}",
            status_code=404,
            details={"post_id": post_id},
        )


class AvatarNotFoundError(AppException):
    """The user has no avatar to delete."""

    def __init__(self) -> None:
        super().__init__(
            error_code=ErrorCode.AVATAR_NOT_FOUND,
            message="Avatar file does not exist",
            status_code=409,
        )


class UploadError(AppException):
    """Uploaded file rejected."""

    def __init__(self, error_code: ErrorCode, message: str, filename: str | None = None) -> None:
        super().__init__(
            error_code=error_code,
            message=message,
            status_code=400,
            details={"filename": filename} if filename else None,
        )


class MailDeliveryError(AppException):
    """Outgoing email could not be delivered."""

    def __init__(self, message: str = "Failed to send email") -> None:
        super().__init__(
            error_code=ErrorCode.MAIL_DELIVERY_FAILED,
            message=message,
            status_code=418,
        )
