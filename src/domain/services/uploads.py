"""Upload checks shared by avatar and post image uploads."""

from core.exceptions import ErrorCode, UploadError
from domain.entities.upload import ALLOWED_IMAGE_TYPES, UploadedFile


def validate_image(file: UploadedFile, max_size_bytes: int) -> None:
    """Reject empty, oversized and non-image uploads."""
    if file.size == 0:
        raise UploadError(ErrorCode.EMPTY_FILE, "File is empty", file.filename)
    if file.size > max_size_bytes:
        raise UploadError(
            ErrorCode.FILE_TOO_LARGE,
            f"File exceeds the {max_size_bytes} byte limit",
            file.filename,
        )
    if not file.is_image:
        raise UploadError(
            ErrorCode.UNSUPPORTED_FILE_TYPE,
            f"Unsupported file type; allowed: {', '.join(sorted(ALLOWED_IMAGE_TYPES))}",
            file.filename,
        )
