"""Local filesystem storage implementation."""

import os
import uuid
from pathlib import Path

import structlog

from core.config import settings
from domain.entities.upload import UploadedFile

logger = structlog.get_logger()

IMAGE_EXTENSIONS = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/gif": ".gif",
    "image/webp": ".webp",
}


class LocalStorage:
    """Persist files to the local filesystem under the configured upload directory."""

    def __init__(self, upload_dir: str | None = None, url_path: str | None = None):
        self.base_directory = Path(upload_dir or settings.upload_dir).resolve()
        self.url_path = (url_path or settings.uploads_url_path).rstrip("/")
        os.makedirs(self.base_directory, exist_ok=True)

    def save(self, file: UploadedFile, folder: str) -> str:
        """Save a file under a random name and return its relative path."""
        extension = IMAGE_EXTENSIONS.get(file.content_type) or Path(file.filename).suffix.lower()
        directory = self._resolve(folder)
        directory.mkdir(parents=True, exist_ok=True)

        destination = directory / f"{uuid.uuid4().hex}{extension}"
        destination.write_bytes(file.data)

        relative = destination.relative_to(self.base_directory).as_posix()
        logger.debug("file_stored", path=relative, size=file.size)
        return relative

    def delete(self, path: str) -> bool:
        """Remove a stored file."""
        target = self._resolve(path)
        if not target.is_file():
            return False
        target.unlink()
        return True

    def exists(self, path: str) -> bool:
        """Return True if the given relative path exists within the upload directory."""
        return self._resolve(path).is_file()

    def url(self, path: str) -> str:
        """Public URL for a stored file."""
        return f"{self.url_path}/{path}"

    def _resolve(self, path: str) -> Path:
        target = (self.base_directory / path).resolve()
        if not target.is_relative_to(self.base_directory):
            raise ValueError(f"Path escapes upload directory: {path}")
        return target
