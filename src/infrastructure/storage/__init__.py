"""Storage backends."""

from .local_storage import IMAGE_EXTENSIONS, LocalStorage

__all__ = ["IMAGE_EXTENSIONS", "LocalStorage"]
