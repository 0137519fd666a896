"""Shared fixtures for unit tests."""

from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from domain.entities.upload import UploadedFile


class FakeUnitOfWork:
    """Fake Unit of Work with all repository mocks for unit testing."""

    def __init__(self) -> None:
        self.users = AsyncMock()
        self.profiles = AsyncMock()
        self.posts = AsyncMock()
        self.tokens = AsyncMock()
        self.committed = False
        self.rolled_back = False

    async def commit(self) -> None:
        self.committed = True

    async def rollback(self) -> None:
        self.rolled_back = True

    async def __aenter__(self) -> "FakeUnitOfWork":
        return self

    async def __aexit__(self, *args: Any) -> None:
        pass


@pytest.fixture
def uow() -> FakeUnitOfWork:
    """Create a fresh FakeUnitOfWork."""
    return FakeUnitOfWork()


@pytest.fixture
def user_id() -> int:
    return 7


@pytest.fixture
def storage() -> MagicMock:
    """Storage double that hands out predictable paths."""
    storage = MagicMock()
    counter = iter(range(1, 1000))
    storage.save.side_effect = lambda file, folder: f"{folder}/{next(counter)}.png"
    storage.url.side_effect = lambda path: f"/uploads/{path}"
    return storage


def make_image(name: str = "photo.png", data: bytes = b"\x89PNG data") -> UploadedFile:
    return UploadedFile(filename=name, content_type="image/png", data=data)
