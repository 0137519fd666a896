"""Pytest configuration and fixtures."""

import os
import sys
import tempfile
from collections.abc import AsyncGenerator, Callable
from pathlib import Path

# Disable rate limiting and real mail delivery in tests
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["MAIL_BACKEND"] = "memory"
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="profiles-uploads-")
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from domain.entities.user import UserWithProfile
from domain.services.auth_service import AuthService
from domain.services.post_service import PostService
from domain.services.token_service import TokenService
from domain.services.user_service import UserService
from infrastructure.auth.jwt_provider import JWTTokenProvider
from infrastructure.auth.passwords import PasswordHasher
from infrastructure.database.models import Base
from infrastructure.database.session import build_engine
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork
from infrastructure.mail import InMemoryMailer
from infrastructure.storage import LocalStorage

TEST_SECRET_KEY = "test-secret-key"
TEST_PASSWORD = "secret1"
MAX_UPLOAD_SIZE = 1024 * 1024

# Smallest valid image payloads, enough for content-type based checks
PNG_BYTES = (
    b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR\x00\x00\x00\x01\x00\x00\x00\x01"
    b"\x08\x06\x00\x00\x00\x1f\x15\xc4\x89\x00\x00\x00\rIDATx\x9cc\xf8\x0f"
    b"\x00\x00\x01\x01\x00\x05\x18\xd8N\x00\x00\x00\x00IEND\xaeB`\x82"
)


@pytest.fixture
async def engine(tmp_path: Path) -> AsyncGenerator[AsyncEngine, None]:
    """Create a fresh SQLite database file per test."""
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create session factory."""
    return async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
def uow_factory(
    session_factory: async_sessionmaker[AsyncSession],
) -> Callable[[], SQLAlchemyUnitOfWork]:
    """Unit of Work factory bound to the test database."""

    def factory() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(session_factory)

    return factory


@pytest.fixture
def token_provider() -> JWTTokenProvider:
    return JWTTokenProvider(secret_key=TEST_SECRET_KEY, algorithm="HS256")


@pytest.fixture
def token_service(
    uow_factory: Callable[[], SQLAlchemyUnitOfWork], token_provider: JWTTokenProvider
) -> TokenService:
    return TokenService(uow_factory, token_provider)


@pytest.fixture(scope="session")
def hasher() -> PasswordHasher:
    """Cheap bcrypt cost so the suite stays fast."""
    return PasswordHasher(rounds=4)


@pytest.fixture
def mailer() -> InMemoryMailer:
    return InMemoryMailer()


@pytest.fixture
def storage(tmp_path: Path) -> LocalStorage:
    return LocalStorage(upload_dir=str(tmp_path / "uploads"), url_path="/uploads")


@pytest.fixture
def auth_service(
    uow_factory: Callable[[], SQLAlchemyUnitOfWork],
    token_service: TokenService,
    hasher: PasswordHasher,
    mailer: InMemoryMailer,
) -> AuthService:
    return AuthService(
        uow_factory,
        token_service=token_service,
        hasher=hasher,
        mailer=mailer,
        public_base_url="http://test",
    )


@pytest.fixture
def user_service(
    uow_factory: Callable[[], SQLAlchemyUnitOfWork], storage: LocalStorage
) -> UserService:
    return UserService(uow_factory, storage=storage, max_upload_size_bytes=MAX_UPLOAD_SIZE)


@pytest.fixture
def post_service(
    uow_factory: Callable[[], SQLAlchemyUnitOfWork], storage: LocalStorage
) -> PostService:
    return PostService(uow_factory, storage=storage, max_upload_size_bytes=MAX_UPLOAD_SIZE)


@pytest.fixture
def app(
    session_factory: async_sessionmaker[AsyncSession],
    token_service: TokenService,
    auth_service: AuthService,
    user_service: UserService,
    post_service: PostService,
) -> FastAPI:
    """
    Create the application wired to the test database.

    Services are overridden so every request uses the per-test SQLite
    database, the in-memory mailer and a temporary upload directory.
    """
    from api.dependencies.services import (
        get_auth_service,
        get_post_service,
        get_token_service,
        get_user_service,
    )
    from infrastructure.database.session import get_async_session
    from main import create_app

    app = create_app()

    async def override_get_async_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_token_service] = lambda: token_service
    app.dependency_overrides[get_auth_service] = lambda: auth_service
    app.dependency_overrides[get_user_service] = lambda: user_service
    app.dependency_overrides[get_post_service] = lambda: post_service
    app.dependency_overrides[get_async_session] = override_get_async_session
    return app


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Create async test client (no auth)."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c

    app.dependency_overrides.clear()


@pytest.fixture
async def registered_user(auth_service: AuthService) -> UserWithProfile:
    """A confirmed user with an empty profile."""
    issued = await auth_service.request_registration(
        email="jane@example.com",
        password=TEST_PASSWORD,
        first_name="Jane",
        last_name="Doe",
    )
    return await auth_service.confirm_registration(issued.token)


@pytest.fixture
async def session_token(auth_service: AuthService, registered_user: UserWithProfile) -> str:
    _, issued = await auth_service.login(registered_user.user.email, TEST_PASSWORD)
    return issued.token


@pytest.fixture
def auth_headers(session_token: str) -> dict[str, str]:
    """Create authorization headers."""
    return {"Authorization": f"Bearer {session_token}"}


@pytest.fixture
async def authenticated_client(
    client: AsyncClient, auth_headers: dict[str, str]
) -> AsyncClient:
    """Test client that sends a live session token."""
    client.headers.update(auth_headers)
    return client
