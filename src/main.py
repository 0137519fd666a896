"""Main FastAPI application entry point."""

import asyncio
import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import ORJSONResponse
from fastapi.staticfiles import StaticFiles
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from api.dependencies.services import get_token_service
from api.exception_handlers import setup_exception_handlers
from api.middleware.logging import RequestLoggingMiddleware
from api.middleware.request_id import RequestIDMiddleware
from api.middleware.security import SecurityHeadersMiddleware
from api.routes import router as api_router
from core.config import settings
from core.logging import setup_logging
from core.rate_limit import limiter, rate_limit_exceeded_handler
from infrastructure.database.models import Base
from infrastructure.database.session import engine

logger = structlog.get_logger()

# Initialize structured logging
setup_logging()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan manager for startup/shutdown tasks."""
    if settings.auto_create_tables:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("database_tables_ensured")

    async def token_cleanup_loop() -> None:
        """Periodically delete expired session and reset token records."""
        while True:
            await asyncio.sleep(settings.token_cleanup_interval_seconds)
            try:
                deleted = await get_token_service().purge_expired()
                if deleted > 0:
                    logger.info("token_cleanup_completed", deleted_count=deleted)
            except Exception:
                logger.exception("token_cleanup_failed")

    cleanup_task = asyncio.create_task(token_cleanup_loop())
    yield
    cleanup_task.cancel()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        lifespan=lifespan,
        default_response_class=ORJSONResponse,
        title=settings.app_name,
        description=(
            "## User Profiles and Posts\n\n"
            "Registration with email confirmation, token based sessions, "
            "password reset, user profiles with avatars and image posts.\n\n"
            "### Authentication\n"
            "Protected endpoints require a session token from `/login` "
            "in the Authorization header:\n"
            "```\nAuthorization: Bearer <your_token>\n```\n\n"
            "`/changepassword` also accepts the token from a password reset email.\n\n"
            "### Rate Limits\n"
            "- register/login/forgotpassword: 5 requests/minute\n"
            "- GET endpoints: 60 requests/minute\n"
            "- POST/DELETE: 20 requests/minute"
        ),
        version=settings.app_version,
        debug=settings.debug,
        openapi_tags=[
            {
                "name": "health",
                "description": "Health check endpoints",
            },
            {
                "name": "auth",
                "description": "Registration, login and password operations",
            },
            {
                "name": "posts",
                "description": "Image post operations",
            },
            {
                "name": "users",
                "description": "Profile and avatar operations",
            },
        ],
    )

    # Rate limiting
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_middleware(SlowAPIMiddleware)

    # Security & tracking middleware (LIFO order - last added = outermost)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # GZip compression for responses > 1KB
    app.add_middleware(GZipMiddleware, minimum_size=1000)

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Setup exception handlers
    setup_exception_handlers(app)

    # Include routers
    app.include_router(api_router)

    # Stored avatars and post images
    os.makedirs(settings.upload_dir, exist_ok=True)
    app.mount(
        settings.uploads_url_path,
        StaticFiles(directory=settings.upload_dir),
        name="uploads",
    )

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host=settings.host,
        port=settings.port,
        reload=not settings.is_production,
    )
