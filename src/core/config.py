"""Application configuration using Pydantic Settings."""

from functools import lru_cache

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="Profiles API")
    app_version: str = Field(default="1.0.0")
    app_env: str = Field(default="development")
    debug: bool = Field(default=False)

    # Server
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000)
    public_base_url: str = Field(
        default="http://localhost:8000",
        description="Externally reachable base URL, used in emailed links",
    )
    password_reset_url: str = Field(
        default="",
        description="Client page that collects a new password from a reset link",
    )

    # Database
    database_url: str = Field(
        default="sqlite+aiosqlite:///./profiles.db",
        description="SQLAlchemy async connection URL",
    )
    auto_create_tables: bool = Field(
        default=False,
        description="Create missing tables on startup (development only)",
    )

    # JWT tokens
    jwt_secret_key: str = Field(
        default="CHANGE-ME-IN-PRODUCTION",
        description="Secret key for signing confirmation, session and reset tokens",
    )
    jwt_algorithm: str = Field(default="HS256")
    confirm_token_expire_minutes: int = Field(default=10)
    session_token_expire_minutes: int = Field(default=60 * 24 * 7)
    reset_token_expire_minutes: int = Field(default=30)
    token_cleanup_interval_seconds: int = Field(default=3600)

    # Mail
    smtp_host: str = Field(default="localhost")
    smtp_port: int = Field(default=587)
    smtp_username: str = Field(default="")
    smtp_password: str = Field(default="")
    smtp_use_tls: bool = Field(default=True)
    smtp_timeout_seconds: float = Field(default=10.0)
    mail_from: str = Field(default="no-reply@localhost")
    mail_backend: str = Field(
        default="smtp",
        description="'smtp' delivers through smtp_host, 'memory' keeps an in-process outbox",
    )

    # Uploads
    upload_dir: str = Field(default="uploads")
    uploads_url_path: str = Field(default="/uploads")
    max_upload_size_bytes: int = Field(default=5 * 1024 * 1024)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def async_database_url(self) -> str:
        """Ensure the database URL uses an async driver scheme.

        Hosting providers supply a standard ``postgresql://`` URL.
        SQLAlchemy's async engine requires ``postgresql+asyncpg://``.
        """
        url = self.database_url
        if url.startswith("postgresql://"):
            url = url.replace("postgresql://", "postgresql+asyncpg://", 1)
        return url

    # Rate Limiting
    rate_limit_enabled: bool = Field(
        default=True,
        description="Enable/disable rate limiting (disable for tests)",
    )

    # CORS
    cors_origins: str = Field(
        default="http://localhost:3000,http://localhost:5173",
        description="Comma-separated list of allowed origins",
    )

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.app_env == "production"

    @computed_field  # type: ignore[prop-decorator]
    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
