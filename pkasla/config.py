"""Application configuration using pydantic-settings."""

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

from pkasla import __version__


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Runtime-editable platform settings (site, security, storage, payment
    gateways, Telegram) live in the database; see SiteSettings.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "PKASLA"
    app_env: Literal["development", "staging", "production", "test"] = "development"
    app_secret_key: str
    app_version: str = __version__
    app_debug: bool = False
    app_log_level: str = "INFO"
    cors_origins: str = "*"

    # Database
    database_url: str
    database_pool_size: int = 20
    database_max_overflow: int = 10

    # JWT Authentication
    jwt_secret_key: str | None = None
    jwt_algorithm: str = "HS256"
    jwt_access_token_expire_minutes: int = 1440  # 24 hours

    # Telegram (normally configured in DB settings; these are fallbacks, and the
    # token also runs the chat ID bot)
    telegram_api_url: str = "https://api.telegram.org"
    telegram_bot_token: str | None = None
    telegram_chat_id: str | None = None
    telegram_timeout_seconds: float = 10.0

    # In-process cache of DB settings
    settings_cache_ttl_seconds: int = 60

    @property
    def effective_jwt_secret(self) -> str:
        """Get the JWT secret key, falling back to app secret key."""
        return self.jwt_secret_key or self.app_secret_key

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.app_env == "development"

    @property
    def async_database_url(self) -> str:
        """Get database URL with an async driver for SQLAlchemy."""
        url = self.database_url
        if url.startswith("postgresql://"):
            url = url.replace("postgresql://", "postgresql+asyncpg://", 1)
        elif url.startswith("postgres://"):
            url = url.replace("postgres://", "postgresql+asyncpg://", 1)
        return url

    @property
    def cors_origins_list(self) -> list[str]:
        """Get allowed CORS origins as a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()
