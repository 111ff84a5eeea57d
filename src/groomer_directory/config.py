"""
Application configuration using Pydantic Settings.

All settings are loaded from environment variables or .env file.
No hardcoded secrets or hostnames — everything is configurable.
"""

from pathlib import Path
from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    """Database connection settings."""

    url: str = "sqlite:///./data/groomer_directory.db"

    model_config = SettingsConfigDict(env_prefix="DATABASE_")


class APISettings(BaseSettings):
    """FastAPI server settings."""

    host: str = "0.0.0.0"
    port: int = 8000
    reload: bool = True
    cors_origins: list[str] = ["*"]

    model_config = SettingsConfigDict(env_prefix="API_")


class SiteSettings(BaseSettings):
    """Public site identity, used for canonical URLs, titles and the sitemap."""

    base_url: str = "https://londondoggroomers.com"
    name: str = "London Dog Groomers"
    city: str = "London"
    storage_url: Optional[str] = None
    default_image: str = "/images/default-business.jpg"

    model_config = SettingsConfigDict(env_prefix="SITE_")

    @field_validator("base_url", mode="before")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/") if isinstance(v, str) else v


class EmailSettings(BaseSettings):
    """Outbound email: SendGrid first, SMTP as fallback."""

    sendgrid_api_key: Optional[str] = None
    sendgrid_url: str = "https://api.sendgrid.com/v3/mail/send"
    from_address: str = "no-reply@londondoggroomers.com"
    notification_email: Optional[str] = None
    server_host: Optional[str] = None
    server_port: int = 587
    server_user: Optional[str] = None
    server_password: Optional[str] = None
    server_secure: bool = False
    timeout: int = 15

    model_config = SettingsConfigDict(env_prefix="EMAIL_")

    @field_validator("sendgrid_api_key", "notification_email", "server_host", mode="before")
    @classmethod
    def blank_to_none(cls, v: str | None) -> str | None:
        if isinstance(v, str) and not v.strip():
            return None
        return v


class CacheSettings(BaseSettings):
    """File cache for generated documents (sitemap)."""

    dir: str = "data/cache"
    sitemap_ttl: int = 3600

    model_config = SettingsConfigDict(env_prefix="CACHE_")

    def ensure_dirs(self) -> None:
        """Create the cache directory if it doesn't exist."""
        Path(self.dir).mkdir(parents=True, exist_ok=True)


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    level: str = "INFO"
    file: str = "logs/groomer_directory.log"

    model_config = SettingsConfigDict(env_prefix="LOG_")


class Settings(BaseSettings):
    """Main application settings — aggregates all sub-settings."""

    database: DatabaseSettings = DatabaseSettings()
    api: APISettings = APISettings()
    site: SiteSettings = SiteSettings()
    email: EmailSettings = EmailSettings()
    cache: CacheSettings = CacheSettings()
    logging: LoggingSettings = LoggingSettings()

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    def setup(self) -> None:
        """Initialize application: create directories for cache and logs."""
        self.cache.ensure_dirs()
        log_dir = Path(self.logging.file).parent
        log_dir.mkdir(parents=True, exist_ok=True)


# Global settings instance — import this in other modules
settings = Settings()
