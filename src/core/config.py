"""Application configuration using pydantic-settings."""
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # Database
    database_url: str = Field(
        default="sqlite+aiosqlite:///./bookmarks.db",
        validation_alias="DATABASE_URL",
    )
    db_pool_size: int = Field(default=5, validation_alias="DB_POOL_SIZE")
    db_max_overflow: int = Field(default=10, validation_alias="DB_MAX_OVERFLOW")
    db_echo: bool = Field(default=False, validation_alias="DB_ECHO")

    # CORS - comma-separated list of allowed origins (stored as string, parsed via property)
    cors_origins_str: str = Field(
        default="http://localhost:3000",
        validation_alias="CORS_ORIGINS",
    )

    # Favicon service used when a bookmark is saved without an explicit favicon
    favicon_service_template: str = Field(
        default="https://www.google.com/s2/favicons?domain={host}&sz=64",
        validation_alias="FAVICON_SERVICE_TEMPLATE",
    )

    # Defaults applied when the client omits a value
    default_tag_color: str = Field(
        default="bg-gray-500/10 text-gray-500",
        validation_alias="DEFAULT_TAG_COLOR",
    )
    default_collection_icon: str = Field(
        default="folder", validation_alias="DEFAULT_COLLECTION_ICON",
    )
    default_collection_color: str = Field(
        default="neutral", validation_alias="DEFAULT_COLLECTION_COLOR",
    )

    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

    # Client-side store
    api_url: str = Field(default="http://localhost:8000", validation_alias="API_URL")
    api_timeout: float = Field(default=30.0, validation_alias="API_TIMEOUT")

    @property
    def cors_origins(self) -> list[str]:
        """Parse comma-separated CORS origins string into a list."""
        if not self.cors_origins_str:
            return []
        return [origin.strip() for origin in self.cors_origins_str.split(",") if origin.strip()]

    @property
    def is_sqlite(self) -> bool:
        """True when the configured database is SQLite (no connection pool sizing)."""
        return self.database_url.startswith("sqlite")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
