"""Application settings and configuration."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings with environment variable support.

    All settings can be overridden via environment variables.
    Example: DATABASE_URL, APP_URL, LOG_LEVEL
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application settings
    debug: bool = Field(False)
    environment: str = Field("development")

    database_url: str = Field(
        default="sqlite+aiosqlite:///./ci_status.db",
        description="Database connection URL"
    )

    app_url: str = Field(
        default="",
        description="Base URL prepended verbatim to build links, e.g. https://ci.example.com/"
    )

    # Logging settings
    log_level: str = Field("INFO")
    log_format: str = Field(
        default="json",
        description="Log format (json or a %-style format string)"
    )
    log_dir: str = Field("logs")

    # Seed data
    config_dir: str = Field("./config")
    projects_config_file: str = Field("projects.yaml")
    builds_config_file: str = Field("builds.yaml")

    @property
    def database_is_sqlite(self) -> bool:
        """Check if using SQLite database."""
        return self.database_url.startswith("sqlite")


@lru_cache()
def get_settings() -> Settings:
    return Settings()
