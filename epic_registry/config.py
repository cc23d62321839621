"""
Epic Registry - Configuration Management

Centralized configuration using Pydantic Settings for type-safe environment variable handling.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ===========================================
    # Database Configuration
    # ===========================================
    postgres_user: str = Field(default="epicuser", description="PostgreSQL username")
    postgres_password: str = Field(default="epicpass", description="PostgreSQL password")
    postgres_db: str = Field(default="epic_registry", description="PostgreSQL database name")
    postgres_host: str = Field(default="localhost", description="PostgreSQL host")
    postgres_port: int = Field(default=5432, description="PostgreSQL port")
    database_url_override: str | None = Field(
        default=None,
        description="Full SQLAlchemy URL; takes precedence over the PostgreSQL parts",
    )

    @property
    def database_url(self) -> str:
        """Construct database URL from individual components."""
        if self.database_url_override:
            return self.database_url_override
        return (
            f"postgresql://{self.postgres_user}:{self.postgres_password}"
            f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )

    # ===========================================
    # Application Settings
    # ===========================================
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging level",
    )
    autocomplete_limit: int = Field(
        default=10,
        ge=0,
        description="Default number of autocomplete suggestions",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensure log level is uppercase."""
        return v.upper() if isinstance(v, str) else v

    @field_validator("database_url_override", mode="before")
    @classmethod
    def blank_url_is_none(cls, v):
        """Treat an empty override as unset."""
        if isinstance(v, str) and not v.strip():
            return None
        return v


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached application settings.

    Uses lru_cache to ensure settings are loaded only once.

    Returns:
        Settings instance with loaded configuration.
    """
    return Settings()
