"""Application configuration using pydantic-settings."""

from functools import lru_cache
from typing import Literal
from uuid import UUID

from pydantic import computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from orbit_rbac.core.constants import (
    DEFAULT_ORGANIZATION_NAME,
    DEFAULT_ORGANIZATION_SLUG,
    SLUG_PATTERN,
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Orbit RBAC"
    debug: bool = False
    environment: str = "development"  # development, staging, production

    # Storage
    storage_backend: Literal["memory", "sql"] = "sql"
    database_url: str = "sqlite:///./orbit_rbac.db"
    database_echo: bool = False

    # Bootstrap seeding
    seed_on_startup: bool = True
    bootstrap_organization_name: str = DEFAULT_ORGANIZATION_NAME
    bootstrap_organization_slug: str = DEFAULT_ORGANIZATION_SLUG
    bootstrap_owner_id: UUID | None = None

    # API Documentation
    api_docs_base_url: str = "https://api.example.com"

    # Observability
    log_level: str = "INFO"

    @field_validator("bootstrap_organization_slug")
    @classmethod
    def validate_bootstrap_slug(cls, v: str) -> str:
        """Reject slugs that the organization registry would refuse later.

        Raises:
            ValueError: If the slug is not URL-safe
        """
        if not SLUG_PATTERN.match(v):
            raise ValueError(
                "BOOTSTRAP_ORGANIZATION_SLUG must contain only lowercase letters, "
                "digits and single hyphens"
            )
        return v

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Upper-case the log level so "debug" and "DEBUG" are equivalent."""
        return v.upper()

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == "development"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()
