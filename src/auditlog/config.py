"""Application configuration using pydantic-settings."""

from functools import lru_cache

from pydantic import computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict

from auditlog.core.constants import (
    GP_AUDITING_STRATEGY,
    GP_EXCEPTIONS,
    GP_STORE_LAST_STATE_OF_DELETED_ITEMS,
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
    app_name: str = "Audit Policy"
    debug: bool = False
    environment: str = "development"  # development, staging, production

    # Database
    database_url: str = "sqlite:///./auditlog.db"
    database_echo: bool = False

    # Configuration property names
    auditing_strategy_property: str = GP_AUDITING_STRATEGY
    exceptions_property: str = GP_EXCEPTIONS
    store_last_state_property: str = GP_STORE_LAST_STATE_OF_DELETED_ITEMS

    # API Documentation
    api_docs_base_url: str = "https://api.example.com"

    # Observability
    log_level: str = "INFO"

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()
