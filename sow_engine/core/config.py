"""Configuration management for the SOW engine service."""

from functools import lru_cache

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load environment variables from .env file (only if accessible)
try:
    load_dotenv()
except (PermissionError, OSError):
    # In sandboxed environments, .env might not be accessible
    pass


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )

    # Supabase configuration (required)
    SUPABASE_URL: str = Field(..., description="Supabase project URL")
    SUPABASE_SERVICE_ROLE_KEY: str = Field(..., description="Supabase service role key")

    # Environment
    SOW_ENGINE_ENV: str = Field(default="dev", description="Environment: dev, staging, prod, test")

    # Service catalog
    SERVICE_CATALOG_TABLE: str = Field(
        default="service_catalog", description="Table holding sellable service offerings"
    )
    CATALOG_FETCH_LIMIT: int = Field(
        default=500, description="Max catalog rows loaded for a preview"
    )

    # SOW drafting
    SOW_DEFAULT_RATE: float = Field(
        default=200.0, description="Hourly rate used when no catalog rate is available"
    )


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings instance

    Raises:
        ValidationError: If required environment variables are missing
    """
    return Settings()
