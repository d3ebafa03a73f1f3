"""Configuration management for the readiness engine."""

from functools import lru_cache

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load environment variables from .env file (only if accessible)
try:
    load_dotenv()
except (PermissionError, OSError):
    # In sandboxed environments, .env might not be accessible
    # Environment variables should be set directly
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
    READINESS_ENV: str = Field(default="dev", description="Environment: dev, staging, prod")

    # Snapshot reads
    READINESS_READ_TIMEOUT_SECONDS: float = Field(
        default=10.0, gt=0, description="Single timeout across all configuration source reads"
    )
    READINESS_READ_WORKERS: int = Field(
        default=6, ge=1, description="Thread pool size for parallel source reads"
    )

    # Assignment progress
    READINESS_LOOKAHEAD_DAYS: int = Field(
        default=3, ge=0, description="Days ahead scanned for missing escort assignments"
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
