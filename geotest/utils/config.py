"""
Configuration Management

Uses Pydantic Settings for environment-based configuration.
Loads from .env file automatically.
"""

from typing import List, Optional
from functools import lru_cache
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    # External collaborators (optional - mock data is used without them)
    SERPER_API_KEY: Optional[str] = None
    GOOGLE_API_KEY: Optional[str] = None

    # Application Settings
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"
    PUBLIC_BASE_URL: str = "http://localhost:5173"

    # Persistence (SQLite fallback when unset)
    DATABASE_URL: Optional[str] = None

    # Scoring
    SELF_DOMAINS: List[str] = ["geotest.ai", "www.geotest.ai"]
    SELF_TEST_ENABLED: bool = True
    NEW_DOMAIN_GRACE_DAYS: int = 180

    # Limits
    ANALYTICS_LOG_LIMIT: int = 1000

    # Timeouts
    API_TIMEOUT: int = 30

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"  # Ignore extra fields in .env file
        case_sensitive = False  # Allow both UPPERCASE and lowercase


@lru_cache
def get_settings() -> Settings:
    """Get or create cached settings instance."""
    return Settings()
