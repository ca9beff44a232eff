"""
Backend configuration with environment variable support.
Simplified for single-container deployment (backend and Streamlit frontend side by side).
"""
from pathlib import Path
from functools import lru_cache
from typing import List
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    APP_NAME: str = "PharmaDesk"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False

    # Server
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8000
    FRONTEND_PORT: int = 8501

    # Database
    DATABASE_URL: str = "sqlite:///./data/pharmadesk.db"
    DB_POOL_TIMEOUT: int = 30  # Connection timeout in seconds

    # Master data name rules (mirrors the frontend validators)
    NAME_MIN_LENGTH: int = 2
    NAME_MAX_LENGTH: int = 50

    # Storage
    DATA_DIR: Path = Path("./data")
    LOG_DIR: Path = Path("./data/logs")

    # CORS (comma-separated string in .env, parsed to list)
    CORS_ORIGINS: str = "http://localhost:8501,http://127.0.0.1:8501"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return not self.DEBUG

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS_ORIGINS string into list."""
        if not self.CORS_ORIGINS:
            return []
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Convenience exports
settings = get_settings()
