"""
Environment configuration for the school assistant scheduling core.
Uses Pydantic's settings management to handle environment variables
with proper type validation and default values.
"""

from typing import Optional
from pathlib import Path
from functools import lru_cache
from urllib.parse import quote_plus

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, field_validator
from dotenv import load_dotenv

# Load environment variables from .env file if it exists
env_path = Path('.') / '.env'
load_dotenv(dotenv_path=env_path)


class Settings(BaseSettings):
    """Application settings with environment variable support"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
        populate_by_name=True,
    )

    # Application configuration
    APP_NAME: str = Field(default="School Assistant", alias="PROJECT_NAME")
    ENVIRONMENT: str = "development"
    DEBUG: bool = False

    # Database configuration - support both individual fields and DATABASE_URL
    DATABASE_URL: Optional[str] = None
    DB_HOST: str = "localhost"
    DB_PORT: int = 3306
    DB_USER: str = "root"
    DB_PASSWORD: str = ""
    DB_NAME: str = "school_management"
    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 5
    DB_POOL_TIMEOUT: int = 30  # seconds to wait for a pooled connection
    DB_POOL_RECYCLE: int = 3600
    DB_ECHO: bool = False
    DB_SLOW_QUERY_THRESHOLD: float = 0.5

    # Monitoring and logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "text"
    LOG_FILE: Optional[str] = None

    # Pagination
    DEFAULT_PAGE_SIZE: int = 20
    MAX_PAGE_SIZE: int = 100

    # Business logic
    UPCOMING_SCHEDULE_DAYS: int = 7
    LEAVE_ATTENTION_THRESHOLD_DAYS: int = 3

    @field_validator('LOG_LEVEL', mode='before')
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Accept log levels in any case"""
        level = str(v).upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Invalid log level: {v}")
        return level

    @field_validator('LOG_FORMAT', mode='before')
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        fmt = str(v).lower()
        if fmt not in {"text", "json"}:
            raise ValueError(f"LOG_FORMAT must be 'text' or 'json', got {v!r}")
        return fmt

    def get_database_url(self) -> str:
        """Get database URL, constructing it from components if needed"""
        if self.DATABASE_URL:
            return self.DATABASE_URL

        password = quote_plus(self.DB_PASSWORD)
        return (
            f"mysql+pymysql://{self.DB_USER}:{password}@{self.DB_HOST}:{self.DB_PORT}"
            f"/{self.DB_NAME}?charset=utf8mb4"
        )

    def is_development(self) -> bool:
        return self.ENVIRONMENT.lower() in {"development", "dev", "local"}

    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() in {"production", "prod"}


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()
