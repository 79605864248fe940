"""
Application configuration using Pydantic settings.

This module contains all configuration settings for the application,
loaded from environment variables with sensible defaults.
"""

import os
from typing import List, Optional, Union

from pydantic import Field, field_validator, ValidationInfo, ConfigDict
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be overridden with environment variables.
    """

    # API Configuration
    API_V1_STR: str = "/api/v1"

    # Server Configuration
    SERVER_NAME: str = "Flood Watch"
    DEBUG: bool = True

    # CORS Configuration
    # Note: Using Union[str, List] to avoid pydantic-settings 2.6+ JSON parsing issues
    BACKEND_CORS_ORIGINS: Union[str, List[str]] = "http://localhost:3000,http://localhost:8080,http://localhost:5173"

    @field_validator("BACKEND_CORS_ORIGINS", mode="before")
    @classmethod
    def assemble_cors_origins(
        cls, v: Union[str, List[str]]
    ) -> List[str]:
        """
        Parse CORS origins from environment variable.

        Supports:
        - Comma-separated string: "http://localhost,http://example.com"
        - Already parsed list: ["http://localhost"]
        - Empty string: returns empty list
        """
        if v is None or v == "":
            return []
        if isinstance(v, str):
            return [i.strip() for i in v.split(",") if i.strip()]
        elif isinstance(v, list):
            return v
        raise ValueError(f"Invalid CORS origins format: {v}")

    # Database Configuration
    POSTGRES_SERVER: str = "localhost"
    POSTGRES_USER: str = "floodwatch"
    POSTGRES_PASSWORD: str = "floodwatch"
    POSTGRES_DB: str = "floodwatch.db"
    POSTGRES_PORT: int = 5432

    SQLALCHEMY_DATABASE_URI: Optional[str] = None

    @field_validator("SQLALCHEMY_DATABASE_URI", mode="before")
    @classmethod
    def assemble_db_connection(cls, v: Optional[str], info: ValidationInfo) -> str:
        """Assemble database connection string from individual components."""
        if isinstance(v, str) and v:
            return v

        # Check for DATABASE_URL (Render/Railway/Heroku style)
        database_url = os.getenv('DATABASE_URL')
        if database_url:
            if database_url.startswith('postgres://'):
                database_url = database_url.replace('postgres://', 'postgresql+asyncpg://', 1)
            elif database_url.startswith('postgresql://'):
                database_url = database_url.replace('postgresql://', 'postgresql+asyncpg://', 1)
            return database_url

        values = info.data
        db_name = values.get('POSTGRES_DB')

        # Check if it's a SQLite database (ends with .db)
        if db_name and db_name.endswith('.db'):
            return f"sqlite+aiosqlite:///{db_name}"

        return (
            f"postgresql+asyncpg://{values.get('POSTGRES_USER')}:"
            f"{values.get('POSTGRES_PASSWORD')}@"
            f"{values.get('POSTGRES_SERVER')}:"
            f"{values.get('POSTGRES_PORT')}/"
            f"{db_name}"
        )

    # Rate Limiting
    RATE_LIMIT_REQUESTS: int = 100
    RATE_LIMIT_WINDOW: int = 60  # seconds
    RATE_LIMIT_ENABLED: bool = True

    # Upstream feeds
    RAIN_FEED_URL: str = "http://websempre.rio.rj.gov.br/json/chuvas"
    POLYGONS_FEED_URL: str = "https://octa-api-871238133710.us-central1.run.app/mongo/Polygons/latest"
    WAZE_FEED_URL: str = (
        "https://www.waze.com/row-partnerhub-api/partners/11349199295/"
        "waze-feeds/c37c11ba-ff9d-4ad5-8ecc-4e4f12e91efb?format=1"
    )
    UPSTREAM_TIMEOUT_SECONDS: float = Field(10.0, gt=0)
    UPSTREAM_USER_AGENT: str = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"

    # Refresh scheduling
    REFRESH_INTERVAL_SECONDS: float = Field(30.0, gt=0)
    SCHEDULER_ENABLED: bool = True

    # Rain guard: minimum recent flood alerts before a cycle is recorded
    RAIN_GUARD_ENABLED: bool = True
    RAIN_GUARD_WINDOW_HOURS: float = Field(6.0, gt=0)
    RAIN_GUARD_MIN_ALERTS: int = Field(3, ge=0)

    # Severity thresholds
    SEVERITY_CRITICAL_POLYGON_STATUS: int = 3
    SEVERITY_ALERT_ALERTS_IN_AREAS: int = 5
    SEVERITY_ALERT_AFFECTED_AREAS: int = 10
    SEVERITY_ATTENTION_WAZE_ALERTS: int = 10

    # History and notable events
    NOTABLE_ALERT_SPIKE: int = 5
    NOTABLE_MAX_EVENTS: int = Field(50, ge=1)
    HISTORY_WINDOW_SIZE: int = Field(100, ge=2)

    # Cron endpoint and persistence
    CRON_SECRET: Optional[str] = None
    STORE_RAW_PAYLOADS: bool = True

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"
    CYCLE_LOG_LEVEL: str = "INFO"

    model_config = ConfigDict(
        env_file=".env",
        case_sensitive=True,
    )


# Create global settings instance
settings = Settings()
