"""
app/core/config.py

Purpose: Application configuration

- Loads environment variables
- Centralizes config values (DB URI, LINE token, timeouts)
- Validates configuration on startup
- Environment-specific settings
"""

from pydantic import Field, ValidationInfo, field_validator
from pydantic_settings import BaseSettings
from typing import Optional, Literal


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    Validates all required configs on startup.
    """

    # Environment
    ENVIRONMENT: Literal["development", "staging", "production"] = "development"

    # MongoDB
    MONGODB_URL: str = Field(
        default="mongodb://localhost:27017",
        description="MongoDB connection URI"
    )
    MONGODB_DB_NAME: str = Field(
        default="reportbot",
        description="MongoDB database name"
    )
    STORE_TIMEOUT_SECONDS: float = Field(
        default=5.0,
        description="Upper bound for a single state/profile/record store operation"
    )

    # LINE Messaging API
    LINE_CHANNEL_ACCESS_TOKEN: Optional[str] = Field(
        default=None,
        description="Channel access token used for the reply API"
    )
    LINE_API_BASE_URL: str = Field(
        default="https://api.line.me",
        description="LINE Messaging API base URL"
    )
    LINE_API_TIMEOUT: float = Field(
        default=10.0,
        description="Reply API request timeout in seconds"
    )

    # Wizard
    TIMEZONE_OFFSET_HOURS: int = Field(
        default=8,
        description="Offset from UTC used to compute 'today' in the date menu"
    )

    # Application
    DEBUG: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    LOG_LEVEL: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )
    API_PREFIX: str = Field(
        default="/api",
        description="API route prefix"
    )
    CORS_ORIGINS: list = Field(
        default=["*"],
        description="Allowed CORS origins"
    )

    @field_validator("LINE_CHANNEL_ACCESS_TOKEN")
    @classmethod
    def validate_line_token(cls, v, info: ValidationInfo):
        """Ensure the channel access token is set in production."""
        if info.data.get("ENVIRONMENT") == "production" and not v:
            raise ValueError("LINE_CHANNEL_ACCESS_TOKEN is required in production environment")
        return v

    @field_validator("TIMEZONE_OFFSET_HOURS")
    @classmethod
    def validate_timezone_offset(cls, v):
        if not -12 <= v <= 14:
            raise ValueError("TIMEZONE_OFFSET_HOURS must be between -12 and 14")
        return v

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.ENVIRONMENT == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.ENVIRONMENT == "production"

    class Config:
        env_file = ".env"
        case_sensitive = True
        env_file_encoding = "utf-8"
        extra = "ignore"


# Global settings instance
settings = Settings()


def validate_settings():
    """
    Validates critical settings on application startup.
    Raises ValueError if any required setting is missing or invalid.
    """
    errors = []

    if not settings.MONGODB_URL:
        errors.append("MONGODB_URL is required")

    if not settings.MONGODB_DB_NAME:
        errors.append("MONGODB_DB_NAME is required")

    if settings.STORE_TIMEOUT_SECONDS <= 0:
        errors.append("STORE_TIMEOUT_SECONDS must be positive")

    if settings.LINE_API_TIMEOUT <= 0:
        errors.append("LINE_API_TIMEOUT must be positive")

    # Production-specific validations
    if settings.is_production and not settings.LINE_CHANNEL_ACCESS_TOKEN:
        errors.append("LINE_CHANNEL_ACCESS_TOKEN is required in production")

    if errors:
        raise ValueError(f"Configuration validation failed: {', '.join(errors)}")

    return True
