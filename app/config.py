# =============================================================================
# app/config.py - Application Settings
# =============================================================================
# Every tunable of the bootcamp directory lives here: the MongoDB connection,
# JWT and cookie lifetimes, photo upload limits, and the geocoding and mail
# provider credentials.
#
# Usage:
#   from app.config import settings
#   print(settings.MONGO_URI)
#
# Values come from the process environment first, then from a .env file in
# the working directory. Invalid values fail at import time.
# =============================================================================

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings are accessed via the global `settings` instance.
    """

    # -------------------------------------------------------------------------
    # Database
    # -------------------------------------------------------------------------

    MONGO_URI: str = Field(
        default="mongodb://localhost:27017",
        description="MongoDB connection string"
    )

    DATABASE_NAME: str = Field(
        default="devcamper",
        description="Name of the MongoDB database"
    )

    # -------------------------------------------------------------------------
    # Authentication
    # -------------------------------------------------------------------------

    JWT_SECRET: str = Field(
        default="dev-secret-key-change-in-production",
        min_length=16,
        description="Secret key for signing access tokens"
    )

    JWT_ALGORITHM: str = Field(
        default="HS256",
        description="Signing algorithm for access tokens"
    )

    JWT_EXPIRE_DAYS: int = Field(
        default=30,
        ge=1,
        description="Lifetime of an access token in days"
    )

    JWT_COOKIE_EXPIRE_DAYS: int = Field(
        default=30,
        ge=1,
        description="Lifetime of the token cookie in days"
    )

    RESET_TOKEN_EXPIRE_MINUTES: int = Field(
        default=10,
        ge=1,
        description="How long a password reset token stays valid"
    )

    # -------------------------------------------------------------------------
    # File Upload Settings
    # -------------------------------------------------------------------------

    MAX_FILE_UPLOAD: int = Field(
        default=1_000_000,
        ge=1,
        description="Maximum photo upload size in bytes"
    )

    FILE_UPLOAD_PATH: str = Field(
        default="./public/uploads",
        description="Directory where uploaded photos are written"
    )

    # -------------------------------------------------------------------------
    # Geocoding Provider (MapQuest)
    # -------------------------------------------------------------------------

    GEOCODER_API_KEY: str = Field(
        default="",
        description="MapQuest API key used for address and zipcode lookups"
    )

    GEOCODER_URL: str = Field(
        default="https://www.mapquestapi.com/geocoding/v1/address",
        description="Geocoding endpoint"
    )

    # -------------------------------------------------------------------------
    # Mail Provider (SendGrid)
    # -------------------------------------------------------------------------

    SENDGRID_API_KEY: str = Field(
        default="",
        description="SendGrid API key for password reset emails"
    )

    SENDGRID_URL: str = Field(
        default="https://api.sendgrid.com/v3/mail/send",
        description="SendGrid send endpoint"
    )

    FROM_EMAIL: str = Field(
        default="noreply@devcamper.io",
        description="Sender address for outgoing email"
    )

    FROM_NAME: str = Field(
        default="DevCamper",
        description="Sender display name for outgoing email"
    )

    # -------------------------------------------------------------------------
    # Application Settings
    # -------------------------------------------------------------------------

    ENVIRONMENT: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Current environment"
    )

    DEBUG: bool = Field(
        default=False,
        description="Enable debug mode (verbose logging)"
    )

    API_HOST: str = Field(
        default="0.0.0.0",
        description="Host to bind the API server to"
    )

    API_PORT: int = Field(
        default=5000,
        ge=1,
        le=65535,
        description="Port for the API server"
    )

    # CORS origins (comma-separated string that gets parsed)
    CORS_ORIGINS: str = Field(
        default="http://localhost:3000",
        description="Allowed CORS origins (comma-separated)"
    )

    # -------------------------------------------------------------------------
    # Pydantic Settings Configuration
    # -------------------------------------------------------------------------

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        case_sensitive=True,
    )

    # -------------------------------------------------------------------------
    # Derived Values
    # -------------------------------------------------------------------------

    @property
    def cors_origins_list(self) -> list[str]:
        """CORS_ORIGINS split on commas, blanks dropped."""
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    @property
    def jwt_cookie_max_age(self) -> int:
        """Cookie lifetime in seconds."""
        return self.JWT_COOKIE_EXPIRE_DAYS * 24 * 60 * 60

    @property
    def is_development(self) -> bool:
        return self.ENVIRONMENT == "development"

    @property
    def is_production(self) -> bool:
        """Production turns on secure cookies and the CORS allow-list."""
        return self.ENVIRONMENT == "production"


@lru_cache
def get_settings() -> Settings:
    """Build the Settings once per process."""
    return Settings()


settings = get_settings()
