"""
app/core/config.py

Purpose: Application configuration

- Loads environment variables
- Centralizes config values (DB URI, Redis, JWT secrets, gateway keys)
- Validates configuration on startup
- Environment-specific settings
"""

from pydantic import Field, validator
from pydantic_settings import BaseSettings
from typing import Optional, Literal


DEFAULT_JWT_SECRET = "change-me-in-production"
DEFAULT_JWT_REFRESH_SECRET = "change-me-refresh-in-production"


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
        default="evshop",
        description="MongoDB database name"
    )

    # Redis
    REDIS_URL: str = Field(
        default="redis://localhost:6379/0",
        description="Redis connection URI used by the cache layer"
    )
    CACHE_DEFAULT_TTL: int = Field(
        default=3600,
        description="Default cache TTL in seconds"
    )

    # JWT
    JWT_SECRET: str = Field(
        default=DEFAULT_JWT_SECRET,
        description="Secret used to sign access tokens"
    )
    JWT_REFRESH_SECRET: str = Field(
        default=DEFAULT_JWT_REFRESH_SECRET,
        description="Secret used to sign refresh tokens"
    )
    JWT_ALGORITHM: str = Field(default="HS256")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(
        default=60 * 24,
        description="Access token lifetime in minutes"
    )
    REFRESH_TOKEN_EXPIRE_DAYS: int = Field(
        default=7,
        description="Refresh token lifetime in days"
    )

    # Password reset OTP
    OTP_EXPIRES_MIN: int = Field(
        default=10,
        description="Password reset OTP validity in minutes"
    )
    OTP_MAX_ATTEMPTS: int = Field(
        default=5,
        description="Wrong OTP attempts before the code is invalidated"
    )

    # SMTP
    EMAIL_HOST: Optional[str] = Field(default=None, description="SMTP host")
    EMAIL_PORT: int = Field(default=587, description="SMTP port")
    EMAIL_USER: Optional[str] = Field(default=None, description="SMTP username")
    EMAIL_PASS: Optional[str] = Field(default=None, description="SMTP password")
    EMAIL_FROM: str = Field(
        default="EV-Shop No Reply <no.reply@evshop.local>",
        description="From header for outgoing mail"
    )

    # PayHere payment gateway
    PAYHERE_MERCHANT_ID: Optional[str] = Field(
        default=None,
        description="PayHere merchant ID"
    )
    PAYHERE_SECRET: Optional[str] = Field(
        default=None,
        description="PayHere merchant secret (server side only)"
    )
    PAYHERE_NOTIFY_URL: str = Field(
        default="http://localhost:8000/api/v1/payments/notify",
        description="Server-to-server notification URL registered with PayHere"
    )
    PAYHERE_CURRENCY: str = Field(default="LKR")

    # Chatbot (Gemini)
    GEMINI_API_KEY: Optional[str] = Field(
        default=None,
        description="Google Gemini API key for chatbot responses"
    )
    GEMINI_MODEL: str = Field(default="gemini-1.5-flash")
    GEMINI_BASE_URL: str = Field(
        default="https://generativelanguage.googleapis.com/v1beta",
        description="Gemini REST API base URL"
    )
    GEMINI_TIMEOUT: int = Field(
        default=30,
        description="Gemini request timeout in seconds"
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
        default="/api/v1",
        description="API route prefix"
    )
    CORS_ORIGINS: list = Field(
        default=["*"],
        description="Allowed CORS origins"
    )

    # Rate limiting (per client IP, per process)
    RATE_LIMIT_ENABLED: bool = Field(default=True)
    RATE_LIMIT_REQUESTS: int = Field(
        default=100,
        description="Requests allowed per window under API_PREFIX"
    )
    RATE_LIMIT_WINDOW_SECONDS: int = Field(default=15 * 60)
    PAYMENT_RATE_LIMIT_REQUESTS: int = Field(
        default=5,
        description="Requests allowed per window on payment endpoints"
    )
    PAYMENT_RATE_LIMIT_WINDOW_SECONDS: int = Field(default=60)

    @validator("JWT_SECRET")
    def validate_jwt_secret(cls, v, values):
        """Ensure the access token secret is changed in production."""
        if values.get("ENVIRONMENT") == "production" and v == DEFAULT_JWT_SECRET:
            raise ValueError("JWT_SECRET must be changed in production environment")
        return v

    @validator("JWT_REFRESH_SECRET")
    def validate_jwt_refresh_secret(cls, v, values):
        """Ensure the refresh token secret is changed in production."""
        if values.get("ENVIRONMENT") == "production" and v == DEFAULT_JWT_REFRESH_SECRET:
            raise ValueError("JWT_REFRESH_SECRET must be changed in production environment")
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

    if not settings.REDIS_URL:
        errors.append("REDIS_URL is required")

    # Production-specific validations
    if settings.is_production:
        if not settings.PAYHERE_MERCHANT_ID:
            errors.append("PAYHERE_MERCHANT_ID is required in production")
        if not settings.PAYHERE_SECRET:
            errors.append("PAYHERE_SECRET is required in production")
        if not settings.EMAIL_HOST:
            errors.append("EMAIL_HOST is required in production")

    if errors:
        raise ValueError(f"Configuration validation failed: {', '.join(errors)}")

    return True
