"""
app/core/config.py

Purpose: Application configuration

- Loads environment variables
- Centralizes config values (provider credentials, secrets, etc.)
- Validates configuration on startup
- Resolves the SMS provider mode once into an immutable ProviderConfig
"""

import re
from dataclasses import dataclass
from pydantic import Field, validator
from pydantic_settings import BaseSettings
from typing import Optional, Literal

from app.core.exceptions import ConfigurationError


SANDBOX_USERNAME = "sandbox"
SANDBOX_SENDER = "sandbox"

SANDBOX_BASE_URL = "https://api.sandbox.africastalking.com"
PRODUCTION_BASE_URL = "https://api.africastalking.com"

ProviderMode = Literal["sandbox", "production"]


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    Validates all required configs on startup.
    """

    # Environment
    ENVIRONMENT: Literal["development", "staging", "production"] = "development"

    # Africa's Talking SMS gateway
    AT_API_KEY: Optional[str] = Field(
        default=None,
        description="Africa's Talking API key"
    )
    AT_USERNAME: str = Field(
        default=SANDBOX_USERNAME,
        description="Africa's Talking username ('sandbox' for the sandbox app)"
    )
    AT_SENDER: Optional[str] = Field(
        default=None,
        description="Sender ID used in production mode only"
    )
    SMS_MODE: Optional[ProviderMode] = Field(
        default=None,
        description="Provider mode; derived from AT_USERNAME when unset"
    )
    AT_BASE_URL: Optional[str] = Field(
        default=None,
        description="Override for the provider API base URL"
    )
    SMS_REQUEST_TIMEOUT: float = Field(
        default=10.0,
        description="Provider request timeout in seconds"
    )
    SMS_ENABLED: bool = Field(
        default=True,
        description="Relay receipt SMS through the provider after each submission"
    )
    DEFAULT_COUNTRY_CODE: str = Field(
        default="234",
        description="Country calling code assumed for local phone numbers"
    )

    # Session Management
    SESSION_MAX_AGE_SECONDS: int = Field(
        default=24 * 60 * 60,
        description="Transaction session cookie lifetime in seconds"
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

    # Security
    SECRET_KEY: str = Field(
        default="change-me-in-production",
        description="Secret key used to sign session cookies"
    )

    @validator("SECRET_KEY")
    def validate_secret_key(cls, v, values):
        """Ensure secret key is changed in production."""
        if values.get("ENVIRONMENT") == "production" and v == "change-me-in-production":
            raise ValueError("SECRET_KEY must be changed in production environment")
        return v

    @validator("DEFAULT_COUNTRY_CODE")
    def validate_country_code(cls, v):
        """Country code is stored without a leading '+'."""
        v = v.strip().lstrip("+")
        if not re.fullmatch(r"[0-9]+", v):
            raise ValueError("DEFAULT_COUNTRY_CODE must contain digits only")
        return v

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.ENVIRONMENT == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.ENVIRONMENT == "production"

    @property
    def sms_mode(self) -> ProviderMode:
        """Provider mode, explicit or derived from the username."""
        if self.SMS_MODE:
            return self.SMS_MODE
        return "sandbox" if self.AT_USERNAME == SANDBOX_USERNAME else "production"

    class Config:
        env_file = ".env"
        case_sensitive = True
        env_file_encoding = "utf-8"


@dataclass(frozen=True)
class ProviderConfig:
    """
    SMS provider configuration, captured once at startup and passed
    into the dispatcher. Never read from the environment per call.
    """
    api_key: str
    username: str
    mode: ProviderMode
    sender_id: Optional[str] = None
    base_url: str = SANDBOX_BASE_URL
    timeout: float = 10.0

    @property
    def is_sandbox(self) -> bool:
        return self.mode == "sandbox"

    @classmethod
    def from_settings(cls, settings: "Settings") -> "ProviderConfig":
        """
        Builds the provider config from application settings.

        Raises:
            ConfigurationError: If the credential or username is missing
        """
        errors = []
        if not settings.AT_API_KEY:
            errors.append("AT_API_KEY is required")
        if not settings.AT_USERNAME:
            errors.append("AT_USERNAME is required")
        if errors:
            raise ConfigurationError(
                f"SMS provider configuration invalid: {', '.join(errors)}",
                details=errors
            )

        mode = settings.sms_mode
        base_url = settings.AT_BASE_URL or (
            SANDBOX_BASE_URL if mode == "sandbox" else PRODUCTION_BASE_URL
        )

        return cls(
            api_key=settings.AT_API_KEY,
            username=settings.AT_USERNAME,
            mode=mode,
            sender_id=settings.AT_SENDER or None,
            base_url=base_url.rstrip("/"),
            timeout=settings.SMS_REQUEST_TIMEOUT,
        )


# Global settings instance
settings = Settings()


def validate_settings():
    """
    Validates critical settings on application startup.
    Raises ConfigurationError if any required setting is missing or invalid.
    """
    errors = []

    if settings.SMS_ENABLED:
        if not settings.AT_API_KEY:
            errors.append("AT_API_KEY is required when SMS_ENABLED is set")
        if not settings.AT_USERNAME:
            errors.append("AT_USERNAME is required when SMS_ENABLED is set")

    # Production-specific validations
    if settings.is_production:
        if settings.SECRET_KEY == "change-me-in-production":
            errors.append("SECRET_KEY must be changed in production")

    if errors:
        raise ConfigurationError(
            f"Configuration validation failed: {', '.join(errors)}",
            details=errors
        )

    return True
