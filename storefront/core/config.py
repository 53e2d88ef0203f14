"""
Application Configuration Module

Centralizes all configuration using environment variables with Pydantic Settings.
Notifications always go through the real providers (Twilio for SMS,
SendGrid for email); a channel without credentials fails explicitly.
NOTIFICATIONS_MOCK=true swaps in the mock service for local work.

Usage:
    from storefront.core.config import get_settings

    settings = get_settings()
    if settings.notifications_mock:
        # Mock delivery (logged only)
    else:
        # Twilio / SendGrid

Version: 1.0.0
"""

import logging
import sys
from enum import Enum
from typing import Optional
from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class EnvironmentMode(str, Enum):
    """
    Application environment modes.

    Attributes:
        DEVELOPMENT: Local testing
        PRODUCTION: Live environment with Twilio and SendGrid
        STAGING: Pre-production testing with real providers but test keys
    """
    DEVELOPMENT = "development"
    PRODUCTION = "production"
    STAGING = "staging"


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be overridden via environment variables or .env file.
    Sensitive values (API keys, admin password) should NEVER be committed
    to version control.

    Attributes:
        env_mode: Current environment (development/production/staging)
        debug: Enable verbose logging and error details

        # Notification providers (required in production)
        twilio_account_sid / twilio_auth_token / twilio_phone_number: SMS
        sendgrid_api_key / sendgrid_from_email: transactional email
        notifications_mock: Deliver through the mock service instead

        # Support chatbot
        chat_typing_delay_seconds: Simulated typing delay before a bot reply
        chat_max_sessions: Open chat panels kept in memory

        # Business
        restaurant_name: Display name used in templates
        restaurant_phone: Contact channel quoted by the chatbot
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ==========================================================================
    # ENVIRONMENT
    # ==========================================================================

    env_mode: EnvironmentMode = Field(
        default=EnvironmentMode.DEVELOPMENT,
        description="Application environment mode"
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode with verbose logging"
    )

    # ==========================================================================
    # APPLICATION
    # ==========================================================================

    app_name: str = Field(
        default="Spicy Biryani Storefront",
        description="Application display name"
    )
    app_version: str = Field(
        default="1.0.0",
        description="Application version"
    )
    api_host: str = Field(
        default="0.0.0.0",
        description="API server host"
    )
    api_port: int = Field(
        default=8001,
        description="API server port"
    )

    # ==========================================================================
    # REDIS / CELERY
    # ==========================================================================

    redis_url: str = Field(
        default="redis://localhost:6379/0",
        description="Redis connection URL (Celery broker and result backend)"
    )

    # ==========================================================================
    # TWILIO (SMS)
    # ==========================================================================

    twilio_account_sid: Optional[str] = Field(
        default=None,
        description="Twilio Account SID"
    )
    twilio_auth_token: Optional[str] = Field(
        default=None,
        description="Twilio Auth Token"
    )
    twilio_phone_number: Optional[str] = Field(
        default=None,
        description="Twilio phone number for sending SMS"
    )

    # ==========================================================================
    # SENDGRID (EMAIL)
    # ==========================================================================

    sendgrid_api_key: Optional[str] = Field(
        default=None,
        description="SendGrid API Key"
    )
    sendgrid_from_email: str = Field(
        default="orders@spicybiryanihousegrb.shop",
        description="From email address for SendGrid"
    )
    sendgrid_from_name: str = Field(
        default="Spicy Biryani",
        description="From display name for SendGrid"
    )

    # ==========================================================================
    # MOCK NOTIFICATIONS
    # ==========================================================================

    notifications_mock: bool = Field(
        default=False,
        description="Use the mock notification service instead of Twilio/SendGrid"
    )
    notifications_mock_failure_rate: float = Field(
        default=0.0,
        ge=0,
        le=1,
        description="Share of mock sends that fail with a simulated provider error"
    )

    # ==========================================================================
    # SUPPORT CHATBOT
    # ==========================================================================

    chat_typing_delay_seconds: float = Field(
        default=1.0,
        ge=0,
        description="Simulated typing delay before the bot replies"
    )
    chat_max_sessions: int = Field(
        default=1000,
        ge=1,
        description="Maximum number of open chat panels kept in memory"
    )

    # ==========================================================================
    # ADMIN SESSION
    # ==========================================================================

    admin_username: str = Field(
        default="admin",
        description="Admin dashboard username"
    )
    admin_password: Optional[str] = Field(
        default=None,
        description="Admin dashboard password (login disabled when unset)"
    )
    admin_session_filename: str = Field(
        default="admin_session.json",
        description="File holding the persisted admin login flag"
    )
    admin_session_lock_timeout: int = Field(
        default=10,
        description="Seconds to wait for the admin session file lock"
    )

    # ==========================================================================
    # BUSINESS CONFIGURATION
    # ==========================================================================

    restaurant_name: str = Field(
        default="Spicy Biryani",
        description="Restaurant display name"
    )
    restaurant_phone: str = Field(
        default="+91 9390492316",
        description="Restaurant contact number"
    )

    # ==========================================================================
    # FILE STORAGE
    # ==========================================================================

    data_directory: str = Field(
        default="data",
        description="Directory for data files"
    )

    # ==========================================================================
    # VALIDATORS
    # ==========================================================================

    @field_validator("env_mode", mode="before")
    @classmethod
    def validate_env_mode(cls, v: str) -> EnvironmentMode:
        """Convert string to EnvironmentMode enum."""
        if isinstance(v, EnvironmentMode):
            return v
        try:
            return EnvironmentMode(v.lower())
        except ValueError:
            valid = [e.value for e in EnvironmentMode]
            raise ValueError(f"Invalid env_mode. Must be one of: {valid}")

    # ==========================================================================
    # COMPUTED PROPERTIES
    # ==========================================================================

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.env_mode == EnvironmentMode.DEVELOPMENT

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.env_mode == EnvironmentMode.PRODUCTION

    @property
    def use_real_services(self) -> bool:
        """Check if real notification providers should be used."""
        return self.env_mode in (EnvironmentMode.PRODUCTION, EnvironmentMode.STAGING)

    @property
    def twilio_configured(self) -> bool:
        """All three Twilio values are required to send an SMS."""
        return bool(
            self.twilio_account_sid
            and self.twilio_auth_token
            and self.twilio_phone_number
        )

    @property
    def sendgrid_configured(self) -> bool:
        return bool(self.sendgrid_api_key)

    @property
    def admin_session_path(self) -> Path:
        return Path(self.data_directory) / self.admin_session_filename

    # ==========================================================================
    # VALIDATION METHODS
    # ==========================================================================

    def validate_production_config(self) -> list[str]:
        """
        Validate that all required production settings are configured.

        Returns:
            List of missing configuration keys (empty if all present)
        """
        missing = []

        if self.use_real_services:
            if not self.twilio_account_sid:
                missing.append("TWILIO_ACCOUNT_SID")
            if not self.twilio_auth_token:
                missing.append("TWILIO_AUTH_TOKEN")
            if not self.twilio_phone_number:
                missing.append("TWILIO_PHONE_NUMBER")
            if not self.sendgrid_api_key:
                missing.append("SENDGRID_API_KEY")

        return missing


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached application settings.

    Uses LRU cache so settings are loaded only once and stay consistent
    across the application lifecycle.

    Returns:
        Settings: Configured application settings

    Example:
        >>> settings = get_settings()
        >>> print(settings.env_mode)
        EnvironmentMode.DEVELOPMENT
    """
    return Settings()


# =============================================================================
# LOGGING CONFIGURATION
# =============================================================================

def setup_logging(level: int = logging.INFO) -> logging.Logger:
    """
    Configure application-wide logging.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR)

    Returns:
        Configured root logger
    """
    settings = get_settings()

    if settings.debug:
        level = logging.DEBUG

    log_format = "%(asctime)s │ %(levelname)-8s │ %(name)-25s │ %(message)s"
    date_format = "%Y-%m-%d %H:%M:%S"

    logging.basicConfig(
        level=level,
        format=log_format,
        datefmt=date_format,
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    # Reduce noise from third-party libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("twilio.http_client").setLevel(logging.WARNING)

    return logging.getLogger("storefront")
