"""Main application settings and configuration management.

This module composes all the application settings from the different modules
(app, auth, database, email, security) into a single, accessible `Settings`
class.

It loads settings from environment variables and .env files, validates them,
and provides a single `settings` object for use throughout the application.

Environment Support:
- Development: Uses .env, email test mode on, verification codes echoed
- Test: Uses .env.test, email test mode on
- Production: Uses .env.production, email delivery required
"""

import logging
import os
from pathlib import Path

from pydantic_settings import SettingsConfigDict

from .app import AppSettings
from .auth import AuthSettings
from .database import DatabaseSettings
from .email import EmailSettings
from .security import SecuritySettings

logger = logging.getLogger(__name__)
logging.getLogger("passlib").setLevel(logging.ERROR)

MIN_JWT_SECRET_LENGTH = 32


class Settings(AppSettings, AuthSettings, DatabaseSettings, EmailSettings, SecuritySettings):
    """The main settings class that aggregates all application configurations.

    Security Note:
        - JWT_SECRET, BREVO_API_KEY and GOOGLE_CLIENT_SECRET must come from the
          environment or an untracked .env file.
    Usage:
        - Access settings via the singleton instance `settings` throughout the application.
    """

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=True, extra="ignore"
    )

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self._set_environment_defaults(self.APP_ENV)

    def _set_environment_defaults(self, env: str) -> None:
        """Set environment-specific default values."""
        if env in ("development", "test"):
            self.EMAIL_TEST_MODE = True
        if env == "development":
            self.DEBUG = True
            self.LOG_JSON = False

    def validate_required_fields(self) -> None:
        """Validates secrets that have no safe default.

        Raises:
            ValueError: If the JWT secret is missing or too short, or if email
                delivery is not configured outside test mode.
        """
        secret = self.JWT_SECRET.get_secret_value()
        if len(secret) < MIN_JWT_SECRET_LENGTH:
            error_msg = f"JWT_SECRET must be at least {MIN_JWT_SECRET_LENGTH} characters long"
            logger.error(error_msg)
            raise ValueError(error_msg)

        if not self.EMAIL_TEST_MODE and not self.email_delivery_configured():
            error_msg = "BREVO_API_KEY and BREVO_SENDER_EMAIL are required when email test mode is off"
            logger.error(error_msg)
            raise ValueError(error_msg)


def create_settings() -> Settings:
    """Create settings instance with environment-specific configuration.

    Returns:
        Settings: Configured settings instance
    """
    env = os.getenv("APP_ENV", "development")

    env_files = {
        "development": ".env",
        "test": ".env.test",
        "production": ".env.production",
    }
    env_file = env_files.get(env, ".env")

    if env != "development" and Path(env_file).exists():
        logger.info("Loading environment configuration from %s", env_file)
        return Settings(_env_file=env_file)
    if not Path(".env").exists():
        logger.warning("No .env file found, using environment variables only (environment: %s)", env)
    return Settings()


# Create a singleton instance of the settings to be used across the application.
settings = create_settings()
settings.validate_required_fields()
