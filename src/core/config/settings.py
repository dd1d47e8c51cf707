"""Main application settings and configuration management.

This module composes all the application settings from the different modules
(app, provider, recovery) into a single, accessible `Settings` class.

It loads settings from environment variables and .env files, validates them,
and provides a single `settings` object for use throughout the application.

Environment Support:
- Development: Uses .env or .env.development, in-memory provider allowed
- Test: Uses .env.test, test mode enabled
- Staging: Uses .env.staging, Supabase provider expected
- Production: Uses .env.production, Supabase provider expected
"""

import logging
import os
from pathlib import Path

from pydantic_settings import SettingsConfigDict

from .app import AppSettings
from .provider import ProviderSettings
from .recovery import RecoverySettings

# Set up logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)
logging.getLogger("httpx").setLevel(logging.WARNING)


class Settings(AppSettings, ProviderSettings, RecoverySettings):
    """The main settings class that aggregates all application configurations.

    It inherits from all the specialized settings classes, providing a unified
    interface to all configuration parameters.

    Environment Support:
        - Automatically loads the correct .env file based on APP_ENV
        - Development/Test: in-memory provider and insecure cookies allowed
        - Staging/Production: the hosted provider must be configured

    Security Note:
        - SECRET_KEY and SUPABASE_ANON_KEY must never be logged or exposed.
    Usage:
        - Access settings via the singleton instance `settings` throughout the application.
    """

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=True, extra="allow"
    )

    def __init__(self, **kwargs):
        """Initialize settings with environment-specific configuration."""
        super().__init__(**kwargs)

        env = os.getenv("APP_ENV", self.APP_ENV)
        self._set_environment_defaults(env)

    def _set_environment_defaults(self, env: str) -> None:
        """Set environment-specific default values.

        Args:
            env: Environment name
        """
        if env == "test":
            self.TEST_MODE = True
            self.RECOVERY_COOKIE_SECURE = False
            logger.info("Test mode enabled for test environment")

        if env == "development":
            self.DEBUG = True
            self.RECOVERY_COOKIE_SECURE = False
            logger.info("Debug mode enabled for development environment")

        logger.info(f"Application running in {env} environment")
        logger.info(f"Auth provider: {self.AUTH_PROVIDER}")

    def validate_required_fields(self) -> None:
        """Validates that the production environment is not wired to dev fallbacks.

        Raises:
            ValueError: If the in-memory provider is selected outside
                development and test environments.
        """
        env = os.getenv("APP_ENV", self.APP_ENV)
        if self.AUTH_PROVIDER == "memory" and env not in ("development", "test"):
            error_msg = f"The in-memory auth provider cannot be used in the {env} environment"
            if self.TEST_MODE:
                logger.warning(f"Test mode: {error_msg}")
            else:
                logger.error(error_msg)
                raise ValueError(error_msg)
        else:
            logger.info("All required environment variables are set.")


def create_settings() -> Settings:
    """Create settings instance with environment-specific configuration.

    Returns:
        Settings: Configured settings instance
    """
    env = os.getenv("APP_ENV", "development")

    env_files = {
        "development": ".env",
        "test": ".env.test",
        "staging": ".env.staging",
        "production": ".env.production"
    }

    env_file = env_files.get(env, ".env")

    if env != "development" and Path(env_file).exists():
        logger.info(f"Loading environment configuration from {env_file}")
        settings_instance = Settings(_env_file=env_file)
    elif Path(".env").exists():
        logger.info(f"Loading environment configuration from .env (environment: {env})")
        settings_instance = Settings()
    else:
        logger.warning(f"No .env file found, using environment variables only (environment: {env})")
        settings_instance = Settings()

    return settings_instance

# Create a singleton instance of the settings to be used across the application.
settings = create_settings()
settings.validate_required_fields()
