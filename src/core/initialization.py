"""Application initialization and setup.

This module handles the initialization tasks required before the application starts,
including environment variable loading, logging configuration, and i18n setup.
"""

from dotenv import load_dotenv

from src.core.config.settings import settings
from src.core.logging import configure_logging, logger
from src.utils.i18n import setup_i18n


def initialize_application() -> None:
    """Initialize the application with all necessary setup tasks.

    This function performs the following initialization tasks:
    1. Load environment variables for libraries that read ``os.environ``
    2. Configure logging
    3. Setup internationalization (i18n)
    """
    # Variables already set in the process environment take precedence
    load_dotenv(override=False)

    configure_logging(log_level=settings.LOG_LEVEL, json_logs=settings.LOG_JSON)

    setup_i18n()
    logger.info(
        "application_initialized",
        env=settings.APP_ENV,
        auth_provider=settings.AUTH_PROVIDER,
        rate_limit_enabled=settings.RATE_LIMIT_ENABLED,
    )
