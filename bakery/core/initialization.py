"""Application initialization and setup.

This module handles the initialization tasks required before the application starts.
"""

from bakery.core.config.settings import settings
from bakery.core.logging import configure_logging


def initialize_application() -> None:
    """Configure logging from settings before the application is built."""
    configure_logging(log_level=settings.LOG_LEVEL, json_logs=settings.LOG_JSON)
