"""
Configuration settings for the Stateset Methods SDK.
Handles environment variable loading and logging setup.
"""

import os
import logging
from typing import Optional

from dotenv import load_dotenv

from .constants import (
    EnvVars,
    LogConfig,
    DEFAULT_BASE_URL,
    DEFAULT_TIMEOUT,
    DEFAULT_MAX_NETWORK_RETRIES,
)
from .validators import validate_integer

# Load environment variables from .env file
load_dotenv()


class Settings:
    """
    Configuration settings for the Stateset client.
    Values are read from the environment on every access.
    """

    @property
    def api_key(self) -> Optional[str]:
        """Get Stateset API key from environment."""
        return os.getenv(EnvVars.API_KEY) or None

    @property
    def base_url(self) -> str:
        """Get Stateset base URL from environment."""
        return os.getenv(EnvVars.BASE_URL) or DEFAULT_BASE_URL

    @property
    def timeout(self) -> int:
        """Get request timeout in seconds from environment."""
        return validate_integer(
            EnvVars.TIMEOUT,
            os.getenv(EnvVars.TIMEOUT) or None,
            DEFAULT_TIMEOUT,
            minimum=0
        )

    @property
    def max_network_retries(self) -> int:
        """Get retry budget from environment."""
        return validate_integer(
            EnvVars.MAX_NETWORK_RETRIES,
            os.getenv(EnvVars.MAX_NETWORK_RETRIES) or None,
            DEFAULT_MAX_NETWORK_RETRIES,
            minimum=0
        )

    @property
    def log_level(self) -> str:
        """Get log level from environment."""
        return os.getenv(EnvVars.LOG_LEVEL, LogConfig.DEFAULT_LOG_LEVEL)


def configure_logging(level: Optional[str] = None) -> logging.Logger:
    """
    Setup the package logger.

    Args:
        level: Log level name (defaults to STATESET_LOG_LEVEL or INFO)

    Returns:
        The configured package logger
    """
    level_name = (level or Settings().log_level).upper()
    package_logger = logging.getLogger(LogConfig.MAIN_LOGGER)
    package_logger.setLevel(getattr(logging, level_name, logging.INFO))

    if not package_logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LogConfig.DEFAULT_LOG_FORMAT))
        package_logger.addHandler(handler)

    return package_logger
