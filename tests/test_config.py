"""
Unit tests for stateset_methods.config module.
"""

import pytest
from unittest.mock import patch
import logging
import sys
import os

# Add the parent directory to the path so we can import the module
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from stateset_methods.config import Settings, configure_logging
from stateset_methods.exceptions import ValidationError


class TestSettings:
    """Test environment backed settings."""

    @patch.dict(os.environ, {}, clear=True)
    def test_defaults(self):
        """Test default values with an empty environment."""
        settings = Settings()

        assert settings.api_key is None
        assert settings.base_url == "https://api.stateset.com/v1"
        assert settings.timeout == 60
        assert settings.max_network_retries == 0
        assert settings.log_level == "INFO"

    @patch.dict(os.environ, {
        "STATESET_API_KEY": "sk_env",
        "STATESET_TIMEOUT": "20",
        "STATESET_LOG_LEVEL": "DEBUG",
    }, clear=True)
    def test_environment_values(self):
        """Test values read from the environment."""
        settings = Settings()

        assert settings.api_key == "sk_env"
        assert settings.timeout == 20
        assert settings.log_level == "DEBUG"

    @patch.dict(os.environ, {"STATESET_MAX_NETWORK_RETRIES": "many"}, clear=True)
    def test_invalid_integer(self):
        """Test that a non-numeric setting is rejected."""
        with pytest.raises(ValidationError) as exc_info:
            Settings().max_network_retries

        assert exc_info.value.field == "STATESET_MAX_NETWORK_RETRIES"

    @patch.dict(os.environ, {"STATESET_MAX_NETWORK_RETRIES": "-1"}, clear=True)
    def test_negative_retries_rejected(self):
        """Test that a negative retry budget is rejected."""
        with pytest.raises(ValidationError) as exc_info:
            Settings().max_network_retries

        assert exc_info.value.field == "STATESET_MAX_NETWORK_RETRIES"

    @patch.dict(os.environ, {"STATESET_TIMEOUT": "-5"}, clear=True)
    def test_negative_timeout_rejected(self):
        """Test that a negative timeout is rejected."""
        with pytest.raises(ValidationError):
            Settings().timeout


class TestConfigureLogging:
    """Test package logger setup."""

    def test_level_and_handler(self):
        """Test that the package logger gets a level and a single handler."""
        package_logger = configure_logging("debug")
        try:
            configure_logging("warning")

            assert package_logger.name == "stateset_methods"
            assert package_logger.level == logging.WARNING
            assert len(package_logger.handlers) == 1
        finally:
            package_logger.handlers.clear()
            package_logger.setLevel(logging.NOTSET)
