"""
Constants and configuration for the Stateset Methods SDK.

This module contains option key tables, default values, header names,
status codes and other constants used throughout the SDK.
"""

from typing import Dict, Set

# API Configuration
DEFAULT_BASE_URL = "https://api.stateset.com/v1"
DEFAULT_TIMEOUT = 60  # seconds
DEFAULT_MAX_NETWORK_RETRIES = 0

# Option keys recognized in a trailing options dict
OPTIONS_KEYS: Set[str] = {
    "apiKey",
    "idempotencyKey",
    "accountId",
    "apiVersion",
    "maxNetworkRetries",
    "timeout",
    "host",
}

# Legacy option names and their canonical replacement
DEPRECATED_OPTIONS: Dict[str, str] = {
    "api_key": "apiKey",
    "idempotency_key": "idempotencyKey",
    "stateset_account": "accountId",
    "statesetAccount": "accountId",
    "stateset_version": "apiVersion",
    "statesetVersion": "apiVersion",
}


class MethodTypes:
    """Method classifications that change how a result is wrapped."""

    LIST = "list"
    SEARCH = "search"

    PAGINATED = {LIST, SEARCH}


class HttpMethods:
    """HTTP verbs accepted by method specs."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"

    ALL = {GET, POST, PUT, PATCH, DELETE}

    # Verbs whose data travels in the JSON body rather than the query string
    WITH_BODY = {POST, PUT, PATCH}


# HTTP Headers
class Headers:
    """Standard HTTP headers used by the SDK."""

    AUTHORIZATION = "Authorization"
    CONTENT_TYPE = "Content-Type"
    ACCEPT = "Accept"
    USER_AGENT = "User-Agent"
    REQUEST_ID = "X-Request-ID"
    RETRY_AFTER = "Retry-After"

    IDEMPOTENCY_KEY = "Idempotency-Key"
    ACCOUNT = "Stateset-Account"
    VERSION = "Stateset-Version"

    JSON_CONTENT_TYPE = "application/json"

    DEFAULT_HEADERS = {
        CONTENT_TYPE: JSON_CONTENT_TYPE,
        ACCEPT: JSON_CONTENT_TYPE,
        USER_AGENT: "stateset-methods-sdk/1.0.0",
    }


# Status Codes
class StatusCodes:
    """HTTP status codes."""

    OK = 200
    CREATED = 201
    ACCEPTED = 202
    NO_CONTENT = 204

    BAD_REQUEST = 400
    UNAUTHORIZED = 401
    FORBIDDEN = 403
    NOT_FOUND = 404
    TOO_MANY_REQUESTS = 429

    INTERNAL_SERVER_ERROR = 500
    BAD_GATEWAY = 502
    SERVICE_UNAVAILABLE = 503
    GATEWAY_TIMEOUT = 504

    @staticmethod
    def is_success(status_code: int) -> bool:
        """Check whether a status code is in the 2xx range."""
        return 200 <= status_code < 300


# Retry Configuration
class RetryConfig:
    """Retry logic configuration for the default transport."""

    DEFAULT_INITIAL_DELAY = 0.5
    DEFAULT_BACKOFF_FACTOR = 2
    DEFAULT_MAX_DELAY = 8.0

    # HTTP status codes that should trigger retries
    RETRYABLE_STATUS_CODES = {429, 500, 502, 503, 504}


# Environment Variable Names
class EnvVars:
    """Environment variable names."""

    API_KEY = "STATESET_API_KEY"
    BASE_URL = "STATESET_BASE_URL"
    TIMEOUT = "STATESET_TIMEOUT"
    MAX_NETWORK_RETRIES = "STATESET_MAX_NETWORK_RETRIES"
    LOG_LEVEL = "STATESET_LOG_LEVEL"


# Logging Configuration
class LogConfig:
    """Logging configuration constants."""

    DEFAULT_LOG_LEVEL = "INFO"
    DEFAULT_LOG_FORMAT = "[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s"

    MAIN_LOGGER = "stateset_methods"


# Common Error Messages
class ErrorMessages:
    """Common error messages."""

    PATH_AND_FULL_PATH = (
        "Method spec should not specify both 'path' ({path}) and 'full_path' ({full_path})."
    )
    DEPRECATED_CONFLICT = (
        "Both '{new_key}' and '{old_key}' were provided; please remove '{old_key}', which is deprecated."
    )
    DEPRECATED_KEY = "'{old_key}' is deprecated; use '{new_key}' instead."
    INVALID_OPTIONS = "Invalid options found ({keys}); ignoring."
    OPTIONS_IN_DATA = (
        "Options found in arguments ({keys}). Did you mean to pass an options object?"
    )
    MISSING_API_KEY = "Missing required parameter: api_key (or STATESET_API_KEY)"
    UNEXPECTED_STATUS = "Unexpected {object_kind} status: {status}"
    UNEXPECTED_FORMAT = "Unexpected response format"
    REQUIRED_FIELD = "{field} is required"
    NEGATIVE_VALUE = "{field} cannot be negative"
    PERCENTAGE_RANGE = "{field} must be between 0 and 100"
