"""
Custom exceptions for the Stateset Methods SDK.

This module defines the exception hierarchy raised by the request layer,
the default transport, the response state mapper and the validators,
plus the warning categories used for non-fatal option problems.
"""

from typing import Optional, Dict, Any, List, Type


class StatesetError(Exception):
    """
    Base exception class for all Stateset API related errors.

    Attributes:
        message (str): Error message
        status_code (Optional[int]): HTTP status code if applicable
        error_code (Optional[str]): API specific error code
        error_type (str): Stateset error type string (e.g. 'api_error')
        details (Dict[str, Any]): Additional error details. A wrapped
            transport failure is kept under ``details["original_error"]``.
    """

    default_type = "generic_error"

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        error_type: Optional[str] = None,
        request_id: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.error_code = error_code
        self.details = details or {}
        self.error_type = error_type or self.default_type
        self.request_id = request_id

    def __str__(self):
        error_parts = [f"{self.__class__.__name__}: {self.message}"]

        if self.status_code:
            error_parts.append(f"Status Code: {self.status_code}")

        if self.error_code:
            error_parts.append(f"Error Code: {self.error_code}")

        if self.request_id:
            error_parts.append(f"Request ID: {self.request_id}")

        if self.details:
            error_parts.append(f"Details: {self.details}")

        return " | ".join(error_parts)

    @property
    def original_error(self) -> Optional[BaseException]:
        """The transport exception this error wraps, if any."""
        return self.details.get("original_error")

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/serialization."""
        details = dict(self.details)
        if "original_error" in details:
            details["original_error"] = repr(details["original_error"])
        return {
            "type": self.__class__.__name__,
            "error_type": self.error_type,
            "message": self.message,
            "status_code": self.status_code,
            "error_code": self.error_code,
            "request_id": self.request_id,
            "details": details,
        }

    @classmethod
    def generate(cls, raw: Dict[str, Any]) -> "StatesetError":
        """
        Build the matching error subclass from a raw error payload.

        Args:
            raw: Error payload with at least ``type`` and ``message``

        Returns:
            StatesetError subclass instance. Unknown types produce a generic
            StatesetError with message 'Unknown Error'.
        """
        error_class = ERROR_TYPE_TO_EXCEPTION.get(raw.get("type", ""))
        if error_class is None:
            return StatesetError("Unknown Error", error_type="generic_error")

        return error_class(
            raw.get("message", ""),
            status_code=raw.get("statusCode") or raw.get("status_code"),
            error_code=raw.get("code"),
            request_id=raw.get("request_id"),
            details={k: raw[k] for k in ("detail", "path", "timestamp") if raw.get(k)},
        )


class StatesetInvalidRequestError(StatesetError):
    """Raised when the API rejects a request as malformed (400 and other 4xx)."""

    default_type = "invalid_request_error"

    def __init__(self, message: str = "Invalid request", **kwargs):
        super().__init__(message, **kwargs)


class StatesetAuthenticationError(StatesetError):
    """
    Raised when authentication fails.

    This typically occurs when:
    - No API key was configured
    - The API key is invalid or expired
    """

    default_type = "authentication_error"

    def __init__(self, message: str = "Authentication failed", **kwargs):
        super().__init__(message, **kwargs)


class StatesetPermissionError(StatesetError):
    """Raised when the API key lacks permission for an operation (403)."""

    default_type = "permission_error"

    def __init__(self, message: str = "Permission denied", **kwargs):
        super().__init__(message, **kwargs)


class StatesetNotFoundError(StatesetError):
    """Raised when the requested resource does not exist (404)."""

    default_type = "not_found_error"

    def __init__(self, message: str = "Resource not found", **kwargs):
        super().__init__(message, **kwargs)


class StatesetRateLimitError(StatesetError):
    """
    Raised when API rate limits are exceeded.

    Attributes:
        retry_after (Optional[int]): Seconds to wait before retrying
    """

    default_type = "rate_limit_error"

    def __init__(
        self,
        message: str = "Rate limit exceeded",
        retry_after: Optional[int] = None,
        **kwargs
    ):
        super().__init__(message, **kwargs)
        self.retry_after = retry_after

    def __str__(self):
        base_str = super().__str__()
        if self.retry_after:
            base_str += f" | Retry After: {self.retry_after}s"
        return base_str


class StatesetAPIError(StatesetError):
    """
    Raised when the API returns a server side error (5xx).

    Attributes:
        api_response (Optional[Dict]): Raw API response body
    """

    default_type = "api_error"

    def __init__(
        self,
        message: str = "API error occurred",
        api_response: Optional[Any] = None,
        **kwargs
    ):
        super().__init__(message, **kwargs)
        self.api_response = api_response


class StatesetConnectionError(StatesetError):
    """
    Raised when the API cannot be reached.

    This includes:
    - Connection timeouts
    - DNS resolution failures
    - Connections reset by the peer
    """

    default_type = "connection_error"

    def __init__(self, message: str = "Connection error occurred", **kwargs):
        super().__init__(message, **kwargs)


class StatesetConfigurationError(StatesetError):
    """
    Raised synchronously for programmer errors in SDK usage.

    This covers method specs declaring both ``path`` and ``full_path`` and
    option dicts that pass a deprecated key together with its replacement.
    """

    default_type = "configuration_error"


class ValidationError(StatesetError):
    """
    Raised when input validation fails, before any request is sent.

    Attributes:
        field (Optional[str]): The field that failed validation
        value (Any): The invalid value
        validation_errors (List[str]): List of validation error messages
    """

    default_type = "validation_error"

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        value: Any = None,
        validation_errors: Optional[List[str]] = None,
        **kwargs
    ):
        super().__init__(message, **kwargs)
        self.field = field
        self.value = value
        self.validation_errors = validation_errors or []

    def __str__(self):
        base_str = super().__str__()
        if self.field:
            base_str += f" | Field: {self.field}"
        if self.value is not None:
            base_str += f" | Value: {self.value}"
        if self.validation_errors:
            base_str += f" | Validation Errors: {', '.join(self.validation_errors)}"
        return base_str


class UnexpectedStatusError(StatesetError):
    """
    Raised when a command response carries a status outside the resource's
    enumeration.

    Attributes:
        object_kind (str): Resource kind literal (e.g. 'packinglist')
        status (Any): The unrecognized status value
    """

    default_type = "unexpected_status_error"

    def __init__(self, message: str, object_kind: str = "", status: Any = None, **kwargs):
        super().__init__(message, **kwargs)
        self.object_kind = object_kind
        self.status = status


class StatesetWarning(UserWarning):
    """Non-fatal problem with the arguments passed to an API method."""


class StatesetDeprecationWarning(StatesetWarning):
    """A deprecated option name was used."""


ERROR_TYPE_TO_EXCEPTION: Dict[str, Type[StatesetError]] = {
    "invalid_request_error": StatesetInvalidRequestError,
    "api_error": StatesetAPIError,
    "authentication_error": StatesetAuthenticationError,
    "connection_error": StatesetConnectionError,
    "not_found_error": StatesetNotFoundError,
    "rate_limit_error": StatesetRateLimitError,
    "permission_error": StatesetPermissionError,
}

# Exception mapping for HTTP status codes
HTTP_STATUS_TO_EXCEPTION: Dict[int, Type[StatesetError]] = {
    400: StatesetInvalidRequestError,
    401: StatesetAuthenticationError,
    403: StatesetPermissionError,
    404: StatesetNotFoundError,
    429: StatesetRateLimitError,
}


def exception_class_for_status(status_code: Optional[int]) -> Type[StatesetError]:
    """Pick the error class for an HTTP status code."""
    if status_code is None:
        return StatesetConnectionError
    if status_code in HTTP_STATUS_TO_EXCEPTION:
        return HTTP_STATUS_TO_EXCEPTION[status_code]
    if 400 <= status_code < 500:
        return StatesetInvalidRequestError
    if status_code >= 500:
        return StatesetAPIError
    return StatesetError


def create_exception_from_response(
    status_code: int,
    response_data: Optional[Any] = None,
    default_message: str = "API request failed",
    headers: Optional[Dict[str, str]] = None,
    request_id: Optional[str] = None,
) -> StatesetError:
    """
    Create appropriate exception based on HTTP status code and response data.

    Args:
        status_code: HTTP status code
        response_data: Decoded API response body
        default_message: Message used when the body carries none
        headers: Response headers (used for Retry-After)
        request_id: Request ID sent with the failed request

    Returns:
        Appropriate StatesetError subclass instance. Statuses without a
        dedicated class take the class named by the body's error ``type``
        when it is a known one.
    """
    message = default_message
    error_code = None
    error_type = None
    details: Dict[str, Any] = {}

    if isinstance(response_data, dict):
        # Format 1: {"error": {"type": ..., "message": ...}}
        error_info = response_data.get("error")
        if isinstance(error_info, dict):
            message = error_info.get("message", message)
            error_code = error_info.get("code")
            if isinstance(error_info.get("type"), str):
                error_type = error_info["type"]
            if error_info.get("detail"):
                details["detail"] = error_info["detail"]
        # Format 2: {"error": "text"}
        elif error_info:
            message = str(error_info)
        # Format 3: {"message": ..., "detail": ...}
        elif "message" in response_data:
            message = str(response_data["message"])
            error_code = response_data.get("code")
            if response_data.get("detail"):
                details["detail"] = response_data["detail"]
    elif isinstance(response_data, str) and response_data:
        message = response_data

    retry_after = None
    if headers and headers.get("Retry-After"):
        try:
            retry_after = int(headers["Retry-After"])
        except (TypeError, ValueError):
            retry_after = None

    # A typed error body decides the class unless the status code is mapped
    if status_code not in HTTP_STATUS_TO_EXCEPTION and error_type in ERROR_TYPE_TO_EXCEPTION:
        error = StatesetError.generate(
            {
                **error_info,
                "message": message,
                "status_code": status_code,
                "request_id": request_id or error_info.get("request_id"),
            }
        )
        if isinstance(error, StatesetRateLimitError):
            error.retry_after = retry_after
        if isinstance(error, StatesetAPIError):
            error.api_response = response_data
        return error

    exception_class = exception_class_for_status(status_code)

    if exception_class is StatesetRateLimitError:
        return exception_class(
            message=message,
            status_code=status_code,
            error_code=error_code,
            retry_after=retry_after,
            request_id=request_id,
            details=details or None,
        )

    if exception_class is StatesetAPIError:
        return exception_class(
            message=message,
            status_code=status_code,
            error_code=error_code,
            api_response=response_data,
            request_id=request_id,
            details=details or None,
        )

    return exception_class(
        message=message,
        status_code=status_code,
        error_code=error_code,
        request_id=request_id,
        details=details or None,
    )


def wrap_transport_error(error: BaseException, message: Optional[str] = None) -> StatesetError:
    """
    Wrap a foreign transport exception in the SDK error hierarchy.

    The original exception is kept under ``details["original_error"]`` so
    callers can introspect the root cause. The status code is read from a
    ``status``/``status_code`` attribute (or from ``error.response``) when
    the transport provides one.

    Args:
        error: Exception raised by the transport
        message: Override for the error message

    Returns:
        StatesetError subclass instance
    """
    status_code = getattr(error, "status_code", None) or getattr(error, "status", None)
    if status_code is None:
        response = getattr(error, "response", None)
        status_code = getattr(response, "status_code", None)
    if not isinstance(status_code, int):
        status_code = None

    exception_class = exception_class_for_status(status_code)
    return exception_class(
        message or str(error) or error.__class__.__name__,
        status_code=status_code,
        details={"original_error": error},
    )
