"""
Unit tests for stateset_methods.exceptions module.

Tests the custom exception hierarchy, ensuring that exceptions are created correctly
and that `create_exception_from_response` and `wrap_transport_error` map HTTP
status codes and foreign exceptions to the appropriate exception types.
"""

import pytest
import sys
import os

# Add the parent directory to the path so we can import the module
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from stateset_methods.exceptions import (
    StatesetError,
    StatesetInvalidRequestError,
    StatesetAuthenticationError,
    StatesetPermissionError,
    StatesetNotFoundError,
    StatesetRateLimitError,
    StatesetAPIError,
    StatesetConnectionError,
    ValidationError,
    create_exception_from_response,
    wrap_transport_error,
)


class TestExceptionHierarchy:
    """Test the custom exception classes."""

    def test_stateset_error_base_class(self):
        """Test the base StatesetError class."""
        err = StatesetError(
            message="Base error",
            status_code=500,
            error_code="E100",
            details={"key": "value"}
        )

        assert "Base error" in str(err)
        assert "500" in str(err)
        assert "E100" in str(err)
        assert "value" in str(err)

        err_dict = err.to_dict()
        assert err_dict["type"] == "StatesetError"
        assert err_dict["message"] == "Base error"
        assert err_dict["error_type"] == "generic_error"

    def test_authentication_error(self):
        """Test the StatesetAuthenticationError class."""
        err = StatesetAuthenticationError()
        assert "Authentication failed" in str(err)
        assert err.error_type == "authentication_error"

        err = StatesetAuthenticationError("Invalid API key")
        assert "Invalid API key" in str(err)

    def test_rate_limit_error(self):
        """Test the StatesetRateLimitError class."""
        err = StatesetRateLimitError(retry_after=60)
        assert "Rate limit exceeded" in str(err)
        assert "Retry After: 60s" in str(err)

    def test_validation_error(self):
        """Test the ValidationError class."""
        err = ValidationError(
            "Invalid payload",
            field="amount",
            value=-5,
            validation_errors=["amount: cannot be negative"]
        )
        assert "Field: amount" in str(err)
        assert "Value: -5" in str(err)
        assert "cannot be negative" in str(err)

    def test_original_error_in_to_dict(self):
        """Test that a wrapped error is rendered as text."""
        err = StatesetConnectionError("down", details={"original_error": OSError("reset")})
        assert isinstance(err.original_error, OSError)
        assert "reset" in err.to_dict()["details"]["original_error"]


class TestGenerate:
    """Test building errors from raw error payloads."""

    @pytest.mark.parametrize("error_type,expected", [
        ("invalid_request_error", StatesetInvalidRequestError),
        ("api_error", StatesetAPIError),
        ("authentication_error", StatesetAuthenticationError),
        ("connection_error", StatesetConnectionError),
        ("not_found_error", StatesetNotFoundError),
        ("rate_limit_error", StatesetRateLimitError),
        ("permission_error", StatesetPermissionError),
    ])
    def test_known_types(self, error_type, expected):
        """Test that each type string builds its subclass."""
        err = StatesetError.generate({"type": error_type, "message": "boom", "code": "C1"})

        assert type(err) is expected
        assert err.message == "boom"
        assert err.error_code == "C1"
        assert err.error_type == error_type

    def test_unknown_type(self):
        """Test that an unknown type builds a generic error."""
        err = StatesetError.generate({"type": "mystery", "message": "boom"})

        assert type(err) is StatesetError
        assert err.message == "Unknown Error"


class TestCreateExceptionFromResponse:
    """Test the create_exception_from_response factory function."""

    def test_http_400_invalid_request_error(self):
        """Test mapping of HTTP 400 to StatesetInvalidRequestError."""
        response_data = {
            "error": {
                "type": "invalid_request_error",
                "message": "Missing order_id",
                "code": "missing_param",
            }
        }
        err = create_exception_from_response(400, response_data)
        assert isinstance(err, StatesetInvalidRequestError)
        assert err.message == "Missing order_id"
        assert err.error_code == "missing_param"
        assert err.status_code == 400

    def test_http_401_authentication_error(self):
        """Test mapping of HTTP 401 to StatesetAuthenticationError."""
        err = create_exception_from_response(401, {"error": "Invalid API key"})
        assert isinstance(err, StatesetAuthenticationError)
        assert err.message == "Invalid API key"

    def test_http_404_not_found_error(self):
        """Test mapping of HTTP 404 with a flat message body."""
        err = create_exception_from_response(404, {"message": "No such order", "detail": "ord_1"})
        assert isinstance(err, StatesetNotFoundError)
        assert err.message == "No such order"
        assert err.details["detail"] == "ord_1"

    def test_http_429_rate_limit_error(self):
        """Test mapping of HTTP 429 to StatesetRateLimitError."""
        err = create_exception_from_response(429, {}, headers={"Retry-After": "30"})
        assert isinstance(err, StatesetRateLimitError)
        assert err.retry_after == 30

    def test_http_500_api_error(self):
        """Test mapping of HTTP 500 to StatesetAPIError."""
        err = create_exception_from_response(500, {"message": "Server exploded"})
        assert isinstance(err, StatesetAPIError)
        assert err.api_response == {"message": "Server exploded"}

    def test_error_type_picks_class_for_unmapped_status(self):
        """Test that a typed error body decides the class for unlisted statuses."""
        response_data = {"error": {"type": "rate_limit_error", "message": "Slow down", "code": "rl"}}

        err = create_exception_from_response(
            420, response_data, headers={"Retry-After": "5"}, request_id="req_1"
        )

        assert isinstance(err, StatesetRateLimitError)
        assert err.message == "Slow down"
        assert err.error_code == "rl"
        assert err.status_code == 420
        assert err.retry_after == 5
        assert err.request_id == "req_1"

    def test_mapped_status_wins_over_error_type(self):
        """Test that a mapped status code keeps its class."""
        response_data = {"error": {"type": "api_error", "message": "No such order"}}

        err = create_exception_from_response(404, response_data)

        assert isinstance(err, StatesetNotFoundError)

    def test_other_4xx_maps_to_invalid_request(self):
        """Test that unlisted 4xx codes are invalid requests."""
        err = create_exception_from_response(422, None)
        assert isinstance(err, StatesetInvalidRequestError)
        assert err.message == "API request failed"


class TestWrapTransportError:
    """Test wrapping of foreign transport exceptions."""

    def test_status_attribute(self):
        """Test that a status attribute selects the error class."""
        original = RuntimeError("not found")
        original.status = 404

        err = wrap_transport_error(original)

        assert isinstance(err, StatesetNotFoundError)
        assert err.details["original_error"] is original
        assert err.original_error.status == 404

    def test_without_status(self):
        """Test that an exception without a status is a connection error."""
        original = OSError("connection reset")

        err = wrap_transport_error(original)

        assert isinstance(err, StatesetConnectionError)
        assert err.message == "connection reset"
        assert err.status_code is None

    def test_status_from_response(self):
        """Test reading the status from an attached response object."""
        original = RuntimeError("server error")
        original.response = type("Response", (), {"status_code": 503})()

        err = wrap_transport_error(original)

        assert isinstance(err, StatesetAPIError)
        assert err.status_code == 503
