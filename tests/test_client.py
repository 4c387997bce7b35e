"""
Unit tests for stateset_methods.client module.

Tests client initialization and the request dispatcher: URL and header
assembly, option handling and error propagation.
"""

import pytest
from types import SimpleNamespace
from unittest.mock import Mock, patch
import logging
import sys
import os

# Add the parent directory to the path so we can import the module
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from stateset_methods.client import StatesetClient, make_request
from stateset_methods.models import TransportResponse
from stateset_methods.transport import RequestsTransport
from stateset_methods.utils import get_options_from_args
from stateset_methods.exceptions import (
    StatesetError,
    StatesetAuthenticationError,
    StatesetNotFoundError,
    StatesetConnectionError,
    StatesetInvalidRequestError,
    ValidationError,
)


class TestStatesetClientInitialization:
    """Test client initialization and configuration."""

    @patch.dict(os.environ, {}, clear=True)
    def test_client_initialization_with_parameters(self):
        """Test successful client initialization with explicit parameters."""
        client = StatesetClient(api_key="sk_test", base_url="api.example.com/v1")

        assert client.api_key == "sk_test"
        assert client.base_url == "https://api.example.com/v1"
        assert client.timeout == 60
        assert client.max_network_retries == 0
        assert isinstance(client.transport, RequestsTransport)

    @patch.dict(os.environ, {
        "STATESET_API_KEY": "sk_env",
        "STATESET_BASE_URL": "https://env.stateset.com/v2/",
        "STATESET_TIMEOUT": "15",
        "STATESET_MAX_NETWORK_RETRIES": "2",
    }, clear=True)
    def test_client_initialization_with_env_vars(self):
        """Test client initialization using environment variables."""
        client = StatesetClient()

        assert client.api_key == "sk_env"
        assert client.base_url == "https://env.stateset.com/v2"
        assert client.timeout == 15
        assert client.max_network_retries == 2

    @patch.dict(os.environ, {}, clear=True)
    def test_client_initialization_missing_credentials(self):
        """Test that initialization fails without an API key."""
        with pytest.raises(StatesetAuthenticationError):
            StatesetClient()

    @patch.dict(os.environ, {}, clear=True)
    def test_default_base_url(self):
        """Test the default API base URL."""
        client = StatesetClient(api_key="sk_test")
        assert client.base_url == "https://api.stateset.com/v1"

    @patch.dict(os.environ, {"STATESET_API_KEY": "sk_env", "STATESET_MAX_NETWORK_RETRIES": "-1"}, clear=True)
    def test_negative_retries_from_env_rejected(self):
        """Test that a negative env retry budget fails at construction."""
        with pytest.raises(ValidationError):
            StatesetClient(transport=Mock())

    def test_negative_arguments_rejected(self):
        """Test that negative timeout and retry arguments are rejected."""
        with pytest.raises(ValidationError) as exc_info:
            StatesetClient(api_key="sk_test", max_network_retries=-1, transport=Mock())
        assert exc_info.value.field == "max_network_retries"

        with pytest.raises(ValidationError) as exc_info:
            StatesetClient(api_key="sk_test", timeout=-1, transport=Mock())
        assert exc_info.value.field == "timeout"

    def test_resource_namespaces(self):
        """Test that every resource namespace is attached."""
        client = StatesetClient(api_key="sk_test", transport=Mock())

        for name in (
            "orders", "shipments", "returns", "customers", "warranties", "inventory",
            "packing_lists", "fulfillment_orders", "quality_controls", "opportunities",
        ):
            assert getattr(client, name)._client is client

    def test_context_manager_closes_transport(self):
        """Test that leaving the context closes the transport."""
        transport = Mock()
        with StatesetClient(api_key="sk_test", transport=transport):
            pass
        transport.close.assert_called_once()


class TestMakeRequest:
    """Test the request dispatcher."""

    @pytest.fixture
    def transport(self):
        """Create mocked transport."""
        transport = Mock()
        transport.request.return_value = TransportResponse(data={"id": "ord_1"}, status=200)
        return transport

    @pytest.fixture
    def client(self, transport):
        """Create test client."""
        return StatesetClient(
            api_key="sk_test",
            base_url="https://api.stateset.com/v1",
            timeout=30,
            max_network_retries=0,
            transport=transport,
        )

    def test_get_sends_data_as_params(self, client, transport):
        """Test that GET data travels in the query string."""
        result = make_request(client, "get", "orders", data={"status": "OPEN", "skip": None})

        assert result == {"id": "ord_1"}
        config = transport.request.call_args.args[0]
        assert config["method"] == "GET"
        assert config["url"] == "https://api.stateset.com/v1/orders"
        assert config["params"] == {"status": "OPEN"}
        assert config["data"] is None
        assert config["headers"]["Authorization"] == "Bearer sk_test"
        assert config["timeout"] == 30
        assert config["max_network_retries"] == 0

    def test_post_sends_body(self, client, transport):
        """Test that POST data travels in the body."""
        make_request(client, "POST", "/orders", data={"customer_id": "c1"}, query_params={"expand": "items"})

        config = transport.request.call_args.args[0]
        assert config["url"] == "https://api.stateset.com/v1/orders"
        assert config["data"] == {"customer_id": "c1"}
        assert config["params"] == {"expand": "items"}

    def test_options_applied(self, client, transport):
        """Test auth override, option headers, timeout and host."""
        options = get_options_from_args([{
            "apiKey": "sk_other",
            "idempotencyKey": "idem_1",
            "timeout": 2500,
            "maxNetworkRetries": 3,
            "host": "eu.stateset.com/v1",
        }])

        make_request(client, "POST", "orders", data={}, options=options)

        config = transport.request.call_args.args[0]
        assert config["url"] == "https://eu.stateset.com/v1/orders"
        assert config["headers"]["Authorization"] == "Bearer sk_other"
        assert config["headers"]["Idempotency-Key"] == "idem_1"
        assert "Stateset-Account" not in config["headers"]
        assert config["timeout"] == 2.5
        assert config["max_network_retries"] == 3

    def test_extra_headers_normalized(self, client, transport):
        """Test that call headers are normalized and sent."""
        make_request(client, "GET", "orders", headers={"stateset-version": "2024-01-01"})

        config = transport.request.call_args.args[0]
        assert config["headers"]["Stateset-Version"] == "2024-01-01"

    def test_zero_retries_overrides_client_budget(self, transport):
        """Test that a per-call budget of 0 turns off client retries."""
        client = StatesetClient(api_key="sk_test", max_network_retries=3, transport=transport)

        make_request(client, "GET", "orders", options=get_options_from_args([{"maxNetworkRetries": 0}]))
        assert transport.request.call_args.args[0]["max_network_retries"] == 0

        make_request(client, "GET", "orders")
        assert transport.request.call_args.args[0]["max_network_retries"] == 3

    def test_single_transport_call(self, client, transport):
        """Test that one call makes exactly one transport call."""
        make_request(client, "GET", "orders")
        transport.request.assert_called_once()


class TestErrorPropagation:
    """Test how transport failures reach the caller."""

    @pytest.fixture
    def transport(self):
        """Create mocked transport."""
        return Mock()

    @pytest.fixture
    def client(self, transport):
        """Create test client."""
        return StatesetClient(api_key="sk_test", transport=transport)

    def test_foreign_error_wrapped_with_original(self, client, transport):
        """Test that a raw 404 exception is wrapped and kept as the original error."""
        original = Exception("Request failed with status code 404")
        original.status = 404
        transport.request.side_effect = original

        with pytest.raises(StatesetError) as exc_info:
            client.make_request("GET", "orders/missing")

        err = exc_info.value
        assert isinstance(err, StatesetNotFoundError)
        assert err.details["original_error"].status == 404
        assert err.__cause__ is original

    def test_foreign_error_without_status(self, client, transport):
        """Test wrapping of an exception carrying no status."""
        transport.request.side_effect = OSError("connection reset")

        with pytest.raises(StatesetConnectionError) as exc_info:
            client.make_request("GET", "orders")

        assert isinstance(exc_info.value.original_error, OSError)

    def test_stateset_error_not_rewrapped(self, client, transport):
        """Test that SDK errors propagate unchanged."""
        raised = StatesetNotFoundError("No such order", status_code=404)
        transport.request.side_effect = raised

        with pytest.raises(StatesetNotFoundError) as exc_info:
            client.make_request("GET", "orders/missing")

        assert exc_info.value is raised
        assert "original_error" not in exc_info.value.details

    def test_non_2xx_response_raises(self, client, transport):
        """Test that a non-2xx response from a custom transport raises."""
        transport.request.return_value = TransportResponse(
            data={"error": {"message": "Bad order"}}, status=400
        )

        with pytest.raises(StatesetInvalidRequestError, match="Bad order"):
            client.make_request("POST", "orders", data={})

    def test_custom_transport_object_response(self, client, transport):
        """Test a transport answering with any object carrying data and status."""
        transport.request.return_value = SimpleNamespace(data={"id": "ord_1"}, status=200, headers={})

        assert client.orders.retrieve("ord_1") == {"id": "ord_1"}

    def test_custom_transport_mapping_response(self, client, transport):
        """Test a transport answering with a plain dict."""
        transport.request.return_value = {"data": {"error": "gone"}, "status": 404, "headers": {}}

        with pytest.raises(StatesetNotFoundError, match="gone"):
            client.orders.retrieve("ord_1")

    def test_response_without_status(self, client, transport):
        """Test that a response without a status is rejected."""
        transport.request.return_value = {"data": {"id": "ord_1"}}

        with pytest.raises(StatesetError, match="Unexpected response format"):
            client.make_request("GET", "orders/ord_1")

    def test_error_logged(self, client, transport, caplog):
        """Test that failures are logged at ERROR before re-raising."""
        transport.request.side_effect = StatesetNotFoundError("No such order")

        with caplog.at_level(logging.ERROR, logger="stateset_methods.client"):
            with pytest.raises(StatesetNotFoundError):
                client.make_request("GET", "orders/missing")

        assert "No such order" in caplog.text


class TestLogging:
    """Test request logging."""

    def test_request_logged(self, caplog):
        """Test the INFO line for each request."""
        transport = Mock()
        transport.request.return_value = TransportResponse(data={}, status=200)
        client = StatesetClient(api_key="sk_test", transport=transport)

        with caplog.at_level(logging.INFO, logger="stateset_methods.client"):
            client.make_request("GET", "orders")

        assert "Making GET request to /orders" in caplog.text

    def test_logging_disabled(self, caplog):
        """Test that enable_logging=False silences INFO lines."""
        transport = Mock()
        transport.request.return_value = TransportResponse(data={}, status=200)
        client = StatesetClient(api_key="sk_test", transport=transport, enable_logging=False)

        with caplog.at_level(logging.INFO, logger="stateset_methods.client"):
            client.make_request("GET", "orders")

        assert "Making GET request" not in caplog.text
