"""
Main client for the Stateset Methods SDK.

This module contains the request dispatcher shared by every resource
method and the StatesetClient class that holds credentials, the transport
and the resource namespaces.
"""

import logging
from typing import Optional, Dict, Any, Mapping

from .config import Settings
from .constants import Headers, HttpMethods, StatusCodes, ErrorMessages
from .exceptions import (
    StatesetError,
    StatesetAuthenticationError,
    create_exception_from_response,
    wrap_transport_error,
)
from .models import CallOptions, Transport
from .resources import (
    Orders,
    Shipments,
    Returns,
    Customers,
    Warranties,
    Inventory,
    PackingLists,
    FulfillmentOrders,
    QualityControls,
    Opportunities,
)
from .transport import RequestsTransport
from .utils import normalize_base_url, normalize_headers, remove_nullish
from .validators import validate_integer, validate_non_negative

# Set up logging
logger = logging.getLogger(__name__)


def _response_field(response: Any, name: str) -> Any:
    """Read ``data``/``status``/``headers`` from a mapping or an object."""
    if isinstance(response, Mapping):
        return response.get(name)
    return getattr(response, name, None)


def make_request(
    client: "StatesetClient",
    method: str,
    path: str,
    data: Optional[Dict[str, Any]] = None,
    headers: Optional[Dict[str, str]] = None,
    query_params: Optional[Dict[str, Any]] = None,
    options: Optional[CallOptions] = None,
) -> Any:
    """
    Dispatch one API call through the client's transport.

    GET and DELETE send ``data`` as query parameters; POST, PUT and PATCH
    send it as the JSON body. Exactly one transport call is made.

    Args:
        client: Client providing credentials, base URL and transport
        method: HTTP method
        path: Filled path relative to the base URL
        data: Request data
        headers: Extra headers for this call
        query_params: Extra query parameters
        options: Resolved call options

    Returns:
        Decoded response body

    Raises:
        StatesetError: Errors raised by the transport propagate unchanged;
            any other transport exception is wrapped with the original kept
            under ``details["original_error"]``; non-2xx responses map to
            the matching subclass
    """
    options = options or CallOptions()
    method = method.upper()

    base_url = normalize_base_url(options.host) if options.host else client.base_url
    url = f"{base_url}/{path.lstrip('/')}"

    request_headers = {
        Headers.AUTHORIZATION: f"Bearer {options.auth or client.api_key}",
        **options.request_headers(),
        **normalize_headers(headers),
    }

    params = remove_nullish(query_params)
    body = None
    if method in HttpMethods.WITH_BODY:
        body = data if data is not None else {}
    elif data:
        params.update(remove_nullish(data))

    # Per-call timeout is in milliseconds
    timeout = options.timeout / 1000 if options.timeout else client.timeout

    config = {
        "method": method,
        "url": url,
        "data": body,
        "headers": request_headers,
        "params": params,
        "timeout": timeout,
        "max_network_retries": (
            options.max_network_retries
            if options.max_network_retries is not None
            else client.max_network_retries
        ),
    }

    if client.enable_logging:
        logger.info(f"Making {method} request to /{path.lstrip('/')}")
        if body:
            logger.debug(f"Request payload: {body}")
        if params:
            logger.debug(f"Query params: {params}")

    try:
        response = client.transport.request(config)
    except StatesetError as e:
        logger.error(f"{method} /{path.lstrip('/')} failed: {e}")
        raise
    except Exception as e:
        error = wrap_transport_error(e)
        logger.error(f"{method} /{path.lstrip('/')} failed: {error}")
        raise error from e

    status = _response_field(response, "status")
    if not isinstance(status, int):
        raise StatesetError(ErrorMessages.UNEXPECTED_FORMAT, details={"response": response})
    data = _response_field(response, "data")

    if not StatusCodes.is_success(status):
        error = create_exception_from_response(status, data, headers=_response_field(response, "headers"))
        logger.error(f"{method} /{path.lstrip('/')} failed: {error}")
        raise error

    if client.enable_logging:
        logger.info(f"Response status: {status}")
        logger.debug(f"Response body: {data}")

    return data


class StatesetClient:
    """
    Client for the Stateset REST API.

    Resource namespaces are attributes of the client; each method on them
    sends exactly one request per call (list walks send one per page).

    Example:
        client = StatesetClient(api_key="sk_test_123")

        order = client.orders.retrieve("ord_123")
        packing_list = client.packing_lists.submit("pl_1")
        if packing_list.status is PackingListStatus.SUBMITTED:
            print("submitted")

        for order in client.orders.list({"status": "OPEN"}).auto_paging_iter():
            print(order["id"])
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        max_network_retries: Optional[int] = None,
        transport: Optional[Transport] = None,
        enable_logging: bool = True
    ):
        """
        Initialize Stateset client.

        Args:
            api_key: Stateset API key (or set STATESET_API_KEY env var)
            base_url: API base URL (or set STATESET_BASE_URL env var)
            timeout: Request timeout in seconds (or STATESET_TIMEOUT)
            max_network_retries: Default retry budget
                (or STATESET_MAX_NETWORK_RETRIES)
            transport: Object with ``request(config)`` returning anything
                with ``data``, ``status`` and ``headers`` (attributes or
                keys); defaults to RequestsTransport
            enable_logging: Enable request/response logging

        Raises:
            StatesetAuthenticationError: If no API key is available
            ValidationError: If timeout or max_network_retries is negative
        """
        settings = Settings()

        self.api_key = api_key or settings.api_key
        if not self.api_key:
            raise StatesetAuthenticationError(ErrorMessages.MISSING_API_KEY)

        self.base_url = normalize_base_url(base_url or settings.base_url)
        if timeout is not None:
            validate_non_negative(timeout, "timeout")
            self.timeout = timeout
        else:
            self.timeout = settings.timeout

        if max_network_retries is not None:
            self.max_network_retries = validate_integer("max_network_retries", max_network_retries, minimum=0)
        else:
            self.max_network_retries = settings.max_network_retries
        self.enable_logging = enable_logging
        self.transport = transport or RequestsTransport(timeout=self.timeout)

        self.orders = Orders(self)
        self.shipments = Shipments(self)
        self.returns = Returns(self)
        self.customers = Customers(self)
        self.warranties = Warranties(self)
        self.inventory = Inventory(self)
        self.packing_lists = PackingLists(self)
        self.fulfillment_orders = FulfillmentOrders(self)
        self.quality_controls = QualityControls(self)
        self.opportunities = Opportunities(self)

        if self.enable_logging:
            logger.info(f"Stateset client initialized - Base URL: {self.base_url}")

    def make_request(
        self,
        method: str,
        path: str,
        data: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
        query_params: Optional[Dict[str, Any]] = None,
        options: Optional[CallOptions] = None,
    ) -> Any:
        """Dispatch a request through this client. See ``make_request``."""
        return make_request(self, method, path, data, headers, query_params, options)

    def close(self) -> None:
        """Release the transport's connections."""
        close = getattr(self.transport, "close", None)
        if callable(close):
            close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
