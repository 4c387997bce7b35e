"""
Default HTTP transport for the Stateset Methods SDK.

RequestsTransport is the only place that talks to the network. It turns a
request config assembled by the request layer into a ``requests`` call,
retries transient failures up to the configured budget, and maps failures
onto the SDK exception hierarchy.
"""

import json
import time
import uuid
import logging
from typing import Optional, Dict, Any

import requests

from .constants import Headers, StatusCodes, RetryConfig, DEFAULT_TIMEOUT
from .exceptions import StatesetConnectionError, create_exception_from_response
from .models import TransportResponse

# Set up logging
logger = logging.getLogger(__name__)


def sanitize_headers(headers: Dict[str, str]) -> Dict[str, str]:
    """Copy of ``headers`` safe to write to logs."""
    sanitized = dict(headers)
    if Headers.AUTHORIZATION in sanitized:
        sanitized[Headers.AUTHORIZATION] = "[REDACTED]"
    return sanitized


class RequestsTransport:
    """
    Transport backed by a pooled ``requests.Session``.

    Example:
        transport = RequestsTransport(timeout=30)
        response = transport.request({
            "method": "GET",
            "url": "https://api.stateset.com/v1/orders",
            "headers": {"Authorization": "Bearer sk_test"},
        })
        print(response.status, response.data)
    """

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None,
        initial_delay: float = RetryConfig.DEFAULT_INITIAL_DELAY,
        max_delay: float = RetryConfig.DEFAULT_MAX_DELAY,
    ):
        """
        Initialize the transport.

        Args:
            timeout: Default request timeout in seconds
            session: Session to reuse (a new one is created otherwise)
            initial_delay: First retry delay in seconds
            max_delay: Upper bound for a single retry delay in seconds
        """
        self.timeout = timeout
        self.initial_delay = initial_delay
        self.max_delay = max_delay
        self.session = session or requests.Session()
        self.session.headers.update(Headers.DEFAULT_HEADERS)

    def _retry_delay(self, attempt: int, response: Optional[requests.Response] = None) -> float:
        if response is not None and response.headers.get(Headers.RETRY_AFTER):
            try:
                return min(float(response.headers[Headers.RETRY_AFTER]), self.max_delay)
            except ValueError:
                pass
        delay = self.initial_delay * (RetryConfig.DEFAULT_BACKOFF_FACTOR ** attempt)
        return min(delay, self.max_delay)

    @staticmethod
    def _decode(response: requests.Response) -> Any:
        if response.status_code == StatusCodes.NO_CONTENT or not response.content:
            return None
        try:
            return response.json()
        except (json.JSONDecodeError, ValueError):
            return response.text

    def request(self, config: Dict[str, Any]) -> TransportResponse:
        """
        Perform an HTTP request with retry logic and error handling.

        Args:
            config: Request config with ``method``, ``url`` and optional
                ``data`` (JSON body), ``params``, ``headers``, ``timeout``
                (seconds) and ``max_network_retries``

        Returns:
            TransportResponse with the decoded body

        Raises:
            StatesetError: Typed error for non-2xx responses
            StatesetConnectionError: When the API cannot be reached
        """
        method = config["method"].upper()
        url = config["url"]
        request_id = str(uuid.uuid4())
        headers = {**(config.get("headers") or {}), Headers.REQUEST_ID: request_id}
        timeout = config.get("timeout") or self.timeout
        max_retries = max(0, config.get("max_network_retries") or 0)

        logger.debug(f"HTTP request {request_id}: {method} {url} headers={sanitize_headers(headers)}")

        for attempt in range(max_retries + 1):
            try:
                response = self.session.request(
                    method=method,
                    url=url,
                    json=config.get("data"),
                    params=config.get("params") or None,
                    headers=headers,
                    timeout=timeout,
                )
            except requests.exceptions.Timeout as e:
                if attempt < max_retries:
                    logger.warning(f"Request timeout, retrying (attempt {attempt + 1})")
                    time.sleep(self._retry_delay(attempt))
                    continue
                raise StatesetConnectionError(
                    f"Request timeout after {timeout}s",
                    request_id=request_id,
                    details={"original_error": e},
                ) from e
            except requests.exceptions.ConnectionError as e:
                if attempt < max_retries:
                    logger.warning(f"Connection error, retrying (attempt {attempt + 1})")
                    time.sleep(self._retry_delay(attempt))
                    continue
                raise StatesetConnectionError(
                    f"Connection error: {e}",
                    request_id=request_id,
                    details={"original_error": e},
                ) from e
            except requests.exceptions.RequestException as e:
                raise StatesetConnectionError(
                    f"Request error: {e}",
                    request_id=request_id,
                    details={"original_error": e},
                ) from e

            logger.debug(f"HTTP response {request_id}: {response.status_code}")

            if response.status_code in RetryConfig.RETRYABLE_STATUS_CODES and attempt < max_retries:
                delay = self._retry_delay(attempt, response)
                logger.warning(f"Received {response.status_code}, retrying after {delay}s")
                time.sleep(delay)
                continue

            body = self._decode(response)
            response_headers = dict(response.headers)

            if not StatusCodes.is_success(response.status_code):
                raise create_exception_from_response(
                    response.status_code,
                    body,
                    headers=response_headers,
                    request_id=request_id,
                )

            return TransportResponse(data=body, status=response.status_code, headers=response_headers)

        # The loop always returns or raises on its last attempt
        raise StatesetConnectionError("All retry attempts failed", request_id=request_id)

    def close(self) -> None:
        """Close the underlying session."""
        self.session.close()
