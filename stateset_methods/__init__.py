"""
Stateset Methods SDK

Python SDK core for the Stateset REST API: request dispatch, call option
resolution, path templating, auto-pagination and typed lifecycle responses.

Usage:
    from stateset_methods import StatesetClient

    client = StatesetClient(api_key="sk_test_123")

    order = client.orders.retrieve("ord_123")
    first_fifty = client.orders.list().auto_paging_to_array(limit=50)
    shipped = client.packing_lists.mark_shipped("pl_1", {"carrier": "UPS"})
"""

__version__ = "1.0.0"
__author__ = "Stateset Development Team"
__description__ = "Python SDK core for the Stateset REST API"

from .models import CallOptions, MethodSpec, TaggedResponse, TransportResponse, Transport
from .exceptions import (
    StatesetError,
    StatesetInvalidRequestError,
    StatesetAuthenticationError,
    StatesetPermissionError,
    StatesetNotFoundError,
    StatesetRateLimitError,
    StatesetAPIError,
    StatesetConnectionError,
    StatesetConfigurationError,
    ValidationError,
    UnexpectedStatusError,
    StatesetWarning,
    StatesetDeprecationWarning,
)
from .pagination import ListObject, CursorPage, OffsetPage
from .resources import (
    PackingListStatus,
    FulfillmentOrderStatus,
    QualityControlStatus,
    build_resource,
    stateset_method,
)
from .transport import RequestsTransport
from .config import configure_logging

# Import client
from .client import StatesetClient, make_request

# Main exports
__all__ = [
    "StatesetClient",
    "make_request",
    "RequestsTransport",
    "configure_logging",
    "CallOptions",
    "MethodSpec",
    "TaggedResponse",
    "TransportResponse",
    "Transport",
    "ListObject",
    "CursorPage",
    "OffsetPage",
    "PackingListStatus",
    "FulfillmentOrderStatus",
    "QualityControlStatus",
    "build_resource",
    "stateset_method",
    "StatesetError",
    "StatesetInvalidRequestError",
    "StatesetAuthenticationError",
    "StatesetPermissionError",
    "StatesetNotFoundError",
    "StatesetRateLimitError",
    "StatesetAPIError",
    "StatesetConnectionError",
    "StatesetConfigurationError",
    "ValidationError",
    "UnexpectedStatusError",
    "StatesetWarning",
    "StatesetDeprecationWarning",
]
