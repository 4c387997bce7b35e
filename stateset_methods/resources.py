"""
Resource classes for the Stateset Methods SDK.

Every API method is declared as a ``stateset_method`` on a
``StatesetResource`` subclass. Plain CRUD resources are built from the
BASIC_METHODS table with ``build_resource``; resources with lifecycle
commands are declared as classes and map command responses onto
TaggedResponse objects.

Positional arguments of a generated method are consumed in this order:

1. one value per path placeholder (in order of first appearance)
2. an optional data dict
3. an optional trailing options dict or API key string

Example:
    client.orders.retrieve("ord_1")
    client.orders.create({"customer_id": "cus_1"}, {"idempotencyKey": "k1"})
    client.inventory.release_reservation("inv_1", "res_9", "sk_other_key")
"""

from enum import Enum
from typing import Any, Callable, Dict, Iterable, Optional, Type
import logging

from .constants import HttpMethods, MethodTypes
from .models import MethodSpec, CommandResponseMapper
from .pagination import Page, CursorPage, OffsetPage, ListObject, make_page_class
from .utils import (
    emit_warning,
    get_data_from_args,
    get_options_from_args,
    join_url_parts,
    make_url_interpolator,
    unique_url_params,
)
from .validators import (
    OpportunityCreate,
    validate_id,
    validate_inventory_transfer,
    validate_model,
    validate_reservation,
)

# Set up logging
logger = logging.getLogger(__name__)


class StatesetResource:
    """
    Base class for API resource namespaces.

    Attributes:
        path: Resource path relative to the API base URL
        page_class: Page adapter used by list and search methods
    """

    path = ""
    page_class: Type[Page] = CursorPage

    def __init__(self, client):
        self._client = client

    def resource_path(self, *parts: str) -> str:
        """Join the resource path with extra segments."""
        return join_url_parts(self.path, *parts).rstrip("/")


def stateset_method(
    method: str = HttpMethods.GET,
    path: Optional[str] = None,
    full_path: Optional[str] = None,
    method_type: Optional[str] = None,
    response_mapper: Optional[Callable[[Any], Any]] = None,
    page_class: Optional[Type[Page]] = None,
    validator: Optional[Callable[[Dict[str, Any]], Any]] = None,
) -> Callable[..., Any]:
    """
    Build an API method from a method spec.

    Args:
        method: HTTP verb
        path: Path template relative to the resource path
        full_path: Absolute path template (exclusive with ``path``)
        method_type: 'list' or 'search' to return a ListObject
        response_mapper: Applied to the decoded body; for list and search
            methods it is applied to every item instead
        page_class: Page adapter overriding the resource default
        validator: Called with the data dict before anything is sent

    Returns:
        Function to be assigned as a resource class attribute

    Raises:
        StatesetConfigurationError: If both ``path`` and ``full_path`` are set

    The generated method raises ValidationError before anything is sent
    when a placeholder value is neither a non-empty string nor a positive
    integer, or when ``validator`` rejects the data.
    """
    spec = MethodSpec(method=method, path=path, full_path=full_path, method_type=method_type)
    template = spec.full_path or spec.path or ""
    url_params = unique_url_params(template)
    interpolate = make_url_interpolator(template)

    def api_method(self: StatesetResource, *args: Any) -> Any:
        call_args = list(args)

        url_data = {}
        for name in url_params:
            if call_args and not isinstance(call_args[0], dict):
                url_data[name] = call_args.pop(0)
                validate_id(url_data[name], field=name)

        data = get_data_from_args(call_args)
        options = get_options_from_args(call_args)
        if call_args:
            emit_warning(f"Ignoring unexpected arguments: {call_args!r}")

        if validator is not None:
            validator(data)

        filled = interpolate(url_data)
        request_path = filled if spec.full_path else self.resource_path(filled)
        logger.debug(f"{self.__class__.__name__}: {spec.method} {request_path}")

        def fetch(params: Dict[str, Any]) -> Any:
            return self._client.make_request(spec.method, request_path, data=params, options=options)

        payload = fetch(data)

        if spec.method_type in MethodTypes.PAGINATED:
            adapter = page_class or self.page_class

            def fetch_page(continuation: Dict[str, Any]) -> Page:
                params = {**data, **continuation}
                return adapter(fetch(params), params)

            return ListObject(adapter(payload, data), fetch_page, item_mapper=response_mapper)

        if response_mapper is not None:
            return response_mapper(payload)
        return payload

    api_method.method_spec = spec
    return api_method


BASIC_METHODS: Dict[str, Dict[str, Any]] = {
    "create": {"method": HttpMethods.POST},
    "list": {"method": HttpMethods.GET, "method_type": MethodTypes.LIST},
    "retrieve": {"method": HttpMethods.GET, "path": "{id}"},
    "update": {"method": HttpMethods.PUT, "path": "{id}"},
    "delete": {"method": HttpMethods.DELETE, "path": "{id}"},
}


def build_resource(
    class_name: str,
    path: str,
    operations: Iterable[str] = tuple(BASIC_METHODS),
    extra_methods: Optional[Dict[str, Dict[str, Any]]] = None,
    page_class: Type[Page] = CursorPage,
    doc: Optional[str] = None,
) -> Type[StatesetResource]:
    """
    Build a resource class from the method-spec table.

    Args:
        class_name: Name of the generated class
        path: Resource path
        operations: Names from BASIC_METHODS to include
        extra_methods: Additional ``name -> stateset_method kwargs`` entries
        page_class: Page adapter for list methods
        doc: Class docstring

    Returns:
        StatesetResource subclass

    Example:
        Orders = build_resource("Orders", "orders", ["create", "list", "retrieve"])
    """
    attrs: Dict[str, Any] = {"path": path, "page_class": page_class, "__doc__": doc}
    for name in operations:
        attrs[name] = stateset_method(**BASIC_METHODS[name])
    for name, method_kwargs in (extra_methods or {}).items():
        attrs[name] = stateset_method(**method_kwargs)
    return type(class_name, (StatesetResource,), attrs)


def _discard(payload: Any) -> None:
    return None


# Plain CRUD resources (raw payloads)

Orders = build_resource(
    "Orders",
    "orders",
    extra_methods={
        "cancel": {"method": HttpMethods.POST, "path": "{id}/cancel"},
        "search": {"method": HttpMethods.POST, "path": "search", "method_type": MethodTypes.SEARCH},
    },
    doc="Orders API. Responses are returned as decoded JSON.",
)

Shipments = build_resource(
    "Shipments",
    "shipments",
    doc="Shipments API. Responses are returned as decoded JSON.",
)

Returns = build_resource(
    "Returns",
    "returns",
    extra_methods={
        "approve": {"method": HttpMethods.POST, "path": "{id}/approve"},
        "mark_received": {"method": HttpMethods.POST, "path": "{id}/receive"},
        "cancel": {"method": HttpMethods.POST, "path": "{id}/cancel"},
        "list_by_order": {
            "method": HttpMethods.GET,
            "full_path": "orders/{order_id}/returns",
            "method_type": MethodTypes.LIST,
        },
    },
    doc="Returns API. Responses are returned as decoded JSON.",
)

Customers = build_resource(
    "Customers",
    "customers",
    extra_methods={"metrics": {"method": HttpMethods.GET, "path": "metrics"}},
    doc="Customers API. Responses are returned as decoded JSON.",
)

Warranties = build_resource(
    "Warranties",
    "warranties",
    doc="Warranties API. Responses are returned as decoded JSON.",
)

Inventory = build_resource(
    "Inventory",
    "inventory",
    extra_methods={
        "transfer": {"method": HttpMethods.POST, "path": "transfer", "validator": validate_inventory_transfer},
        "reserve": {"method": HttpMethods.POST, "path": "{id}/reserve", "validator": validate_reservation},
        "release_reservation": {
            "method": HttpMethods.POST,
            "path": "{id}/release-reservation/{reservation_id}",
        },
        "low_stock_alerts": {"method": HttpMethods.GET, "path": "low-stock-alerts"},
    },
    doc=(
        "Inventory API. Responses are returned as decoded JSON. transfer and "
        "reserve require a non-negative quantity (transfer also needs "
        "from_location and to_location)."
    ),
)


# Lifecycle resources

class PackingListStatus(Enum):
    DRAFT = "DRAFT"
    SUBMITTED = "SUBMITTED"
    VERIFIED = "VERIFIED"
    SHIPPED = "SHIPPED"
    CANCELLED = "CANCELLED"


packing_list_mapper = CommandResponseMapper("packinglist", PackingListStatus, "update_packinglists_by_pk")


class PackingLists(StatesetResource):
    """
    Packing lists API.

    Every method except ``delete`` returns a TaggedResponse whose status is
    a PackingListStatus. Command endpoints answer with the updated entity
    under ``update_packinglists_by_pk``; reads return the bare entity.
    ``delete`` returns None.

    Example:
        packing_list = client.packing_lists.submit("pl_1")
        packing_list.to_dict()
        # {"id": "pl_1", "object": "packinglist", "status": "SUBMITTED", "submitted": True}
    """

    path = "packinglists"

    create = stateset_method(method=HttpMethods.POST, response_mapper=packing_list_mapper)
    list = stateset_method(method_type=MethodTypes.LIST, response_mapper=packing_list_mapper.map_entity)
    retrieve = stateset_method(path="{id}", response_mapper=packing_list_mapper.map_entity)
    update = stateset_method(method=HttpMethods.PUT, path="{id}", response_mapper=packing_list_mapper)
    delete = stateset_method(method=HttpMethods.DELETE, path="{id}", response_mapper=_discard)

    submit = stateset_method(method=HttpMethods.POST, path="{id}/submit", response_mapper=packing_list_mapper)
    verify = stateset_method(method=HttpMethods.POST, path="{id}/verify", response_mapper=packing_list_mapper)
    mark_shipped = stateset_method(method=HttpMethods.POST, path="{id}/ship", response_mapper=packing_list_mapper)
    cancel = stateset_method(method=HttpMethods.POST, path="{id}/cancel", response_mapper=packing_list_mapper)

    add_package = stateset_method(
        method=HttpMethods.POST, path="{id}/packages", response_mapper=packing_list_mapper
    )
    update_package = stateset_method(
        method=HttpMethods.PUT, path="{id}/packages/{package_number}", response_mapper=packing_list_mapper
    )
    remove_package = stateset_method(
        method=HttpMethods.DELETE, path="{id}/packages/{package_number}", response_mapper=packing_list_mapper
    )


class FulfillmentOrderStatus(Enum):
    OPEN = "OPEN"
    ALLOCATED = "ALLOCATED"
    PICKED = "PICKED"
    PACKED = "PACKED"
    SHIPPED = "SHIPPED"
    CANCELLED = "CANCELLED"


fulfillment_order_mapper = CommandResponseMapper(
    "fulfillmentorder", FulfillmentOrderStatus, "update_fulfillmentorders_by_pk"
)


class FulfillmentOrders(StatesetResource):
    """
    Fulfillment orders API.

    CRUD methods return decoded JSON. The lifecycle commands (allocate,
    pick, pack, ship, cancel) return a TaggedResponse with a
    FulfillmentOrderStatus.
    """

    path = "fulfillmentorders"

    create = stateset_method(method=HttpMethods.POST)
    list = stateset_method(method_type=MethodTypes.LIST)
    retrieve = stateset_method(path="{id}")
    update = stateset_method(method=HttpMethods.PUT, path="{id}")
    delete = stateset_method(method=HttpMethods.DELETE, path="{id}")

    allocate = stateset_method(method=HttpMethods.POST, path="{id}/allocate", response_mapper=fulfillment_order_mapper)
    pick = stateset_method(method=HttpMethods.POST, path="{id}/pick", response_mapper=fulfillment_order_mapper)
    pack = stateset_method(method=HttpMethods.POST, path="{id}/pack", response_mapper=fulfillment_order_mapper)
    ship = stateset_method(method=HttpMethods.POST, path="{id}/ship", response_mapper=fulfillment_order_mapper)
    cancel = stateset_method(method=HttpMethods.POST, path="{id}/cancel", response_mapper=fulfillment_order_mapper)


class QualityControlStatus(Enum):
    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    PASSED = "PASSED"
    FAILED = "FAILED"
    ON_HOLD = "ON_HOLD"


quality_control_mapper = CommandResponseMapper("quality_control", QualityControlStatus)


def map_quality_control(payload: Any) -> Any:
    """Map a command response, unwrapping an optional ``quality_control`` envelope."""
    if isinstance(payload, dict) and isinstance(payload.get("quality_control"), dict):
        payload = payload["quality_control"]
    return quality_control_mapper(payload)


class QualityControls(StatesetResource):
    """
    Quality control inspections API.

    Reads return decoded JSON; ``list`` pages by offset over the
    ``quality_controls`` key. ``record_results``, ``start`` and ``hold``
    return a TaggedResponse with a QualityControlStatus.
    """

    path = "quality_controls"
    page_class = make_page_class(OffsetPage, "quality_controls")

    create = stateset_method(method=HttpMethods.POST)
    list = stateset_method(method_type=MethodTypes.LIST)
    retrieve = stateset_method(path="{id}")
    update = stateset_method(method=HttpMethods.PUT, path="{id}")
    delete = stateset_method(method=HttpMethods.DELETE, path="{id}")

    start = stateset_method(method=HttpMethods.POST, path="{id}/start", response_mapper=map_quality_control)
    hold = stateset_method(method=HttpMethods.POST, path="{id}/hold", response_mapper=map_quality_control)
    _record_results = stateset_method(
        method=HttpMethods.POST, path="{id}/results", response_mapper=map_quality_control
    )

    def record_results(self, quality_control_id: str, results: Dict[str, Any], *options: Any):
        """
        Record inspection results.

        Args:
            quality_control_id: Inspection ID
            results: Results payload (sent as ``{"results": ...}``)
            options: Optional options dict or API key

        Returns:
            TaggedResponse with the new QualityControlStatus
        """
        return self._record_results(quality_control_id, {"results": results}, *options)


def validate_opportunity(data: Dict[str, Any]) -> None:
    validate_model(OpportunityCreate, data)


class Opportunities(StatesetResource):
    """
    Sales opportunities API.

    ``create`` validates the payload (lead_id and assigned_to required,
    amount not negative, probability between 0 and 100) before anything is
    sent. ``list`` pages by offset over the ``opportunities`` key. All
    responses are decoded JSON.
    """

    path = "opportunities"
    page_class = make_page_class(OffsetPage, "opportunities")

    create = stateset_method(method=HttpMethods.POST, validator=validate_opportunity)
    list = stateset_method(method_type=MethodTypes.LIST)
    retrieve = stateset_method(path="{id}")
    update = stateset_method(method=HttpMethods.PUT, path="{id}")
    delete = stateset_method(method=HttpMethods.DELETE, path="{id}")

    _convert = stateset_method(method=HttpMethods.POST, path="{id}/convert")

    def convert_to_customer(self, opportunity_id: str, customer_id: str, *options: Any):
        """Convert a won opportunity into a customer record."""
        response = self._convert(opportunity_id, {"customer_id": customer_id}, *options)
        if isinstance(response, dict) and "opportunity" in response:
            return response["opportunity"]
        return response
