"""
Data models for the Stateset Methods SDK.

This module defines the per-call value objects passed between the request
layer and the transport, and the tagged response type produced for
lifecycle command endpoints.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Dict, Any, Type, Protocol, runtime_checkable

from .constants import Headers, HttpMethods, ErrorMessages
from .exceptions import StatesetConfigurationError, StatesetError, UnexpectedStatusError


def _default_option_headers() -> Dict[str, str]:
    return {
        Headers.IDEMPOTENCY_KEY: "",
        Headers.ACCOUNT: "",
        Headers.VERSION: "",
    }


@dataclass
class CallOptions:
    """
    Options resolved from the trailing arguments of an API method call.

    Attributes:
        auth: Bearer token overriding the client's API key for this call
        headers: Idempotency-Key, Stateset-Account and Stateset-Version;
            always present, empty string when unset
        max_network_retries: Retry budget handed to the transport (None
            means the client default)
        timeout: Per-request timeout in milliseconds (0 means client default)
        host: Base URL override for this call
    """
    auth: Optional[str] = None
    headers: Dict[str, str] = field(default_factory=_default_option_headers)
    max_network_retries: Optional[int] = None
    timeout: int = 0
    host: str = ""

    @property
    def settings(self) -> Dict[str, int]:
        """Transport settings in the shape the request config carries them."""
        return {
            "maxNetworkRetries": self.max_network_retries or 0,
            "timeout": self.timeout,
        }

    def request_headers(self) -> Dict[str, str]:
        """Headers to send on the wire (empty values dropped)."""
        return {name: value for name, value in self.headers.items() if value}


@dataclass(frozen=True)
class MethodSpec:
    """
    Static descriptor of an API operation.

    Exactly one of ``path`` (relative to the resource path) or
    ``full_path`` (absolute) may be set. Neither set means the resource
    path itself.

    Attributes:
        method: HTTP verb
        path: Path template relative to the resource
        full_path: Absolute path template
        method_type: 'list' or 'search' to enable auto-pagination
    """
    method: str = HttpMethods.GET
    path: Optional[str] = None
    full_path: Optional[str] = None
    method_type: Optional[str] = None

    def __post_init__(self):
        if self.path and self.full_path:
            raise StatesetConfigurationError(
                ErrorMessages.PATH_AND_FULL_PATH.format(path=self.path, full_path=self.full_path)
            )
        if self.method.upper() not in HttpMethods.ALL:
            raise StatesetConfigurationError(f"Unsupported HTTP method: {self.method}")
        object.__setattr__(self, "method", self.method.upper())


@dataclass
class TransportResponse:
    """
    Response returned by a transport.

    Attributes:
        data: Decoded JSON body (None for empty bodies)
        status: HTTP status code
        headers: Response headers
    """
    data: Any = None
    status: int = 200
    headers: Dict[str, str] = field(default_factory=dict)


@runtime_checkable
class Transport(Protocol):
    """
    Capability the request layer needs from an HTTP client.

    ``config`` carries ``method``, ``url``, ``data``, ``headers``,
    ``params``, ``timeout`` (seconds) and ``max_network_retries``.
    """

    def request(self, config: Dict[str, Any]) -> TransportResponse:
        ...


def lower_camel(status: str) -> str:
    """
    Convert an upper snake status name to its lowerCamel discriminant.

    Examples:
        >>> lower_camel('SHIPPED')
        'shipped'
        >>> lower_camel('IN_PROGRESS')
        'inProgress'
    """
    head, *rest = status.lower().split("_")
    return head + "".join(part.capitalize() for part in rest)


@dataclass(frozen=True)
class TaggedResponse:
    """
    Result of a lifecycle command: the entity with its narrowed status.

    ``status`` is a member of the resource's status enumeration, so callers
    can match on it directly. ``to_dict`` renders the wire-compatible shape
    with a single ``<lowerCamel(status)>: True`` discriminant.

    Attributes:
        id: Entity identifier
        object: Resource kind literal (e.g. 'packinglist')
        status: Status enum member
        data: The full entity payload as returned by the API
    """
    id: Any
    object: str
    status: Enum
    data: Dict[str, Any] = field(default_factory=dict, compare=False)

    @property
    def discriminant(self) -> str:
        """Name of the boolean flag that marks this status."""
        return lower_camel(self.status.name)

    def is_status(self, status: Enum) -> bool:
        """Check whether the response carries the given status."""
        return self.status is status

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary in the tagged wire shape."""
        return {
            "id": self.id,
            "object": self.object,
            "status": self.status.value,
            self.discriminant: True,
        }


def map_to_tagged(
    raw_status: Any,
    entity: Dict[str, Any],
    object_kind: str,
    status_enum: Type[Enum],
) -> TaggedResponse:
    """
    Map a raw API entity onto a TaggedResponse.

    Args:
        raw_status: Status string returned by the API
        entity: Entity payload (must carry ``id``)
        object_kind: Resource kind literal
        status_enum: Enumeration of the resource's statuses

    Returns:
        TaggedResponse for the matched status

    Raises:
        UnexpectedStatusError: If the status is not in the enumeration
    """
    try:
        status = status_enum(raw_status)
    except ValueError:
        raise UnexpectedStatusError(
            ErrorMessages.UNEXPECTED_STATUS.format(object_kind=object_kind, status=raw_status),
            object_kind=object_kind,
            status=raw_status,
        ) from None

    return TaggedResponse(
        id=entity.get("id"),
        object=object_kind,
        status=status,
        data=dict(entity),
    )


class CommandResponseMapper:
    """
    Response mapper for lifecycle command endpoints.

    Command endpoints return the updated entity wrapped in an envelope
    (``{"update_packinglists_by_pk": {...}}``). Payloads carrying an
    ``error`` key are failures even when delivered with a 2xx status.

    Example:
        mapper = CommandResponseMapper("packinglist", PackingListStatus,
                                       "update_packinglists_by_pk")
        tagged = mapper(payload)
    """

    def __init__(self, object_kind: str, status_enum: Type[Enum], envelope_key: Optional[str] = None):
        self.object_kind = object_kind
        self.status_enum = status_enum
        self.envelope_key = envelope_key

    def __call__(self, payload: Any) -> TaggedResponse:
        if not isinstance(payload, dict):
            raise StatesetError(ErrorMessages.UNEXPECTED_FORMAT, details={"payload": payload})

        if payload.get("error"):
            raise StatesetError(str(payload["error"]), details={"payload": payload})

        entity = payload
        if self.envelope_key:
            entity = payload.get(self.envelope_key)
            if not isinstance(entity, dict):
                raise StatesetError(ErrorMessages.UNEXPECTED_FORMAT, details={"payload": payload})

        return self.map_entity(entity)

    def map_entity(self, entity: Dict[str, Any]) -> TaggedResponse:
        """Map a bare (unwrapped) entity."""
        return map_to_tagged(entity.get("status"), entity, self.object_kind, self.status_enum)
