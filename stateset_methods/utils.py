"""
Utility functions for the Stateset Methods SDK.

Provides URL template handling, call option resolution and other helpers
shared by the request layer and the resource classes.
"""

import re
import warnings
from typing import Any, Callable, Dict, List, Optional, Type
from urllib.parse import quote

from .constants import OPTIONS_KEYS, DEPRECATED_OPTIONS, Headers, ErrorMessages
from .exceptions import StatesetConfigurationError, StatesetWarning, StatesetDeprecationWarning
from .models import CallOptions

# Placeholder pattern used for extraction (identifiers only)
URL_PARAM_PATTERN = re.compile(r"\{(\w+)\}")
# Placeholder pattern used for substitution
URL_INTERPOLATION_PATTERN = re.compile(r"\{([\s\S]+?)\}")

# Characters left unescaped by encodeURIComponent
_URI_COMPONENT_SAFE = "-_.!~*'()"

_TEMPLATE_ESCAPES = {
    "\n": "\\n",
    "\r": "\\r",
    '"': '\\"',
    "\u2028": "\\u2028",
    "\u2029": "\\u2029",
}
_TEMPLATE_ESCAPE_PATTERN = re.compile("[\"\n\r\u2028\u2029]")


def emit_warning(message: str, category: Type[Warning] = StatesetWarning) -> None:
    """Surface a non-fatal problem through the warnings channel."""
    warnings.warn(f"Stateset: {message}", category, stacklevel=3)


def encode_uri_component(value: Any) -> str:
    """Percent-encode a value the way encodeURIComponent does."""
    return quote(str(value), safe=_URI_COMPONENT_SAFE)


def extract_url_params(path: str) -> List[str]:
    """
    Extract placeholder names from a path template.

    Args:
        path: Path template such as 'orders/{id}/items/{itemId}'

    Returns:
        Placeholder names in order of appearance, one per occurrence

    Examples:
        >>> extract_url_params('orders/{id}/items/{itemId}')
        ['id', 'itemId']
        >>> extract_url_params('orders')
        []
    """
    return URL_PARAM_PATTERN.findall(path or "")


def unique_url_params(path: str) -> List[str]:
    """Placeholder names in order of first appearance, duplicates removed."""
    seen: List[str] = []
    for name in extract_url_params(path):
        if name not in seen:
            seen.append(name)
    return seen


def make_url_interpolator(template: str) -> Callable[[Dict[str, Any]], str]:
    """
    Build a function that fills a path template.

    The template's own literal control characters are escaped once, up
    front. Each placeholder is replaced by its percent-encoded value; a
    placeholder without a value becomes an empty string.

    Args:
        template: Path template

    Returns:
        Callable taking a mapping of placeholder name to value
    """
    clean_template = _TEMPLATE_ESCAPE_PATTERN.sub(lambda m: _TEMPLATE_ESCAPES[m.group(0)], template)

    def interpolate(values: Dict[str, Any]) -> str:
        def substitute(match):
            value = values.get(match.group(1))
            if value is None or value == "":
                return ""
            return encode_uri_component(value)

        return URL_INTERPOLATION_PATTERN.sub(substitute, clean_template)

    return interpolate


def fill_url_template(template: str, values: Dict[str, Any]) -> str:
    """
    Fill a path template in one step.

    Examples:
        >>> fill_url_template('orders/{id}/items/{itemId}', {'id': 'A 1', 'itemId': 'B'})
        'orders/A%201/items/B'
    """
    return make_url_interpolator(template)(values)


def join_url_parts(*parts: str) -> str:
    """Join path segments, collapsing duplicate slashes."""
    joined = "/".join(part for part in parts if part)
    return re.sub(r"/{2,}", "/", joined)


def is_options_hash(obj: Any) -> bool:
    """
    Check whether an argument is an options dict.

    An options dict is a dict holding at least one recognized or deprecated
    option key.
    """
    if not isinstance(obj, dict) or not obj:
        return False
    return any(key in OPTIONS_KEYS or key in DEPRECATED_OPTIONS for key in obj)


def _is_non_negative_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


def get_data_from_args(args: List[Any]) -> Dict[str, Any]:
    """
    Pop the request data dict from the front of an argument list.

    Args:
        args: Remaining call arguments (consumed in place)

    Returns:
        The data dict, or an empty dict when the next argument is not data
    """
    if not args or not isinstance(args[0], dict):
        return {}

    if not is_options_hash(args[0]):
        return args.pop(0)

    arg_keys = list(args[0].keys())
    option_keys_in_args = [key for key in arg_keys if key in OPTIONS_KEYS]

    # A dict mixing option keys with data keys is most likely a mistake
    if option_keys_in_args and len(option_keys_in_args) != len(arg_keys):
        emit_warning(ErrorMessages.OPTIONS_IN_DATA.format(keys=", ".join(option_keys_in_args)))

    return {}


def get_options_from_args(args: List[Any]) -> CallOptions:
    """
    Resolve call options from the trailing argument of a call.

    A trailing string is a bearer token override. A trailing options dict
    is mapped onto CallOptions; deprecated key names are translated with a
    deprecation warning and unknown keys are ignored with a warning.
    Anything else leaves the defaults in place.

    Args:
        args: Call arguments (the options argument is popped in place)

    Returns:
        Resolved CallOptions

    Raises:
        StatesetConfigurationError: If a deprecated key and its replacement
            are both provided
    """
    opts = CallOptions()

    if not args:
        return opts

    arg = args[-1]
    if isinstance(arg, str):
        opts.auth = args.pop()
        return opts

    if not is_options_hash(arg):
        return opts

    params = dict(args.pop())

    extra_keys = [key for key in params if key not in OPTIONS_KEYS]
    if extra_keys:
        non_deprecated = []
        for key in extra_keys:
            new_key = DEPRECATED_OPTIONS.get(key)
            if new_key is None:
                non_deprecated.append(key)
                continue
            if new_key in params:
                raise StatesetConfigurationError(
                    ErrorMessages.DEPRECATED_CONFLICT.format(new_key=new_key, old_key=key)
                )
            emit_warning(
                ErrorMessages.DEPRECATED_KEY.format(old_key=key, new_key=new_key),
                StatesetDeprecationWarning,
            )
            params[new_key] = params.pop(key)
        if non_deprecated:
            emit_warning(ErrorMessages.INVALID_OPTIONS.format(keys=", ".join(non_deprecated)))

    if params.get("apiKey"):
        opts.auth = params["apiKey"]
    if params.get("idempotencyKey"):
        opts.headers[Headers.IDEMPOTENCY_KEY] = params["idempotencyKey"]
    if params.get("accountId"):
        opts.headers[Headers.ACCOUNT] = params["accountId"]
    if params.get("apiVersion"):
        opts.headers[Headers.VERSION] = params["apiVersion"]

    for key, attr in (("maxNetworkRetries", "max_network_retries"), ("timeout", "timeout")):
        if key not in params:
            continue
        if _is_non_negative_int(params[key]):
            setattr(opts, attr, params[key])
        else:
            emit_warning(f"'{key}' must be a non-negative integer; ignoring {params[key]!r}.")

    if params.get("host"):
        opts.host = params["host"]

    return opts


def remove_nullish(obj: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """Drop keys whose value is None."""
    if not obj:
        return {}
    return {key: value for key, value in obj.items() if value is not None}


def normalize_header(header: str) -> str:
    """
    Normalize a header name to Title-Case.

    Examples:
        >>> normalize_header('idempotency-key')
        'Idempotency-Key'
    """
    return "-".join(part[:1].upper() + part[1:].lower() for part in header.split("-"))


def normalize_headers(headers: Optional[Dict[str, str]]) -> Dict[str, str]:
    """Normalize every header name in a dict."""
    if not headers:
        return {}
    return {normalize_header(name): value for name, value in headers.items()}


def normalize_base_url(url: str) -> str:
    """Normalize base URL to include https:// if missing."""
    if not url.startswith(("http://", "https://")):
        url = f"https://{url}"
    return url.rstrip("/")
