"""
Input validation functions for the Stateset Methods SDK.

This module provides presence and range checks for request payloads and
the pydantic models used to validate create payloads before any request
is sent.
"""

from typing import Any, Dict, Iterable, Optional, Type
import logging

from pydantic import BaseModel, ConfigDict, ValidationError as PydanticValidationError, field_validator

from .constants import ErrorMessages
from .exceptions import ValidationError

# Set up logging
logger = logging.getLogger(__name__)


def validate_required_fields(data: Optional[Dict[str, Any]], fields: Iterable[str], strict: bool = True) -> bool:
    """
    Validate that every required field is present and non-empty.

    Args:
        data: Payload to check
        fields: Names of the required fields
        strict: Raise exception if invalid

    Returns:
        True if valid, False otherwise

    Raises:
        ValidationError: On the first missing field under strict validation
    """
    data = data or {}
    for name in fields:
        value = data.get(name)
        if value is None or value == "":
            if strict:
                raise ValidationError(
                    ErrorMessages.REQUIRED_FIELD.format(field=name),
                    field=name,
                    value=value
                )
            return False
    return True


def validate_non_negative(value: Any, field: str, strict: bool = True) -> bool:
    """
    Validate that a numeric value is zero or greater.

    None passes; use validate_required_fields for presence.
    """
    if value is None:
        return True

    is_valid = isinstance(value, (int, float)) and not isinstance(value, bool) and value >= 0
    if not is_valid and strict:
        raise ValidationError(
            ErrorMessages.NEGATIVE_VALUE.format(field=field),
            field=field,
            value=value
        )
    return is_valid


def validate_percentage(value: Any, field: str, strict: bool = True) -> bool:
    """
    Validate that a value lies within [0, 100].

    Args:
        value: Value to check (None passes)
        field: Field name for the error
        strict: Raise exception if invalid

    Returns:
        True if valid, False otherwise

    Raises:
        ValidationError: If out of range under strict validation
    """
    if value is None:
        return True

    is_valid = isinstance(value, (int, float)) and not isinstance(value, bool) and 0 <= value <= 100
    if not is_valid and strict:
        raise ValidationError(
            ErrorMessages.PERCENTAGE_RANGE.format(field=field),
            field=field,
            value=value
        )
    return is_valid


def validate_id(value: Any, field: str = "id", strict: bool = True) -> bool:
    """Validate a resource identifier (non-empty string or positive integer)."""
    if isinstance(value, str):
        is_valid = bool(value.strip())
    elif isinstance(value, int) and not isinstance(value, bool):
        is_valid = value > 0
    else:
        is_valid = False

    if not is_valid and strict:
        raise ValidationError(
            f"{field} must be a non-empty string or a positive integer",
            field=field,
            value=value
        )
    return is_valid


def validate_integer(
    name: str,
    value: Any,
    default: Optional[int] = None,
    minimum: Optional[int] = None
) -> int:
    """
    Validate an integer setting, falling back to ``default`` when unset.

    Args:
        name: Setting name for the error
        value: Value to check (numeric strings are converted)
        default: Value returned when ``value`` is None
        minimum: Smallest accepted value

    Returns:
        The integer value

    Raises:
        ValidationError: If the value (or missing value without default) is
            not an integer, or is below ``minimum``
    """
    if value is None and default is not None:
        return default

    # Environment values arrive as strings
    if isinstance(value, str):
        try:
            value = int(value.strip())
        except ValueError:
            raise ValidationError(f"{name} must be an integer", field=name, value=value) from None

    if not isinstance(value, int) or isinstance(value, bool):
        raise ValidationError(f"{name} must be an integer", field=name, value=value)

    if minimum is not None and value < minimum:
        raise ValidationError(f"{name} must be at least {minimum}", field=name, value=value)

    return value


class OpportunityCreate(BaseModel):
    """Pydantic model for validating opportunity create payloads"""

    model_config = ConfigDict(extra="allow")

    lead_id: str
    assigned_to: str
    amount: Optional[float] = None
    probability: Optional[float] = None

    @field_validator("lead_id", "assigned_to")
    @classmethod
    def must_not_be_blank(cls, v, info):
        if not v or not v.strip():
            raise ValueError(ErrorMessages.REQUIRED_FIELD.format(field=info.field_name))
        return v

    @field_validator("amount")
    @classmethod
    def amount_must_be_non_negative(cls, v):
        if not validate_non_negative(v, "amount", strict=False):
            raise ValueError(ErrorMessages.NEGATIVE_VALUE.format(field="amount"))
        return v

    @field_validator("probability")
    @classmethod
    def probability_in_range(cls, v):
        if not validate_percentage(v, "probability", strict=False):
            raise ValueError(ErrorMessages.PERCENTAGE_RANGE.format(field="probability"))
        return v


def validate_inventory_transfer(data: Optional[Dict[str, Any]]) -> None:
    """Check a stock transfer payload before it is sent."""
    validate_required_fields(data, ("from_location", "to_location", "quantity"))
    validate_non_negative(data["quantity"], "quantity")


def validate_reservation(data: Optional[Dict[str, Any]]) -> None:
    """Check a stock reservation payload before it is sent."""
    validate_required_fields(data, ("quantity",))
    validate_non_negative(data["quantity"], "quantity")


def validate_model(model: Type[BaseModel], data: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Validate a payload against a pydantic model.

    Args:
        model: Pydantic model class
        data: Payload to validate

    Returns:
        The payload unchanged

    Raises:
        ValidationError: With one entry per failed field in
            ``validation_errors``; ``field`` names the first failure
    """
    try:
        model.model_validate(data or {})
    except PydanticValidationError as e:
        errors = e.errors()
        messages = []
        for error in errors:
            location = ".".join(str(part) for part in error.get("loc", ()))
            messages.append(f"{location}: {error.get('msg')}")

        first = errors[0] if errors else {}
        field = ".".join(str(part) for part in first.get("loc", ())) or None
        logger.error(f"{model.__name__} validation failed: {'; '.join(messages)}")
        raise ValidationError(
            f"Invalid {model.__name__} payload",
            field=field,
            value=(data or {}).get(field) if field else None,
            validation_errors=messages
        ) from e

    return data or {}
