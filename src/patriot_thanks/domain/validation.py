"""Required-field rules for records submitted through forms or the API."""

from decimal import Decimal
from typing import Any, Dict, Mapping

from ..core.errors import ValidationFailure

BLANK_MESSAGE = "must not be blank"
REQUIRED_MESSAGE = "must not be null"


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _require_text(data: Mapping[str, Any], field_name: str, errors: Dict[str, str]) -> None:
    if _is_blank(data.get(field_name)):
        errors[field_name] = BLANK_MESSAGE


def business_errors(data: Mapping[str, Any]) -> Dict[str, str]:
    """Name must be non-blank and a business type must be chosen."""
    errors: Dict[str, str] = {}
    _require_text(data, "name", errors)
    if data.get("business_type_id") is None:
        errors["business_type_id"] = REQUIRED_MESSAGE
    return errors


def incentive_errors(data: Mapping[str, Any]) -> Dict[str, str]:
    """Title and description are required; a percentage must be within 0-100."""
    errors: Dict[str, str] = {}
    _require_text(data, "title", errors)
    _require_text(data, "description", errors)

    percentage = data.get("discount_percentage")
    if percentage is not None and not Decimal(0) <= Decimal(str(percentage)) <= Decimal(100):
        errors["discount_percentage"] = "must be between 0 and 100"
    return errors


def school_errors(data: Mapping[str, Any]) -> Dict[str, str]:
    """Name and domain are required."""
    errors: Dict[str, str] = {}
    _require_text(data, "name", errors)
    _require_text(data, "domain", errors)
    return errors


def ensure_valid(errors: Dict[str, str]) -> None:
    """Raise ValidationFailure when any field is invalid."""
    if errors:
        raise ValidationFailure(errors)
