"""
DRF serializers as the service-layer input validator.

Services receive loosely shaped dicts from views, management commands and
tests. They run them through a plain ``serializers.Serializer`` and turn
``serializer.errors`` into the flat ``{"field.path": [messages]}`` shape that
``ValidationError.for_fields`` carries to the HTTP boundary.
"""

from typing import Any, Dict, List, Optional

from rest_framework import serializers
from rest_framework.settings import api_settings

from utils.service_base import ValidationError

# Upper bound of the bigint price column
MAX_PRICE = 9223372036854775807


def flatten_errors(errors, prefix: str = "") -> Dict[str, List[str]]:
    """Flatten nested serializer errors to dotted field paths.

    Non-field errors of a nested serializer are reported on the nested field
    itself, e.g. ``{"contacts": {"non_field_errors": [...]}}`` becomes
    ``{"contacts": [...]}``.
    """
    flat: Dict[str, List[str]] = {}
    if isinstance(errors, dict):
        for key, value in errors.items():
            if key == api_settings.NON_FIELD_ERRORS_KEY:
                path = prefix or key
            else:
                path = f"{prefix}.{key}" if prefix else str(key)
            for nested_path, messages in flatten_errors(value, path).items():
                flat.setdefault(nested_path, []).extend(messages)
    elif isinstance(errors, (list, tuple)):
        if all(not isinstance(item, (dict, list, tuple)) for item in errors):
            if errors:
                flat[prefix or api_settings.NON_FIELD_ERRORS_KEY] = [str(item) for item in errors]
        else:
            for index, item in enumerate(errors):
                if item:
                    flat.update(flatten_errors(item, f"{prefix}.{index}" if prefix else str(index)))
    else:
        flat[prefix or api_settings.NON_FIELD_ERRORS_KEY] = [str(errors)]
    return flat


def collect_errors(serializer: serializers.Serializer, prefix: str = "") -> Dict[str, List[str]]:
    """Run validation and return flattened errors (empty when valid)."""
    if serializer.is_valid():
        return {}
    return flatten_errors(serializer.errors, prefix)


def validate_input(
    serializer_class,
    data: Any,
    message: str = "Invalid input",
    prefix: str = "",
    context: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """Validate ``data`` and return ``validated_data``.

    Raises:
        ValidationError: with field paths prefixed by ``prefix``.
    """
    serializer = serializer_class(data=data, context=context or {})
    errors = collect_errors(serializer, prefix)
    if errors:
        raise ValidationError.for_fields(errors, message)
    return dict(serializer.validated_data)


class IdentifierField(serializers.IntegerField):
    """Primary-key reference; booleans are not identifiers."""

    def to_internal_value(self, data):
        if isinstance(data, bool):
            self.fail("invalid")
        return super().to_internal_value(data)


class PriceField(serializers.IntegerField):
    """Whole positive price that fits the bigint column."""

    def __init__(self, **kwargs):
        kwargs.setdefault("min_value", 1)
        kwargs.setdefault("max_value", MAX_PRICE)
        super().__init__(**kwargs)

    def to_internal_value(self, data):
        if isinstance(data, bool):
            self.fail("invalid")
        return super().to_internal_value(data)
