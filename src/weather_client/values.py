"""Payload value type shared by the JSON, form and query encoders."""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Union

JSONScalar = Union[str, int, float, bool, None]
JSONValue = Union[JSONScalar, list["JSONValue"], dict[str, "JSONValue"]]
Payload = Mapping[str, JSONValue]


def canonical_string(value: object) -> str | None:
    """Return the text form of a scalar value, or ``None`` when it has none.

    Strings pass through, booleans render as ``true``/``false`` and numbers use
    their shortest round-trip form. ``None``, containers and arbitrary objects
    have no canonical text and yield ``None``.
    """

    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            return None
        return repr(value)
    return None


def is_json_value(value: object) -> bool:
    """Check that ``value`` is made only of JSON-representable parts."""

    if value is None or isinstance(value, (str, bool, int)):
        return True
    if isinstance(value, float):
        return not (math.isnan(value) or math.isinf(value))
    if isinstance(value, (list, tuple)):
        return all(is_json_value(item) for item in value)
    if isinstance(value, Mapping):
        return all(isinstance(key, str) and is_json_value(item) for key, item in value.items())
    return False


__all__ = ["JSONScalar", "JSONValue", "Payload", "canonical_string", "is_json_value"]
