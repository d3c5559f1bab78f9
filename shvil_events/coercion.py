import json
import numbers
from collections.abc import Mapping
from datetime import date, datetime, time
from enum import Enum
from typing import Any, Dict, Set


def coerce_property_value(value: Any) -> str:
    """
    Converts a single property value to text.

    The first matching rule wins:
    1. text is kept as is
    2. integers render in base 10
    3. real numbers render with the default float conversion
    4. anything else goes through `describe_value`

    Kinds are judged by the value's type only, so 4.0 stays "4.0"
    and True never counts as an integer.
    """
    if isinstance(value, str):
        return value if type(value) is str else str.__str__(value)
    if isinstance(value, numbers.Integral) and not isinstance(value, bool):
        return str(int(value))
    if isinstance(value, numbers.Real) and not isinstance(value, bool):
        return str(float(value))
    return describe_value(value)


def describe_value(value: Any) -> str:
    """
    Deterministic text form for values that are not text or numbers.

    - None -> "null", booleans -> "true" / "false"
    - dates and times -> ISO-8601
    - enums -> description of their value
    - mappings and sequences -> compact JSON with sorted keys; a container
      that contains itself shows up as "[...]" or "{...}" at the repeat
    - anything else -> str(value)
    """
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, Enum):
        return coerce_property_value(value.value)
    if isinstance(value, (Mapping, list, tuple, set, frozenset)):
        return json.dumps(_to_json(value, set()), sort_keys=True, separators=(",", ":"))
    return str(value)


def _to_json(value: Any, seen: Set[int]) -> Any:
    """
    Recursively reduces a value to JSON-native types.
    `seen` holds the ids of the containers currently being walked.
    """
    if value is None or isinstance(value, (str, bool)):
        return coerce_property_value(value) if isinstance(value, str) else value
    if isinstance(value, numbers.Integral):
        return int(value)
    if isinstance(value, numbers.Real):
        return float(value)
    if not isinstance(value, (Mapping, list, tuple, set, frozenset)):
        # Dates, enums, decimals and custom objects end up as their text form
        return describe_value(value)

    if id(value) in seen:
        return "{...}" if isinstance(value, Mapping) else "[...]"
    seen.add(id(value))
    try:
        if isinstance(value, Mapping):
            return _mapping_to_json(value, seen)
        items = [_to_json(v, seen) for v in value]
        if isinstance(value, (set, frozenset)):
            items.sort(key=_json_text)
        return items
    finally:
        seen.discard(id(value))


def _mapping_to_json(value: Mapping, seen: Set[int]) -> Dict[str, Any]:
    """
    Keys become text with the same rules as values. When two keys end up
    with the same text, a real text key wins over a converted one; among
    converted keys the lowest (type name, value JSON) wins. The result does
    not depend on insertion order.
    """
    entries = []
    for key, item in value.items():
        converted = _to_json(item, seen)
        rank = (
            0 if type(key) is str else 1,
            type(key).__name__,
            _json_text(converted),
        )
        entries.append((coerce_property_value(key), rank, converted))

    result: Dict[str, Any] = {}
    for text, _, converted in sorted(entries, key=lambda e: (e[0], e[1])):
        result.setdefault(text, converted)
    return result


def _json_text(value: Any) -> str:
    return json.dumps(value, sort_keys=True)


def coerce_properties(properties: Mapping) -> Dict[str, str]:
    """Coerces every value of a property bag, one entry out per entry in."""
    return {str(key): coerce_property_value(value) for key, value in properties.items()}
