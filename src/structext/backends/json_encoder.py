"""
Compact JSON encoder.

Produces single-line JSON with no insignificant whitespace.

Tables (list, tuple, mapping) go through classify_table, so a mapping
keyed 1..N is written as an array and every other mapping as an object.
Object key order follows the mapping's iteration order.
"""

import math
from decimal import Decimal
from typing import Any

from structext.model import JsonArray, classify_table, is_table

_ESCAPES = (
    ("\\", "\\\\"),
    ('"', '\\"'),
    ("\n", "\\n"),
    ("\r", "\\r"),
    ("\t", "\\t"),
)


def encode_string(text: str) -> str:
    """Quote a string, escaping backslash, quote, newline, carriage return and tab."""
    for raw, escaped in _ESCAPES:
        text = text.replace(raw, escaped)
    return f'"{text}"'


def _encode_number(value: Any) -> str:
    if isinstance(value, float):
        if not math.isfinite(value):
            return "null"
        text = repr(value)
        if "e" in text or "E" in text:
            # always fixed-point; exponents are not valid decoder input
            text = format(Decimal(text), "f")
            if "." not in text:
                text += ".0"
        return text
    return str(value)


def encode_json(value: Any) -> str:
    """
    Serialize a value to compact JSON text.

    Args:
        value: None, bool, int, float, str, list, tuple or mapping
            (nested to any depth). Anything else is written as its str().

    Returns:
        JSON text

    Example:
        >>> encode_json({1: "a", 2: "b"})
        '["a","b"]'
        >>> encode_json({1: "a", 2: "b", 4: "d"})
        '{"1":"a","2":"b","4":"d"}'
    """
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return _encode_number(value)
    if isinstance(value, str):
        return encode_string(value)
    if is_table(value):
        table = classify_table(value)
        if isinstance(table, JsonArray):
            return "[" + ",".join(encode_json(item) for item in table.items) + "]"
        parts = [
            encode_string(str(key)) + ":" + encode_json(member)
            for key, member in table.members.items()
        ]
        return "{" + ",".join(parts) + "}"
    return encode_string(str(value))
