from __future__ import annotations

from enum import Enum
from typing import Any


class JsonKind(str, Enum):
    OBJECT = "object"
    ARRAY = "array"
    STRING = "string"
    NUMBER = "number"
    BOOL = "bool"
    NULL = "null"


def kind_of(value: Any) -> JsonKind:
    """Classify a decoded JSON value. Raises TypeError for anything json cannot produce."""
    if value is None:
        return JsonKind.NULL
    if isinstance(value, dict):
        return JsonKind.OBJECT
    if isinstance(value, list):
        return JsonKind.ARRAY
    if isinstance(value, str):
        return JsonKind.STRING
    # bool before number: bool is an int subclass
    if isinstance(value, bool):
        return JsonKind.BOOL
    if isinstance(value, (int, float)):
        return JsonKind.NUMBER
    raise TypeError(f"Not a JSON value: {type(value).__name__}")
