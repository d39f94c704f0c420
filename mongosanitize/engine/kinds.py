"""Closed classification of the value shapes the sanitizer dispatches on."""

from __future__ import annotations

import numbers
from collections.abc import Mapping
from datetime import date, time
from enum import Enum
from typing import Any


class ValueKind(str, Enum):
    """Shape of a value as seen by the sanitizer."""

    NULL = "null"
    BOOL = "bool"
    NUMBER = "number"
    DATE = "date"
    STRING = "string"
    SEQUENCE = "sequence"
    MAPPING = "mapping"
    OPAQUE = "opaque"


SCALAR_KINDS = frozenset({ValueKind.NULL, ValueKind.BOOL, ValueKind.NUMBER, ValueKind.DATE, ValueKind.STRING})
CONTAINER_KINDS = frozenset({ValueKind.SEQUENCE, ValueKind.MAPPING})


def classify(value: Any) -> ValueKind:
    """Return the kind of value. bool is checked before numbers."""
    if value is None:
        return ValueKind.NULL
    if isinstance(value, bool):
        return ValueKind.BOOL
    if isinstance(value, numbers.Number):
        return ValueKind.NUMBER
    if isinstance(value, (date, time)):
        return ValueKind.DATE
    if isinstance(value, str):
        return ValueKind.STRING
    if isinstance(value, (list, tuple)):
        return ValueKind.SEQUENCE
    if isinstance(value, Mapping):
        return ValueKind.MAPPING
    return ValueKind.OPAQUE


def is_empty(value: Any) -> bool:
    """Return True for an empty string, mapping or sequence."""
    kind = classify(value)
    if kind is ValueKind.STRING:
        return value == ""
    if kind in CONTAINER_KINDS:
        return len(value) == 0
    return False
