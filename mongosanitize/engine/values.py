"""Recursive sanitization of nested values."""

from __future__ import annotations

from collections.abc import Callable, Hashable, Mapping
from typing import TYPE_CHECKING, Any

from mongosanitize.engine.keys import filter_key
from mongosanitize.engine.kinds import CONTAINER_KINDS, SCALAR_KINDS, ValueKind, classify, is_empty
from mongosanitize.engine.rules import is_email
from mongosanitize.engine.strings import matches_any, sanitize_string
from mongosanitize.exceptions import InputTypeError

if TYPE_CHECKING:
    from mongosanitize.config.models import SanitizeOptions

_Handler = Callable[[Any, "SanitizeOptions", bool], Any]


def sanitize_value(value: Any, options: SanitizeOptions, is_value_context: bool = False) -> Any:
    """Sanitize any value according to its shape. The input is never mutated.

    Strings reached here are values, so they always get the email exemption
    and truncation; is_value_context is accepted for symmetry with
    sanitize_string.
    """
    handler = _HANDLERS.get(classify(value), _passthrough)
    return handler(value, options, is_value_context)


def sanitize_array(value: Any, options: SanitizeOptions) -> list[Any] | tuple[Any, ...]:
    """Sanitize every element, then apply filter_null and distinct in that order."""
    if classify(value) is not ValueKind.SEQUENCE:
        raise InputTypeError("Input must be an array")

    result = [sanitize_value(item, options, is_value_context=True) for item in value]

    array_options = options.array_options
    if array_options.filter_null:
        result = [item for item in result if item is not None]
    if array_options.distinct:
        result = _distinct(result)
    return tuple(result) if isinstance(value, tuple) else result


def sanitize_mapping(value: Any, options: SanitizeOptions) -> dict[Any, Any]:
    """Build a new dict from value with key policy and value sanitization applied."""
    if classify(value) is not ValueKind.MAPPING:
        raise InputTypeError("Input must be a mapping")

    result: dict[Any, Any] = {}
    for key, val in value.items():
        sanitized_key = filter_key(key, options)
        if sanitized_key is None:
            continue

        if is_email(val):
            result[sanitized_key] = val
            continue

        if options.remove_matches and matches_any(val, options.patterns):
            continue

        if not options.recursive and classify(val) in CONTAINER_KINDS:
            sanitized_value = val
        else:
            sanitized_value = options.value_strategy(val, options)

        if options.remove_empty and is_empty(sanitized_value):
            continue
        result[sanitized_key] = sanitized_value
    return result


def _passthrough(value: Any, options: SanitizeOptions, is_value_context: bool) -> Any:  # noqa: ARG001
    return value


_HANDLERS: dict[ValueKind, _Handler] = {
    ValueKind.STRING: lambda value, options, _ctx: sanitize_string(value, options, is_value_context=True),
    ValueKind.SEQUENCE: lambda value, options, _ctx: sanitize_array(value, options),
    ValueKind.MAPPING: lambda value, options, _ctx: sanitize_mapping(value, options),
}


def _distinct(items: list[Any]) -> list[Any]:
    if all(classify(item) in SCALAR_KINDS for item in items):
        key = _scalar_key
    else:
        key = _deep_key
    seen: set[Hashable] = set()
    unique: list[Any] = []
    for item in items:
        marker = key(item)
        if marker in seen:
            continue
        seen.add(marker)
        unique.append(item)
    return unique


def _scalar_key(item: Any) -> Hashable:
    # True == 1 in Python; keep them apart.
    return (isinstance(item, bool), item)


def _deep_key(item: Any) -> Hashable:
    kind = classify(item)
    if kind is ValueKind.MAPPING:
        entries = sorted(((repr(key), _deep_key(val)) for key, val in item.items()), key=lambda entry: entry[0])
        return (kind.value, tuple(entries))
    if kind is ValueKind.SEQUENCE:
        return (kind.value, tuple(_deep_key(val) for val in item))
    if kind in SCALAR_KINDS:
        return (kind.value, _scalar_key(item))
    return (kind.value, repr(item))
