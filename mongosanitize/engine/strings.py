"""Pattern application for single strings."""

from __future__ import annotations

import re
from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

from mongosanitize.engine.rules import is_email

if TYPE_CHECKING:
    from mongosanitize.config.models import SanitizeOptions


def apply_patterns(text: str, patterns: Iterable[re.Pattern[str]], replacement: str) -> str:
    """Replace every match of every pattern, in order. The replacement is literal."""
    for pattern in patterns:
        text = pattern.sub(lambda _match: replacement, text)
    return text


def matches_any(value: Any, patterns: Iterable[re.Pattern[str]]) -> bool:
    """Return True when value is a string that any pattern matches."""
    if not isinstance(value, str):
        return False
    return any(pattern.search(value) is not None for pattern in patterns)


def sanitize_string(value: Any, options: SanitizeOptions, is_value_context: bool = False) -> Any:
    """Sanitize one string; non-strings are returned unchanged.

    Patterns are applied first, then trim, lowercase and truncation. Email
    addresses are exempt and truncation applies only in value context. Keys
    are always pattern-cleaned and never truncated.
    """
    if not isinstance(value, str):
        return value
    if is_value_context and is_email(value):
        return value

    result = apply_patterns(value, options.patterns, options.replace_with)

    string_options = options.string_options
    if string_options.trim:
        result = result.strip()
    if string_options.lowercase:
        result = result.lower()
    if string_options.max_length is not None and is_value_context:
        result = result[: string_options.max_length]
    return result
