"""Per-key policy: allow/deny lists, removal mode and empty keys."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from mongosanitize.engine.strings import matches_any, sanitize_string

if TYPE_CHECKING:
    from mongosanitize.config.models import SanitizeOptions


def is_key_allowed(key: Any, options: SanitizeOptions) -> bool:
    """Check the original key against the allow and deny lists. Deny wins."""
    if options.allowed_keys and key not in options.allowed_keys:
        return False
    return key not in options.denied_keys


def filter_key(key: Any, options: SanitizeOptions) -> Any | None:
    """Return the sanitized key, or None when the entry must be dropped."""
    if not is_key_allowed(key, options):
        return None
    sanitized_key = sanitize_string(key, options, is_value_context=False)
    if options.remove_matches and matches_any(key, options.patterns):
        return None
    if options.remove_empty and sanitized_key == "":
        return None
    return sanitized_key
