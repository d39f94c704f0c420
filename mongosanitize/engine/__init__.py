"""Recursive sanitization engine."""

from mongosanitize.engine.keys import filter_key, is_key_allowed
from mongosanitize.engine.kinds import ValueKind, classify, is_empty
from mongosanitize.engine.rules import DEFAULT_PATTERNS, default_pattern_rules, is_email
from mongosanitize.engine.strategy import CustomStrategy, DefaultStrategy, ValueStrategy, strategy_for
from mongosanitize.engine.strings import apply_patterns, matches_any, sanitize_string
from mongosanitize.engine.values import sanitize_array, sanitize_mapping, sanitize_value

__all__ = [
    "CustomStrategy",
    "DEFAULT_PATTERNS",
    "DefaultStrategy",
    "ValueKind",
    "ValueStrategy",
    "apply_patterns",
    "classify",
    "default_pattern_rules",
    "filter_key",
    "is_email",
    "is_empty",
    "is_key_allowed",
    "matches_any",
    "sanitize_array",
    "sanitize_mapping",
    "sanitize_string",
    "sanitize_value",
    "strategy_for",
]
