"""Sanitization of named request sections."""

from __future__ import annotations

from collections.abc import Mapping, MutableMapping
from typing import Any

from mongosanitize.config.manager import build_options
from mongosanitize.config.models import SanitizeOptions
from mongosanitize.engine.kinds import is_empty
from mongosanitize.engine.values import sanitize_value

# Sections that hosts expose as live objects; they are refilled, never rebound.
LIVE_SECTIONS = frozenset({"query", "params"})


def handle_request(sections: MutableMapping[str, Any], options: SanitizeOptions) -> dict[str, Any]:
    """Sanitize each configured section of sections and write the results back.

    Returns a mapping of section name to sanitized value for the sections
    that were processed. Missing and empty sections are left alone.
    """
    sanitized: dict[str, Any] = {}
    for name in options.sanitize_objects:
        section = sections.get(name)
        if section is None or is_empty(section):
            continue
        original = dict(section) if isinstance(section, Mapping) else section
        result = sanitize_value(original, options)
        if name in LIVE_SECTIONS and isinstance(section, MutableMapping) and isinstance(result, Mapping):
            section.clear()
            section.update(result)
        else:
            sections[name] = result
        sanitized[name] = result
    return sanitized


def sanitize(value: Any, options: Mapping[str, Any] | SanitizeOptions | None = None, **kwargs: Any) -> Any:
    """Sanitize a single value with options built from the defaults."""
    return sanitize_value(value, build_options(options, **kwargs))
