"""Matching request paths against configured skip routes."""

from __future__ import annotations

import re
from collections.abc import Collection
from functools import lru_cache


def should_skip_route(url: str, skip_routes: Collection[str]) -> bool:
    """Return True when url matches an exact, wildcard or parameterized skip route.

    ``*`` matches any run of characters. Segments written as ``:name`` or
    ``{name}`` match any single path segment.
    """
    if not skip_routes:
        return False
    path = url.split("?", 1)[0].split("#", 1)[0]
    if path in skip_routes:
        return True
    for route in skip_routes:
        if "*" in route and _wildcard_regex(route).fullmatch(path):
            return True
        if _has_param_segment(route) and _segments_match(route, path):
            return True
    return False


@lru_cache(maxsize=256)
def _wildcard_regex(route: str) -> re.Pattern[str]:
    return re.compile(".*".join(re.escape(part) for part in route.split("*")))


def _is_param_segment(segment: str) -> bool:
    return segment.startswith(":") or (segment.startswith("{") and segment.endswith("}"))


def _has_param_segment(route: str) -> bool:
    return any(_is_param_segment(segment) for segment in route.split("/"))


def _segments_match(route: str, path: str) -> bool:
    route_parts = route.split("/")
    path_parts = path.split("/")
    if len(route_parts) != len(path_parts):
        return False
    return all(
        _is_param_segment(expected) or expected == actual
        for expected, actual in zip(route_parts, path_parts)
    )
