"""Framework-agnostic discovery of declared path parameter names."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterator, Sequence
from typing import Any, Protocol

logger = logging.getLogger(__name__)

# ":name" segments and Starlette "{name}" / "{name:convertor}" placeholders.
PARAM_PATTERN = re.compile(r"\{([A-Za-z_][A-Za-z0-9_]*)(?::[A-Za-z_][A-Za-z0-9_]*)?\}|:([^/{}]+)")


class RouteTreeAdapter(Protocol):
    """Narrow view of a host framework's route tree."""

    def layers(self, tree: Any) -> Sequence[Any]:
        """Top-level layers of an application or router."""
        ...

    def route_path(self, layer: Any) -> str | None:
        """Declared path of a terminal route, or None when layer is not a route."""
        ...

    def children(self, layer: Any) -> Sequence[Any] | None:
        """Layers of a nested router, or None when layer is not a router."""
        ...

    def mount_path(self, layer: Any) -> str | None:
        """Literal mount prefix of a nested router, or None when it cannot be decoded."""
        ...


def extract_params(path: str) -> tuple[str, ...]:
    """Return parameter names declared in path, in order of appearance."""
    return tuple(braced or colon for braced, colon in PARAM_PATTERN.findall(path))


def discover_params(tree: Any, adapter: RouteTreeAdapter, base_path: str = "") -> frozenset[str]:
    """Collect every path parameter name declared anywhere in the route tree.

    The walk is an explicit-stack DFS. Each layer is visited once: a layer
    reached again (shared sub-router, cycle) contributes its cached names and
    is not walked a second time.
    """
    found: set[str] = set()
    cache: dict[int, tuple[str, ...]] = {}
    stack: list[tuple[Sequence[Any], str]] = [(adapter.layers(tree), base_path)]

    while stack:
        layers, base = stack.pop()
        for layer in layers:
            marker = id(layer)
            if marker in cache:
                found.update(cache[marker])
                continue

            route_path = adapter.route_path(layer)
            if route_path is not None:
                params = extract_params(base + route_path)
                cache[marker] = params
                found.update(params)
                continue

            children = adapter.children(layer)
            if children is None:
                cache[marker] = ()
                continue

            prefix = adapter.mount_path(layer)
            if prefix is None:
                logger.warning(
                    "could not decode mount path for %s; discovering its routes without a prefix",
                    type(layer).__name__,
                )
                prefix = ""
            params = extract_params(base + prefix)
            cache[marker] = params
            found.update(params)
            stack.append((children, base + prefix))

    logger.debug("discovered route params=%s", sorted(found))
    return frozenset(found)


def iter_routes(tree: Any, adapter: RouteTreeAdapter) -> Iterator[Any]:
    """Yield each terminal route of the tree once."""
    seen: set[int] = set()
    stack: list[Sequence[Any]] = [adapter.layers(tree)]
    while stack:
        for layer in stack.pop():
            if id(layer) in seen:
                continue
            seen.add(id(layer))
            if adapter.route_path(layer) is not None:
                yield layer
                continue
            children = adapter.children(layer)
            if children is not None:
                stack.append(children)
