"""Starlette route tree adapter and path parameter sanitization hooks."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from starlette.routing import Host, Mount, Route, WebSocketRoute
from starlette.types import ASGIApp, Receive, Scope, Send

from mongosanitize.config.models import SanitizeOptions
from mongosanitize.engine.strings import sanitize_string
from mongosanitize.routing.discovery import discover_params, iter_routes
from mongosanitize.routing.skip import should_skip_route

logger = logging.getLogger(__name__)

_MOUNT_SUFFIX = "/(?P<path>.*)$"
_REGEX_SYNTAX = frozenset("()[]{}*+?|^$.")


def decode_mount_path(source: str) -> str | None:
    """Turn a compiled Mount regex back into its literal path.

    ``^/api/(?P<path>.*)$`` becomes ``/api`` and named groups become
    ``{name}``. Returns None for anything that is not a Starlette mount regex.
    """
    if not source.startswith("^") or not source.endswith(_MOUNT_SUFFIX):
        return None
    body = source[1 : -len(_MOUNT_SUFFIX)]
    decoded: list[str] = []
    index = 0
    while index < len(body):
        char = body[index]
        if char == "\\":
            if index + 1 >= len(body):
                return None
            decoded.append(body[index + 1])
            index += 2
            continue
        if body.startswith("(?P<", index):
            name_end = body.find(">", index)
            group_end = _group_end(body, name_end + 1) if name_end != -1 else None
            if group_end is None:
                return None
            decoded.append("{" + body[index + 4 : name_end] + "}")
            index = group_end + 1
            continue
        if char in _REGEX_SYNTAX:
            return None
        decoded.append(char)
        index += 1
    return "".join(decoded)


def _group_end(source: str, start: int) -> int | None:
    """Index of the parenthesis closing a group whose body starts at start."""
    depth = 1
    in_class = False
    index = start
    while index < len(source):
        char = source[index]
        if char == "\\":
            index += 2
            continue
        if in_class:
            in_class = char != "]"
        elif char == "[":
            in_class = True
        elif char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth == 0:
                return index
        index += 1
    return None


class StarletteRouteAdapter:
    """RouteTreeAdapter for Starlette and FastAPI applications and routers."""

    def layers(self, tree: Any) -> Sequence[Any]:
        return list(getattr(tree, "routes", None) or [])

    def route_path(self, layer: Any) -> str | None:
        if isinstance(layer, (Route, WebSocketRoute)):
            return layer.path
        return None

    def children(self, layer: Any) -> Sequence[Any] | None:
        if isinstance(layer, (Mount, Host)):
            return list(layer.routes)
        return None

    def mount_path(self, layer: Any) -> str | None:
        if isinstance(layer, Host):
            return ""
        regex = getattr(layer, "path_regex", None)
        if regex is None:
            return None
        return decode_mount_path(regex.pattern)


class ParamSanitizingApp:
    """ASGI wrapper sanitizing known path parameters before the route's app runs."""

    def __init__(self, app: ASGIApp, param_names: frozenset[str], options: SanitizeOptions) -> None:
        self.app = app
        self.param_names = param_names
        self.options = options

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        path_params = scope.get("path_params")
        if path_params and not should_skip_route(scope.get("path", ""), self.options.skip_routes):
            scope["path_params"] = {
                name: sanitize_string(value, self.options, is_value_context=True) if name in self.param_names else value
                for name, value in path_params.items()
            }
        await self.app(scope, receive, send)


def install_param_hooks(
    tree: Any,
    options: SanitizeOptions,
    adapter: StarletteRouteAdapter | None = None,
) -> frozenset[str]:
    """Discover parameter names once and wrap every route so they get sanitized.

    Installing again replaces the previous hook instead of stacking a second one.
    """
    adapter = adapter or StarletteRouteAdapter()
    names = discover_params(tree, adapter, options.router_base_path)
    wrapped = 0
    for route in iter_routes(tree, adapter):
        inner = route.app.app if isinstance(route.app, ParamSanitizingApp) else route.app
        route.app = ParamSanitizingApp(inner, names, options)
        wrapped += 1
    logger.info("installed path param sanitizers routes=%d params=%s", wrapped, sorted(names))
    return names
