"""Route parameter discovery and skip-route matching."""

from mongosanitize.routing.discovery import RouteTreeAdapter, discover_params, extract_params, iter_routes
from mongosanitize.routing.skip import should_skip_route
from mongosanitize.routing.starlette import (
    ParamSanitizingApp,
    StarletteRouteAdapter,
    decode_mount_path,
    install_param_hooks,
)

__all__ = [
    "ParamSanitizingApp",
    "RouteTreeAdapter",
    "StarletteRouteAdapter",
    "decode_mount_path",
    "discover_params",
    "extract_params",
    "install_param_hooks",
    "iter_routes",
    "should_skip_route",
]
