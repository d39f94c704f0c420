"""NoSQL-injection sanitization for nested request payloads."""

from mongosanitize.config import (
    DEFAULT_OPTIONS,
    ArrayOptions,
    SanitizeOptions,
    StringOptions,
    YAMLConfigLoader,
    build_options,
    load_options,
)
from mongosanitize.engine import (
    DEFAULT_PATTERNS,
    filter_key,
    is_email,
    sanitize_array,
    sanitize_mapping,
    sanitize_string,
    sanitize_value,
)
from mongosanitize.exceptions import ConfigLoadError, ConfigurationError, InputTypeError, SanitizeError
from mongosanitize.middleware import ManualSanitizer, MongoSanitizeMiddleware
from mongosanitize.requests import handle_request, sanitize
from mongosanitize.routing import discover_params, install_param_hooks, should_skip_route

__version__ = "1.1.0"

__all__ = [
    "ArrayOptions",
    "ConfigLoadError",
    "ConfigurationError",
    "DEFAULT_OPTIONS",
    "DEFAULT_PATTERNS",
    "InputTypeError",
    "ManualSanitizer",
    "MongoSanitizeMiddleware",
    "SanitizeError",
    "SanitizeOptions",
    "StringOptions",
    "YAMLConfigLoader",
    "build_options",
    "discover_params",
    "filter_key",
    "handle_request",
    "install_param_hooks",
    "is_email",
    "load_options",
    "sanitize",
    "sanitize_array",
    "sanitize_mapping",
    "sanitize_string",
    "sanitize_value",
    "should_skip_route",
]
