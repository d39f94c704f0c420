"""Configuration surface for mongosanitize."""

from mongosanitize.config.loader import YAMLConfigLoader
from mongosanitize.config.manager import build_options, load_options
from mongosanitize.config.models import (
    DEFAULT_OPTIONS,
    ArrayOptions,
    SanitizeOptions,
    StringOptions,
)

__all__ = [
    "ArrayOptions",
    "DEFAULT_OPTIONS",
    "SanitizeOptions",
    "StringOptions",
    "YAMLConfigLoader",
    "build_options",
    "load_options",
]
