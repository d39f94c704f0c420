"""Exceptions raised by mongosanitize.

Messages name the offending option but never echo request payloads.
"""

from __future__ import annotations

from typing import Any


class SanitizeError(Exception):
    """Base exception for sanitization and configuration failures."""

    def __init__(self, message: str, type: str = "generic") -> None:  # noqa: A002
        self.type = type
        super().__init__(message)


class ConfigurationError(SanitizeError):
    """Raised when sanitizer options are invalid."""

    def __init__(self, message: str, field: str | None = None, value: Any = None) -> None:
        self.field = field
        self.value = value
        super().__init__(message, type="config_error")

    @classmethod
    def for_field(cls, field: str, value: Any, reason: str | None = None) -> ConfigurationError:
        message = f'Invalid configuration: "{field}" with value {value!r}'
        if reason:
            message = f"{message} ({reason})"
        return cls(message, field=field, value=value)


class ConfigLoadError(ConfigurationError):
    """Raised when a configuration file cannot be parsed."""


class InputTypeError(SanitizeError, TypeError):
    """Raised when a shape-specific sanitizer receives the wrong shape."""

    def __init__(self, message: str) -> None:
        super().__init__(message, type="type_error")
