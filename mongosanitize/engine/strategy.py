"""Strategies that sanitize the value of one mapping entry."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol

from mongosanitize.engine.values import sanitize_value

if TYPE_CHECKING:
    from mongosanitize.config.models import SanitizeOptions


class ValueStrategy(Protocol):
    def __call__(self, value: Any, options: SanitizeOptions) -> Any: ...


@dataclass(frozen=True, slots=True)
class DefaultStrategy:
    """Recurse into the value with the built-in sanitizer."""

    def __call__(self, value: Any, options: SanitizeOptions) -> Any:
        return sanitize_value(value, options, is_value_context=True)


@dataclass(frozen=True, slots=True)
class CustomStrategy:
    """Hand the value to a user-supplied function instead of the built-in sanitizer."""

    func: Callable[[Any], Any]

    def __call__(self, value: Any, options: SanitizeOptions) -> Any:  # noqa: ARG002
        return self.func(value)


def strategy_for(custom_sanitizer: Callable[[Any], Any] | None) -> ValueStrategy:
    """Return the strategy matching the configured override."""
    if custom_sanitizer is None:
        return DefaultStrategy()
    return CustomStrategy(custom_sanitizer)
