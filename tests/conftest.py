"""Shared fixtures for mongosanitize tests."""

from __future__ import annotations

import os
from collections.abc import Callable
from typing import Any

import pytest

from mongosanitize.config import DEFAULT_OPTIONS, SanitizeOptions, build_options


@pytest.fixture
def default_options() -> SanitizeOptions:
    """Return the frozen default options."""
    return DEFAULT_OPTIONS


@pytest.fixture
def make_options() -> Callable[..., SanitizeOptions]:
    """Build options from keyword overrides on top of the defaults."""

    def _make(**overrides: Any) -> SanitizeOptions:
        return build_options(overrides)

    return _make


@pytest.fixture(autouse=True)
def _clear_sanitizer_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep developer shell settings out of option loading."""
    for key in list(os.environ):
        if key.startswith("MONGOSANITIZE_"):
            monkeypatch.delenv(key, raising=False)
