"""Unit tests for recursive value, array and mapping sanitization."""

from __future__ import annotations

import copy
from collections.abc import Callable
from datetime import datetime
from decimal import Decimal
from types import MappingProxyType
from typing import Any

import pytest

from mongosanitize.config import SanitizeOptions
from mongosanitize.engine.values import sanitize_array, sanitize_mapping, sanitize_value
from mongosanitize.exceptions import InputTypeError, SanitizeError


def test_nested_operator_keys_and_values_are_neutralized(default_options: SanitizeOptions) -> None:
    payload = {"user": {"username": "$admin", "$password": "$secre.t"}}
    assert sanitize_value(payload, default_options) == {"user": {"username": "admin", "password": "secret"}}


def test_input_is_not_mutated(default_options: SanitizeOptions) -> None:
    payload: dict[str, Any] = {"$or": [{"a.b": "$x"}, {"c": ["$y"]}]}
    snapshot = copy.deepcopy(payload)
    result = sanitize_value(payload, default_options)
    assert payload == snapshot
    assert result == {"or": [{"ab": "x"}, {"c": ["y"]}]}


@pytest.mark.parametrize(
    "value",
    [None, True, 0, 3.14, Decimal("1.10"), datetime(2024, 5, 1), b"$bytes", {"$set"}],
)
def test_scalars_and_opaque_values_pass_through(default_options: SanitizeOptions, value: object) -> None:
    assert sanitize_value(value, default_options) is value


def test_email_values_survive(default_options: SanitizeOptions) -> None:
    payload = {"email": "jane.doe@example.com", "emails": ["a.b@example.org"]}
    assert sanitize_value(payload, default_options) == payload


def test_email_shaped_keys_are_sanitized(default_options: SanitizeOptions) -> None:
    assert sanitize_value({"$where@evil.io": 1}, default_options) == {"where@evilio": 1}


def test_top_level_strings_are_values(make_options: Callable[..., SanitizeOptions]) -> None:
    options = make_options(string_options={"trim": True, "lowercase": True, "max_length": 5})
    assert sanitize_value("  $HELLO WORLD  ", options) == "hello"
    assert sanitize_value("jane.doe@example.com", options) == "jane.doe@example.com"


def test_tuple_input_returns_tuple(default_options: SanitizeOptions) -> None:
    assert sanitize_value(("$a", "b"), default_options) == ("a", "b")


def test_mapping_input_returns_dict(default_options: SanitizeOptions) -> None:
    result = sanitize_value(MappingProxyType({"$k": "v"}), default_options)
    assert type(result) is dict
    assert result == {"k": "v"}


def test_array_elements_are_truncated_as_values(make_options: Callable[..., SanitizeOptions]) -> None:
    options = make_options(string_options={"max_length": 3})
    assert sanitize_value({"abcdef": ["abcdef"], "k": "abcdef"}, options) == {"abcdef": ["abc"], "k": "abc"}


def test_sanitize_array_rejects_non_sequences(default_options: SanitizeOptions) -> None:
    with pytest.raises(InputTypeError, match="Input must be an array") as exc_info:
        sanitize_array({"a": 1}, default_options)
    assert isinstance(exc_info.value, TypeError)
    assert isinstance(exc_info.value, SanitizeError)
    assert exc_info.value.type == "type_error"


def test_sanitize_mapping_rejects_non_mappings(default_options: SanitizeOptions) -> None:
    with pytest.raises(InputTypeError, match="Input must be a mapping"):
        sanitize_mapping(["a"], default_options)


def test_filter_null_drops_only_none(make_options: Callable[..., SanitizeOptions]) -> None:
    options = make_options(array_options={"filter_null": True})
    assert sanitize_array([None, "$a", "", 0, False, None], options) == ["a", "", 0, False]


def test_distinct_keeps_first_occurrence_after_sanitizing(make_options: Callable[..., SanitizeOptions]) -> None:
    options = make_options(array_options={"distinct": True})
    assert sanitize_array(["a", "$a", "b", "a"], options) == ["a", "b"]


def test_distinct_keeps_true_and_one_apart(make_options: Callable[..., SanitizeOptions]) -> None:
    options = make_options(array_options={"distinct": True})
    assert sanitize_array([True, 1, 1.0, False, 0], options) == [True, 1, False, 0]


def test_distinct_compares_nested_values_deeply(make_options: Callable[..., SanitizeOptions]) -> None:
    options = make_options(array_options={"distinct": True})
    items = [{"a": 1, "b": 2}, {"b": 2, "a": 1}, {"a": 2}, ["x"], ["x"]]
    assert sanitize_array(items, options) == [{"a": 1, "b": 2}, {"a": 2}, ["x"]]


def test_filter_null_runs_before_distinct(make_options: Callable[..., SanitizeOptions]) -> None:
    options = make_options(array_options={"filter_null": True, "distinct": True})
    assert sanitize_array(["a", "a", None, "b", None], options) == ["a", "b"]
    payload = {"items": ["item1", None, "item2", "item1", "", None]}
    assert sanitize_value(payload, options) == {"items": ["item1", "item2", ""]}


def test_remove_empty_drops_empty_values(make_options: Callable[..., SanitizeOptions]) -> None:
    options = make_options(remove_empty=True)
    payload = {"a": "$", "b": {}, "c": [], "d": 0, "e": None, "f": {"$": "x"}, "g": "ok"}
    assert sanitize_value(payload, options) == {"d": 0, "e": None, "g": "ok"}


def test_remove_matches_drops_entries_instead_of_rewriting(make_options: Callable[..., SanitizeOptions]) -> None:
    options = make_options(remove_matches=True)
    payload = {"name": "$admin", "ok": "fine", "$gt": 1, "email": "a.b@example.com"}
    assert sanitize_value(payload, options) == {"ok": "fine", "email": "a.b@example.com"}


def test_remove_matches_still_rewrites_array_elements(make_options: Callable[..., SanitizeOptions]) -> None:
    options = make_options(remove_matches=True)
    assert sanitize_value({"tags": ["$a", "b"]}, options) == {"tags": ["a", "b"]}


def test_non_recursive_copies_containers_through(make_options: Callable[..., SanitizeOptions]) -> None:
    options = make_options(recursive=False)
    nested = {"$b": 1}
    listed = ["$c"]
    result = sanitize_value({"$a": nested, "l": listed, "s": "$d"}, options)
    assert result == {"a": {"$b": 1}, "l": ["$c"], "s": "d"}
    assert result["a"] is nested


def test_custom_sanitizer_replaces_value_strategy(make_options: Callable[..., SanitizeOptions]) -> None:
    seen: list[Any] = []

    def shout(value: Any) -> Any:
        seen.append(value)
        return value.upper() if isinstance(value, str) else value

    options = make_options(custom_sanitizer=shout)
    result = sanitize_value({"$name": "$bob", "nested": {"$k": "v"}}, options)
    assert result == {"name": "$BOB", "nested": {"$k": "v"}}
    assert seen == ["$bob", {"$k": "v"}]


def test_custom_sanitizer_skipped_for_containers_when_not_recursive(
    make_options: Callable[..., SanitizeOptions],
) -> None:
    calls: list[Any] = []
    options = make_options(recursive=False, custom_sanitizer=lambda value: calls.append(value) or value)
    assert sanitize_value({"a": {"$b": 1}, "c": "x"}, options) == {"a": {"$b": 1}, "c": "x"}
    assert calls == ["x"]


def test_colliding_keys_keep_last_value(default_options: SanitizeOptions) -> None:
    assert sanitize_value({"$a": 1, "a": 2}, default_options) == {"a": 2}
