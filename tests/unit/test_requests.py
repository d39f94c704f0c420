"""Unit tests for request section handling."""

from __future__ import annotations

from typing import Any

from mongosanitize.config import build_options
from mongosanitize.requests import handle_request, sanitize


def test_handle_request_sanitizes_configured_sections() -> None:
    query = {"$where": "1"}
    sections: dict[str, Any] = {"body": {"user": {"$ne": None}}, "query": query, "params": {}}
    result = handle_request(sections, build_options())
    assert result == {"body": {"user": {"ne": None}}, "query": {"where": "1"}}
    assert sections["body"] == {"user": {"ne": None}}
    assert sections["params"] == {}


def test_handle_request_refills_live_sections_in_place() -> None:
    query = {"$where": "1"}
    params = {"id": "$admin"}
    sections: dict[str, Any] = {"query": query, "params": params}
    handle_request(sections, build_options())
    assert sections["query"] is query
    assert query == {"where": "1"}
    assert sections["params"] is params
    assert params == {"id": "admin"}


def test_handle_request_replaces_body() -> None:
    body = ["$a", {"$b": "c"}]
    sections: dict[str, Any] = {"body": body}
    result = handle_request(sections, build_options())
    assert result["body"] == ["a", {"b": "c"}]
    assert sections["body"] is not body
    assert body == ["$a", {"$b": "c"}]


def test_handle_request_only_touches_selected_sections() -> None:
    sections: dict[str, Any] = {"body": {"$a": 1}, "query": {"$b": "2"}}
    result = handle_request(sections, build_options(sanitize_objects=["body"]))
    assert result == {"body": {"a": 1}}
    assert sections["query"] == {"$b": "2"}


def test_handle_request_skips_missing_and_empty_sections() -> None:
    sections: dict[str, Any] = {"body": None, "query": {}}
    assert handle_request(sections, build_options()) == {}
    assert sections == {"body": None, "query": {}}


def test_sanitize_builds_options_per_call() -> None:
    assert sanitize("$x") == "x"
    assert sanitize({"a": "$b"}, replaceWith="_") == {"a": "_b"}
    assert sanitize({"a": "$b"}, {"removeMatches": True}) == {}


def test_sanitize_truncates_bare_strings() -> None:
    options = {"stringOptions": {"trim": True, "lowercase": True, "maxLength": 5}}
    assert sanitize("  $HELLO WORLD  ", options) == "hello"
    assert sanitize("  $HELLO WORLD  ", stringOptions=options["stringOptions"]) == "hello"


def test_handle_request_accepts_any_section_name() -> None:
    sections: dict[str, Any] = {"cookies": {"session": "$ne"}, "body": {"$a": 1}}
    result = handle_request(sections, build_options(sanitize_objects=["cookies"]))
    assert result == {"cookies": {"session": "ne"}}
    assert sections["body"] == {"$a": 1}
