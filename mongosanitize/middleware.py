"""ASGI middleware that sanitizes request body, query and path parameters."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any
from urllib.parse import urlencode

from starlette.datastructures import Headers, MutableHeaders, QueryParams
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from mongosanitize.config.manager import build_options
from mongosanitize.config.models import SanitizeOptions
from mongosanitize.requests import handle_request
from mongosanitize.routing.skip import should_skip_route
from mongosanitize.routing.starlette import install_param_hooks

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class BufferedBody:
    """Request body read ahead of the endpoint, parsed when it is JSON."""

    raw: bytes
    value: Any = None
    is_json: bool = False
    replaced: bool = False

    def replace(self, value: Any) -> None:
        self.value = value
        self.replaced = True

    def payload(self) -> bytes:
        if not self.replaced:
            return self.raw
        return json.dumps(self.value, ensure_ascii=False).encode("utf-8")


class ManualSanitizer:
    """On-demand sanitizer for one request, exposed as ``request.state.sanitize``.

    Call it before reading the body or query params in the endpoint. Path
    params are read from the scope at call time, after routing filled them in.
    """

    def __init__(self, scope: Scope, body: BufferedBody | None, options: SanitizeOptions) -> None:
        self._scope = scope
        self._body = body
        self._options = options

    def __call__(self, overrides: Mapping[str, Any] | None = None) -> dict[str, Any]:
        options = self._options.merge(overrides) if overrides else self._options
        sections: dict[str, Any] = {
            "query": _query_to_dict(self._scope),
            "params": dict(self._scope.get("path_params") or {}),
        }
        if self._body is not None and self._body.is_json:
            sections["body"] = self._body.value

        sanitized = handle_request(sections, options)
        if "query" in sanitized:
            self._scope["query_string"] = _encode_query(sections["query"])
        if "params" in sanitized:
            self._scope["path_params"] = sections["params"]
        if "body" in sanitized and self._body is not None:
            self._body.replace(sections["body"])
            MutableHeaders(scope=self._scope)["content-length"] = str(len(self._body.payload()))
        return sanitized


class MongoSanitizeMiddleware:
    """Pure ASGI middleware applying the sanitizer to each HTTP request.

    In auto mode the query string and JSON body are rewritten before the
    application sees them, and path parameters are sanitized by hooks
    installed on ``router``. In manual mode nothing is rewritten until the
    endpoint calls ``request.state.sanitize()``.
    """

    def __init__(
        self,
        app: ASGIApp,
        *,
        router: Any | None = None,
        options: Mapping[str, Any] | SanitizeOptions | None = None,
        **option_kwargs: Any,
    ) -> None:
        self.app = app
        self.options = build_options(options, **option_kwargs)
        self.param_names: frozenset[str] = frozenset()
        if self.options.mode == "auto" and "params" in self.options.sanitize_objects:
            if router is None:
                logger.warning(
                    "no router supplied to MongoSanitizeMiddleware; route parameters will not be sanitized"
                )
            else:
                self.param_names = install_param_hooks(router, self.options)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        path = scope.get("path", "")
        if should_skip_route(path, self.options.skip_routes):
            logger.debug("sanitization skipped path=%s", path)
            await self.app(scope, receive, send)
            return

        scope = dict(scope)
        body: BufferedBody | None = None
        if "body" in self.options.sanitize_objects and _is_json(scope):
            body = await _read_body(receive)
            receive = _replay(body, receive)

        if self.options.mode == "manual":
            state = dict(scope.get("state") or {})
            state["sanitize"] = ManualSanitizer(scope, body, self.options)
            scope["state"] = state
            await self.app(scope, receive, send)
            return

        sections: dict[str, Any] = {"query": _query_to_dict(scope)}
        if body is not None and body.is_json:
            sections["body"] = body.value
        sanitized = handle_request(sections, self.options)
        if "query" in sanitized:
            scope["query_string"] = _encode_query(sections["query"])
        if "body" in sanitized and body is not None:
            body.replace(sections["body"])
            MutableHeaders(scope=scope)["content-length"] = str(len(body.payload()))
        await self.app(scope, receive, send)


def _is_json(scope: Scope) -> bool:
    content_type = Headers(scope=scope).get("content-type", "").split(";", 1)[0].strip().lower()
    return content_type == "application/json" or content_type.endswith("+json")


async def _read_body(receive: Receive) -> BufferedBody:
    chunks: list[bytes] = []
    while True:
        message = await receive()
        if message["type"] != "http.request":
            break
        chunks.append(message.get("body", b""))
        if not message.get("more_body", False):
            break
    raw = b"".join(chunks)
    if not raw:
        return BufferedBody(raw=raw)
    try:
        return BufferedBody(raw=raw, value=json.loads(raw), is_json=True)
    except (UnicodeDecodeError, json.JSONDecodeError):
        logger.debug("request body is not valid JSON; leaving it untouched")
        return BufferedBody(raw=raw)


def _replay(body: BufferedBody, receive: Receive) -> Receive:
    """Serve the buffered body once, then defer to the original receive."""
    sent = False

    async def replay() -> Message:
        nonlocal sent
        if sent:
            return await receive()
        sent = True
        return {"type": "http.request", "body": body.payload(), "more_body": False}

    return replay


def _query_to_dict(scope: Scope) -> dict[str, Any]:
    query: dict[str, Any] = {}
    for key, value in QueryParams(scope.get("query_string", b"")).multi_items():
        if key not in query:
            query[key] = value
        elif isinstance(query[key], list):
            query[key].append(value)
        else:
            query[key] = [query[key], value]
    return query


def _encode_query(query: Mapping[str, Any]) -> bytes:
    return urlencode(query, doseq=True).encode("latin-1")
