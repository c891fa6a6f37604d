"""Immutable HTTP request.

Frozen metadata with async body access. The request is honest about
what it is: received data that doesn't change.
"""

from __future__ import annotations

import json as json_module
from collections.abc import AsyncGenerator, Mapping
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import unquote, urlsplit

from switchyard._internal.asgi import Receive
from switchyard.http.headers import Headers
from switchyard.http.query import QueryParams


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable HTTP request.

    Metadata (method, path, headers, etc.) is frozen at creation.
    Body is accessed asynchronously via ``.body()``, ``.json()``, ``.form()``.
    """

    method: str
    path: str
    headers: Headers
    query: QueryParams
    http_version: str
    scheme: str
    server: tuple[str, int] | None
    client: tuple[str, int] | None

    # Private: ASGI-style receive callable for body streaming
    _receive: Receive

    # Private: mutable cache for the body bytes
    # (dict contents are mutable even though the field reference is frozen)
    _cache: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    # -- Computed properties --

    @property
    def content_type(self) -> str | None:
        """The Content-Type header value."""
        return self.headers.get("content-type")

    @property
    def host(self) -> str:
        """Host from the ``Host`` header, falling back to the server address."""
        host = self.headers.get("host")
        if host:
            return host
        if self.server is not None:
            name, port = self.server
            default_port = 443 if self.scheme == "https" else 80
            return name if port == default_port else f"{name}:{port}"
        return "localhost"

    @property
    def url(self) -> str:
        """Absolute request URL (scheme, host, path, and query string)."""
        base = f"{self.scheme}://{self.host}{self.path}"
        if self.query.raw:
            return f"{base}?{self.query.raw}"
        return base

    # -- Async body access --

    async def body(self) -> bytes:
        """Read the full request body.

        Result is cached: the receive callable is consumed once, then
        the same bytes are returned on subsequent calls.
        """
        if "_body" in self._cache:
            return self._cache["_body"]
        chunks = [chunk async for chunk in self.stream()]
        result = b"".join(chunks)
        self._cache["_body"] = result
        return result

    async def stream(self) -> AsyncGenerator[bytes]:
        """Stream the request body in chunks."""
        while True:
            message = await self._receive()
            body = message.get("body", b"")
            if body:
                yield body
            if not message.get("more_body", False):
                break

    async def json(self) -> Any:
        """Parse the body as JSON."""
        raw = await self.body()
        return json_module.loads(raw)

    async def text(self) -> str:
        """Read the body as text (UTF-8)."""
        raw = await self.body()
        return raw.decode("utf-8")

    async def form(self) -> QueryParams:
        """Parse an ``application/x-www-form-urlencoded`` body.

        Raises:
            ValueError: If the Content-Type is set to anything else.
        """
        ct = self.content_type
        if ct is not None and not ct.startswith("application/x-www-form-urlencoded"):
            msg = f"Cannot parse {ct!r} as form data."
            raise ValueError(msg)
        raw = await self.body()
        return QueryParams(raw.decode("utf-8"))

    # -- Factories --

    @classmethod
    def from_asgi(cls, scope: Mapping[str, Any], receive: Receive) -> Request:
        """Create a Request from an ASGI scope and receive callable."""
        server = scope.get("server")
        client = scope.get("client")
        return cls(
            method=scope["method"].upper(),
            path=scope["path"],
            headers=Headers.from_raw(scope.get("headers", ())),
            query=QueryParams(scope.get("query_string", b"")),
            http_version=scope.get("http_version", "1.1"),
            scheme=scope.get("scheme", "http"),
            server=tuple(server) if server else None,
            client=tuple(client) if client else None,
            _receive=receive,
        )

    @classmethod
    def from_url(
        cls,
        method: str,
        url: str,
        *,
        headers: Mapping[str, str] | None = None,
        body: bytes = b"",
    ) -> Request:
        """Create a Request without a server, e.g. for tests or scripts.

        *url* may be absolute (``https://example.com/users?page=2``) or a
        bare path (``/users``). The path is percent-decoded, matching what
        an ASGI server puts in ``scope["path"]``; the query string is not.
        """
        parts = urlsplit(url)
        merged = dict(headers or {})
        if parts.netloc and not any(k.lower() == "host" for k in merged):
            merged["host"] = parts.netloc
        sent = False

        async def receive() -> dict[str, Any]:
            nonlocal sent
            if sent:
                return {"type": "http.disconnect"}
            sent = True
            return {"type": "http.request", "body": body, "more_body": False}

        return cls(
            method=method.upper(),
            path=unquote(parts.path) or "/",
            headers=Headers(merged),
            query=QueryParams(parts.query),
            http_version="1.1",
            scheme=parts.scheme or "http",
            server=None,
            client=None,
            _receive=receive,
        )
