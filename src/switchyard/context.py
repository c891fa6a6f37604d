"""Per-request handler context.

Built fresh for every matched request, extended with the route's path
parameters, and handed to the handler. Never shared across requests.

Usage::

    async def show_post(ctx: Context) -> Response:
        post = await load_post(ctx.params["id"])
        if post is None:
            return ctx.not_found()
        return ctx.json_response(post)
"""

from __future__ import annotations

import json as json_module
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from typing import Any
from urllib.parse import SplitResult, urlsplit

from switchyard.http.headers import Headers
from switchyard.http.query import QueryParams
from switchyard.http.request import Request
from switchyard.http.response import NOT_FOUND, Response


@dataclass(frozen=True, slots=True)
class Context:
    """The value every route handler receives."""

    request: Request
    url: SplitResult
    params: dict[str, str] = field(default_factory=dict)

    # -- Request shortcuts --

    @property
    def method(self) -> str:
        return self.request.method

    @property
    def path(self) -> str:
        return self.request.path

    @property
    def headers(self) -> Headers:
        return self.request.headers

    @property
    def query(self) -> QueryParams:
        return self.request.query

    async def body(self) -> bytes:
        return await self.request.body()

    async def text(self) -> str:
        return await self.request.text()

    async def json(self) -> Any:
        return await self.request.json()

    async def form(self) -> QueryParams:
        return await self.request.form()

    def with_params(self, params: Mapping[str, str]) -> Context:
        """Return a new Context with *params* merged over the current ones."""
        return replace(self, params={**self.params, **params})

    # -- Response builders --

    def respond(
        self,
        body: str | bytes = "",
        *,
        status: int = 200,
        content_type: str = "text/plain; charset=utf-8",
        headers: Mapping[str, str] | None = None,
    ) -> Response:
        response = Response(body=body, status=status, content_type=content_type)
        if headers:
            response = response.with_headers(headers)
        return response

    def text_response(
        self, body: str, *, status: int = 200, headers: Mapping[str, str] | None = None
    ) -> Response:
        """Plain-text response."""
        return self.respond(body, status=status, headers=headers)

    def json_response(
        self, data: Any, *, status: int = 200, headers: Mapping[str, str] | None = None
    ) -> Response:
        """JSON response; non-JSON values are stringified."""
        return self.respond(
            json_module.dumps(data, default=str),
            status=status,
            content_type="application/json; charset=utf-8",
            headers=headers,
        )

    def html_response(
        self, body: str, *, status: int = 200, headers: Mapping[str, str] | None = None
    ) -> Response:
        return self.respond(
            body, status=status, content_type="text/html; charset=utf-8", headers=headers
        )

    def redirect(self, location: str, *, status: int = 302) -> Response:
        return Response(body="", status=status).with_header("Location", location)

    def not_found(self, message: str | None = None) -> Response:
        """A plain-text 404, the same one the router sends for unmatched paths."""
        if message is None:
            return NOT_FOUND
        return self.text_response(message, status=404)


def build_context(request: Request) -> Context:
    """Create the Context for *request* with no parameters yet."""
    return Context(request=request, url=urlsplit(request.url))
