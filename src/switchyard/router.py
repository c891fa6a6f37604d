"""Router — registration and single-request dispatch.

A Router is bound to one incoming request. Register routes and
middleware, then call ``run()`` once to get the response::

    router = create_router(request)
    router.use(Logger()).get("/users/:id", show_user)
    response = await router.run()

Hosts serving many requests share one ``RouteTable`` and one
``MiddlewareChain`` and bind a fresh Router to each request (see
``switchyard.app.App``).
"""

from __future__ import annotations

import logging
from functools import partial

from switchyard._internal.invoke import invoke
from switchyard._internal.types import Handler
from switchyard.context import Context, build_context
from switchyard.http.negotiation import negotiate
from switchyard.http.request import Request
from switchyard.http.response import INTERNAL_SERVER_ERROR, NOT_FOUND, Response
from switchyard.middleware.chain import MiddlewareChain
from switchyard.middleware.protocol import Middleware
from switchyard.routing.table import RouteTable

logger = logging.getLogger("switchyard.router")


def _not_found() -> Response:
    return NOT_FOUND


async def _call_handler(handler: Handler, ctx: Context) -> Response:
    """Call the matched handler (sync or async) and coerce its return value."""
    return negotiate(await invoke(handler, ctx))


class Router:
    """Route registration plus dispatch for one request.

    Registration methods return the router, so calls chain. Once ``run()``
    starts, the route table and middleware chain are frozen.
    """

    __slots__ = ("_chain", "_debug", "_request", "_routes")

    def __init__(
        self,
        request: Request,
        *,
        routes: RouteTable | None = None,
        middleware: MiddlewareChain | None = None,
        debug: bool = False,
    ) -> None:
        self._request = request
        self._routes = routes if routes is not None else RouteTable()
        self._chain = middleware if middleware is not None else MiddlewareChain()
        self._debug = debug

    @property
    def request(self) -> Request:
        return self._request

    @property
    def routes(self) -> RouteTable:
        return self._routes

    @property
    def middleware(self) -> MiddlewareChain:
        return self._chain

    # -- Registration --

    def route(self, method: str, path: str, handler: Handler) -> Router:
        """Register *handler* for *method* and the *path* template."""
        self._routes.register(method, path, handler)
        return self

    def get(self, path: str, handler: Handler) -> Router:
        return self.route("GET", path, handler)

    def post(self, path: str, handler: Handler) -> Router:
        return self.route("POST", path, handler)

    def put(self, path: str, handler: Handler) -> Router:
        return self.route("PUT", path, handler)

    def delete(self, path: str, handler: Handler) -> Router:
        return self.route("DELETE", path, handler)

    def use(self, middleware: Middleware) -> Router:
        """Append *middleware* to the chain."""
        self._chain.use(middleware)
        return self

    # -- Dispatch --

    async def run(self) -> Response:
        """Dispatch the bound request and return its response.

        Never raises: an unmatched route yields the 404 response and any
        exception from middleware or the handler is logged and turned
        into the 500 response.
        """
        request = self._request
        method, path = request.method, request.path

        self._routes.freeze()
        self._chain.freeze()

        try:
            match = self._routes.find(method, path)
            if match is None:
                logger.debug("404 %s %s", method, path)
                terminal = _not_found
            else:
                ctx = build_context(request).with_params(match.params)
                terminal = partial(_call_handler, match.entry.handler, ctx)
            return await self._chain.execute(request, terminal)
        except Exception as exc:
            if self._debug:
                logger.exception("500 %s %s: %s", method, path, exc)
            else:
                logger.exception("500 %s %s", method, path)
            return INTERNAL_SERVER_ERROR


def create_router(request: Request) -> Router:
    """Create a Router with its own empty route table and middleware chain."""
    return Router(request)
