"""ASGI application host.

Holds one route table and one middleware chain for the whole process.
Mutable during setup, frozen when the first request (or lifespan
startup) arrives. Every HTTP request gets its own ``Router`` bound to
the shared, read-only registrations.
"""

from __future__ import annotations

import threading
from collections.abc import Callable

from switchyard._internal.asgi import Receive, Scope, Send
from switchyard._internal.types import Handler
from switchyard.config import AppConfig
from switchyard.http.request import Request
from switchyard.http.response import Response
from switchyard.middleware.chain import MiddlewareChain
from switchyard.middleware.protocol import Middleware
from switchyard.router import Router
from switchyard.routing.table import RouteTable
from switchyard.server.sender import send_response


class App:
    """A switchyard ASGI application.

    Usage::

        app = App()
        app.use(Logger()).use(Cors())

        @app.get("/users/:id")
        async def show_user(ctx):
            return {"id": ctx.params["id"]}

        # uvicorn module:app

    Thread safety:
        Setup is single-threaded (decorators at import time). The freeze
        transition uses a Lock + double-check so exactly one thread
        freezes the registrations, even if several workers call
        ``__call__()`` concurrently on the first request.
    """

    __slots__ = ("_chain", "_freeze_lock", "_frozen", "_routes", "config")

    def __init__(self, config: AppConfig | None = None) -> None:
        self.config: AppConfig = config or AppConfig()
        self._routes = RouteTable(self.config.methods)
        self._chain = MiddlewareChain()
        self._frozen = False
        self._freeze_lock = threading.Lock()

    @property
    def routes(self) -> RouteTable:
        return self._routes

    @property
    def middleware(self) -> MiddlewareChain:
        return self._chain

    # -- Route registration --

    def add_route(self, method: str, path: str, handler: Handler) -> App:
        """Register *handler* for *method* and *path*."""
        self._routes.register(method, path, handler)
        return self

    def route(
        self,
        path: str,
        *,
        methods: list[str] | None = None,
    ) -> Callable[[Handler], Handler]:
        """Register a route handler via decorator.

        Args:
            path: URL path template. Use ``:name`` for path parameters.
            methods: HTTP methods. Defaults to ``["GET"]``.
        """

        def decorator(func: Handler) -> Handler:
            for method in methods or ["GET"]:
                self.add_route(method, path, func)
            return func

        return decorator

    def get(self, path: str) -> Callable[[Handler], Handler]:
        return self.route(path, methods=["GET"])

    def post(self, path: str) -> Callable[[Handler], Handler]:
        return self.route(path, methods=["POST"])

    def put(self, path: str) -> Callable[[Handler], Handler]:
        return self.route(path, methods=["PUT"])

    def delete(self, path: str) -> Callable[[Handler], Handler]:
        return self.route(path, methods=["DELETE"])

    # -- Middleware --

    def use(self, middleware: Middleware) -> App:
        """Add a middleware to the pipeline."""
        self._chain.use(middleware)
        return self

    # -- Dispatch --

    async def handle(self, request: Request) -> Response:
        """Dispatch one request through the shared registrations."""
        self._ensure_frozen()
        router = Router(
            request,
            routes=self._routes,
            middleware=self._chain,
            debug=self.config.debug,
        )
        return await router.run()

    # -- ASGI interface --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point."""
        if scope["type"] == "lifespan":
            await self._handle_lifespan(receive, send)
            return

        if scope["type"] != "http":
            return

        request = Request.from_asgi(scope, receive)
        response = await self.handle(request)
        await send_response(response, send, head=request.method == "HEAD")

    async def _handle_lifespan(self, receive: Receive, send: Send) -> None:
        """Run the ASGI lifespan protocol, freezing registrations at startup."""
        while True:
            message = await receive()
            if message["type"] == "lifespan.startup":
                self._ensure_frozen()
                await send({"type": "lifespan.startup.complete"})
            elif message["type"] == "lifespan.shutdown":
                await send({"type": "lifespan.shutdown.complete"})
                return

    # -- Internal --

    def _ensure_frozen(self) -> None:
        """Thread-safe freeze with double-check locking."""
        if self._frozen:
            return
        with self._freeze_lock:
            if self._frozen:
                return
            self._routes.freeze()
            self._chain.freeze()
            self._frozen = True
