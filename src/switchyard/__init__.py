"""Switchyard — a small HTTP router with onion-model middleware.

Register ``:name`` path templates per HTTP method, wrap them in
middleware, and dispatch one request at a time::

    from switchyard import Request, create_router

    async def show_user(ctx):
        return {"id": ctx.params["id"]}

    router = create_router(Request.from_url("GET", "/users/42"))
    router.get("/users/:id", show_user)
    response = await router.run()

For a long-running ASGI app that shares registrations across
requests, use ``App``.
"""

__version__ = "0.1.0"
__all__ = [
    "App",
    "AppConfig",
    "ConfigurationError",
    "Context",
    "Middleware",
    "MiddlewareChain",
    "Next",
    "Redirect",
    "Request",
    "Response",
    "RouteTable",
    "Router",
    "SwitchyardError",
    "create_router",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import switchyard`` fast while providing a clean top-level API.
    """
    if name == "App":
        from switchyard.app import App

        return App

    if name == "AppConfig":
        from switchyard.config import AppConfig

        return AppConfig

    if name in ("Router", "create_router"):
        from switchyard import router as _router

        return getattr(_router, name)

    if name == "Context":
        from switchyard.context import Context

        return Context

    if name == "Request":
        from switchyard.http.request import Request

        return Request

    if name in ("Response", "Redirect"):
        from switchyard.http import response as _resp

        return getattr(_resp, name)

    if name == "RouteTable":
        from switchyard.routing.table import RouteTable

        return RouteTable

    if name in ("Middleware", "MiddlewareChain", "Next"):
        from switchyard import middleware as _mw

        return getattr(_mw, name)

    if name in ("ConfigurationError", "SwitchyardError"):
        from switchyard import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
