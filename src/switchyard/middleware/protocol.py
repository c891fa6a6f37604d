"""Middleware protocol and Next type alias.

A middleware is any callable matching::

    async def my_mw(request: Request, next: Next) -> Response: ...

No base class required. The chain checks the shape, not the lineage.

``next`` takes no arguments: it runs the rest of the chain for the same
request and resolves to that stage's ``Response``.
"""

from collections.abc import Awaitable, Callable
from typing import Protocol, TypeAlias

from switchyard.http.request import Request
from switchyard.http.response import Response

# The remainder of the middleware chain
Next: TypeAlias = Callable[[], Awaitable[Response]]


class Middleware(Protocol):
    """Protocol for switchyard middleware.

    Accepts both functions and callable objects::

        # Function middleware
        async def timing(request: Request, next: Next) -> Response:
            start = time.monotonic()
            response = await next()
            elapsed = time.monotonic() - start
            return response.with_header("X-Time", f"{elapsed:.3f}")

        # Class middleware
        class RequireJSON:
            async def __call__(self, request: Request, next: Next) -> Response:
                if request.content_type != "application/json":
                    return Response("Unsupported Media Type", status=415)
                return await next()

    Plain ``def`` middleware works too; returning ``next()`` unawaited is
    fine because the chain awaits whatever comes back.
    """

    def __call__(self, request: Request, next: Next) -> Response | Awaitable[Response]: ...
