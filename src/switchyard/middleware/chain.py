"""Onion-model middleware chain.

Middleware registered first sees the request first and the response
last. Each stage gets a zero-argument ``next`` that runs every later
stage and finally the terminal (the route handler, or the 404 response).
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from functools import partial
from typing import TypeAlias

from switchyard._internal.invoke import invoke
from switchyard.http.request import Request
from switchyard.http.response import Response
from switchyard.middleware.protocol import Middleware

# Innermost continuation; takes no arguments
Terminal: TypeAlias = Callable[[], Response | Awaitable[Response]]


class MiddlewareChain:
    """An append-only list of middleware, frozen once dispatch begins.

    Usage::

        chain = MiddlewareChain().use(Logger()).use(Cors())
        response = await chain.execute(request, lambda: Response("hi"))

    The chain itself does not guard against a middleware calling ``next``
    more than once; doing so re-runs the downstream stages.
    """

    __slots__ = ("_frozen", "_middleware")

    def __init__(self) -> None:
        self._middleware: list[Middleware] = []
        self._frozen = False

    def use(self, middleware: Middleware) -> MiddlewareChain:
        """Append *middleware* and return the chain for further calls."""
        if self._frozen:
            msg = "Cannot add middleware after dispatch has begun."
            raise RuntimeError(msg)
        self._middleware.append(middleware)
        return self

    def freeze(self) -> None:
        """Make the chain read-only. Idempotent."""
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def middleware(self) -> tuple[Middleware, ...]:
        return tuple(self._middleware)

    def __len__(self) -> int:
        return len(self._middleware)

    async def execute(self, request: Request, terminal: Terminal) -> Response:
        """Run every middleware around *terminal* and return the response.

        Exceptions raised by any stage propagate to the caller unchanged.
        """
        stages = tuple(self._middleware)

        async def dispatch(index: int) -> Response:
            if index >= len(stages):
                return await invoke(terminal)
            return await invoke(stages[index], request, partial(dispatch, index + 1))

        return await dispatch(0)
