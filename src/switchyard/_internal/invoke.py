"""Invoke helpers — call sync or async callables uniformly.

Handlers and middleware can be ``def`` or ``async def``. Any code that
calls user-provided code must handle both cases. This module provides
a single helper so the sync/async check lives in exactly one place.

Usage::

    from switchyard._internal.invoke import invoke

    result = await invoke(handler, ctx)
"""

import inspect
from typing import Any


async def invoke(func: Any, *args: Any, **kwargs: Any) -> Any:
    """Call *func* and await the result if it's awaitable.

    Works with both sync and async callables::

        # sync, returns immediately
        def health(ctx):
            return "ok"

        # async, the coroutine is awaited automatically
        async def user(ctx):
            return await load_user(ctx.params["id"])

    A sync middleware that returns ``next()`` hands back a coroutine,
    which is awaited here as well.
    """
    result = func(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result
