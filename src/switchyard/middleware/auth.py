"""Bearer token authentication middleware.

Rejects requests that lack a valid ``Authorization: Bearer <token>``
header. The accepted token is stored in a ContextVar, accessible via
``get_token()`` from any downstream middleware or handler.

Usage::

    from switchyard.middleware.auth import AuthConfig, BearerAuth, get_token

    async def check(token: str) -> bool:
        return await tokens.exists(token)

    router.use(BearerAuth(AuthConfig(
        validate=check,
        exclude=("/health", re.compile(r"^/public/")),
    )))
"""

import logging
import re
from collections.abc import Awaitable, Callable
from contextvars import ContextVar
from dataclasses import dataclass

from switchyard._internal.invoke import invoke
from switchyard.errors import AuthenticationError
from switchyard.http.request import Request
from switchyard.http.response import Response
from switchyard.middleware.protocol import Next

logger = logging.getLogger("switchyard.auth")

_token_var: ContextVar[str] = ContextVar("switchyard_token")


def get_token() -> str:
    """Return the bearer token accepted for the current request.

    Raises ``LookupError`` outside a request that passed ``BearerAuth``
    (including excluded paths).
    """
    try:
        return _token_var.get()
    except LookupError:
        msg = "No authenticated token. Ensure BearerAuth ran for this request."
        raise LookupError(msg) from None


def _accept_all(token: str) -> bool:  # noqa: ARG001
    return True


@dataclass(frozen=True, slots=True)
class AuthConfig:
    """Bearer auth configuration.

    Attributes:
        validate: Called with the extracted token; sync or async, returns
            whether the token is acceptable. Accepts everything by default.
        exclude: Paths that skip authentication. Strings match the path
            exactly; compiled patterns match with ``search``.
        on_error: Builds the rejection response. The default is a plain
            401 with a ``WWW-Authenticate`` challenge.
        header: Request header carrying the credentials.
        scheme: Expected scheme before the token.
    """

    validate: Callable[[str], bool | Awaitable[bool]] = _accept_all
    exclude: tuple[str | re.Pattern[str], ...] = ()
    on_error: Callable[[AuthenticationError], Response | Awaitable[Response]] | None = None
    header: str = "Authorization"
    scheme: str = "Bearer"


class BearerAuth:
    """Middleware that requires a valid bearer token.

    Rejections short-circuit the chain: nothing downstream runs.
    """

    __slots__ = ("_config",)

    def __init__(self, config: AuthConfig | None = None) -> None:
        self._config = config or AuthConfig()

    @property
    def config(self) -> AuthConfig:
        return self._config

    def _is_excluded(self, path: str) -> bool:
        for pattern in self._config.exclude:
            if isinstance(pattern, re.Pattern):
                if pattern.search(path):
                    return True
            elif path == pattern:
                return True
        return False

    def _extract_token(self, request: Request) -> str | None:
        """Return the token from ``<scheme> <token>``, or ``None``."""
        header = request.headers.get(self._config.header)
        if not header:
            return None

        scheme, _, token = header.partition(" ")
        token = token.strip()
        if scheme != self._config.scheme or not token:
            return None
        return token

    async def _reject(self, request: Request, error: AuthenticationError) -> Response:
        logger.debug("Rejected %s %s: %s", request.method, request.path, error)
        if self._config.on_error is None:
            return Response(body="Unauthorized", status=401).with_header(
                "WWW-Authenticate", self._config.scheme
            )
        return await invoke(self._config.on_error, error)

    async def __call__(self, request: Request, next: Next) -> Response:
        """Authenticate the request, then dispatch."""
        if self._is_excluded(request.path):
            return await next()

        token = self._extract_token(request)
        if token is None:
            return await self._reject(request, AuthenticationError("No token provided"))

        if not await invoke(self._config.validate, token):
            return await self._reject(request, AuthenticationError("Invalid token"))

        reset = _token_var.set(token)
        try:
            return await next()
        finally:
            _token_var.reset(reset)
