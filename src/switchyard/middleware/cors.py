"""CORS middleware.

Answers preflight requests directly and adds the configured
``Access-Control-*`` headers to every other response.
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import TypeAlias

from switchyard.http.request import Request
from switchyard.http.response import Response
from switchyard.middleware.protocol import Next

OriginOption: TypeAlias = str | tuple[str, ...] | Callable[[str], bool]


@dataclass(frozen=True, slots=True)
class CORSConfig:
    """CORS middleware configuration.

    ``origin`` accepts ``"*"``, a single origin, a tuple of origins, or a
    predicate called with the request's ``Origin``::

        CORSConfig(
            origin=("https://example.com", "https://admin.example.com"),
            credentials=True,
        )
    """

    origin: OriginOption = "*"
    methods: tuple[str, ...] = ("GET", "HEAD", "PUT", "PATCH", "POST", "DELETE")
    allowed_headers: tuple[str, ...] = ()
    exposed_headers: tuple[str, ...] = ()
    credentials: bool = False
    max_age: int = 86400  # 24 hours
    preflight: bool = True


class Cors:
    """Cross-Origin Resource Sharing middleware.

    Handles:
    - Preflight ``OPTIONS`` requests (short-circuits with 204)
    - Actual requests (headers added to the downstream response)
    - Credential support (``Access-Control-Allow-Credentials``)

    Usage::

        router.use(Cors(CORSConfig(
            origin="https://example.com",
            allowed_headers=("Content-Type", "Authorization"),
        )))
    """

    __slots__ = ("config",)

    def __init__(self, config: CORSConfig | None = None) -> None:
        self.config = config or CORSConfig()

    def _is_allowed_origin(self, origin: str) -> bool:
        allowed = self.config.origin
        if isinstance(allowed, str):
            return allowed == "*" or origin == allowed
        if isinstance(allowed, tuple):
            return origin in allowed
        return bool(allowed(origin))

    def _cors_headers(self, origin: str) -> dict[str, str]:
        """Headers shared by preflight and actual responses."""
        cfg = self.config
        headers: dict[str, str] = {}

        if self._is_allowed_origin(origin):
            if cfg.origin == "*" and not cfg.credentials:
                headers["Access-Control-Allow-Origin"] = "*"
            elif isinstance(cfg.origin, str) and cfg.origin != "*":
                headers["Access-Control-Allow-Origin"] = cfg.origin
            else:
                # Echoing the caller's origin: caches must key on it
                headers["Access-Control-Allow-Origin"] = origin
                headers["Vary"] = "Origin"

        if cfg.credentials:
            headers["Access-Control-Allow-Credentials"] = "true"

        return headers

    def _preflight_response(self, request: Request, headers: dict[str, str]) -> Response:
        cfg = self.config
        headers["Access-Control-Allow-Methods"] = ", ".join(cfg.methods)

        if cfg.allowed_headers:
            headers["Access-Control-Allow-Headers"] = ", ".join(cfg.allowed_headers)
        else:
            requested = request.headers.get("access-control-request-headers")
            if requested:
                headers["Access-Control-Allow-Headers"] = requested

        if cfg.exposed_headers:
            headers["Access-Control-Expose-Headers"] = ", ".join(cfg.exposed_headers)

        if cfg.max_age:
            headers["Access-Control-Max-Age"] = str(cfg.max_age)

        return Response(body="", status=204).with_headers(headers)

    async def __call__(self, request: Request, next: Next) -> Response:
        """Process the request with CORS handling."""
        origin = request.headers.get("origin") or ""
        headers = self._cors_headers(origin)

        if self.config.preflight and request.method == "OPTIONS":
            return self._preflight_response(request, headers)

        response = await next()
        return response.with_headers(headers)
