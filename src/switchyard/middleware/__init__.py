"""Protocol-based middleware with no inheritance required.

A middleware is any callable matching:
    async def mw(request: Request, next: Next) -> Response

Built-in middleware:
    BearerAuth -- Bearer token authentication
    Cors -- Cross-Origin Resource Sharing
    Logger -- Request/response access log
    Static -- Serve static files from a directory
"""

from switchyard.middleware.auth import AuthConfig, BearerAuth, get_token
from switchyard.middleware.chain import MiddlewareChain
from switchyard.middleware.cors import CORSConfig, Cors
from switchyard.middleware.logger import Logger, LoggerConfig
from switchyard.middleware.protocol import Middleware, Next
from switchyard.middleware.static import Static, StaticConfig

__all__ = [
    "AuthConfig",
    "BearerAuth",
    "CORSConfig",
    "Cors",
    "Logger",
    "LoggerConfig",
    "Middleware",
    "MiddlewareChain",
    "Next",
    "Static",
    "StaticConfig",
    "get_token",
]
