"""Switchyard exception hierarchy.

Shared across the route table, middleware chain, router, and bundled
middleware so every module raises and catches the same types.
"""


class SwitchyardError(Exception):
    """Base for all switchyard-specific errors."""


class ConfigurationError(SwitchyardError):
    """Raised when a route or middleware is registered with invalid settings.

    Always raised at registration time, never while serving a request.
    """


class AuthenticationError(SwitchyardError):
    """Raised by ``BearerAuth`` when a request carries no usable token.

    Never escapes the middleware: it is handed to ``AuthConfig.on_error``,
    which turns it into a response.
    """
