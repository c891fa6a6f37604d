"""Per-method route table with first-registered-wins lookup."""

import logging
from dataclasses import dataclass

from switchyard._internal.types import Handler
from switchyard.config import DEFAULT_METHODS
from switchyard.routing.pattern import PathPattern, compile_pattern

logger = logging.getLogger("switchyard.router")


@dataclass(frozen=True, slots=True)
class RouteEntry:
    """A registered route. Created at registration, never modified."""

    method: str
    pattern: PathPattern
    handler: Handler

    @property
    def path(self) -> str:
        return self.pattern.template


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """Result of a successful route lookup."""

    entry: RouteEntry
    params: dict[str, str]


class RouteTable:
    """Ordered route lists keyed by HTTP method.

    Lookup is a linear scan in registration order; the first structural
    match wins, regardless of how specific later routes are::

        table = RouteTable()
        table.register("GET", "/items/:id", show_item)
        table.register("GET", "/items/latest", latest)  # never reached
        table.find("GET", "/items/latest").entry.handler is show_item
    """

    __slots__ = ("_frozen", "_routes")

    def __init__(self, methods: tuple[str, ...] = DEFAULT_METHODS) -> None:
        self._routes: dict[str, list[RouteEntry]] = {m.upper(): [] for m in methods}
        self._frozen = False

    def register(self, method: str, template: str, handler: Handler) -> RouteEntry:
        """Compile *template* and append a route for *method*.

        Raises ``ConfigurationError`` for a malformed template and
        ``RuntimeError`` once the table is frozen.
        """
        if self._frozen:
            msg = "Cannot register routes after dispatch has begun."
            raise RuntimeError(msg)

        entry = RouteEntry(method=method.upper(), pattern=compile_pattern(template), handler=handler)
        self._routes.setdefault(entry.method, []).append(entry)
        return entry

    def find(self, method: str, path: str) -> RouteMatch | None:
        """Return the first route for *method* whose pattern matches *path*."""
        entries = self._routes.get(method.upper())
        if entries is None:
            logger.debug("No routes registered for method %s", method)
            return None

        for entry in entries:
            params = entry.pattern.match(path)
            if params is not None:
                return RouteMatch(entry=entry, params=params)
        return None

    @property
    def routes(self) -> list[RouteEntry]:
        """Every registered route, grouped by method in registration order."""
        return [entry for entries in self._routes.values() for entry in entries]

    @property
    def methods(self) -> tuple[str, ...]:
        return tuple(self._routes)

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> None:
        """Make the table read-only. Idempotent."""
        self._frozen = True

    def __len__(self) -> int:
        return sum(len(entries) for entries in self._routes.values())
