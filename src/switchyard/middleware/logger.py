"""Request logging middleware.

Writes one line when a request comes in and one when its response (or
failure) goes out, through the ``switchyard.access`` logger::

    [2026-10-19 14:03:12] → GET /users/42
    [2026-10-19 14:03:12] ← GET /users/42 200 3.41ms

Status codes, methods, and durations are colored with ANSI escapes when
color is enabled. Respects TTY detection, so there are no escapes when stderr is
piped or redirected.
"""

import logging
import sys
import time
from dataclasses import dataclass
from datetime import datetime

from switchyard.http.request import Request
from switchyard.http.response import Response
from switchyard.middleware.protocol import Next

logger = logging.getLogger("switchyard.access")


def _use_color(stream: object | None = None) -> bool:
    """True if the output stream supports ANSI color."""
    s = stream or sys.stderr
    try:
        return s.isatty()  # type: ignore[union-attr]
    except (AttributeError, ValueError):
        return False


class _Palette:
    """ANSI escape sequences; empty strings when color is disabled."""

    __slots__ = ("blue", "cyan", "gray", "green", "magenta", "red", "reset", "white", "yellow")

    def __init__(self, *, enabled: bool) -> None:
        if enabled:
            self.reset = "\033[0m"
            self.red = "\033[31m"
            self.green = "\033[32m"
            self.yellow = "\033[33m"
            self.blue = "\033[34m"
            self.magenta = "\033[35m"
            self.cyan = "\033[36m"
            self.white = "\033[37m"
            self.gray = "\033[90m"
        else:
            self.reset = ""
            self.red = ""
            self.green = ""
            self.yellow = ""
            self.blue = ""
            self.magenta = ""
            self.cyan = ""
            self.white = ""
            self.gray = ""


@dataclass(frozen=True, slots=True)
class LoggerConfig:
    """Logger middleware configuration.

    ``color=None`` decides once, at construction, from whether stderr is
    a terminal.
    """

    enabled: bool = True
    show_timestamp: bool = True
    show_duration: bool = True
    color: bool | None = None


class Logger:
    """Middleware that logs each request and its outcome.

    Failures get a one-line error record and are re-raised; the router
    logs the traceback and turns them into a 500 response.
    """

    __slots__ = ("_config", "_p")

    def __init__(self, config: LoggerConfig | None = None) -> None:
        self._config = config or LoggerConfig()
        color = self._config.color
        self._p = _Palette(enabled=_use_color() if color is None else color)

    # -- Formatting --

    def _status(self, status: int) -> str:
        p = self._p
        if status >= 500:
            tone = p.red
        elif status >= 400:
            tone = p.yellow
        elif status >= 300:
            tone = p.cyan
        elif status >= 200:
            tone = p.green
        else:
            tone = p.gray
        return f"{tone}{status}{p.reset}"

    def _method(self, method: str) -> str:
        p = self._p
        tone = {
            "GET": p.blue,
            "POST": p.green,
            "PUT": p.yellow,
            "DELETE": p.red,
            "PATCH": p.magenta,
        }.get(method.upper(), p.gray)
        return f"{tone}{method}{p.reset}"

    def _timestamp(self) -> str:
        now = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        return f"{self._p.gray}[{now}]{self._p.reset}"

    def _duration(self, seconds: float) -> str:
        p = self._p
        ms = seconds * 1000
        if ms > 1000:
            return f"{p.red}{ms / 1000:.2f}s{p.reset}"
        tone = p.yellow if ms > 100 else p.green
        return f"{tone}{ms:.2f}ms{p.reset}"

    def _line(self, arrow: str, request: Request, *tail: str | None) -> str:
        parts = [
            self._timestamp() if self._config.show_timestamp else None,
            arrow,
            self._method(request.method),
            f"{self._p.white}{request.path}{self._p.reset}",
            *tail,
        ]
        return " ".join(part for part in parts if part)

    # -- Middleware --

    async def __call__(self, request: Request, next: Next) -> Response:
        if not self._config.enabled:
            return await next()

        start = time.perf_counter()
        logger.info(self._line("→", request))

        try:
            response = await next()
        except Exception:
            elapsed = time.perf_counter() - start
            duration = self._duration(elapsed) if self._config.show_duration else None
            error = f"{self._p.red}ERROR{self._p.reset}"
            logger.error(self._line("⨯", request, error, duration))
            raise

        elapsed = time.perf_counter() - start
        duration = self._duration(elapsed) if self._config.show_duration else None
        logger.info(self._line("←", request, self._status(response.status), duration))
        return response
