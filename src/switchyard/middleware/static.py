"""Static file serving middleware.

Serves files from a directory for URLs under a configurable prefix.
Supports index files, optional directory listings, and a single-page
application fallback. Falls through to the next stage for anything it
does not serve.
"""

import html
import mimetypes
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

import anyio.to_thread

from switchyard.http.request import Request
from switchyard.http.response import Response
from switchyard.middleware.protocol import Next

DEFAULT_MIME_TYPES: dict[str, str] = {
    # Text
    "html": "text/html",
    "css": "text/css",
    "js": "text/javascript",
    "txt": "text/plain",
    "xml": "text/xml",
    # Images
    "png": "image/png",
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "gif": "image/gif",
    "svg": "image/svg+xml",
    "ico": "image/x-icon",
    # Fonts
    "woff": "font/woff",
    "woff2": "font/woff2",
    "ttf": "font/ttf",
    "otf": "font/otf",
    # Other
    "json": "application/json",
    "pdf": "application/pdf",
    "zip": "application/zip",
}

_FORBIDDEN = Response(body="Forbidden", status=403)


@dataclass(frozen=True, slots=True)
class StaticConfig:
    """Static file middleware configuration.

    Attributes:
        directory: Root directory to serve files from.
        prefix: URL prefix; ``"/assets"`` serves ``directory/x.css`` at
            ``/assets/x.css``. Empty serves from the root.
        index: File served for directory URLs.
        mime_types: Extension (without dot) to content type, taking
            precedence over the built-in table.
        listing: Render an HTML listing for directories without an index.
        spa: Serve the root index for paths that match no file.
        cache_control: ``Cache-Control`` value for served files, if any.
    """

    directory: str | Path = "public"
    prefix: str = ""
    index: str = "index.html"
    mime_types: Mapping[str, str] = field(default_factory=dict)
    listing: bool = False
    spa: bool = False
    cache_control: str | None = None


class Static:
    """Middleware that serves static files from a directory.

    Security: resolves symlinks and verifies the final path is within
    the configured directory; anything outside gets a 403.

    Usage::

        router.use(Static(StaticConfig(directory="./public", prefix="/static")))

        # Single-page app: unknown paths get index.html
        router.use(Static(StaticConfig(directory="./dist", spa=True)))
    """

    __slots__ = ("_config", "_directory", "_mime_types", "_prefix")

    def __init__(self, config: StaticConfig | None = None) -> None:
        self._config = config or StaticConfig()
        self._directory = Path(self._config.directory).resolve()
        self._mime_types = {
            **DEFAULT_MIME_TYPES,
            **{ext.lower().lstrip("."): ct for ext, ct in self._config.mime_types.items()},
        }

        # Normalize prefix: leading slash, no trailing slash, "" for root
        stripped = self._config.prefix.strip("/")
        self._prefix = f"/{stripped}" if stripped else ""

    async def __call__(self, request: Request, next: Next) -> Response:
        """Serve a static file or fall through.

        ``request.path`` is already percent-decoded by the server.
        """
        if request.method not in ("GET", "HEAD"):
            return await next()

        path = request.path

        if self._prefix:
            if path != self._prefix and not path.startswith(self._prefix + "/"):
                return await next()
            path = path[len(self._prefix) :] or "/"

        response = await anyio.to_thread.run_sync(self._lookup, path.lstrip("/"), path)
        if response is None:
            return await next()
        return response

    # ------------------------------------------------------------------
    # Filesystem helpers (run in a worker thread)
    # ------------------------------------------------------------------

    def _lookup(self, relative: str, display_path: str) -> Response | None:
        """Build the response for *relative*, or ``None`` to fall through.

        Paths the filesystem rejects (embedded NUL, unreadable entries)
        count as missing.
        """
        try:
            target = (self._directory / relative).resolve() if relative else self._directory
            if not target.is_relative_to(self._directory):
                return _FORBIDDEN

            if target.is_dir():
                index_path = target / self._config.index
                if index_path.is_file():
                    return self._serve_file(index_path)
                if self._config.listing:
                    return self._listing(target, display_path)
                return None

            if target.is_file():
                return self._serve_file(target)
        except (OSError, ValueError):
            return self._spa_index()

        return self._spa_index()

    def _spa_index(self) -> Response | None:
        """The root index in single-page-app mode, else ``None``."""
        if not self._config.spa:
            return None
        index_path = self._directory / self._config.index
        try:
            if index_path.is_file():
                return self._serve_file(index_path)
        except OSError:
            return None
        return None

    def _content_type(self, file_path: Path) -> str:
        ext = file_path.suffix.lower().lstrip(".")
        content_type = self._mime_types.get(ext)
        if content_type is None:
            content_type, _ = mimetypes.guess_type(file_path.name)
        return content_type or "application/octet-stream"

    def _serve_file(self, file_path: Path) -> Response:
        response = Response(body=file_path.read_bytes(), content_type=self._content_type(file_path))
        if self._config.cache_control:
            response = response.with_header("Cache-Control", self._config.cache_control)
        return response

    def _listing(self, directory: Path, display_path: str) -> Response:
        """Render a minimal HTML index of *directory*."""
        title = html.escape(display_path)
        items: list[str] = []
        if display_path.strip("/"):
            items.append('<li><a href="../">../</a></li>')
        for entry in sorted(directory.iterdir(), key=lambda p: p.name):
            name = entry.name + ("/" if entry.is_dir() else "")
            escaped = html.escape(name)
            items.append(f'<li><a href="./{escaped}">{escaped}</a></li>')

        body = (
            "<!DOCTYPE html>\n"
            "<html>\n"
            f"<head><title>Directory: {title}</title></head>\n"
            "<body>\n"
            f"<h1>Directory: {title}</h1>\n"
            '<ul class="list">\n'
            + "\n".join(items)
            + "\n</ul>\n</body>\n</html>\n"
        )
        return Response(body=body, content_type="text/html; charset=utf-8")
