"""Path templates compiled into anchored matchers.

A template mixes literal text with ``:name`` parameters::

    "/users/:id/posts/:postId"

Each parameter matches one or more characters up to the next ``/``.
Everything else, separators included, must match exactly.
"""

import re
from dataclasses import dataclass

from switchyard.errors import ConfigurationError

# A parameter is ":" followed by an identifier starting with a letter
PARAM_RE = re.compile(r":([A-Za-z][A-Za-z0-9]*)")

# What a single parameter slot captures
PARAM_SLOT = r"([^/]+)"


@dataclass(frozen=True, slots=True)
class PathSegment:
    """A parsed piece of a path template.

    Literal: ``/users/``  (is_param=False)
    Param:   ``:id``      (is_param=True, param_name="id")
    """

    value: str
    is_param: bool = False
    param_name: str | None = None


@dataclass(frozen=True, slots=True)
class PathPattern:
    """A compiled path template. Immutable after creation."""

    template: str
    segments: tuple[PathSegment, ...]
    param_names: tuple[str, ...]
    regex: re.Pattern[str]

    def match(self, path: str) -> dict[str, str] | None:
        """Match the whole of *path*.

        Returns the parameters in declaration order, or ``None``.
        """
        found = self.regex.fullmatch(path)
        if found is None:
            return None
        return dict(zip(self.param_names, found.groups(), strict=True))


def parse_template(template: str) -> list[PathSegment]:
    """Split a template into literal and parameter segments.

    Examples::

        "/health"        -> [PathSegment("/health")]
        "/users/:id"     -> [PathSegment("/users/"), PathSegment(":id", is_param=True, ...)]
        "/files/:name.json" -> [..., PathSegment(":name", ...), PathSegment(".json")]
    """
    segments: list[PathSegment] = []
    pos = 0
    for found in PARAM_RE.finditer(template):
        if found.start() > pos:
            segments.append(PathSegment(template[pos : found.start()]))
        segments.append(
            PathSegment(found.group(0), is_param=True, param_name=found.group(1))
        )
        pos = found.end()
    if pos < len(template):
        segments.append(PathSegment(template[pos:]))
    return segments


def compile_pattern(template: str) -> PathPattern:
    """Compile a path template.

    Raises ``ConfigurationError`` if a parameter name appears twice.
    """
    segments = parse_template(template)
    names: list[str] = []
    parts: list[str] = []
    for seg in segments:
        if not seg.is_param:
            parts.append(re.escape(seg.value))
            continue
        name = seg.param_name or ""
        if name in names:
            msg = f"Duplicate parameter {name!r} in route {template!r}."
            raise ConfigurationError(msg)
        names.append(name)
        parts.append(PARAM_SLOT)

    return PathPattern(
        template=template,
        segments=tuple(segments),
        param_names=tuple(names),
        regex=re.compile("".join(parts)),
    )
