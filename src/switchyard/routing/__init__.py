"""Routing — path patterns and the per-method route table.

Routes are registered during setup and frozen once dispatch begins.
"""

from switchyard.routing.pattern import PathPattern, PathSegment, compile_pattern
from switchyard.routing.table import RouteEntry, RouteMatch, RouteTable

__all__ = [
    "PathPattern",
    "PathSegment",
    "RouteEntry",
    "RouteMatch",
    "RouteTable",
    "compile_pattern",
]
