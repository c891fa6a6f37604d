"""Shared type aliases used across switchyard modules."""

from collections.abc import Callable
from typing import Any, TypeAlias

# Route handler: receives a Context, returns a response value
Handler: TypeAlias = Callable[..., Any]
