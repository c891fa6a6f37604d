"""Application configuration.

AppConfig is a frozen dataclass: immutable after creation and IDE-autocompletable, with
no string-key dict lookups.
"""

from dataclasses import dataclass

DEFAULT_METHODS: tuple[str, ...] = ("GET", "POST", "PUT", "DELETE")


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Application configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = AppConfig(methods=("GET", "POST", "PATCH"), debug=True)
    """

    # Methods with a (possibly empty) route list from the start.
    # Routes for other methods can still be registered explicitly.
    methods: tuple[str, ...] = DEFAULT_METHODS

    # Include the exception message in the 500 log line
    debug: bool = False
