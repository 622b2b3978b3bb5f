"""stubroute exception hierarchy.

Shared across the router, declarative entries, the resolver, and the
adapters so every module raises and catches the same types.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from stubroute.resolution.conflicts import RouteConflict


class StubRouteError(Exception):
    """Base for all stubroute-specific errors."""


class ConfigurationError(StubRouteError):
    """Raised when a router configuration is invalid.

    Fatal for the test unit being resolved: resolution is aborted and
    the error surfaces as a test setup failure.
    """


class RouteConflictError(ConfigurationError):
    """Two or more capabilities claim the same (verb, path) key.

    ``conflicts`` holds one entry per contested key. The message lists
    every key together with the number of claimants.
    """

    def __init__(self, conflicts: Sequence[RouteConflict]) -> None:
        self.conflicts = tuple(conflicts)
        lines = "\n".join(str(conflict) for conflict in self.conflicts)
        super().__init__(f"Route conflicts found:\n{lines}")


class ResolutionError(StubRouteError):
    """Base for failures while locating or calling a capability provider."""


class ProviderLookupError(ResolutionError):
    """A named provider could not be found, called, or returned the wrong type."""


class ProviderInvocationError(ResolutionError):
    """A located provider raised while being called.

    The original exception is chained as ``__cause__``.
    """


class UnsupportedVerbError(StubRouteError):
    """The request method does not match any supported verb."""

    def __init__(self, method: str) -> None:
        self.method = method
        super().__init__(f"Unsupported HTTP method {method!r}. Supported: DELETE, GET, POST, PUT")
