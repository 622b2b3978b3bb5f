"""Resolver configuration.

ResolverConfig is a frozen dataclass: immutable after creation,
IDE-autocompletable, no string-key dict lookups.
"""

from dataclasses import dataclass

from stubroute.errors import ConfigurationError

NOT_FOUND = 404
TEAPOT = 418


def check_status(status: object, *, what: str = "status") -> int:
    """Return *status* if it is a usable HTTP status code, else raise."""
    if isinstance(status, bool) or not isinstance(status, int) or not 100 <= status <= 599:
        msg = f"Invalid {what} {status!r}: expected an HTTP status code between 100 and 599."
        raise ConfigurationError(msg)
    return status


@dataclass(frozen=True, slots=True)
class ResolverConfig:
    """Settings for turning a test unit's configuration into a router.

    All fields have sensible defaults. Override what you need::

        config = ResolverConfig(fallback_status=NOT_FOUND)
    """

    # Status returned when no capability claims a request
    fallback_status: int = TEAPOT

    # Base path of the optimistic capability used when nothing is configured
    default_base_path: str = "/api"

    # Zero-argument method on the test instance returning a capability
    capability_method: str = "get_route_capability"

    # Legacy zero-argument accessor on the test instance returning a full router
    legacy_accessor: str = "get_dispatcher"

    # Log the "VERB path -> Capability" table after each resolution
    log_active_routes: bool = True

    def __post_init__(self) -> None:
        check_status(self.fallback_status, what="fallback status")
        if not self.capability_method or not self.legacy_accessor:
            msg = "capability_method and legacy_accessor must be non-empty names."
            raise ConfigurationError(msg)
