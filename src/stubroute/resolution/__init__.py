"""Resolution — from a test unit's configuration sources to one router."""

from stubroute.resolution.conflicts import (
    RouteConflict,
    RouteKey,
    find_conflicts,
    validate_unique_routes,
)
from stubroute.resolution.resolver import RouterResolver
from stubroute.resolution.sources import CapabilitySource, route_capability
from stubroute.resolution.unit import TestUnit

__all__ = [
    "CapabilitySource",
    "RouteConflict",
    "RouteKey",
    "RouterResolver",
    "TestUnit",
    "find_conflicts",
    "route_capability",
    "validate_unique_routes",
]
