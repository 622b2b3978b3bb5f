"""Imperative capability sources declared with ``@route_capability``.

Two forms, usable on a test class or a test function::

    @route_capability(UserApiCapability)
    class TestUsers: ...

    @route_capability(provider=CapabilityFactory, provider_method="user_api")
    class TestFactory: ...

The first instantiates the capability type with its zero-argument
constructor. The second looks up ``provider_method`` on ``provider``
(a class, module, or object) and calls it; the result may be a
capability or a complete router.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, TypeVar

from stubroute.errors import ConfigurationError

if TYPE_CHECKING:
    from stubroute.resolution.unit import TestUnit
    from stubroute.routing.capability import Capability

SOURCE_ATTR = "__stubroute_capability_source__"

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class CapabilitySource:
    """Where a test unit's imperative capability comes from."""

    capability: type[Capability] | None = None
    provider: object | None = None
    provider_method: str | None = None

    def __post_init__(self) -> None:
        if self.capability is None and self.provider is None:
            msg = "route_capability needs a capability type or a provider"
            raise ConfigurationError(msg)
        if (self.provider is None) != (not self.provider_method):
            msg = "route_capability needs both provider and provider_method, or neither"
            raise ConfigurationError(msg)

    @property
    def has_provider(self) -> bool:
        return self.provider is not None and bool(self.provider_method)


def route_capability(
    capability: type[Capability] | None = None,
    *,
    provider: object | None = None,
    provider_method: str | None = None,
) -> Callable[[T], T]:
    """Declare the capability (or capability provider) for a test class or function."""
    source = CapabilitySource(
        capability=capability,
        provider=provider,
        provider_method=provider_method,
    )

    def decorator(target: T) -> T:
        setattr(target, SOURCE_ATTR, source)
        return target

    return decorator


def find_source(unit: TestUnit) -> CapabilitySource | None:
    """The most specific ``@route_capability`` declaration visible to *unit*."""
    for scope in unit.scopes():
        namespace = getattr(scope, "__dict__", {})
        source = namespace.get(SOURCE_ATTR)
        if source is not None:
            return source
    return None
