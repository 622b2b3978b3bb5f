"""Turns a test unit's configuration into a router.

Sources are consulted in strict priority order. Capabilities from the
modern sources accumulate; the legacy and default paths only engage
when those sources produce nothing:

1. ``@route_capability(SomeCapability)`` — instantiated directly.
   Failures are logged and the source is skipped.
2. ``@route_capability(provider=..., provider_method=...)`` — looked up
   and called. A capability is added; a complete router is returned
   at once, bypassing everything else. Failures raise.
3. ``get_route_capability()`` on the test instance. Failures raise.
4. Every ``@mock_response`` entry visible to the unit.
5. Legacy ``get_dispatcher()`` on the test instance, used as-is.
6. An optimistic ``/api`` router.

The accumulated capabilities from 1-4 are checked for (verb, path)
conflicts before they are combined.
"""

from __future__ import annotations

import inspect
import logging

from stubroute._internal.lookup import (
    describe,
    ensure_zero_arg,
    instantiate,
    invoke,
    resolve_callable,
)
from stubroute.config import ResolverConfig
from stubroute.declarative.config import declared_responses
from stubroute.declarative.element import DeclarativeCapability
from stubroute.errors import ProviderLookupError, ResolutionError, RouteConflictError
from stubroute.resolution.conflicts import validate_unique_routes
from stubroute.resolution.sources import CapabilitySource, find_source
from stubroute.resolution.unit import TestUnit
from stubroute.routing.capability import Capability
from stubroute.routing.protocol import Dispatcher, is_dispatcher
from stubroute.routing.router import CombinedRouter

logger = logging.getLogger("stubroute.resolver")


class RouterResolver:
    """Builds one fresh router per test unit.

    Holds no state besides its configuration, so a single resolver can
    serve any number of units; nothing is cached between them.
    """

    __slots__ = ("config",)

    def __init__(self, config: ResolverConfig | None = None) -> None:
        self.config = config or ResolverConfig()

    def resolve(self, unit: TestUnit) -> Dispatcher:
        """Return the router for *unit*.

        Raises ``ConfigurationError`` for invalid declarative entries and
        route conflicts, ``ProviderLookupError`` / ``ProviderInvocationError``
        for failing provider sources.
        """
        logger.debug("Resolving router for test unit: %s", unit.name)
        capabilities: list[Capability] = []

        source = find_source(unit)
        if source is not None:
            if source.capability is not None:
                direct = self._from_type(source.capability)
                if direct is not None:
                    capabilities.append(direct)
            if source.has_provider:
                provided = self._from_provider(source)
                if not isinstance(provided, Capability):
                    logger.debug("Provider returned a complete router, using it as-is")
                    return provided
                capabilities.append(provided)

        in_place = self._from_instance_method(unit)
        if in_place is not None:
            capabilities.append(in_place)

        declarative = self._from_declarations(unit)
        if declarative:
            logger.debug("Found %d mock response entries for %s", len(declarative), unit.name)
            capabilities.extend(declarative)

        if not capabilities:
            legacy = self._from_legacy_accessor(unit)
            if legacy is not None:
                logger.debug("Using legacy router from %s()", self.config.legacy_accessor)
                return legacy
            logger.debug("No capabilities found, using default %s router", self.config.default_base_path)
            return CombinedRouter.api_router(
                self.config.default_base_path,
                fallback_status=self.config.fallback_status,
            )

        try:
            validate_unique_routes(capabilities)
        except RouteConflictError as exc:
            logger.error("Test unit %s: %s", unit.name, exc)
            raise

        if self.config.log_active_routes:
            log_active_routes(capabilities)

        logger.debug("Creating CombinedRouter with %d capabilities", len(capabilities))
        return CombinedRouter(*capabilities, fallback_status=self.config.fallback_status)

    # -- Sources --

    def _from_type(self, capability_type: type) -> Capability | None:
        """Source 1: any failure here means "not for us", so it is only logged."""
        label = describe(capability_type)
        logger.debug("Creating capability from type: %s", label)
        if not (isinstance(capability_type, type) and issubclass(capability_type, Capability)):
            logger.error("Failed to instantiate capability %s: not a Capability subclass", label)
            return None
        try:
            return instantiate(capability_type, label)
        except ResolutionError as exc:
            logger.error("Failed to instantiate capability %s: %s", label, exc)
            logger.debug("Exception details", exc_info=True)
            return None

    def _from_provider(self, source: CapabilitySource) -> Capability | Dispatcher:
        """Source 2: the result must be a capability or a complete router."""
        method_name = source.provider_method or ""
        label = f"{describe(source.provider)}.{method_name}"
        logger.debug("Creating capability from provider: %s", label)
        factory = resolve_callable(source.provider, method_name)
        result = invoke(factory, f"Provider method {label}")
        if isinstance(result, Capability) or is_dispatcher(result):
            return result
        msg = f"Provider method {label} returned {result!r}, expected a Capability or a router"
        raise ProviderLookupError(msg)

    def _from_instance_method(self, unit: TestUnit) -> Capability | None:
        """Source 3: an explicit method means explicit intent, so every problem raises."""
        name = self.config.capability_method
        holder = unit.instance if unit.instance is not None else unit.owner
        if holder is None:
            return None
        try:
            raw = inspect.getattr_static(holder, name)
        except AttributeError:
            logger.debug("No %s() method found in test unit: %s", name, unit.name)
            return None

        label = f"{unit.name}.{name}()"
        if unit.instance is None and inspect.isfunction(raw):
            msg = f"{label} needs a test instance, none given"
            raise ProviderLookupError(msg)

        method = getattr(holder, name)
        if not callable(method):
            msg = f"{label} is not callable ({type(method).__name__})"
            raise ProviderLookupError(msg)
        ensure_zero_arg(method, label)

        logger.debug("Found %s method in test unit: %s", name, unit.name)
        result = invoke(method, label)
        if not isinstance(result, Capability):
            msg = f"{label} returned {result!r}, expected a Capability"
            raise ProviderLookupError(msg)
        return result

    def _from_declarations(self, unit: TestUnit) -> list[Capability]:
        """Source 4: one capability per visible ``@mock_response`` entry."""
        capabilities: list[Capability] = []
        for scope in unit.scopes():
            for config in declared_responses(scope):
                logger.debug(
                    "Adding mock response from %s for %s %s",
                    getattr(scope, "__qualname__", scope),
                    config.verb,
                    config.path,
                )
                capabilities.append(DeclarativeCapability(config))
        return capabilities

    def _from_legacy_accessor(self, unit: TestUnit) -> Dispatcher | None:
        """Source 5: a runtime probe for an old-style router accessor."""
        if unit.instance is None:
            return None
        accessor = getattr(unit.instance, self.config.legacy_accessor, None)
        if accessor is None or not callable(accessor):
            return None
        label = f"{unit.name}.{self.config.legacy_accessor}()"
        logger.debug("Test unit exposes %s, checking for a router", label)
        ensure_zero_arg(accessor, label)
        router = invoke(accessor, label)
        if router is None:
            return None
        if not is_dispatcher(router):
            logger.error(
                "%s() returned %r, which has no dispatch(request) method; ignoring it",
                self.config.legacy_accessor,
                router,
            )
            return None
        return router


def log_active_routes(capabilities: list[Capability]) -> None:
    """Log every ``VERB path -> Capability`` entry, sorted by key."""
    if not logger.isEnabledFor(logging.INFO) or not capabilities:
        return
    entries = sorted(
        (f"{verb.name} {capability.base_path}", type(capability).__name__)
        for capability in capabilities
        for verb in capability.supported_methods()
    )
    logger.info("Active route capabilities:")
    for key, name in entries:
        logger.info("- %s -> %s", key, name)
