"""Combined router — chain of responsibility over capabilities.

Capabilities are tried in registration order. Only those whose
``base_path`` is a prefix of the request path are asked; the first one
returning a response wins. Unclaimed requests get the fallback status.

Prefix matching is a raw string comparison, not segment-aware:
``"/api"`` also matches ``"/apiv2"``. Give capabilities distinct
prefixes (or a trailing slash) when that matters.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from stubroute.config import NOT_FOUND, TEAPOT, check_status
from stubroute.http.request import Request
from stubroute.http.response import Response
from stubroute.routing.answer import AllAcceptCapability
from stubroute.routing.capability import Capability
from stubroute.routing.verb import Verb

logger = logging.getLogger("stubroute.router")


class CombinedRouter:
    """Ordered capabilities plus a fallback status.

    Usage::

        router = (
            CombinedRouter()
            .add_capability(UserApi())
            .add_capability(ProductApi())
            .with_fallback(404)
        )
        response = router.dispatch(Request("GET", "/api/users/123"))

    Builder methods are additive and return the router itself. There is
    no way to remove a capability once added.
    """

    __slots__ = ("_capabilities", "_fallback_status")

    def __init__(self, *capabilities: Capability, fallback_status: int = TEAPOT) -> None:
        self._capabilities: list[Capability] = list(capabilities)
        self._fallback_status = check_status(fallback_status, what="fallback status")

    @classmethod
    def api_router(cls, base_path: str = "/api", *, fallback_status: int = TEAPOT) -> CombinedRouter:
        """A router answering every verb under *base_path* optimistically."""
        return cls(AllAcceptCapability(base_path), fallback_status=fallback_status)

    # -- Builder --

    def add_capability(self, capability: Capability) -> CombinedRouter:
        self._capabilities.append(capability)
        return self

    def add_capabilities(self, capabilities: Iterable[Capability]) -> CombinedRouter:
        self._capabilities.extend(capabilities)
        return self

    def with_fallback(self, status: int) -> CombinedRouter:
        """Status returned when no capability claims a request."""
        self._fallback_status = check_status(status, what="fallback status")
        return self

    def end_with_teapot(self, teapot: bool = True) -> CombinedRouter:
        """Shorthand: fall back to 418 when *teapot*, 404 otherwise."""
        return self.with_fallback(TEAPOT if teapot else NOT_FOUND)

    # -- Introspection --

    @property
    def capabilities(self) -> tuple[Capability, ...]:
        return tuple(self._capabilities)

    @property
    def fallback_status(self) -> int:
        return self._fallback_status

    def __len__(self) -> int:
        return len(self._capabilities)

    def __repr__(self) -> str:
        return (
            f"CombinedRouter(capabilities={len(self._capabilities)}, "
            f"fallback_status={self._fallback_status})"
        )

    # -- Dispatch --

    def dispatch(self, request: Request) -> Response:
        """Route *request* to the first capability that answers it.

        Raises ``UnsupportedVerbError`` if the method is not a ``Verb``.
        Exceptions raised by capability handlers propagate unchanged.
        """
        path = request.path or ""
        verb = Verb.parse(request.method)
        logger.info("Processing method '%s' with path '%s'", verb.name, path)

        matching = [cap for cap in self._capabilities if path.startswith(cap.base_path)]

        for capability in matching:
            response = verb.dispatch(capability, request)
            if response is not None:
                return response

        logger.info(
            "Method '%s' with path '%s' could not be processed by %d capabilities, "
            "going to fallback %d",
            verb.name,
            path,
            len(matching),
            self._fallback_status,
        )
        return Response(self._fallback_status)

    __call__ = dispatch
