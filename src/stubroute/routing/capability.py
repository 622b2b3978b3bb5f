"""The capability contract.

A capability is a unit of request-handling logic scoped to a base path
and a set of verbs. The router only passes it requests whose path starts
with ``base_path``; each handler returns a ``Response`` or ``None`` to
let the next capability try.

Usage::

    class UserApi(Capability):
        base_path = "/api/users"

        def handle_get(self, request: Request) -> Response | None:
            if request.path == "/api/users/123":
                return Response(200).with_body('{"id": "123"}')
            return None
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from stubroute.routing.verb import Verb

if TYPE_CHECKING:
    from stubroute.http.request import Request
    from stubroute.http.response import Response

ALL_VERBS: frozenset[Verb] = frozenset(Verb)


class Capability:
    """Base class for request-handling capabilities.

    Subclasses set ``base_path`` (as a class attribute, an instance
    attribute, or a property) and override the handlers they answer.
    Use ``"/"`` to see every request.
    """

    base_path: str

    def supported_methods(self) -> frozenset[Verb]:
        """Verbs this capability claims. Used for conflict validation."""
        return ALL_VERBS

    def handle_get(self, request: Request) -> Response | None:
        return None

    def handle_post(self, request: Request) -> Response | None:
        return None

    def handle_put(self, request: Request) -> Response | None:
        return None

    def handle_delete(self, request: Request) -> Response | None:
        return None

    def __repr__(self) -> str:
        base_path = getattr(self, "base_path", "?")
        return f"{type(self).__name__}(base_path={base_path!r})"
