"""HTTP verbs and verb-to-handler dispatch.

The enumeration is closed: each member maps to exactly one handler
operation on a ``Capability``.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

from stubroute.errors import UnsupportedVerbError

if TYPE_CHECKING:
    from stubroute.http.request import Request
    from stubroute.http.response import Response
    from stubroute.routing.capability import Capability


class Verb(Enum):
    """Supported HTTP methods."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"

    @classmethod
    def parse(cls, method: str | Verb | None) -> Verb:
        """Return the verb for *method* (case-insensitive).

        Raises ``UnsupportedVerbError`` for anything outside the enumeration.
        """
        if isinstance(method, Verb):
            return method
        name = (method or "").upper()
        try:
            return cls[name]
        except KeyError:
            raise UnsupportedVerbError(method or "") from None

    @property
    def handler_name(self) -> str:
        """Name of the capability operation handling this verb."""
        return f"handle_{self.name.lower()}"

    def dispatch(self, capability: Capability, request: Request) -> Response | None:
        """Call the handler operation of *capability* matching this verb."""
        match self:
            case Verb.GET:
                return capability.handle_get(request)
            case Verb.POST:
                return capability.handle_post(request)
            case Verb.PUT:
                return capability.handle_put(request)
            case Verb.DELETE:
                return capability.handle_delete(request)
