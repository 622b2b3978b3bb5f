"""The Dispatcher protocol.

A dispatcher is anything that turns a request into a response::

    class Echo:
        def dispatch(self, request: Request) -> Response:
            return Response(200).with_body(request.body)

No base class required. The resolver checks the shape, not the lineage,
which is how legacy routers and provider-built routers are recognised.
"""

from typing import Protocol, runtime_checkable

from stubroute.http.request import Request
from stubroute.http.response import Response


@runtime_checkable
class Dispatcher(Protocol):
    """Protocol for complete routers."""

    def dispatch(self, request: Request) -> Response: ...


def is_dispatcher(value: object) -> bool:
    """True if *value* is a router object (a class is never one)."""
    return not isinstance(value, type) and isinstance(value, Dispatcher)
