"""httpx transport backed by a router.

Code under test that talks HTTP through ``httpx`` can be pointed at a
resolved router without opening a socket::

    transport = StubTransport(router)
    with httpx.Client(transport=transport, base_url="http://stub") as client:
        client.get("/api/users")

Works for both ``httpx.Client`` and ``httpx.AsyncClient``.
"""

import logging

import httpx

from stubroute.http.headers import Headers
from stubroute.http.request import Request
from stubroute.http.response import Response
from stubroute.routing.protocol import Dispatcher

logger = logging.getLogger("stubroute.transport")


def to_stub_request(request: httpx.Request) -> Request:
    """Convert an outgoing httpx request into a router request."""
    return Request(
        method=request.method,
        path=request.url.path,
        headers=Headers(tuple(request.headers.multi_items())),
        body=request.content,
        query_string=request.url.query.decode("ascii"),
    )


def to_httpx_response(response: Response) -> httpx.Response:
    return httpx.Response(
        response.status,
        headers=list(response.headers),
        content=response.body_bytes,
    )


class StubTransport(httpx.MockTransport):
    """An ``httpx`` mock transport that dispatches into *dispatcher*.

    Exceptions raised while dispatching, ``UnsupportedVerbError``
    included, propagate to the caller of the client method.
    """

    def __init__(self, dispatcher: Dispatcher) -> None:
        self.dispatcher = dispatcher
        super().__init__(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        logger.debug("Transport request %s %s", request.method, request.url)
        response = self.dispatcher.dispatch(to_stub_request(request))
        return to_httpx_response(response)
