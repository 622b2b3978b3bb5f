"""ASGI adapter — serve a resolved router from any ASGI server or client.

The router itself is synchronous. The adapter reads the complete request
body, dispatches, and translates the ``Response`` into ASGI messages::

    app = StubASGIApp(RouterResolver().resolve(unit))
    async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app)) as client:
        ...
"""

import logging

from stubroute._internal.asgi import Receive, Scope, Send
from stubroute.errors import UnsupportedVerbError
from stubroute.http.request import Request
from stubroute.http.response import Response
from stubroute.routing.protocol import Dispatcher
from stubroute.routing.verb import Verb

logger = logging.getLogger("stubroute.asgi")

METHOD_NOT_ALLOWED = 405


def _body_allowed(status: int) -> bool:
    """Whether an HTTP status code permits a response body."""
    # RFC: 1xx, 204, and 304 responses do not include a message body.
    return not (100 <= status < 200 or status in {204, 304})


async def read_body(receive: Receive) -> bytes:
    """Consume every ``http.request`` message and join the body chunks."""
    chunks: list[bytes] = []
    while True:
        message = await receive()
        if message["type"] == "http.disconnect":
            break
        body = message.get("body", b"")
        if body:
            chunks.append(body)
        if not message.get("more_body", False):
            break
    return b"".join(chunks)


async def send_response(response: Response, send: Send) -> None:
    """Translate a Response into ASGI send() calls."""
    raw_headers: list[tuple[bytes, bytes]] = [
        (name.lower().encode("latin-1"), value.encode("latin-1"))
        for name, value in response.headers
    ]

    body = response.body_bytes if _body_allowed(response.status) else b""

    raw_headers.append((b"content-length", str(len(body)).encode("latin-1")))

    await send(
        {
            "type": "http.response.start",
            "status": response.status,
            "headers": raw_headers,
        }
    )
    await send(
        {
            "type": "http.response.body",
            "body": body,
        }
    )


def method_not_allowed(error: UnsupportedVerbError) -> Response:
    """405 answer for a method outside the verb enumeration."""
    allow = ", ".join(sorted(verb.value for verb in Verb))
    return Response(
        status=METHOD_NOT_ALLOWED,
        headers=(("Allow", allow), ("Content-Type", "text/plain")),
        body=str(error),
    )


class StubASGIApp:
    """ASGI 3.0 application wrapping a dispatcher.

    Lifespan scopes are acknowledged; HTTP scopes are dispatched.
    Methods outside GET/POST/PUT/DELETE answer 405. Any other exception
    raised by a capability propagates to the server.
    """

    __slots__ = ("dispatcher",)

    def __init__(self, dispatcher: Dispatcher) -> None:
        self.dispatcher = dispatcher

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "lifespan":
            await self._handle_lifespan(receive, send)
            return

        if scope["type"] != "http":
            msg = f"StubASGIApp only serves http scopes, got {scope['type']!r}"
            raise RuntimeError(msg)

        body = await read_body(receive)
        request = Request.from_asgi(scope, body)
        try:
            response = self.dispatcher.dispatch(request)
        except UnsupportedVerbError as exc:
            logger.warning("Rejecting %s %s: %s", request.method, request.path, exc)
            response = method_not_allowed(exc)
        await send_response(response, send)

    async def _handle_lifespan(self, receive: Receive, send: Send) -> None:
        while True:
            message = await receive()
            if message["type"] == "lifespan.startup":
                await send({"type": "lifespan.startup.complete"})
            elif message["type"] == "lifespan.shutdown":
                await send({"type": "lifespan.shutdown.complete"})
                return
