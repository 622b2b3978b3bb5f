"""stubroute — request routing for HTTP mock servers in tests.

Each test unit gets a router assembled from what it declares: response
capabilities, provider factories, or declarative ``@mock_response``
entries. Unclaimed requests answer 418 (or 404).

Basic usage::

    from stubroute import RouterResolver, TestUnit, mock_response

    @mock_response(status=200, path="/api/hello", text_content="Hello, World!")
    class TestHello:
        def test_hello(self) -> None:
            router = RouterResolver().resolve(TestUnit.for_instance(self))
            ...

Serve the router over ASGI with ``stubroute.asgi.StubASGIApp`` or hand
it to ``httpx`` with ``stubroute.transport.StubTransport``.
"""

__version__ = "0.1.0.dev0"
__all__ = [
    "AllAcceptCapability",
    "Capability",
    "CombinedRouter",
    "ConfigurationError",
    "Dispatcher",
    "EndpointAnswer",
    "Headers",
    "MockResponseConfig",
    "ProviderInvocationError",
    "ProviderLookupError",
    "Request",
    "ResolverConfig",
    "Response",
    "RouteConflictError",
    "RouterResolver",
    "StubASGIApp",
    "StubRouteError",
    "StubTransport",
    "TestUnit",
    "UnsupportedVerbError",
    "Verb",
    "mock_response",
    "route_capability",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import stubroute`` fast and avoids importing ``httpx`` until
    the transport is asked for.
    """
    if name == "ResolverConfig":
        from stubroute.config import ResolverConfig

        return ResolverConfig

    if name == "Headers":
        from stubroute.http.headers import Headers

        return Headers

    if name == "Request":
        from stubroute.http.request import Request

        return Request

    if name == "Response":
        from stubroute.http.response import Response

        return Response

    if name == "Verb":
        from stubroute.routing.verb import Verb

        return Verb

    if name == "Capability":
        from stubroute.routing.capability import Capability

        return Capability

    if name in ("AllAcceptCapability", "EndpointAnswer"):
        from stubroute.routing import answer as _answer

        return getattr(_answer, name)

    if name == "CombinedRouter":
        from stubroute.routing.router import CombinedRouter

        return CombinedRouter

    if name == "Dispatcher":
        from stubroute.routing.protocol import Dispatcher

        return Dispatcher

    if name in ("MockResponseConfig", "mock_response"):
        from stubroute.declarative import config as _decl

        return getattr(_decl, name)

    if name in ("RouterResolver", "TestUnit", "route_capability"):
        from stubroute import resolution as _resolution

        return getattr(_resolution, name)

    if name == "StubASGIApp":
        from stubroute.asgi import StubASGIApp

        return StubASGIApp

    if name == "StubTransport":
        from stubroute.transport import StubTransport

        return StubTransport

    if name in (
        "ConfigurationError",
        "ProviderInvocationError",
        "ProviderLookupError",
        "RouteConflictError",
        "StubRouteError",
        "UnsupportedVerbError",
    ):
        from stubroute import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
