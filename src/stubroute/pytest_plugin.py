"""pytest fixtures that resolve a router for the running test.

Needs pytest installed (``pip install stubroute[pytest]``). Enable in a
``conftest.py``::

    pytest_plugins = ["stubroute.pytest_plugin"]

Then::

    @mock_response(status=200, path="/api/hello", text_content="Hello, World!")
    class TestHello:
        def test_hello(self, stub_client) -> None:
            assert stub_client.get("/api/hello").text == "Hello, World!"
"""

import pytest

from stubroute.config import ResolverConfig
from stubroute.resolution.resolver import RouterResolver
from stubroute.resolution.unit import TestUnit
from stubroute.routing.protocol import Dispatcher
from stubroute.testing.client import StubClient
from stubroute.transport import StubTransport


@pytest.fixture
def stub_resolver_config() -> ResolverConfig:
    """Resolver settings. Override this fixture to change them per module or class."""
    return ResolverConfig()


@pytest.fixture
def stub_router(request: pytest.FixtureRequest, stub_resolver_config: ResolverConfig) -> Dispatcher:
    """A fresh router resolved for the current test item."""
    unit = TestUnit.from_pytest_item(request.node)
    return RouterResolver(stub_resolver_config).resolve(unit)


@pytest.fixture
def stub_client(stub_router: Dispatcher) -> StubClient:
    return StubClient(stub_router)


@pytest.fixture
def stub_transport(stub_router: Dispatcher) -> StubTransport:
    """An httpx transport for code under test that takes a client or transport."""
    return StubTransport(stub_router)
