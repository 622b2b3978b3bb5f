"""Tests for stubroute.resolution.resolver — building a router per test unit."""

import logging

import pytest

from stubroute.config import NOT_FOUND, ResolverConfig
from stubroute.declarative import DeclarativeCapability, mock_response
from stubroute.errors import (
    ConfigurationError,
    ProviderInvocationError,
    ProviderLookupError,
    RouteConflictError,
    UnsupportedVerbError,
)
from stubroute.http.request import Request
from stubroute.http.response import Response
from stubroute.resolution.resolver import RouterResolver
from stubroute.resolution.sources import route_capability
from stubroute.resolution.unit import TestUnit
from stubroute.routing.answer import AllAcceptCapability
from stubroute.routing.capability import Capability
from stubroute.routing.router import CombinedRouter


# -- Capabilities and providers --


class UsersApi(Capability):
    base_path = "/api/users"

    def handle_get(self, request: Request) -> Response | None:
        return Response(200).with_body("users")


class ItemsApi(Capability):
    base_path = "/api/items"

    def handle_post(self, request: Request) -> Response | None:
        return Response(201).with_body("item created")


class NeedsUrl(Capability):
    base_path = "/api"

    def __init__(self, url: str) -> None:
        self.url = url


class ExplodingApi(Capability):
    base_path = "/api"

    def __init__(self) -> None:
        msg = "cannot build"
        raise RuntimeError(msg)


class NotACapability:
    pass


class EchoRouter:
    def dispatch(self, request: Request) -> Response:
        return Response(200).with_body(f"echo {request.path}")


class Providers:
    @staticmethod
    def users() -> Capability:
        return UsersApi()

    @staticmethod
    def router() -> EchoRouter:
        return EchoRouter()

    @staticmethod
    def nothing() -> None:
        return None

    @staticmethod
    def broken() -> Capability:
        msg = "provider failed"
        raise KeyError(msg)

    def items(self) -> Capability:
        return ItemsApi()


# -- Test-unit shapes --


class Bare:
    def test_it(self) -> None:
        pass


@route_capability(UsersApi)
class DirectType:
    def test_it(self) -> None:
        pass


@route_capability(NeedsUrl)
class DirectTypeNeedsArgs:
    def test_it(self) -> None:
        pass


@route_capability(ExplodingApi)
class DirectTypeRaises:
    def test_it(self) -> None:
        pass


@route_capability(NotACapability)  # type: ignore[arg-type]
class DirectTypeWrong:
    def test_it(self) -> None:
        pass


@route_capability(provider=Providers, provider_method="users")
class ProviderCapability:
    @mock_response(status=200, path="/api/health", text_content="up")
    def test_it(self) -> None:
        pass


@route_capability(provider=Providers, provider_method="items")
class ProviderInstanceMethod:
    def test_it(self) -> None:
        pass


@route_capability(provider=Providers, provider_method="router")
@mock_response(status=200, path="/api/health", text_content="up")
class ProviderRouter:
    def get_route_capability(self) -> Capability:
        return UsersApi()

    def test_it(self) -> None:
        pass


@route_capability(UsersApi, provider=Providers, provider_method="items")
class DirectAndProvider:
    def test_it(self) -> None:
        pass


class InPlace:
    def get_route_capability(self) -> Capability:
        return ItemsApi()

    def test_it(self) -> None:
        pass


class InPlaceNone:
    def get_route_capability(self) -> Capability | None:
        return None


class InPlaceWrongType:
    def get_route_capability(self) -> object:
        return "not a capability"


class InPlaceNeedsArgs:
    def get_route_capability(self, flavour: str) -> Capability:
        return UsersApi()


class InPlaceNotCallable:
    get_route_capability = "nope"


class InPlaceRaises:
    def get_route_capability(self) -> Capability:
        msg = "in-place failed"
        raise ValueError(msg)


class InPlaceStatic:
    @staticmethod
    def get_route_capability() -> Capability:
        return UsersApi()


@mock_response(status=200, path="/api/base", text_content="base")
class DeclaredBase:
    pass


@mock_response(status=200, path="/api/outer", text_content="outer")
class Declared:
    @mock_response(status=200, path="/api/inner", text_content="inner")
    class Inner(DeclaredBase):
        @mock_response(status=200, path="/api/users", text_content="Hello, World!")
        def test_hello(self) -> None:
            pass

        @mock_response(status=201, path="/api/sibling", verb="POST")
        def test_sibling(self) -> None:
            pass

    @mock_response(status=200, path="/api/other-nested", text_content="other")
    class OtherInner:
        pass


@mock_response(status=200, path="/api/users", text_content="first")
@mock_response(status=200, path="/api/users", text_content="second")
class DuplicateDeclarations:
    def test_it(self) -> None:
        pass


@route_capability(UsersApi)
@mock_response(status=200, path="/api/users", text_content="declared")
class DirectConflictsWithDeclared:
    def test_it(self) -> None:
        pass


@mock_response(status=200, path="/api/items", text_content="a", json_content_key_value="b=c")
class InvalidDeclaration:
    def test_it(self) -> None:
        pass


class Legacy:
    def get_dispatcher(self) -> EchoRouter:
        return EchoRouter()

    def test_it(self) -> None:
        pass


class LegacyReturnsNone:
    def get_dispatcher(self) -> None:
        return None


class LegacyWrongType:
    def get_dispatcher(self) -> str:
        return "not a router"


class LegacyNeedsArgs:
    def get_dispatcher(self, flavour: str) -> EchoRouter:
        return EchoRouter()


class LegacyRaises:
    def get_dispatcher(self) -> EchoRouter:
        msg = "legacy failed"
        raise LookupError(msg)


@mock_response(status=200, path="/api/users", text_content="declared")
class LegacyWithDeclarations:
    def get_dispatcher(self) -> EchoRouter:
        return EchoRouter()


def _resolve(unit: TestUnit, **config: object) -> object:
    return RouterResolver(ResolverConfig(**config)).resolve(unit)  # type: ignore[arg-type]


def _get(router: object, path: str, method: str = "GET") -> Response:
    return router.dispatch(Request(method, path))  # type: ignore[attr-defined]


class TestDefaultFallback:
    def test_nothing_configured_gives_optimistic_api_router(self) -> None:
        router = _resolve(TestUnit.for_instance(Bare(), Bare.test_it))
        assert isinstance(router, CombinedRouter)
        (capability,) = router.capabilities
        assert isinstance(capability, AllAcceptCapability)
        assert capability.base_path == "/api"
        assert _get(router, "/api/anything").status == 200
        assert _get(router, "/unknown").status == 418

    def test_default_follows_config(self) -> None:
        router = _resolve(TestUnit.for_class(Bare), default_base_path="/v2", fallback_status=NOT_FOUND)
        assert _get(router, "/v2/x").status == 200
        assert _get(router, "/api/x").status == 404


class TestDirectType:
    def test_instantiates_capability(self) -> None:
        router = _resolve(TestUnit.for_instance(DirectType()))
        assert _get(router, "/api/users").text == "users"

    @pytest.mark.parametrize("owner", [DirectTypeNeedsArgs, DirectTypeRaises, DirectTypeWrong])
    def test_failures_are_logged_and_skipped(
        self, owner: type, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.ERROR, logger="stubroute.resolver"):
            router = _resolve(TestUnit.for_instance(owner()))
        assert "Failed to instantiate capability" in caplog.text
        assert isinstance(router.capabilities[0], AllAcceptCapability)  # type: ignore[attr-defined]

    def test_combines_with_provider(self) -> None:
        router = _resolve(TestUnit.for_instance(DirectAndProvider()))
        assert len(router) == 2  # type: ignore[arg-type]
        assert _get(router, "/api/users").text == "users"
        assert _get(router, "/api/items", "POST").text == "item created"


class TestProvider:
    def test_capability_is_combined_with_declarations(self) -> None:
        unit = TestUnit.for_instance(ProviderCapability(), ProviderCapability.test_it)
        router = _resolve(unit)
        assert _get(router, "/api/users").text == "users"
        assert _get(router, "/api/health").text == "up"

    def test_instance_method_provider(self) -> None:
        router = _resolve(TestUnit.for_instance(ProviderInstanceMethod()))
        assert _get(router, "/api/items", "POST").status == 201

    def test_router_is_returned_as_is(self) -> None:
        router = _resolve(TestUnit.for_instance(ProviderRouter()))
        assert isinstance(router, EchoRouter)
        assert _get(router, "/api/health").text == "echo /api/health"

    def test_missing_method(self) -> None:
        @route_capability(provider=Providers, provider_method="absent")
        class Missing:
            pass

        with pytest.raises(ProviderLookupError, match="not found"):
            _resolve(TestUnit.for_instance(Missing()))

    def test_wrong_return_type(self) -> None:
        @route_capability(provider=Providers, provider_method="nothing")
        class ReturnsNone:
            pass

        with pytest.raises(ProviderLookupError, match="expected a Capability or a router"):
            _resolve(TestUnit.for_instance(ReturnsNone()))

    def test_raising_provider(self) -> None:
        @route_capability(provider=Providers, provider_method="broken")
        class Broken:
            pass

        with pytest.raises(ProviderInvocationError) as exc_info:
            _resolve(TestUnit.for_instance(Broken()))
        assert isinstance(exc_info.value.__cause__, KeyError)


class TestInPlaceMethod:
    def test_capability_is_used(self) -> None:
        router = _resolve(TestUnit.for_instance(InPlace(), InPlace.test_it))
        assert _get(router, "/api/items", "POST").text == "item created"

    def test_plain_method_without_instance_raises(self) -> None:
        with pytest.raises(ProviderLookupError, match="needs a test instance"):
            _resolve(TestUnit.for_class(InPlace))

    def test_static_method_without_instance(self) -> None:
        router = _resolve(TestUnit.for_class(InPlaceStatic))
        assert _get(router, "/api/users").text == "users"

    @pytest.mark.parametrize(
        ("owner", "message"),
        [
            (InPlaceNone, "expected a Capability"),
            (InPlaceWrongType, "expected a Capability"),
            (InPlaceNeedsArgs, "without arguments"),
            (InPlaceNotCallable, "not callable"),
        ],
    )
    def test_lookup_failures_raise(self, owner: type, message: str) -> None:
        with pytest.raises(ProviderLookupError, match=message):
            _resolve(TestUnit.for_instance(owner()))

    def test_raising_method(self) -> None:
        with pytest.raises(ProviderInvocationError) as exc_info:
            _resolve(TestUnit.for_instance(InPlaceRaises()))
        assert isinstance(exc_info.value.__cause__, ValueError)

    def test_custom_method_name(self) -> None:
        class Custom:
            def capability(self) -> Capability:
                return UsersApi()

        router = _resolve(TestUnit.for_instance(Custom()), capability_method="capability")
        assert _get(router, "/api/users").text == "users"


class TestDeclarations:
    def test_hello_world(self) -> None:
        unit = TestUnit.for_instance(Declared.Inner(), Declared.Inner.test_hello)
        router = _resolve(unit)
        response = _get(router, "/api/users")
        assert response.status == 200
        assert response.text == "Hello, World!"
        assert response.content_type == "text/plain"

    def test_visible_scopes(self) -> None:
        unit = TestUnit.for_instance(Declared.Inner(), Declared.Inner.test_hello)
        router = _resolve(unit)
        paths = sorted(capability.base_path for capability in router.capabilities)  # type: ignore[attr-defined]
        assert paths == ["/api/base", "/api/inner", "/api/outer", "/api/users"]

    def test_sibling_entries_are_invisible(self) -> None:
        unit = TestUnit.for_instance(Declared.Inner(), Declared.Inner.test_hello)
        router = _resolve(unit)
        assert _get(router, "/api/sibling", "POST").status == 418
        assert _get(router, "/api/other-nested").status == 418

    def test_class_level_unit_skips_function_entries(self) -> None:
        router = _resolve(TestUnit.for_class(Declared.Inner))
        assert _get(router, "/api/users").status == 418
        assert _get(router, "/api/inner").text == "inner"

    def test_unmatched_path_gets_fallback(self) -> None:
        unit = TestUnit.for_instance(Declared.Inner(), Declared.Inner.test_hello)
        assert _get(_resolve(unit), "/unknown").status == 418
        response = _get(_resolve(unit, fallback_status=NOT_FOUND), "/unknown")
        assert response.status == 404
        assert response.body_bytes == b""

    def test_unsupported_verb(self) -> None:
        unit = TestUnit.for_instance(Declared.Inner(), Declared.Inner.test_hello)
        with pytest.raises(UnsupportedVerbError):
            _get(_resolve(unit), "/api/users", "PATCH")

    def test_invalid_entry_fails_resolution(self) -> None:
        with pytest.raises(ConfigurationError, match="Only one of"):
            _resolve(TestUnit.for_instance(InvalidDeclaration()))


class TestConflicts:
    def test_duplicate_declarations(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.ERROR, logger="stubroute.resolver"):
            with pytest.raises(RouteConflictError) as exc_info:
                _resolve(TestUnit.for_instance(DuplicateDeclarations()))
        assert "GET /api/users handled by 2 capabilities" in str(exc_info.value)
        assert "DuplicateDeclarations" in caplog.text

    def test_conflict_across_sources(self) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            _resolve(TestUnit.for_instance(DirectConflictsWithDeclared()))
        (conflict,) = exc_info.value.conflicts  # type: ignore[attr-defined]
        assert {type(c) for c in conflict.claimants} == {UsersApi, DeclarativeCapability}


class TestLegacyAccessor:
    def test_used_when_nothing_else(self) -> None:
        router = _resolve(TestUnit.for_instance(Legacy()))
        assert isinstance(router, EchoRouter)

    def test_ignored_when_capabilities_exist(self) -> None:
        router = _resolve(TestUnit.for_instance(LegacyWithDeclarations()))
        assert isinstance(router, CombinedRouter)
        assert _get(router, "/api/users").text == "declared"

    def test_none_falls_through_to_default(self) -> None:
        router = _resolve(TestUnit.for_instance(LegacyReturnsNone()))
        assert isinstance(router, CombinedRouter)

    def test_non_router_is_logged_and_ignored(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.ERROR, logger="stubroute.resolver"):
            router = _resolve(TestUnit.for_instance(LegacyWrongType()))
        assert isinstance(router, CombinedRouter)
        assert "ignoring it" in caplog.text

    def test_needs_instance(self) -> None:
        assert isinstance(_resolve(TestUnit.for_class(Legacy)), CombinedRouter)

    def test_accessor_needing_arguments_raises(self) -> None:
        with pytest.raises(ProviderLookupError, match="without arguments"):
            _resolve(TestUnit.for_instance(LegacyNeedsArgs()))

    def test_raising_accessor(self) -> None:
        with pytest.raises(ProviderInvocationError) as exc_info:
            _resolve(TestUnit.for_instance(LegacyRaises()))
        assert isinstance(exc_info.value.__cause__, LookupError)


class TestResolutionProperties:
    def test_rebuilding_gives_identical_routing(self) -> None:
        unit = TestUnit.for_instance(Declared.Inner(), Declared.Inner.test_hello)
        first, second = _resolve(unit), _resolve(unit)
        assert first is not second
        for path in ("/api/users", "/api/inner", "/api/outer", "/api/base", "/unknown"):
            assert _get(first, path) == _get(second, path)

    def test_fresh_router_per_resolution(self) -> None:
        unit = TestUnit.for_instance(Bare())
        first, second = _resolve(unit), _resolve(unit)
        first.capabilities[0].get_answer.respond_forbidden()  # type: ignore[attr-defined]
        assert _get(second, "/api/x").status == 200

    def test_active_routes_are_logged_sorted(self, caplog: pytest.LogCaptureFixture) -> None:
        unit = TestUnit.for_instance(Declared.Inner(), Declared.Inner.test_hello)
        with caplog.at_level(logging.INFO, logger="stubroute.resolver"):
            _resolve(unit)
        lines = [r.getMessage() for r in caplog.records if r.name == "stubroute.resolver"]
        assert lines == [
            "Active route capabilities:",
            "- GET /api/base -> DeclarativeCapability",
            "- GET /api/inner -> DeclarativeCapability",
            "- GET /api/outer -> DeclarativeCapability",
            "- GET /api/users -> DeclarativeCapability",
        ]

    def test_active_route_listing_can_be_disabled(self, caplog: pytest.LogCaptureFixture) -> None:
        unit = TestUnit.for_instance(DirectType())
        with caplog.at_level(logging.INFO, logger="stubroute.resolver"):
            _resolve(unit, log_active_routes=False)
        assert "Active route capabilities" not in caplog.text
