"""Tests for stubroute._internal.lookup — provider lookup and invocation."""

import types

import pytest

from stubroute._internal.lookup import describe, ensure_zero_arg, instantiate, invoke, resolve_callable
from stubroute.errors import ProviderInvocationError, ProviderLookupError


class Provider:
    created = 0

    def __init__(self) -> None:
        Provider.created += 1

    @staticmethod
    def static() -> str:
        return "static"

    @classmethod
    def klass(cls) -> str:
        return "classmethod"

    def instance(self) -> str:
        return "instance"

    def needs_arg(self, value: str) -> str:
        return value

    not_callable = "value"


class NeedsArgs:
    def __init__(self, value: str) -> None:
        self.value = value

    def build(self) -> str:
        return self.value


class RaisingConstructor:
    def __init__(self) -> None:
        msg = "constructor failed"
        raise ValueError(msg)

    def build(self) -> str:
        return "never"


class TestResolveCallable:
    def test_staticmethod(self) -> None:
        assert resolve_callable(Provider, "static")() == "static"

    def test_classmethod(self) -> None:
        assert resolve_callable(Provider, "klass")() == "classmethod"

    def test_instance_method_instantiates_class(self) -> None:
        before = Provider.created
        assert resolve_callable(Provider, "instance")() == "instance"
        assert Provider.created == before + 1

    def test_static_callable_does_not_instantiate(self) -> None:
        before = Provider.created
        resolve_callable(Provider, "static")
        assert Provider.created == before

    def test_provider_object(self) -> None:
        assert resolve_callable(Provider(), "instance")() == "instance"

    def test_module_function(self) -> None:
        module = types.ModuleType("providers")
        module.build = lambda: "module"  # type: ignore[attr-defined]
        assert resolve_callable(module, "build")() == "module"

    def test_missing(self) -> None:
        with pytest.raises(ProviderLookupError, match="not found"):
            resolve_callable(Provider, "missing")

    def test_not_callable(self) -> None:
        with pytest.raises(ProviderLookupError, match="not callable"):
            resolve_callable(Provider, "not_callable")

    def test_requires_arguments(self) -> None:
        with pytest.raises(ProviderLookupError, match="without arguments"):
            resolve_callable(Provider, "needs_arg")

    def test_constructor_requires_arguments(self) -> None:
        with pytest.raises(ProviderLookupError):
            resolve_callable(NeedsArgs, "build")

    def test_constructor_raises(self) -> None:
        with pytest.raises(ProviderInvocationError) as exc_info:
            resolve_callable(RaisingConstructor, "build")
        assert isinstance(exc_info.value.__cause__, ValueError)


class TestInvoke:
    def test_returns_result(self) -> None:
        assert invoke(lambda: 42, "answer") == 42

    def test_wraps_exception(self) -> None:
        def boom() -> None:
            msg = "kaput"
            raise RuntimeError(msg)

        with pytest.raises(ProviderInvocationError, match="factory raised RuntimeError: kaput") as exc_info:
            invoke(boom, "factory")
        assert isinstance(exc_info.value.__cause__, RuntimeError)


class TestHelpers:
    def test_ensure_zero_arg_accepts_defaults(self) -> None:
        ensure_zero_arg(lambda value=1: value, "defaults")

    def test_instantiate(self) -> None:
        assert isinstance(instantiate(Provider), Provider)

    def test_describe(self) -> None:
        assert describe(Provider) == f"{__name__}.Provider"
        assert describe(types.ModuleType("providers")) == "providers"
        assert describe(Provider()) == "Provider instance"
