"""Provider lookup — find and call zero-argument factory callables.

A provider is a class, a module, or an object carrying a factory
method. Static-like callables (staticmethods, classmethods, module
functions, bound methods of a provider object) are used directly;
a plain method on a provider class requires instantiating the class
with its zero-argument constructor first.

Every failure is converted to ``ProviderLookupError`` (could not find
or call) or ``ProviderInvocationError`` (the provider itself raised).
"""

import inspect
from collections.abc import Callable
from typing import Any

from stubroute.errors import ProviderInvocationError, ProviderLookupError


def describe(obj: object) -> str:
    """Readable name for a provider in error messages."""
    if inspect.ismodule(obj):
        return obj.__name__
    if isinstance(obj, type) or inspect.isroutine(obj):
        qualname = getattr(obj, "__qualname__", repr(obj))
        module = getattr(obj, "__module__", None)
        return f"{module}.{qualname}" if module else qualname
    return f"{type(obj).__qualname__} instance"


def ensure_zero_arg(func: Callable[..., Any], label: str) -> None:
    """Raise ``ProviderLookupError`` unless *func* can be called with no arguments."""
    try:
        signature = inspect.signature(func)
    except (TypeError, ValueError):
        # Builtins without introspectable signatures: let the call decide.
        return
    try:
        signature.bind()
    except TypeError as exc:
        msg = f"{label} cannot be called without arguments: {exc}"
        raise ProviderLookupError(msg) from exc


def instantiate(cls: type, label: str | None = None) -> Any:
    """Create *cls* with its zero-argument constructor."""
    label = label or describe(cls)
    ensure_zero_arg(cls, f"Constructor of {label}")
    try:
        return cls()
    except Exception as exc:
        msg = f"Constructor of {label} raised {type(exc).__name__}: {exc}"
        raise ProviderInvocationError(msg) from exc


def resolve_callable(provider: object, name: str) -> Callable[[], Any]:
    """Return a zero-argument callable for ``provider.name``.

    Raises ``ProviderLookupError`` if the attribute is missing, is not
    callable, or needs arguments. Raises ``ProviderInvocationError`` if
    instantiating the provider class raised.
    """
    label = f"{describe(provider)}.{name}"
    try:
        raw = inspect.getattr_static(provider, name)
    except AttributeError as exc:
        msg = f"Provider method {label} not found"
        raise ProviderLookupError(msg) from exc

    if isinstance(provider, type) and inspect.isfunction(raw):
        # Plain instance method on a class: build the provider first.
        target = getattr(instantiate(provider), name)
    else:
        target = getattr(provider, name)

    if not callable(target):
        msg = f"Provider attribute {label} is not callable ({type(target).__name__})"
        raise ProviderLookupError(msg)
    ensure_zero_arg(target, f"Provider method {label}")
    return target


def invoke(func: Callable[[], Any], label: str) -> Any:
    """Call *func*, wrapping anything it raises in ``ProviderInvocationError``."""
    try:
        return func()
    except Exception as exc:
        msg = f"{label} raised {type(exc).__name__}: {exc}"
        raise ProviderInvocationError(msg) from exc
